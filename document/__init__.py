"""
Document module initialization.
"""
from .comments import split_table_comment
from .renderer import COLUMN_WIDTHS, DocumentRenderer, TableSection

__all__ = ["split_table_comment", "COLUMN_WIDTHS", "DocumentRenderer", "TableSection"]
