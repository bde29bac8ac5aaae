"""
Catalog metadata records.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TableMeta:
    """A table of the exported schema and its catalog comment."""

    name: str
    comment: str = ""


@dataclass(frozen=True)
class ColumnMeta:
    """One column of a table, as reported by the catalog."""

    name: str
    type_decl: str
    comment: str
    ordinal_position: int
    max_length: Optional[int] = None
    is_primary_key: bool = False
