"""
Catalog module initialization.
"""
from .connector import DatabaseConnector, parse_url
from .models import ColumnMeta, TableMeta
from .readers import MySQLCatalogReader, PostgresCatalogReader, get_reader
from .schema import SchemaExtractor

__all__ = [
    "DatabaseConnector",
    "parse_url",
    "ColumnMeta",
    "TableMeta",
    "MySQLCatalogReader",
    "PostgresCatalogReader",
    "get_reader",
    "SchemaExtractor",
]
