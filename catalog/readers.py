"""
Catalog readers: one per SQL dialect.

Both readers expose ``list_tables(schema)`` and ``list_columns(schema, table)``
and only ever bind the schema and table names as query parameters.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from errors import ConfigError

from .models import ColumnMeta, TableMeta

logger = logging.getLogger(__name__)

# Control characters that cannot appear in an OOXML document
XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def _text(value: Any) -> str:
    """Catalog value as document-safe text; NULL becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    return XML_ILLEGAL_CHARS.sub("", str(value))


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _column_from_row(row: Dict[str, Any], is_primary_key: bool) -> ColumnMeta:
    return ColumnMeta(
        name=_text(row["column_name"]),
        type_decl=_text(row["column_type"]),
        comment=_text(row["column_comment"]),
        ordinal_position=int(row["ordinal_position"]),
        max_length=_int_or_none(row["character_maximum_length"]),
        is_primary_key=is_primary_key,
    )


class MySQLCatalogReader:
    """Reads table and column metadata from ``information_schema`` (MySQL, MariaDB, Doris)."""

    TABLE_QUERY = (
        "SELECT TABLE_NAME, TABLE_COMMENT "
        "FROM information_schema.tables "
        "WHERE TABLE_SCHEMA = %s "
        "ORDER BY TABLE_NAME"
    )

    COLUMN_QUERY = (
        "SELECT COLUMN_NAME, COLUMN_TYPE, COLUMN_COMMENT, "
        "ORDINAL_POSITION, CHARACTER_MAXIMUM_LENGTH, COLUMN_KEY "
        "FROM information_schema.columns "
        "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
        "ORDER BY ORDINAL_POSITION"
    )

    def __init__(self, connector):
        self.connector = connector

    def list_tables(self, schema: str) -> List[TableMeta]:
        rows = self.connector.fetch_all(self.TABLE_QUERY, (schema,))
        tables = [TableMeta(name=_text(row["table_name"]), comment=_text(row["table_comment"])) for row in rows]
        logger.info(f"Found {len(tables)} tables in schema '{schema}'")
        return tables

    def list_columns(self, schema: str, table_name: str) -> List[ColumnMeta]:
        rows = self.connector.fetch_all(self.COLUMN_QUERY, (schema, table_name))
        columns = [_column_from_row(row, _text(row["column_key"]) == "PRI") for row in rows]
        return sorted(columns, key=lambda column: column.ordinal_position)


class PostgresCatalogReader:
    """
    Reads table and column metadata from ``pg_catalog`` (PostgreSQL, Kingbase).

    Primary-key membership comes from the table's primary index; the maximum
    length is only reported for character types.
    """

    TABLE_QUERY = (
        "SELECT c.relname AS table_name, "
        "pg_catalog.obj_description(c.oid, 'pg_class') AS table_comment "
        "FROM pg_catalog.pg_class c "
        "JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
        "WHERE n.nspname = %s AND c.relkind IN ('r', 'p') "
        "ORDER BY c.relname"
    )

    COLUMN_QUERY = (
        "SELECT a.attname AS column_name, "
        "pg_catalog.format_type(a.atttypid, a.atttypmod) AS column_type, "
        "pg_catalog.col_description(a.attrelid, a.attnum) AS column_comment, "
        "a.attnum AS ordinal_position, "
        "CASE WHEN a.atttypid IN ('pg_catalog.varchar'::regtype, 'pg_catalog.bpchar'::regtype) "
        "AND a.atttypmod > 0 THEN a.atttypmod - 4 END AS character_maximum_length, "
        "EXISTS (SELECT 1 FROM pg_catalog.pg_index i "
        "WHERE i.indrelid = a.attrelid AND i.indisprimary "
        "AND a.attnum = ANY (i.indkey)) AS is_primary_key "
        "FROM pg_catalog.pg_attribute a "
        "JOIN pg_catalog.pg_class c ON c.oid = a.attrelid "
        "JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
        "WHERE n.nspname = %s AND c.relname = %s "
        "AND a.attnum > 0 AND NOT a.attisdropped "
        "ORDER BY a.attnum"
    )

    def __init__(self, connector):
        self.connector = connector

    def list_tables(self, schema: str) -> List[TableMeta]:
        rows = self.connector.fetch_all(self.TABLE_QUERY, (schema,))
        tables = [TableMeta(name=_text(row["table_name"]), comment=_text(row["table_comment"])) for row in rows]
        logger.info(f"Found {len(tables)} tables in schema '{schema}'")
        return tables

    def list_columns(self, schema: str, table_name: str) -> List[ColumnMeta]:
        rows = self.connector.fetch_all(self.COLUMN_QUERY, (schema, table_name))
        columns = [_column_from_row(row, bool(row["is_primary_key"])) for row in rows]
        return sorted(columns, key=lambda column: column.ordinal_position)


READERS = {
    "mysql": MySQLCatalogReader,
    "postgres": PostgresCatalogReader,
}


def get_reader(dialect: str, connector):
    """
    Select the catalog reader for a dialect.

    Args:
        dialect: ``mysql`` or ``postgres``
        connector: Object exposing ``fetch_all(query, params)``

    Raises:
        ConfigError: If no reader exists for the dialect
    """
    try:
        reader_class = READERS[dialect]
    except KeyError:
        raise ConfigError(f"No catalog reader for dialect '{dialect}'") from None
    return reader_class(connector)
