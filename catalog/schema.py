"""
Schema extraction utilities built on the catalog readers.
"""
from typing import Iterable, Iterator, List, Tuple

import pandas as pd

from .models import ColumnMeta, TableMeta

# Column labels of the attribute grid and of the flattened data dictionary
DICTIONARY_COLUMNS = [
    "表英文名", "字段英文名", "字段中文解释",
    "字段数据类型", "字段序号", "字段长度",
    "约束条件主键", "是否代码", "备注",
]

SchemaPairs = Iterable[Tuple[TableMeta, List[ColumnMeta]]]


def column_cells(table_name: str, column: ColumnMeta) -> List[str]:
    """
    Cell values of one column row, in grid order.

    The "is code" and remarks cells are always blank.
    """
    return [
        table_name,
        column.name,
        column.comment,
        column.type_decl,
        str(column.ordinal_position),
        "" if column.max_length is None else str(column.max_length),
        "PK" if column.is_primary_key else "",
        "",
        "",
    ]


class SchemaExtractor:
    """Walks the tables of a schema and their columns."""

    def __init__(self, reader):
        """
        Initialize the schema extractor.

        Args:
            reader: Catalog reader for the connection's dialect
        """
        self.reader = reader

    def iter_schema(self, schema: str) -> Iterator[Tuple[TableMeta, List[ColumnMeta]]]:
        """
        Yield every table of the schema with its columns in ordinal order.

        Columns are fetched lazily, one catalog query per table.
        """
        for table in self.reader.list_tables(schema):
            yield table, self.reader.list_columns(schema, table.name)


def to_frame(pairs: SchemaPairs) -> pd.DataFrame:
    """
    Flatten tables and columns into a data dictionary, one row per column.

    Returns:
        DataFrame with DICTIONARY_COLUMNS as columns
    """
    records = [column_cells(table.name, column) for table, columns in pairs for column in columns]
    return pd.DataFrame(records, columns=DICTIONARY_COLUMNS)


def get_schema_summary(pairs: SchemaPairs) -> str:
    """
    Generate a human-readable summary of the schema.

    Returns:
        String listing every table, its comment and its columns
    """
    summary = ""
    for table, columns in pairs:
        summary += f"Table: {table.name}"
        if table.comment:
            summary += f" ({table.comment})"
        summary += "\n"

        for column in columns:
            pk_marker = " PRIMARY KEY" if column.is_primary_key else ""
            summary += f"  {column.ordinal_position}. {column.name} {column.type_decl}{pk_marker}"
            if column.comment:
                summary += f" -- {column.comment}"
            summary += "\n"

        summary += "\n"
    return summary
