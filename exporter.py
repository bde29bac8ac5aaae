"""
Export pipeline: catalog -> Word document (and optional data dictionary CSV).
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pandas as pd

from catalog import ColumnMeta, DatabaseConnector, SchemaExtractor, TableMeta, get_reader
from catalog.schema import to_frame
from config import ExportConfig
from document import DocumentRenderer
from errors import WriteError

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of one export run."""

    renderer: DocumentRenderer
    dictionary: pd.DataFrame
    pairs: List[Tuple[TableMeta, List[ColumnMeta]]]
    table_count: int
    column_count: int
    output: Optional[Path] = None
    csv_output: Optional[Path] = None


def build_document(
    config: ExportConfig,
    connector_factory: Optional[Callable[[ExportConfig], DatabaseConnector]] = None,
) -> ExportResult:
    """
    Read the schema from the catalog and render it in memory.

    Connects once, reads every table and its columns, renders them and
    disconnects. Nothing is written to disk.

    Args:
        config: Validated export configuration
        connector_factory: Builds the connector; defaults to DatabaseConnector.from_config

    Returns:
        ExportResult with the rendered document and the flattened dictionary
    """
    connector_factory = connector_factory or DatabaseConnector.from_config
    renderer = DocumentRenderer(config.comment_delimiter)
    pairs = []

    with connector_factory(config) as connector:
        extractor = SchemaExtractor(get_reader(config.dialect, connector))
        for table, columns in extractor.iter_schema(config.schema):
            section = renderer.add_table_section(table)
            for column in columns:
                renderer.add_column_row(section, column)
            pairs.append((table, columns))
            logger.debug(f"Rendered table {table.name} with {len(columns)} columns")

    column_count = sum(len(columns) for _, columns in pairs)
    logger.info(f"Rendered {len(pairs)} tables, {column_count} columns from schema '{config.schema}'")
    return ExportResult(
        renderer=renderer,
        dictionary=to_frame(pairs),
        pairs=pairs,
        table_count=len(pairs),
        column_count=column_count,
    )


def write_dictionary_csv(frame: pd.DataFrame, path: Path) -> Path:
    """Write the flattened data dictionary; Excel-friendly UTF-8 with BOM."""
    try:
        frame.to_csv(path, index=False, encoding="utf-8-sig")
    except OSError as e:
        raise WriteError(f"Cannot write {path}: {e}") from e
    logger.info(f"Wrote data dictionary ({len(frame)} rows) to {path}")
    return path


def export_schema(
    config: ExportConfig,
    connector_factory: Optional[Callable[[ExportConfig], DatabaseConnector]] = None,
) -> ExportResult:
    """
    Run a full export and write the document to ``config.output``.

    Args:
        config: Export configuration, validated here
        connector_factory: Builds the connector; defaults to DatabaseConnector.from_config

    Returns:
        ExportResult with the written paths filled in
    """
    config = config.validate()
    result = build_document(config, connector_factory)
    result.output = result.renderer.save(config.output)
    if config.csv_output:
        result.csv_output = write_dictionary_csv(result.dictionary, Path(config.csv_output))
    return result
