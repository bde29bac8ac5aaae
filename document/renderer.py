"""
Word document rendering for schema documentation.
"""
import io
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from docx import Document
from docx.shared import Twips
from docx.table import Table, _Row

from catalog.models import ColumnMeta, TableMeta
from catalog.readers import XML_ILLEGAL_CHARS
from catalog.schema import DICTIONARY_COLUMNS, column_cells
from config import DEFAULT_COMMENT_DELIMITER
from errors import WriteError

from .comments import split_table_comment

logger = logging.getLogger(__name__)

# Column widths in twips (twentieths of a point), same for every table
COLUMN_WIDTHS = [1000, 2500, 3500, 1500, 1000, 1500, 1500, 1500, 2500]

TABLE_STYLE = "Table Grid"


def _xml_safe(text: str) -> str:
    return XML_ILLEGAL_CHARS.sub("", text)


def _file_mode(path: Path) -> int:
    """Permission bits for the written file: the existing target's, else the umask default."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@dataclass
class TableSection:
    """Handle to the attribute grid of one rendered table."""

    table_name: str
    table: Table


class DocumentRenderer:
    """Builds the schema document: three description lines and a grid per table."""

    def __init__(self, comment_delimiter: str = DEFAULT_COMMENT_DELIMITER):
        self.document = Document()
        self.comment_delimiter = comment_delimiter
        self.sections: List[TableSection] = []

    @property
    def table_count(self) -> int:
        return len(self.sections)

    def add_table_section(self, table: TableMeta) -> TableSection:
        """
        Append the description lines and an empty attribute grid for a table.

        Args:
            table: Table to describe

        Returns:
            Handle to pass to add_column_row
        """
        display_name, purpose = split_table_comment(_xml_safe(table.comment), self.comment_delimiter)
        self.document.add_paragraph(f"表中文名称：{display_name}")
        self.document.add_paragraph(f"表英文名称：{_xml_safe(table.name)}")
        self.document.add_paragraph(f"表用途：{purpose}")

        grid = self.document.add_table(rows=1, cols=len(COLUMN_WIDTHS))
        grid.style = TABLE_STYLE
        grid.autofit = False
        for column, width in zip(grid.columns, COLUMN_WIDTHS):
            column.width = Twips(width)

        header = grid.rows[0]
        self._shape_row(header)
        for cell, label in zip(header.cells, DICTIONARY_COLUMNS):
            run = cell.paragraphs[0].add_run(label)
            run.bold = True

        section = TableSection(table_name=table.name, table=grid)
        self.sections.append(section)
        return section

    def add_column_row(self, section: TableSection, column: ColumnMeta) -> _Row:
        """
        Append one column's row to a table's grid.

        Args:
            section: Handle returned by add_table_section
            column: Column to render

        Returns:
            The appended row
        """
        row = section.table.add_row()
        self._shape_row(row)
        for cell, value in zip(row.cells, column_cells(section.table_name, column)):
            cell.text = _xml_safe(value)
        return row

    @staticmethod
    def _shape_row(row: _Row) -> None:
        # Rows are always rectangular: create missing cells, then fix widths
        while len(row.cells) < len(COLUMN_WIDTHS):
            row._tr.add_tc()
        for cell, width in zip(row.cells, COLUMN_WIDTHS):
            cell.width = Twips(width)

    def to_bytes(self) -> bytes:
        """Serialize the document in memory."""
        buffer = io.BytesIO()
        self.document.save(buffer)
        return buffer.getvalue()

    def save(self, path: Union[str, Path]) -> Path:
        """
        Write the document to disk.

        The document is written to a temporary file next to the target and
        renamed into place, so a failed write never leaves a partial file.

        Args:
            path: Output .docx path

        Returns:
            The written path

        Raises:
            WriteError: If the path is not writable
        """
        path = Path(path)
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        except OSError as e:
            raise WriteError(f"Cannot write {path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as out:
                self.document.save(out)
            os.chmod(tmp_name, _file_mode(path))
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise WriteError(f"Cannot write {path}: {e}") from e

        logger.info(f"Wrote {self.table_count} table sections to {path}")
        return path
