"""
Word document rendering.
"""
import io
import os
import stat

import pytest
from docx import Document
from docx.shared import Twips

from catalog.models import ColumnMeta, TableMeta
from document.renderer import COLUMN_WIDTHS, DocumentRenderer
from errors import WriteError

HEADER = ["表英文名", "字段英文名", "字段中文解释", "字段数据类型", "字段序号", "字段长度", "约束条件主键", "是否代码", "备注"]


def render_orders(renderer):
    section = renderer.add_table_section(TableMeta("orders", "表中文名称：订单表|表用途：记录用户订单"))
    renderer.add_column_row(section, ColumnMeta("id", "bigint(20)", "主键", 1, None, True))
    renderer.add_column_row(section, ColumnMeta("code", "varchar(32)", "编码", 2, 32, False))
    return section


def reload(renderer):
    return Document(io.BytesIO(renderer.to_bytes()))


class TestDocumentRenderer:
    """Section layout and cell values"""

    def test_description_paragraphs(self):
        renderer = DocumentRenderer()
        render_orders(renderer)
        texts = [p.text for p in reload(renderer).paragraphs if p.text]
        assert texts == ["表中文名称：订单表", "表英文名称：orders", "表用途：记录用户订单"]

    def test_plain_comment_used_for_both_lines(self):
        renderer = DocumentRenderer()
        renderer.add_table_section(TableMeta("users", "用户表"))
        texts = [p.text for p in reload(renderer).paragraphs if p.text]
        assert texts == ["表中文名称：用户表", "表英文名称：users", "表用途：用户表"]

    def test_bold_header_row(self):
        renderer = DocumentRenderer()
        render_orders(renderer)
        header = reload(renderer).tables[0].rows[0]
        assert [cell.text for cell in header.cells] == HEADER
        assert all(run.bold for cell in header.cells for run in cell.paragraphs[0].runs)

    def test_data_rows(self):
        renderer = DocumentRenderer()
        render_orders(renderer)
        rows = reload(renderer).tables[0].rows
        assert [cell.text for cell in rows[1].cells] == ["orders", "id", "主键", "bigint(20)", "1", "", "PK", "", ""]
        assert [cell.text for cell in rows[2].cells] == ["orders", "code", "编码", "varchar(32)", "2", "32", "", "", ""]

    def test_every_row_has_nine_cells_with_fixed_widths(self):
        renderer = DocumentRenderer()
        render_orders(renderer)
        for row in reload(renderer).tables[0].rows:
            assert len(row.cells) == 9
            assert [cell.width for cell in row.cells] == [Twips(width) for width in COLUMN_WIDTHS]

    def test_rows_go_to_the_given_section(self):
        """Rows follow the handle, not the most recently created table"""
        renderer = DocumentRenderer()
        first = renderer.add_table_section(TableMeta("a"))
        second = renderer.add_table_section(TableMeta("b"))
        renderer.add_column_row(first, ColumnMeta("x", "int", "", 1))

        tables = reload(renderer).tables
        assert len(tables[0].rows) == 2
        assert len(tables[1].rows) == 1
        assert renderer.table_count == 2
        assert second.table_name == "b"

    def test_custom_delimiter(self):
        renderer = DocumentRenderer(comment_delimiter="#")
        renderer.add_table_section(TableMeta("t", "名称#用途"))
        texts = [p.text for p in reload(renderer).paragraphs if p.text]
        assert texts[0] == "表中文名称：名称"
        assert texts[2] == "表用途：用途"

    def test_short_row_is_padded_to_nine_cells(self):
        """A row missing cells gets them back with the fixed widths"""
        renderer = DocumentRenderer()
        section = render_orders(renderer)
        row = section.table.rows[1]
        row._tr.remove(row._tr.tc_lst[-1])
        assert len(row.cells) == 8

        DocumentRenderer._shape_row(row)
        assert len(row.cells) == 9
        assert [cell.width for cell in row.cells] == [Twips(width) for width in COLUMN_WIDTHS]
        reloaded = reload(renderer).tables[0].rows[1]
        assert len(reloaded.cells) == 9
        assert [cell.width for cell in reloaded.cells] == [Twips(width) for width in COLUMN_WIDTHS]

    def test_control_characters_are_dropped(self):
        """Characters XML cannot carry never reach the document"""
        renderer = DocumentRenderer()
        section = renderer.add_table_section(TableMeta("t\x01", "a\x0bb"))
        renderer.add_column_row(section, ColumnMeta("id", "int", "x\x00y\x1f", 1))

        document = reload(renderer)
        texts = [p.text for p in document.paragraphs if p.text]
        assert texts == ["表中文名称：ab", "表英文名称：t", "表用途：ab"]
        assert [cell.text for cell in document.tables[0].rows[1].cells][:3] == ["t", "id", "xy"]


class TestSave:
    """Writing the document to disk"""

    def test_save(self, tmp_path):
        renderer = DocumentRenderer()
        render_orders(renderer)
        path = renderer.save(tmp_path / "schema.docx")

        assert path == tmp_path / "schema.docx"
        assert len(Document(str(path)).tables) == 1
        assert [p.name for p in tmp_path.iterdir()] == ["schema.docx"]

    def test_save_replaces_existing_file(self, tmp_path):
        target = tmp_path / "schema.docx"
        target.write_bytes(b"old")
        renderer = DocumentRenderer()
        render_orders(renderer)
        renderer.save(target)
        assert len(Document(str(target)).tables) == 1

    def test_unwritable_directory(self, tmp_path):
        target = tmp_path / "missing" / "schema.docx"
        with pytest.raises(WriteError):
            DocumentRenderer().save(target)
        assert not target.exists()

    def test_target_is_a_directory_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "schema.docx"
        target.mkdir()
        with pytest.raises(WriteError):
            DocumentRenderer().save(target)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["schema.docx"]

    def test_existing_file_keeps_its_permissions(self, tmp_path):
        target = tmp_path / "schema.docx"
        target.write_bytes(b"old")
        target.chmod(0o600)
        DocumentRenderer().save(target)
        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_new_file_follows_umask(self, tmp_path):
        old_umask = os.umask(0o027)
        try:
            path = DocumentRenderer().save(tmp_path / "schema.docx")
        finally:
            os.umask(old_umask)
        assert stat.S_IMODE(path.stat().st_mode) == 0o640
