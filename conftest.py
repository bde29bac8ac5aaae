import logging
import sys
from pathlib import Path

import pytest

# Add root to path so the top-level modules import without installation
ROOT_DIR = Path(__file__).resolve().parent
sys.path.append(str(ROOT_DIR))

from config import ENV_VARS  # noqa: E402


def mysql_table(name, comment=""):
    return {"table_name": name, "table_comment": comment}


def mysql_column(name, column_type, ordinal, comment="", max_length=None, key=""):
    return {
        "column_name": name,
        "column_type": column_type,
        "column_comment": comment,
        "ordinal_position": ordinal,
        "character_maximum_length": max_length,
        "column_key": key,
    }


def postgres_column(name, column_type, ordinal, comment=None, max_length=None, primary_key=False):
    return {
        "column_name": name,
        "column_type": column_type,
        "column_comment": comment,
        "ordinal_position": ordinal,
        "character_maximum_length": max_length,
        "is_primary_key": primary_key,
    }


class FakeConnector:
    """In-memory stand-in for DatabaseConnector; answers by bound parameters."""

    def __init__(self, tables=None, columns=None, error=None):
        self.tables = tables or []
        self.columns = columns or {}
        self.error = error
        self.queries = []
        self.entered = False
        self.closed = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def fetch_all(self, query, params=()):
        self.queries.append((query, tuple(params)))
        if self.error is not None:
            raise self.error
        if len(params) == 1:
            return list(self.tables)
        return list(self.columns.get(params[1], []))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from DBDOC_* variables and any .env in the working directory."""
    for env_name in ENV_VARS.values():
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI commands reconfigure the root logger; undo it after each test."""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def shop_connector():
    """A MySQL-family schema with two tables; catalog returns columns out of order."""
    return FakeConnector(
        tables=[
            mysql_table("orders", "表中文名称：订单表|表用途：记录用户订单"),
            mysql_table("users", "用户表"),
        ],
        columns={
            "orders": [
                mysql_column("amount", "decimal(10,2)", 3, "金额"),
                mysql_column("id", "bigint(20)", 1, "主键", key="PRI"),
                mysql_column("user_id", "bigint(20)", 2, "用户", key="MUL"),
            ],
            "users": [
                mysql_column("id", "int(11)", 1, "主键", key="PRI"),
                mysql_column("name", "varchar(64)", 2, "姓名", max_length=64),
            ],
        },
    )
