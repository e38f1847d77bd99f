# mypy: ignore-errors
# tests/test_session.py
"""Tests for engine option selection."""

import pytest
from sqlalchemy.pool import StaticPool

from discuss_board.db.session import _engine_options


@pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
def test_in_memory_sqlite_uses_single_connection(url) -> None:
    options = _engine_options(url)
    assert options["poolclass"] is StaticPool
    assert options["connect_args"] == {"check_same_thread": False}


def test_file_sqlite_keeps_default_pool() -> None:
    options = _engine_options("sqlite:///./board.db")
    assert "poolclass" not in options
    assert options["connect_args"] == {"check_same_thread": False}


def test_postgres_pings_connections() -> None:
    assert _engine_options("postgresql+psycopg://u:p@localhost/board") == {"pool_pre_ping": True}
