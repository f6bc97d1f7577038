"""Tests for database schema and seeded configuration."""

import tempfile
from pathlib import Path

import pytest

from texia.data.db import DEFAULT_CONFIG, Db


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    tmpdir = tempfile.mkdtemp()
    db_path = Path(tmpdir) / "test.db"
    db = Db(db_path)
    yield db, db_path

    # Cleanup: remove database files (WAL leaves -wal/-shm siblings)
    try:
        for f in Path(tmpdir).glob("test.db*"):
            f.unlink(missing_ok=True)
        Path(tmpdir).rmdir()
    except Exception:
        pass


def test_ensure_schema_creates_all_tables(temp_db):
    db, _ = temp_db
    db.ensure_schema()

    with db.connect() as con:
        tables = {r[0] for r in con.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()}

    assert "app_config" in tables
    assert "documents" in tables
    assert "accounts" in tables


def test_ensure_schema_seeds_default_config(temp_db):
    db, _ = temp_db
    db.ensure_schema()

    with db.connect() as con:
        rows = dict(con.execute("SELECT config_key, config_value FROM app_config").fetchall())

    for key, value in DEFAULT_CONFIG.items():
        assert rows[key] == value


def test_ensure_schema_is_idempotent_and_keeps_user_config(temp_db):
    db, _ = temp_db
    db.ensure_schema()
    with db.connect() as con:
        con.execute("UPDATE app_config SET config_value = '3' WHERE config_key = 'dashboard_task_limit'")

    db.ensure_schema()

    with db.connect() as con:
        value = con.execute(
            "SELECT config_value FROM app_config WHERE config_key = 'dashboard_task_limit'"
        ).fetchone()[0]
    assert value == "3"


def test_connect_rolls_back_on_error(temp_db):
    db, _ = temp_db
    db.ensure_schema()

    with pytest.raises(RuntimeError):
        with db.connect() as con:
            con.execute("INSERT INTO app_config(config_key, config_value) VALUES('tmp', 'x')")
            raise RuntimeError("boom")

    with db.connect() as con:
        row = con.execute("SELECT 1 FROM app_config WHERE config_key = 'tmp'").fetchone()
    assert row is None
