import sqlite3
from pathlib import Path

import pytest

from advisornet.adapters.sqlite.migrator import SQLiteMigrator

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "test_db.sqlite")


def _tables(db_path):
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        return {r[0] for r in rows}
    finally:
        conn.close()


def test_migrator_applies_initial(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path, str(MIGRATIONS_DIR))

    applied = migrator.run_migrations()

    assert applied == ["001_initial.sql"]
    assert {
        "_migrations",
        "users",
        "role_assignments",
        "invite_tokens",
        "profiles",
        "connections",
        "publications",
    } <= _tables(temp_db_path)


def test_migrator_is_idempotent(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path, str(MIGRATIONS_DIR))
    migrator.run_migrations()

    assert migrator.run_migrations() == []
    assert migrator.pending_migrations() == []


def test_pending_before_run(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path, str(MIGRATIONS_DIR))
    assert migrator.pending_migrations() == ["001_initial.sql"]


def test_broken_migration_raises(tmp_path, temp_db_path):
    bad_dir = tmp_path / "migrations"
    bad_dir.mkdir()
    (bad_dir / "001_bad.sql").write_text("-- Up\nCREATE TABLE oops (;\n-- Down\n")

    with pytest.raises(RuntimeError, match="001_bad.sql"):
        SQLiteMigrator(temp_db_path, str(bad_dir)).run_migrations()
