from pathlib import Path

import pytest

from advisornet.adapters.sqlite.migrator import SQLiteMigrator
from advisornet.app_shell.context import ServiceContext
from advisornet.rules.loader import load_rules

ROOT = Path(__file__).resolve().parents[1]
RULES_PATH = ROOT / "rules.yaml"
MIGRATIONS_DIR = ROOT / "migrations"


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def db_path(tmp_path):
    """A temporary SQLite database with every migration applied."""
    path = str(tmp_path / "advisornet.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def test_ctx(tmp_path, db_path, rules):
    """
    A full ServiceContext backed by the migrated temp DB and a temp file store.
    """
    return ServiceContext.create(
        db_path=db_path,
        fs_path=str(tmp_path / "storage"),
        rules=rules,
        public_url="http://testserver",
    )
