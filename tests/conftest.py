from pathlib import Path

import pytest

from src.adapters.dev_email import DevEmailAdapter
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.app_shell.context import ServiceContext
from src.rules.loader import load_rules


@pytest.fixture
def test_data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def db_path(test_data_dir):
    """Path to a freshly migrated SQLite database."""
    path = str(Path(test_data_dir) / "newsletter.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


@pytest.fixture
def rules():
    # Load REAL rules from project root; tests run from project root.
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def dev_email():
    return DevEmailAdapter()


@pytest.fixture
def test_ctx(db_path, rules, dev_email):
    """
    Creates a full ServiceContext backed by a temporary SQLite DB and the
    dev email adapter.
    """
    return ServiceContext.create(db_path, rules, base_dir=Path.cwd(), email=dev_email)
