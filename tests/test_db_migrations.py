"""Regression tests for the Alembic migration of the ledger snapshot table."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect


REPOSITORY_ROOT = Path(__file__).resolve().parents[1]


def _migration_build_config() -> Config:
    """Build an Alembic config that works from any working directory.

    Returns:
        Config: Alembic configuration bound to the repository scripts.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    alembic_config = Config(str(REPOSITORY_ROOT / "alembic.ini"))
    alembic_config.set_main_option("script_location", str(REPOSITORY_ROOT / "alembic"))
    return alembic_config


def test_migrations_apply_and_are_idempotent(monkeypatch, tmp_path) -> None:
    """Apply migrations on a fresh SQLite file and verify idempotent re-run.

    Returns:
        None: Assertions validate migration behavior.

    Raises:
        AssertionError: Raised when expected migration artifacts are missing.
    """

    database_url = f"sqlite+pysqlite:///{tmp_path / 'journal.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)

    alembic_config = _migration_build_config()
    command.upgrade(alembic_config, "head")
    command.upgrade(alembic_config, "head")

    verification_engine = create_engine(database_url)
    try:
        inspector = inspect(verification_engine)
        assert {"ledger_state", "alembic_version"}.issubset(set(inspector.get_table_names()))
        column_names = {column["name"] for column in inspector.get_columns("ledger_state")}
        assert column_names == {"ledger_state_id", "payload", "updated_at_utc"}
        assert inspector.get_pk_constraint("ledger_state")["constrained_columns"] == ["ledger_state_id"]
    finally:
        verification_engine.dispose()


def test_migrations_downgrade_drops_ledger_table(monkeypatch, tmp_path) -> None:
    """Drop the ledger table when downgrading to base.

    Returns:
        None: Assertions validate downgrade behavior.

    Raises:
        AssertionError: Raised when the table survives downgrade.
    """

    database_url = f"sqlite+pysqlite:///{tmp_path / 'journal.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)

    alembic_config = _migration_build_config()
    command.upgrade(alembic_config, "head")
    command.downgrade(alembic_config, "base")

    verification_engine = create_engine(database_url)
    try:
        assert "ledger_state" not in set(inspect(verification_engine).get_table_names())
    finally:
        verification_engine.dispose()
