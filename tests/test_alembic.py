"""Tests for Alembic migration infrastructure."""

from __future__ import annotations

from typing import TYPE_CHECKING

from alembic.config import Config
from sqlalchemy import create_engine, inspect

from alembic import command
from brandlens.db.orm import Base

if TYPE_CHECKING:
    from pathlib import Path

BRANDLENS_TABLES = {
    "users",
    "accounts",
    "sessions",
    "projects",
    "projects_users",
    "topics",
    "queries",
    "models",
    "project_models",
    "executions",
    "query_executions",
    "domains",
    "sources",
    "competitors",
    "mentions",
}


def _config(db_path: Path) -> Config:
    cfg = Config("alembic.ini")
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return cfg


def _inspect(db_path: Path):
    engine = create_engine(f"sqlite:///{db_path}")
    inspector = inspect(engine)
    return engine, inspector


class TestAlembicMigrations:
    def test_upgrade_to_head_creates_all_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        command.upgrade(_config(db_path), "head")

        engine, inspector = _inspect(db_path)
        tables = set(inspector.get_table_names())
        engine.dispose()

        assert BRANDLENS_TABLES <= tables
        assert "alembic_version" in tables

    def test_migration_columns_match_orm(self, tmp_path: Path) -> None:
        """Every table created by the migration has the ORM's columns."""
        db_path = tmp_path / "test_alembic.db"
        command.upgrade(_config(db_path), "head")

        engine, inspector = _inspect(db_path)
        migrated = {t: {c["name"] for c in inspector.get_columns(t)} for t in BRANDLENS_TABLES}
        engine.dispose()

        for name in BRANDLENS_TABLES:
            orm_columns = {c.name for c in Base.metadata.tables[name].columns}
            assert migrated[name] == orm_columns, name

    def test_sources_unique_per_execution_and_url(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        command.upgrade(_config(db_path), "head")

        engine, inspector = _inspect(db_path)
        constraints = inspector.get_unique_constraints("sources")
        engine.dispose()

        assert any(
            c["column_names"] == ["query_execution_id", "url"] for c in constraints
        )

    def test_downgrade_drops_all_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        cfg = _config(db_path)

        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine, inspector = _inspect(db_path)
        tables = set(inspector.get_table_names())
        engine.dispose()

        # Only alembic_version should remain
        assert tables & BRANDLENS_TABLES == set()
