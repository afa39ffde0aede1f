# tests/test_migrations.py
"""Tests for schema migrations and table creation helpers."""

from sqlalchemy import create_engine, inspect

from huddle.core.settings import settings
from huddle.db.session import Base
from huddle.db.session import engine as app_engine
from huddle.init_db import init_db
from huddle.scripts import migrate


def test_upgrade_and_downgrade(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    monkeypatch.setattr(settings, "database_url", url)

    migrate.main(["upgrade"])
    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert set(Base.metadata.tables) <= tables

        migrate.main(["downgrade", "base"])
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()


def test_init_db_creates_tables() -> None:
    init_db()
    assert set(Base.metadata.tables) <= set(inspect(app_engine).get_table_names())
