"""Tests for the Alembic migrations applied at startup."""

from alembic.config import Config as AlembicConfig
from sqlalchemy import create_engine, inspect

from app.core.config import settings
from app.models.database import UserConnection
from main import BASE_DIR, run_migrations


def test_run_migrations_creates_schema(monkeypatch, tmp_path):
    """Upgrading to head creates user_connections with both lookup indexes."""
    db_file = tmp_path / "migrated.db"
    monkeypatch.setattr(settings, "DB_CONNECTION", f"sqlite+aiosqlite:///{db_file.as_posix()}")

    run_migrations()

    engine = create_engine(f"sqlite:///{db_file.as_posix()}")
    try:
        inspector = inspect(engine)
        assert "user_connections" in inspector.get_table_names()

        columns = {c["name"] for c in inspector.get_columns("user_connections")}
        assert columns == set(UserConnection.__table__.columns.keys())

        indexes = {ix["name"]: ix["column_names"] for ix in inspector.get_indexes("user_connections")}
        assert indexes["ix_user_connections_ip_address"] == ["ip_address"]
        assert indexes["ix_user_connections_user_id_timestamp"] == ["user_id", "timestamp"]
    finally:
        engine.dispose()


def test_run_migrations_is_idempotent(monkeypatch, tmp_path):
    """A second startup against a migrated database is a no-op."""
    db_file = tmp_path / "twice.db"
    monkeypatch.setattr(settings, "DB_CONNECTION", f"sqlite+aiosqlite:///{db_file.as_posix()}")

    run_migrations()
    run_migrations()

    engine = create_engine(f"sqlite:///{db_file.as_posix()}")
    try:
        with engine.connect() as conn:
            version = conn.exec_driver_sql("SELECT version_num FROM alembic_version").scalar_one()
        assert version == "0001_user_connections"
    finally:
        engine.dispose()


def test_alembic_ini_declares_path_separator():
    """prepend_sys_path needs an explicit separator on current Alembic."""
    cfg = AlembicConfig(str(BASE_DIR / "alembic.ini"))
    assert cfg.get_main_option("prepend_sys_path") == "."
    assert cfg.get_main_option("path_separator") == "os"
