"""Alembic revisions build the same schema the app creates at startup."""
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from focusmate.core.config import BASE_DIR


def _alembic_config() -> Config:
    # no ini file: keeps alembic from reconfiguring logging for the test run
    cfg = Config()
    cfg.set_main_option("script_location", str(BASE_DIR / "alembic"))
    return cfg


def test_upgrade_and_downgrade(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_DATABASE_URL", url)
    cfg = _alembic_config()

    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert {"users", "entries", "revoked_sessions"} <= tables

        command.downgrade(cfg, "001")
        assert "revoked_sessions" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()


def test_async_url_is_rewritten_for_migrations(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("ALEMBIC_DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")

    command.upgrade(_alembic_config(), "head")

    engine = create_engine(f"sqlite:///{tmp_path / 'app.db'}")
    try:
        assert "entries" in inspect(engine).get_table_names()
    finally:
        engine.dispose()
