"""Migration runner for the FocusMate schema.

FocusMate talks to SQLite through aiosqlite at runtime. Alembic drives the
same file through the plain sqlite driver, so the configured URL is rewritten
before an engine is built.
"""
from logging.config import fileConfig
import os

from alembic import context
from sqlalchemy import create_engine, pool

from focusmate.core.config import get_settings
from focusmate.db.base import Base

ASYNC_SQLITE_PREFIX = "sqlite+aiosqlite://"

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def migration_url() -> str:
    """ALEMBIC_DATABASE_URL overrides the app's DATABASE_URL, alembic.ini is the last resort."""
    explicit = os.getenv("ALEMBIC_DATABASE_URL")
    if explicit:
        return explicit
    url = get_settings().database_url or context.config.get_main_option("sqlalchemy.url")
    if url.startswith(ASYNC_SQLITE_PREFIX):
        url = "sqlite://" + url[len(ASYNC_SQLITE_PREFIX):]
    return url


def configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def main() -> None:
    if context.is_offline_mode():
        # emit SQL to stdout instead of touching the database
        configure(url=migration_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
        return
    engine = create_engine(migration_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            configure(connection=connection)
    finally:
        engine.dispose()


main()
