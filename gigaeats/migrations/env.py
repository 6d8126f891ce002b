import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection

from alembic import context

# Project root on sys.path so `gigaeats` imports when alembic runs from gigaeats/
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from gigaeats.app.core.base import Base
from gigaeats.app.core.settings import Settings
from gigaeats.app.models import order  # noqa: F401 - registers Order with Base.metadata


def _get_sync_db_url() -> str:
    """Same database as the app, through a sync driver (psycopg2 / sqlite)."""
    url = Settings().db_url
    return url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


SYNC_DB_URL = _get_sync_db_url()

config = context.config

# ConfigParser treats % as interpolation
config.set_main_option("sqlalchemy.url", SYNC_DB_URL.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL without a DBAPI."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode using a sync engine."""
    connectable = create_engine(SYNC_DB_URL, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        do_run_migrations(connection)
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
