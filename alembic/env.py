"""
Alembic environment - Studio Manager

This file configures Alembic to:
1. Load the database URL from app/core/config.py (which reads .env)
2. Import every SQLAlchemy model so autogenerate sees all the tables
3. Support online (connected) and offline (SQL generation) migrations
"""

from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy import create_engine

from alembic import context

from app.core.config import settings

# Importing Base from app.database.base loads every model on the metadata
from app.database.base import Base

# Alembic configuration from alembic.ini
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


# === Helpers ===

def get_url() -> str:
    """Database URL from the settings (.env through pydantic-settings)."""
    return settings.DATABASE_URL


def is_sqlite(url: str) -> bool:
    # SQLite cannot ALTER most constraints in place
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    """
    Run the migrations in 'offline' mode.

    Alembic writes the SQL without connecting to the database.

    Usage:
        alembic upgrade head --sql > migration.sql
    """
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
        render_as_batch=is_sqlite(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run the migrations in 'online' mode.

    Usage:
        alembic upgrade head
    """
    url = get_url()
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=is_sqlite(url),
        )

        with context.begin_transaction():
            context.run_migrations()


# === Entry point ===

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
