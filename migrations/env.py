"""
Alembic environment configuration.

This script runs whenever Alembic performs a migration.
It connects using the application's DATABASE_URL and knows
about our models through Base.metadata.
"""

from logging.config import fileConfig

from alembic import context

from ledger_engine.config import get_settings
from ledger_engine.models import Base
from ledger_engine.models.base import build_engine

# Alembic Config object, provides access to alembic.ini values
config = context.config

# Set up logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Base.metadata holds every table; autogenerate diffs it against
# the live database.
target_metadata = Base.metadata

# The application's settings decide which database is migrated,
# not alembic.ini.
settings = get_settings()
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Generates SQL script without connecting to the database.
    Useful for reviewing changes before applying them.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode.

    Uses the same engine factory as the application, so SQLite
    gets the same connection hooks.
    """
    connectable = build_engine(
        settings.DATABASE_URL,
        lock_timeout=settings.LOCK_TIMEOUT_SECONDS,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
