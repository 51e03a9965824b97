from logging.config import fileConfig
import os

from dotenv import load_dotenv
from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from bible_reader.database import Base
from bible_reader import models  # noqa: F401  registers the tables with Base

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url():
    load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))
    db_url = os.getenv('SUPABASE_POSTGRES_CONNECTION')
    if not db_url:
        raise ValueError("SUPABASE_POSTGRES_CONNECTION environment variable not set or loaded")
    return db_url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against the Supabase Postgres database."""
    ini_config = config.get_section(config.config_ini_section, {})
    ini_config['sqlalchemy.url'] = _database_url()

    connectable = engine_from_config(
        ini_config,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
