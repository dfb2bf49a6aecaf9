"""Alembic environment for ViewForge migrations.

Configured programmatically by runner.py, no static alembic.ini needed.
Online mode only: revision 0002 reads and rewrites existing view rows,
which cannot be expressed as an offline SQL script.
"""

from alembic import context
from sqlalchemy import create_engine, pool

from viewforge.persistence.config import DatabaseConfig


def _database_url() -> str:
    url = context.config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return DatabaseConfig.from_env().sqlalchemy_url


def run_migrations_online():
    """Run migrations against a live connection, one transaction per run."""
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=None,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("ViewForge migrations reconcile live data and cannot run offline")

run_migrations_online()
