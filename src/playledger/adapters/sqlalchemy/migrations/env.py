"""Alembic environment for the play ledger schema.

``upgrade_head`` hands over an open connection through ``config.attributes``; the
command-line path falls back to the configured database URI.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from alembic import context
from sqlalchemy import create_engine, pool

from playledger.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from playledger.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config

log = logging.getLogger("alembic.env")

start_mappers()

target_metadata = mapper_registry.metadata


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _comparison_options(*, sqlite: bool) -> dict[str, Any]:
    # SQLite cannot ALTER most column definitions in place
    return {
        "target_metadata": target_metadata,
        "render_as_batch": sqlite,
        "compare_type": True,
        "compare_server_default": True,
    }


def _migrate(connection: Connection) -> None:
    context.configure(
        connection=connection,
        **_comparison_options(sqlite=connection.dialect.name == "sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Emit the migration SQL for ``_database_url()`` without connecting."""

    url = _database_url()
    context.configure(
        url=url,
        literal_binds=True,
        **_comparison_options(sqlite=url.startswith("sqlite")),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    existing_connection = config.attributes.get("connection")
    if existing_connection is not None:
        _migrate(existing_connection)
        return

    url = _database_url()
    log.info("Migrating play ledger schema at %s", url)
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _migrate(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
