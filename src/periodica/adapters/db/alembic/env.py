"""Alembic environment for the PERIODICA blob store schema.

The database URL is taken from, in order: ``alembic -x url=...``, the
``sqlalchemy.url`` main option (what `periodica.config.build_alembic_config`
sets), then ``PERIODICA_DB_URL``.

Both modes compare column types and server defaults; online SQLite runs use
batch mode because SQLite cannot ALTER most constraints in place.
"""

import os
from typing import Any

from alembic import context
from sqlalchemy import create_engine, pool

import periodica.adapters.blobstore.schema  # noqa: F401 # pylint: disable=unused-import
from periodica.adapters.db.metadata import metadata
from periodica.config import ALEMBIC_URL_KEY, DB_URL_ENV

# pylint: disable=no-member

COMPARE_OPTIONS: dict[str, Any] = {
    "target_metadata": metadata,
    "compare_type": True,
    "compare_server_default": True,
}


def resolve_url() -> str:
    """The URL to migrate, from -x, the Alembic config or the environment."""
    candidates = (
        context.get_x_argument(as_dictionary=True).get("url"),
        context.config.get_main_option(ALEMBIC_URL_KEY),
        os.environ.get(DB_URL_ENV),
    )
    for url in candidates:
        # an unrendered "%(...)s" placeholder counts as unset
        if url and "%(" not in url:
            return url
    raise RuntimeError(f"No database URL: pass -x url=... or set {DB_URL_ENV}.")


def migrate_offline() -> None:
    """Write the migration SQL to the output buffer instead of executing it."""
    context.configure(
        url=resolve_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_online() -> None:
    """Run the migrations over a dedicated, unpooled connection."""
    engine = create_engine(resolve_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                render_as_batch=connection.dialect.name == "sqlite",
                **COMPARE_OPTIONS,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
