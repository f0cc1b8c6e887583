"""``periodica db``: forward-only schema management for the ``sql`` backend.

Thin wrappers over Alembic's command API using the packaged migration
scripts (see `periodica.config.build_alembic_config`). There is no
``downgrade`` or ``stamp``.

Alembic's own output goes to stdout; notices and prompts go to stderr.
`PERIODICA_DB_URL` must be set for every command that touches the database
(``heads`` and plain ``history`` only read the scripts).
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, OperationalError

from periodica import config
from periodica.adapters.db.engine import make_engine

from .helpers import error, sanitize_url, success, warn

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy.engine import Engine

MISSING_DB_URL_MSG = (
    "PERIODICA_DB_URL is not set. Point it at the catalog database first:\n"
    "  export PERIODICA_DB_URL='sqlite:///periodica.db'        # POSIX shells\n"
    "  $env:PERIODICA_DB_URL='sqlite:///periodica.db'        # PowerShell"
)

INVALID_URL_FORMAT_MSG = (
    "The value of PERIODICA_DB_URL is not a valid SQLAlchemy database URL."
)

CANNOT_CONNECT_MSG = (
    "Could not reach the database named by PERIODICA_DB_URL. "
    "Check that the server is up and the URL is right."
)

UPGRADE_SCHEMA_WARNING = (
    "About to migrate the blob store schema to the newest revision. "
    "Back up the database first if it holds a catalog you care about."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'periodica db upgrade' to update the schema."


class MigrationStatus(Enum):
    """Where the database schema stands relative to the packaged head."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _connect_checked(url: str) -> Engine:
    engine = make_engine(url)
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))  # pragma: no mutate
    return engine


def _get_engine() -> Engine:
    """Engine for `PERIODICA_DB_URL`, after a round trip to the database."""
    try:
        url = config.get_db_url()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    try:
        return _connect_checked(url)
    except OperationalError as e:
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e


def _alembic_config(engine: Engine | None = None) -> Config:
    db_url = None
    if engine is not None:
        db_url = engine.url.render_as_string(hide_password=False)
    return config.build_alembic_config(db_url=db_url, stdout=sys.stdout)


def _current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _head_revision(cfg: Config) -> str | None:
    heads = ScriptDirectory.from_config(cfg).get_heads()
    return heads[0] if heads else None


def migration_status(current: str | None, head: str | None) -> MigrationStatus:
    """Classify a database revision against the head revision."""
    if current is None:
        return MigrationStatus.UNINITIALIZED
    if current == head:
        return MigrationStatus.UP_TO_DATE
    return MigrationStatus.OUT_OF_DATE


_verbose_option = click.option(
    "--verbose", "-v", "verbose", is_flag=True, help="Show alembic's verbose output."
)


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands (sql backend)."""


@db.command()
@_verbose_option
def current(verbose: bool) -> None:
    """Show current DB revision."""
    command.current(_alembic_config(_get_engine()), verbose=verbose)


@db.command()
@_verbose_option
def heads(verbose: bool) -> None:
    """Show available head revisions."""
    command.heads(_alembic_config(), verbose=verbose)


@db.command()
@_verbose_option
@click.option(
    "--indicate-current",
    "-i",
    "indicate_current",
    is_flag=True,
    help="Mark the database's current revision (needs PERIODICA_DB_URL).",
)
def history(verbose: bool, indicate_current: bool) -> None:
    """Show revision history."""
    cfg = _alembic_config(_get_engine() if indicate_current else None)
    command.history(cfg, verbose=verbose, indicate_current=indicate_current)


@db.command()
@click.option("--sql", is_flag=True, help="Print the SQL instead of running it.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
def upgrade(sql: bool, force: bool) -> None:
    """Upgrade the database to the head revision."""
    engine = _get_engine()
    if not (force or sql):
        warn(UPGRADE_SCHEMA_WARNING)
        click.echo(
            f"db: {click.style(sanitize_url(str(engine.url)), underline=True)}",
            err=True,
        )
        click.confirm("Are you sure you want to proceed?", abort=True, err=True)
    command.upgrade(_alembic_config(engine), revision="head", sql=sql)
    success("Upgrade complete!")


@db.command()
def status() -> None:
    """Show database connection and schema status."""
    try:
        engine = _get_engine()
    except click.ClickException as e:
        error("Cannot connect to database")
        click.echo(e.format_message())
        return

    success("Database reachable")
    click.echo(f"Backend : {engine.dialect.name}")
    click.echo(f"URL     : {sanitize_url(str(engine.url))}")

    rev = _current_revision(engine)
    state = migration_status(rev, _head_revision(_alembic_config(engine)))
    click.echo(f"Schema  : {f'{rev} ({state.value})' if rev else state.value}")
    if state is not MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
