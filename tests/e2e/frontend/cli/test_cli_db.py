"""End-to-end tests for ``periodica db`` against a temporary SQLite file."""

from __future__ import annotations

import pytest

from periodica.entrypoints.cli.db import MigrationStatus, migration_status

from .conftest import assert_in_output, assert_not_in_output

# pylint: disable=redefined-outer-name

HEAD = "3f1c9a7d2b10"


@pytest.fixture
def db_env(sqlite_url) -> dict[str, str]:
    """Environment pointing PERIODICA_DB_URL at a fresh SQLite file."""
    return {"PERIODICA_DB_URL": sqlite_url}


@pytest.mark.parametrize(
    "current, head, expected",
    [
        (None, HEAD, MigrationStatus.UNINITIALIZED),
        (HEAD, HEAD, MigrationStatus.UP_TO_DATE),
        ("0000", HEAD, MigrationStatus.OUT_OF_DATE),
    ],
)
def test_migration_status(current, head, expected):
    """Revisions are classified against the packaged head."""
    assert migration_status(current, head) is expected


def test_heads_needs_no_database(invoke):
    """``heads`` only reads the packaged scripts."""
    result = invoke("db", "heads")
    assert result.exit_code == 0, result.output
    assert_in_output(HEAD, result.output)


def test_history(invoke):
    """``history`` lists the blob store migration."""
    result = invoke("db", "history")
    assert result.exit_code == 0, result.output
    assert_in_output(HEAD, result.output)


@pytest.mark.parametrize("args", [["current"], ["upgrade", "--force"]])
def test_missing_url(invoke, args):
    """Commands that touch the database explain how to set the URL."""
    result = invoke("db", *args)
    assert result.exit_code == 1
    assert_in_output("PERIODICA_DB_URL is not set", result.output)
    assert_in_output("export PERIODICA_DB_URL=", result.output)


def test_invalid_url(invoke):
    """Garbage URLs are reported as such."""
    result = invoke("db", "current", env={"PERIODICA_DB_URL": "not a url"})
    assert result.exit_code == 1
    assert_in_output("not a valid SQLAlchemy database URL", result.output)


def test_status_without_url(invoke):
    """``status`` reports the problem instead of failing."""
    result = invoke("db", "status")
    assert result.exit_code == 0
    assert_in_output("Cannot connect to database", result.output)


def test_status_uninitialized(invoke, db_env):
    """A fresh database is reachable but has no schema yet."""
    result = invoke("db", "status", env=db_env)
    assert result.exit_code == 0, result.output
    assert_in_output("Database reachable", result.output)
    assert_in_output(r"Backend : sqlite", result.output)
    assert_in_output(r"Schema  : uninitialized", result.output)
    assert_in_output("periodica db upgrade", result.output)


def test_upgrade_then_status(invoke, db_env):
    """``upgrade --force`` migrates to head without prompting."""
    result = invoke("db", "upgrade", "--force", env=db_env)
    assert result.exit_code == 0, result.output
    assert_in_output("Upgrade complete!", result.output)
    assert_not_in_output("Are you sure", result.output)

    result = invoke("db", "status", env=db_env)
    assert result.exit_code == 0, result.output
    assert_in_output(rf"Schema  : {HEAD} \(up to date\)", result.output)
    assert_not_in_output("periodica db upgrade", result.output)

    result = invoke("db", "current", env=db_env)
    assert result.exit_code == 0, result.output
    assert_in_output(HEAD, result.output)


def test_upgrade_asks_for_confirmation(invoke, db_env):
    """Without --force the user must confirm; declining aborts."""
    result = invoke("db", "upgrade", env=db_env, input="n\n")
    assert result.exit_code == 1
    assert_in_output("Back up the database first", result.output)
    assert_in_output("Aborted", result.output)

    result = invoke("db", "status", env=db_env)
    assert_in_output("uninitialized", result.output)


def test_upgrade_confirmed(invoke, db_env):
    """Answering yes runs the migration."""
    result = invoke("db", "upgrade", env=db_env, input="y\n")
    assert result.exit_code == 0, result.output
    assert_in_output("Upgrade complete!", result.output)


def test_upgrade_sql_only_prints(invoke, db_env):
    """``--sql`` prints the DDL and leaves the database alone."""
    result = invoke("db", "upgrade", "--sql", env=db_env)
    assert result.exit_code == 0, result.output
    assert_in_output("CREATE TABLE blob_store", result.output)

    result = invoke("db", "status", env=db_env)
    assert_in_output("uninitialized", result.output)
