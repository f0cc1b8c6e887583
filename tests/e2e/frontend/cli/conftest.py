"""Fixtures and helpers for end-to-end CLI tests.

Every invocation goes through the top-level `periodica` group, so logging is
configured exactly as in production. The flight recorder is switched off
unless a test asks for it, to keep the user's log directory untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

import pytest
from click.testing import CliRunner, Result

from periodica import config
from periodica.bootstrap import AppContainer
from periodica.entrypoints.cli.main import periodica

# pylint: disable=redefined-outer-name

NO_FLIGHT_RECORDER = ["--no-flight-recorder"]


def assert_in_output(pattern: str, output: str) -> None:
    """Assert that a regex pattern is found in the output string."""
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    """Assert that a regex pattern is NOT found in the output string."""
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every CLI test without PERIODICA_* variables from the host."""
    for name in (
        config.DB_URL_ENV,
        config.BLOBSTORE_ENV,
        config.BUCKET_ENV,
        config.KEY_ENV,
        config.S3_REGION_ENV,
        config.S3_ENDPOINT_URL_ENV,
        "PERIODICA_LOG_PATH",
        "PERIODICA_LOGGER_LEVELS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logger_levels():
    """Undo per-logger levels set by `configure_logging` during a CLI test."""
    manager = logging.Logger.manager
    levels = {
        name: logger.level
        for name, logger in manager.loggerDict.items()
        if isinstance(logger, logging.Logger)
    }
    yield
    for name, logger in list(manager.loggerDict.items()):
        if isinstance(logger, logging.Logger):
            logger.setLevel(levels.get(name, logging.NOTSET))


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside the runner's isolated filesystem."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def invoke(runner) -> Callable[..., Result]:
    """Invoke ``periodica`` with the flight recorder off.

    Keyword arguments go to `CliRunner.invoke`; pass ``obj=app`` to run against
    a prepared `AppContainer` instead of bootstrapping from the environment.
    """

    def _invoke(*args: str, **kwargs) -> Result:
        return runner.invoke(periodica, [*NO_FLIGHT_RECORDER, *args], **kwargs)

    return _invoke


@pytest.fixture
def seeded_app(app: AppContainer, seed_catalog) -> AppContainer:
    """Application container whose catalog holds the sample records."""
    seed_catalog()
    return app
