"""Logging setup for the PERIODICA CLI.

Every module logs through ``logging.getLogger(__name__)``; this module only
decides where those records go:

- a Rich console handler on stderr, filtered by the -v/-q verbosity;
- an optional in-memory "flight recorder" that keeps recent DEBUG records and
  writes them to a file once something at WARNING or above happens;
- per-logger level overrides, mostly used to quiet SQLAlchemy and botocore.

`configure_logging` wires all of the above onto the root logger and is what
the CLI group calls. The smaller builders are public so tests can exercise
them in isolation.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING

import alembic
import boto3
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Mapping

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "periodica"

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
FLIGHT_RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

_LEVEL_STEP = 10


def verbosity_to_level(verbose_count: int = 0, quiet_count: int = 0) -> int:
    """Map -v/-q repetition counts to a logging level, starting from WARNING.

    The result is clamped to the DEBUG..CRITICAL range.
    """
    level = logging.WARNING + _LEVEL_STEP * (quiet_count - verbose_count)
    return min(max(level, logging.DEBUG), logging.CRITICAL)


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from other libraries with a ``[library]`` prefix.

    Records from ``periodica.*`` loggers get an empty prefix; everything else
    gets the first segment of its logger name, e.g. ``botocore.hooks`` becomes
    ``[botocore]``. Nothing is ever filtered out.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top_level = record.name.partition(".")[0]
        record.prefix = "" if top_level == PROJECT_PREFIX else f"[{top_level}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the Rich console handler.

    In debug mode the level is forced to DEBUG, records show their logger
    name and source path, and third-party records are not prefixed.

    Args:
        level: Minimum level shown on the console.
        debug_mode: Developer diagnostics (see above).
        color: Set to False to mirror click-extra's ``--no-color``.

    Returns:
        RichHandler: A handler writing to stderr.
    """
    console = Console(stderr=True, color_system="auto" if color else None)
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=console,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
        rich_tracebacks=True,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the flight recorder: a `MemoryHandler` in front of a file.

    The file is truncated when the recorder is built, so it only ever holds
    the history of the latest run.

    Returns:
        MemoryHandler: The buffering handler; its target is the file handler.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    sink = logging.FileHandler(path, mode="w", encoding="utf-8")
    sink.setFormatter(logging.Formatter(FLIGHT_RECORDER_FORMAT))
    sink.setLevel(logging.DEBUG)

    recorder = MemoryHandler(capacity, flushLevel=flush_level, flushOnClose=flush_on_close)
    recorder.setTarget(sink)
    return recorder


def configure_logging(  # pylint: disable=too-many-arguments
    *,
    level: int,
    debug_mode: bool = False,
    color: bool = True,
    log_path: Path | None = None,
    flight_capacity: int = 2000,
    force_flush_fr: bool = False,
    logger_levels: Mapping[str, int] | None = None,
) -> list[logging.Handler]:
    """Install PERIODICA's handlers on the root logger.

    The root logger itself is set to DEBUG; filtering happens per handler and
    through `logger_levels`. Any previous root configuration is replaced.

    Args:
        level: Console level (see `verbosity_to_level`).
        debug_mode: Passed to `config_console_handler`.
        color: Passed to `config_console_handler`.
        log_path: Flight recorder file. ``None`` disables the flight recorder.
        flight_capacity: Flight recorder buffer size.
        force_flush_fr: Dump the flight recorder on exit even without warnings.
        logger_levels: Per-logger minimum levels, e.g. ``{"botocore": WARNING}``.

    Returns:
        list[logging.Handler]: The handlers that were installed.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(level=level, debug_mode=debug_mode, color=color)
    ]
    if log_path is not None:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_capacity,
                flush_on_close=force_flush_fr,
            )
        )

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(lvl)

    return handlers


def _diagnostics(
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: Mapping[str, int],
) -> dict[str, object]:
    """Label → value pairs for the DEBUG part of the startup log, in order."""
    details: dict[str, object] = {
        "Python": sys.version.split()[0],
        "Platform": f"{platform.system()} {platform.release()}",
        "PID": os.getpid(),
        "CWD": Path.cwd(),
        "SQLAlchemy": sqlalchemy.__version__,
        "Alembic": alembic.__version__,
        "boto3": boto3.__version__,
        "Handlers": [type(h).__name__ for h in handlers],
    }
    if log_path is not None:
        details["Flight recorder"] = (
            f"path={log_path}, capacity={flight_capacity}, "
            f"flush_on_close={force_flush_fr}"
        )
    details["Per-logger overrides"] = {
        name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()
    } or "<none>"
    return details


def log_startup(  # pylint: disable=too-many-arguments
    logger: logging.Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: Mapping[str, int],
) -> None:
    """Log a one-line INFO banner followed by DEBUG diagnostics.

    The diagnostics cover the interpreter, platform, working directory, the
    versions of the storage libraries (SQLAlchemy, Alembic, boto3), the active
    handlers, the flight recorder settings and any per-logger overrides.
    """
    logger.info(
        "PERIODICA %s (console=%s, flight-recorder=%s)",
        app_version,
        logging.getLevelName(level),
        "OFF" if log_path is None else "ON",
    )
    details = _diagnostics(
        handlers, log_path, flight_capacity, force_flush_fr, logger_levels
    )
    for label, value in details.items():
        logger.debug("%s: %s", label, value)
