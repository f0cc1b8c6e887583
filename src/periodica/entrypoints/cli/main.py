"""PERIODICA CLI entry point.

The ``periodica`` group owns logging: its options are parsed before any
subcommand runs, and `configure_logging` is called once per invocation.
Subcommands live in their own modules:

- ``periodica elements``: list, show, patch, import and export elements.
- ``periodica db``: forward-only schema management for the ``sql`` backend.

Examples
    $ periodica --version
    $ periodica db upgrade
    $ periodica elements list --group s-block
    $ periodica -v elements patch 1 --alternative-name protium
    $ periodica -L botocore=DEBUG --force-flush elements show 26
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from periodica import __version__
from periodica.logging import configure_logging, log_startup, verbosity_to_level

from .db import db as db_group
from .elements import elements as elements_group
from .helpers.log_level_parser import parse_log_level

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(user_log_dir("periodica", appauthor=False)) / "latest.log"
DEFAULT_FLIGHT_RECORDER_CAPACITY = 2000

HELP = """PERIODICA command-line interface.

    PERIODICA keeps a periodic table of the elements as a single JSON document
    in a blob store (SQL database, S3 bucket or memory) and applies partial
    updates to it with optimistic concurrency: a write only lands if nobody
    changed the document since it was read.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option("-v", "--verbose", count=True, help="More console output (repeatable).")
@click.option("-q", "--quiet", count=True, help="Less console output (repeatable).")
@click.option(
    "--debug/--no-debug",
    help="Developer diagnostics: DEBUG console output with logger names and paths.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    envvar="PERIODICA_LOGGER_LEVELS",
    show_envvar=True,
    help="Minimum level for one logger, as NAME=LEVEL (repeatable), e.g. botocore=INFO.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    envvar="PERIODICA_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "recorder_on",
    default=True,
    show_envvar=True,
    help=(
        "Buffer recent DEBUG records in memory and write them to --log-path "
        "once a WARNING or worse is logged."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    "recorder_force_flush",
    show_default=True,
    show_envvar=True,
    help="Write the flight recorder buffer on exit even if nothing went wrong.",
)
@click.option(
    "--flight-recorder-capacity",
    "recorder_capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_FLIGHT_RECORDER_CAPACITY,
    envvar="PERIODICA_FLIGHT_RECORDER_CAPACITY",
    hidden=True,
    help="Number of records the flight recorder keeps.",
)
@clickx.pass_context
def periodica(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose: int,
    quiet: int,
    debug: bool,
    logger_levels: dict[str, int],
    log_path: Path,
    recorder_on: bool,
    recorder_force_flush: bool,
    recorder_capacity: int,
) -> None:
    """PERIODICA command-line interface."""
    level = verbosity_to_level(verbose, quiet)
    recorder_path = log_path if recorder_on else None

    handlers = configure_logging(
        level=level,
        debug_mode=debug,
        color=ctx.color is not False,
        log_path=recorder_path,
        flight_capacity=recorder_capacity,
        force_flush_fr=recorder_force_flush,
        logger_levels=logger_levels,
    )
    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=recorder_path,
        flight_capacity=recorder_capacity if recorder_on else None,
        force_flush_fr=recorder_force_flush,
        logger_levels=logger_levels,
    )

    # flushes (or discards) the flight recorder once the subcommand returns
    ctx.call_on_close(logging.shutdown)


periodica.add_command(elements_group)
periodica.add_command(db_group)
