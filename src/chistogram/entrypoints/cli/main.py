"""CHISTOGRAM CLI entry point.

Defines the top-level ``chistogram`` command (via Click-Extra), configures
logging from its options and registers the subcommands:

- ``chistogram manifest``    : show how a package is wired to its siblings.
- ``chistogram percentiles`` : percentile report of integer samples.

Examples
    $ chistogram --version
    $ chistogram -v percentiles latencies.txt
    $ chistogram manifest --json
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from chistogram import __version__
from chistogram.logging import (
    LoggingOptions,
    configure_logging,
    log_startup,
    verbosity_to_level,
)

from .helpers.log_level_parser import parse_log_level
from .manifest_cmds import manifest
from .percentiles_cmds import percentiles

logger = logging.getLogger(__name__)


HELP = """CHISTOGRAM command-line interface.

    Record integer samples (typically latencies) into an HDR histogram and
    report their percentile distribution with a fixed number of significant
    figures, or inspect the package manifest of the chistogram library.
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
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Raise console verbosity one level above WARNING per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Lower console verbosity one level below WARNING per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (DEBUG console output with logger names and paths).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File the flight recorder writes to.",
    default=Path(user_log_dir("chistogram", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="CHISTOGRAM_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="CHISTOGRAM_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Number of log records kept by the flight recorder.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last log records at DEBUG granularity in memory and write "
        "them to --log-path when a WARNING or ERROR occurs."
    ),
    default=True,
    envvar="CHISTOGRAM_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush",
    is_flag=True,
    help="Also write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_default=True,
    envvar="CHISTOGRAM_FORCE_FLUSH_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set the minimum LEVEL of a logger NAME (NAME=LEVEL). Repeatable, or "
        "a comma/space separated list in CHISTOGRAM_LOGGER_LEVELS."
    ),
    envvar="CHISTOGRAM_LOGGER_LEVELS",
    show_envvar=True,
)
@clickx.pass_context
def chistogram(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """CHISTOGRAM command-line interface."""
    options = LoggingOptions(
        level=verbosity_to_level(verbose_count, quiet_count),
        debug=debug,
        color=ctx.color is not False,  # None or True => allow color
        log_path=log_path if flight_recorder else None,
        flight_recorder_capacity=flight_recorder_capacity,
        force_flush=force_flush,
        logger_levels=logger_levels,
    )
    handlers = configure_logging(options)
    log_startup(logger, app_version=__version__, options=options, handlers=handlers)

    ctx.call_on_close(logging.shutdown)


chistogram.add_command(manifest)
chistogram.add_command(percentiles)
