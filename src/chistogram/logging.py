"""Logging setup for the CHISTOGRAM command line.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, by the CLI, and nowhere else. Two handlers are used:

* a Rich console handler on stderr, so stdout stays free for reports;
* an optional "flight recorder": a `MemoryHandler` that keeps recent DEBUG
  records in memory and dumps them to a file once a WARNING shows up.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import numpy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "chistogram"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from other libraries with a ``[library]`` prefix.

    Sets ``record.prefix`` to e.g. "[click_extra]" for foreign loggers and to
    an empty string for chistogram's own loggers. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.split('.')[0]}]"
        return True


@dataclass(frozen=True, slots=True)
class LoggingOptions:
    """Resolved logging options, usually built from CLI flags."""

    level: int = logging.WARNING
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_recorder_capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @property
    def flight_recorder(self) -> bool:
        """True when records are buffered for the log file."""
        return self.log_path is not None


def verbosity_to_level(verbose_count: int, quiet_count: int) -> int:
    """Map repeated -v/-q flags to a level, starting from WARNING."""
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    return max(logging.DEBUG, min(logging.CRITICAL, level))


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    Args:
        level: Minimum level shown; forced to DEBUG in debug mode.
        debug_mode: Show timestamps, logger names and source paths.
        color: Disable to strip ANSI colors (mirrors ``--no-color``).

    Returns:
        RichHandler: Handler ready to attach to the root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    if debug_mode:
        handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter(fmt="%(prefix)s %(message)s"))
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the in-memory flight recorder writing to ``path``.

    Args:
        path: File the buffered records are written to (truncated on open).
        capacity: Number of records kept in memory.
        flush_level: Records at this level or above trigger a dump.
        flush_on_close: Also dump the buffer when logging shuts down.

    Returns:
        MemoryHandler: The buffering handler, targeting a `FileHandler`.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] "
            "%(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Install the console handler (and flight recorder) on the root logger.

    Replaces any existing root configuration. The root logger passes
    everything through; each handler applies its own level.

    Returns:
        The handlers that were installed.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(
            level=options.level, debug_mode=options.debug, color=options.color
        )
    ]
    if options.log_path is not None:
        handlers.append(
            config_flight_recorder(
                path=options.log_path,
                capacity=options.flight_recorder_capacity,
                flush_on_close=options.force_flush,
            )
        )

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in options.logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    return handlers


def log_startup(
    logger: Logger,
    *,
    app_version: str,
    options: LoggingOptions,
    handlers: list[logging.Handler],
) -> None:
    """Log a one-line summary at INFO and environment details at DEBUG.

    Args:
        logger: Logger used to emit the messages.
        app_version: chistogram version string.
        options: The options logging was configured with.
        handlers: Handlers installed on the root logger.
    """
    logger.info(
        "CHISTOGRAM %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(options.level),
        "ON" if options.flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("NumPy: %s", numpy.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if options.flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            options.log_path,
            options.flight_recorder_capacity,
            options.force_flush,
        )
    if options.logger_levels:
        logger.debug(
            "Per-logger overrides: %s",
            {name: logging.getLevelName(lvl) for name, lvl in options.logger_levels.items()},
        )
