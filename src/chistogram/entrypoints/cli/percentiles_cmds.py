"""CHISTOGRAM percentiles CLI.

Reads integer samples (one per line; blank lines and ``#`` comments are
skipped), records them into an HDR histogram and prints the percentile
distribution.

Histogram range and precision default to the ``CHISTOGRAM_*`` environment
variables (see `chistogram.config`).

Examples
    $ chistogram percentiles latencies.txt
    $ cat latencies.txt | chistogram percentiles --format csv --scale 1000
    $ chistogram percentiles latencies.txt --corrected-interval 100
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import BinaryIO

import click

from chistogram.config import InvalidSettingError, get_histogram_settings
from chistogram.hdr import FormatType, HdrHistogram, percentiles_print
from chistogram.hdr.errors import HistogramError

from .helpers import warn

logger = logging.getLogger(__name__)


def _samples(lines: Iterable[bytes]) -> Iterable[tuple[int, int]]:
    """Yield (line_number, value) pairs, skipping blanks and comments."""
    for lineno, line in enumerate(lines, start=1):
        try:
            text = line.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise click.ClickException(f"Line {lineno}: not valid UTF-8 text ({e.reason})") from e
        if not text or text.startswith("#"):
            continue
        try:
            value = int(text)
        except ValueError as e:
            raise click.ClickException(
                f"Line {lineno}: expected an integer sample, got {text!r}"
            ) from e
        yield lineno, value


def _make_histogram(lowest: int | None, highest: int | None, sig_figs: int | None) -> HdrHistogram:
    try:
        settings = get_histogram_settings()
    except InvalidSettingError as e:
        raise click.ClickException(str(e)) from e

    try:
        return HdrHistogram(
            lowest if lowest is not None else settings.lowest_discernible_value,
            highest if highest is not None else settings.highest_trackable_value,
            sig_figs if sig_figs is not None else settings.significant_figures,
        )
    except HistogramError as e:
        raise click.ClickException(str(e)) from e


@click.command("percentiles")
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--lowest", type=click.IntRange(min=1), help="Lowest discernible value.")
@click.option("--highest", type=click.IntRange(min=2), help="Highest trackable value.")
@click.option(
    "--sig-figs",
    type=click.IntRange(1, 5),
    help="Number of significant figures to keep (1-5).",
)
@click.option(
    "--ticks",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="Report lines per half-distance to the 100th percentile.",
)
@click.option(
    "--scale",
    type=float,
    default=1.0,
    show_default=True,
    help="Divide reported values by this amount.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in FormatType], case_sensitive=False),
    default=FormatType.CLASSIC.value,
    show_default=True,
    help="Report layout.",
)
@click.option(
    "--corrected-interval",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help=(
        "Expected interval between samples. When > 0, samples larger than it "
        "are back-filled to correct for coordinated omission."
    ),
)
def percentiles(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    source: BinaryIO,
    lowest: int | None,
    highest: int | None,
    sig_figs: int | None,
    ticks: int,
    scale: float,
    fmt: str,
    corrected_interval: int,
) -> None:
    """Print the percentile distribution of the samples in SOURCE (default: stdin)."""
    if scale <= 0:
        raise click.BadParameter("must be > 0", param_hint="--scale")

    histogram = _make_histogram(lowest, highest, sig_figs)

    recorded = dropped = 0
    for lineno, value in _samples(source):
        if corrected_interval:
            ok = histogram.record_corrected_value(value, corrected_interval)
        else:
            ok = histogram.record_value(value)
        if ok:
            recorded += 1
        else:
            dropped += 1
            logger.debug("Line %d: sample %d is out of range", lineno, value)

    logger.info("Recorded %d samples (%d dropped)", recorded, dropped)
    if dropped:
        warn(f"{dropped} sample(s) could not be recorded (negative or out of range)")

    try:
        percentiles_print(
            histogram,
            click.get_text_stream("stdout"),
            ticks_per_half_distance=ticks,
            value_scale=scale,
            fmt=FormatType(fmt.lower()),
        )
    except HistogramError as e:
        raise click.ClickException(str(e)) from e
