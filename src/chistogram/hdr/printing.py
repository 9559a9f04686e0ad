"""Percentile distribution reports for HDR histograms.

Writes the classic HdrHistogram percentile table (``Value``, ``Percentile``,
``TotalCount``, ``1/(1-Percentile)``) in either the fixed-width CLASSIC layout
or as CSV.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, TextIO

from .errors import HistogramIOError

if TYPE_CHECKING:
    from .histogram import HdrHistogram


class FormatType(Enum):
    """Output layout of `percentiles_print`."""

    CLASSIC = "classic"
    CSV = "csv"


HEADER_COLUMNS = ("Value", "Percentile", "TotalCount", "1/(1-Percentile)")

CLASSIC_FOOTER = (
    "#[Mean    = {mean:12.3f}, StdDeviation   = {stddev:12.3f}]\n"
    "#[Max     = {max:12.3f}, Total count    = {total_count:12d}]\n"
    "#[Buckets = {buckets:12d}, SubBuckets     = {sub_buckets:12d}]\n"
)


def _line_format(significant_figures: int, fmt: FormatType) -> str:
    if fmt is FormatType.CSV:
        return f"%.{significant_figures}f,%f,%d,%.2f\n"
    return f"%12.{significant_figures}f %12f %12d %12.2f\n"


def _head_format(fmt: FormatType) -> str:
    if fmt is FormatType.CSV:
        return "%s,%s,%s,%s\n"
    return "%12s %12s %12s %12s\n\n"


def _inverted(percentile: float) -> float:
    if percentile >= 1.0:
        return math.inf
    return 1.0 / (1.0 - percentile)


def percentiles_print(
    histogram: HdrHistogram,
    stream: TextIO,
    ticks_per_half_distance: int = 5,
    value_scale: float = 1.0,
    fmt: FormatType = FormatType.CLASSIC,
) -> None:
    """Write the percentile distribution of ``histogram`` to ``stream``.

    The stream is not flushed.

    Args:
        histogram: The histogram to report on.
        stream: Text stream to write to.
        ticks_per_half_distance: Number of report lines per half-distance to 100%.
        value_scale: Divide reported values by this amount (e.g. 1000.0 to
            report microseconds recorded as nanoseconds).
        fmt: Output layout.

    Raises:
        HistogramIOError: If writing to ``stream`` fails.
    """
    line_format = _line_format(histogram.significant_figures, fmt)

    try:
        stream.write(_head_format(fmt) % HEADER_COLUMNS)

        for step in histogram.iter_percentiles(ticks_per_half_distance):
            percentile = step.percentile_level_iterated_to / 100.0
            stream.write(
                line_format
                % (
                    step.highest_equivalent_value / value_scale,
                    percentile,
                    step.cumulative_count,
                    _inverted(percentile),
                )
            )

        if fmt is FormatType.CLASSIC:
            stream.write(
                CLASSIC_FOOTER.format(
                    mean=histogram.mean() / value_scale,
                    stddev=histogram.stddev() / value_scale,
                    max=histogram.max() / value_scale,
                    total_count=histogram.total_count,
                    buckets=histogram.bucket_count,
                    sub_buckets=histogram.sub_bucket_count,
                )
            )
    except (OSError, ValueError) as e:
        raise HistogramIOError(str(e)) from e
