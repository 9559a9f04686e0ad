"""Bucket layout calculation for HDR histograms.

An HDR histogram splits its value range into ``bucket_count`` buckets whose
width doubles from one bucket to the next. Every bucket is divided into
``sub_bucket_count`` linear sub-buckets, enough to keep the requested number of
significant figures. The lower half of every bucket but the first overlaps the
previous bucket, so only ``sub_bucket_half_count`` counters are stored per
bucket after the first.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .errors import InvalidBucketConfigError

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1
INT32_MAX = 2**31 - 1

MIN_SIGNIFICANT_FIGURES = 1
MAX_SIGNIFICANT_FIGURES = 5

# unit_magnitude + sub_bucket_half_count_magnitude must leave room in an int64
MAX_COMBINED_MAGNITUDE = 61


@dataclass(frozen=True, slots=True)
class BucketConfig:
    """Immutable bucket layout derived from a histogram's range and precision."""

    lowest_discernible_value: int
    highest_trackable_value: int
    significant_figures: int
    unit_magnitude: int
    sub_bucket_half_count_magnitude: int
    sub_bucket_half_count: int
    sub_bucket_mask: int
    sub_bucket_count: int
    bucket_count: int
    counts_len: int


def buckets_needed_to_cover_value(
    value: int, sub_bucket_count: int, unit_magnitude: int
) -> int:
    """Return the number of buckets needed so that ``value`` is trackable."""
    smallest_untrackable_value = sub_bucket_count << unit_magnitude
    buckets_needed = 1
    while smallest_untrackable_value <= value:
        if smallest_untrackable_value > INT64_MAX // 2:
            return buckets_needed + 1
        smallest_untrackable_value <<= 1
        buckets_needed += 1
    return buckets_needed


def calculate_bucket_config(
    lowest_discernible_value: int,
    highest_trackable_value: int,
    significant_figures: int,
) -> BucketConfig:
    """Compute the bucket layout for the given range and precision.

    Args:
        lowest_discernible_value: The smallest value distinguishable from 0.
            Must be >= 1. Internally rounded down to the nearest power of 2.
        highest_trackable_value: The largest value that can be recorded. Must
            be at least twice ``lowest_discernible_value``.
        significant_figures: Number of significant decimal digits to keep,
            between 1 and 5 inclusive.

    Returns:
        The resulting `BucketConfig`.

    Raises:
        InvalidBucketConfigError: If any argument is out of range.
    """

    def _invalid(reason: str) -> InvalidBucketConfigError:
        return InvalidBucketConfigError(
            lowest_discernible_value,
            highest_trackable_value,
            significant_figures,
            reason,
        )

    if lowest_discernible_value < 1:
        raise _invalid("lowest_discernible_value must be >= 1")
    if not MIN_SIGNIFICANT_FIGURES <= significant_figures <= MAX_SIGNIFICANT_FIGURES:
        raise _invalid(
            f"significant_figures must be between {MIN_SIGNIFICANT_FIGURES} "
            f"and {MAX_SIGNIFICANT_FIGURES}"
        )
    if lowest_discernible_value * 2 > highest_trackable_value:
        raise _invalid(
            "highest_trackable_value must be >= 2 * lowest_discernible_value"
        )

    largest_value_with_single_unit_resolution = 2 * 10**significant_figures
    sub_bucket_count_magnitude = math.ceil(
        math.log2(largest_value_with_single_unit_resolution)
    )
    sub_bucket_half_count_magnitude = max(sub_bucket_count_magnitude, 1) - 1

    # floor(log2(lowest)), exact for large integers
    unit_magnitude = lowest_discernible_value.bit_length() - 1
    if unit_magnitude > INT32_MAX:  # pragma: no cover
        raise _invalid("lowest_discernible_value is too large")

    sub_bucket_count = 2 ** (sub_bucket_half_count_magnitude + 1)
    sub_bucket_half_count = sub_bucket_count // 2
    sub_bucket_mask = (sub_bucket_count - 1) << unit_magnitude

    if unit_magnitude + sub_bucket_half_count_magnitude > MAX_COMBINED_MAGNITUDE:
        raise _invalid("lowest_discernible_value is too large for this precision")

    bucket_count = buckets_needed_to_cover_value(
        highest_trackable_value, sub_bucket_count, unit_magnitude
    )
    counts_len = (bucket_count + 1) * sub_bucket_half_count

    config = BucketConfig(
        lowest_discernible_value=lowest_discernible_value,
        highest_trackable_value=highest_trackable_value,
        significant_figures=significant_figures,
        unit_magnitude=unit_magnitude,
        sub_bucket_half_count_magnitude=sub_bucket_half_count_magnitude,
        sub_bucket_half_count=sub_bucket_half_count,
        sub_bucket_mask=sub_bucket_mask,
        sub_bucket_count=sub_bucket_count,
        bucket_count=bucket_count,
        counts_len=counts_len,
    )
    logger.debug(
        "Bucket config: buckets=%d, sub_buckets=%d, counts_len=%d",
        config.bucket_count,
        config.sub_bucket_count,
        config.counts_len,
    )
    return config
