"""HDR histogram with a fixed number of significant figures.

`HdrHistogram` records non-negative integer samples into a numpy ``int64``
counts array laid out by `BucketConfig`. Values are stored at a precision at
or better than the configured significant figures, so two values that fall
into the same sub-bucket are "equivalent" and share a counter.

Recording never raises for out-of-range samples; it returns ``False`` so that
hot paths (e.g. latency recorders) can count drops cheaply.

Note:
    This module requires numpy to be installed.
"""

from __future__ import annotations

import logging
import math
import sys
import threading
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from .bucket_config import INT64_MAX, BucketConfig, calculate_bucket_config
from .iterators import (
    AllValuesIterator,
    LinearIterator,
    LogarithmicIterator,
    PercentileIterator,
    RecordedValuesIterator,
)

logger = logging.getLogger(__name__)

# pylint: disable=too-many-instance-attributes,too-many-public-methods

Counts = npt.NDArray[np.int64]


class HdrHistogram:
    """A High Dynamic Range histogram of non-negative integer values."""

    def __init__(
        self,
        lowest_discernible_value: int,
        highest_trackable_value: int,
        significant_figures: int,
    ) -> None:
        """Create an empty histogram.

        Args:
            lowest_discernible_value: The smallest value distinguishable from 0
                (>= 1, rounded down to a power of 2).
            highest_trackable_value: The largest value to be recorded.
            significant_figures: Decimal precision to keep, 1..5 inclusive.

        Raises:
            InvalidBucketConfigError: If the arguments describe no valid layout.
        """
        self._init_from_config(
            calculate_bucket_config(
                lowest_discernible_value, highest_trackable_value, significant_figures
            )
        )

    @classmethod
    def alloc(cls, highest_trackable_value: int, significant_figures: int) -> HdrHistogram:
        """Create a histogram whose lowest discernible value is 1."""
        return cls(1, highest_trackable_value, significant_figures)

    @classmethod
    def from_config(cls, config: BucketConfig) -> HdrHistogram:
        """Create an empty histogram from a precomputed bucket layout."""
        histogram = cls.__new__(cls)
        histogram._init_from_config(config)  # pylint: disable=protected-access
        return histogram

    def _init_from_config(self, config: BucketConfig) -> None:
        self.config = config
        self.lowest_discernible_value = config.lowest_discernible_value
        self.highest_trackable_value = config.highest_trackable_value
        self.significant_figures = config.significant_figures
        self.unit_magnitude = config.unit_magnitude
        self.sub_bucket_half_count_magnitude = config.sub_bucket_half_count_magnitude
        self.sub_bucket_half_count = config.sub_bucket_half_count
        self.sub_bucket_mask = config.sub_bucket_mask
        self.sub_bucket_count = config.sub_bucket_count
        self.bucket_count = config.bucket_count
        self.counts_len = config.counts_len
        self.min_value = INT64_MAX
        self.max_value = 0
        self.normalizing_index_offset = 0
        self.total_count = 0
        self._counts: Counts = np.zeros(config.counts_len, dtype=np.int64)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(lowest_discernible_value={self.lowest_discernible_value}, "
            f"highest_trackable_value={self.highest_trackable_value}, "
            f"significant_figures={self.significant_figures}, "
            f"total_count={self.total_count})"
        )

    @property
    def memory_size(self) -> int:
        """Approximate number of bytes used by the histogram and its counts."""
        return sys.getsizeof(self) + self._counts.nbytes

    # --- Counts access ---

    def _normalize_index(self, index: int) -> int:
        if self.normalizing_index_offset == 0:
            return index

        normalized_index = index - self.normalizing_index_offset
        if normalized_index < 0:
            return normalized_index + self.counts_len
        if normalized_index >= self.counts_len:
            return normalized_index - self.counts_len
        return normalized_index

    def _logical_counts(self) -> Counts:
        """Counts ordered by logical index, undoing the normalizing offset."""
        if self.normalizing_index_offset == 0:
            return self._counts
        return np.roll(self._counts, self.normalizing_index_offset)

    def _counts_inc_normalised(self, index: int, count: int) -> None:
        self._counts[self._normalize_index(index)] += count
        self.total_count += count

    def _update_min_max(self, value: int) -> None:
        if value != 0 and value < self.min_value:
            self.min_value = value
        if value > self.max_value:
            self.max_value = value

    def counts(self) -> Counts:
        """Return a read-only copy of the counts in logical index order."""
        counts = self._logical_counts().copy()
        counts.setflags(write=False)
        return counts

    # --- Index arithmetic ---

    def bucket_index(self, value: int) -> int:
        """Index of the bucket that holds ``value``."""
        # smallest power of 2 containing value
        pow2ceiling = (value | self.sub_bucket_mask).bit_length()
        return pow2ceiling - self.unit_magnitude - (self.sub_bucket_half_count_magnitude + 1)

    def sub_bucket_index(self, value: int, bucket_index: int) -> int:
        """Index of ``value`` within the sub-buckets of ``bucket_index``."""
        return value >> (bucket_index + self.unit_magnitude)

    def _counts_index(self, bucket_index: int, sub_bucket_index: int) -> int:
        # equivalent of (bucket_index + 1) * sub_bucket_half_count
        bucket_base_index = (bucket_index + 1) << self.sub_bucket_half_count_magnitude
        offset_in_bucket = sub_bucket_index - self.sub_bucket_half_count
        return bucket_base_index + offset_in_bucket

    def _value_from_index(self, bucket_index: int, sub_bucket_index: int) -> int:
        return sub_bucket_index << (bucket_index + self.unit_magnitude)

    def _size_of_range_given_indices(self, bucket_index: int, sub_bucket_index: int) -> int:
        if sub_bucket_index >= self.sub_bucket_count:
            bucket_index += 1
        return 1 << (self.unit_magnitude + bucket_index)

    def counts_index_for(self, value: int) -> int:
        """Index into the counts array for ``value``."""
        bucket_index = self.bucket_index(value)
        sub_bucket_index = self.sub_bucket_index(value, bucket_index)
        return self._counts_index(bucket_index, sub_bucket_index)

    def value_at_index(self, index: int) -> int:
        """Lowest value counted at ``index``."""
        bucket_index = (index >> self.sub_bucket_half_count_magnitude) - 1
        sub_bucket_index = (index & (self.sub_bucket_half_count - 1)) + self.sub_bucket_half_count

        if bucket_index < 0:
            sub_bucket_index -= self.sub_bucket_half_count
            bucket_index = 0

        return self._value_from_index(bucket_index, sub_bucket_index)

    def size_of_equivalent_value_range(self, value: int) -> int:
        """Width of the range of values equivalent to ``value``."""
        bucket_index = self.bucket_index(value)
        sub_bucket_index = self.sub_bucket_index(value, bucket_index)
        return self._size_of_range_given_indices(bucket_index, sub_bucket_index)

    def lowest_equivalent_value(self, value: int) -> int:
        """Lowest value that shares a counter with ``value``."""
        bucket_index = self.bucket_index(value)
        sub_bucket_index = self.sub_bucket_index(value, bucket_index)
        return self._value_from_index(bucket_index, sub_bucket_index)

    def next_non_equivalent_value(self, value: int) -> int:
        """Smallest value greater than ``value`` that is not equivalent to it."""
        return self.lowest_equivalent_value(value) + self.size_of_equivalent_value_range(value)

    def highest_equivalent_value(self, value: int) -> int:
        """Highest value that shares a counter with ``value``."""
        return self.next_non_equivalent_value(value) - 1

    def median_equivalent_value(self, value: int) -> int:
        """Midpoint of the range of values equivalent to ``value``."""
        return self.lowest_equivalent_value(value) + (
            self.size_of_equivalent_value_range(value) >> 1
        )

    def values_are_equivalent(self, a: int, b: int) -> bool:
        """True if ``a`` and ``b`` are counted by the same counter."""
        return self.lowest_equivalent_value(a) == self.lowest_equivalent_value(b)

    def count_at_index(self, index: int) -> int:
        """Count stored at logical ``index``; 0 outside ``[0, counts_len)``."""
        if not 0 <= index < self.counts_len:
            return 0
        return int(self._counts[self._normalize_index(index)])

    def count_at_value(self, value: int) -> int:
        """Count of recorded values equivalent to ``value``.

        Values that cannot be recorded (negative or beyond the trackable
        range) have a count of 0.
        """
        if value < 0:
            return 0
        return self.count_at_index(self.counts_index_for(value))

    # --- Updates ---

    def record_value(self, value: int) -> bool:
        """Record ``value`` once. Returns False if it cannot be recorded."""
        return self.record_values(value, 1)

    def record_values(self, value: int, count: int) -> bool:
        """Record ``value`` ``count`` times.

        Returns:
            False if ``value`` is negative or beyond the trackable range,
            True otherwise.
        """
        if value < 0:
            return False

        counts_index = self.counts_index_for(value)
        if counts_index < 0 or self.counts_len <= counts_index:
            return False

        self._counts_inc_normalised(counts_index, count)
        self._update_min_max(value)
        return True

    def record_corrected_value(self, value: int, expected_interval: int) -> bool:
        """Record ``value`` and back-fill for coordinated omission."""
        return self.record_corrected_values(value, 1, expected_interval)

    def record_corrected_values(self, value: int, count: int, expected_interval: int) -> bool:
        """Record ``value`` ``count`` times and back-fill missing samples.

        If ``value`` exceeds ``expected_interval`` the recorder was stalled,
        so the values that would have been seen at every ``expected_interval``
        step below ``value`` are recorded as well.
        """
        if not self.record_values(value, count):
            return False

        if expected_interval <= 0 or value <= expected_interval:
            return True

        missing_value = value - expected_interval
        while missing_value >= expected_interval:
            if not self.record_values(missing_value, count):
                return False
            missing_value -= expected_interval

        return True

    def record_value_atomic(self, value: int) -> bool:
        """Thread-safe `record_value`."""
        with self._lock:
            return self.record_values(value, 1)

    def record_values_atomic(self, value: int, count: int) -> bool:
        """Thread-safe `record_values`."""
        with self._lock:
            return self.record_values(value, count)

    def record_corrected_value_atomic(self, value: int, expected_interval: int) -> bool:
        """Thread-safe `record_corrected_value`."""
        with self._lock:
            return self.record_corrected_values(value, 1, expected_interval)

    def record_corrected_values_atomic(
        self, value: int, count: int, expected_interval: int
    ) -> bool:
        """Thread-safe `record_corrected_values`."""
        with self._lock:
            return self.record_corrected_values(value, count, expected_interval)

    def add(self, other: HdrHistogram) -> int:
        """Add every recorded value of ``other`` to this histogram.

        Returns:
            The number of counts dropped because they fall outside this
            histogram's trackable range.
        """
        dropped = 0
        for step in RecordedValuesIterator(other):
            if not self.record_values(step.value, step.count):
                dropped += step.count
        if dropped:
            logger.debug("Dropped %d counts while adding histograms", dropped)
        return dropped

    def add_while_correcting_for_coordinated_omission(
        self, other: HdrHistogram, expected_interval: int
    ) -> int:
        """Like `add`, back-filling every value as `record_corrected_values` does."""
        dropped = 0
        for step in RecordedValuesIterator(other):
            if not self.record_corrected_values(step.value, step.count, expected_interval):
                dropped += step.count
        if dropped:
            logger.debug("Dropped %d counts while adding histograms", dropped)
        return dropped

    def reset(self) -> None:
        """Empty the histogram."""
        self.total_count = 0
        self.min_value = INT64_MAX
        self.max_value = 0
        self._counts.fill(0)

    def reset_internal_counters(self) -> None:
        """Recompute min, max and total count from the counts array.

        Used after counts were imported directly, e.g. by deserialisers.
        """
        counts = self._logical_counts()
        non_zero = np.flatnonzero(counts > 0)

        if non_zero.size == 0:
            self.max_value = 0
            self.min_value = INT64_MAX
            self.total_count = 0
            return

        max_index = int(non_zero[-1])
        self.max_value = self.highest_equivalent_value(self.value_at_index(max_index))

        min_candidates = non_zero[non_zero != 0]
        if min_candidates.size == 0:
            self.min_value = INT64_MAX
        else:
            self.min_value = self.value_at_index(int(min_candidates[0]))

        self.total_count = int(counts[non_zero].sum())

    def load_counts(self, counts: Sequence[int] | Counts) -> None:
        """Replace the counts array and recompute the internal counters.

        Raises:
            ValueError: If ``counts`` does not have exactly ``counts_len`` entries.
        """
        array = np.asarray(counts, dtype=np.int64)
        if array.shape != (self.counts_len,):
            raise ValueError(
                f"Expected {self.counts_len} counts, got shape {array.shape}."
            )
        self._counts = array.copy()
        self.normalizing_index_offset = 0
        self.reset_internal_counters()

    # --- Values ---

    def max(self) -> int:
        """Highest equivalent value of the largest recorded value, 0 if empty."""
        if self.max_value == 0:
            return 0
        return self.highest_equivalent_value(self.max_value)

    def min(self) -> int:
        """Smallest recorded value; ``INT64_MAX`` if nothing was recorded."""
        if self.count_at_index(0) > 0:
            return 0
        if self.min_value == INT64_MAX:
            return INT64_MAX
        return self.lowest_equivalent_value(self.min_value)

    def _count_at_percentile(self, percentile: float) -> int:
        requested_percentile = min(percentile, 100.0)
        count_at_percentile = int(((requested_percentile / 100) * self.total_count) + 0.5)
        return max(count_at_percentile, 1)

    def _value_from_index_up_to_count(self, count_at_percentile: int) -> int:
        cumulative = np.cumsum(self._logical_counts())
        index = int(np.searchsorted(cumulative, count_at_percentile, side="left"))
        if index >= self.counts_len:
            return 0
        return self.value_at_index(index)

    def value_at_percentile(self, percentile: float) -> int:
        """Value at or below which ``percentile`` percent of samples fall."""
        value = self._value_from_index_up_to_count(self._count_at_percentile(percentile))
        if percentile == 0.0:
            return self.lowest_equivalent_value(value)
        return self.highest_equivalent_value(value)

    def value_at_percentiles(self, percentiles: Sequence[float]) -> npt.NDArray[np.int64]:
        """Values at each of the (ascending) ``percentiles`` in one pass.

        Unlike `value_at_percentile`, every result is the highest equivalent
        value, including for the 0th percentile.
        """
        cumulative = np.cumsum(self._logical_counts())
        targets = np.array(
            [self._count_at_percentile(p) for p in percentiles], dtype=np.int64
        )
        indices = np.searchsorted(cumulative, targets, side="left")
        values = [
            self.highest_equivalent_value(
                self.value_at_index(int(i)) if i < self.counts_len else 0
            )
            for i in indices
        ]
        return np.array(values, dtype=np.int64)

    def _recorded(self) -> list[tuple[int, int]]:
        counts = self._logical_counts()
        return [(int(i), int(counts[i])) for i in np.flatnonzero(counts)]

    def mean(self) -> float:
        """Mean of the recorded values; NaN for an empty histogram."""
        if self.total_count == 0:
            return math.nan
        total = sum(
            count * self.median_equivalent_value(self.value_at_index(index))
            for index, count in self._recorded()
        )
        return total / self.total_count

    def stddev(self) -> float:
        """Standard deviation of the recorded values; NaN for an empty histogram."""
        if self.total_count == 0:
            return math.nan
        mean = self.mean()
        geometric_dev_total = 0.0
        for index, count in self._recorded():
            dev = float(self.median_equivalent_value(self.value_at_index(index))) - mean
            geometric_dev_total += (dev * dev) * count
        return math.sqrt(geometric_dev_total / self.total_count)

    # --- Iteration ---

    def iter_all_values(self) -> AllValuesIterator:
        """Iterate over every bucket, recorded or not."""
        return AllValuesIterator(self)

    def iter_recorded(self) -> RecordedValuesIterator:
        """Iterate over the buckets that hold at least one count."""
        return RecordedValuesIterator(self)

    def iter_percentiles(self, ticks_per_half_distance: int) -> PercentileIterator:
        """Iterate over percentile levels, halving the step towards 100%."""
        return PercentileIterator(self, ticks_per_half_distance)

    def iter_linear(self, value_units_per_bucket: int) -> LinearIterator:
        """Iterate in fixed-width value steps."""
        return LinearIterator(self, value_units_per_bucket)

    def iter_log(self, value_units_first_bucket: int, log_base: float) -> LogarithmicIterator:
        """Iterate in exponentially growing value steps."""
        return LogarithmicIterator(self, value_units_first_bucket, log_base)
