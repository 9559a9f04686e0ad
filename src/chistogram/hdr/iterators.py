"""Iterators over the contents of an `HdrHistogram`.

Each iterator walks the counts array of a histogram and yields an immutable
`IterationValue` per step. They differ only in when a step is reported:

* `AllValuesIterator` - every bucket, including empty ones.
* `RecordedValuesIterator` - only buckets with a non-zero count.
* `PercentileIterator` - at percentile levels whose spacing halves every
  time the remaining distance to 100% halves.
* `LinearIterator` - at fixed-width value levels.
* `LogarithmicIterator` - at value levels growing by a constant factor.

The iterators snapshot the histogram's total count when created; recording
into the histogram while iterating gives undefined (but safe) results.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .histogram import HdrHistogram

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True, slots=True)
class IterationValue:
    """Snapshot of an iterator's state after one step."""

    value: int
    count: int
    cumulative_count: int
    total_count: int
    lowest_equivalent_value: int
    highest_equivalent_value: int
    median_equivalent_value: int
    value_iterated_from: int
    value_iterated_to: int
    count_added_in_this_iteration_step: int
    percentile: float
    percentile_level_iterated_to: float


class AllValuesIterator(Iterator[IterationValue]):
    """Visit every index of the counts array in order."""

    def __init__(self, histogram: HdrHistogram) -> None:
        self.histogram = histogram
        self.counts_index = -1
        self.total_count = histogram.total_count
        self.count = 0
        self.cumulative_count = 0
        self.value = 0
        self.highest_equivalent_value = 0
        self.lowest_equivalent_value = 0
        self.median_equivalent_value = 0
        self.value_iterated_from = 0
        self.value_iterated_to = 0
        self.count_added_in_this_iteration_step = 0

    def __iter__(self) -> AllValuesIterator:
        return self

    def __next__(self) -> IterationValue:
        if not self._advance():
            raise StopIteration
        return self._snapshot()

    # --- Step mechanics shared by all iterators ---

    def _has_buckets(self) -> bool:
        return self.counts_index < self.histogram.counts_len

    def _has_next(self) -> bool:
        return self.cumulative_count < self.total_count

    def _move_next(self) -> bool:
        self.counts_index += 1

        if not self._has_buckets():
            return False

        h = self.histogram
        self.count = h.count_at_index(self.counts_index)
        self.cumulative_count += self.count

        value = h.value_at_index(self.counts_index)
        bucket_index = h.bucket_index(value)
        sub_bucket_index = h.sub_bucket_index(value, bucket_index)
        leq = h._value_from_index(bucket_index, sub_bucket_index)  # pylint: disable=protected-access
        size = h._size_of_range_given_indices(bucket_index, sub_bucket_index)  # pylint: disable=protected-access

        self.lowest_equivalent_value = leq
        self.value = value
        self.highest_equivalent_value = leq + size - 1
        self.median_equivalent_value = leq + (size >> 1)
        return True

    def _basic_next(self) -> bool:
        if not self._has_next() or self.counts_index >= self.histogram.counts_len:
            return False
        self._move_next()
        return True

    def _next_value_greater_than(self, reporting_level_upper_bound: int) -> bool:
        if self.counts_index >= self.histogram.counts_len:
            return False
        next_value = self.histogram.value_at_index(self.counts_index + 1)
        return next_value > reporting_level_upper_bound

    def _update_iterated_values(self, new_value_iterated_to: int) -> None:
        self.value_iterated_from = self.value_iterated_to
        self.value_iterated_to = new_value_iterated_to

    def _percentile(self) -> float:
        if self.total_count == 0:
            return 100.0
        return (100.0 * self.cumulative_count) / self.total_count

    def _percentile_level_iterated_to(self) -> float:
        return self._percentile()

    def _snapshot(self) -> IterationValue:
        return IterationValue(
            value=self.value,
            count=self.count,
            cumulative_count=self.cumulative_count,
            total_count=self.total_count,
            lowest_equivalent_value=self.lowest_equivalent_value,
            highest_equivalent_value=self.highest_equivalent_value,
            median_equivalent_value=self.median_equivalent_value,
            value_iterated_from=self.value_iterated_from,
            value_iterated_to=self.value_iterated_to,
            count_added_in_this_iteration_step=self.count_added_in_this_iteration_step,
            percentile=self._percentile(),
            percentile_level_iterated_to=self._percentile_level_iterated_to(),
        )

    def _advance(self) -> bool:
        if not self._move_next():
            return False
        self._update_iterated_values(self.value)
        self.count_added_in_this_iteration_step = self.count
        return True


class RecordedValuesIterator(AllValuesIterator):
    """Visit only the indices holding a non-zero count."""

    def _advance(self) -> bool:
        while self._basic_next():
            if self.count != 0:
                self._update_iterated_values(self.value)
                self.count_added_in_this_iteration_step = self.count
                return True
        return False


class PercentileIterator(AllValuesIterator):
    """Report values at percentile levels.

    The step between reported levels is ``100 / (ticks * 2**k)`` where ``k``
    grows by one every time the distance to 100% halves, so the tail of the
    distribution is reported in increasing detail. The final step always
    reports the 100th percentile.
    """

    def __init__(self, histogram: HdrHistogram, ticks_per_half_distance: int) -> None:
        if ticks_per_half_distance < 1:
            raise ValueError("ticks_per_half_distance must be >= 1")
        super().__init__(histogram)
        self.seen_last_value = False
        self.ticks_per_half_distance = ticks_per_half_distance
        self.percentile_to_iterate_to = 0.0
        self.percentile = 0.0

    def _percentile_level_iterated_to(self) -> float:
        return self.percentile

    def _next_step_size(self) -> float:
        remaining = 100.0 - self.percentile_to_iterate_to
        if remaining <= 0.0:
            return 0.0
        temp = int(math.log2(100.0 / remaining)) + 1
        half_distance = 2**temp
        return 100.0 / (self.ticks_per_half_distance * half_distance)

    def _advance(self) -> bool:
        if not self._has_next():
            if self.seen_last_value:
                return False
            self.seen_last_value = True
            self.percentile = 100.0
            return True

        if self.counts_index == -1 and not self._basic_next():
            return False

        while True:
            current_percentile = (100.0 * self.cumulative_count) / self.total_count
            if self.count != 0 and self.percentile_to_iterate_to <= current_percentile:
                self._update_iterated_values(
                    self.histogram.highest_equivalent_value(self.value)
                )
                self.percentile = self.percentile_to_iterate_to
                self.percentile_to_iterate_to += self._next_step_size()
                return True
            if not self._basic_next():
                return True


class LinearIterator(AllValuesIterator):
    """Report counts in value steps of ``value_units_per_bucket``."""

    def __init__(self, histogram: HdrHistogram, value_units_per_bucket: int) -> None:
        if value_units_per_bucket < 1:
            raise ValueError("value_units_per_bucket must be >= 1")
        super().__init__(histogram)
        self.value_units_per_bucket = value_units_per_bucket
        self.next_value_reporting_level = value_units_per_bucket
        self.next_value_reporting_level_lowest_equivalent = (
            histogram.lowest_equivalent_value(value_units_per_bucket)
        )

    def _next_reporting_level(self) -> int:
        return self.next_value_reporting_level + self.value_units_per_bucket

    def _advance(self) -> bool:
        self.count_added_in_this_iteration_step = 0

        if not (
            self._has_next()
            or self._next_value_greater_than(
                self.next_value_reporting_level_lowest_equivalent
            )
        ):
            return False

        while True:
            if self.value >= self.next_value_reporting_level_lowest_equivalent:
                self._update_iterated_values(self.next_value_reporting_level)
                self.next_value_reporting_level = self._next_reporting_level()
                self.next_value_reporting_level_lowest_equivalent = (
                    self.histogram.lowest_equivalent_value(self.next_value_reporting_level)
                )
                return True

            if not self._move_next():
                return True

            self.count_added_in_this_iteration_step += self.count


class LogarithmicIterator(LinearIterator):
    """Report counts in value steps growing by a factor of ``log_base``."""

    def __init__(
        self,
        histogram: HdrHistogram,
        value_units_first_bucket: int,
        log_base: float,
    ) -> None:
        if log_base < 2:
            raise ValueError("log_base must be >= 2")
        super().__init__(histogram, value_units_first_bucket)
        self.log_base = log_base

    def _next_reporting_level(self) -> int:
        return self.next_value_reporting_level * int(self.log_base)
