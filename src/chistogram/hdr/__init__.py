"""HDR histogram for CHISTOGRAM."""

from .bucket_config import BucketConfig, calculate_bucket_config
from .errors import HistogramError, HistogramIOError, InvalidBucketConfigError
from .histogram import HdrHistogram
from .iterators import (
    AllValuesIterator,
    IterationValue,
    LinearIterator,
    LogarithmicIterator,
    PercentileIterator,
    RecordedValuesIterator,
)
from .printing import FormatType, percentiles_print

__all__ = [
    "AllValuesIterator",
    "BucketConfig",
    "FormatType",
    "HdrHistogram",
    "HistogramError",
    "HistogramIOError",
    "InvalidBucketConfigError",
    "IterationValue",
    "LinearIterator",
    "LogarithmicIterator",
    "PercentileIterator",
    "RecordedValuesIterator",
    "calculate_bucket_config",
    "percentiles_print",
]
