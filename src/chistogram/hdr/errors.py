"""Errors raised by the HDR histogram."""

# ============================================================================
#                           General histogram errors
# ============================================================================


class HistogramError(Exception):
    """Base class for histogram errors."""


# ============================================================================
#                           Configuration errors
# ============================================================================


class InvalidBucketConfigError(HistogramError):
    """Raised when the requested range or precision cannot be represented."""

    def __init__(
        self,
        lowest_discernible_value: int,
        highest_trackable_value: int,
        significant_figures: int,
        reason: str,
    ) -> None:
        super().__init__(
            f"Invalid bucket configuration (lowest={lowest_discernible_value}, "
            f"highest={highest_trackable_value}, "
            f"significant_figures={significant_figures}): {reason}"
        )
        self.lowest_discernible_value = lowest_discernible_value
        self.highest_trackable_value = highest_trackable_value
        self.significant_figures = significant_figures
        self.reason = reason


# ============================================================================
#                               I/O errors
# ============================================================================


class HistogramIOError(HistogramError):
    """Raised when a histogram report cannot be written to its stream."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to write histogram report: {reason}")
        self.reason = reason
