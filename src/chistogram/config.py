"""Configuration utilities for CHISTOGRAM.

This module centralizes the environment variables that set the default range
and precision of histograms created by the CLI.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

LOWEST_ENV_VAR = "CHISTOGRAM_LOWEST_DISCERNIBLE_VALUE"  # pragma: no mutate
HIGHEST_ENV_VAR = "CHISTOGRAM_HIGHEST_TRACKABLE_VALUE"  # pragma: no mutate
SIGNIFICANT_FIGURES_ENV_VAR = "CHISTOGRAM_SIGNIFICANT_FIGURES"  # pragma: no mutate

DEFAULT_LOWEST_DISCERNIBLE_VALUE = 1
DEFAULT_HIGHEST_TRACKABLE_VALUE = 3_600_000_000  # one hour in microseconds
DEFAULT_SIGNIFICANT_FIGURES = 3


class InvalidSettingError(Exception):
    """Raised when a CHISTOGRAM_* environment variable holds an invalid value."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"{name} must be an integer, got {value!r}")
        self.name = name
        self.value = value


@dataclass(frozen=True, slots=True)
class HistogramSettings:
    """Default histogram range and precision."""

    lowest_discernible_value: int = DEFAULT_LOWEST_DISCERNIBLE_VALUE
    highest_trackable_value: int = DEFAULT_HIGHEST_TRACKABLE_VALUE
    significant_figures: int = DEFAULT_SIGNIFICANT_FIGURES


def _int_from_env(environ: Mapping[str, str], name: str, default: int) -> int:
    if not (raw := environ.get(name, "").strip()):
        return default
    try:
        return int(raw.replace("_", ""))
    except ValueError as e:
        raise InvalidSettingError(name, raw) from e


def get_histogram_settings(environ: Mapping[str, str] | None = None) -> HistogramSettings:
    """Read histogram defaults from the environment.

    Args:
        environ: Mapping to read from; defaults to `os.environ`. Unset or empty
            variables fall back to the built-in defaults.

    Returns:
        The resolved `HistogramSettings`.

    Raises:
        InvalidSettingError: If a variable is set but is not an integer.
    """
    env = os.environ if environ is None else environ
    return HistogramSettings(
        lowest_discernible_value=_int_from_env(
            env, LOWEST_ENV_VAR, DEFAULT_LOWEST_DISCERNIBLE_VALUE
        ),
        highest_trackable_value=_int_from_env(
            env, HIGHEST_ENV_VAR, DEFAULT_HIGHEST_TRACKABLE_VALUE
        ),
        significant_figures=_int_from_env(
            env, SIGNIFICANT_FIGURES_ENV_VAR, DEFAULT_SIGNIFICANT_FIGURES
        ),
    )
