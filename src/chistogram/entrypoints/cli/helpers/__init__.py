"""CLI helpers for CHISTOGRAM.

Message emitters that write to stderr with emoji-to-ASCII fallbacks, and the
parser for ``NAME=LEVEL`` logger options.
"""

from .log_level_parser import parse_log_level
from .messages import error, warn

__all__ = ["error", "parse_log_level", "warn"]
