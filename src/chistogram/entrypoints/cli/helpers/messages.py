"""Terminal message helpers for the CHISTOGRAM CLI.

Each helper writes one bold, colored line to stderr, prefixed by a glyph. The
glyph is an emoji when the stream's encoding can represent it and an ASCII
marker otherwise, so stdout stays usable for reports and JSON.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def glyph(choice: tuple[str, str]) -> str:
    """Return the emoji of ``choice`` if stderr can encode it, else its fallback.

    Args:
        choice: An ``(emoji, ascii_fallback)`` pair.
    """
    emoji, fallback = choice
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        emoji.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return fallback
    return emoji


def _emit(choice: tuple[str, str], msg: str, color: str) -> None:
    click.secho(f"{glyph(choice)}  {msg}", fg=color, bold=True, err=True)


def warn(msg: str) -> None:
    """Emit a yellow warning line, e.g. ``⚠️  3 samples could not be recorded``."""
    _emit(CAUTION, msg, "yellow")


def error(msg: str) -> None:
    """Emit a red error line, e.g. ``❌  Package (cfoo) not found in registry``."""
    _emit(ERROR, msg, "red")
