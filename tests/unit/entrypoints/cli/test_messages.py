"""Unit tests for :mod:`chistogram.entrypoints.cli.helpers.messages`.

This suite verifies that:

1) Emoji/ASCII glyph selection follows the *current* stderr encoding
   reported by ``click.get_text_stream("stderr")``.
2) ``warn``/``error`` emit styled lines to stderr and leave
   stdout alone.
"""

import io
import sys

import click
import pytest

from chistogram.entrypoints.cli.helpers.messages import (
    CAUTION,
    ERROR,
    error,
    glyph,
    warn,
)

SET_YELLOW = "\x1b[33m"
SET_RED = "\x1b[31m"
SET_BOLD = "\x1b[1m"
RESET = "\x1b[0m"


class FakeTTY(io.StringIO):
    """A text stream that claims to be a TTY with a chosen encoding."""

    def __init__(self, encoding: str):
        super().__init__()
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        """Declared character encoding (e.g. ``'ascii'`` or ``'utf-8'``)."""
        return self._encoding

    def isatty(self) -> bool:
        """Report a TTY so that Click keeps ANSI styling."""
        return True


@pytest.mark.parametrize(
    ("encoding", "expected"),
    [
        ("ascii", ["[!]", "[X]"]),
        ("utf-8", ["⚠️", "❌"]),
        ("no-such-codec", ["[!]", "[X]"]),
    ],
)
def test_glyphs_respect_stream_encoding(monkeypatch, encoding, expected):
    stream = FakeTTY(encoding)
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)
    assert [glyph(CAUTION), glyph(ERROR)] == expected


def test_glyph_requeries_stream_each_call(monkeypatch):
    encodings = iter(["ascii", "utf-8"])
    monkeypatch.setattr(click, "get_text_stream", lambda name: FakeTTY(next(encodings)))
    assert glyph(CAUTION) == "[!]"
    assert glyph(CAUTION) == "⚠️"


@pytest.mark.parametrize(
    ("encoding", "expected_glyph", "color_code", "func"),
    [
        ("ascii", "[!]", SET_YELLOW, warn),
        ("utf-8", "⚠️", SET_YELLOW, warn),
        ("ascii", "[X]", SET_RED, error),
        ("utf-8", "❌", SET_RED, error),
    ],
)
def test_messages_emit_styled_stderr(monkeypatch, encoding, expected_glyph, color_code, func):
    stream = FakeTTY(encoding)
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)
    monkeypatch.setattr(sys, "stderr", stream, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("CLICOLOR", "1")

    func("3 samples dropped")

    out = stream.getvalue()
    assert f"{expected_glyph}  3 samples dropped" in out
    assert SET_BOLD in out
    assert color_code in out
    assert RESET in out


def test_warn_writes_to_stderr_only(monkeypatch, capsys):
    monkeypatch.setattr(click, "get_text_stream", lambda name: FakeTTY("utf-8"))
    warn("danger!")
    captured = capsys.readouterr()
    assert "danger!" in captured.err
    assert captured.out == ""
