"""Exceptions raised while parsing article text."""

from __future__ import annotations


class ParseError(Exception):
    """Raised when article text cannot be parsed.

    Attributes:
        source: File path or "<string>"
        line: 1-based line number the problem was found at, if known
    """

    def __init__(self, message: str, source: str = "<string>", line: int | None = None):
        self.source = source
        self.line = line
        location = f"{source}:{line}" if line is not None else source
        super().__init__(f"{location}: {message}")
        self.reason = message


class UnclosedFenceError(ParseError):
    """Raised when a fenced code block is opened but never closed."""
