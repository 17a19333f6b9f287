"""Exception hierarchy for the snippet manager.

Every failure the core can produce is a subclass of :class:`SnippetError`,
so the CLI can report any of them with a single ``except`` clause.  Each
exception keeps the values that caused it as attributes, alongside a
human-readable message.
"""

from __future__ import annotations

from typing import Optional


class SnippetError(Exception):
    """Base class for all snippet manager errors."""


class InvalidTagError(SnippetError, ValueError):
    """Raised when a tag is empty or otherwise unusable."""


class DuplicateTagError(SnippetError):
    """Raised when inserting a snippet whose tag already exists."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(
            f"Tag '{tag}' already exists. Please use a different tag."
        )


class SnippetNotFoundError(SnippetError, KeyError):
    """Raised when no snippet carries the requested tag."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(tag)

    def __str__(self) -> str:
        return f"Snippet with tag '{self.tag}' not found"


class CorruptStoreError(SnippetError):
    """Raised when the persisted store cannot be parsed or validated."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Error parsing snippets file {path}: {reason}")


class InvalidRangeError(SnippetError, ValueError):
    """Raised for a line range with ``start < 1`` or ``end < start``."""

    def __init__(self, start: int, end: int, message: Optional[str] = None) -> None:
        self.start = start
        self.end = end
        if message is None:
            if start < 1:
                message = "start line must be greater than 0"
            else:
                message = "end line cannot be less than start line"
        super().__init__(message)


class InsufficientLinesError(SnippetError):
    """Raised when a file has fewer lines than the requested start line."""

    def __init__(self, actual: int, requested_start: int) -> None:
        self.actual = actual
        self.requested_start = requested_start
        super().__init__(
            f"file has only {actual} lines, requested start line was {requested_start}"
        )


class StorageIOError(SnippetError):
    """Raised when a file cannot be opened, read, or written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class ClipboardError(SnippetError):
    """Raised when no clipboard tool accepted the text."""
