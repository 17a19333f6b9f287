"""Validation of the raw inputs to the save flow.

:meth:`SaveOptions.from_raw` is the single place where the tag, file path
and line numbers given on the command line are checked.  It produces either
a validated :class:`SaveOptions` or a :class:`~snippet_manager.errors.SnippetError`
with a short lower-case message.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from snippet_manager.errors import InvalidTagError, SnippetError
from snippet_manager.extractor import extract_all, extract_lines, validate_range

RawLine = Union[str, int, None]

# Optional sign then ASCII digits. No underscores, no other Unicode digits.
_LINE_NUMBER_RE = re.compile(r"[+-]?[0-9]+")


class SaveOptions(BaseModel):
    """Validated parameters for saving a snippet from a file.

    When ``whole_file`` is set, ``start_line`` and ``end_line`` are *None*
    and the entire file is saved.
    """

    model_config = ConfigDict(frozen=True)

    tag: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    start_line: Optional[int] = Field(default=None, ge=1)
    end_line: Optional[int] = Field(default=None, ge=1)
    whole_file: bool = False

    @classmethod
    def from_raw(
        cls,
        tag: Optional[str],
        file_path: Optional[str],
        start_line: RawLine = None,
        end_line: RawLine = None,
        whole_file: bool = False,
    ) -> "SaveOptions":
        """Validate raw inputs and build a SaveOptions.

        ``end_line`` defaults to ``start_line`` when omitted, so a single
        number saves one line.

        Raises:
            InvalidTagError: If the tag is missing or blank.
            InvalidRangeError: If the line range is invalid.
            SnippetError: If the file path is missing or a line number is
                not an integer.
        """
        if tag is None or not tag.strip():
            raise InvalidTagError("tag is required")
        if file_path is None or not file_path.strip():
            raise SnippetError("file path is required")

        if whole_file:
            if _is_given(start_line) or _is_given(end_line):
                raise SnippetError(
                    "line numbers cannot be combined with saving the whole file"
                )
            return cls(tag=tag, file_path=file_path, whole_file=True)

        if not _is_given(start_line):
            raise SnippetError("start line is required")
        start = _parse_line(start_line, "start line must be a number")
        if _is_given(end_line):
            end = _parse_line(end_line, "end line must be a number")
        else:
            end = start

        validate_range(start, end)
        return cls(tag=tag, file_path=file_path, start_line=start, end_line=end)

    def extract(self) -> str:
        """Read the selected code from :attr:`file_path`."""
        if self.whole_file:
            return extract_all(self.file_path)
        if self.start_line is None or self.end_line is None:
            raise SnippetError("start line is required")
        return extract_lines(self.file_path, self.start_line, self.end_line)

    def describe_range(self) -> str:
        """Short human-readable form of the selection, e.g. ``lines 3-7``."""
        if self.whole_file:
            return "whole file"
        if self.start_line == self.end_line:
            return f"line {self.start_line}"
        return f"lines {self.start_line}-{self.end_line}"


def _is_given(value: RawLine) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _parse_line(value: RawLine, message: str) -> int:
    if isinstance(value, bool):
        raise SnippetError(message)
    if isinstance(value, int):
        return value
    text = str(value)
    if not _LINE_NUMBER_RE.fullmatch(text):
        raise SnippetError(message)
    return int(text, 10)
