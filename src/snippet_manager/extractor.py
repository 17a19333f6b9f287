"""Line-range extraction from text files.

Line numbers are 1-based and inclusive on both ends.  The start line is
checked strictly against the file's length, while an end line past the end
of the file is clipped to the last line.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from snippet_manager.errors import (
    InsufficientLinesError,
    InvalidRangeError,
    StorageIOError,
)

logger = logging.getLogger(__name__)


def validate_range(start_line: int, end_line: int) -> None:
    """Raise InvalidRangeError unless ``1 <= start_line <= end_line``."""
    if start_line < 1:
        raise InvalidRangeError(start_line, end_line)
    if end_line < start_line:
        raise InvalidRangeError(start_line, end_line)


def extract_lines(
    path: str | os.PathLike[str],
    start_line: int,
    end_line: int,
) -> str:
    """Return lines ``start_line`` through ``end_line`` of *path*.

    Lines are returned without their terminators and joined with ``\\n``.
    Reading stops at the first line past *end_line*.

    Raises:
        InvalidRangeError: If the range is invalid.  The file is not opened.
        InsufficientLinesError: If the file has fewer than *start_line* lines.
        StorageIOError: If the file cannot be opened, read, or decoded.
    """
    validate_range(start_line, end_line)

    file_path = Path(path)
    selected: list[str] = []
    line_count = 0
    try:
        with open(file_path, "r", encoding="utf-8", newline="\n") as fp:
            for line_count, line in enumerate(fp, start=1):
                if line_count > end_line:
                    break
                if line_count >= start_line:
                    selected.append(_strip_terminator(line))
    except FileNotFoundError as exc:
        raise StorageIOError(str(file_path), "error opening file") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageIOError(str(file_path), "error reading file") from exc

    if line_count < start_line:
        raise InsufficientLinesError(line_count, start_line)

    if line_count < end_line:
        logger.debug(
            "%s has %d lines; clipping requested end line %d",
            file_path,
            line_count,
            end_line,
        )
    return "\n".join(selected)


def extract_all(path: str | os.PathLike[str]) -> str:
    """Return the entire content of *path* verbatim."""
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8", newline="") as fp:
            return fp.read()
    except FileNotFoundError as exc:
        raise StorageIOError(str(file_path), "error opening file") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageIOError(str(file_path), "error reading file") from exc


def _strip_terminator(line: str) -> str:
    """Drop a trailing ``\\n`` or ``\\r\\n`` from *line*."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line
