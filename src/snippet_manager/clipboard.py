"""System clipboard access through platform command-line tools.

Detects the platform once at import time and pipes text into the first
available clipboard tool:

  - macOS   pbcopy
  - Windows clip.exe
  - WSL     clip.exe (UTF-16LE)
  - Linux   wl-copy, xclip, xsel
"""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess

from snippet_manager.errors import ClipboardError

logger = logging.getLogger(__name__)

_system = platform.system()

try:
    _uname_release = platform.uname().release.lower()
except OSError:
    _uname_release = ""

IS_WINDOWS = _system == "Windows"
IS_MACOS = _system == "Darwin"
IS_WSL = _system == "Linux" and "microsoft" in _uname_release

# Seconds to wait for a clipboard tool before giving up.
CLIPBOARD_TIMEOUT = 2

LINUX_CLIPBOARD_COMMANDS = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
)


def clipboard_commands() -> list[tuple[tuple[str, ...], str]]:
    """Return ``(command, encoding)`` pairs to try on this platform."""
    if IS_WSL:
        return [(("clip.exe",), "utf-16-le")]
    if IS_WINDOWS:
        return [(("clip.exe",), "utf-8")]
    if IS_MACOS:
        return [(("pbcopy",), "utf-8")]
    return [(cmd, "utf-8") for cmd in LINUX_CLIPBOARD_COMMANDS]


def copy_to_clipboard(text: str) -> str:
    """Place *text* on the system clipboard.

    Returns the name of the tool that accepted the text.

    Raises:
        ClipboardError: If no clipboard tool is installed or all of them fail.
    """
    tried: list[str] = []
    for cmd, encoding in clipboard_commands():
        if not shutil.which(cmd[0]):
            continue
        tried.append(cmd[0])
        try:
            subprocess.run(
                list(cmd),
                input=text.encode(encoding),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=CLIPBOARD_TIMEOUT,
            )
        except (subprocess.SubprocessError, OSError):
            logger.debug("Clipboard via %s failed", cmd[0], exc_info=True)
            continue
        logger.debug("Copied %d characters via %s", len(text), cmd[0])
        return cmd[0]

    if not tried:
        raise ClipboardError("Error copying to clipboard: no clipboard tool found")
    raise ClipboardError(
        f"Error copying to clipboard: {', '.join(tried)} failed"
    )
