"""Cross-platform abstractions for Linkshelf.

Detects the runtime platform once at import time and provides
platform-appropriate paths and clipboard tools. Every other module
imports from here instead of doing its own platform detection.

Supported platforms:
  - linux   (native Linux)
  - wsl     (Windows Subsystem for Linux)
  - macos   (macOS / Darwin)
  - windows (native Windows)
"""

from __future__ import annotations

import base64
import os
import platform
import shutil
import subprocess
import sys
from pathlib import Path

from .log import logger

# ---------------------------------------------------------------------------
# Platform detection (runs once at import time)
# ---------------------------------------------------------------------------

_system = platform.system()  # "Linux", "Darwin", "Windows"

try:
    _uname_release = platform.uname().release.lower()
except OSError:
    _uname_release = ""

IS_WINDOWS = _system == "Windows"
IS_MACOS = _system == "Darwin"
IS_LINUX = _system == "Linux"
IS_WSL = IS_LINUX and "microsoft" in _uname_release

if IS_WINDOWS:
    PLATFORM = "windows"
elif IS_WSL:
    PLATFORM = "wsl"
elif IS_MACOS:
    PLATFORM = "macos"
else:
    PLATFORM = "linux"

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def linkshelf_home() -> Path:
    """Return the Linkshelf config/data directory.

    ``$LINKSHELF_HOME`` when set, otherwise ``~/.linkshelf`` on every platform.
    """
    override = os.environ.get("LINKSHELF_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".linkshelf"


def linkshelf_file(name: str) -> Path:
    """Return ``<linkshelf_home>/<name>``."""
    return linkshelf_home() / name


# ---------------------------------------------------------------------------
# Clipboard
# ---------------------------------------------------------------------------


# (command, text encoding) pairs, tried in order until one succeeds.
_CLIPBOARD_COMMANDS: dict[str, list[tuple[list[str], str]]] = {
    "wsl": [(["clip.exe"], "utf-16-le")],
    "windows": [(["clip.exe"], "utf-8")],
    "macos": [(["pbcopy"], "utf-8")],
    "linux": [
        (["wl-copy"], "utf-8"),
        (["xclip", "-selection", "clipboard"], "utf-8"),
        (["xsel", "--clipboard", "--input"], "utf-8"),
    ],
}

_CLIPBOARD_TIMEOUT = 2


def clipboard_commands() -> list[list[str]]:
    """Clipboard tools for this platform that are installed, best first."""
    return [
        cmd for cmd, _ in _CLIPBOARD_COMMANDS[PLATFORM] if shutil.which(cmd[0])
    ]


def _pipe_to(cmd: list[str], data: bytes) -> bool:
    try:
        subprocess.run(
            cmd,
            input=data,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=_CLIPBOARD_TIMEOUT,
        )
    except (subprocess.SubprocessError, OSError):
        logger.debug("clipboard via %s failed", cmd[0], exc_info=True)
        return False
    return True


def platform_clipboard_write(text: str) -> bool:
    """Copy *text* with the platform's native clipboard tool.

    Returns False when no tool is installed or every tool failed.
    """
    for cmd, encoding in _CLIPBOARD_COMMANDS[PLATFORM]:
        if shutil.which(cmd[0]) and _pipe_to(cmd, text.encode(encoding)):
            return True
    return False


def terminal_clipboard_write(text: str) -> bool:
    """Copy *text* via the OSC 52 terminal escape.

    The terminal gives no acknowledgement, so success only means the
    escape sequence was written to a real terminal.
    """
    out = sys.__stdout__
    if out is None or not out.isatty():
        return False
    payload = base64.b64encode(text.encode()).decode()
    try:
        out.write(f"\033]52;c;{payload}\a")
        out.flush()
    except OSError:
        logger.debug("OSC 52 clipboard write failed", exc_info=True)
        return False
    return True


# ---------------------------------------------------------------------------
# Path display helpers
# ---------------------------------------------------------------------------


def abbreviate_home(path_str: str) -> str:
    """Replace the user's home directory prefix with ``~``."""
    home = str(Path.home())
    if path_str.startswith(home):
        return "~" + path_str[len(home) :]
    return path_str
