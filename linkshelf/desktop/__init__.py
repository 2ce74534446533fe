"""Linkshelf desktop host (the host side of the bridge).

``linkshelf.desktop.qt`` holds the PySide6 parts; importing this package
alone does not load Qt.
"""

from .host import WINDOW_WIDTH, DesktopHost, WindowAdapter, clamp_host_height

__all__ = [
    "WINDOW_WIDTH",
    "DesktopHost",
    "WindowAdapter",
    "clamp_host_height",
]
