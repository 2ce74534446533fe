"""Clipboard capability with tiered fallbacks.

Tries, in order:
1. the host's native clipboard over the bridge,
2. the platform clipboard tool (pbcopy, wl-copy, xclip, xsel, clip.exe),
3. the OSC 52 terminal escape.

A tier that fails or raises is skipped; only running out of tiers is a
failure.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from .bridge import CLIPBOARD_WRITE, HostBridge
from .log import logger
from .platform import platform_clipboard_write, terminal_clipboard_write

ClipboardWriter = Callable[[str], bool]


@runtime_checkable
class ClipboardCapability(Protocol):
    async def write(self, text: str) -> bool: ...


class TieredClipboard:
    """Clipboard writer that falls through a list of methods."""

    def __init__(
        self,
        bridge: HostBridge | None = None,
        fallbacks: Sequence[ClipboardWriter] | None = None,
    ) -> None:
        if bridge is not None and not bridge.handles(CLIPBOARD_WRITE):
            bridge = None
        self._bridge = bridge
        if fallbacks is None:
            fallbacks = (platform_clipboard_write, terminal_clipboard_write)
        self._fallbacks = tuple(fallbacks)

    async def write(self, text: str) -> bool:
        if self._bridge is not None:
            try:
                if await self._bridge.invoke(CLIPBOARD_WRITE, text):
                    return True
            except Exception:
                logger.debug("host clipboard write failed", exc_info=True)

        for writer in self._fallbacks:
            try:
                if writer(text):
                    return True
            except Exception:
                logger.debug(
                    "clipboard fallback %s failed",
                    getattr(writer, "__name__", writer),
                    exc_info=True,
                )
        return False
