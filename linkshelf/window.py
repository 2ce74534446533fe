"""Window and application capabilities as seen from the data layer.

With a host bridge every call is a round trip to the host process. Heights
coming back are clamped with the stored-preference bounds (420..900), not
the host's own looser floor; see :mod:`linkshelf.preferences`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .bridge import (
    APP_QUIT,
    WINDOW_CENTER,
    WINDOW_GET_ALWAYS_ON_TOP,
    WINDOW_GET_HEIGHT,
    WINDOW_SET_ALWAYS_ON_TOP,
    WINDOW_SET_HEIGHT,
    HostBridge,
)
from .preferences import (
    DEFAULT_ALWAYS_ON_TOP,
    DEFAULT_WINDOW_HEIGHT,
    clamp_window_height,
)


@runtime_checkable
class WindowCapability(Protocol):
    async def get_height(self) -> int: ...

    async def set_height(self, height: float) -> int: ...

    async def get_always_on_top(self) -> bool: ...

    async def set_always_on_top(self, value: bool) -> bool: ...

    async def center(self) -> None: ...


@runtime_checkable
class AppCapability(Protocol):
    async def quit(self) -> None: ...


def _as_number(value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return float("nan")


class BridgeWindow:
    """Window controlled by the host process."""

    def __init__(self, bridge: HostBridge) -> None:
        self._bridge = bridge

    async def get_height(self) -> int:
        result = await self._bridge.invoke(WINDOW_GET_HEIGHT)
        return clamp_window_height(_as_number(result))

    async def set_height(self, height: float) -> int:
        next_height = clamp_window_height(height)
        result = await self._bridge.invoke(WINDOW_SET_HEIGHT, next_height)
        return clamp_window_height(_as_number(result))

    async def get_always_on_top(self) -> bool:
        return bool(await self._bridge.invoke(WINDOW_GET_ALWAYS_ON_TOP))

    async def set_always_on_top(self, value: bool) -> bool:
        return bool(await self._bridge.invoke(WINDOW_SET_ALWAYS_ON_TOP, bool(value)))

    async def center(self) -> None:
        await self._bridge.invoke(WINDOW_CENTER)


class HeadlessWindow:
    """Stand-in when no host owns a window.

    Remembers the last requested height. There is nothing to pin, so the
    pin state always reads as the default.
    """

    def __init__(self) -> None:
        self._height = DEFAULT_WINDOW_HEIGHT

    async def get_height(self) -> int:
        return self._height

    async def set_height(self, height: float) -> int:
        self._height = clamp_window_height(height)
        return self._height

    async def get_always_on_top(self) -> bool:
        return DEFAULT_ALWAYS_ON_TOP

    async def set_always_on_top(self, value: bool) -> bool:
        return bool(value)

    async def center(self) -> None:
        return None


class BridgeApp:
    def __init__(self, bridge: HostBridge) -> None:
        self._bridge = bridge

    async def quit(self) -> None:
        await self._bridge.invoke(APP_QUIT)


class NullApp:
    """Nothing to quit without a host."""

    async def quit(self) -> None:
        return None
