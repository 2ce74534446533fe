"""Host side of the bridge: storage, clipboard, window and quit handlers.

The desktop shell constructs one :class:`DesktopHost`, hands it its window
(any :class:`WindowAdapter`) and calls :meth:`DesktopHost.attach` on the
bridge the data layer will use.

The host clamps live window heights to ``[HOST_MIN_WINDOW_HEIGHT,
MAX_WINDOW_HEIGHT]`` (120..900), lower than the 420 floor the data layer
applies to stored preferences. The host also persists height and pin state
itself, merging into whatever preferences object is stored without
sanitizing the other fields.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from ..bridge import (
    APP_QUIT,
    CLIPBOARD_WRITE,
    STORE_GET,
    STORE_SET,
    WINDOW_CENTER,
    WINDOW_GET_ALWAYS_ON_TOP,
    WINDOW_GET_HEIGHT,
    WINDOW_SET_ALWAYS_ON_TOP,
    WINDOW_SET_HEIGHT,
    ChannelBridge,
)
from ..log import logger
from ..persistence import HostStore
from ..preferences import (
    DEFAULT_WINDOW_HEIGHT,
    HOST_MIN_WINDOW_HEIGHT,
    MAX_WINDOW_HEIGHT,
    PREFERENCES_KEY,
    clamp_window_height,
    sanitize_always_on_top,
)

WINDOW_WIDTH = 380


class WindowAdapter(Protocol):
    """The few window operations the host needs."""

    def content_height(self) -> int: ...

    def set_content_size(self, width: int, height: int) -> None: ...

    def is_always_on_top(self) -> bool: ...

    def set_always_on_top(self, value: bool) -> None: ...

    def center(self) -> None: ...


def clamp_host_height(height: Any) -> int:
    """Clamp a live window height with the host's looser floor."""
    return clamp_window_height(
        height, minimum=HOST_MIN_WINDOW_HEIGHT, maximum=MAX_WINDOW_HEIGHT
    )


def _to_number(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return float("nan")
    return value


class DesktopHost:
    """Serves every bridge channel from a :class:`HostStore` and a window."""

    def __init__(
        self,
        store: HostStore,
        clipboard_writer: Callable[[str], Any],
        quit_app: Callable[[], Any],
        window: WindowAdapter | None = None,
    ) -> None:
        self.store = store
        self.window = window
        self._clipboard_writer = clipboard_writer
        self._quit_app = quit_app

    def attach(self, bridge: ChannelBridge) -> None:
        """Register every handler on *bridge*."""
        bridge.handle(STORE_GET, self.store_get)
        bridge.handle(STORE_SET, self.store_set)
        bridge.handle(CLIPBOARD_WRITE, self.clipboard_write)
        bridge.handle(APP_QUIT, self.quit)
        bridge.handle(WINDOW_GET_HEIGHT, self.get_height)
        bridge.handle(WINDOW_SET_HEIGHT, self.set_height)
        bridge.handle(WINDOW_GET_ALWAYS_ON_TOP, self.get_always_on_top)
        bridge.handle(WINDOW_SET_ALWAYS_ON_TOP, self.set_always_on_top)
        bridge.handle(WINDOW_CENTER, self.center)

    # -- stored window preferences --------------------------------------------

    def _save_preferences(self, **values: Any) -> None:
        preferences = self.store.get_object(PREFERENCES_KEY)
        preferences.update(values)
        self.store.set(PREFERENCES_KEY, preferences)

    def initial_height(self) -> int:
        """Height to open the window with, from stored preferences."""
        stored = self.store.get_object(PREFERENCES_KEY).get("windowHeight")
        return clamp_host_height(_to_number(stored))

    def initial_always_on_top(self) -> bool:
        stored = self.store.get_object(PREFERENCES_KEY).get("alwaysOnTop")
        return sanitize_always_on_top(stored)

    def window_resized(self, height: float) -> None:
        """Record a user resize. Callers debounce; every call writes."""
        self._save_preferences(windowHeight=clamp_host_height(height))

    # -- handlers -------------------------------------------------------------

    def store_get(self, key: str) -> Any:
        return self.store.get(key)

    def store_set(self, key: str, value: Any) -> bool:
        self.store.set(key, value)
        return True

    def clipboard_write(self, text: str) -> bool:
        self._clipboard_writer(text)
        return True

    def quit(self) -> None:
        logger.info("quit requested over the bridge")
        self._quit_app()

    def get_height(self) -> int:
        if self.window is None:
            return DEFAULT_WINDOW_HEIGHT
        return clamp_host_height(self.window.content_height())

    def set_height(self, height: Any) -> int:
        if self.window is None:
            return DEFAULT_WINDOW_HEIGHT
        next_height = clamp_host_height(_to_number(height))
        self.window.set_content_size(WINDOW_WIDTH, next_height)
        return clamp_host_height(self.window.content_height())

    def get_always_on_top(self) -> bool:
        if self.window is None:
            return self.initial_always_on_top()
        return self.window.is_always_on_top()

    def set_always_on_top(self, value: Any) -> bool:
        next_value = bool(value)
        if self.window is not None:
            self.window.set_always_on_top(next_value)
        self._save_preferences(alwaysOnTop=next_value)
        return next_value

    def center(self) -> bool:
        if self.window is None:
            return False
        self.window.center()
        return True
