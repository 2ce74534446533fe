"""In-process host bridge.

A host (the desktop shell) registers handlers on named channels; the data
layer invokes them and awaits the reply. Arguments and results are passed
through JSON so neither side can hold a reference into the other's state.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .errors import BridgeError
from .log import logger

Handler = Callable[..., Any]

# Channel names shared by both sides of the bridge.
STORE_GET = "store:get"
STORE_SET = "store:set"
CLIPBOARD_WRITE = "clipboard:write"
APP_QUIT = "app:quit"
WINDOW_GET_HEIGHT = "window:get-height"
WINDOW_SET_HEIGHT = "window:set-height"
WINDOW_GET_ALWAYS_ON_TOP = "window:get-always-on-top"
WINDOW_SET_ALWAYS_ON_TOP = "window:set-always-on-top"
WINDOW_CENTER = "window:center"


@runtime_checkable
class HostBridge(Protocol):
    """What the data layer needs from a host."""

    def handles(self, channel: str) -> bool: ...

    async def invoke(self, channel: str, *args: Any) -> Any: ...


def _clone(value: Any, channel: str) -> Any:
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as exc:
        raise BridgeError(f"{channel}: value is not JSON-serializable") from exc


class ChannelBridge:
    """Request/response channels; handlers may be plain or async callables."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def handle(self, channel: str, handler: Handler) -> None:
        """Register *handler* for *channel*, replacing any previous one."""
        self._handlers[channel] = handler

    def remove_handler(self, channel: str) -> None:
        self._handlers.pop(channel, None)

    def handles(self, channel: str) -> bool:
        return channel in self._handlers

    async def invoke(self, channel: str, *args: Any) -> Any:
        """Call the handler for *channel* and return its (copied) result.

        Raises :class:`BridgeError` when nothing handles the channel or the
        handler raised.
        """
        handler = self._handlers.get(channel)
        if handler is None:
            raise BridgeError(f"No handler registered for {channel}")
        payload = [_clone(arg, channel) for arg in args]
        try:
            result = handler(*payload)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.debug("bridge handler for %s raised", channel, exc_info=True)
            raise BridgeError(f"{channel} failed: {exc}") from exc
        return _clone(result, channel)
