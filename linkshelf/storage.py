"""Storage adapters: bridge-backed or local files.

Both expose the same two coroutines. ``get`` returns ``None`` for absent
*or* unreadable values; ``set`` returns ``False`` when the backend refused
the write instead of raising.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .bridge import STORE_GET, STORE_SET, HostBridge
from .errors import BridgeError, StorageError
from .log import logger
from .persistence import KeyValueDirectory


@runtime_checkable
class StorageAdapter(Protocol):
    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> bool: ...


class BridgeStorage:
    """Values kept by the host process, reached over the bridge."""

    def __init__(self, bridge: HostBridge) -> None:
        self._bridge = bridge

    async def get(self, key: str) -> Any:
        try:
            return await self._bridge.invoke(STORE_GET, key)
        except BridgeError as exc:
            raise StorageError("Failed to load data") from exc

    async def set(self, key: str, value: Any) -> bool:
        try:
            result = await self._bridge.invoke(STORE_SET, key, value)
        except BridgeError:
            logger.debug("bridge store:set failed for %s", key, exc_info=True)
            return False
        return bool(result)


class LocalStorage:
    """Values kept as JSON files under *root* (one file per key)."""

    def __init__(self, root: Path) -> None:
        self._files = KeyValueDirectory(root)

    @property
    def root(self) -> Path:
        return self._files.root

    async def get(self, key: str) -> Any:
        return self._files.get(key)

    async def set(self, key: str, value: Any) -> bool:
        try:
            self._files.set(key, value)
        except (OSError, TypeError, ValueError):
            logger.debug("local store write failed for %s", key, exc_info=True)
            return False
        return True
