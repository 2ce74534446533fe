"""Capability provider, resolved once at startup.

Decides between the host bridge and the local fallbacks and hands the
result to :class:`~linkshelf.store.ShelfStore`. Business logic never probes
for a host itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from .bridge import STORE_GET, HostBridge
from .clipboard import ClipboardCapability, TieredClipboard
from .config import ShelfConfig
from .log import logger
from .storage import BridgeStorage, LocalStorage, StorageAdapter
from .window import (
    AppCapability,
    BridgeApp,
    BridgeWindow,
    HeadlessWindow,
    NullApp,
    WindowCapability,
)


@dataclass(frozen=True)
class Capabilities:
    """Everything the data layer needs from its surroundings."""

    storage: StorageAdapter
    clipboard: ClipboardCapability
    window: WindowCapability
    app: AppCapability
    backend: str  # "bridge" or "local"


def resolve_capabilities(
    config: ShelfConfig,
    bridge: HostBridge | None = None,
) -> Capabilities:
    """Pick the bridge when it serves storage, otherwise local files.

    ``backend: local`` in the config ignores any bridge for storage, window
    and app control but still lets the clipboard use it.
    """
    clipboard = TieredClipboard(bridge)
    if bridge is not None and config.backend != "local" and bridge.handles(STORE_GET):
        logger.info("using host bridge for storage")
        return Capabilities(
            storage=BridgeStorage(bridge),
            clipboard=clipboard,
            window=BridgeWindow(bridge),
            app=BridgeApp(bridge),
            backend="bridge",
        )

    logger.info("using local storage at %s", config.data_dir)
    return Capabilities(
        storage=LocalStorage(config.data_dir),
        clipboard=clipboard,
        window=HeadlessWindow(),
        app=NullApp(),
        backend="local",
    )
