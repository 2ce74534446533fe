"""Host-side key-value store (one JSON object holding every key)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ._base import JsonStore


class HostStore(JsonStore):
    """All bridge-stored values in a single file (``{key: value}``).

    This is what sits behind the ``store:get`` / ``store:set`` bridge
    channels when a desktop host is running.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(path)

    def _default(self) -> dict:  # type: ignore[override]  # noqa: PLR6301
        return {}

    def load(self) -> dict[str, Any]:
        """Load every stored key."""
        raw = self.load_raw()
        if isinstance(raw, dict):
            return raw
        return {}

    def get(self, key: str) -> Any:
        return self.load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self.load()
        data[key] = value
        self.save_raw(data, sort_keys=True)

    def get_object(self, key: str) -> dict[str, Any]:
        """Return the value under *key* if it is a JSON object, else ``{}``."""
        value = self.get(key)
        if isinstance(value, dict):
            return value
        return {}
