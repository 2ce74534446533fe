"""Directory of JSON blobs, one file per key."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from ._base import JsonStore

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class KeyValueDirectory:
    """Local key-value persistence: ``<root>/<key>.json`` per key.

    Missing, empty and unparseable files all read back as ``None``.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _store(self, key: str) -> JsonStore:
        return JsonStore(self.root / f"{_UNSAFE_CHARS.sub('_', key)}.json")

    def get(self, key: str) -> Any:
        return self._store(key).load_raw()

    def set(self, key: str, value: Any) -> None:
        self._store(key).save_raw(value)
