"""Shelf document model.

Every entity is a frozen dataclass; the store never edits one in place but
builds replacements with :func:`dataclasses.replace`.

Stored blobs keep camelCase keys (``currentModeId``, ``sectionId``...) so a
document written through the host bridge reads back through the local
backend and vice versa. ``from_dict`` raises :class:`MalformedDataError` for
anything that does not have the expected shape.
"""

from __future__ import annotations

import random
import string
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

ItemType = Literal["link", "text"]
ITEM_TYPES: tuple[str, ...] = ("link", "text")

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LEN = 9


class MalformedDataError(ValueError):
    """A stored blob does not match the document shape."""


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_id() -> str:
    """Return ``"<epoch-ms>-<9 base36 chars>"``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=_ID_SUFFIX_LEN))
    return f"{now_ms()}-{suffix}"


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedDataError(f"{key!r} must be a string")
    return value


def _optional_int(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDataError(f"{key!r} must be a number")
    return int(value)


def _require_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise MalformedDataError(f"{key!r} must be a list")
    return value


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedDataError(f"{what} must be an object")
    return raw


@dataclass(frozen=True)
class Item:
    """A stored link or text snippet."""

    id: str
    label: str
    value: str
    type: str
    created_at: int
    updated_at: int
    order: int = 0
    section_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "value": self.value,
            "type": self.type,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "order": self.order,
        }
        if self.section_id is not None:
            data["sectionId"] = self.section_id
        return data

    @classmethod
    def from_dict(cls, raw: Any, position: int = 0) -> Item:
        """Parse a stored item; a missing ``order`` falls back to *position*."""
        data = _require_mapping(raw, "item")
        item_type = data.get("type")
        if item_type not in ITEM_TYPES:
            raise MalformedDataError(f"unknown item type {item_type!r}")
        section_id = data.get("sectionId")
        if section_id is not None and not isinstance(section_id, str):
            raise MalformedDataError("'sectionId' must be a string")
        return cls(
            id=_require_str(data, "id"),
            label=_require_str(data, "label"),
            value=_require_str(data, "value"),
            type=item_type,
            created_at=_optional_int(data, "createdAt", 0),
            updated_at=_optional_int(data, "updatedAt", 0),
            order=_optional_int(data, "order", position),
            section_id=section_id,
        )


@dataclass(frozen=True)
class Section:
    """A named group of items inside one mode."""

    id: str
    name: str
    order: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "order": self.order}

    @classmethod
    def from_dict(cls, raw: Any, position: int = 0) -> Section:
        data = _require_mapping(raw, "section")
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name"),
            order=_optional_int(data, "order", position),
        )


@dataclass(frozen=True)
class Mode:
    """A named workspace with its own items and sections.

    ``sections`` is ``None`` for modes that never had any (the shipped
    defaults); modes created at runtime start with an empty tuple.
    """

    id: str
    name: str
    items: tuple[Item, ...] = ()
    sections: tuple[Section, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
        }
        if self.sections is not None:
            data["sections"] = [section.to_dict() for section in self.sections]
        return data

    @classmethod
    def from_dict(cls, raw: Any) -> Mode:
        data = _require_mapping(raw, "mode")
        items = tuple(
            Item.from_dict(entry, position)
            for position, entry in enumerate(_require_list(data, "items"))
        )
        sections: tuple[Section, ...] | None = None
        if data.get("sections") is not None:
            sections = tuple(
                Section.from_dict(entry, position)
                for position, entry in enumerate(_require_list(data, "sections"))
            )
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name"),
            items=items,
            sections=sections,
        )


@dataclass(frozen=True)
class AppDocument:
    """The whole persisted shelf: every mode plus the selected one."""

    current_mode_id: str
    modes: tuple[Mode, ...]

    @property
    def current_mode(self) -> Mode | None:
        return self.find_mode(self.current_mode_id)

    def find_mode(self, mode_id: str) -> Mode | None:
        for mode in self.modes:
            if mode.id == mode_id:
                return mode
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentModeId": self.current_mode_id,
            "modes": [mode.to_dict() for mode in self.modes],
        }

    @classmethod
    def from_dict(cls, raw: Any) -> AppDocument:
        data = _require_mapping(raw, "document")
        modes = tuple(Mode.from_dict(entry) for entry in _require_list(data, "modes"))
        current = data.get("currentModeId")
        if current is not None and not isinstance(current, str):
            raise MalformedDataError("'currentModeId' must be a string")
        return cls(current_mode_id=current or "", modes=modes)


# -- shipped defaults ---------------------------------------------------------

DEFAULT_MODE_ID = "job-applications"

_DEFAULT_ITEMS: tuple[tuple[str, str, str], ...] = (
    ("1", "Portfolio", "https://myportfolio.com"),
    ("2", "GitHub", "https://github.com/username"),
    ("3", "LinkedIn", "https://linkedin.com/in/username"),
)


def default_document(timestamp: int | None = None) -> AppDocument:
    """Build the first-run document, stamped with *timestamp* (default: now).

    A fresh object is returned on every call.
    """
    stamp = now_ms() if timestamp is None else timestamp
    items = tuple(
        Item(
            id=item_id,
            label=label,
            value=value,
            type="link",
            created_at=stamp,
            updated_at=stamp,
            order=order,
        )
        for order, (item_id, label, value) in enumerate(_DEFAULT_ITEMS)
    )
    mode = Mode(id=DEFAULT_MODE_ID, name="Job Applications", items=items)
    return AppDocument(current_mode_id=mode.id, modes=(mode,))
