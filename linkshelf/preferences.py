"""User preferences for Linkshelf.

A small settings blob (theme, window height, always-on-top) stored under its
own key, separate from the shelf document. Whatever comes back from storage
is sanitized field by field against the defaults; junk never raises.

Two height floors exist. ``MIN_WINDOW_HEIGHT`` (420) bounds what is stored
here and what the data layer reports back; the desktop host clamps the live
window with its own, lower ``HOST_MIN_WINDOW_HEIGHT`` (120) so a user can
drag the window smaller than the stored preference allows.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import StorageError
from .storage import StorageAdapter

PREFERENCES_KEY = "linkshelf-preferences"

THEMES: tuple[str, ...] = ("light", "dark")
DEFAULT_THEME = "dark"
DEFAULT_ALWAYS_ON_TOP = True
DEFAULT_WINDOW_HEIGHT = 520
MIN_WINDOW_HEIGHT = 420
MAX_WINDOW_HEIGHT = 900
HOST_MIN_WINDOW_HEIGHT = 120

_FIELD_KEYS = {
    "theme": "theme",
    "window_height": "windowHeight",
    "always_on_top": "alwaysOnTop",
}


@dataclass(frozen=True)
class Preferences:
    """Sanitized preferences."""

    theme: str = DEFAULT_THEME
    window_height: int = DEFAULT_WINDOW_HEIGHT
    always_on_top: bool = DEFAULT_ALWAYS_ON_TOP

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": self.theme,
            "windowHeight": self.window_height,
            "alwaysOnTop": self.always_on_top,
        }


def clamp_window_height(
    height: Any,
    minimum: int = MIN_WINDOW_HEIGHT,
    maximum: int = MAX_WINDOW_HEIGHT,
) -> int:
    """Round *height* half-up and clamp it into ``[minimum, maximum]``.

    Anything that is not a finite number (including bools and numeric
    strings) becomes ``DEFAULT_WINDOW_HEIGHT``.
    """
    if isinstance(height, bool) or not isinstance(height, (int, float)):
        return DEFAULT_WINDOW_HEIGHT
    if not math.isfinite(height):
        return DEFAULT_WINDOW_HEIGHT
    return min(maximum, max(minimum, math.floor(height + 0.5)))


def sanitize_theme(theme: Any) -> str:
    return theme if theme in THEMES else DEFAULT_THEME


def sanitize_always_on_top(always_on_top: Any) -> bool:
    return always_on_top if isinstance(always_on_top, bool) else DEFAULT_ALWAYS_ON_TOP


def sanitize_preferences(raw: Any) -> Preferences:
    """Build :class:`Preferences` from an untrusted stored blob."""
    data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    height = data.get("windowHeight")
    return Preferences(
        theme=sanitize_theme(data.get("theme")),
        window_height=clamp_window_height(
            DEFAULT_WINDOW_HEIGHT if height is None else height
        ),
        always_on_top=sanitize_always_on_top(data.get("alwaysOnTop")),
    )


async def load_preferences(storage: StorageAdapter) -> Preferences:
    """Load preferences, falling back to defaults for anything invalid."""
    return sanitize_preferences(await storage.get(PREFERENCES_KEY))


async def save_preferences(storage: StorageAdapter, **updates: Any) -> Preferences:
    """Merge *updates* into the stored preferences and persist the result.

    Keyword names are the :class:`Preferences` field names. Returns the
    sanitized preferences that were written.
    """
    unknown = set(updates) - set(_FIELD_KEYS)
    if unknown:
        raise TypeError(f"unknown preference(s): {', '.join(sorted(unknown))}")

    existing = await load_preferences(storage)
    merged = existing.to_dict()
    for name, value in updates.items():
        merged[_FIELD_KEYS[name]] = value
    preferences = sanitize_preferences(merged)
    await write_preferences(storage, preferences)
    return preferences


async def write_preferences(storage: StorageAdapter, preferences: Preferences) -> None:
    """Persist *preferences* whole, replacing whatever was stored."""
    if not await storage.set(PREFERENCES_KEY, preferences.to_dict()):
        raise StorageError("Failed to save preferences")


# -- single-field helpers -----------------------------------------------------


async def get_theme_preference(storage: StorageAdapter) -> str:
    return (await load_preferences(storage)).theme


async def set_theme_preference(storage: StorageAdapter, theme: str) -> None:
    await save_preferences(storage, theme=sanitize_theme(theme))


async def get_window_height_preference(storage: StorageAdapter) -> int:
    return (await load_preferences(storage)).window_height


async def set_window_height_preference(storage: StorageAdapter, height: float) -> None:
    await save_preferences(storage, window_height=clamp_window_height(height))


async def get_always_on_top_preference(storage: StorageAdapter) -> bool:
    return (await load_preferences(storage)).always_on_top


async def set_always_on_top_preference(
    storage: StorageAdapter, always_on_top: bool
) -> None:
    await save_preferences(storage, always_on_top=sanitize_always_on_top(always_on_top))
