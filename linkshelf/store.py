"""Shelf data store.

Every operation takes the current :class:`AppDocument`, computes a new one
without touching the argument, persists it and returns it. Validation
errors are raised before anything is written. Only the current mode's items
and sections are ever searched or changed by the item/section operations.

There is no locking: two calls started from the same snapshot both compute
against it, and the later write wins.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from .capabilities import Capabilities
from .errors import ClipboardError, StorageError, ValidationError
from .log import logger
from .models import (
    ITEM_TYPES,
    AppDocument,
    Item,
    MalformedDataError,
    Mode,
    Section,
    default_document,
    generate_id,
    now_ms,
)
from .preferences import (
    Preferences,
    load_preferences,
    save_preferences,
    write_preferences,
)
from .storage import StorageAdapter

DATA_KEY = "linkshelf-data"

_ITEM_FIELDS = frozenset({"label", "value", "type", "order", "section_id"})


def _next_order(orders: Sequence[int]) -> int:
    return max(orders) + 1 if orders else 0


def _check_item_type(item_type: Any) -> None:
    if item_type not in ITEM_TYPES:
        raise ValidationError("Item type must be 'link' or 'text'")


def sanitize_document(raw: Any) -> tuple[AppDocument, bool]:
    """Turn a stored blob into a usable document.

    Returns ``(document, changed)``. Missing or malformed blobs and blobs
    without modes are replaced by the shipped defaults; a dangling
    ``currentModeId`` is pointed at the first mode. ``changed`` tells the
    caller the result differs from what is stored.
    """
    if raw is None:
        return default_document(), True
    try:
        document = AppDocument.from_dict(raw)
    except MalformedDataError:
        logger.info("stored shelf data is malformed, using defaults", exc_info=True)
        return default_document(), True
    if not document.modes:
        return default_document(), True
    if document.current_mode is None:
        return replace(document, current_mode_id=document.modes[0].id), True
    return document, False


class ShelfStore:
    """The shelf's single persisted document and the operations on it.

    Construct one per process with the resolved :class:`Capabilities`.
    """

    def __init__(self, capabilities: Capabilities) -> None:
        self.capabilities = capabilities

    @property
    def storage(self) -> StorageAdapter:
        return self.capabilities.storage

    # -- document I/O ---------------------------------------------------------

    async def initialize(self) -> AppDocument:
        """Load the document, seeding or healing it in storage if needed."""
        document, changed = sanitize_document(await self.storage.get(DATA_KEY))
        if changed:
            await self.save_app_data(document)
        return document

    async def get_app_data(self) -> AppDocument:
        """Re-read the persisted document (same healing as :meth:`initialize`)."""
        return await self.initialize()

    async def save_app_data(self, document: AppDocument) -> None:
        if not await self.storage.set(DATA_KEY, document.to_dict()):
            raise StorageError("Failed to save data")

    async def _commit(self, document: AppDocument) -> AppDocument:
        await self.save_app_data(document)
        return document

    @staticmethod
    def get_current_mode(document: AppDocument) -> Mode | None:
        return document.current_mode

    @staticmethod
    def _map_current(
        document: AppDocument, update: Callable[[Mode], Mode]
    ) -> AppDocument:
        modes = tuple(
            update(mode) if mode.id == document.current_mode_id else mode
            for mode in document.modes
        )
        return replace(document, modes=modes)

    # -- modes ----------------------------------------------------------------

    async def switch_mode(self, document: AppDocument, mode_id: str) -> AppDocument:
        """Select *mode_id*. The id is not checked; pass one from ``modes``."""
        return await self._commit(replace(document, current_mode_id=mode_id))

    async def create_mode(self, document: AppDocument, name: str) -> AppDocument:
        """Append a new empty mode and make it current."""
        name = name.strip()
        if not name:
            raise ValidationError("Mode name is required")
        lowered = name.lower()
        if any(mode.name.lower() == lowered for mode in document.modes):
            raise ValidationError("A mode with this name already exists")

        mode = Mode(id=generate_id(), name=name, items=(), sections=())
        return await self._commit(
            AppDocument(current_mode_id=mode.id, modes=(*document.modes, mode))
        )

    async def delete_mode(self, document: AppDocument, mode_id: str) -> AppDocument:
        """Remove a mode; the first remaining one becomes current if needed."""
        if len(document.modes) <= 1:
            raise ValidationError("At least one mode is required")
        if document.find_mode(mode_id) is None:
            raise ValidationError("Mode not found")

        modes = tuple(mode for mode in document.modes if mode.id != mode_id)
        current = document.current_mode_id
        if current == mode_id:
            current = modes[0].id
        return await self._commit(AppDocument(current_mode_id=current, modes=modes))

    # -- items ----------------------------------------------------------------

    async def add_item(
        self,
        document: AppDocument,
        label: str,
        value: str,
        type: str = "link",
        section_id: str | None = None,
    ) -> AppDocument:
        """Append an item to the current mode, ordered after every other item."""
        _check_item_type(type)
        current = document.current_mode
        existing = current.items if current is not None else ()
        stamp = now_ms()
        item = Item(
            id=generate_id(),
            label=label,
            value=value,
            type=type,
            created_at=stamp,
            updated_at=stamp,
            order=_next_order([entry.order for entry in existing]),
            section_id=section_id,
        )
        return await self._commit(
            self._map_current(
                document, lambda mode: replace(mode, items=(*mode.items, item))
            )
        )

    async def update_item(
        self, document: AppDocument, item_id: str, **updates: Any
    ) -> AppDocument:
        """Merge *updates* into one current-mode item and bump ``updated_at``.

        Accepted fields: ``label``, ``value``, ``type``, ``order`` and
        ``section_id`` (``None`` unassigns). Items in other modes are never
        matched; an unknown id changes nothing.
        """
        unknown = set(updates) - _ITEM_FIELDS
        if unknown:
            raise TypeError(f"unknown item field(s): {', '.join(sorted(unknown))}")
        if "type" in updates:
            _check_item_type(updates["type"])

        stamp = now_ms()

        def update(mode: Mode) -> Mode:
            items = tuple(
                replace(item, **updates, updated_at=stamp)
                if item.id == item_id
                else item
                for item in mode.items
            )
            return replace(mode, items=items)

        return await self._commit(self._map_current(document, update))

    async def delete_item(self, document: AppDocument, item_id: str) -> AppDocument:
        def update(mode: Mode) -> Mode:
            items = tuple(item for item in mode.items if item.id != item_id)
            return replace(mode, items=items)

        return await self._commit(self._map_current(document, update))

    async def reorder_items(
        self, document: AppDocument, ordered_ids: Sequence[str]
    ) -> AppDocument:
        """Give each listed item ``order = position`` in *ordered_ids*.

        Unknown ids are skipped. Current-mode items missing from the list
        keep their old ``order`` and follow the reordered ones, so orders
        can repeat between the two groups.
        """
        wanted = set(ordered_ids)

        def update(mode: Mode) -> Mode:
            by_id = {item.id: item for item in mode.items}
            reordered = [
                replace(by_id[item_id], order=index)
                for index, item_id in enumerate(ordered_ids)
                if item_id in by_id
            ]
            leftovers = [item for item in mode.items if item.id not in wanted]
            return replace(mode, items=(*reordered, *leftovers))

        return await self._commit(self._map_current(document, update))

    # -- sections -------------------------------------------------------------

    async def add_section(self, document: AppDocument, name: str) -> AppDocument:
        name = name.strip()
        if not name:
            raise ValidationError("Section name is required")

        def update(mode: Mode) -> Mode:
            sections = mode.sections or ()
            section = Section(
                id=generate_id(),
                name=name,
                order=_next_order([entry.order for entry in sections]),
            )
            return replace(mode, sections=(*sections, section))

        return await self._commit(self._map_current(document, update))

    async def update_section(
        self, document: AppDocument, section_id: str, name: str
    ) -> AppDocument:
        """Rename a current-mode section. The name is stored as given."""

        def update(mode: Mode) -> Mode:
            sections = tuple(
                replace(section, name=name) if section.id == section_id else section
                for section in mode.sections or ()
            )
            return replace(mode, sections=sections)

        return await self._commit(self._map_current(document, update))

    async def delete_section(
        self, document: AppDocument, section_id: str
    ) -> AppDocument:
        """Remove a section; its items stay, with ``section_id`` cleared."""

        def update(mode: Mode) -> Mode:
            sections = tuple(
                section for section in mode.sections or () if section.id != section_id
            )
            items = tuple(
                replace(item, section_id=None)
                if item.section_id == section_id
                else item
                for item in mode.items
            )
            return replace(mode, sections=sections, items=items)

        return await self._commit(self._map_current(document, update))

    async def reorder_sections(
        self, document: AppDocument, ordered_ids: Sequence[str]
    ) -> AppDocument:
        """Reindex sections by position in *ordered_ids*.

        Sections left out of the list are dropped, unlike
        :meth:`reorder_items`, which keeps its leftovers.
        """

        def update(mode: Mode) -> Mode:
            by_id = {section.id: section for section in mode.sections or ()}
            sections = tuple(
                replace(by_id[section_id], order=index)
                for index, section_id in enumerate(ordered_ids)
                if section_id in by_id
            )
            return replace(mode, sections=sections)

        return await self._commit(self._map_current(document, update))

    # -- preferences ----------------------------------------------------------

    async def load_preferences(self) -> Preferences:
        return await load_preferences(self.storage)

    async def update_preferences(self, **updates: Any) -> Preferences:
        return await save_preferences(self.storage, **updates)

    # -- host capabilities ----------------------------------------------------

    async def copy_to_clipboard(self, text: str) -> None:
        if not await self.capabilities.clipboard.write(text):
            raise ClipboardError("Failed to copy to clipboard")

    async def quit_app(self) -> None:
        await self.capabilities.app.quit()

    async def get_window_height(self) -> int:
        return await self.capabilities.window.get_height()

    async def set_window_height(self, height: float) -> int:
        return await self.capabilities.window.set_height(height)

    async def get_always_on_top(self) -> bool:
        return await self.capabilities.window.get_always_on_top()

    async def set_always_on_top(self, value: bool) -> bool:
        return await self.capabilities.window.set_always_on_top(value)

    async def center_window(self) -> None:
        await self.capabilities.window.center()

    async def reset_to_defaults(self) -> AppDocument:
        """Restore the shipped document and default preferences.

        Window height, pin state and centring are re-applied when a window
        is available; failures there are logged and ignored.
        """
        document = default_document()
        preferences = Preferences()
        await self.save_app_data(document)
        await write_preferences(self.storage, preferences)

        window = self.capabilities.window
        try:
            await window.set_height(preferences.window_height)
            await window.set_always_on_top(preferences.always_on_top)
            await window.center()
        except Exception:
            logger.debug("could not re-apply window defaults", exc_info=True)

        return document
