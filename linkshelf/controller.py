"""UI-facing state holder for the shelf.

:class:`ShelfController` keeps the snapshot a frontend renders from
(``document``, ``loading``, ``error``), forwards every action to the
:class:`~linkshelf.store.ShelfStore` and swaps in the returned document only
after it was persisted.

Errors take one of two routes:

* content actions (items, sections, switching, clipboard...) store the
  message in ``error`` for a banner and return normally;
* :meth:`add_mode` and :meth:`remove_mode` re-raise, so a form can show the
  message next to its input field.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from .errors import ShelfError
from .log import logger
from .models import AppDocument, Mode
from .store import ShelfStore

Listener = Callable[["ShelfController"], None]


def _message(exc: BaseException, fallback: str) -> str:
    return str(exc) or fallback


class ShelfController:
    """Holds ``document``, ``loading`` and ``error`` for one frontend."""

    def __init__(self, store: ShelfStore) -> None:
        self.store = store
        self.document: AppDocument | None = None
        self.loading = True
        self.error: str | None = None
        self._listeners: list[Listener] = []

    # -- observation ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every state change. Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("shelf listener %r raised", listener)

    @property
    def current_mode(self) -> Mode | None:
        if self.document is None:
            return None
        return self.document.current_mode

    @property
    def modes(self) -> tuple[Mode, ...]:
        if self.document is None:
            return ()
        return self.document.modes

    # -- plumbing -------------------------------------------------------------

    def _set_document(self, document: AppDocument) -> None:
        self.document = document
        self._notify()

    def _set_error(self, message: str | None) -> None:
        self.error = message
        self._notify()

    async def _apply(
        self,
        operation: Callable[..., Awaitable[AppDocument]],
        fallback: str,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Run a document operation; failures end up in ``error``."""
        if self.document is None:
            return
        try:
            document = await operation(self.document, *args, **kwargs)
        except Exception as exc:
            logger.debug("%s", fallback, exc_info=True)
            self._set_error(_message(exc, fallback))
            return
        self._set_document(document)

    async def _apply_or_raise(
        self,
        operation: Callable[..., Awaitable[AppDocument]],
        *args: Any,
    ) -> None:
        if self.document is None:
            raise ShelfError("Store is not ready")
        self._set_document(await operation(self.document, *args))

    # -- lifecycle ------------------------------------------------------------

    async def load(self) -> None:
        """Initialize the store and take its document."""
        try:
            self.document = await self.store.initialize()
        except Exception as exc:
            logger.warning("failed to load shelf data: %s", exc)
            self.error = _message(exc, "Failed to load data")
        self.loading = False
        self._notify()

    # -- modes ----------------------------------------------------------------

    async def switch_mode(self, mode_id: str) -> None:
        await self._apply(self.store.switch_mode, "Failed to switch mode", mode_id)

    async def add_mode(self, name: str) -> None:
        """Create a mode. Raises on invalid names so forms can show it inline."""
        await self._apply_or_raise(self.store.create_mode, name)

    async def remove_mode(self, mode_id: str) -> None:
        """Delete a mode. Raises on refusal so the caller can show it inline."""
        await self._apply_or_raise(self.store.delete_mode, mode_id)

    # -- items ----------------------------------------------------------------

    async def add_item(
        self,
        label: str,
        value: str,
        type: str = "link",
        section_id: str | None = None,
    ) -> None:
        await self._apply(
            self.store.add_item,
            "Failed to add item",
            label,
            value,
            type=type,
            section_id=section_id,
        )

    async def update_item(self, item_id: str, **updates: Any) -> None:
        await self._apply(
            self.store.update_item, "Failed to update item", item_id, **updates
        )

    async def delete_item(self, item_id: str) -> None:
        await self._apply(self.store.delete_item, "Failed to delete item", item_id)

    async def reorder_items(self, ordered_ids: Sequence[str]) -> None:
        await self._apply(
            self.store.reorder_items, "Failed to reorder items", ordered_ids
        )

    # -- sections -------------------------------------------------------------

    async def add_section(self, name: str) -> None:
        await self._apply(self.store.add_section, "Failed to add section", name)

    async def update_section(self, section_id: str, name: str) -> None:
        await self._apply(
            self.store.update_section, "Failed to update section", section_id, name
        )

    async def delete_section(self, section_id: str) -> None:
        await self._apply(
            self.store.delete_section, "Failed to delete section", section_id
        )

    async def reorder_sections(self, ordered_ids: Sequence[str]) -> None:
        await self._apply(
            self.store.reorder_sections, "Failed to reorder sections", ordered_ids
        )

    # -- host actions ---------------------------------------------------------

    async def copy_to_clipboard(self, text: str) -> None:
        try:
            await self.store.copy_to_clipboard(text)
        except Exception as exc:
            self._set_error(_message(exc, "Failed to copy to clipboard"))

    async def quit_app(self) -> None:
        try:
            await self.store.quit_app()
        except Exception as exc:
            self._set_error(_message(exc, "Failed to quit app"))

    async def reset_to_defaults(self) -> bool:
        """Restore shipped modes, items and preferences. Returns success."""
        try:
            document = await self.store.reset_to_defaults()
        except Exception as exc:
            self._set_error(_message(exc, "Failed to reset app"))
            return False
        self.error = None
        self._set_document(document)
        return True

    def clear_error(self) -> None:
        if self.error is not None:
            self._set_error(None)
