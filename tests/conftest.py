"""Shared test fixtures for the linkshelf test suite."""

from __future__ import annotations

from typing import Any

import pytest

from linkshelf.capabilities import Capabilities
from linkshelf.models import AppDocument, Item, Mode, Section
from linkshelf.store import ShelfStore
from linkshelf.window import HeadlessWindow


@pytest.fixture(autouse=True)
def linkshelf_home(tmp_path, monkeypatch):
    """Point ``LINKSHELF_HOME`` at a temp dir so nothing touches ``~``."""
    home = tmp_path / "home"
    monkeypatch.setenv("LINKSHELF_HOME", str(home))
    return home


# -- fakes -------------------------------------------------------------------


class MemoryStorage:
    """In-memory storage adapter that records every write."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(initial or {})
        self.writes: list[str] = []
        self.fail_writes = False

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> bool:
        if self.fail_writes:
            return False
        self.writes.append(key)
        self.data[key] = value
        return True


class RecordingClipboard:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.copied: list[str] = []

    async def write(self, text: str) -> bool:
        if self.succeed:
            self.copied.append(text)
        return self.succeed


class BrokenWindow(HeadlessWindow):
    """Window capability whose every call fails."""

    async def set_height(self, height: float) -> int:
        raise RuntimeError("no window")

    async def set_always_on_top(self, value: bool) -> bool:
        raise RuntimeError("no window")

    async def center(self) -> None:
        raise RuntimeError("no window")


class RecordingApp:
    def __init__(self) -> None:
        self.quit_calls = 0

    async def quit(self) -> None:
        self.quit_calls += 1


# -- fixtures ----------------------------------------------------------------


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def clipboard() -> RecordingClipboard:
    return RecordingClipboard()


@pytest.fixture
def window() -> HeadlessWindow:
    return HeadlessWindow()


@pytest.fixture
def app() -> RecordingApp:
    return RecordingApp()


@pytest.fixture
def broken_window() -> BrokenWindow:
    return BrokenWindow()


@pytest.fixture
def capabilities(storage, clipboard, window, app) -> Capabilities:
    return Capabilities(
        storage=storage,
        clipboard=clipboard,
        window=window,
        app=app,
        backend="local",
    )


@pytest.fixture
def store(capabilities) -> ShelfStore:
    return ShelfStore(capabilities)


@pytest.fixture
def make_item():
    """Factory for items with sensible defaults."""

    def _make(item_id: str, order: int = 0, **kwargs: Any) -> Item:
        fields: dict[str, Any] = {
            "label": item_id.upper(),
            "value": f"https://example.com/{item_id}",
            "type": "link",
            "created_at": 1,
            "updated_at": 1,
        }
        fields.update(kwargs)
        return Item(id=item_id, order=order, **fields)

    return _make


@pytest.fixture
def two_mode_doc(make_item) -> AppDocument:
    """Two modes; ``work`` is current and has items and sections."""
    work = Mode(
        id="work",
        name="Work",
        items=(
            make_item("a", 0, section_id="s1"),
            make_item("b", 1),
            make_item("c", 2, section_id="s1"),
        ),
        sections=(
            Section(id="s1", name="Docs", order=0),
            Section(id="s2", name="Ops", order=1),
        ),
    )
    home = Mode(id="home", name="Home", items=(make_item("h1", 0),), sections=())
    return AppDocument(current_mode_id="work", modes=(work, home))
