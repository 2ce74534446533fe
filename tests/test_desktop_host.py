"""Tests for the desktop host and the data layer talking to it over the bridge."""

from __future__ import annotations

import pytest

from linkshelf.bridge import (
    APP_QUIT,
    CLIPBOARD_WRITE,
    WINDOW_CENTER,
    WINDOW_GET_ALWAYS_ON_TOP,
    WINDOW_GET_HEIGHT,
    WINDOW_SET_ALWAYS_ON_TOP,
    WINDOW_SET_HEIGHT,
    ChannelBridge,
)
from linkshelf.capabilities import resolve_capabilities
from linkshelf.config import ShelfConfig
from linkshelf.desktop import WINDOW_WIDTH, DesktopHost, clamp_host_height
from linkshelf.models import DEFAULT_MODE_ID
from linkshelf.persistence import HostStore
from linkshelf.preferences import PREFERENCES_KEY
from linkshelf.store import DATA_KEY, ShelfStore


class FakeWindow:
    def __init__(self, height: int = 520) -> None:
        self.height = height
        self.pinned = False
        self.centred = 0
        self.sizes: list[tuple[int, int]] = []

    def content_height(self) -> int:
        return self.height

    def set_content_size(self, width: int, height: int) -> None:
        self.sizes.append((width, height))
        self.height = height

    def is_always_on_top(self) -> bool:
        return self.pinned

    def set_always_on_top(self, value: bool) -> None:
        self.pinned = value

    def center(self) -> None:
        self.centred += 1


@pytest.fixture
def host_store(tmp_path) -> HostStore:
    return HostStore(tmp_path / "host-store.json")


@pytest.fixture
def fake_window() -> FakeWindow:
    return FakeWindow()


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def host(host_store, fake_window, events) -> DesktopHost:
    return DesktopHost(
        host_store,
        clipboard_writer=lambda text: events.append(("copy", text)),
        quit_app=lambda: events.append(("quit",)),
        window=fake_window,
    )


@pytest.fixture
def bridge(host) -> ChannelBridge:
    bridge = ChannelBridge()
    host.attach(bridge)
    return bridge


class TestClampHostHeight:
    @pytest.mark.parametrize(
        ("height", "expected"),
        [(50, 120), (150, 150), (1200, 900), (float("nan"), 520)],
    )
    def test_bounds(self, height, expected):
        assert clamp_host_height(height) == expected


class TestDesktopHost:
    @pytest.mark.asyncio
    async def test_set_height_clamps_with_host_floor(self, bridge, fake_window):
        assert await bridge.invoke(WINDOW_SET_HEIGHT, 150) == 150
        assert fake_window.sizes[-1] == (WINDOW_WIDTH, 150)
        assert await bridge.invoke(WINDOW_SET_HEIGHT, 10) == 120
        assert await bridge.invoke(WINDOW_SET_HEIGHT, "700") == 700
        assert await bridge.invoke(WINDOW_GET_HEIGHT) == 700

    @pytest.mark.asyncio
    async def test_always_on_top_persisted(self, bridge, fake_window, host_store):
        host_store.set(PREFERENCES_KEY, {"theme": "light", "extra": 1})
        assert await bridge.invoke(WINDOW_SET_ALWAYS_ON_TOP, False) is False
        assert fake_window.pinned is False
        assert await bridge.invoke(WINDOW_GET_ALWAYS_ON_TOP) is False
        assert host_store.get(PREFERENCES_KEY) == {
            "theme": "light",
            "extra": 1,
            "alwaysOnTop": False,
        }

    @pytest.mark.asyncio
    async def test_center_clipboard_quit(self, bridge, fake_window, events):
        assert await bridge.invoke(WINDOW_CENTER) is True
        assert fake_window.centred == 1
        assert await bridge.invoke(CLIPBOARD_WRITE, "hello") is True
        await bridge.invoke(APP_QUIT)
        assert events == [("copy", "hello"), ("quit",)]

    def test_window_resized_persists_height(self, host, host_store):
        host.window_resized(60)
        assert host_store.get(PREFERENCES_KEY) == {"windowHeight": 120}
        host.window_resized(640.6)
        assert host_store.get(PREFERENCES_KEY) == {"windowHeight": 641}

    def test_initial_values_from_store(self, host, host_store):
        assert host.initial_height() == 520
        assert host.initial_always_on_top() is True
        host_store.set(PREFERENCES_KEY, {"windowHeight": 300, "alwaysOnTop": False})
        assert host.initial_height() == 300
        assert host.initial_always_on_top() is False

    def test_initial_height_ignores_junk(self, host, host_store):
        host_store.set(PREFERENCES_KEY, "not an object")
        assert host.initial_height() == 520


class TestWindowlessHost:
    @pytest.fixture
    def bridge(self, host_store):
        host = DesktopHost(host_store, lambda text: None, lambda: None)
        bridge = ChannelBridge()
        host.attach(bridge)
        return bridge

    @pytest.mark.asyncio
    async def test_defaults(self, bridge, host_store):
        assert await bridge.invoke(WINDOW_GET_HEIGHT) == 520
        assert await bridge.invoke(WINDOW_SET_HEIGHT, 700) == 520
        assert await bridge.invoke(WINDOW_CENTER) is False
        assert await bridge.invoke(WINDOW_GET_ALWAYS_ON_TOP) is True

    @pytest.mark.asyncio
    async def test_pin_falls_back_to_stored(self, bridge, host_store):
        await bridge.invoke(WINDOW_SET_ALWAYS_ON_TOP, False)
        assert await bridge.invoke(WINDOW_GET_ALWAYS_ON_TOP) is False


class TestDataLayerOverBridge:
    @pytest.fixture
    def store(self, bridge, tmp_path) -> ShelfStore:
        config = ShelfConfig(data_dir=tmp_path / "unused")
        capabilities = resolve_capabilities(config, bridge)
        assert capabilities.backend == "bridge"
        return ShelfStore(capabilities)

    @pytest.mark.asyncio
    async def test_document_stored_in_host_file(self, store, host_store):
        doc = await store.initialize()
        doc = await store.add_item(doc, "Blog", "https://blog.example")
        assert host_store.get(DATA_KEY) == doc.to_dict()
        assert not (host_store.path.parent / "unused").exists()

    @pytest.mark.asyncio
    async def test_data_layer_reclamps_host_height(self, store, fake_window):
        fake_window.height = 150
        assert await store.get_window_height() == 420
        assert await store.set_window_height(100) == 420
        assert fake_window.height == 420

    @pytest.mark.asyncio
    async def test_clipboard_uses_host(self, store, events):
        await store.copy_to_clipboard("https://x.example")
        assert events == [("copy", "https://x.example")]

    @pytest.mark.asyncio
    async def test_reset_applies_window_defaults(self, store, fake_window, host_store):
        fake_window.height = 800
        fake_window.pinned = False
        doc = await store.reset_to_defaults()
        assert doc.current_mode_id == DEFAULT_MODE_ID
        assert fake_window.height == 520
        assert fake_window.pinned is True
        assert fake_window.centred == 1
        assert host_store.get(PREFERENCES_KEY)["alwaysOnTop"] is True

    @pytest.mark.asyncio
    async def test_preferences_round_trip(self, store, host_store):
        await store.update_preferences(theme="light", window_height=700)
        assert host_store.get(PREFERENCES_KEY) == {
            "theme": "light",
            "windowHeight": 700,
            "alwaysOnTop": True,
        }
