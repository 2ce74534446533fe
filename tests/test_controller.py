"""Tests for ShelfController state handling."""

from __future__ import annotations

import pytest

from linkshelf.controller import ShelfController
from linkshelf.errors import ShelfError, ValidationError
from linkshelf.models import DEFAULT_MODE_ID
from linkshelf.store import DATA_KEY


@pytest.fixture
def controller(store) -> ShelfController:
    return ShelfController(store)


class FailingStore:
    """Store whose initialize always raises."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def initialize(self):
        raise self.exc


class TestLoad:
    def test_initial_state(self, controller):
        assert controller.document is None
        assert controller.loading is True
        assert controller.error is None
        assert controller.current_mode is None
        assert controller.modes == ()

    @pytest.mark.asyncio
    async def test_load(self, controller):
        await controller.load()
        assert controller.loading is False
        assert controller.error is None
        assert controller.current_mode.id == DEFAULT_MODE_ID

    @pytest.mark.asyncio
    async def test_load_failure_sets_error(self):
        controller = ShelfController(FailingStore(RuntimeError("boom")))
        await controller.load()
        assert controller.loading is False
        assert controller.document is None
        assert controller.error == "boom"

    @pytest.mark.asyncio
    async def test_load_failure_fallback_message(self):
        controller = ShelfController(FailingStore(RuntimeError()))
        await controller.load()
        assert controller.error == "Failed to load data"


class TestBannerErrors:
    @pytest.mark.asyncio
    async def test_add_item(self, controller):
        await controller.load()
        await controller.add_item("Docs", "https://docs.example")
        assert [i.label for i in controller.current_mode.items][-1] == "Docs"

    @pytest.mark.asyncio
    async def test_validation_error_goes_to_banner(self, controller):
        await controller.load()
        before = controller.document
        await controller.add_section("   ")
        assert controller.error == "Section name is required"
        assert controller.document is before

    @pytest.mark.asyncio
    async def test_failed_persist_keeps_snapshot(self, controller, storage):
        await controller.load()
        before = controller.document
        storage.fail_writes = True
        await controller.delete_item("1")
        assert controller.document is before
        assert controller.error == "Failed to save data"

    @pytest.mark.asyncio
    async def test_clear_error(self, controller):
        await controller.load()
        await controller.add_section("")
        controller.clear_error()
        assert controller.error is None

    @pytest.mark.asyncio
    async def test_actions_before_load_are_ignored(self, controller, storage):
        await controller.add_item("x", "y")
        await controller.switch_mode("anything")
        assert controller.document is None
        assert controller.error is None
        assert storage.writes == []

    @pytest.mark.asyncio
    async def test_clipboard_failure(self, controller, clipboard):
        await controller.load()
        clipboard.succeed = False
        await controller.copy_to_clipboard("x")
        assert controller.error == "Failed to copy to clipboard"

    @pytest.mark.asyncio
    async def test_quit(self, controller, app):
        await controller.quit_app()
        assert app.quit_calls == 1


class TestRaisingModeOperations:
    @pytest.mark.asyncio
    async def test_not_ready(self, controller):
        with pytest.raises(ShelfError, match="Store is not ready"):
            await controller.add_mode("Work")

    @pytest.mark.asyncio
    async def test_add_mode(self, controller):
        await controller.load()
        await controller.add_mode("Research")
        assert controller.current_mode.name == "Research"
        assert len(controller.modes) == 2

    @pytest.mark.asyncio
    async def test_add_mode_duplicate_raises(self, controller):
        await controller.load()
        with pytest.raises(ValidationError, match="already exists"):
            await controller.add_mode("job applications")
        assert controller.error is None

    @pytest.mark.asyncio
    async def test_remove_only_mode_raises(self, controller):
        await controller.load()
        with pytest.raises(ValidationError, match="At least one mode"):
            await controller.remove_mode(DEFAULT_MODE_ID)


class TestSectionsAndOrdering:
    @pytest.mark.asyncio
    async def test_section_lifecycle(self, controller):
        await controller.load()
        await controller.add_section("Profiles")
        section = controller.current_mode.sections[0]
        await controller.update_item("2", section_id=section.id)
        await controller.update_section(section.id, "Social")
        assert controller.current_mode.sections[0].name == "Social"

        await controller.delete_section(section.id)
        assert controller.current_mode.sections == ()
        assert all(i.section_id is None for i in controller.current_mode.items)

    @pytest.mark.asyncio
    async def test_reorder(self, controller, storage):
        await controller.load()
        await controller.reorder_items(["3", "1", "2"])
        assert [i.id for i in controller.current_mode.items] == ["3", "1", "2"]
        stored = storage.data[DATA_KEY]["modes"][0]["items"]
        assert [i["order"] for i in stored] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_switch_mode(self, controller):
        await controller.load()
        await controller.add_mode("Other")
        await controller.switch_mode(DEFAULT_MODE_ID)
        assert controller.current_mode.id == DEFAULT_MODE_ID


class TestResetAndListeners:
    @pytest.mark.asyncio
    async def test_reset_clears_error(self, controller):
        await controller.load()
        await controller.add_mode("Other")
        await controller.add_section("")
        assert await controller.reset_to_defaults() is True
        assert controller.error is None
        assert [m.id for m in controller.modes] == [DEFAULT_MODE_ID]

    @pytest.mark.asyncio
    async def test_reset_failure(self, controller, storage):
        await controller.load()
        storage.fail_writes = True
        assert await controller.reset_to_defaults() is False
        assert controller.error == "Failed to save data"

    @pytest.mark.asyncio
    async def test_listeners(self, controller):
        seen = []
        unsubscribe = controller.subscribe(lambda c: seen.append(c.loading))
        await controller.load()
        await controller.add_item("x", "y")
        unsubscribe()
        await controller.add_item("z", "w")
        assert seen == [False, False]

    @pytest.mark.asyncio
    async def test_raising_listener_does_not_break_others(self, controller):
        seen = []

        def bad(_):
            raise RuntimeError("listener bug")

        controller.subscribe(bad)
        controller.subscribe(lambda c: seen.append(True))
        await controller.load()
        assert seen == [True]
