from __future__ import annotations

import asyncio

import pytest

from uitempo import RequestCancelledError
from uitempo.concurrency import ScreenScope
from uitempo.requests import (
    RequestController,
    get_request_controller,
    reset_request_controller,
)


def run_async(coro):
    return asyncio.run(coro)


def test_identifiers_are_namespaced_by_screen():
    screen = ScreenScope("works", requests=RequestController())
    assert screen.main_scope.id == "screen:works"
    assert screen.scope("gallery").id == "works/gallery"
    assert screen.request_id("feed") == "screen_works_feed"


def test_scope_is_get_or_create():
    screen = ScreenScope("reader", requests=RequestController())
    first = screen.scope("ai_panel")
    assert screen.scope("ai_panel") is first
    assert screen.scope_names == ["ai_panel"]

    screen.destroy_scope("ai_panel")
    assert first.is_destroyed
    assert screen.scope("ai_panel") is not first


def test_destroy_cancels_tasks_scopes_and_prefixed_requests():
    async def scenario() -> None:
        controller = RequestController()
        screen = ScreenScope("reader", requests=controller)

        main_task = screen.run(lambda: asyncio.sleep(10))
        panel_task = screen.scope("panel").run(lambda: asyncio.sleep(10))
        own_request = asyncio.create_task(
            screen.request("outline", lambda: asyncio.sleep(10, result="outline"))
        )
        other_request = asyncio.create_task(
            controller.request("screen_home_feed", lambda: asyncio.sleep(0.05, result="feed"))
        )
        await asyncio.sleep(0)
        assert controller.is_active("screen_reader_outline")

        screen.destroy()

        with pytest.raises(RequestCancelledError):
            await own_request
        await asyncio.gather(main_task, panel_task, return_exceptions=True)
        assert main_task.cancelled()
        assert panel_task.cancelled()
        assert await other_request == "feed"
        assert screen.is_destroyed
        assert screen.scope_names == []

    run_async(scenario())


def test_destroyed_screen_refuses_new_work():
    async def scenario() -> None:
        screen = ScreenScope("done", requests=RequestController())
        screen.destroy()
        screen.destroy()

        assert screen.run(lambda: asyncio.sleep(0)) is None
        late = screen.scope("late")
        assert late.is_destroyed
        assert screen.scope_names == []

        with pytest.raises(RequestCancelledError):
            await screen.request("feed", lambda: asyncio.sleep(0))

    run_async(scenario())


def test_cancel_all_keeps_screen_usable():
    async def scenario() -> None:
        controller = RequestController()
        screen = ScreenScope("list", requests=controller)
        running = screen.scope("rows").run(lambda: asyncio.sleep(10))
        pending_request = asyncio.create_task(
            screen.request("page", lambda: asyncio.sleep(10))
        )
        await asyncio.sleep(0)

        screen.cancel_all()
        with pytest.raises(RequestCancelledError):
            await pending_request
        await asyncio.gather(running, return_exceptions=True)
        assert running.cancelled()

        assert not screen.is_destroyed
        assert await screen.request("page", lambda: asyncio.sleep(0, result=2)) == 2

    run_async(scenario())


def test_default_request_controller_is_shared():
    reset_request_controller()
    try:
        screen = ScreenScope("shared")
        assert screen.requests is get_request_controller()
    finally:
        reset_request_controller()
