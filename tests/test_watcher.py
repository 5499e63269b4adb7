"""Tests for the composite-operation watcher."""

import asyncio

import pytest

from mpv_ipc.errors import LoadFailedError, NotRunningError, OperationTimeoutError, SeekInterruptedError
from mpv_ipc.event_bus import EventBus
from mpv_ipc.models import SessionState
from mpv_ipc.router import EventRouter
from mpv_ipc.watcher import FILE_LOADED, SEEK_COMPLETED, SEEK_SETTLED, Watcher, WatchState


def _event(name: str) -> dict:
    return {"event": name}


def test_load_success() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    assert watcher.state is WatchState.IDLE

    assert watcher.observe(_event("start-file")) is WatchState.STARTED
    assert watcher.observe(_event("file-loaded")) is WatchState.SUCCEEDED
    assert watcher.error is None


def test_start_then_end_file_fails() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4", method="load()")

    watcher.observe(_event("start-file"))
    watcher.observe(_event("end-file"))

    assert watcher.state is WatchState.FAILED
    assert isinstance(watcher.error, LoadFailedError)
    assert watcher.error.source == "clip.mp4"


def test_end_file_before_start_is_ignored() -> None:
    # end-file of the previously playing title
    watcher = Watcher(FILE_LOADED, "clip.mp4")

    watcher.observe(_event("end-file"))
    assert watcher.state is WatchState.IDLE

    watcher.observe(_event("start-file"))
    watcher.observe(_event("file-loaded"))
    assert watcher.state is WatchState.SUCCEEDED


def test_success_event_before_start_is_ignored() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.observe(_event("file-loaded"))
    assert watcher.state is WatchState.IDLE


def test_times_out_after_ten_frames() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")

    for _ in range(9):
        watcher.observe({"event": "property-change", "name": "volume", "data": 50})
    assert watcher.state is WatchState.IDLE

    watcher.observe({"event": "property-change", "name": "volume", "data": 50})
    assert watcher.state is WatchState.TIMED_OUT
    assert isinstance(watcher.error, OperationTimeoutError)


def test_success_on_last_tick_wins() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4", tick_budget=2)
    watcher.observe(_event("start-file"))
    watcher.observe(_event("file-loaded"))
    assert watcher.state is WatchState.SUCCEEDED


def test_frames_after_terminal_state_are_ignored() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.observe(_event("start-file"))
    watcher.observe(_event("file-loaded"))

    watcher.observe(_event("end-file"))
    assert watcher.state is WatchState.SUCCEEDED
    assert watcher.ticks == 2


def test_seek_interrupted_by_track_change() -> None:
    watcher = Watcher(SEEK_COMPLETED, 30)
    watcher.observe(_event("tracks-changed"))

    assert watcher.state is WatchState.FAILED
    assert isinstance(watcher.error, SeekInterruptedError)


def test_seek_settled_needs_no_start_event() -> None:
    watcher = Watcher(SEEK_SETTLED, 10.0)
    assert watcher.state is WatchState.STARTED

    watcher.observe(_event("playback-restart"))
    assert watcher.state is WatchState.SUCCEEDED


def test_teardown_runs_once_on_terminal_state() -> None:
    calls = []
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.add_teardown(lambda: calls.append("closed"))

    watcher.observe(_event("start-file"))
    assert calls == []

    watcher.observe(_event("end-file"))
    watcher.abandon()
    assert calls == ["closed"]


def test_teardown_added_after_finish_runs_immediately() -> None:
    calls = []
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.succeed()
    watcher.add_teardown(lambda: calls.append("closed"))
    assert calls == ["closed"]


def test_router_subscription_removed_on_finish() -> None:
    router = EventRouter(SessionState(), EventBus())
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.watch_router(router)
    assert router.listener_count == 1

    router.dispatch(_event("start-file"))
    router.dispatch(_event("file-loaded"))

    assert watcher.state is WatchState.SUCCEEDED
    assert router.listener_count == 0


def test_shared_stream_property_changes_do_not_tick() -> None:
    router = EventRouter(SessionState(), EventBus())
    watcher = Watcher(FILE_LOADED, "clip.mp4", tick_budget=10)
    watcher.watch_router(router)

    router.dispatch(_event("start-file"))
    for volume in range(12):
        router.dispatch({"event": "property-change", "id": 4, "name": "volume", "data": volume})
    assert watcher.ticks == 1
    assert watcher.state is WatchState.STARTED

    router.dispatch(_event("file-loaded"))
    assert watcher.state is WatchState.SUCCEEDED


def test_shared_stream_other_events_still_tick() -> None:
    router = EventRouter(SessionState(), EventBus())
    watcher = Watcher(FILE_LOADED, "clip.mp4", tick_budget=3)
    watcher.watch_router(router)

    for _ in range(3):
        router.dispatch(_event("audio-reconfig"))

    assert watcher.state is WatchState.TIMED_OUT
    assert isinstance(watcher.error, OperationTimeoutError)


@pytest.mark.asyncio
async def test_wait_raises_failure() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    asyncio.get_running_loop().call_soon(watcher.observe, _event("start-file"))
    asyncio.get_running_loop().call_soon(watcher.observe, _event("end-file"))

    with pytest.raises(LoadFailedError):
        await watcher.wait()


@pytest.mark.asyncio
async def test_wait_after_success_returns() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.succeed()
    await watcher.wait()


@pytest.mark.asyncio
async def test_wait_with_wall_clock_timeout() -> None:
    calls = []
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    watcher.add_teardown(lambda: calls.append("closed"))

    with pytest.raises(OperationTimeoutError):
        await watcher.wait(timeout=0.05)

    assert watcher.state is WatchState.TIMED_OUT
    assert calls == ["closed"]


@pytest.mark.asyncio
async def test_abandon_wakes_waiter() -> None:
    watcher = Watcher(FILE_LOADED, "clip.mp4")
    asyncio.get_running_loop().call_later(0.01, watcher.abandon)

    with pytest.raises(NotRunningError):
        await watcher.wait()
    assert watcher.state is WatchState.ABANDONED
