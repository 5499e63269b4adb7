"""
Short-lived state machines that wait for the player to finish a transition.

A command such as ``loadfile`` is answered as soon as mpv *accepts* it; whether
the file actually started playing is only visible in the events that follow.
A Watcher is attached to an event source before the triggering command is
sent and turns the following event sequence into a single outcome:

    IDLE --start_event--> STARTED --success_event--> SUCCEEDED
                          STARTED --failure_event--> FAILED
    any non-terminal state, tick budget exhausted -> TIMED_OUT

One tick is one inbound frame observed by the watcher. Whatever the caller
does with the result, the watcher detaches from its source the moment it
reaches a terminal state.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .errors import (
    LoadFailedError,
    MpvError,
    NotRunningError,
    OperationTimeoutError,
    SeekInterruptedError,
)
from .router import EventRouter
from .transport import IpcTransport

_LOGGER = logging.getLogger(__name__)

DEFAULT_TICK_BUDGET = 10


class WatchState(Enum):
    IDLE = "idle"
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    ABANDONED = "abandoned"


_TERMINAL = frozenset(
    {WatchState.SUCCEEDED, WatchState.FAILED, WatchState.TIMED_OUT, WatchState.ABANDONED}
)


@dataclass(frozen=True)
class WatchSpec:
    """Which events start, complete and break one kind of transition."""

    success_event: str
    start_event: Optional[str] = "start-file"
    failure_events: Tuple[str, ...] = ("end-file",)
    # When False a failure event counts even before start_event was seen
    failure_requires_start: bool = True
    failure_error: Type[MpvError] = LoadFailedError


# load / jump / playlist navigation: a new file has to be opened
FILE_LOADED = WatchSpec(success_event="file-loaded")

# seek command: seek -> playback-restart, a track change ends it early
SEEK_COMPLETED = WatchSpec(
    success_event="playback-restart",
    start_event="seek",
    failure_events=("tracks-changed",),
    failure_requires_start=False,
    failure_error=SeekInterruptedError,
)

# follow-up of a seek event that has already been observed
SEEK_SETTLED = WatchSpec(
    success_event="playback-restart",
    start_event=None,
    failure_events=("tracks-changed",),
    failure_requires_start=False,
    failure_error=SeekInterruptedError,
)


class Watcher:
    """Single-use observer for one composite operation."""

    def __init__(
        self,
        spec: WatchSpec,
        target: Any = None,
        *,
        tick_budget: int = DEFAULT_TICK_BUDGET,
        method: str = "watch",
    ) -> None:
        self.spec = spec
        self.target = target
        self.tick_budget = tick_budget
        self.method = method

        self.ticks = 0
        self.state = WatchState.IDLE if spec.start_event is not None else WatchState.STARTED
        self.error: Optional[MpvError] = None

        self._future: Optional[asyncio.Future] = None
        self._teardown: List[Callable[[], None]] = []

    @property
    def started(self) -> bool:
        return self.state is WatchState.STARTED

    @property
    def done(self) -> bool:
        return self.state in _TERMINAL

    def observe(self, frame: Dict[str, Any]) -> WatchState:
        """Feed one inbound frame and return the resulting state."""
        if self.done:
            return self.state

        self.ticks += 1
        event = frame.get("event")
        spec = self.spec

        if event is not None:
            if self.state is WatchState.IDLE and event == spec.start_event:
                self._transition(WatchState.STARTED)
            elif event == spec.success_event and self.started:
                self._finish(WatchState.SUCCEEDED)
            elif event in spec.failure_events and (self.started or not spec.failure_requires_start):
                self._finish(
                    WatchState.FAILED,
                    spec.failure_error(self.method, arguments=[self.target], message=f"event: {event}"),
                )

        if not self.done and self.ticks >= self.tick_budget:
            _LOGGER.warning(
                "%s: no terminal event after %d frame(s) (target=%r)",
                self.method,
                self.ticks,
                self.target,
            )
            self._finish(
                WatchState.TIMED_OUT,
                OperationTimeoutError(self.method, arguments=[self.target]),
            )

        return self.state

    def succeed(self) -> None:
        """Resolve without waiting, for transitions that will emit nothing."""
        if not self.done:
            self._finish(WatchState.SUCCEEDED)

    def abandon(self, error: Optional[MpvError] = None) -> None:
        """Give up, e.g. because the event source went away."""
        if not self.done:
            self._finish(
                WatchState.ABANDONED,
                error or NotRunningError(self.method, arguments=[self.target]),
            )

    def add_teardown(self, callback: Callable[[], None]) -> None:
        if self.done:
            callback()
        else:
            self._teardown.append(callback)

    # -------------------------------------------------------------------------
    # Event sources
    # -------------------------------------------------------------------------

    def watch_router(self, router: EventRouter) -> None:
        """
        Observe the session's shared event stream.

        Property changes on that stream belong to the session's own
        observations. A dedicated connection never receives them, so they are
        not counted against the tick budget.
        """
        self.add_teardown(router.subscribe(self._observe_shared))

    def _observe_shared(self, frame: Dict[str, Any]) -> None:
        if frame.get("event") == "property-change":
            return
        self.observe(frame)

    async def watch_connection(self, address: str) -> IpcTransport:
        """Observe through a private connection that lives as long as the watcher."""
        transport = IpcTransport(
            self.observe,
            lambda error: self.abandon(
                NotRunningError(self.method, arguments=[self.target], message="watch connection closed")
            ),
            name=f"watch:{self.method}",
        )
        await transport.connect(address)
        self.add_teardown(transport.close)
        return transport

    # -------------------------------------------------------------------------
    # Awaiting the outcome
    # -------------------------------------------------------------------------

    async def wait(self, timeout: Optional[float] = None) -> None:
        """
        Wait for the terminal state. Raises the failure, timeout or abandon
        error; returns None on success.

        ``timeout`` is an optional wall-clock cap on top of the tick budget.
        Cancelling the waiting task does not stop the watcher.
        """
        future = self._ensure_future()
        try:
            await asyncio.wait_for(asyncio.shield(future), timeout)
        except asyncio.TimeoutError:
            self._finish(
                WatchState.TIMED_OUT,
                OperationTimeoutError(self.method, arguments=[self.target], message=f"after {timeout}s"),
            )
            await future

    def _ensure_future(self) -> asyncio.Future:
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
            if self.done:
                self._settle_future()
        return self._future

    def _settle_future(self) -> None:
        future = self._future
        if future is None or future.done():
            return
        if self.error is not None:
            future.set_exception(self.error)
        else:
            future.set_result(None)

    def _transition(self, state: WatchState) -> None:
        _LOGGER.debug("%s: %s -> %s (tick %d)", self.method, self.state.value, state.value, self.ticks)
        self.state = state

    def _finish(self, state: WatchState, error: Optional[MpvError] = None) -> None:
        if self.done:
            return
        self._transition(state)
        self.error = error

        teardown, self._teardown = self._teardown, []
        for callback in teardown:
            try:
                callback()
            except Exception:
                _LOGGER.exception("%s: teardown failed", self.method)

        self._settle_future()
