"""Dispatch of unsolicited player events."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .event_bus import EventBus
from .models import PlayerEvents, SessionState

_LOGGER = logging.getLogger(__name__)

EventListener = Callable[[Dict[str, Any]], None]

# Plain player events that map one-to-one onto a notification topic
_EVENT_TOPICS = {
    "idle": PlayerEvents.STOPPED,
    "playback-restart": PlayerEvents.STARTED,
    "pause": PlayerEvents.PAUSED,
    "unpause": PlayerEvents.RESUMED,
}


class EventRouter:
    """
    Delivers every frame without a request id to the registered listeners, in
    registration order and in the order the player emitted them, then
    translates it into a notification on the EventBus.

    ``property-change`` for ``time-pos`` is absorbed here: it only updates
    ``SessionState.current_time_pos`` and is never forwarded.
    """

    def __init__(
        self,
        session: SessionState,
        event_bus: EventBus,
        on_seek: Optional[Callable[[Optional[float]], None]] = None,
    ) -> None:
        self._session = session
        self._event_bus = event_bus
        self._on_seek = on_seek
        self._listeners: List[EventListener] = []

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, frame: Dict[str, Any]) -> None:
        event = frame.get("event")
        if event is None:
            _LOGGER.debug("Ignoring frame that is neither response nor event: %s", frame)
            return

        if event == "property-change" and frame.get("name") == "time-pos":
            self._session.current_time_pos = frame.get("data")
            return

        for listener in list(self._listeners):
            try:
                listener(frame)
            except Exception:
                _LOGGER.exception("Error in event listener for %s", event)

        self._publish(event, frame)

    def _publish(self, event: str, frame: Dict[str, Any]) -> None:
        topic = _EVENT_TOPICS.get(event)
        if topic is not None:
            _LOGGER.debug("Event: %s", topic)
            self._event_bus.publish(topic)
        elif event == "property-change":
            name = frame.get("name")
            value = frame.get("data")
            _LOGGER.debug("Property change: %s - %r", name, value)
            self._event_bus.publish(PlayerEvents.STATUS, {"property": name, "value": value})
        elif event == "seek":
            _LOGGER.debug("Event: seek")
            if self._on_seek is not None:
                self._on_seek(self._session.current_time_pos)
        elif event == "shutdown":
            _LOGGER.debug("Player announced shutdown")
            self._session.shutdown_announced = True
