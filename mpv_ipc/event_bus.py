import logging
from typing import Any, Callable, Dict, List

_LOGGER = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    """A simple synchronous publish/subscribe event bus."""

    def __init__(self):
        # A dictionary to hold listeners for specific string topics
        self.topics: Dict[str, List[Listener]] = {}

    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        """
        Subscribes a listener to a topic. Returns a callable that removes it again.
        """
        if topic not in self.topics:
            self.topics[topic] = []
        self.topics[topic].append(listener)
        return lambda: self.unsubscribe(topic, listener)

    def unsubscribe(self, topic: str, listener: Listener) -> None:
        listeners = self.topics.get(topic, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, topic: str, data: Any = None) -> None:
        """
        Publishes an event to all subscribed listeners, in subscription order.
        """
        # Copy so listeners may unsubscribe while being called
        listeners = list(self.topics.get(topic, []))
        for listener in listeners:
            try:
                listener(data)
            except Exception:
                _LOGGER.exception("Error in event listener for topic %s", topic)

# Client helpers for subscriptions

def subscribe(func: Callable) -> Callable:
    """Decorator to mark a method for event bus subscription."""
    func._event_bus_subscribe = True
    return func

class EventHandler:
    """
    A base class for components that subscribe to events.
    """
    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._subscribe_all_methods()

    def _subscribe_all_methods(self):
        """Finds and subscribes all methods decorated with @subscribe."""
        for method_name in dir(self):
            method = getattr(self, method_name)

            if hasattr(method, '_event_bus_subscribe'):
                # The topic is the name of the method itself.
                self.event_bus.subscribe(method_name, method)
                _LOGGER.debug("Subscribed method '%s' to topic '%s'", method_name, method_name)
