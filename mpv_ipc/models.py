"""Shared state and value types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class PlayerEvents:
    """Notification topics published on the session's EventBus."""

    CRASHED = "crashed"
    QUIT = "quit"
    STOPPED = "stopped"
    STARTED = "started"
    PAUSED = "paused"
    RESUMED = "resumed"
    SEEK = "seek"
    STATUS = "status"
    TIME_POSITION = "timeposition"


class LoadMode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"
    APPEND_PLAY = "append-play"


class PlaylistLoadMode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"


class SeekMode(str, Enum):
    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    RELATIVE_PERCENT = "relative-percent"
    ABSOLUTE_PERCENT = "absolute-percent"


class NavigationMode(str, Enum):
    """``weak`` refuses to move past the ends of the playlist, ``force`` stops playback there."""

    WEAK = "weak"
    FORCE = "force"


class TrackFlag(str, Enum):
    SELECT = "select"
    AUTO = "auto"
    CACHED = "cached"


class FileFormat(str, Enum):
    FULL = "full"
    STRIPPED = "stripped"


# Subscription id 0 is reserved for time-pos; user observations start at 1.
TIME_POS_SUBSCRIPTION_ID = 0


@dataclass
class SessionState:
    """Per-session mutable state shared by the router and the player."""

    running: bool = False
    current_time_pos: Optional[float] = None
    observed_properties: Dict[str, int] = field(default_factory=dict)
    next_subscription_id: int = TIME_POS_SUBSCRIPTION_ID + 1
    # Set when the player announced its own shutdown before the socket closed
    shutdown_announced: bool = False

    def allocate_subscription_id(self, name: str) -> int:
        existing = self.observed_properties.get(name)
        if existing is not None:
            return existing
        subscription_id = self.next_subscription_id
        self.next_subscription_id += 1
        self.observed_properties[name] = subscription_id
        return subscription_id

    def release_subscription_id(self, name: str) -> Optional[int]:
        return self.observed_properties.pop(name, None)

    def reset(self) -> None:
        self.running = False
        self.current_time_pos = None
        self.observed_properties.clear()
        self.next_subscription_id = TIME_POS_SUBSCRIPTION_ID + 1
        self.shutdown_announced = False
