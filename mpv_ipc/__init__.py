"""Control mpv over its JSON IPC socket."""

from .config import Config, PlayerConfig, load_config_from_json
from .errors import (
    AlreadyRunningError,
    BinaryNotFoundError,
    BindFailureError,
    CommandError,
    InvalidArgumentError,
    IpcConnectError,
    LoadFailedError,
    MpvError,
    NotRunningError,
    OperationTimeoutError,
    ProtocolDesyncError,
    SeekInterruptedError,
    SendFailureError,
    UnsupportedSourceError,
)
from .event_bus import EventBus, EventHandler, subscribe
from .models import FileFormat, LoadMode, NavigationMode, PlayerEvents, PlaylistLoadMode, SeekMode, TrackFlag
from .player import MpvPlayer

__all__ = [
    "AlreadyRunningError",
    "BinaryNotFoundError",
    "BindFailureError",
    "CommandError",
    "Config",
    "EventBus",
    "EventHandler",
    "FileFormat",
    "InvalidArgumentError",
    "IpcConnectError",
    "LoadFailedError",
    "LoadMode",
    "MpvError",
    "MpvPlayer",
    "NavigationMode",
    "NotRunningError",
    "OperationTimeoutError",
    "PlayerConfig",
    "PlayerEvents",
    "PlaylistLoadMode",
    "ProtocolDesyncError",
    "SeekInterruptedError",
    "SeekMode",
    "SendFailureError",
    "TrackFlag",
    "UnsupportedSourceError",
    "load_config_from_json",
    "subscribe",
]
