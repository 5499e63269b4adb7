"""Utility methods."""

import logging
import os
import shutil
from typing import Dict, Iterable, List, Optional

from .errors import BinaryNotFoundError, InvalidArgumentError

_LOGGER = logging.getLogger(__name__)

IPC_SERVER_FLAG = "--input-ipc-server"

# --idle keeps mpv alive with an empty playlist; ipc=v makes it print the
# "Listening to IPC ..." line the process supervisor waits for.
_DEFAULT_ARGS = ["--idle", "--msg-level=all=no,ipc=v"]
_AUDIO_ONLY_ARGS = ["--no-video", "--no-audio-display"]

# See https://mpv.io/manual/stable/#protocols
SUPPORTED_PROTOCOLS = frozenset(
    [
        "appending",
        "av",
        "bd",
        "cdda",
        "dvb",
        "dvd",
        "edl",
        "fd",
        "fdclose",
        "file",
        "hex",
        "http",
        "https",
        "lavf",
        "memory",
        "mf",
        "null",
        "slice",
        "smb",
        "udp",
        "ytdl",
    ]
)

_BASIC_OBSERVED = [
    "mute",
    "pause",
    "duration",
    "volume",
    "filename",
    "path",
    "media-title",
    "playlist-pos",
    "playlist-count",
    "loop",
]
_VIDEO_OBSERVED = ["fullscreen", "sub-visibility"]


def default_socket_path() -> str:
    # Unix domain sockets only; Windows named pipes are not supported
    return "/tmp/mpv_ipc.sock"


def mpv_arguments(audio_only: bool, user_args: Optional[Iterable[str]] = None) -> List[str]:
    """Default command line plus the user's arguments, without duplicates."""
    args = list(_DEFAULT_ARGS)
    if audio_only:
        args.extend(_AUDIO_ONLY_ARGS)
    for arg in user_args or ():
        if arg not in args:
            args.append(arg)
    return args


def observed_properties(audio_only: bool) -> List[str]:
    """Properties observed on every session start."""
    if audio_only:
        return list(_BASIC_OBSERVED)
    return _BASIC_OBSERVED + _VIDEO_OBSERVED


def extract_protocol(source: str) -> Optional[str]:
    """``"http://host/x"`` -> ``"http"``; plain paths have no protocol."""
    if "://" not in source:
        return None
    return source.split("://", 1)[0]


def validate_protocol(protocol: str) -> bool:
    return protocol in SUPPORTED_PROTOCOLS


def format_options(options: Iterable[str]) -> Dict[str, str]:
    """``["a=1", "b=x=y"]`` -> ``{"a": "1", "b": "x=y"}``"""
    formatted: Dict[str, str] = {}
    for option in options:
        key, sep, value = option.partition("=")
        if not sep or not key:
            raise InvalidArgumentError("format_options()", arguments=[option], message="expected key=value")
        formatted[key] = value
    return formatted


def find_mpv_binary(binary: Optional[str] = None) -> str:
    """Resolve the player executable, honoring an explicit override."""
    if binary:
        if os.path.isfile(binary) and os.access(binary, os.X_OK):
            return binary
        resolved = shutil.which(binary)
    else:
        resolved = shutil.which("mpv")

    if resolved is None:
        raise BinaryNotFoundError("start()", arguments=[binary or "mpv"])

    _LOGGER.debug("Using mpv binary %s", resolved)
    return resolved
