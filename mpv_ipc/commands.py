"""Outbound command shapes.

Every request sent to mpv is a positional JSON array, ``[name, *args]``.
The builders below are the only place where those arrays are assembled so
each command kind has exactly one shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Command:
    name: str
    args: Tuple[Any, ...] = ()

    def atoms(self) -> List[Any]:
        return [self.name, *self.args]

    def __str__(self) -> str:
        return " ".join(str(atom) for atom in self.atoms())


def raw(name: str, args: Sequence[Any] = ()) -> Command:
    return Command(name, tuple(args))


# -----------------------------------------------------------------------------
# Properties
# -----------------------------------------------------------------------------

def get_property(name: str) -> Command:
    return Command("get_property", (name,))


def set_property(name: str, value: Any) -> Command:
    return Command("set_property", (name, value))


def add_property(name: str, value: Any) -> Command:
    return Command("add", (name, value))


def multiply_property(name: str, value: Any) -> Command:
    return Command("multiply", (name, value))


def cycle_property(name: str) -> Command:
    return Command("cycle", (name,))


def observe_property(subscription_id: int, name: str) -> Command:
    return Command("observe_property", (subscription_id, name))


def unobserve_property(subscription_id: int) -> Command:
    return Command("unobserve_property", (subscription_id,))


# -----------------------------------------------------------------------------
# Playback / playlist
# -----------------------------------------------------------------------------

def loadfile(source: str, mode: str, options: Sequence[str] = ()) -> Command:
    args: Tuple[Any, ...] = (source, mode)
    if options:
        args += (",".join(options),)
    return Command("loadfile", args)


def loadlist(path: str, mode: str) -> Command:
    return Command("loadlist", (path, mode))


def seek(offset: float, mode: str) -> Command:
    return Command("seek", (str(offset), mode, "exact"))


def playlist_next(mode: str) -> Command:
    return Command("playlist-next", (mode,))


def playlist_prev(mode: str) -> Command:
    return Command("playlist-prev", (mode,))


def playlist_clear() -> Command:
    return Command("playlist-clear")


def playlist_remove(index: Any) -> Command:
    return Command("playlist-remove", (index,))


def playlist_move(index1: int, index2: int) -> Command:
    return Command("playlist-move", (index1, index2))


def playlist_shuffle() -> Command:
    return Command("playlist-shuffle")


def stop() -> Command:
    return Command("stop")


def quit_player() -> Command:
    return Command("quit")


# -----------------------------------------------------------------------------
# Tracks
# -----------------------------------------------------------------------------

def track_add(
    kind: str,
    path: str,
    flag: Optional[str] = None,
    title: Optional[str] = None,
    lang: Optional[str] = None,
) -> Command:
    """``audio-add`` / ``sub-add``. Later positional arguments require the earlier ones."""
    args: List[Any] = [path]
    if flag is not None or title is not None or lang is not None:
        args.append(flag or "select")
    if title is not None or lang is not None:
        args.append(title or "")
    if lang is not None:
        args.append(lang)
    return Command(f"{kind}-add", tuple(args))


def track_remove(kind: str, track_id: Any) -> Command:
    return Command(f"{kind}-remove", (track_id,))


def screenshot(mode: str = "subtitles") -> Command:
    return Command("screenshot", (mode,))


def screenshot_to_file(path: str, mode: str = "subtitles") -> Command:
    return Command("screenshot-to-file", (path, mode))
