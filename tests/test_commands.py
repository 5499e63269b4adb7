"""Tests for command builders and error reporting."""

from mpv_ipc import commands
from mpv_ipc.errors import CommandError, LoadFailedError, UnsupportedSourceError


def test_loadfile_options() -> None:
    assert commands.loadfile("/a.mp3", "replace").atoms() == ["loadfile", "/a.mp3", "replace"]
    assert commands.loadfile("/a.mp3", "append", ["start=5", "volume=20"]).atoms() == [
        "loadfile",
        "/a.mp3",
        "append",
        "start=5,volume=20",
    ]


def test_seek_is_exact() -> None:
    assert commands.seek(-10, "relative").atoms() == ["seek", "-10", "relative", "exact"]


def test_track_add_fills_preceding_arguments() -> None:
    assert commands.track_add("audio", "/a.flac").atoms() == ["audio-add", "/a.flac"]
    assert commands.track_add("sub", "/a.srt", lang="de").atoms() == ["sub-add", "/a.srt", "select", "", "de"]


def test_error_dict() -> None:
    error = UnsupportedSourceError("load()", arguments=["foo://x"], message="unknown scheme")
    assert error.to_dict() == {
        "errcode": 9,
        "verbose": "Unsupported protocol",
        "method": "load()",
        "arguments": ["foo://x"],
        "errmessage": "unknown scheme",
    }


def test_error_details() -> None:
    error = CommandError("invalid parameter", ["seek", "x", "relative", "exact"])
    assert error.code == 3
    assert "invalid parameter" in str(error)

    assert LoadFailedError("load()", arguments=["/clip.mp4"]).source == "/clip.mp4"
