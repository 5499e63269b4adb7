"""Tests for configuration loading."""

import json

import pytest

from mpv_ipc.config import WATCH_SHARED, Config, PlayerConfig, load_config_from_json


def test_defaults() -> None:
    config = Config()
    assert not config.app.debug
    assert config.player.auto_restart
    assert config.player.watch_tick_budget == 10
    assert config.player.watch_timeout is None


def test_load_from_json(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "app": {"debug": True},
                "player": {
                    "socket_path": "/tmp/test.sock",
                    "audio_only": True,
                    "mpv_args": ["--volume=40"],
                    "watch_connection": "shared",
                    "watch_timeout": 5.0,
                },
            }
        ),
        encoding="utf-8",
    )

    config = load_config_from_json(config_path)

    assert config.app.debug
    assert config.player.socket_path == "/tmp/test.sock"
    assert config.player.audio_only
    assert config.player.mpv_args == ["--volume=40"]
    assert config.player.watch_connection == WATCH_SHARED
    assert config.player.watch_timeout == 5.0


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config_from_json(tmp_path / "missing.json")


def test_invalid_json(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(json.JSONDecodeError):
        load_config_from_json(config_path)


def test_invalid_values() -> None:
    with pytest.raises(ValueError):
        PlayerConfig(watch_connection="sometimes")
    with pytest.raises(ValueError):
        PlayerConfig(watch_tick_budget=0)
    with pytest.raises(ValueError):
        PlayerConfig(time_update=0)
