"""Configuration models for the player session."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .util import default_socket_path

import logging
_LOGGER = logging.getLogger(__name__)

WATCH_DEDICATED = "dedicated"
WATCH_SHARED = "shared"

# -----------------------------------------------------------------------------
# Configuration Dataclasses
# -----------------------------------------------------------------------------

@dataclass
class PlayerConfig:
    """Settings for the mpv session."""
    socket_path: str = field(default_factory=default_socket_path)
    # Path or name of the mpv executable; None searches PATH for "mpv"
    binary: Optional[str] = None
    audio_only: bool = False
    mpv_args: List[str] = field(default_factory=list)
    auto_restart: bool = True
    # Seconds between "timeposition" notifications
    time_update: float = 1.0
    # Frames a watcher observes before it gives up
    watch_tick_budget: int = 10
    # "dedicated": one extra IPC connection per composite operation
    # "shared": watchers subscribe to the session's own event stream, skipping property-change frames
    watch_connection: str = WATCH_DEDICATED
    # Optional wall-clock cap (seconds) on top of the tick budget
    watch_timeout: Optional[float] = None
    startup_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.watch_connection not in (WATCH_DEDICATED, WATCH_SHARED):
            raise ValueError(
                f"watch_connection must be '{WATCH_DEDICATED}' or '{WATCH_SHARED}', "
                f"got {self.watch_connection!r}"
            )
        if self.watch_tick_budget < 1:
            raise ValueError("watch_tick_budget must be at least 1")
        if self.time_update <= 0:
            raise ValueError("time_update must be positive")


@dataclass
class AppConfig:
    """General application settings."""
    debug: bool = False


@dataclass
class Config:
    """Main configuration object."""
    app: AppConfig = field(default_factory=AppConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)

# -----------------------------------------------------------------------------
# Helper Function
# -----------------------------------------------------------------------------

def load_config_from_json(config_path: Path) -> Config:
    """Loads configuration from a JSON file and populates dataclasses."""

    # --- Step 1: Load raw JSON data ---
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_data = json.load(f)
    except FileNotFoundError:
        _LOGGER.critical("Configuration file not found at: %s", config_path)
        raise
    except json.JSONDecodeError as e:
        _LOGGER.critical("Error parsing configuration file: %s", e)
        raise

    if not isinstance(raw_data, dict):
        raise ValueError("Configuration file must contain a JSON object.")

    # --- Step 2: Create config objects from raw data ---
    app_config = AppConfig(**raw_data.get("app", {}))
    player_config = PlayerConfig(**raw_data.get("player", {}))

    # --- Step 3: Return the main Config object ---
    return Config(app=app_config, player=player_config)
