#!/usr/bin/env python3
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .config import Config, load_config_from_json
from .errors import MpvError
from .event_bus import EventBus, EventHandler, subscribe
from .models import PlayerEvents
from .player import MpvPlayer

_LOGGER = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Notification logger
# -----------------------------------------------------------------------------

class PlayerEventLogger(EventHandler):
    """
    Logs player notifications and signals when the session is over.
    """
    def __init__(self, event_bus: EventBus):
        self.finished = asyncio.Event()
        super().__init__(event_bus)

    @subscribe
    def started(self, data=None):
        _LOGGER.info("Playback started")

    @subscribe
    def stopped(self, data=None):
        _LOGGER.info("Playback stopped")

    @subscribe
    def paused(self, data=None):
        _LOGGER.info("Paused")

    @subscribe
    def resumed(self, data=None):
        _LOGGER.info("Resumed")

    @subscribe
    def seek(self, data: dict):
        _LOGGER.info("Seeked from %s to %s", data.get("start"), data.get("end"))

    @subscribe
    def status(self, data: dict):
        _LOGGER.debug("%s = %r", data.get("property"), data.get("value"))

    @subscribe
    def crashed(self, data=None):
        _LOGGER.warning("mpv crashed")

    @subscribe
    def quit(self, data=None):
        _LOGGER.info("mpv quit")
        self.finished.set()

    @subscribe
    def timeposition(self, data: float):
        _LOGGER.debug("Time position: %.2f", data)

# -----------------------------------------------------------------------------
# Main Application
# -----------------------------------------------------------------------------

async def main(argv: Optional[List[str]] = None) -> None:
    # --- 1. Load Basics ---
    config, args = _init_basics(argv)
    event_bus = EventBus()
    notifications = PlayerEventLogger(event_bus)

    # --- 2. Start player ---
    player = MpvPlayer(config.player, event_bus=event_bus)
    if not config.player.auto_restart:
        event_bus.subscribe(PlayerEvents.CRASHED, lambda _data: notifications.finished.set())

    try:
        await player.start()
    except MpvError as e:
        _LOGGER.critical("Could not start mpv: %s", e)
        sys.exit(1)

    # --- 3. Queue sources ---
    try:
        for index, source in enumerate(args.sources):
            mode = "replace" if index == 0 else "append"
            await player.load(source, mode)
            _LOGGER.info("Queued %s", source)

        # --- 4. Run until mpv goes away ---
        await notifications.finished.wait()
    except MpvError as e:
        _LOGGER.error("%s", e)
    finally:
        # --- 5. Cleanup ---
        _LOGGER.debug("Shutting down...")
        await player.quit()

# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def _init_basics(argv: Optional[List[str]]) -> Tuple[Config, argparse.Namespace]:
    """Loads config and sets up logging."""
    parser = argparse.ArgumentParser(prog="mpv-ipc")
    parser.add_argument(
        "-c", "--config", type=Path, required=False,
        help="Path to configuration.json file"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--socket", help="IPC socket path (overrides the configuration)")
    parser.add_argument("--audio-only", action="store_true", help="Start mpv without video output")
    parser.add_argument("sources", nargs="*", help="Files or URLs to play")
    args = parser.parse_args(argv)

    config = load_config_from_json(args.config) if args.config else Config()

    if args.debug:
        config.app.debug = True
    if args.socket:
        config.player.socket_path = args.socket
    if args.audio_only:
        config.player.audio_only = True

    logging.basicConfig(
        level=logging.DEBUG if config.app.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    if args.config:
        _LOGGER.info("Loading configuration from: %s", args.config)

    return config, args


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
