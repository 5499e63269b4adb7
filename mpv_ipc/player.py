"""
Controller for an mpv process driven over its JSON IPC socket.

This wrapper focuses on:
- Session lifecycle (start / quit / crash handling with optional auto-restart)
- Request/response commands (properties, observation, arbitrary commands)
- Composite operations that only return once mpv has actually reached the
  target state (load, playlist navigation, seek)
- Publishing player notifications on an EventBus (see ``PlayerEvents``)

All work happens on one asyncio loop: the socket read loop is the only source
of concurrency, responses and events are handled synchronously as frames
arrive.
"""
from __future__ import annotations

import asyncio
import functools
import json
import logging
import os
from typing import Any, Awaitable, Callable, Coroutine, Dict, Iterable, List, Optional, Sequence, Set, Union

from . import commands, util
from .commands import Command
from .config import WATCH_SHARED, PlayerConfig
from .errors import (
    AlreadyRunningError,
    CommandError,
    InvalidArgumentError,
    MpvError,
    NotRunningError,
    ProtocolDesyncError,
    SendFailureError,
    UnsupportedSourceError,
)
from .event_bus import EventBus
from .ledger import RequestLedger
from .models import (
    TIME_POS_SUBSCRIPTION_ID,
    FileFormat,
    LoadMode,
    NavigationMode,
    PlayerEvents,
    PlaylistLoadMode,
    SeekMode,
    SessionState,
    TrackFlag,
)
from .process import MpvProcess
from .router import EventListener, EventRouter
from .transport import UNIX_SOCKETS, IpcTransport
from .watcher import FILE_LOADED, SEEK_COMPLETED, SEEK_SETTLED, WatchSpec, Watcher

_LOGGER = logging.getLogger(__name__)

_LOAD_MODE_HELP = {
    "replace": "Replace the currently playing title",
    "append": "Append the title to the playlist",
    "append-play": "Append the title and when it is the only title in the list start playback",
}

_PROBE_TIMEOUT = 1.0
_QUIT_TIMEOUT = 2.0


class MpvPlayer:
    """An mpv session controlled over JSON IPC."""

    def __init__(
        self,
        config: Optional[PlayerConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config or PlayerConfig()
        self.event_bus = event_bus or EventBus()
        self.state = SessionState()
        self.mpv_args = util.mpv_arguments(self.config.audio_only, self.config.mpv_args)

        self.router = EventRouter(self.state, self.event_bus, on_seek=self._on_seek_event)

        self._transport: Optional[IpcTransport] = None
        self._ledger: Optional[RequestLedger] = None
        self._process: Optional[MpvProcess] = None
        # True when we hooked into an mpv that someone else started
        self._external_instance = False
        self._starting = False
        self._quitting = False

        self._time_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._watchers: Set[Watcher] = set()

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.state.running

    def is_running(self) -> bool:
        return self.state.running

    @property
    def process(self) -> Optional[MpvProcess]:
        return self._process

    async def start(self, extra_args: Sequence[str] = ()) -> None:
        """
        Start mpv (or hook into one already listening on the socket), then
        observe the default properties and start the time position timer.

        :param extra_args: Arguments appended to the command line for this start only.
        """
        if self.state.running or self._starting or self._transport is not None:
            raise AlreadyRunningError("start()")

        self._starting = True
        self._quitting = False
        self.state.reset()
        try:
            if await self._instance_running():
                self._external_instance = True
                await self._connect()
                _LOGGER.info("Detected running mpv instance at %s", self.config.socket_path)
                _LOGGER.info("Hooked into existing mpv instance without starting a new one")
            else:
                self._external_instance = False
                self._process = MpvProcess(
                    self.config.socket_path,
                    self.mpv_args,
                    binary=self.config.binary,
                    startup_timeout=self.config.startup_timeout,
                )
                await self._process.start(extra_args)
                await self._connect()
                # First answered request means mpv finished loading
                await self._request(commands.get_property("idle-active"))

            await self._request(commands.observe_property(TIME_POS_SUBSCRIPTION_ID, "time-pos"))
            self._time_task = self._spawn(self._time_position_loop())

            await asyncio.gather(
                *(self.observe_property(name) for name in util.observed_properties(self.config.audio_only))
            )
        except BaseException:
            await self._teardown()
            raise
        finally:
            self._starting = False

        self.state.running = True
        _LOGGER.info("mpv session running on %s", self.config.socket_path)

    async def quit(self) -> None:
        """
        Quit mpv. Unlike a crash this emits no notification and never restarts.
        """
        if self._transport is None and self._process is None:
            _LOGGER.debug("quit(): no active session")
            return

        self._quitting = True
        self._cancel_time_task()

        if self._transport is not None and self._transport.connected:
            try:
                await asyncio.wait_for(self._request(commands.quit_player()), _QUIT_TIMEOUT)
            except (NotRunningError, asyncio.TimeoutError):
                # mpv may close the socket before it answers
                pass

        await self._teardown()
        _LOGGER.info("mpv session stopped")

    async def _teardown(self) -> None:
        self._quitting = True
        self._cancel_time_task()
        if self._transport is not None:
            self._transport.close()
        self._transport = None
        self._ledger = None
        self._abandon_watchers()
        self.state.running = False

        process, self._process = self._process, None
        if process is not None:
            await process.stop()

    async def _instance_running(self) -> bool:
        """Ask whatever listens on the socket for its version."""
        if not UNIX_SOCKETS:
            return False
        try:
            reader, writer = await asyncio.open_unix_connection(self.config.socket_path)
        except (OSError, NotImplementedError):
            return False

        try:
            request = {"command": ["get_property", "mpv-version"]}
            writer.write((json.dumps(request) + "\n").encode("utf-8"))
            await writer.drain()
            # Skip any events that arrive before the answer
            for _ in range(10):
                line = await asyncio.wait_for(reader.readline(), _PROBE_TIMEOUT)
                if not line:
                    return False
                if not line.strip():
                    continue
                frame = json.loads(line)
                if "event" in frame:
                    continue
                return frame.get("error") == "success" and "data" in frame
            return False
        except (OSError, asyncio.TimeoutError, ValueError):
            return False
        finally:
            writer.close()

    async def _connect(self) -> None:
        transport = IpcTransport(
            self._on_frame,
            lambda error: self._on_connection_closed(transport, error),
            name="primary",
        )
        await transport.connect(self.config.socket_path)
        self._transport = transport
        self._ledger = RequestLedger(transport)

    def _on_frame(self, frame: Dict[str, Any]) -> None:
        if self._ledger is not None and self._ledger.handle_response(frame):
            return
        self.router.dispatch(frame)

    def _on_connection_closed(self, transport: IpcTransport, error: Optional[BaseException]) -> None:
        """
        The primary connection went away.

        If we are quitting this is expected. If mpv announced its shutdown
        first, the user quit it and ``quit`` is emitted. Otherwise mpv crashed:
        ``crashed`` is emitted, after a restart when auto_restart is enabled.
        """
        if transport is not self._transport:
            return

        self._transport = None
        ledger, self._ledger = self._ledger, None
        self._cancel_time_task()
        self.state.running = False

        lost = NotRunningError("connection", message="IPC connection closed")
        if ledger is not None:
            ledger.abandon_all(lost)
        self._abandon_watchers()

        if self._quitting:
            return

        if isinstance(error, ProtocolDesyncError):
            _LOGGER.error("Dropped mpv connection after malformed frame: %s", error)

        if self.state.shutdown_announced:
            _LOGGER.info("mpv was quit")
            self._reap_process()
            self.event_bus.publish(PlayerEvents.QUIT)
            return

        if self._external_instance:
            # Cannot tell whether an external instance quit or crashed
            _LOGGER.warning("Connection to external mpv instance lost")
            self.event_bus.publish(PlayerEvents.CRASHED)
            self.event_bus.publish(PlayerEvents.QUIT)
            return

        if self.config.auto_restart:
            _LOGGER.warning("mpv has crashed, trying to restart")
            self._spawn(self._restart())
        else:
            _LOGGER.warning("mpv has crashed")
            self._reap_process()
            self.event_bus.publish(PlayerEvents.CRASHED)

    async def _restart(self) -> None:
        process, self._process = self._process, None
        if process is not None:
            _LOGGER.debug("mpv output before crash: %s", list(process.output_tail))
            await process.stop()

        try:
            await self.start()
            _LOGGER.info("Restarted mpv")
        except MpvError:
            _LOGGER.exception("Restarting mpv failed")
        finally:
            self.event_bus.publish(PlayerEvents.CRASHED)

    def _reap_process(self) -> None:
        process, self._process = self._process, None
        if process is not None:
            self._spawn(process.stop())

    # -------------------------------------------------------------------------
    # Background work
    # -------------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_time_task(self) -> None:
        if self._time_task is not None:
            self._time_task.cancel()
            self._time_task = None

    async def _time_position_loop(self) -> None:
        """Emit the current time position every ``time_update`` seconds unless paused."""
        while True:
            await asyncio.sleep(self.config.time_update)
            try:
                paused = await self.is_paused()
            except NotRunningError:
                _LOGGER.debug("Time position timer stopped: mpv is not running")
                return
            except CommandError as e:
                _LOGGER.debug("Time position timer cannot retrieve pause state: %s", e)
                continue

            if not paused and self.state.current_time_pos is not None:
                self.event_bus.publish(PlayerEvents.TIME_POSITION, self.state.current_time_pos)

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def on(self, topic: str, listener: Callable[[Any], None]) -> Callable[[], None]:
        """Subscribe to a ``PlayerEvents`` topic. Returns an unsubscribe callable."""
        return self.event_bus.subscribe(topic, listener)

    def add_event_listener(self, listener: EventListener) -> Callable[[], None]:
        """Receive every raw player event (except time-pos changes)."""
        return self.router.subscribe(listener)

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def _request(self, command: Command) -> Any:
        if self._transport is None or self._ledger is None:
            raise NotRunningError(command.name, arguments=list(command.args))

        ledger = self._ledger
        future = ledger.submit(command)
        try:
            await self._transport.drain()
        except SendFailureError as e:
            ledger.discard(future)
            raise NotRunningError(command.name, arguments=list(command.args), message=e.message) from e
        return await future

    def _require_running(self, method: str, arguments: Optional[List[Any]] = None, **kwargs: Any) -> None:
        if not self.state.running:
            raise NotRunningError(method, arguments=arguments, **kwargs)

    async def command(self, name: str, args: Sequence[Any] = ()) -> Any:
        """Send a command with arguments and return its ``data``."""
        return await self._request(commands.raw(name, args))

    async def command_json(self, payload: Dict[str, Any]) -> None:
        """Send a complete JSON command object as-is; the reply is not tracked."""
        await self.free_command(json.dumps(payload))

    async def free_command(self, line: str) -> None:
        """Send a free-form line; the trailing newline is added."""
        if self._transport is None:
            raise NotRunningError("free_command()", arguments=[line])
        try:
            self._transport.send_line(line)
            await self._transport.drain()
        except SendFailureError as e:
            raise NotRunningError("free_command()", arguments=[line], message=e.message) from e

    async def get_property(self, name: str) -> Any:
        return await self._request(commands.get_property(name))

    async def set_property(self, name: str, value: Any) -> None:
        await self._request(commands.set_property(name, value))

    async def set_multiple_properties(self, properties: Dict[str, Any]) -> None:
        self._require_running("set_multiple_properties()", [properties])
        for name, value in properties.items():
            await self.set_property(name, value)

    async def add_property(self, name: str, value: Any) -> None:
        await self._request(commands.add_property(name, value))

    async def multiply_property(self, name: str, value: Any) -> None:
        await self._request(commands.multiply_property(name, value))

    async def cycle_property(self, name: str) -> None:
        await self._request(commands.cycle_property(name))

    async def observe_property(self, name: str) -> int:
        """
        Have mpv report every change of ``name`` as a ``status`` notification.

        Returns the subscription id. Observing a property twice returns the
        id of the existing subscription.
        """
        if name in self.state.observed_properties:
            return self.state.observed_properties[name]

        subscription_id = self.state.allocate_subscription_id(name)
        try:
            await self._request(commands.observe_property(subscription_id, name))
        except MpvError:
            self.state.release_subscription_id(name)
            raise
        return subscription_id

    async def unobserve_property(self, name: str) -> None:
        subscription_id = self.state.observed_properties.get(name)
        if subscription_id is None:
            raise InvalidArgumentError("unobserve_property()", arguments=[name], message="property is not observed")
        # The table entry stays until mpv confirms
        await self._request(commands.unobserve_property(subscription_id))
        self.state.release_subscription_id(name)

    # -------------------------------------------------------------------------
    # Watched (composite) operations
    # -------------------------------------------------------------------------

    async def _attach(self, watcher: Watcher) -> None:
        if self.config.watch_connection == WATCH_SHARED:
            watcher.watch_router(self.router)
        else:
            await watcher.watch_connection(self.config.socket_path)
        self._watchers.add(watcher)
        watcher.add_teardown(functools.partial(self._watchers.discard, watcher))

    def _abandon_watchers(self) -> None:
        for watcher in list(self._watchers):
            watcher.abandon(NotRunningError(watcher.method, arguments=[watcher.target], message="session ended"))

    async def _run_watched(
        self,
        spec: WatchSpec,
        target: Any,
        method: str,
        trigger: Callable[[Watcher], Awaitable[None]],
    ) -> None:
        """Attach a watcher, run the triggering command(s), wait for the outcome."""
        watcher = Watcher(spec, target, tick_budget=self.config.watch_tick_budget, method=method)
        await self._attach(watcher)
        try:
            await trigger(watcher)
        except BaseException:
            watcher.abandon()
            raise
        await watcher.wait(self.config.watch_timeout)

    @staticmethod
    def _resolve_source(source: str, method: str, arguments: List[Any]) -> str:
        """Keep URLs as they are, make file paths absolute."""
        protocol = util.extract_protocol(source)
        if protocol is None:
            return os.path.abspath(source)
        if not util.validate_protocol(protocol):
            raise UnsupportedSourceError(
                method,
                arguments=arguments,
                message="See https://mpv.io/manual/stable/#protocols for supported protocols",
            )
        return source

    async def load(
        self,
        source: str,
        mode: Union[LoadMode, str] = LoadMode.REPLACE,
        options: Sequence[str] = (),
    ) -> None:
        """Load a file or stream and return once mpv has opened it.

        :param mode: replace the current title, append it to the playlist, or
                     append it and start playback when it is the only entry.
        :param options: per-file options, ``["option=value", ...]``.
        """
        mode = LoadMode(mode)
        arguments = [source, mode.value, list(options)]
        self._require_running("load()", arguments, options=_LOAD_MODE_HELP)
        source = self._resolve_source(source, "load()", arguments)
        # Rejects anything that is not key=value
        util.format_options(options)
        command = commands.loadfile(source, mode.value, options)

        # Nothing is played, nothing will be emitted
        if mode is LoadMode.APPEND:
            await self._request(command)
            return

        async def trigger(watcher: Watcher) -> None:
            await self._request(command)
            if mode is LoadMode.APPEND_PLAY and await self.get_playlist_size() > 1:
                # Something else is playing already; the new entry just waits
                watcher.succeed()

        await self._run_watched(FILE_LOADED, source, "load()", trigger)

    async def append(self, source: str, mode: Union[LoadMode, str] = LoadMode.APPEND, options: Sequence[str] = ()) -> None:
        await self.load(source, mode, options)

    async def load_playlist(self, path: str, mode: Union[PlaylistLoadMode, str] = PlaylistLoadMode.REPLACE) -> None:
        """Load a playlist file; in replace mode wait until its first entry is open."""
        mode = PlaylistLoadMode(mode)
        arguments = [path, mode.value]
        self._require_running("load_playlist()", arguments)
        path = self._resolve_source(path, "load_playlist()", arguments)
        command = commands.loadlist(path, mode.value)

        if mode is PlaylistLoadMode.APPEND:
            await self._request(command)
            return

        async def trigger(watcher: Watcher) -> None:
            await self._request(command)

        await self._run_watched(FILE_LOADED, path, "load_playlist()", trigger)

    async def jump(self, index: int) -> None:
        """Play the playlist entry at ``index``."""
        self._require_running("jump()", [index])
        if index < 0:
            raise InvalidArgumentError("jump()", arguments=[index], message="index must not be negative")

        # Filename of the entry for error reporting; fails for a bad index
        filename = await self.get_property(f"playlist/{index}/filename")

        async def trigger(watcher: Watcher) -> None:
            await self.set_property("playlist-pos", index)

        await self._run_watched(FILE_LOADED, filename, "jump()", trigger)

    async def next(self, mode: Union[NavigationMode, str] = NavigationMode.WEAK) -> None:
        """Skip to the next playlist entry and wait until it is open."""
        await self._navigate(commands.playlist_next, "next()", mode)

    async def prev(self, mode: Union[NavigationMode, str] = NavigationMode.WEAK) -> None:
        """Go back to the previous playlist entry and wait until it is open."""
        await self._navigate(commands.playlist_prev, "prev()", mode)

    async def _navigate(self, build: Callable[[str], Command], method: str, mode: Union[NavigationMode, str]) -> None:
        mode = NavigationMode(mode)
        self._require_running(method, [mode.value])
        command = build(mode.value)

        async def trigger(watcher: Watcher) -> None:
            await self._request(command)

        await self._run_watched(FILE_LOADED, command.name, method, trigger)

    async def seek(self, offset: float, mode: Union[SeekMode, str] = SeekMode.RELATIVE) -> Dict[str, Optional[float]]:
        """
        Seek and wait for playback to restart at the new position.

        Returns the time positions before and after the seek.
        """
        mode = SeekMode(mode)
        self._require_running("seek()", [offset, mode.value])
        start = self.state.current_time_pos

        async def trigger(watcher: Watcher) -> None:
            await self._request(commands.seek(offset, mode.value))

        await self._run_watched(SEEK_COMPLETED, offset, "seek()", trigger)

        # A dedicated watcher can finish before the primary connection has
        # read the new time-pos, so ask mpv directly.
        try:
            end = await self.get_property("time-pos")
        except CommandError as e:
            _LOGGER.debug("seek(): time-pos unavailable after seek: %s", e)
            end = self.state.current_time_pos
        return {"start": start, "end": end}

    async def go_to_position(self, seconds: float) -> Dict[str, Optional[float]]:
        return await self.seek(seconds, SeekMode.ABSOLUTE)

    def _on_seek_event(self, start: Optional[float]) -> None:
        """Publish ``seek`` once playback restarts after a seek, whoever issued it."""
        watcher = Watcher(SEEK_SETTLED, start, tick_budget=self.config.watch_tick_budget, method="seek")
        # Always on the shared stream: a new connection could miss playback-restart
        watcher.watch_router(self.router)
        self._watchers.add(watcher)
        watcher.add_teardown(functools.partial(self._watchers.discard, watcher))
        self._spawn(self._publish_seek(watcher, start))

    async def _publish_seek(self, watcher: Watcher, start: Optional[float]) -> None:
        try:
            await watcher.wait(self.config.watch_timeout)
        except MpvError as e:
            _LOGGER.debug("Seek did not settle: %s", e)
            return
        self.event_bus.publish(PlayerEvents.SEEK, {"start": start, "end": self.state.current_time_pos})

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    async def toggle_pause(self) -> None:
        await self.cycle_property("pause")

    async def pause(self) -> None:
        await self.set_property("pause", True)

    async def resume(self) -> None:
        await self.set_property("pause", False)

    async def play(self) -> None:
        """Start the playlist from the top when idle, otherwise unpause."""
        idle = await self.get_property("idle-active")
        playlist_size = await self.get_playlist_size()
        if idle and playlist_size > 0:
            await self.jump(0)
        else:
            await self.set_property("pause", False)

    async def stop(self) -> None:
        await self._request(commands.stop())

    async def volume(self, value: float) -> None:
        await self.set_property("volume", value)

    async def adjust_volume(self, value: float) -> None:
        await self.add_property("volume", value)

    async def mute(self, should: Optional[bool] = None) -> None:
        """Mute (True), unmute (False) or toggle (None)."""
        if should is None:
            await self.cycle_property("mute")
        else:
            await self.set_property("mute", should)

    async def loop(self, times: Union[int, str, None] = None) -> None:
        """
        Loop ``times`` times, ``"inf"`` or ``"no"``. Without an argument
        looping is toggled between off and infinite.
        """
        if times is not None:
            await self.set_property("loop", times)
            return
        status = await self.get_property("loop")
        await self.set_property("loop", "inf" if status in (None, False, "no") else "no")

    async def speed(self, factor: float) -> None:
        if not 0.01 <= factor <= 100:
            raise InvalidArgumentError("speed()", arguments=[factor], message="factor must be within 0.01 - 100")
        await self.set_property("speed", factor)

    # -------------------------------------------------------------------------
    # Audio / subtitle tracks
    # -------------------------------------------------------------------------

    async def add_audio_track(
        self,
        file: str,
        flag: Optional[Union[TrackFlag, str]] = None,
        title: Optional[str] = None,
        lang: Optional[str] = None,
    ) -> None:
        flag_value = TrackFlag(flag).value if flag is not None else None
        await self._request(commands.track_add("audio", file, flag_value, title, lang))

    async def remove_audio_track(self, track_id: Union[int, str]) -> None:
        await self._request(commands.track_remove("audio", track_id))

    async def select_audio_track(self, track_id: Union[int, str]) -> None:
        await self.set_property("audio", track_id)

    async def cycle_audio_tracks(self) -> None:
        await self.cycle_property("audio")

    async def adjust_audio_timing(self, seconds: float) -> None:
        await self.set_property("audio-delay", seconds)

    async def add_subtitles(
        self,
        file: str,
        flag: Optional[Union[TrackFlag, str]] = None,
        title: Optional[str] = None,
        lang: Optional[str] = None,
    ) -> None:
        flag_value = TrackFlag(flag).value if flag is not None else None
        await self._request(commands.track_add("sub", file, flag_value, title, lang))

    async def remove_subtitles(self, track_id: Union[int, str]) -> None:
        await self._request(commands.track_remove("sub", track_id))

    async def select_subtitles(self, track_id: Union[int, str]) -> None:
        await self.set_property("sub", track_id)

    async def cycle_subtitles(self) -> None:
        await self.cycle_property("sub")

    async def toggle_subtitle_visibility(self) -> None:
        await self.cycle_property("sub-visibility")

    async def show_subtitles(self) -> None:
        await self.set_property("sub-visibility", True)

    async def hide_subtitles(self) -> None:
        await self.set_property("sub-visibility", False)

    async def adjust_subtitle_timing(self, seconds: float) -> None:
        await self.set_property("sub-delay", seconds)

    # -------------------------------------------------------------------------
    # Video
    # -------------------------------------------------------------------------

    async def fullscreen(self) -> None:
        await self.set_property("fullscreen", True)

    async def leave_fullscreen(self) -> None:
        await self.set_property("fullscreen", False)

    async def toggle_fullscreen(self) -> None:
        await self.cycle_property("fullscreen")

    async def screenshot(self, file: Optional[str] = None, option: str = "subtitles") -> None:
        if file is None:
            await self._request(commands.screenshot(option))
        else:
            await self._request(commands.screenshot_to_file(file, option))

    async def rotate_video(self, degrees: int) -> None:
        if degrees % 90 != 0:
            raise InvalidArgumentError("rotate_video()", arguments=[degrees], message="degrees must be a multiple of 90")
        await self.set_property("video-rotate", degrees)

    async def zoom_video(self, factor: float) -> None:
        await self.set_property("video-zoom", factor)

    # -------------------------------------------------------------------------
    # Playlist
    # -------------------------------------------------------------------------

    async def get_playlist_size(self) -> int:
        return await self.get_property("playlist-count")

    async def get_playlist_position(self) -> int:
        return await self.get_property("playlist-pos")

    async def clear_playlist(self) -> None:
        await self._request(commands.playlist_clear())

    async def playlist_remove(self, index: Union[int, str] = "current") -> None:
        await self._request(commands.playlist_remove(index))

    async def playlist_move(self, index1: int, index2: int) -> None:
        await self._request(commands.playlist_move(index1, index2))

    async def shuffle(self) -> None:
        await self._request(commands.playlist_shuffle())

    # -------------------------------------------------------------------------
    # Information
    # -------------------------------------------------------------------------

    async def is_muted(self) -> bool:
        return await self.get_property("mute")

    async def is_paused(self) -> bool:
        return await self.get_property("pause")

    async def is_seekable(self) -> bool:
        """Not fully buffered streams are not, for example."""
        return await self.get_property("seekable")

    async def get_duration(self) -> Optional[float]:
        return await self.get_property("duration")

    async def get_time_position(self) -> Optional[float]:
        return await self.get_property("time-pos")

    async def get_percent_position(self) -> Optional[float]:
        return await self.get_property("percent-pos")

    async def get_time_remaining(self) -> Optional[float]:
        return await self.get_property("time-remaining")

    async def get_metadata(self) -> Dict[str, Any]:
        """Depends heavily on the loaded file."""
        return await self.get_property("metadata") or {}

    async def get_title(self) -> Optional[str]:
        return await self.get_property("media-title")

    async def get_artist(self) -> Optional[str]:
        return (await self.get_metadata()).get("artist")

    async def get_album(self) -> Optional[str]:
        return (await self.get_metadata()).get("album")

    async def get_year(self) -> Optional[str]:
        return (await self.get_metadata()).get("date")

    async def get_filename(self, format: Union[FileFormat, str] = FileFormat.FULL) -> Optional[str]:
        """Full path / URL, or the stripped file name."""
        name = "filename" if FileFormat(format) is FileFormat.STRIPPED else "path"
        return await self.get_property(name)

    @property
    def observed_properties(self) -> Dict[str, int]:
        return dict(self.state.observed_properties)

    def watched_operations(self) -> Iterable[Watcher]:
        return tuple(self._watchers)
