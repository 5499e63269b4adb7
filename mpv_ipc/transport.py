"""Line-delimited JSON transport over mpv's IPC socket."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

from .errors import IpcConnectError, ProtocolDesyncError, SendFailureError

_LOGGER = logging.getLogger(__name__)

DELIMITER = b"\n"
_READ_CHUNK = 65536

# asyncio only provides unix connections where AF_UNIX exists
UNIX_SOCKETS = hasattr(asyncio, "open_unix_connection")

FrameHandler = Callable[[Dict[str, Any]], None]
CloseHandler = Callable[[Optional[BaseException]], None]


class IpcTransport:
    """
    Owns one duplex stream to the player.

    Inbound bytes are split on the delimiter and every non-empty fragment is
    decoded as one JSON object and handed to ``on_frame``. ``on_close`` fires
    exactly once per connection, with the error that ended it (or None when the
    peer simply hung up or ``close()`` was called).
    """

    def __init__(
        self,
        on_frame: FrameHandler,
        on_close: Optional[CloseHandler] = None,
        *,
        name: str = "ipc",
    ) -> None:
        self.name = name
        self._on_frame = on_frame
        self._on_close = on_close

        self._address: Optional[str] = None
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._read_task: Optional[asyncio.Task] = None
        self._buffer = b""
        self._closed = False
        self._close_notified = False

    @property
    def connected(self) -> bool:
        return self._writer is not None and not self._closed

    @property
    def address(self) -> Optional[str]:
        return self._address

    async def connect(self, address: str) -> None:
        if self._writer is not None:
            raise IpcConnectError("connect()", arguments=[address], message="already connected")
        if not UNIX_SOCKETS:
            raise IpcConnectError(
                "connect()", arguments=[address], message="unix domain sockets are not available on this platform"
            )
        try:
            self._reader, self._writer = await asyncio.open_unix_connection(address)
        except (OSError, NotImplementedError) as e:
            _LOGGER.debug("[%s] connect to %s failed: %s", self.name, address, e)
            raise IpcConnectError("connect()", arguments=[address], message=str(e)) from e

        self._address = address
        self._read_task = asyncio.get_running_loop().create_task(self._read_loop())
        _LOGGER.debug("[%s] connected to %s", self.name, address)

    def send(self, payload: Dict[str, Any]) -> None:
        """Serialize one object and queue it on the stream."""
        data = json.dumps(payload)
        if not self.connected:
            raise SendFailureError("send()", arguments=[data], message="not connected")

        _LOGGER.debug("[%s] >> %s", self.name, data)
        try:
            self._writer.write(data.encode("utf-8") + DELIMITER)
        except (OSError, RuntimeError) as e:
            raise SendFailureError("send()", arguments=[data], message=str(e)) from e

    def send_line(self, line: str) -> None:
        """Write a raw, already formatted line (no request id bookkeeping)."""
        if not self.connected:
            raise SendFailureError("send_line()", arguments=[line], message="not connected")

        _LOGGER.debug("[%s] >> %s", self.name, line)
        try:
            self._writer.write(line.encode("utf-8") + DELIMITER)
        except (OSError, RuntimeError) as e:
            raise SendFailureError("send_line()", arguments=[line], message=str(e)) from e

    async def drain(self) -> None:
        if not self.connected:
            return
        try:
            await self._writer.drain()
        except (ConnectionError, OSError) as e:
            raise SendFailureError("drain()", message=str(e)) from e

    def close(self) -> None:
        """Tear the connection down. Safe to call more than once."""
        self._shutdown(None)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _read_loop(self) -> None:
        error: Optional[BaseException] = None
        try:
            while True:
                chunk = await self._reader.read(_READ_CHUNK)
                if not chunk:
                    _LOGGER.debug("[%s] peer closed the connection", self.name)
                    break
                self._feed(chunk)
                if self._closed:
                    return
        except asyncio.CancelledError:
            raise
        except ProtocolDesyncError as e:
            error = e
        except (ConnectionError, OSError) as e:
            _LOGGER.debug("[%s] socket error: %s", self.name, e)
            error = e
        except Exception as e:
            _LOGGER.exception("[%s] frame handler failed; closing connection", self.name)
            error = e

        self._shutdown(error)

    def _feed(self, chunk: bytes) -> None:
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split(DELIMITER)
        for line in lines:
            if self._closed:
                return
            if not line.strip():
                continue
            try:
                frame = json.loads(line.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                _LOGGER.error("[%s] undecodable frame %r: %s", self.name, line[:200], e)
                raise ProtocolDesyncError(
                    "read()", arguments=[line.decode("utf-8", errors="replace")], message=str(e)
                ) from e
            if not isinstance(frame, dict):
                raise ProtocolDesyncError(
                    "read()", arguments=[frame], message="frame is not a JSON object"
                )

            _LOGGER.debug("[%s] << %s", self.name, frame)
            self._on_frame(frame)

    def _shutdown(self, error: Optional[BaseException]) -> None:
        if not self._closed:
            self._closed = True
            if self._writer is not None:
                self._writer.close()

            task = self._read_task
            if task is not None and task is not asyncio.current_task() and not task.done():
                task.cancel()

        if self._writer is None or self._close_notified:
            return

        self._close_notified = True
        if self._on_close is not None:
            self._on_close(error)
