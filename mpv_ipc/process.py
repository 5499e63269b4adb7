"""
Supervision of the mpv child process.

mpv reports on stdout (or stderr, depending on how its output is piped)
whether it managed to bind the IPC socket. ``start()`` returns once the
"Listening to IPC ..." line shows up and raises ``BindFailureError`` on
"Could not bind IPC ...".
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from collections import deque
from typing import Deque, List, Optional, Sequence

from .errors import BindFailureError
from .util import IPC_SERVER_FLAG, find_mpv_binary

_LOGGER = logging.getLogger(__name__)

_BOUND_RE = re.compile(r"Listening to IPC (socket|pipe)")
_BIND_FAILED_RE = re.compile(r"Could not bind IPC (socket|pipe)")


class MpvProcess:
    """One mpv child process bound to an IPC socket."""

    def __init__(
        self,
        socket_path: str,
        args: Sequence[str],
        *,
        binary: Optional[str] = None,
        startup_timeout: float = 10.0,
    ) -> None:
        self.socket_path = socket_path
        self.args = list(args)
        self.binary = binary
        self.startup_timeout = startup_timeout

        self._proc: Optional[asyncio.subprocess.Process] = None
        self._output_tasks: List[asyncio.Task] = []
        self._bound: Optional[asyncio.Future] = None

        # stdout/stderr tail buffer (for post-mortem)
        self.output_tail: Deque[str] = deque(maxlen=40)

    @property
    def running(self) -> bool:
        return self._proc is not None and self._proc.returncode is None

    @property
    def pid(self) -> Optional[int]:
        return None if self._proc is None else self._proc.pid

    @property
    def returncode(self) -> Optional[int]:
        return None if self._proc is None else self._proc.returncode

    def command_line(self, extra_args: Sequence[str] = ()) -> List[str]:
        binary = find_mpv_binary(self.binary)
        return [binary, *self.args, *extra_args, f"{IPC_SERVER_FLAG}={self.socket_path}"]

    async def start(self, extra_args: Sequence[str] = ()) -> None:
        cmd = self.command_line(extra_args)

        # A stale socket file would make mpv fail to bind
        try:
            if os.path.exists(self.socket_path):
                os.remove(self.socket_path)
        except OSError:
            _LOGGER.debug("Could not remove stale socket %s", self.socket_path, exc_info=True)

        _LOGGER.info("Starting mpv: %s", " ".join(cmd))
        self.output_tail.clear()

        loop = asyncio.get_running_loop()
        self._bound = loop.create_future()
        self._proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        self._output_tasks = [
            loop.create_task(self._output_loop(self._proc.stdout, "stdout")),
            loop.create_task(self._output_loop(self._proc.stderr, "stderr")),
        ]

        try:
            await asyncio.wait_for(asyncio.shield(self._bound), self.startup_timeout)
        except asyncio.TimeoutError:
            await self.stop()
            raise BindFailureError(
                "start()",
                arguments=[self.socket_path],
                message=f"no IPC confirmation within {self.startup_timeout}s",
            ) from None
        except BindFailureError:
            await self.stop()
            raise

        _LOGGER.debug("mpv (pid=%s) bound %s", self._proc.pid, self.socket_path)

    async def stop(self, timeout: float = 2.0) -> None:
        proc = self._proc
        self._proc = None

        if proc is not None and proc.returncode is None:
            try:
                proc.terminate()
                await asyncio.wait_for(proc.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                proc.kill()
                await proc.wait()
            except ProcessLookupError:
                pass

        for task in self._output_tasks:
            task.cancel()
        await asyncio.gather(*self._output_tasks, return_exceptions=True)
        self._output_tasks = []

    async def wait(self) -> Optional[int]:
        if self._proc is None:
            return None
        return await self._proc.wait()

    async def _output_loop(self, stream: Optional[asyncio.StreamReader], label: str) -> None:
        if stream is None:
            return
        try:
            while True:
                line = await stream.readline()
                if not line:
                    break
                text = line.decode("utf-8", errors="replace").rstrip()
                self.output_tail.append(text)
                _LOGGER.debug("mpv[%s]: %s", label, text)
                self._check_bind(text)
        except asyncio.CancelledError:
            raise
        except Exception:
            _LOGGER.debug("mpv %s reader failed", label, exc_info=True)

        # Output ended before any bind report: mpv exited during startup
        if self._bound is not None and not self._bound.done():
            self._bound.set_exception(
                BindFailureError(
                    "start()",
                    arguments=[self.socket_path],
                    message=f"mpv exited during startup: {list(self.output_tail)!r}",
                )
            )

    def _check_bind(self, text: str) -> None:
        bound = self._bound
        if bound is None or bound.done():
            return
        if _BOUND_RE.search(text):
            bound.set_result(None)
        elif _BIND_FAILED_RE.search(text):
            bound.set_exception(BindFailureError("start()", arguments=[self.socket_path], message=text))
