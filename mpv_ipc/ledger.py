"""Correlates outbound commands with their responses."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .commands import Command
from .errors import CommandError, MpvError, NotRunningError, SendFailureError
from .transport import IpcTransport

_LOGGER = logging.getLogger(__name__)


@dataclass
class PendingRequest:
    request_id: int
    atoms: List[Any]
    future: "asyncio.Future[Any]"


class RequestLedger:
    """
    Hands out request ids and resolves the matching future when a response
    carrying that id comes back.

    Ids start at 0 and only ever increase, so an id is never reused while a
    request holding it is outstanding.
    """

    def __init__(self, transport: IpcTransport) -> None:
        self._transport = transport
        self._ids = itertools.count()
        self._pending: Dict[int, PendingRequest] = {}

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def outstanding(self) -> List[int]:
        return sorted(self._pending)

    def submit(self, command: Command) -> "asyncio.Future[Any]":
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[Any]" = loop.create_future()
        atoms = command.atoms()

        if not self._transport.connected:
            future.set_exception(NotRunningError(command.name, arguments=atoms[1:]))
            return future

        request_id = next(self._ids)
        try:
            self._transport.send({"command": atoms, "request_id": request_id})
        except SendFailureError as e:
            future.set_exception(NotRunningError(command.name, arguments=atoms[1:], message=e.message))
            return future

        self._pending[request_id] = PendingRequest(request_id, atoms, future)
        return future

    def handle_response(self, frame: Dict[str, Any]) -> bool:
        """Resolve the request a response frame belongs to.

        Returns False when the frame is not a response at all.
        """
        request_id = frame.get("request_id")
        if request_id is None:
            return False

        pending = self._pending.pop(request_id, None)
        if pending is None:
            _LOGGER.warning("Response for unknown request id %r: %s", request_id, frame)
            return True

        if pending.future.done():
            # Caller went away (cancelled); nothing to deliver.
            return True

        error = frame.get("error")
        if error == "success":
            pending.future.set_result(frame.get("data"))
        else:
            pending.future.set_exception(CommandError(str(error), pending.atoms))
        return True

    def discard(self, future: "asyncio.Future[Any]") -> bool:
        """Forget the request behind ``future`` without waiting for its response."""
        for request_id, pending in self._pending.items():
            if pending.future is future:
                del self._pending[request_id]
                if not future.done():
                    future.cancel()
                _LOGGER.debug("Discarded request %d", request_id)
                return True
        return False

    def abandon_all(self, error: Optional[MpvError] = None) -> int:
        """Fail every outstanding request, e.g. when the connection is lost."""
        pending = list(self._pending.values())
        self._pending.clear()
        for entry in pending:
            if not entry.future.done():
                entry.future.set_exception(
                    error or NotRunningError(str(entry.atoms[0]), arguments=entry.atoms[1:])
                )
        if pending:
            _LOGGER.debug("Abandoned %d outstanding request(s)", len(pending))
        return len(pending)
