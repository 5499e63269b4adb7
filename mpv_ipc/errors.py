"""Error taxonomy for the mpv IPC session."""

from typing import Any, Dict, List, Optional

# Numeric codes are stable; callers may match on them.
ERROR_MESSAGES: Dict[int, str] = {
    0: "Unable to load file or stream",
    1: "Invalid argument",
    2: "Binary not found",
    3: "ipcCommand invalid",
    4: "Unable to bind IPC socket",
    5: "Timeout",
    6: "MPV is already running",
    7: "Could not send IPC message",
    8: "MPV is not running",
    9: "Unsupported protocol",
    10: "Malformed IPC frame",
    11: "Unable to connect to IPC socket",
    12: "Track changed before seek finished",
}


class MpvError(Exception):
    """Base class for all errors raised by this package."""

    code: int = -1

    def __init__(
        self,
        method: str = "",
        *,
        arguments: Optional[List[Any]] = None,
        message: Optional[str] = None,
        options: Optional[Dict[str, str]] = None,
    ) -> None:
        self.method = method
        self.arguments = list(arguments) if arguments is not None else []
        self.message = message
        self.options = options
        super().__init__(self._render())

    @property
    def verbose(self) -> str:
        return ERROR_MESSAGES.get(self.code, "Unknown error")

    def _render(self) -> str:
        text = self.verbose
        if self.method:
            text = f"{text} [{self.method}]"
        if self.arguments:
            text = f"{text} arguments={self.arguments!r}"
        if self.message:
            text = f"{text}: {self.message}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Same shape as the error objects the player library always reported."""
        data: Dict[str, Any] = {
            "errcode": self.code,
            "verbose": self.verbose,
            "method": self.method,
        }
        if self.arguments:
            data["arguments"] = self.arguments
        if self.message is not None:
            data["errmessage"] = self.message
        if self.options is not None:
            data["options"] = self.options
        return data


class LoadFailedError(MpvError):
    """The player emitted end-file before the expected success event."""

    code = 0

    @property
    def source(self) -> Optional[Any]:
        return self.arguments[0] if self.arguments else None


class InvalidArgumentError(MpvError):
    code = 1


class BinaryNotFoundError(MpvError):
    code = 2


class CommandError(MpvError):
    """The player answered a request with something other than "success"."""

    code = 3

    def __init__(self, error: str, command: List[Any], method: str = "command") -> None:
        self.error = error
        self.command = list(command)
        super().__init__(method, arguments=self.command, message=error)


class BindFailureError(MpvError):
    code = 4


class OperationTimeoutError(MpvError):
    code = 5


class AlreadyRunningError(MpvError):
    code = 6


class SendFailureError(MpvError):
    code = 7


class NotRunningError(MpvError):
    code = 8


class UnsupportedSourceError(MpvError):
    code = 9


class ProtocolDesyncError(MpvError):
    """A frame from the player could not be decoded; the stream is out of sync."""

    code = 10


class IpcConnectError(MpvError):
    code = 11


class SeekInterruptedError(MpvError):
    """tracks-changed arrived before the seek settled."""

    code = 12
