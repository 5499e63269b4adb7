"""Tests for request/response correlation."""

import logging

import pytest

from mpv_ipc import commands
from mpv_ipc.errors import CommandError, NotRunningError
from mpv_ipc.ledger import RequestLedger


class _RecordingTransport:
    def __init__(self, connected: bool = True) -> None:
        self.connected = connected
        self.sent = []

    def send(self, payload: dict) -> None:
        self.sent.append(payload)


@pytest.mark.asyncio
async def test_get_property_resolves_with_data() -> None:
    transport = _RecordingTransport()
    ledger = RequestLedger(transport)

    future = ledger.submit(commands.get_property("volume"))
    assert transport.sent == [{"command": ["get_property", "volume"], "request_id": 0}]

    assert ledger.handle_response({"request_id": 0, "error": "success", "data": 50})
    assert await future == 50
    assert len(ledger) == 0


@pytest.mark.asyncio
async def test_request_ids_increase() -> None:
    transport = _RecordingTransport()
    ledger = RequestLedger(transport)

    for _ in range(5):
        ledger.submit(commands.get_property("pause"))

    ids = [payload["request_id"] for payload in transport.sent]
    assert ids == [0, 1, 2, 3, 4]
    assert ledger.outstanding == ids

    # Resolving does not make an id available again
    ledger.handle_response({"request_id": 0, "error": "success", "data": False})
    ledger.submit(commands.get_property("pause"))
    assert transport.sent[-1]["request_id"] == 5


@pytest.mark.asyncio
async def test_reordered_responses_reach_their_callers() -> None:
    transport = _RecordingTransport()
    ledger = RequestLedger(transport)

    names = ["volume", "pause", "duration", "media-title"]
    futures = [ledger.submit(commands.get_property(name)) for name in names]

    for request_id in (2, 0, 3, 1):
        ledger.handle_response({"request_id": request_id, "error": "success", "data": names[request_id]})

    assert [await future for future in futures] == names


@pytest.mark.asyncio
async def test_error_response_raises_command_error() -> None:
    transport = _RecordingTransport()
    ledger = RequestLedger(transport)

    future = ledger.submit(commands.get_property("nope"))
    ledger.handle_response({"request_id": 0, "error": "property not found", "data": None})

    with pytest.raises(CommandError) as exc_info:
        await future
    assert exc_info.value.error == "property not found"
    assert exc_info.value.command == ["get_property", "nope"]
    assert exc_info.value.code == 3


@pytest.mark.asyncio
async def test_not_connected_fails_without_sending() -> None:
    transport = _RecordingTransport(connected=False)
    ledger = RequestLedger(transport)

    future = ledger.submit(commands.get_property("volume"))
    with pytest.raises(NotRunningError):
        await future
    assert transport.sent == []
    assert len(ledger) == 0


@pytest.mark.asyncio
async def test_unknown_response_is_logged(caplog) -> None:
    ledger = RequestLedger(_RecordingTransport())

    with caplog.at_level(logging.WARNING):
        assert ledger.handle_response({"request_id": 99, "error": "success"})
    assert "unknown request id" in caplog.text


@pytest.mark.asyncio
async def test_events_are_not_responses() -> None:
    ledger = RequestLedger(_RecordingTransport())
    assert not ledger.handle_response({"event": "idle"})


@pytest.mark.asyncio
async def test_abandon_all() -> None:
    ledger = RequestLedger(_RecordingTransport())
    first = ledger.submit(commands.get_property("volume"))
    second = ledger.submit(commands.stop())

    assert ledger.abandon_all() == 2
    for future in (first, second):
        with pytest.raises(NotRunningError):
            await future
    assert len(ledger) == 0


@pytest.mark.asyncio
async def test_discard_forgets_request(caplog) -> None:
    ledger = RequestLedger(_RecordingTransport())
    kept = ledger.submit(commands.get_property("volume"))
    dropped = ledger.submit(commands.get_property("pause"))

    assert ledger.discard(dropped)
    assert dropped.cancelled()
    assert ledger.outstanding == [0]
    assert not ledger.discard(dropped)

    # A late response for the discarded id no longer has a caller
    with caplog.at_level(logging.WARNING):
        ledger.handle_response({"request_id": 1, "error": "success", "data": False})
    assert "unknown request id" in caplog.text

    ledger.handle_response({"request_id": 0, "error": "success", "data": 70})
    assert await kept == 70
