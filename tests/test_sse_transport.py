"""
Tests for services/transport/sse_transport.py.

Coverage targets:
  - frame formatting
  - subscribe: connection frame, heartbeats, stop on disconnect
  - command: one frame per envelope, parse errors never reach the dispatcher
"""
from __future__ import annotations

import json

import pytest

from services.protocol.constants import PARSE_ERROR
from services.protocol.dispatcher import ProtocolDispatcher
from services.toolsets.factory import create_toolset
from services.transport.sse_transport import SSETransport, format_frame, parse_envelope
from utils.settings import ServerSettings


class _UnreachableDispatcher:
    async def handle(self, request):
        raise AssertionError("dispatcher must not be called")


class _Disconnects:
    """Report a live peer for the first `checks` calls, then a disconnect."""

    def __init__(self, checks: int) -> None:
        self.remaining = checks
        self.calls = 0

    async def __call__(self) -> bool:
        self.calls += 1
        if self.remaining <= 0:
            return True
        self.remaining -= 1
        return False


def _make_transport(heartbeat_seconds: float = 0) -> SSETransport:
    toolset = create_toolset(ServerSettings())
    return SSETransport(ProtocolDispatcher(toolset.info, toolset.registry), heartbeat_seconds=heartbeat_seconds)


def _decode(frame: str) -> dict:
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    return json.loads(frame[len("data: "):])


class TestFraming:
    def test_format_frame(self):
        assert format_frame({"type": "ping"}) == 'data: {"type":"ping"}\n\n'

    def test_parse_envelope_rejects_non_objects(self):
        with pytest.raises(ValueError, match="must be a JSON object"):
            parse_envelope(b"[1, 2]")

    def test_parse_envelope_requires_method(self):
        with pytest.raises(ValueError, match="Invalid request envelope"):
            parse_envelope(b'{"jsonrpc": "2.0", "id": 1}')


class TestSubscribe:
    pytestmark = pytest.mark.asyncio

    async def test_connection_frame_then_heartbeats_until_disconnect(self):
        transport = _make_transport()
        frames = [frame async for frame in transport.subscribe(_Disconnects(4))]
        assert [_decode(frame) for frame in frames] == [
            {"type": "connection", "status": "connected"},
            {"type": "ping"},
            {"type": "ping"},
        ]

    async def test_disconnected_peer_gets_only_connection_frame(self):
        transport = _make_transport()
        frames = [frame async for frame in transport.subscribe(_Disconnects(0))]
        assert len(frames) == 1


class TestCommand:
    pytestmark = pytest.mark.asyncio

    async def test_command_returns_single_response_frame(self):
        body = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}).encode()
        response = _decode(await _make_transport().command(body))
        assert response["id"] == 1
        assert [tool["name"] for tool in response["result"]["tools"]] == [
            "sequential_thinking",
            "sequential_thinking_get_session",
            "sequential_thinking_clear_session",
        ]

    @pytest.mark.parametrize(
        "body",
        [b"{not json", b"[]", b'"string"', b'{"id": 3}', b"\xff\xfe"],
    )
    async def test_malformed_body_is_a_parse_error(self, body):
        transport = SSETransport(_UnreachableDispatcher())
        response = _decode(await transport.command(body))
        assert response["id"] is None
        assert response["error"]["code"] == PARSE_ERROR
        assert response["error"]["message"].startswith("Parse error")

    async def test_notification_produces_no_frame(self):
        body = json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}).encode()
        assert await _make_transport().command(body) is None
