"""Server-Sent Events transport for the MCP dispatcher.

Two interaction shapes share one endpoint: a subscribe stream that only
carries a connection frame and heartbeats, and a command exchange that
decodes one envelope, dispatches it and answers with exactly one frame.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from models.protocol_models import RpcRequest
from services.protocol.constants import PARSE_ERROR
from services.protocol.dispatcher import ProtocolDispatcher, error_response

LOGGER = logging.getLogger(__name__)

CORS_HEADERS = {
	"Access-Control-Allow-Origin": "*",
	"Access-Control-Allow-Methods": "GET, POST, OPTIONS",
	"Access-Control-Allow-Headers": "Content-Type, Authorization",
}
PREFLIGHT_HEADERS = {**CORS_HEADERS, "Access-Control-Max-Age": "86400"}
SSE_HEADERS = {
	"Cache-Control": "no-cache",
	"Connection": "keep-alive",
	**CORS_HEADERS,
}

CONNECTED_EVENT = {"type": "connection", "status": "connected"}
PING_EVENT = {"type": "ping"}


def format_frame(payload: Dict[str, Any]) -> str:
	"""Serialise one payload as an SSE `data:` frame."""
	return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"


def parse_envelope(body: bytes) -> RpcRequest:
	"""Decode a request body into an envelope, raising ValueError when it is not one."""
	try:
		payload = json.loads(body)
	except (UnicodeDecodeError, json.JSONDecodeError) as exc:
		raise ValueError(f"Invalid JSON: {exc}") from exc
	if not isinstance(payload, dict):
		raise ValueError("Request must be a JSON object")
	try:
		return RpcRequest.model_validate(payload)
	except ValidationError as exc:
		raise ValueError(f"Invalid request envelope: {exc.errors()[0]['msg']}") from exc


class SSETransport:
	"""Bridge HTTP requests to the protocol dispatcher over SSE frames."""

	def __init__(self, dispatcher: ProtocolDispatcher, heartbeat_seconds: float = 30.0) -> None:
		self.dispatcher = dispatcher
		self.heartbeat_seconds = heartbeat_seconds

	async def subscribe(self, is_disconnected: Callable[[], Awaitable[bool]]) -> AsyncIterator[str]:
		"""Yield the connection frame, then a heartbeat every interval until the peer goes away."""
		LOGGER.info("SSE subscriber connected")
		try:
			yield format_frame(CONNECTED_EVENT)
			while not await is_disconnected():
				await asyncio.sleep(self.heartbeat_seconds)
				if await is_disconnected():
					break
				yield format_frame(PING_EVENT)
		finally:
			LOGGER.info("SSE subscriber released")

	async def command(self, body: bytes) -> Optional[str]:
		"""Dispatch one envelope to completion; return its frame, or None for notifications."""
		try:
			request = parse_envelope(body)
		except ValueError as exc:
			LOGGER.warning("Rejected request body: %s", exc)
			return format_frame(error_response(None, PARSE_ERROR, f"Parse error: {exc}"))

		response = await self.dispatcher.handle(request)
		if response is None:
			return None
		return format_frame(response)
