"""Route MCP envelopes to initialize / tools/list / tools/call."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from models.protocol_models import RpcError, RpcRequest, RpcResponse
from services.protocol.constants import SERVER_ERROR, negotiate_protocol_version
from services.protocol.registry import ToolRegistry
from services.toolsets.toolset import ServerInfo
from utils.credentials import redact_arguments

LOGGER = logging.getLogger(__name__)


class DispatchError(Exception):
	"""Unknown method or unknown tool."""


def error_response(request_id: Any, code: int, message: str) -> Dict[str, Any]:
	"""Build an error envelope."""
	return RpcResponse(id=request_id, error=RpcError(code=code, message=message)).to_wire()


class ProtocolDispatcher:
	"""Interpret one request envelope against a tool-set.

	Holds no state of its own; every handler failure becomes an error envelope
	carrying the request id.
	"""

	def __init__(self, info: ServerInfo, registry: ToolRegistry) -> None:
		self.info = info
		self.registry = registry

	async def handle(self, request: RpcRequest) -> Optional[Dict[str, Any]]:
		"""Process a single envelope; notifications produce no response."""
		if request.is_notification:
			LOGGER.debug("Ignoring notification %s", request.method)
			return None

		params = request.params or {}
		try:
			if request.method == "initialize":
				result = self._initialize(params)
			elif request.method == "tools/list":
				result = {"tools": self.registry.describe()}
			elif request.method == "tools/call":
				result = await self._call_tool(params)
			elif request.method == "ping":
				result = {}
			else:
				raise DispatchError(f"Unknown method: {request.method}")
		except DispatchError as exc:
			LOGGER.warning("dispatch_failed id=%r: %s", request.id, exc)
			return error_response(request.id, SERVER_ERROR, str(exc))
		except (ValueError, LookupError) as exc:
			LOGGER.warning("tool_call_rejected id=%r: %s", request.id, exc)
			return error_response(request.id, SERVER_ERROR, str(exc) or exc.__class__.__name__)
		except Exception as exc:
			LOGGER.exception("tool_call_failed id=%r", request.id)
			return error_response(request.id, SERVER_ERROR, str(exc) or "Unknown error")
		return RpcResponse(id=request.id, result=result).to_wire()

	def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
		requested = params.get("protocolVersion")
		return {
			"protocolVersion": negotiate_protocol_version(requested if isinstance(requested, str) else None),
			"capabilities": self.info.capabilities,
			"serverInfo": {"name": self.info.name, "version": self.info.version},
		}

	async def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
		name = params.get("name")
		handler = self.registry.resolve(name) if isinstance(name, str) else None
		if handler is None:
			raise DispatchError(f"Unknown tool: {name}")

		arguments = params.get("arguments")
		if arguments is None:
			arguments = {}
		if not isinstance(arguments, dict):
			raise ValueError("Tool arguments must be a JSON object")

		LOGGER.info("tool=%s args=%s", name, redact_arguments(arguments))
		result = await handler(arguments)
		return result.to_payload()
