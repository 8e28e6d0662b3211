"""Request handling for the MCP endpoints, liveness and info page."""

from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import HTTPException, Request, Response
from fastapi.responses import PlainTextResponse, StreamingResponse

from models.session_models import to_iso
from services.toolsets.toolset import ToolSet
from services.transport.sse_transport import CORS_HEADERS, PREFLIGHT_HEADERS, SSE_HEADERS, SSETransport


def _toolset(request: Request) -> ToolSet:
	toolset = getattr(request.app.state, "toolset", None)
	if toolset is None:
		raise HTTPException(status_code=500, detail="Tool-set unavailable")
	return toolset


def _transport(request: Request) -> SSETransport:
	transport = getattr(request.app.state, "transport", None)
	if transport is None:
		raise HTTPException(status_code=500, detail="Transport unavailable")
	return transport


async def preflight() -> Response:
	"""Answer CORS pre-flight with fixed headers and no body."""
	return Response(status_code=200, headers=PREFLIGHT_HEADERS)


async def subscribe(request: Request) -> StreamingResponse:
	"""Open a heartbeat-only event stream."""
	transport = _transport(request)
	return StreamingResponse(
		transport.subscribe(request.is_disconnected),
		media_type="text/event-stream",
		headers=SSE_HEADERS,
	)


async def command(request: Request) -> Response:
	"""Dispatch one envelope and stream back its single response frame.

	The dispatch completes before the response starts, so a client that hangs
	up mid-request cannot cancel a tool call halfway through.
	"""
	transport = _transport(request)
	body = await request.body()
	frame = await transport.command(body)
	if frame is None:
		return Response(status_code=202, headers=CORS_HEADERS)
	return StreamingResponse(iter([frame]), media_type="text/event-stream", headers=SSE_HEADERS)


async def health(request: Request) -> Dict[str, Any]:
	"""Return liveness details and tool-set counters."""
	toolset = _toolset(request)
	return {
		"status": "healthy",
		"service": toolset.info.name,
		"version": toolset.info.version,
		"timestamp": to_iso(toolset.store.now()),
		"toolset": toolset.slug,
		**toolset.health_info(),
	}


def build_info_text(toolset: ToolSet, origin: str) -> str:
	"""Render the plain-text documentation page."""
	client_config = {
		"mcpServers": {
			toolset.slug: {
				"command": "npx",
				"args": ["mcp-remote", f"{origin}/sse"],
			}
		}
	}
	tool_lines = "\n".join(
		f"- {tool['name']}: {tool['description']}" for tool in toolset.registry.describe()
	)
	counters = toolset.health_info()
	return (
		f"{toolset.info.name} v{toolset.info.version}\n"
		f"Active sessions: {counters['sessionsCount']}\n\n"
		"Connect from Claude Desktop by adding this to claude_desktop_config.json:\n\n"
		f"{json.dumps(client_config, indent=2)}\n\n"
		f"SSE endpoint: {origin}/sse\n"
		f"Health check: {origin}/health\n\n"
		f"Available tools:\n{tool_lines}\n\n"
		f"{toolset.notes.strip()}\n"
	)


async def info(request: Request) -> PlainTextResponse:
	"""Return the plain-text documentation page for this tool-set."""
	toolset = _toolset(request)
	origin = str(request.base_url).rstrip("/")
	return PlainTextResponse(build_info_text(toolset, origin), headers=CORS_HEADERS)
