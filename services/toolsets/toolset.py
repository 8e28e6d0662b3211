"""A tool-set: server identity, tool registry and the session store its handlers close over."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from services.protocol.registry import ToolRegistry
from services.sessions.session_store import SessionStore


@dataclass
class ServerInfo:
	"""Static identity reported by `initialize`."""

	name: str
	version: str
	capabilities: Dict[str, Any] = field(default_factory=lambda: {"tools": {}})


@dataclass
class ToolSet:
	"""Everything one deployed MCP endpoint serves."""

	slug: str
	info: ServerInfo
	registry: ToolRegistry
	store: SessionStore
	notes: str = ""
	health_extras: Dict[str, Any] = field(default_factory=dict)

	def health_info(self) -> Dict[str, Any]:
		"""Return tool-set counters for the liveness endpoint."""
		self.store.sweep_expired()
		return {"sessionsCount": len(self.store), **self.health_extras}
