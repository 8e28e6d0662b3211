"""
Tool registry with dispatch table for one tool-set.

Maps tool names to their declared input schema and handler coroutine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from models.tool_models import ToolResult

LOGGER = logging.getLogger(__name__)

HandlerFunc = Callable[[Dict[str, Any]], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool and its handler."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: HandlerFunc

    def describe(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


class ToolRegistry:
    """Registry for tool handlers. Schemas are metadata only; handlers validate their own input."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def register(self, definition: Dict[str, Any], handler: HandlerFunc) -> None:
        """Register a handler against a `{name, description, inputSchema}` definition."""
        name = definition["name"]
        if name in self._tools:
            raise ValueError(f"Tool {name} is already registered")
        self._tools[name] = ToolSpec(
            name=name,
            description=definition.get("description", ""),
            input_schema=definition.get("inputSchema", {"type": "object", "properties": {}}),
            handler=handler,
        )

    def register_many(self, entries: List[tuple[Dict[str, Any], HandlerFunc]]) -> None:
        """Register multiple handlers at once, keeping their order."""
        for definition, handler in entries:
            self.register(definition, handler)
        LOGGER.info("Registered %d tool handlers", len(entries))

    def describe(self) -> List[Dict[str, Any]]:
        """Return tool descriptors in registration order."""
        return [spec.describe() for spec in self._tools.values()]

    def resolve(self, name: str) -> Optional[HandlerFunc]:
        """Return the handler for `name`, or None when it is not registered."""
        spec = self._tools.get(name)
        return spec.handler if spec else None

    def has(self, name: str) -> bool:
        return name in self._tools

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)
