"""Tool result payloads returned to MCP clients."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ToolContent:
	"""Single content item in a tool response."""

	type: str  # "text" or "image"
	text: Optional[str] = None
	data: Optional[str] = None  # base64 for images
	mime_type: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		if self.type == "image":
			return {"type": "image", "data": self.data, "mimeType": self.mime_type}
		return {"type": "text", "text": self.text}


@dataclass
class ToolResult:
	"""Result of a tool execution."""

	content: List[ToolContent] = field(default_factory=list)

	@classmethod
	def json(cls, data: Any) -> ToolResult:
		"""Create a result holding pretty-printed JSON text."""
		return cls(content=[ToolContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False))])

	@classmethod
	def json_with_image(cls, data: Any, data_b64: str, mime_type: str = "image/png") -> ToolResult:
		"""Create a result with JSON text followed by an image item."""
		result = cls.json(data)
		result.content.append(ToolContent(type="image", data=data_b64, mime_type=mime_type))
		return result

	def to_payload(self) -> Dict[str, Any]:
		"""Convert to the MCP `tools/call` result shape."""
		return {"content": [item.to_dict() for item in self.content]}
