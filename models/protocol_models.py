"""JSON-RPC envelope models for the MCP wire protocol."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RpcRequest(BaseModel):
    """Inbound request envelope."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: str = "2.0"
    id: Any = None
    method: str
    params: Optional[Dict[str, Any]] = Field(default=None)

    @property
    def is_notification(self) -> bool:
        return self.method.startswith("notifications/")


class RpcError(BaseModel):
    code: int
    message: str


class RpcResponse(BaseModel):
    """Outbound response envelope carrying either `result` or `error`."""

    jsonrpc: str = "2.0"
    id: Any = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[RpcError] = None

    def to_wire(self) -> Dict[str, Any]:
        """Return the envelope with exactly one of `result` / `error` present."""
        payload: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump()
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload
