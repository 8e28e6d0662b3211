"""Interface the automation tool-sets drive; any real browser engine can implement it."""
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

ELEMENT_STATES = ("visible", "hidden", "attached", "detached")


class AutomationError(RuntimeError):
	"""An automation step could not be carried out."""


class AutomationBackend(Protocol):
	"""Browser operations keyed by session id. Implementations raise AutomationError on failure."""

	async def navigate(self, session_id: str, url: str, timeout_ms: float) -> Dict[str, Any]:
		"""Load `url`; return at least `url`, `pageTitle` and `statusCode`."""
		...

	async def click(self, session_id: str, selector: str, timeout_ms: float) -> Dict[str, Any]:
		...

	async def fill(self, session_id: str, selector: str, value: str, timeout_ms: float) -> Dict[str, Any]:
		...

	async def screenshot(self, session_id: str, full_page: bool, selector: Optional[str]) -> bytes:
		"""Return PNG bytes of the page or of one element."""
		...

	async def extract_text(self, session_id: str, selector: str) -> str:
		...

	async def wait_for(self, session_id: str, selector: str, state: str, timeout_ms: float) -> Dict[str, Any]:
		...
