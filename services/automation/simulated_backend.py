"""Simulated automation backend.

Fabricates plausible results without driving a browser, so the session and
protocol layers can run end to end. Screenshots are blank PNG canvases
rendered with Pillow at the size a real capture would have.

Public class: `SimulatedAutomationBackend`
"""
from __future__ import annotations

import io
import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from PIL import Image

from services.automation.backend import ELEMENT_STATES, AutomationError

LOGGER = logging.getLogger(__name__)


class SimulatedAutomationBackend:
	"""Stand-in for a real browser engine.

	Args:
		viewport: Width and height of a viewport capture.
		full_page_height: Height used when a full-page capture is requested.
		element_size: Size of an element capture.
		background: Canvas fill colour.
	"""

	def __init__(
		self,
		viewport: Tuple[int, int] = (1280, 720),
		full_page_height: int = 2400,
		element_size: Tuple[int, int] = (320, 120),
		background: Tuple[int, int, int] = (255, 255, 255),
	) -> None:
		self.viewport = viewport
		self.full_page_height = full_page_height
		self.element_size = element_size
		self.background = background

	async def navigate(self, session_id: str, url: str, timeout_ms: float) -> Dict[str, Any]:
		host = urlparse(url).hostname or url
		LOGGER.debug("[%s] navigate %s (timeout=%sms)", session_id, url, timeout_ms)
		return {"url": url, "pageTitle": host, "statusCode": 200}

	async def click(self, session_id: str, selector: str, timeout_ms: float) -> Dict[str, Any]:
		self._check_selector(selector)
		return {"selector": selector, "clicked": True}

	async def fill(self, session_id: str, selector: str, value: str, timeout_ms: float) -> Dict[str, Any]:
		self._check_selector(selector)
		return {"selector": selector, "filled": len(value)}

	async def screenshot(self, session_id: str, full_page: bool, selector: Optional[str]) -> bytes:
		if selector:
			self._check_selector(selector)
			size = self.element_size
		elif full_page:
			size = (self.viewport[0], self.full_page_height)
		else:
			size = self.viewport

		canvas = Image.new("RGB", size, self.background)
		out_io = io.BytesIO()
		canvas.save(out_io, format="PNG", optimize=True)
		return out_io.getvalue()

	async def extract_text(self, session_id: str, selector: str) -> str:
		self._check_selector(selector)
		if selector == "body":
			return "Full page text content would be here"
		return f"Text content from {selector}"

	async def wait_for(self, session_id: str, selector: str, state: str, timeout_ms: float) -> Dict[str, Any]:
		self._check_selector(selector)
		if state not in ELEMENT_STATES:
			raise AutomationError(f"Unsupported element state: {state}")
		return {"selector": selector, "state": state}

	def _check_selector(self, selector: str) -> None:
		if not selector or not selector.strip():
			raise AutomationError("Selector must not be empty")
