"""Browser automation tool handlers.

Only `playwright_navigate` may create a session. Every other tool requires a
session that has already navigated somewhere and fails without creating one.
Backend calls are awaited before any session state is written.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Tuple

from models.session_models import AutomationState, Session, minutes_between, to_iso
from models.tool_models import ToolResult
from services.automation.backend import ELEMENT_STATES, AutomationBackend
from services.protocol.registry import HandlerFunc
from services.sessions.session_store import SessionNotFoundError, SessionStore
from services.toolsets.automation_schema import (
	CLICK_TOOL,
	CLOSE_SESSION_TOOL,
	FILL_TOOL,
	GET_TEXT_TOOL,
	LIST_SESSIONS_TOOL,
	NAVIGATE_TOOL,
	SCREENSHOT_TOOL,
	WAIT_FOR_ELEMENT_TOOL,
)
from utils.arguments import (
	check_url,
	optional_bool,
	optional_choice,
	optional_number,
	optional_str,
	require_str,
	session_id_from,
)

LOGGER = logging.getLogger(__name__)

NAVIGATE_TIMEOUT_MS = 30000
ACTION_TIMEOUT_MS = 5000
WAIT_TIMEOUT_MS = 10000
FILL_PREVIEW_LENGTH = 50


def not_found_message(session_id: str) -> str:
	return f"Browser session '{session_id}' not found. Please navigate to a page first."


def truncate(value: str, length: int = FILL_PREVIEW_LENGTH) -> str:
	return value[:length] + ("..." if len(value) > length else "")


class AutomationTools:
	"""Handlers bound to one automation session store and backend."""

	def __init__(self, store: SessionStore[AutomationState], backend: AutomationBackend) -> None:
		self.store = store
		self.backend = backend

	def entries(self) -> List[Tuple[Dict[str, Any], HandlerFunc]]:
		return [
			(NAVIGATE_TOOL, self.navigate),
			(CLICK_TOOL, self.click),
			(FILL_TOOL, self.fill),
			(SCREENSHOT_TOOL, self.screenshot),
			(GET_TEXT_TOOL, self.get_text),
			(WAIT_FOR_ELEMENT_TOOL, self.wait_for_element),
			(LIST_SESSIONS_TOOL, self.list_sessions),
			(CLOSE_SESSION_TOOL, self.close_session),
		]

	def _require(self, session_id: str) -> Session[AutomationState]:
		return self.store.require(session_id, not_found_message(session_id))

	def _action_result(self, session: Session[AutomationState], action: str, **fields: Any) -> Dict[str, Any]:
		result: Dict[str, Any] = {"success": True, "sessionId": session.session_id, "action": action}
		result.update(fields)
		result["timestamp"] = to_iso(self.store.now())
		result["currentUrl"] = session.state.last_navigated_url
		return result

	async def navigate(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		url = check_url(require_str(arguments, "url", "URL is required for navigation"))
		session_id = session_id_from(arguments)
		timeout = optional_number(arguments, "timeout", NAVIGATE_TIMEOUT_MS)

		page = await self.backend.navigate(session_id, url, timeout)

		session = self.store.get_or_create(session_id)
		session.state.last_navigated_url = page.get("url", url)
		session.state.is_active = True
		self.store.touch(session)

		return ToolResult.json(
			{
				"success": True,
				"sessionId": session_id,
				"url": session.state.last_navigated_url,
				"timestamp": to_iso(self.store.now()),
				"message": f"Successfully navigated to {url}",
				"pageTitle": page.get("pageTitle"),
				"statusCode": page.get("statusCode"),
			}
		)

	async def click(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		selector = require_str(arguments, "selector", "CSS selector is required for clicking")
		session_id = session_id_from(arguments)
		timeout = optional_number(arguments, "timeout", ACTION_TIMEOUT_MS)
		session = self._require(session_id)

		await self.backend.click(session_id, selector, timeout)

		self.store.touch(session)
		return ToolResult.json(
			self._action_result(
				session,
				"click",
				selector=selector,
				message=f"Successfully clicked element: {selector}",
			)
		)

	async def fill(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		selector = require_str(arguments, "selector", "CSS selector is required for filling")
		value = require_str(arguments, "value", "Value is required for filling")
		session_id = session_id_from(arguments)
		timeout = optional_number(arguments, "timeout", ACTION_TIMEOUT_MS)
		session = self._require(session_id)

		await self.backend.fill(session_id, selector, value, timeout)

		self.store.touch(session)
		return ToolResult.json(
			self._action_result(
				session,
				"fill",
				selector=selector,
				value=truncate(value),
				message=f"Successfully filled element: {selector}",
			)
		)

	async def screenshot(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		session_id = session_id_from(arguments)
		full_page = optional_bool(arguments, "fullPage")
		selector = optional_str(arguments, "selector")
		session = self._require(session_id)

		png_bytes = await self.backend.screenshot(session_id, full_page, selector)

		self.store.touch(session)
		data_b64 = base64.b64encode(png_bytes).decode("ascii")
		return ToolResult.json_with_image(
			self._action_result(
				session,
				"screenshot",
				fullPage=full_page,
				selector=selector,
				message="Screenshot captured successfully",
				screenshotUrl=f"data:image/png;base64,{data_b64}",
			),
			data_b64,
		)

	async def get_text(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		selector = optional_str(arguments, "selector", "body") or "body"
		session_id = session_id_from(arguments)
		session = self._require(session_id)

		text = await self.backend.extract_text(session_id, selector)

		self.store.touch(session)
		return ToolResult.json(self._action_result(session, "getText", selector=selector, text=text))

	async def wait_for_element(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		selector = require_str(arguments, "selector", "CSS selector is required for waiting")
		state = optional_choice(arguments, "state", ELEMENT_STATES, "visible")
		session_id = session_id_from(arguments)
		timeout = optional_number(arguments, "timeout", WAIT_TIMEOUT_MS)
		session = self._require(session_id)

		await self.backend.wait_for(session_id, selector, state, timeout)

		self.store.touch(session)
		return ToolResult.json(
			self._action_result(
				session,
				"waitForElement",
				selector=selector,
				state=state,
				timeout=timeout,
				message=f"Element {selector} is now {state}",
			)
		)

	async def list_sessions(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		now = self.store.now()
		sessions = [
			{
				"sessionId": session.session_id,
				"created": to_iso(session.created_at),
				"lastUsed": to_iso(session.last_active_at),
				"currentUrl": session.state.last_navigated_url,
				"isActive": session.state.is_active,
				"ageMinutes": minutes_between(session.last_active_at, now),
			}
			for session in self.store.list_all()
		]
		return ToolResult.json(
			{
				"totalSessions": len(sessions),
				"activeSessions": sum(1 for item in sessions if item["isActive"]),
				"sessions": sessions,
			}
		)

	async def close_session(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		session_id = session_id_from(arguments)
		if not self.store.remove(session_id):
			raise SessionNotFoundError(session_id, f"Browser session '{session_id}' not found")
		LOGGER.info("Closed browser session %s", session_id)
		return ToolResult.json(
			{
				"success": True,
				"sessionId": session_id,
				"message": f"Browser session '{session_id}' closed",
			}
		)
