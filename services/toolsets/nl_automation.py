"""Natural-language browser automation tool handlers.

Instructions are turned into a single browser action by the configured
interpreter and executed on the automation backend. Each attempt is recorded
in the session's bounded conversation history, failures included.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from models.session_models import ConversationEntry, NLAutomationState, Session, minutes_between, to_iso
from models.tool_models import ToolResult
from services.automation.backend import AutomationBackend, AutomationError
from services.openai.interpreter import (
	CLICK,
	EXTRACT,
	FILL,
	NAVIGATE,
	SCREENSHOT,
	WAIT,
	InstructionInterpreter,
	InterpretedAction,
)
from services.protocol.registry import HandlerFunc
from services.sessions.session_store import SessionNotFoundError, SessionStore
from services.toolsets.automation import ACTION_TIMEOUT_MS, NAVIGATE_TIMEOUT_MS, WAIT_TIMEOUT_MS
from services.toolsets.nl_automation_schema import (
	CLOSE_SESSION_TOOL,
	CONVERSATION_HISTORY_TOOL,
	LIST_SESSIONS_TOOL,
	NATURAL_ACTION_TOOL,
	NAVIGATE_TOOL,
)
from utils.arguments import check_url, optional_int, optional_str, require_str, session_id_from
from utils.credentials import key_preview, require_api_key

LOGGER = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10


class NLAutomationTools:
	"""Handlers bound to one NL-automation store, backend and interpreter."""

	def __init__(
		self,
		store: SessionStore[NLAutomationState],
		backend: AutomationBackend,
		interpreter: InstructionInterpreter,
	) -> None:
		self.store = store
		self.backend = backend
		self.interpreter = interpreter

	def entries(self) -> List[Tuple[Dict[str, Any], HandlerFunc]]:
		return [
			(NATURAL_ACTION_TOOL, self.natural_action),
			(NAVIGATE_TOOL, self.navigate),
			(CONVERSATION_HISTORY_TOOL, self.conversation_history),
			(LIST_SESSIONS_TOOL, self.list_sessions),
			(CLOSE_SESSION_TOOL, self.close_session),
		]

	def _session_age(self, session: Session[NLAutomationState]) -> str:
		return f"{minutes_between(session.created_at, self.store.now())} minutes"

	async def _execute(self, session_id: str, action: InterpretedAction) -> Tuple[Dict[str, Any], Optional[str]]:
		"""Run the interpreted action; return backend details and the URL navigated to, if any."""
		if action.action == NAVIGATE:
			page = await self.backend.navigate(session_id, action.target, NAVIGATE_TIMEOUT_MS)
			return page, page.get("url", action.target)
		if action.action == CLICK:
			return await self.backend.click(session_id, action.target, ACTION_TIMEOUT_MS), None
		if action.action == FILL:
			return await self.backend.fill(session_id, action.target, action.value or "", ACTION_TIMEOUT_MS), None
		if action.action == EXTRACT:
			return {"text": await self.backend.extract_text(session_id, action.target)}, None
		if action.action == SCREENSHOT:
			png_bytes = await self.backend.screenshot(session_id, False, None)
			return {"screenshotBytes": len(png_bytes)}, None
		if action.action == WAIT:
			return await self.backend.wait_for(session_id, action.target, "visible", WAIT_TIMEOUT_MS), None
		raise AutomationError(f"Unsupported action: {action.action}")

	async def natural_action(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		api_key = require_api_key(arguments.get("apiKey"))
		instruction = require_str(arguments, "instruction", "Natural language instruction is required")
		session_id = session_id_from(arguments)

		action = await self.interpreter.interpret(instruction, api_key=api_key)
		navigated_url: Optional[str] = None
		error: Optional[str] = None
		try:
			details, navigated_url = await self._execute(session_id, action)
		except AutomationError as exc:
			LOGGER.warning("[%s] %s failed: %s", session_id, action.action, exc)
			details, error = {}, str(exc)

		success = error is None
		execution: Dict[str, Any] = {
			"success": success,
			"actionTaken": action.action,
			"target": action.target,
			"timestamp": to_iso(self.store.now()),
			"message": f"Successfully executed: {instruction}" if success else f"Failed to execute: {instruction}",
			"confidence": action.confidence,
			"reasoning": action.reasoning,
			"details": details,
		}
		if error is not None:
			execution["error"] = error

		session = self.store.get_or_create(session_id)
		state = session.state
		if not state.api_key_preview:
			state.api_key_preview = key_preview(api_key)
		if navigated_url is not None:
			state.last_navigated_url = navigated_url
		state.record(
			ConversationEntry(
				instruction=instruction,
				action=action.action,
				result=execution,
				success=success,
				timestamp=self.store.now(),
			)
		)
		self.store.touch(session)

		return ToolResult.json(
			{
				"success": success,
				"sessionId": session_id,
				"instruction": instruction,
				"interpretation": action.to_dict(),
				"execution": execution,
				"conversationLength": len(state.conversation_history),
				"sessionAge": self._session_age(session),
			}
		)

	async def navigate(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		api_key = require_api_key(arguments.get("apiKey"))
		url = optional_str(arguments, "url")
		instruction = optional_str(arguments, "instruction")
		if url is None and instruction is None:
			raise ValueError("Either URL or natural language instruction is required")
		if url is not None:
			url = check_url(url)
		session_id = session_id_from(arguments)
		session = self.store.require(
			session_id,
			f"Session '{session_id}' not found. Please start with a natural language action first.",
		)

		if url is None:
			action = await self.interpreter.interpret(instruction, api_key=api_key)
			if action.action != NAVIGATE:
				raise ValueError(f"Could not determine a URL from the instruction: {instruction}")
			url = check_url(action.target)
		page = await self.backend.navigate(session_id, url, NAVIGATE_TIMEOUT_MS)

		session.state.last_navigated_url = page.get("url", url)
		session.state.is_active = True
		self.store.touch(session)

		return ToolResult.json(
			{
				"success": True,
				"sessionId": session_id,
				"url": url,
				"instruction": instruction or f"Navigate to {url}",
				"timestamp": to_iso(self.store.now()),
				"message": "Successfully navigated using browser-use",
				"pageTitle": page.get("pageTitle"),
				"currentUrl": session.state.last_navigated_url,
			}
		)

	async def conversation_history(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		session_id = session_id_from(arguments)
		limit = optional_int(arguments, "limit", DEFAULT_HISTORY_LIMIT, minimum=1)
		session = self.store.require(session_id)
		self.store.touch(session)

		entries = list(session.state.conversation_history)[-limit:]
		return ToolResult.json(
			{
				"sessionId": session_id,
				"totalEntries": len(session.state.conversation_history),
				"returnedEntries": len(entries),
				"sessionAge": self._session_age(session),
				"history": [
					{
						"timestamp": to_iso(entry.timestamp),
						"instruction": entry.instruction,
						"action": entry.action,
						"success": entry.success,
					}
					for entry in entries
				],
			}
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
				"conversationLength": len(session.state.conversation_history),
				"ageMinutes": minutes_between(session.last_active_at, now),
				"apiKeyPreview": session.state.api_key_preview,
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
			raise SessionNotFoundError(session_id)
		LOGGER.info("Closed browser-use session %s", session_id)
		return ToolResult.json(
			{
				"success": True,
				"sessionId": session_id,
				"message": f"Session '{session_id}' closed",
			}
		)
