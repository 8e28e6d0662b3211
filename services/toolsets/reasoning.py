"""Sequential thinking tool handlers.

Steps are appended to the session's main path, or to a branch log when the
step names a branch. Nothing is ever rewritten in place.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from models.session_models import ReasoningState, ThinkingStep, round_half_up, to_iso
from models.tool_models import ToolResult
from services.protocol.registry import HandlerFunc
from services.sessions.session_store import SessionNotFoundError, SessionStore
from services.toolsets.reasoning_schema import CLEAR_SESSION_TOOL, GET_SESSION_TOOL, SEQUENTIAL_THINKING_TOOL
from utils.arguments import (
	optional_bool,
	optional_int,
	optional_str,
	require_bool,
	require_int,
	require_str,
	session_id_from,
)

LOGGER = logging.getLogger(__name__)

LOG_PREVIEW_LENGTH = 100


class ReasoningTools:
	"""Handlers bound to one reasoning session store."""

	def __init__(self, store: SessionStore[ReasoningState]) -> None:
		self.store = store

	def entries(self) -> List[Tuple[Dict[str, Any], HandlerFunc]]:
		return [
			(SEQUENTIAL_THINKING_TOOL, self.sequential_thinking),
			(GET_SESSION_TOOL, self.get_session),
			(CLEAR_SESSION_TOOL, self.clear_session),
		]

	async def sequential_thinking(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()

		thought = require_str(arguments, "thought")
		next_needed = require_bool(arguments, "nextThoughtNeeded")
		thought_number = require_int(arguments, "thoughtNumber", minimum=1)
		total_thoughts = require_int(arguments, "totalThoughts", minimum=1)
		session_id = session_id_from(arguments)
		is_revision = optional_bool(arguments, "isRevision")
		revises_thought = optional_int(arguments, "revisesThought", minimum=1)
		branch_from = optional_int(arguments, "branchFromThought", minimum=1)
		branch_id = optional_str(arguments, "branchId")

		session = self.store.get_or_create(session_id)
		state = session.state
		step = ThinkingStep(
			thought_number=thought_number,
			thought=thought,
			timestamp=self.store.now(),
			is_revision=is_revision,
			revises_thought=revises_thought,
			branch_from_thought=branch_from,
			branch_id=branch_id,
		)
		state.append(step)
		state.current_thought = thought_number
		state.declared_total = max(state.declared_total, total_thoughts)
		state.is_completed = not next_needed
		self.store.touch(session)

		LOGGER.info(
			"Thought %d/%d [%s]: %s",
			thought_number,
			total_thoughts,
			session_id,
			thought[:LOG_PREVIEW_LENGTH],
		)

		return ToolResult.json(
			{
				"status": "success",
				"sessionId": session_id,
				"currentThought": thought_number,
				"totalThoughts": total_thoughts,
				"progressPercentage": round_half_up(thought_number / total_thoughts * 100),
				"isCompleted": state.is_completed,
				"sessionSummary": {
					"totalSteps": len(state.steps),
					"branches": len(state.branches),
					"declaredTotal": state.declared_total,
					"created": to_iso(session.created_at),
					"lastUpdated": to_iso(session.last_active_at),
				},
				"nextAction": "Continue with next thinking step" if next_needed else "Thinking process completed",
				"thought": {
					"number": thought_number,
					"content": thought,
					"isRevision": is_revision,
					"revisesThought": revises_thought,
					"branchInfo": {"branchId": branch_id, "branchFromThought": branch_from} if branch_id else None,
				},
			}
		)

	async def get_session(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		session_id = session_id_from(arguments)
		session = self.store.require(session_id, f"Thinking session '{session_id}' not found")
		self.store.touch(session)
		state = session.state
		return ToolResult.json(
			{
				"sessionId": session_id,
				"currentThought": state.current_thought,
				"declaredTotal": state.declared_total,
				"isCompleted": state.is_completed,
				"created": to_iso(session.created_at),
				"lastUpdated": to_iso(session.last_active_at),
				"steps": [step.to_dict() for step in state.steps],
				"branches": {
					branch_id: [step.to_dict() for step in steps]
					for branch_id, steps in state.branches.items()
				},
			}
		)

	async def clear_session(self, arguments: Dict[str, Any]) -> ToolResult:
		self.store.sweep_expired()
		session_id = session_id_from(arguments)
		session = self.store.get(session_id)
		if session is None or not self.store.remove(session_id):
			raise SessionNotFoundError(session_id, f"Thinking session '{session_id}' not found")
		return ToolResult.json(
			{
				"status": "cleared",
				"sessionId": session_id,
				"removedSteps": len(session.state.steps),
				"removedBranches": len(session.state.branches),
			}
		)
