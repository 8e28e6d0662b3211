"""Session domain models shared by every tool-set."""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, Generic, List, Optional, TypeVar

DEFAULT_SESSION_ID = "default"
HISTORY_LIMIT = 50

StateT = TypeVar("StateT")


def to_iso(epoch: float) -> str:
	"""Render epoch seconds as an ISO-8601 UTC timestamp."""
	return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


def minutes_between(start: float, end: float) -> int:
	"""Whole minutes from `start` to `end`, rounded half up."""
	return round_half_up((end - start) / 60.0)


@dataclass
class Session(Generic[StateT]):
	"""One named, expiring unit of per-client state inside a tool-set."""

	session_id: str
	state: StateT
	created_at: float = field(default_factory=lambda: time.time())
	last_active_at: float = field(default_factory=lambda: time.time())


@dataclass
class ThinkingStep:
	"""A single submitted reasoning step."""

	thought_number: int
	thought: str
	timestamp: float = field(default_factory=lambda: time.time())
	is_revision: bool = False
	revises_thought: Optional[int] = None
	branch_from_thought: Optional[int] = None
	branch_id: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"thoughtNumber": self.thought_number,
			"thought": self.thought,
			"timestamp": to_iso(self.timestamp),
			"isRevision": self.is_revision,
			"revisesThought": self.revises_thought,
			"branchFromThought": self.branch_from_thought,
			"branchId": self.branch_id,
		}


@dataclass
class ReasoningState:
	"""Main reasoning path plus independent branch logs."""

	steps: List[ThinkingStep] = field(default_factory=list)
	branches: Dict[str, List[ThinkingStep]] = field(default_factory=dict)
	current_thought: int = 0
	declared_total: int = 0
	is_completed: bool = False

	def append(self, step: ThinkingStep) -> None:
		"""Append to the branch log when the step names a branch, else to the main path."""
		if step.branch_id:
			self.branches.setdefault(step.branch_id, []).append(step)
		else:
			self.steps.append(step)


@dataclass
class AutomationState:
	"""Browser-style session state."""

	last_navigated_url: Optional[str] = None
	is_active: bool = True


@dataclass
class ConversationEntry:
	"""One interpreted instruction and what came of it."""

	instruction: str
	action: str
	result: Dict[str, Any]
	success: bool
	timestamp: float = field(default_factory=lambda: time.time())


@dataclass
class NLAutomationState(AutomationState):
	"""Browser-style state with a bounded conversation history."""

	api_key_preview: str = ""
	conversation_history: Deque[ConversationEntry] = field(
		default_factory=lambda: deque(maxlen=HISTORY_LIMIT)
	)

	def record(self, entry: ConversationEntry) -> None:
		"""Push an entry, dropping the oldest once the history is full."""
		self.conversation_history.append(entry)
