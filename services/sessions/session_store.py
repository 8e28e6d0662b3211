"""In-memory, per-tool-set session store with lazy expiry."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Generic, List, Optional

from models.session_models import Session, StateT

LOGGER = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
	"""Raised when a tool references a session that is absent or expired."""

	def __init__(self, session_id: str, message: Optional[str] = None) -> None:
		super().__init__(message or f"Session '{session_id}' not found")
		self.session_id = session_id


class SessionStore(Generic[StateT]):
	"""Manage sessions for a single tool-set.

	Expiry is checked, never scheduled: `sweep_expired` runs at the top of each
	handler, and lookups treat a stale session as absent even before a sweep
	has physically removed it.
	"""

	def __init__(
		self,
		state_factory: Callable[[], StateT],
		timeout_seconds: float,
		clock: Callable[[], float] = time.time,
	) -> None:
		if timeout_seconds <= 0:
			raise ValueError("Session timeout must be positive.")
		self._sessions: Dict[str, Session[StateT]] = {}
		self._state_factory = state_factory
		self.timeout_seconds = float(timeout_seconds)
		self._clock = clock

	def now(self) -> float:
		"""Current time according to the store clock."""
		return self._clock()

	def _is_expired(self, session: Session[StateT], now: float) -> bool:
		return now - session.last_active_at > self.timeout_seconds

	def get_or_create(self, session_id: str) -> Session[StateT]:
		"""Return the live session for `session_id`, creating an empty one if needed."""
		existing = self.get(session_id)
		if existing is not None:
			return existing
		now = self._clock()
		session = Session(
			session_id=session_id,
			state=self._state_factory(),
			created_at=now,
			last_active_at=now,
		)
		self._sessions[session_id] = session
		LOGGER.debug("Created session %s", session_id)
		return session

	def get(self, session_id: str) -> Optional[Session[StateT]]:
		"""Return a live session or None when it is missing or expired."""
		session = self._sessions.get(session_id)
		if session is None:
			return None
		if self._is_expired(session, self._clock()):
			self._sessions.pop(session_id, None)
			return None
		return session

	def require(self, session_id: str, message: Optional[str] = None) -> Session[StateT]:
		"""Return a live session or raise SessionNotFoundError."""
		session = self.get(session_id)
		if session is None:
			raise SessionNotFoundError(session_id, message)
		return session

	def touch(self, session: Session[StateT]) -> Session[StateT]:
		"""Mark a session as used now."""
		session.last_active_at = self._clock()
		return session

	def remove(self, session_id: str) -> bool:
		"""Delete a session, returning whether a live one existed."""
		if self.get(session_id) is None:
			return False
		del self._sessions[session_id]
		return True

	def sweep_expired(self, now: Optional[float] = None) -> int:
		"""Remove every session idle for longer than the timeout and return the count removed."""
		now = self._clock() if now is None else now
		expired = [sid for sid, session in list(self._sessions.items()) if self._is_expired(session, now)]
		for session_id in expired:
			self._sessions.pop(session_id, None)
		if expired:
			LOGGER.info("Swept %d expired session(s)", len(expired))
		return len(expired)

	def list_all(self) -> List[Session[StateT]]:
		"""Return a snapshot of live sessions in creation order."""
		now = self._clock()
		return [session for session in list(self._sessions.values()) if not self._is_expired(session, now)]

	def __len__(self) -> int:
		return len(self.list_all())
