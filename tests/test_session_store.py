"""
Tests for services/sessions/session_store.py and utils/session_cleaner.py.

Coverage targets:
  - lazy creation and lookup
  - expiry checked on access, before any sweep
  - sweep idempotence and snapshot listing
  - isolation between sessions
  - optional periodic cleanup task
"""
from __future__ import annotations

import asyncio

import pytest

from models.session_models import AutomationState, ReasoningState, ThinkingStep
from services.sessions.session_store import SessionNotFoundError, SessionStore
from utils.session_cleaner import SessionCleaner

TIMEOUT = 1800.0


def _make_store(clock, timeout: float = TIMEOUT) -> SessionStore:
    return SessionStore(AutomationState, timeout, clock=clock)


# ---------------------------------------------------------------------------
# Lookup and creation
# ---------------------------------------------------------------------------


class TestLookup:
    def test_get_or_create_returns_same_session(self, clock):
        store = _make_store(clock)
        first = store.get_or_create("a")
        second = store.get_or_create("a")
        assert first is second
        assert first.created_at == clock.now
        assert first.last_active_at == clock.now

    def test_get_missing_returns_none(self, clock):
        store = _make_store(clock)
        assert store.get("missing") is None
        assert len(store) == 0

    def test_require_missing_raises_with_default_message(self, clock):
        store = _make_store(clock)
        with pytest.raises(SessionNotFoundError, match="Session 'ghost' not found"):
            store.require("ghost")

    def test_require_uses_custom_message(self, clock):
        store = _make_store(clock)
        with pytest.raises(SessionNotFoundError, match="navigate first"):
            store.require("ghost", "navigate first")

    def test_remove_reports_whether_session_existed(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        assert store.remove("a") is True
        assert store.remove("a") is False
        assert store.get("a") is None

    def test_non_positive_timeout_is_rejected(self, clock):
        with pytest.raises(ValueError):
            SessionStore(AutomationState, 0, clock=clock)

    def test_now_follows_injected_clock(self, clock):
        store = _make_store(clock)
        clock.advance(42)
        assert store.now() == clock.now


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------


class TestExpiry:
    def test_expired_session_is_absent_before_sweep(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        clock.advance(TIMEOUT + 1)
        assert store.get("a") is None
        assert store.list_all() == []
        assert len(store) == 0

    def test_session_at_exact_timeout_is_still_live(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        clock.advance(TIMEOUT)
        assert store.get("a") is not None

    def test_touch_extends_lifetime(self, clock):
        store = _make_store(clock)
        session = store.get_or_create("a")
        clock.advance(TIMEOUT - 10)
        store.touch(session)
        clock.advance(TIMEOUT - 10)
        assert store.get("a") is session

    def test_get_or_create_replaces_expired_session(self, clock):
        store = _make_store(clock)
        old = store.get_or_create("a")
        old.state.last_navigated_url = "https://old.example"
        clock.advance(TIMEOUT + 1)
        fresh = store.get_or_create("a")
        assert fresh is not old
        assert fresh.state.last_navigated_url is None

    def test_sweep_removes_only_expired_and_is_idempotent(self, clock):
        store = _make_store(clock)
        store.get_or_create("old")
        clock.advance(TIMEOUT / 2)
        store.get_or_create("young")
        clock.advance(TIMEOUT / 2 + 1)
        assert store.sweep_expired() == 1
        assert store.sweep_expired() == 0
        assert [s.session_id for s in store.list_all()] == ["young"]

    def test_sweep_accepts_explicit_now(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        assert store.sweep_expired(now=clock.now + TIMEOUT + 1) == 1


# ---------------------------------------------------------------------------
# Snapshots and isolation
# ---------------------------------------------------------------------------


class TestSnapshots:
    def test_list_all_is_a_snapshot(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        snapshot = store.list_all()
        store.get_or_create("b")
        store.remove("a")
        assert [s.session_id for s in snapshot] == ["a"]

    def test_sessions_are_isolated(self, clock):
        store = SessionStore(ReasoningState, 3600, clock=clock)
        a = store.get_or_create("a")
        b = store.get_or_create("b")
        a.state.append(ThinkingStep(thought_number=1, thought="only in a"))
        a.state.is_completed = True
        assert b.state.steps == []
        assert b.state.is_completed is False


# ---------------------------------------------------------------------------
# Periodic cleanup
# ---------------------------------------------------------------------------


class TestSessionCleaner:
    def test_prune_expired_sessions_returns_count(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        store.get_or_create("b")
        clock.advance(TIMEOUT + 1)
        assert SessionCleaner(store).prune_expired_sessions() == 2

    @pytest.mark.asyncio
    async def test_periodic_cleanup_sweeps_until_cancelled(self, clock):
        store = _make_store(clock)
        store.get_or_create("a")
        clock.advance(TIMEOUT + 1)
        task = asyncio.create_task(SessionCleaner(store).run_periodic_cleanup(0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        assert store._sessions == {}
