"""
Tests for services/toolsets/reasoning.py.

Coverage targets:
  - the three-step completion scenario
  - progress rounding and declared total tracking
  - branch log routing
  - validation before any session is created
  - get / clear session tools and expiry
"""
from __future__ import annotations

import json

import pytest

from models.session_models import ReasoningState
from services.sessions.session_store import SessionNotFoundError, SessionStore
from services.toolsets.reasoning import ReasoningTools

TIMEOUT = 3600.0


def _payload(result) -> dict:
    return json.loads(result.content[0].text)


def _step(number: int, total: int, next_needed: bool, **extra) -> dict:
    arguments = {
        "thought": f"thought {number}",
        "thoughtNumber": number,
        "totalThoughts": total,
        "nextThoughtNeeded": next_needed,
    }
    arguments.update(extra)
    return arguments


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(ReasoningState, TIMEOUT, clock=clock)


@pytest.fixture
def tools(store) -> ReasoningTools:
    return ReasoningTools(store)


class TestSequentialThinking:
    pytestmark = pytest.mark.asyncio

    async def test_three_step_session_completes(self, tools, store):
        for arguments in (
            _step(1, 3, True, sessionId="s1"),
            _step(2, 3, True, sessionId="s1"),
        ):
            payload = _payload(await tools.sequential_thinking(arguments))
            assert payload["isCompleted"] is False
            assert payload["nextAction"] == "Continue with next thinking step"

        payload = _payload(await tools.sequential_thinking(_step(3, 3, False, sessionId="s1")))
        assert payload["status"] == "success"
        assert payload["isCompleted"] is True
        assert payload["progressPercentage"] == 100
        assert payload["sessionSummary"]["totalSteps"] == 3
        assert payload["nextAction"] == "Thinking process completed"
        assert len(store.get("s1").state.steps) == 3

    async def test_progress_rounds_half_up(self, tools):
        assert _payload(await tools.sequential_thinking(_step(1, 8, True)))["progressPercentage"] == 13
        assert _payload(await tools.sequential_thinking(_step(2, 3, True)))["progressPercentage"] == 67
        assert _payload(await tools.sequential_thinking(_step(1, 3, True)))["progressPercentage"] == 33

    async def test_declared_total_never_decreases(self, tools, store):
        await tools.sequential_thinking(_step(1, 5, True))
        payload = _payload(await tools.sequential_thinking(_step(2, 3, True)))
        assert payload["totalThoughts"] == 3
        assert payload["sessionSummary"]["declaredTotal"] == 5
        assert store.get("default").state.declared_total == 5

    async def test_defaults_to_default_session(self, tools, store):
        payload = _payload(await tools.sequential_thinking(_step(1, 1, False)))
        assert payload["sessionId"] == "default"
        assert store.get("default") is not None

    async def test_revision_fields_are_echoed(self, tools):
        payload = _payload(
            await tools.sequential_thinking(_step(3, 4, True, isRevision=True, revisesThought=2))
        )
        assert payload["thought"] == {
            "number": 3,
            "content": "thought 3",
            "isRevision": True,
            "revisesThought": 2,
            "branchInfo": None,
        }

    async def test_string_inputs_are_coerced(self, tools):
        arguments = {
            "thought": "coerced",
            "thoughtNumber": "2",
            "totalThoughts": 4.0,
            "nextThoughtNeeded": "false",
        }
        payload = _payload(await tools.sequential_thinking(arguments))
        assert payload["currentThought"] == 2
        assert payload["isCompleted"] is True


class TestBranches:
    pytestmark = pytest.mark.asyncio

    async def test_branch_steps_never_enter_main_path(self, tools, store):
        await tools.sequential_thinking(_step(1, 3, True, sessionId="b"))
        await tools.sequential_thinking(
            _step(2, 3, True, sessionId="b", branchId="alt", branchFromThought=1, thought="alt one")
        )
        payload = _payload(
            await tools.sequential_thinking(
                _step(3, 3, True, sessionId="b", branchId="alt", branchFromThought=1, thought="alt two")
            )
        )
        state = store.get("b").state
        assert [step.thought for step in state.steps] == ["thought 1"]
        assert [step.thought for step in state.branches["alt"]] == ["alt one", "alt two"]
        assert payload["sessionSummary"]["branches"] == 1
        assert payload["thought"]["branchInfo"] == {"branchId": "alt", "branchFromThought": 1}

    async def test_branch_id_without_origin_still_routes_to_branch(self, tools, store):
        await tools.sequential_thinking(_step(1, 2, True, branchId="side"))
        state = store.get("default").state
        assert state.steps == []
        assert len(state.branches["side"]) == 1


class TestValidation:
    pytestmark = pytest.mark.asyncio

    @pytest.mark.parametrize(
        "missing",
        ["thought", "thoughtNumber", "totalThoughts", "nextThoughtNeeded"],
    )
    async def test_missing_required_argument_creates_nothing(self, tools, store, missing):
        arguments = _step(1, 3, True)
        del arguments[missing]
        with pytest.raises(ValueError, match=missing):
            await tools.sequential_thinking(arguments)
        assert len(store) == 0

    async def test_thought_number_must_be_positive(self, tools, store):
        with pytest.raises(ValueError, match="thoughtNumber must be at least 1"):
            await tools.sequential_thinking(_step(0, 3, True))
        assert len(store) == 0

    async def test_boolean_is_not_an_integer(self, tools):
        with pytest.raises(ValueError, match="totalThoughts must be an integer"):
            await tools.sequential_thinking(_step(1, True, True))


class TestSessionTools:
    pytestmark = pytest.mark.asyncio

    async def test_get_session_returns_steps_and_branches(self, tools):
        await tools.sequential_thinking(_step(1, 2, True, sessionId="v"))
        await tools.sequential_thinking(_step(2, 2, False, sessionId="v", branchId="x", branchFromThought=1))
        payload = _payload(await tools.get_session({"sessionId": "v"}))
        assert payload["sessionId"] == "v"
        assert [step["thoughtNumber"] for step in payload["steps"]] == [1]
        assert [step["branchId"] for step in payload["branches"]["x"]] == ["x"]
        assert payload["isCompleted"] is True
        assert payload["declaredTotal"] == 2

    async def test_get_unknown_session_raises(self, tools):
        with pytest.raises(SessionNotFoundError, match="Thinking session 'nope' not found"):
            await tools.get_session({"sessionId": "nope"})

    async def test_clear_session_removes_it(self, tools, store):
        await tools.sequential_thinking(_step(1, 2, True, sessionId="c"))
        payload = _payload(await tools.clear_session({"sessionId": "c"}))
        assert payload == {"status": "cleared", "sessionId": "c", "removedSteps": 1, "removedBranches": 0}
        assert store.get("c") is None
        with pytest.raises(SessionNotFoundError):
            await tools.clear_session({"sessionId": "c"})

    async def test_expired_session_is_not_found(self, tools, clock):
        await tools.sequential_thinking(_step(1, 2, True, sessionId="e"))
        clock.advance(TIMEOUT + 1)
        with pytest.raises(SessionNotFoundError):
            await tools.get_session({"sessionId": "e"})

    async def test_expired_session_restarts_empty(self, tools, clock):
        await tools.sequential_thinking(_step(1, 2, True, sessionId="e"))
        clock.advance(TIMEOUT + 1)
        payload = _payload(await tools.sequential_thinking(_step(1, 2, True, sessionId="e")))
        assert payload["sessionSummary"]["totalSteps"] == 1
