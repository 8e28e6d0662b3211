"""Shared fixtures for the MCP tool-set server tests."""
from __future__ import annotations

import pytest

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced clock for session expiry tests."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api_key() -> str:
    return "sk-test" + "a" * 30
