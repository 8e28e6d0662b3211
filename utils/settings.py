"""Process configuration read from the environment (and `.env` via python-dotenv)."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

TOOLSET_REASONING = "sequential-thinking"
TOOLSET_AUTOMATION = "playwright"
TOOLSET_NL_AUTOMATION = "browser-use"
TOOLSETS = (TOOLSET_REASONING, TOOLSET_AUTOMATION, TOOLSET_NL_AUTOMATION)

INTERPRETERS = ("keyword", "openai")


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} is not a number") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be greater than zero (got {raw!r})")
    return value


@dataclass
class ServerSettings:
    """Settings for one deployed tool-set instance."""

    toolset: str = TOOLSET_REASONING
    server_version: str = "1.0.0"
    heartbeat_seconds: float = 30.0
    reasoning_session_timeout: float = 3600.0
    automation_session_timeout: float = 1800.0
    nl_session_timeout: float = 3600.0
    sweep_interval_seconds: Optional[float] = None
    interpreter: str = "keyword"
    openai_model: str = "gpt-4.1-mini"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """Build settings from environment variables, raising RuntimeError on bad values."""
        toolset = (os.getenv("MCP_TOOLSET") or TOOLSET_REASONING).strip().lower()
        if toolset not in TOOLSETS:
            raise RuntimeError(f"MCP_TOOLSET={toolset!r} is not one of: {', '.join(TOOLSETS)}")

        interpreter = (os.getenv("MCP_INTERPRETER") or "keyword").strip().lower()
        if interpreter not in INTERPRETERS:
            raise RuntimeError(f"MCP_INTERPRETER={interpreter!r} is not one of: {', '.join(INTERPRETERS)}")

        log_level = (os.getenv("MCP_LOG_LEVEL") or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise RuntimeError(f"MCP_LOG_LEVEL={log_level!r} is not a logging level")

        sweep_interval = None
        if (os.getenv("MCP_SWEEP_INTERVAL_SECONDS") or "").strip():
            sweep_interval = _positive_float("MCP_SWEEP_INTERVAL_SECONDS", 0.0)

        return cls(
            toolset=toolset,
            server_version=os.getenv("MCP_SERVER_VERSION") or "1.0.0",
            heartbeat_seconds=_positive_float("MCP_HEARTBEAT_SECONDS", 30.0),
            reasoning_session_timeout=_positive_float("MCP_REASONING_SESSION_TIMEOUT", 3600.0),
            automation_session_timeout=_positive_float("MCP_AUTOMATION_SESSION_TIMEOUT", 1800.0),
            nl_session_timeout=_positive_float("MCP_NL_SESSION_TIMEOUT", 3600.0),
            sweep_interval_seconds=sweep_interval,
            interpreter=interpreter,
            openai_model=os.getenv("OPENAI_MODEL") or "gpt-4.1-mini",
            log_level=log_level,
        )
