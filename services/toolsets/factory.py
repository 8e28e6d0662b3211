"""Build the tool-set selected for this process."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from models.session_models import AutomationState, NLAutomationState, ReasoningState
from services.automation.backend import AutomationBackend
from services.automation.simulated_backend import SimulatedAutomationBackend
from services.openai.interpreter import InstructionInterpreter, KeywordInterpreter
from services.protocol.registry import ToolRegistry
from services.sessions.session_store import SessionStore
from services.toolsets.automation import AutomationTools
from services.toolsets.nl_automation import NLAutomationTools
from services.toolsets.reasoning import ReasoningTools
from services.toolsets.toolset import ServerInfo, ToolSet
from utils.settings import TOOLSET_AUTOMATION, TOOLSET_NL_AUTOMATION, TOOLSET_REASONING, ServerSettings

LOGGER = logging.getLogger(__name__)

REASONING_NOTES = """Sequential Thinking MCP Server

Structured, stepwise reasoning:
- Record numbered thinking steps per session
- Revise earlier thoughts or branch into alternative paths
- Inspect or clear a session at any time

Sessions expire after {timeout} of inactivity. Default session ID: 'default'.
"""

AUTOMATION_NOTES = """Playwright MCP Server

Core browser automation tools:
- Navigate to URLs with session management
- Click elements using CSS selectors
- Fill form inputs with text
- Take screenshots (full page or elements)
- Extract text content from pages
- Wait for elements to appear or change state

Sessions expire after {timeout} of inactivity. Default session ID: 'default'.
Every tool except playwright_navigate needs a session that has navigated first.
"""

NL_AUTOMATION_NOTES = """Browser-use MCP Server

Natural language browser automation:
- Interpret instructions into a single browser action
- Execute the action and keep a conversation history (last 50 entries)
- Manage several sessions side by side

Authentication required: OpenAI API key (sk-...) passed as the apiKey argument.
Only the first characters of the key are kept with a session.
Sessions expire after {timeout} of inactivity.

Example instructions:
- "Click the login button"
- "Fill the search box with 'cats'"
- "Go to google.com"
- "Take a screenshot of the page"
"""


def _describe_timeout(seconds: float) -> str:
    minutes = int(seconds // 60)
    if minutes and minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" + ("s" if hours != 1 else "")
    if minutes:
        return f"{minutes} minutes"
    return f"{int(seconds)} seconds"


def create_toolset(
    settings: ServerSettings,
    backend: Optional[AutomationBackend] = None,
    interpreter: Optional[InstructionInterpreter] = None,
    clock: Callable[[], float] = time.time,
) -> ToolSet:
    """Construct the store, handlers and registry for `settings.toolset`."""
    registry = ToolRegistry()

    if settings.toolset == TOOLSET_REASONING:
        store = SessionStore(ReasoningState, settings.reasoning_session_timeout, clock=clock)
        registry.register_many(ReasoningTools(store).entries())
        toolset = ToolSet(
            slug=settings.toolset,
            info=ServerInfo(name="Sequential Thinking MCP Server", version=settings.server_version),
            registry=registry,
            store=store,
            notes=REASONING_NOTES.format(timeout=_describe_timeout(store.timeout_seconds)),
        )
    elif settings.toolset == TOOLSET_AUTOMATION:
        store = SessionStore(AutomationState, settings.automation_session_timeout, clock=clock)
        registry.register_many(AutomationTools(store, backend or SimulatedAutomationBackend()).entries())
        toolset = ToolSet(
            slug=settings.toolset,
            info=ServerInfo(name="Playwright MCP Server", version=settings.server_version),
            registry=registry,
            store=store,
            notes=AUTOMATION_NOTES.format(timeout=_describe_timeout(store.timeout_seconds)),
        )
    elif settings.toolset == TOOLSET_NL_AUTOMATION:
        store = SessionStore(NLAutomationState, settings.nl_session_timeout, clock=clock)
        tools = NLAutomationTools(
            store,
            backend or SimulatedAutomationBackend(),
            interpreter or KeywordInterpreter(),
        )
        registry.register_many(tools.entries())
        toolset = ToolSet(
            slug=settings.toolset,
            info=ServerInfo(
                name="Browser-use MCP Server",
                version=settings.server_version,
                capabilities={
                    "tools": {},
                    "authentication": {"required": True, "type": "openai_api_key"},
                },
            ),
            registry=registry,
            store=store,
            notes=NL_AUTOMATION_NOTES.format(timeout=_describe_timeout(store.timeout_seconds)),
            health_extras={"authenticationRequired": True},
        )
    else:
        raise ValueError(f"Unknown tool-set: {settings.toolset}")

    LOGGER.info("Serving %s with %d tools", toolset.info.name, len(registry))
    return toolset
