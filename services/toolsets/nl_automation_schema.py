"""Tool definitions for the natural-language browser automation tool-set."""

from typing import Any, Dict

from services.toolsets.automation_schema import SESSION_ID_PROPERTY

API_KEY_PROPERTY = {
    "type": "string",
    "description": "OpenAI API key (sk-...) - required for natural language processing",
}

NATURAL_ACTION_TOOL: Dict[str, Any] = {
    "name": "browseruse_natural_action",
    "description": "Perform browser actions using natural language instructions with OpenAI interpretation",
    "inputSchema": {
        "type": "object",
        "properties": {
            "instruction": {
                "type": "string",
                "description": (
                    "Natural language instruction for browser action (e.g., 'click the login button', "
                    "'fill the search box with cats', 'go to google.com')"
                ),
            },
            "sessionId": SESSION_ID_PROPERTY,
            "apiKey": API_KEY_PROPERTY,
        },
        "required": ["instruction", "apiKey"],
    },
}

NAVIGATE_TOOL: Dict[str, Any] = {
    "name": "browseruse_navigate",
    "description": "Navigate to URL with optional natural language context",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "URL to navigate to"},
            "instruction": {
                "type": "string",
                "description": "Natural language context used to pick the URL when none is given",
            },
            "sessionId": SESSION_ID_PROPERTY,
            "apiKey": API_KEY_PROPERTY,
        },
        "required": ["apiKey"],
    },
}

CONVERSATION_HISTORY_TOOL: Dict[str, Any] = {
    "name": "browseruse_conversation_history",
    "description": "Get conversation history for a browser-use session",
    "inputSchema": {
        "type": "object",
        "properties": {
            "sessionId": SESSION_ID_PROPERTY,
            "limit": {"type": "number", "description": "Number of recent entries to return (default: 10)"},
        },
        "required": [],
    },
}

LIST_SESSIONS_TOOL: Dict[str, Any] = {
    "name": "browseruse_list_sessions",
    "description": "List all active browser-use sessions",
    "inputSchema": {"type": "object", "properties": {}, "required": []},
}

CLOSE_SESSION_TOOL: Dict[str, Any] = {
    "name": "browseruse_close_session",
    "description": "Close a browser-use session and discard its conversation history",
    "inputSchema": {
        "type": "object",
        "properties": {"sessionId": SESSION_ID_PROPERTY},
        "required": [],
    },
}
