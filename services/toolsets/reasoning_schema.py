"""Tool definitions for the sequential thinking tool-set."""

from typing import Any, Dict

SESSION_ID_PROPERTY = {
    "type": "string",
    "description": "Session ID to track thinking process (defaults to 'default')",
}

SEQUENTIAL_THINKING_TOOL: Dict[str, Any] = {
    "name": "sequential_thinking",
    "description": "Process sequential thinking steps for complex problem-solving and analysis",
    "inputSchema": {
        "type": "object",
        "properties": {
            "thought": {"type": "string", "description": "The current thinking step"},
            "nextThoughtNeeded": {"type": "boolean", "description": "Whether another thought step is needed"},
            "thoughtNumber": {"type": "integer", "minimum": 1, "description": "Current thought number"},
            "totalThoughts": {"type": "integer", "minimum": 1, "description": "Estimated total thoughts needed"},
            "sessionId": SESSION_ID_PROPERTY,
            "isRevision": {"type": "boolean", "description": "Whether this revises previous thinking"},
            "revisesThought": {"type": "integer", "minimum": 1, "description": "Which thought is being reconsidered"},
            "branchFromThought": {"type": "integer", "minimum": 1, "description": "Branching point thought number"},
            "branchId": {"type": "string", "description": "Branch identifier for alternative reasoning paths"},
        },
        "required": ["thought", "nextThoughtNeeded", "thoughtNumber", "totalThoughts"],
    },
}

GET_SESSION_TOOL: Dict[str, Any] = {
    "name": "sequential_thinking_get_session",
    "description": "Return every recorded step and branch of a thinking session",
    "inputSchema": {
        "type": "object",
        "properties": {"sessionId": SESSION_ID_PROPERTY},
        "required": [],
    },
}

CLEAR_SESSION_TOOL: Dict[str, Any] = {
    "name": "sequential_thinking_clear_session",
    "description": "Discard a thinking session and all of its steps",
    "inputSchema": {
        "type": "object",
        "properties": {"sessionId": SESSION_ID_PROPERTY},
        "required": [],
    },
}
