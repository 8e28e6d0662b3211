"""Tool definitions for the browser automation tool-set."""

from typing import Any, Dict

from services.automation.backend import ELEMENT_STATES

SESSION_ID_PROPERTY = {"type": "string", "description": "Browser session ID (default: 'default')"}

NAVIGATE_TOOL: Dict[str, Any] = {
    "name": "playwright_navigate",
    "description": "Navigate to a URL in the browser",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "The URL to navigate to"},
            "sessionId": SESSION_ID_PROPERTY,
            "timeout": {"type": "number", "description": "Navigation timeout in milliseconds (default: 30000)"},
        },
        "required": ["url"],
    },
}

CLICK_TOOL: Dict[str, Any] = {
    "name": "playwright_click",
    "description": "Click an element on the page",
    "inputSchema": {
        "type": "object",
        "properties": {
            "selector": {"type": "string", "description": "CSS selector for the element to click"},
            "sessionId": SESSION_ID_PROPERTY,
            "timeout": {"type": "number", "description": "Click timeout in milliseconds (default: 5000)"},
        },
        "required": ["selector"],
    },
}

FILL_TOOL: Dict[str, Any] = {
    "name": "playwright_fill",
    "description": "Fill an input field with text",
    "inputSchema": {
        "type": "object",
        "properties": {
            "selector": {"type": "string", "description": "CSS selector for the input element"},
            "value": {"type": "string", "description": "Text to fill in the input field"},
            "sessionId": SESSION_ID_PROPERTY,
            "timeout": {"type": "number", "description": "Fill timeout in milliseconds (default: 5000)"},
        },
        "required": ["selector", "value"],
    },
}

SCREENSHOT_TOOL: Dict[str, Any] = {
    "name": "playwright_screenshot",
    "description": "Take a screenshot of the current page or element",
    "inputSchema": {
        "type": "object",
        "properties": {
            "sessionId": SESSION_ID_PROPERTY,
            "fullPage": {"type": "boolean", "description": "Whether to capture the full page (default: false)"},
            "selector": {
                "type": "string",
                "description": "CSS selector for specific element to screenshot (optional)",
            },
        },
        "required": [],
    },
}

GET_TEXT_TOOL: Dict[str, Any] = {
    "name": "playwright_get_text",
    "description": "Extract text content from the page or specific element",
    "inputSchema": {
        "type": "object",
        "properties": {
            "selector": {
                "type": "string",
                "description": "CSS selector for specific element (optional, defaults to body)",
            },
            "sessionId": SESSION_ID_PROPERTY,
        },
        "required": [],
    },
}

WAIT_FOR_ELEMENT_TOOL: Dict[str, Any] = {
    "name": "playwright_wait_for_element",
    "description": "Wait for an element to appear or reach a specific state",
    "inputSchema": {
        "type": "object",
        "properties": {
            "selector": {"type": "string", "description": "CSS selector for the element to wait for"},
            "state": {
                "type": "string",
                "description": "Element state to wait for: 'visible', 'hidden', 'attached', 'detached'",
                "enum": list(ELEMENT_STATES),
            },
            "sessionId": SESSION_ID_PROPERTY,
            "timeout": {"type": "number", "description": "Wait timeout in milliseconds (default: 10000)"},
        },
        "required": ["selector"],
    },
}

LIST_SESSIONS_TOOL: Dict[str, Any] = {
    "name": "playwright_list_sessions",
    "description": "List all active browser sessions",
    "inputSchema": {"type": "object", "properties": {}, "required": []},
}

CLOSE_SESSION_TOOL: Dict[str, Any] = {
    "name": "playwright_close_session",
    "description": "Close a browser session and forget its state",
    "inputSchema": {
        "type": "object",
        "properties": {"sessionId": SESSION_ID_PROPERTY},
        "required": [],
    },
}
