"""Schema definitions for the browser action selection tool."""

from typing import Any, Dict

from services.openai.interpreter import ACTIONS

FUNCTION_NAME = "select_browser_action"

FUNCTION_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": FUNCTION_NAME,
    "description": (
        "Return the browser action, its target, and the reasoning for carrying out the instruction."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "action": {
                "type": "string",
                "description": "One of the supported browser actions.",
                "enum": list(ACTIONS),
            },
            "target": {
                "type": "string",
                "description": "Absolute URL for navigation, otherwise a CSS selector.",
            },
            "value": {
                "type": ["string", "null"],
                "description": "Text to type when the action fills an input, otherwise null.",
            },
            "confidence": {
                "type": "number",
                "description": "Confidence between 0 and 1 that the action matches the instruction.",
            },
            "reasoning": {
                "type": "string",
                "description": "One sentence explaining the choice.",
            },
        },
        "required": ["action", "target", "value", "confidence", "reasoning"],
        "additionalProperties": False,
    },
    "strict": True,
}
