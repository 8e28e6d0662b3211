"""Natural-language instruction interpretation.

`InstructionInterpreter` is the seam the NL-automation tool-set depends on.
`KeywordInterpreter` is a deterministic, offline implementation; the
OpenAI-backed one lives in `services.openai.openai_interpreter`.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

NAVIGATE = "navigate_to_url"
CLICK = "click_element"
FILL = "fill_input"
EXTRACT = "extract_text"
SCREENSHOT = "take_screenshot"
WAIT = "wait_for_element"
ACTIONS = (NAVIGATE, CLICK, FILL, EXTRACT, SCREENSHOT, WAIT)

DEFAULT_URL = "https://google.com"
DEFAULT_CLICK_TARGET = 'button[type="submit"]'
DEFAULT_FILL_TARGET = 'input[type="text"]'
DEFAULT_TARGET = "body"

_URL_RE = re.compile(r"https?://[^\s'\"]+")
_DOMAIN_RE = re.compile(r"\b((?:[a-z0-9-]+\.)+[a-z]{2,})(/[^\s'\"]*)?", re.IGNORECASE)
_FILL_VALUE_RE = re.compile(r"\bwith\s+['\"]?(.+?)['\"]?\s*$", re.IGNORECASE)


@dataclass
class InterpretedAction:
    """One browser action derived from an instruction."""

    action: str
    target: str
    confidence: float
    reasoning: str
    value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {"target": self.target}
        if self.value is not None:
            parameters["value"] = self.value
        return {
            "action": self.action,
            "confidence": round(self.confidence, 3),
            "reasoning": self.reasoning,
            "parameters": parameters,
        }


class InstructionInterpreter(Protocol):
    async def interpret(self, instruction: str, *, api_key: Optional[str] = None) -> InterpretedAction:
        """Map an instruction to a single action."""
        ...


def extract_url(instruction: str) -> Optional[str]:
    """Return an absolute URL named in the instruction, promoting bare domains to https."""
    match = _URL_RE.search(instruction)
    if match:
        return match.group(0).rstrip(".,;")
    match = _DOMAIN_RE.search(instruction)
    if match:
        return f"https://{match.group(1)}{match.group(2) or ''}".rstrip(".,;")
    return None


class KeywordInterpreter:
    """Pick an action from keywords in the instruction. Same input, same output."""

    async def interpret(self, instruction: str, *, api_key: Optional[str] = None) -> InterpretedAction:
        if not instruction or not instruction.strip():
            raise ValueError("Natural language instruction is required")
        text = instruction.strip()
        lowered = text.lower()
        url = extract_url(text)

        if "screenshot" in lowered or "capture" in lowered:
            return self._action(SCREENSHOT, DEFAULT_TARGET, 0.9, text)
        if any(word in lowered for word in ("fill", "type ", "enter ")):
            match = _FILL_VALUE_RE.search(text)
            value = match.group(1) if match else ""
            return self._action(FILL, DEFAULT_FILL_TARGET, 0.85 if value else 0.7, text, value=value)
        if any(word in lowered for word in ("click", "press", "tap")):
            return self._action(CLICK, DEFAULT_CLICK_TARGET, 0.85, text)
        if url:
            return self._action(NAVIGATE, url, 0.95, text)
        if any(word in lowered for word in ("go to", "navigate", "open", "visit")):
            return self._action(NAVIGATE, DEFAULT_URL, 0.6, text)
        if "wait" in lowered:
            return self._action(WAIT, DEFAULT_TARGET, 0.7, text)
        if any(word in lowered for word in ("read", "extract", "text", "get")):
            return self._action(EXTRACT, DEFAULT_TARGET, 0.85, text)
        return self._action(EXTRACT, DEFAULT_TARGET, 0.5, text)

    def _action(
        self,
        action: str,
        target: str,
        confidence: float,
        instruction: str,
        value: Optional[str] = None,
    ) -> InterpretedAction:
        return InterpretedAction(
            action=action,
            target=target,
            confidence=confidence,
            reasoning=f'Analyzed instruction: "{instruction}" and determined best action',
            value=value,
        )
