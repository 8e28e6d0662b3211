"""Description: Browser instruction interpretation using OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from services.openai.interpreter import ACTIONS, DEFAULT_TARGET, InterpretedAction
from services.openai.interpreter_prompts import build_system_prompt, build_user_prompt
from services.openai.interpreter_schema import FUNCTION_DEFINITION, FUNCTION_NAME
from services.openai.response_parser import extract_usage, parse_function_call


class OpenAIInterpreter:
    """Map natural-language instructions to browser actions with a forced function call.

    When constructed with a client, every call goes through it. Otherwise a
    short-lived client is built from the caller's API key for each call.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = "gpt-4.1-mini") -> None:
        self.client = client
        self.model = model
        self.system_prompt = build_system_prompt()

    async def interpret(self, instruction: str, *, api_key: Optional[str] = None) -> InterpretedAction:
        """Interpret one instruction; raise if the model output cannot be used."""
        if not instruction or not instruction.strip():
            raise ValueError("Natural language instruction is required")
        start_time = time.time()
        inputs = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": build_user_prompt(instruction)},
        ]
        if self.client is not None:
            response = await self._create_response(self.client, inputs)
        else:
            if not api_key:
                raise ValueError("An OpenAI API key is required to interpret instructions")
            client = AsyncOpenAI(api_key=api_key)
            try:
                response = await self._create_response(client, inputs)
            finally:
                await client.close()

        action = self._parse_response(response)
        logging.info(
            "Interpreted instruction as %s in %.2fs (usage=%s)",
            action.action,
            time.time() - start_time,
            extract_usage(response),
        )
        return action

    async def _create_response(self, client: AsyncOpenAI, inputs: List[Dict[str, Any]]) -> Any:
        """Send the instruction to the OpenAI Responses API."""
        try:
            return await client.responses.create(
                model=self.model,
                input=inputs,
                tools=[FUNCTION_DEFINITION],
                tool_choice={"type": "function", "name": FUNCTION_NAME},
            )
        except Exception as exc:
            logging.error("Error during OpenAI Responses API call: %s", exc)
            raise

    def _parse_response(self, response: Any) -> InterpretedAction:
        """Turn the function call arguments into an InterpretedAction."""
        try:
            result = parse_function_call(response, tool_name=FUNCTION_NAME)
        except Exception as exc:
            logging.error("Error parsing OpenAI response: %s", exc)
            logging.error("Full response object: %r", response)
            raise

        action = result.get("action")
        if action not in ACTIONS:
            raise RuntimeError(f"Model returned unsupported action: {action!r}")
        try:
            confidence = float(result.get("confidence", 0.0))
        except (TypeError, ValueError):
            confidence = 0.0
        value = result.get("value")
        return InterpretedAction(
            action=action,
            target=str(result.get("target") or DEFAULT_TARGET),
            confidence=min(max(confidence, 0.0), 1.0),
            reasoning=str(result.get("reasoning", "")),
            value=str(value) if value is not None else None,
        )

# end of OpenAIInterpreter
