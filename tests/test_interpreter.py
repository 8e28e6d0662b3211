"""
Tests for services/openai/interpreter.py, openai_interpreter.py and response_parser.py.

The OpenAI client is replaced by a small fake exposing `responses.create`, so
no network access is needed.
"""
from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from services.openai.interpreter import (
    CLICK,
    EXTRACT,
    FILL,
    NAVIGATE,
    SCREENSHOT,
    WAIT,
    KeywordInterpreter,
    extract_url,
)
from services.openai.interpreter_schema import FUNCTION_DEFINITION, FUNCTION_NAME
from services.openai.openai_interpreter import OpenAIInterpreter
from services.openai.response_parser import extract_usage, parse_function_call


class _FakeResponses:
    def __init__(self, response) -> None:
        self.response = response
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.response


class _FakeClient:
    def __init__(self, response) -> None:
        self.responses = _FakeResponses(response)


def _function_response(arguments: dict, name: str = FUNCTION_NAME):
    return SimpleNamespace(
        output=[
            SimpleNamespace(type="reasoning"),
            SimpleNamespace(type="function_call", name=name, arguments=json.dumps(arguments)),
        ],
        usage=SimpleNamespace(input_tokens=120, output_tokens=30),
    )


# ---------------------------------------------------------------------------
# Keyword interpreter
# ---------------------------------------------------------------------------


class TestKeywordInterpreter:
    pytestmark = pytest.mark.asyncio

    @pytest.mark.parametrize(
        "instruction, action, target",
        [
            ("Take a screenshot of the page", SCREENSHOT, "body"),
            ("click the login button", CLICK, 'button[type="submit"]'),
            ("Go to https://news.example.com/today", NAVIGATE, "https://news.example.com/today"),
            ("navigate to example.org", NAVIGATE, "https://example.org"),
            ("open the homepage", NAVIGATE, "https://google.com"),
            ("wait for the results", WAIT, "body"),
            ("extract the headline", EXTRACT, "body"),
            ("something vague", EXTRACT, "body"),
        ],
    )
    async def test_action_selection(self, instruction, action, target):
        interpreted = await KeywordInterpreter().interpret(instruction)
        assert interpreted.action == action
        assert interpreted.target == target

    async def test_fill_value_is_extracted(self):
        interpreted = await KeywordInterpreter().interpret("Fill the search box with 'cats'")
        assert interpreted.action == FILL
        assert interpreted.value == "cats"

    async def test_same_input_same_output(self):
        interpreter = KeywordInterpreter()
        first = await interpreter.interpret("click submit")
        second = await interpreter.interpret("click submit")
        assert first == second

    async def test_explicit_url_has_highest_confidence(self):
        interpreted = await KeywordInterpreter().interpret("https://example.com")
        assert interpreted.confidence == pytest.approx(0.95)

    async def test_empty_instruction_is_rejected(self):
        with pytest.raises(ValueError):
            await KeywordInterpreter().interpret("   ")

    async def test_to_dict_shape(self):
        interpreted = await KeywordInterpreter().interpret("click it")
        data = interpreted.to_dict()
        assert set(data) == {"action", "confidence", "reasoning", "parameters"}
        assert data["parameters"] == {"target": 'button[type="submit"]'}
        assert data["reasoning"] == 'Analyzed instruction: "click it" and determined best action'


class TestExtractUrl:
    def test_absolute_url_wins(self):
        assert extract_url("see https://a.example/x, then b.example") == "https://a.example/x"

    def test_bare_domain_is_promoted(self):
        assert extract_url("go to docs.python.org/3/") == "https://docs.python.org/3/"

    def test_no_url(self):
        assert extract_url("press the big red button") is None


# ---------------------------------------------------------------------------
# OpenAI interpreter
# ---------------------------------------------------------------------------


class TestOpenAIInterpreter:
    pytestmark = pytest.mark.asyncio

    async def test_forced_function_call_is_parsed(self):
        client = _FakeClient(
            _function_response(
                {
                    "action": "fill_input",
                    "target": "#search",
                    "value": "cats",
                    "confidence": 0.92,
                    "reasoning": "The user wants to search.",
                }
            )
        )
        interpreter = OpenAIInterpreter(client, model="test-model")
        interpreted = await interpreter.interpret("search for cats")

        assert interpreted.action == "fill_input"
        assert interpreted.target == "#search"
        assert interpreted.value == "cats"
        assert interpreted.confidence == pytest.approx(0.92)

        call = client.responses.calls[0]
        assert call["model"] == "test-model"
        assert call["tools"] == [FUNCTION_DEFINITION]
        assert call["tool_choice"] == {"type": "function", "name": FUNCTION_NAME}
        assert call["input"][0]["role"] == "system"
        assert "search for cats" in call["input"][1]["content"]

    async def test_confidence_is_clamped(self):
        client = _FakeClient(
            _function_response(
                {"action": "click_element", "target": "#go", "value": None, "confidence": 7, "reasoning": ""}
            )
        )
        interpreted = await OpenAIInterpreter(client).interpret("click go")
        assert interpreted.confidence == 1.0
        assert interpreted.value is None

    async def test_unsupported_action_is_rejected(self):
        client = _FakeClient(
            _function_response(
                {"action": "scroll_page", "target": "body", "value": None, "confidence": 0.5, "reasoning": ""}
            )
        )
        with pytest.raises(RuntimeError, match="unsupported action"):
            await OpenAIInterpreter(client).interpret("scroll down")

    async def test_missing_function_call_is_an_error(self):
        client = _FakeClient(SimpleNamespace(output=[SimpleNamespace(type="message")], usage=None))
        with pytest.raises(RuntimeError, match="No function_call output"):
            await OpenAIInterpreter(client).interpret("click go")

    async def test_without_client_a_caller_key_is_required(self):
        with pytest.raises(ValueError, match="API key is required"):
            await OpenAIInterpreter(None).interpret("click go")


# ---------------------------------------------------------------------------
# Response parsing helpers
# ---------------------------------------------------------------------------


class TestResponseParser:
    def test_parse_function_call_matches_tool_name(self):
        response = _function_response({"action": "extract_text"}, name="other_tool")
        with pytest.raises(RuntimeError):
            parse_function_call(response, tool_name=FUNCTION_NAME)
        assert parse_function_call(response, tool_name="other_tool") == {"action": "extract_text"}

    def test_extract_usage(self):
        assert extract_usage(_function_response({})) == {"input_tokens": 120, "output_tokens": 30}
        assert extract_usage(SimpleNamespace()) == {"input_tokens": None, "output_tokens": None}

    def test_schema_is_strict_and_lists_every_action(self):
        parameters = FUNCTION_DEFINITION["parameters"]
        assert FUNCTION_DEFINITION["strict"] is True
        assert parameters["additionalProperties"] is False
        assert set(parameters["required"]) == set(parameters["properties"])
        assert parameters["properties"]["action"]["enum"] == [NAVIGATE, CLICK, FILL, EXTRACT, SCREENSHOT, WAIT]
