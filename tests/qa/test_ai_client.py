"""Unit tests for the AI completion client."""

import asyncio

import pytest
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.function import AgentInfo, FunctionModel

from src.qa.ai_client import AIClient
from src.utils.errors import ServiceUnavailable


def reply_with(text: str, seen: dict | None = None) -> FunctionModel:
    """Build a function model that records its inputs and returns fixed text."""

    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if seen is not None:
            seen["messages"] = messages
            seen["settings"] = info.model_settings
        return ModelResponse(parts=[TextPart(content=text)])

    return FunctionModel(respond)


@pytest.mark.unit
class TestAIClient:
    """Test suite for AIClient class."""

    @pytest.mark.asyncio
    async def test_complete_returns_stripped_answer(self) -> None:
        """Test that surrounding whitespace is removed from the answer."""
        client = AIClient(model=reply_with("  Habit stacking.\n"), timeout=5)

        answer = await client.complete("system", "user", temperature=0.3, max_output_tokens=150)

        assert answer == "Habit stacking."

    @pytest.mark.asyncio
    async def test_prompts_and_settings_reach_model(self) -> None:
        """Test that prompts and generation bounds are passed through."""
        seen: dict = {}
        client = AIClient(model=reply_with("ok", seen), timeout=5)

        await client.complete(
            "Answer from the transcript only.",
            "Transcript: hello\n\nQuestion: hi?",
            temperature=0.3,
            max_output_tokens=150,
        )

        request = seen["messages"][0]
        assert isinstance(request, ModelRequest)
        system_parts = [p for p in request.parts if isinstance(p, SystemPromptPart)]
        user_parts = [p for p in request.parts if isinstance(p, UserPromptPart)]
        assert system_parts[0].content == "Answer from the transcript only."
        assert user_parts[0].content == "Transcript: hello\n\nQuestion: hi?"
        assert seen["settings"]["temperature"] == 0.3
        assert seen["settings"]["max_tokens"] == 150

    @pytest.mark.asyncio
    async def test_empty_answer_is_returned_empty(self) -> None:
        """Test that a blank model reply comes back as an empty string."""
        client = AIClient(model=reply_with("   "), timeout=5)

        answer = await client.complete("system", "user", temperature=0.3, max_output_tokens=150)

        assert answer == ""

    @pytest.mark.asyncio
    async def test_model_error_raises_service_unavailable(self) -> None:
        """Test that provider failures surface as ServiceUnavailable."""

        def fail(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            raise RuntimeError("401 invalid api key")

        client = AIClient(model=FunctionModel(fail), timeout=5)

        with pytest.raises(ServiceUnavailable):
            await client.complete("system", "user", temperature=0.3, max_output_tokens=150)

    @pytest.mark.asyncio
    async def test_timeout_raises_service_unavailable(self) -> None:
        """Test that a slow model is abandoned at the timeout."""

        async def slow(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            await asyncio.sleep(0.5)
            return ModelResponse(parts=[TextPart(content="too late")])

        client = AIClient(model=FunctionModel(slow), timeout=0.05)

        with pytest.raises(ServiceUnavailable):
            await client.complete("system", "user", temperature=0.3, max_output_tokens=150)
