"""AI client wrapper around a pydantic-ai agent.

Failures are signalled explicitly by raising ServiceUnavailable; the wrapper
never returns descriptive error strings in place of an answer.
"""

import asyncio

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from src.utils.errors import ServiceUnavailable
from src.utils.logging import get_logger

from .config import get_ai_timeout, get_model

logger = get_logger(__name__)


class AIClient:
    """Single-shot completion client for an OpenAI-compatible chat model."""

    def __init__(self, model: Model | None = None, timeout: float | None = None):
        """Initialize the client.

        Args:
            model: pydantic-ai model. If None, built from environment.
            timeout: Seconds before a call is abandoned. Defaults to LLM_TIMEOUT.
        """
        self.model = model or get_model()
        self.timeout = timeout or get_ai_timeout()
        logger.info("ai_client_initialized", timeout=self.timeout)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Run one completion and return the stripped answer text.

        Args:
            system_prompt: Instruction constraining the model.
            user_prompt: Transcript context and question.
            temperature: Sampling temperature.
            max_output_tokens: Upper bound on answer length.

        Returns:
            Answer text (may be empty if the model produced nothing).

        Raises:
            ServiceUnavailable: If the model call fails or times out.
        """
        agent = Agent(self.model, system_prompt=system_prompt)
        settings = ModelSettings(
            temperature=temperature,
            max_tokens=max_output_tokens,
            timeout=self.timeout,
        )

        logger.info(
            "ai_completion_started",
            prompt_length=len(user_prompt),
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

        try:
            result = await asyncio.wait_for(
                agent.run(user_prompt, model_settings=settings),
                timeout=self.timeout,
            )
        except TimeoutError:
            logger.warning("ai_completion_timeout", timeout=self.timeout)
            raise ServiceUnavailable() from None
        except Exception as e:
            logger.exception("ai_completion_failed", error_type=type(e).__name__)
            raise ServiceUnavailable() from e

        answer = (result.output or "").strip()
        logger.info("ai_completion_completed", answer_length=len(answer))
        return answer
