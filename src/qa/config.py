"""Question-answering configuration utilities.

Provides functions for loading LLM configuration and the context and
generation bounds used when answering questions about a transcript.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from openai import AsyncOpenAI
from pydantic_ai.models.openai import OpenAIModel
from pydantic_ai.providers.openai import OpenAIProvider

# Check if we're in production
is_production = os.getenv("ENVIRONMENT") == "production"

if not is_production:
    # Development: prioritize .env file
    project_root = Path(__file__).resolve().parent.parent.parent
    dotenv_path = project_root / ".env"
    load_dotenv(dotenv_path, override=True)
else:
    # Production: use cloud platform env vars only
    load_dotenv()


def get_model() -> OpenAIModel:
    """Get the configured LLM model for answering questions.

    Reads configuration from environment variables:
    - LLM_CHOICE: Model name (default: gpt-4o-mini)
    - LLM_BASE_URL: API base URL (default: https://api.openai.com/v1)
    - LLM_API_KEY: API key (default: ollama for local testing)

    The underlying HTTP client uses the LLM_TIMEOUT bound.

    Returns:
        OpenAIModel configured with environment settings.
    """
    llm = os.getenv("LLM_CHOICE") or "gpt-4o-mini"
    base_url = os.getenv("LLM_BASE_URL") or "https://api.openai.com/v1"
    api_key = os.getenv("LLM_API_KEY") or "ollama"

    client = AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=get_ai_timeout())
    return OpenAIModel(llm, provider=OpenAIProvider(openai_client=client))


def get_max_context_chars() -> int:
    """Get the maximum number of transcript characters sent with a question.

    Reads MAX_CONTEXT_CHARS from environment (default: 15000). Longer
    transcripts keep their earliest content and are cut at this bound.

    Returns:
        Maximum number of transcript characters per question.

    Examples:
        >>> get_max_context_chars()
        15000
    """
    return int(os.getenv("MAX_CONTEXT_CHARS", "15000"))


def get_temperature() -> float:
    """Get the sampling temperature (LLM_TEMPERATURE, default: 0.3)."""
    return float(os.getenv("LLM_TEMPERATURE", "0.3"))


def get_max_output_tokens() -> int:
    """Get the answer length limit (LLM_MAX_OUTPUT_TOKENS, default: 150)."""
    return int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "150"))


def get_ai_timeout() -> float:
    """Get the AI call timeout in seconds (LLM_TIMEOUT, default: 30)."""
    return float(os.getenv("LLM_TIMEOUT", "30"))
