"""Configuration module for video ingestion and the video store."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Check if we're in production
is_production = os.getenv("ENVIRONMENT") == "production"

if not is_production:
    # Development: prioritize .env file
    project_root = Path(__file__).resolve().parent.parent.parent
    load_dotenv(project_root / ".env", override=True)
else:
    load_dotenv()


class VideoConfig(BaseModel):
    """Configuration for transcript fetching and video persistence.

    All settings can be overridden via environment variables.
    """

    # Supadata API settings
    supadata_api_key: str = Field(
        default_factory=lambda: os.getenv("SUPADATA_API_KEY", "")
    )
    fetch_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("TRANSCRIPT_FETCH_TIMEOUT", "20"))
    )

    # Database settings
    supabase_url: str = Field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    supabase_key: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_SERVICE_KEY", "")
    )
    videos_table: str = Field(
        default_factory=lambda: os.getenv("VIDEOS_TABLE", "videos")
    )


def get_config() -> VideoConfig:
    """Get validated configuration instance.

    Returns:
        VideoConfig: Validated configuration object with all settings.

    Raises:
        ValueError: If a numeric environment variable cannot be parsed.
    """
    return VideoConfig()
