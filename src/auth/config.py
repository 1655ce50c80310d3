"""Configuration for Supabase Auth calls."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class AuthConfig(BaseModel):
    """Supabase Auth endpoint settings.

    The anon key is sent as the `apikey` header on every auth request; the
    service key is used when no anon key is configured.
    """

    supabase_url: str = Field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    supabase_key: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_ANON_KEY")
        or os.getenv("SUPABASE_SERVICE_KEY", "")
    )
    timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("AUTH_TIMEOUT", "10"))
    )


def get_auth_config() -> AuthConfig:
    """Get auth configuration from the environment."""
    return AuthConfig()
