"""Client initialization utilities.

Provides functions for initializing external service clients
(Supabase, Supadata) shared across requests.
"""

from supabase import Client, create_client
from supadata import Supadata

from src.videos.config import VideoConfig


def get_service_clients(config: VideoConfig) -> tuple[Client, Supadata]:
    """Initialize and return the Supabase and Supadata clients.

    Args:
        config: Video configuration holding the credentials.

    Returns:
        Tuple of (Supabase client, Supadata client).

    Raises:
        ValueError: If required credentials are missing.

    Examples:
        >>> supabase, supadata = get_service_clients(get_config())
    """
    if not config.supabase_url or not config.supabase_key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables are required")

    if not config.supadata_api_key:
        raise ValueError("SUPADATA_API_KEY environment variable is required")

    supabase = create_client(config.supabase_url, config.supabase_key)
    supadata = Supadata(api_key=config.supadata_api_key)

    return supabase, supadata
