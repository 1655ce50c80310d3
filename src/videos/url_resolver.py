"""Extract canonical YouTube video IDs from the URL shapes users paste."""

from urllib.parse import parse_qs, urlparse

from src.utils.errors import InvalidURL
from src.utils.logging import get_logger

logger = get_logger(__name__)

SHORT_LINK_HOSTS = frozenset({"youtu.be", "www.youtu.be"})
PATH_PREFIXES = ("/embed/", "/shorts/")


def _is_main_host(host: str) -> bool:
    return host == "youtube.com" or host.endswith(".youtube.com")


def resolve_video_id(raw_url: str) -> str:
    """Resolve a YouTube URL to its external video identifier.

    Supported shapes, checked in order:
    - youtube.com/watch?v=<id> (any youtube.com subdomain, any path)
    - youtu.be/<id>
    - youtube.com/embed/<id>
    - youtube.com/shorts/<id>

    Args:
        raw_url: Arbitrary user-supplied string.

    Returns:
        The video identifier.

    Raises:
        InvalidURL: If the string is not an http(s) URL or matches no shape.

    Examples:
        >>> resolve_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s")
        'dQw4w9WgXcQ'
        >>> resolve_video_id("https://youtu.be/dQw4w9WgXcQ?si=abc")
        'dQw4w9WgXcQ'
    """
    if not isinstance(raw_url, str) or not raw_url.strip():
        raise InvalidURL()

    try:
        parsed = urlparse(raw_url.strip())
        host = parsed.hostname
    except ValueError:
        logger.warning("url_parse_failed", url=raw_url[:200])
        raise InvalidURL() from None

    if parsed.scheme not in ("http", "https") or not host:
        raise InvalidURL()

    main_host = _is_main_host(host)

    if main_host:
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        if video_id:
            return video_id

    if host in SHORT_LINK_HOSTS:
        video_id = parsed.path.lstrip("/").split("/")[0]
        if video_id:
            return video_id

    if main_host:
        for prefix in PATH_PREFIXES:
            if parsed.path.startswith(prefix):
                video_id = parsed.path[len(prefix) :].split("/")[0]
                if video_id:
                    return video_id

    raise InvalidURL()
