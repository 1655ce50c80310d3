"""Transcript service for fetching YouTube captions via the Supadata API."""

import asyncio

from pydantic import ValidationError
from supadata import Supadata

from src.utils.errors import (
    SmartPlayError,
    SourceUnavailable,
    TranscriptUnavailable,
    TransientFetchError,
)
from src.utils.logging import get_logger

from .config import VideoConfig
from .schemas import FetchedTranscript, TranscriptSegment

logger = get_logger(__name__)

# Supadata error codes (SupadataError.error)
TRANSCRIPT_UNAVAILABLE_CODES = frozenset({"transcript-unavailable"})
SOURCE_UNAVAILABLE_CODES = frozenset({"not-found", "video-not-found", "video-unavailable"})

# HTTP statuses, where the error carries one
TRANSCRIPT_UNAVAILABLE_STATUSES = frozenset({206})
SOURCE_UNAVAILABLE_STATUSES = frozenset({404})

# Matched against the provider message with the video ID removed
TRANSCRIPT_UNAVAILABLE_MARKERS = (
    "transcript unavailable",
    "transcripts disabled",
    "transcript is disabled",
    "no transcript",
)
SOURCE_UNAVAILABLE_MARKERS = (
    "video not found",
    "video unavailable",
    "private",
    "region",
)


def _status_code(error: Exception) -> int | None:
    """HTTP status carried by the error or its response, if any."""
    for source in (error, getattr(error, "response", None)):
        status = getattr(source, "status_code", None)
        if isinstance(status, int):
            return status
    return None


def _provider_message(error: Exception) -> str:
    """Human-readable text from the provider (SupadataError message and details)."""
    parts = [getattr(error, name, None) for name in ("message", "details")]
    text = " ".join(part for part in parts if isinstance(part, str))
    return text or str(error)


class TranscriptService:
    """Service for fetching video transcripts via Supadata API.

    Converts caption timing from milliseconds to seconds and classifies
    provider failures into the error kinds callers react to. Nothing is
    retried here; a failed fetch fails the request.
    """

    def __init__(self, config: VideoConfig, client: Supadata | None = None):
        """Initialize transcript service with configuration.

        Args:
            config: Configuration object with Supadata API key and timeout.
            client: Optional pre-built Supadata client.
        """
        self.config = config
        self.client = client or Supadata(api_key=config.supadata_api_key)
        logger.info(
            "transcript_service_initialized",
            api_key_present=bool(config.supadata_api_key),
            timeout=config.fetch_timeout_seconds,
        )

    async def fetch(self, video_id: str) -> FetchedTranscript:
        """Fetch the timed transcript and a best-effort title for a video.

        Args:
            video_id: YouTube video ID.

        Returns:
            FetchedTranscript with at least one segment, in playback order.

        Raises:
            TranscriptUnavailable: Captions are disabled or missing, or empty.
            SourceUnavailable: Video is deleted, private, or region-blocked.
            TransientFetchError: Network, timeout, or response parse failure.
        """
        logger.info("fetching_transcript", video_id=video_id)

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.youtube.transcript,
                    video_id=video_id,
                    text=False,  # Get segments with timestamps instead of plain text
                ),
                timeout=self.config.fetch_timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "transcript_fetch_timeout",
                video_id=video_id,
                timeout=self.config.fetch_timeout_seconds,
            )
            raise TransientFetchError() from None
        except Exception as e:
            raise self._classify_error(video_id, e) from e

        segments = self._to_segments(video_id, response)

        if not segments:
            logger.warning("transcript_empty", video_id=video_id)
            raise TranscriptUnavailable()

        title = await self._fetch_title(video_id)

        logger.info(
            "transcript_fetched",
            video_id=video_id,
            segments=len(segments),
            lang=getattr(response, "lang", None),
            title_present=title is not None,
        )
        return FetchedTranscript(video_id=video_id, segments=segments, title=title)

    def _to_segments(self, video_id: str, response: object) -> list[TranscriptSegment]:
        """Convert provider chunks (milliseconds) into segments (seconds)."""
        content = getattr(response, "content", None)

        if not isinstance(content, list):
            # Plain-text or async job responses carry no timed segments
            logger.error(
                "transcript_unexpected_response",
                video_id=video_id,
                response_type=type(response).__name__,
            )
            raise TransientFetchError()

        try:
            return [
                TranscriptSegment(
                    text=seg.text,
                    start=float(seg.offset) / 1000,
                    duration=float(seg.duration) / 1000,
                )
                for seg in content
            ]
        except (AttributeError, TypeError, ValueError, ValidationError) as e:
            logger.exception(
                "transcript_parse_failed",
                video_id=video_id,
                error_type=type(e).__name__,
            )
            raise TransientFetchError() from e

    async def _fetch_title(self, video_id: str) -> str | None:
        """Fetch the video title; failures only cost the title."""
        try:
            video = await asyncio.wait_for(
                asyncio.to_thread(self.client.youtube.video, id=video_id),
                timeout=self.config.fetch_timeout_seconds,
            )
        except Exception as e:
            logger.warning(
                "video_title_fetch_failed",
                video_id=video_id,
                error_type=type(e).__name__,
            )
            return None

        title = getattr(video, "title", None)
        return title.strip() if isinstance(title, str) and title.strip() else None

    def _classify_error(self, video_id: str, error: Exception) -> SmartPlayError:
        """Map a provider exception to the error kind callers react to.

        Structured fields decide first: the Supadata error code, then the HTTP
        status. Free text is only consulted with the video ID removed, so
        digits or words inside an ID never pick the error kind.
        """
        error_code = str(getattr(error, "error", "") or "").lower()
        status_code = _status_code(error)
        message = _provider_message(error).replace(video_id, " ").lower()

        if (
            error_code in TRANSCRIPT_UNAVAILABLE_CODES
            or status_code in TRANSCRIPT_UNAVAILABLE_STATUSES
            or any(marker in message for marker in TRANSCRIPT_UNAVAILABLE_MARKERS)
        ):
            logger.warning(
                "transcript_unavailable",
                video_id=video_id,
                error_code=error_code or None,
                status_code=status_code,
            )
            return TranscriptUnavailable()

        if (
            error_code in SOURCE_UNAVAILABLE_CODES
            or status_code in SOURCE_UNAVAILABLE_STATUSES
            or any(marker in message for marker in SOURCE_UNAVAILABLE_MARKERS)
        ):
            logger.warning(
                "video_unavailable",
                video_id=video_id,
                error_code=error_code or None,
                status_code=status_code,
            )
            return SourceUnavailable()

        logger.exception(
            "transcript_fetch_error",
            video_id=video_id,
            error_type=type(error).__name__,
        )
        return TransientFetchError()
