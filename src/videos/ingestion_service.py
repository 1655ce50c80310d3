"""Video ingestion orchestrator: URL resolution, dedup, fetch, and persistence."""

from src.utils.errors import NotFound
from src.utils.logging import get_logger

from .config import VideoConfig, get_config
from .schemas import NewVideo, Video, VideoRef, VideoSummary
from .storage_service import StorageService
from .transcript_service import TranscriptService
from .url_resolver import resolve_video_id

logger = get_logger(__name__)


def placeholder_title(youtube_video_id: str) -> str:
    return f"Video {youtube_video_id}"


class VideoIngestionService:
    """Orchestrates adding a YouTube video to a user's library.

    Ingestion is idempotent per user: a video the user already has is
    returned as-is, without fetching its transcript again. The
    check-then-insert is not atomic; two concurrent requests for the same
    video can both miss the lookup, in which case the store's unique
    constraint rejects the second insert with VideoConflict.
    """

    def __init__(
        self,
        config: VideoConfig | None = None,
        storage_service: StorageService | None = None,
        transcript_service: TranscriptService | None = None,
    ):
        """Initialize the ingestion service.

        Args:
            config: Configuration object. If None, loads from environment.
            storage_service: Video store. Built from config if None.
            transcript_service: Transcript fetcher. Built from config if None.
        """
        self.config = config or get_config()
        self.storage_service = storage_service or StorageService(self.config)
        self.transcript_service = transcript_service or TranscriptService(self.config)

    async def ingest(self, user_id: str, raw_url: str) -> VideoRef:
        """Add the video behind a URL to the user's library.

        This method:
        1. Resolves the URL to a YouTube video ID
        2. Returns the existing record if the user already has this video
        3. Fetches the transcript on a miss
        4. Persists a new video with an empty Q&A history

        Args:
            user_id: Authenticated user id.
            raw_url: URL exactly as submitted by the user.

        Returns:
            VideoRef for the stored video; `created` tells whether it is new.

        Raises:
            InvalidURL: If the URL is not a supported YouTube URL.
            TranscriptUnavailable, SourceUnavailable, TransientFetchError:
                Propagated unchanged from the transcript fetch.
            VideoConflict: If a concurrent request inserted the same video.
            StoreError: If persistence fails.
        """
        youtube_video_id = resolve_video_id(raw_url)
        logger.info("ingest_started", user_id=user_id, youtube_video_id=youtube_video_id)

        existing = await self.storage_service.find_by_youtube_id(user_id, youtube_video_id)
        if existing is not None:
            logger.info(
                "video_already_ingested",
                user_id=user_id,
                video_id=existing.id,
                youtube_video_id=youtube_video_id,
            )
            return VideoRef(
                id=existing.id,
                title=existing.title,
                youtube_video_id=existing.youtube_video_id,
                created=False,
            )

        fetched = await self.transcript_service.fetch(youtube_video_id)

        stored = await self.storage_service.create(
            NewVideo(
                user_id=user_id,
                youtube_video_id=youtube_video_id,
                title=fetched.title or placeholder_title(youtube_video_id),
                transcript=fetched.segments,
                questions=[],
            )
        )

        logger.info(
            "video_ingested",
            user_id=user_id,
            video_id=stored.id,
            youtube_video_id=youtube_video_id,
            segments=len(stored.transcript),
        )
        return VideoRef(
            id=stored.id,
            title=stored.title,
            youtube_video_id=stored.youtube_video_id,
            created=True,
        )

    async def list_videos(self, user_id: str) -> list[VideoSummary]:
        """List the user's library, newest first."""
        videos = await self.storage_service.list_for_user(user_id)
        logger.info("videos_listed", user_id=user_id, count=len(videos))
        return videos

    async def get_video(self, user_id: str, video_id: str) -> Video:
        """Return the full video, including transcript and Q&A history.

        Raises:
            NotFound: If the video does not exist or belongs to another user.
        """
        video = await self.storage_service.get(video_id, user_id)
        if video is None:
            raise NotFound()
        return video

    async def delete_video(self, user_id: str, video_id: str) -> None:
        """Delete one of the user's videos along with its transcript and Q&A.

        Raises:
            NotFound: If nothing owned by the user matched the id.
        """
        deleted = await self.storage_service.delete(video_id, user_id)
        if not deleted:
            raise NotFound()
        logger.info("video_deleted", user_id=user_id, video_id=video_id)
