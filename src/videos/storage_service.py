"""Storage service for persisting video aggregates in Supabase."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from supabase import Client, create_client

from src.utils.errors import StoreError, VideoConflict
from src.utils.logging import get_logger

from .config import VideoConfig
from .schemas import NewVideo, QAEntry, Video, VideoSummary

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"
SUMMARY_COLUMNS = "id, title, youtube_video_id, created_at"


def _is_valid_id(video_id: str) -> bool:
    try:
        UUID(str(video_id))
    except ValueError:
        return False
    return True


def _row_to_video(row: dict[str, Any]) -> Video:
    return Video(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        youtube_video_id=row["youtube_video_id"],
        title=row["title"],
        transcript=row.get("transcript") or [],
        questions=row.get("questions") or [],
        created_at=row.get("created_at"),
    )


class StorageService:
    """Service for storing videos in Supabase.

    Each video row embeds its transcript segments and Q&A entries as JSONB
    arrays. Every lookup is scoped by the owning user id, so another user's
    video is indistinguishable from a missing one. Any database failure is
    raised as StoreError; each write is a single statement.
    """

    def __init__(self, config: VideoConfig, client: Client | None = None):
        """Initialize storage service with configuration.

        Args:
            config: Configuration object with Supabase credentials.
            client: Optional shared Supabase client.
        """
        self.config = config
        self.table = config.videos_table
        self.client: Client = client or create_client(
            config.supabase_url,
            config.supabase_key,
        )
        logger.info(
            "storage_service_initialized",
            supabase_url=config.supabase_url,
            table=self.table,
        )

    async def find_by_youtube_id(self, user_id: str, youtube_video_id: str) -> Video | None:
        """Look up a user's video by its external YouTube ID.

        Args:
            user_id: Owning user id.
            youtube_video_id: External YouTube video ID.

        Returns:
            The stored video, or None if the user has not ingested it.

        Raises:
            StoreError: If the query fails.
        """
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .eq("youtube_video_id", youtube_video_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.exception(
                "video_lookup_failed",
                user_id=user_id,
                youtube_video_id=youtube_video_id,
                error_type=type(e).__name__,
            )
            raise StoreError() from e

        if not response.data:
            logger.debug("video_not_found", user_id=user_id, youtube_video_id=youtube_video_id)
            return None

        return _row_to_video(response.data[0])

    async def get(self, video_id: str, user_id: str) -> Video | None:
        """Load a video by id, scoped to its owner.

        Malformed ids are treated as missing.

        Raises:
            StoreError: If the query fails.
        """
        if not _is_valid_id(video_id):
            logger.debug("video_id_malformed", video_id=video_id)
            return None

        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("id", video_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.exception(
                "video_get_failed",
                video_id=video_id,
                user_id=user_id,
                error_type=type(e).__name__,
            )
            raise StoreError() from e

        if not response.data:
            return None

        return _row_to_video(response.data[0])

    async def create(self, video: NewVideo) -> Video:
        """Insert a new video row.

        Args:
            video: Video aggregate to persist.

        Returns:
            The stored video with its assigned id.

        Raises:
            VideoConflict: If the (user_id, youtube_video_id) pair already exists.
            StoreError: If the insert fails for any other reason.
        """
        data = video.model_dump(mode="json")

        try:
            response = self.client.table(self.table).insert(data).execute()
        except Exception as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                logger.warning(
                    "video_insert_conflict",
                    user_id=video.user_id,
                    youtube_video_id=video.youtube_video_id,
                )
                raise VideoConflict() from e

            logger.exception(
                "video_save_failed",
                user_id=video.user_id,
                youtube_video_id=video.youtube_video_id,
                error_type=type(e).__name__,
            )
            raise StoreError() from e

        if not response.data:
            logger.error("video_save_returned_no_row", youtube_video_id=video.youtube_video_id)
            raise StoreError()

        stored = _row_to_video(response.data[0])
        logger.info(
            "video_saved",
            video_id=stored.id,
            user_id=stored.user_id,
            segments=len(stored.transcript),
        )
        return stored

    async def append_question(self, video: Video, entry: QAEntry) -> Video:
        """Persist a video's Q&A history with one new entry appended.

        Args:
            video: Video as loaded for this request.
            entry: Q&A entry to append.

        Returns:
            The video with the entry appended.

        Raises:
            StoreError: If the update fails or the row no longer exists.
        """
        questions = [*video.questions, entry]

        try:
            response = (
                self.client.table(self.table)
                .update(
                    {
                        "questions": [q.model_dump(mode="json") for q in questions],
                        "updated_at": datetime.now(UTC).isoformat(),
                    }
                )
                .eq("id", video.id)
                .eq("user_id", video.user_id)
                .execute()
            )
        except Exception as e:
            logger.exception(
                "question_save_failed",
                video_id=video.id,
                error_type=type(e).__name__,
            )
            raise StoreError() from e

        if not response.data:
            logger.error("question_save_matched_no_row", video_id=video.id)
            raise StoreError()

        logger.info("question_saved", video_id=video.id, total_questions=len(questions))
        return video.model_copy(update={"questions": questions})

    async def list_for_user(self, user_id: str) -> list[VideoSummary]:
        """List a user's videos, newest first.

        Raises:
            StoreError: If the query fails.
        """
        try:
            response = (
                self.client.table(self.table)
                .select(SUMMARY_COLUMNS)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.exception(
                "video_list_failed",
                user_id=user_id,
                error_type=type(e).__name__,
            )
            raise StoreError() from e

        return [
            VideoSummary(
                id=str(row["id"]),
                title=row["title"],
                youtube_video_id=row["youtube_video_id"],
                created_at=row.get("created_at"),
            )
            for row in response.data or []
        ]

    async def delete(self, video_id: str, user_id: str) -> bool:
        """Delete a user's video.

        Returns:
            True if a row was deleted, False if nothing matched.

        Raises:
            StoreError: If the delete fails.
        """
        if not _is_valid_id(video_id):
            return False

        try:
            response = (
                self.client.table(self.table)
                .delete()
                .eq("id", video_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.exception(
                "video_delete_failed",
                video_id=video_id,
                error_type=type(e).__name__,
            )
            raise StoreError() from e

        deleted = bool(response.data)
        logger.info("video_delete_completed", video_id=video_id, deleted=deleted)
        return deleted

    async def ping(self) -> bool:
        """Check that the videos table is reachable."""
        try:
            self.client.table(self.table).select("id").limit(1).execute()
        except Exception as e:
            logger.warning("store_ping_failed", error_type=type(e).__name__)
            return False
        return True
