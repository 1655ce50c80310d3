"""Shared fixtures for service-level tests."""

import uuid
from datetime import UTC, datetime

import pytest

from src.utils.errors import StoreError, VideoConflict
from src.videos.schemas import NewVideo, QAEntry, Video, VideoSummary


class InMemoryVideoStore:
    """Dict-backed stand-in for StorageService with the same async interface."""

    def __init__(self) -> None:
        self.videos: dict[str, Video] = {}
        self.fail_writes = False

    async def find_by_youtube_id(self, user_id: str, youtube_video_id: str) -> Video | None:
        for video in self.videos.values():
            if video.user_id == user_id and video.youtube_video_id == youtube_video_id:
                return video
        return None

    async def get(self, video_id: str, user_id: str) -> Video | None:
        video = self.videos.get(video_id)
        if video is None or video.user_id != user_id:
            return None
        return video

    async def create(self, video: NewVideo) -> Video:
        if self.fail_writes:
            raise StoreError()
        if await self.find_by_youtube_id(video.user_id, video.youtube_video_id):
            raise VideoConflict()
        stored = Video(
            id=str(uuid.uuid4()),
            created_at=datetime.now(UTC),
            **video.model_dump(),
        )
        self.videos[stored.id] = stored
        return stored

    async def append_question(self, video: Video, entry: QAEntry) -> Video:
        if self.fail_writes:
            raise StoreError()
        updated = video.model_copy(update={"questions": [*video.questions, entry]})
        self.videos[video.id] = updated
        return updated

    async def list_for_user(self, user_id: str) -> list[VideoSummary]:
        owned = [v for v in self.videos.values() if v.user_id == user_id]
        owned.sort(key=lambda v: v.created_at, reverse=True)
        return [
            VideoSummary(
                id=v.id,
                title=v.title,
                youtube_video_id=v.youtube_video_id,
                created_at=v.created_at,
            )
            for v in owned
        ]

    async def delete(self, video_id: str, user_id: str) -> bool:
        if await self.get(video_id, user_id) is None:
            return False
        del self.videos[video_id]
        return True


@pytest.fixture
def video_store() -> InMemoryVideoStore:
    """Create an empty in-memory video store."""
    return InMemoryVideoStore()
