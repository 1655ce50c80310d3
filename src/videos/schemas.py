"""Pydantic schemas for videos, transcripts, and Q&A history."""

from datetime import datetime

from pydantic import BaseModel, Field


class TranscriptSegment(BaseModel):
    """Single timed caption unit.

    Segments are stored in playback order; start and duration are seconds.
    """

    text: str
    start: float = Field(ge=0)  # Start time in seconds
    duration: float = Field(ge=0)  # Duration in seconds


class QAEntry(BaseModel):
    """One persisted question/answer exchange about a video."""

    question: str
    answer: str
    asked_at: datetime


class FetchedTranscript(BaseModel):
    """Result of a successful transcript fetch.

    The segment list is never empty; an empty transcript is reported as
    TranscriptUnavailable instead.
    """

    video_id: str
    segments: list[TranscriptSegment]
    title: str | None = None


class NewVideo(BaseModel):
    """Video aggregate before it has been assigned an id by the store."""

    user_id: str
    youtube_video_id: str
    title: str
    transcript: list[TranscriptSegment]
    questions: list[QAEntry] = Field(default_factory=list)


class Video(NewVideo):
    """Persisted video aggregate owned by exactly one user.

    The transcript and questions are embedded and have no identity or
    lifecycle outside their parent video.
    """

    id: str
    created_at: datetime | None = None


class VideoRef(BaseModel):
    """Small reference returned by ingestion (never includes the transcript)."""

    id: str
    title: str
    youtube_video_id: str
    created: bool = False


class VideoSummary(BaseModel):
    """Library list entry for a user's dashboard."""

    id: str
    title: str
    youtube_video_id: str
    created_at: datetime | None = None
