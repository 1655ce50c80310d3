"""Unit tests for the Supadata-backed transcript service."""

import time
from unittest.mock import MagicMock, patch

import pytest

from src.utils.errors import SourceUnavailable, TranscriptUnavailable, TransientFetchError
from src.videos.config import VideoConfig
from src.videos.transcript_service import TranscriptService


class FakeSupadataError(Exception):
    """Stand-in for provider errors carrying Supadata's structured fields."""

    def __init__(
        self,
        error: str,
        message: str,
        details: str = "",
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.error = error
        self.message = message
        self.details = details
        self.status_code = status_code


def make_chunk(text: str, offset: int, duration: int) -> MagicMock:
    chunk = MagicMock()
    chunk.text = text
    chunk.offset = offset
    chunk.duration = duration
    return chunk


@pytest.mark.unit
class TestTranscriptService:
    """Test suite for TranscriptService class."""

    @pytest.fixture
    def config(self) -> VideoConfig:
        """Create test configuration."""
        return VideoConfig(supadata_api_key="test_key", fetch_timeout_seconds=2)

    @pytest.fixture
    def mock_client(self) -> MagicMock:
        """Create mock Supadata client with a three-segment transcript."""
        client = MagicMock()
        response = MagicMock()
        response.lang = "en"
        response.content = [
            make_chunk("Hello and welcome.", 0, 1500),
            make_chunk("Today we talk about habits.", 1500, 2250),
            make_chunk("Let's begin.", 3750, 1000),
        ]
        client.youtube.transcript.return_value = response
        client.youtube.video.return_value = MagicMock(title="  Building Habits  ")
        return client

    @pytest.fixture
    def service(self, config: VideoConfig, mock_client: MagicMock) -> TranscriptService:
        """Create transcript service with the mocked client."""
        return TranscriptService(config, client=mock_client)

    def test_service_initialization_builds_client(self, config: VideoConfig) -> None:
        """Test that a Supadata client is built from the API key."""
        with patch("src.videos.transcript_service.Supadata") as mock_supadata:
            service = TranscriptService(config)

            assert service.config == config
            assert service.client == mock_supadata.return_value
            mock_supadata.assert_called_once_with(api_key="test_key")

    @pytest.mark.asyncio
    async def test_fetch_converts_milliseconds_to_seconds(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that offsets and durations are divided by 1000, order preserved."""
        result = await service.fetch("abc123XYZ9")

        assert result.video_id == "abc123XYZ9"
        assert [s.text for s in result.segments] == [
            "Hello and welcome.",
            "Today we talk about habits.",
            "Let's begin.",
        ]
        assert [s.start for s in result.segments] == [0.0, 1.5, 3.75]
        assert [s.duration for s in result.segments] == [1.5, 2.25, 1.0]
        assert all(isinstance(s.start, float) for s in result.segments)
        mock_client.youtube.transcript.assert_called_once_with(
            video_id="abc123XYZ9", text=False
        )

    @pytest.mark.asyncio
    async def test_fetch_returns_stripped_title(self, service: TranscriptService) -> None:
        """Test that the video title is fetched and trimmed."""
        result = await service.fetch("abc123XYZ9")
        assert result.title == "Building Habits"

    @pytest.mark.asyncio
    async def test_title_failure_does_not_fail_fetch(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that a failing title lookup only drops the title."""
        mock_client.youtube.video.side_effect = Exception("metadata error")

        result = await service.fetch("abc123XYZ9")

        assert result.title is None
        assert len(result.segments) == 3

    @pytest.mark.asyncio
    async def test_blank_title_becomes_none(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that an empty title is reported as missing."""
        mock_client.youtube.video.return_value = MagicMock(title="   ")

        result = await service.fetch("abc123XYZ9")

        assert result.title is None

    @pytest.mark.asyncio
    async def test_empty_transcript_is_unavailable(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that an empty segment list is a failure, not a success."""
        mock_client.youtube.transcript.return_value.content = []

        with pytest.raises(TranscriptUnavailable):
            await service.fetch("abc123XYZ9")

        mock_client.youtube.video.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            FakeSupadataError("transcript-unavailable", "No transcript for this video"),
            Exception("Transcript is disabled on this video"),
            FakeSupadataError("", "Partial content", status_code=206),
        ],
    )
    async def test_transcript_unavailable_errors(
        self, service: TranscriptService, mock_client: MagicMock, error: Exception
    ) -> None:
        """Test that caption-missing errors map to TranscriptUnavailable."""
        mock_client.youtube.transcript.side_effect = error

        with pytest.raises(TranscriptUnavailable):
            await service.fetch("abc123XYZ9")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            FakeSupadataError("video-not-found", "The requested video was not found"),
            Exception("Video unavailable: this video is private"),
            FakeSupadataError("", "Request failed", status_code=404),
        ],
    )
    async def test_source_unavailable_errors(
        self, service: TranscriptService, mock_client: MagicMock, error: Exception
    ) -> None:
        """Test that deleted or private videos map to SourceUnavailable."""
        mock_client.youtube.transcript.side_effect = error

        with pytest.raises(SourceUnavailable):
            await service.fetch("abc123XYZ9")

    @pytest.mark.asyncio
    async def test_other_errors_are_transient(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that network failures map to TransientFetchError."""
        mock_client.youtube.transcript.side_effect = ConnectionError("connection reset")

        with pytest.raises(TransientFetchError):
            await service.fetch("abc123XYZ9")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "video_id", ["ab2061234cd", "ab-206-cdEFG", "private206x", "region-Ab_1"]
    )
    async def test_video_id_containing_206_is_not_misclassified(
        self, service: TranscriptService, mock_client: MagicMock, video_id: str
    ) -> None:
        """Test that digits or words inside a video ID never pick the error kind."""
        mock_client.youtube.transcript.side_effect = ConnectionError(
            f"timeout for video {video_id}"
        )

        with pytest.raises(TransientFetchError):
            await service.fetch(video_id)

    @pytest.mark.asyncio
    async def test_unrelated_provider_error_is_transient(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that an unrelated provider code stays transient despite the ID."""
        mock_client.youtube.transcript.side_effect = FakeSupadataError(
            "internal-error",
            "Failed to fetch ab-206-cdEFG",
            details="upstream returned 502",
            status_code=500,
        )

        with pytest.raises(TransientFetchError):
            await service.fetch("ab-206-cdEFG")

    @pytest.mark.asyncio
    async def test_fetch_timeout_is_transient(self, mock_client: MagicMock) -> None:
        """Test that a slow provider call fails with TransientFetchError."""
        config = VideoConfig(supadata_api_key="test_key", fetch_timeout_seconds=0.05)
        mock_client.youtube.transcript.side_effect = lambda **_: time.sleep(0.3)
        service = TranscriptService(config, client=mock_client)

        with pytest.raises(TransientFetchError):
            await service.fetch("abc123XYZ9")

    @pytest.mark.asyncio
    async def test_plain_text_response_is_transient(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that a response without timed segments is rejected."""
        mock_client.youtube.transcript.return_value.content = "just plain text"

        with pytest.raises(TransientFetchError):
            await service.fetch("abc123XYZ9")

    @pytest.mark.asyncio
    async def test_malformed_segment_is_transient(
        self, service: TranscriptService, mock_client: MagicMock
    ) -> None:
        """Test that segments with unusable timing fail as a parse error."""
        mock_client.youtube.transcript.return_value.content = [
            make_chunk("ok", 0, 1000),
            make_chunk("bad", "not-a-number", 1000),  # type: ignore[arg-type]
        ]

        with pytest.raises(TransientFetchError):
            await service.fetch("abc123XYZ9")
