"""Transcript-grounded question answering over a user's stored videos."""

from datetime import UTC, datetime

from src.utils.errors import InvalidInput, NoTranscript, NotFound, ServiceUnavailable
from src.utils.logging import get_logger
from src.videos.schemas import QAEntry
from src.videos.storage_service import StorageService

from .ai_client import AIClient
from .config import get_max_context_chars, get_max_output_tokens, get_temperature
from .prompts import QA_SYSTEM_PROMPT, build_context, build_user_prompt, truncate_context

logger = get_logger(__name__)

# Sentences an upstream AI wrapper returns in place of an answer when the call
# failed. The "not available in the provided transcript" reply is a real answer.
FAILURE_MARKERS = (
    "an error occurred while communicating with the ai service.",
    "ai service is currently busy. please try again later.",
    "ai service authentication failed. check api key.",
    "ai service (gemini) is not configured.",
    "missing transcript or question.",
    "ai did not return a valid answer.",
)


def looks_like_failure(answer: str) -> bool:
    """Return True if an AI answer is empty or is a known failure message."""
    if not answer or not answer.strip():
        return True
    lowered = answer.lower()
    return any(marker in lowered for marker in FAILURE_MARKERS)


class QAService:
    """Answers questions about a stored video using its transcript.

    A Q&A entry is persisted only when the AI call succeeds; failed attempts
    leave the video's history untouched.
    """

    def __init__(
        self,
        storage_service: StorageService,
        ai_client: AIClient,
        max_context_chars: int | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ):
        self.storage_service = storage_service
        self.ai_client = ai_client
        self.max_context_chars = (
            max_context_chars if max_context_chars is not None else get_max_context_chars()
        )
        self.temperature = temperature if temperature is not None else get_temperature()
        self.max_output_tokens = (
            max_output_tokens if max_output_tokens is not None else get_max_output_tokens()
        )

    async def ask(self, user_id: str, video_id: str, question: str) -> str:
        """Answer a question about one of the user's videos.

        Args:
            user_id: Authenticated user id.
            video_id: Store id of the video (not the YouTube ID).
            question: Natural-language question.

        Returns:
            The answer text, after it has been appended to the video's history.

        Raises:
            InvalidInput: If the question is empty or whitespace-only.
            NotFound: If the video does not exist or belongs to another user.
            NoTranscript: If the stored transcript is empty.
            ServiceUnavailable: If the AI call failed; nothing is persisted.
            StoreError: If loading or saving the video fails.
        """
        if not isinstance(question, str) or not question.strip():
            raise InvalidInput("Question is required and must be a non-empty string.")

        question = question.strip()

        video = await self.storage_service.get(video_id, user_id)
        if video is None:
            logger.info("qa_video_not_found", user_id=user_id, video_id=video_id)
            raise NotFound()

        if not video.transcript:
            raise NoTranscript()

        context = build_context(video.transcript)
        truncated = truncate_context(context, self.max_context_chars)

        logger.info(
            "qa_request_started",
            user_id=user_id,
            video_id=video_id,
            question_length=len(question),
            context_length=len(context),
            truncated=len(truncated) != len(context),
        )

        answer = await self.ai_client.complete(
            QA_SYSTEM_PROMPT,
            build_user_prompt(truncated, question),
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

        if looks_like_failure(answer):
            logger.error(
                "qa_answer_rejected",
                video_id=video_id,
                answer_preview=answer[:200],
            )
            raise ServiceUnavailable()

        entry = QAEntry(question=question, answer=answer, asked_at=datetime.now(UTC))
        await self.storage_service.append_question(video, entry)

        logger.info("qa_request_completed", video_id=video_id, answer_length=len(answer))
        return answer
