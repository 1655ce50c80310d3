"""Prompt construction for transcript-grounded question answering."""

from collections.abc import Sequence

from src.videos.schemas import TranscriptSegment

NOT_AVAILABLE_ANSWER = "The answer is not available in the provided transcript."
TRUNCATION_MARKER = "..."

# ==============================================================================
# System Prompt
# ==============================================================================

QA_SYSTEM_PROMPT = f"""You are an AI assistant for the SmartPlay application.
Your task is to answer questions based *only* on the provided video transcript text.
Be concise and directly answer the question using information found in the transcript.
Do not add any information that is not present in the text.
Do not preface your answer with phrases like "Based on the transcript...".
If the answer cannot be found in the transcript, respond with "{NOT_AVAILABLE_ANSWER}\""""


def build_context(segments: Sequence[TranscriptSegment]) -> str:
    """Join segment texts in playback order with single spaces."""
    return " ".join(segment.text for segment in segments)


def truncate_context(context: str, max_chars: int) -> str:
    """Keep the first max_chars characters, marking the cut with an ellipsis.

    Examples:
        >>> truncate_context("abcdef", 4)
        'abcd...'
        >>> truncate_context("abc", 4)
        'abc'
    """
    if len(context) <= max_chars:
        return context
    return context[:max_chars] + TRUNCATION_MARKER


def build_user_prompt(context: str, question: str) -> str:
    """Combine the (already truncated) transcript and the question."""
    return f'Transcript:\n"""\n{context}\n"""\n\nQuestion: {question}'
