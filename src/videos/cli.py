"""Command-line interface for ingesting a video and asking about it."""

import argparse
import asyncio

from src.qa.ai_client import AIClient
from src.qa.service import QAService
from src.utils.errors import SmartPlayError
from src.utils.logging import get_logger

from .config import get_config
from .ingestion_service import VideoIngestionService

logger = get_logger(__name__)


async def main() -> None:
    """CLI entry point for video ingestion.

    Adds the video to the given user's library (reusing an existing record)
    and optionally asks one question about it.
    """
    parser = argparse.ArgumentParser(
        description="SmartPlay - Add a YouTube video and ask about its transcript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Add a video to a user's library
  python -m src.videos.cli https://youtu.be/dQw4w9WgXcQ --user-id <uuid>

  # Add (or reuse) a video and ask a question about it
  python -m src.videos.cli https://youtu.be/dQw4w9WgXcQ --user-id <uuid> \\
      --question "What is the song about?"
        """,
    )

    parser.add_argument("url", type=str, help="YouTube video URL")
    parser.add_argument(
        "--user-id",
        type=str,
        required=True,
        help="Id of the user who owns the library entry",
    )
    parser.add_argument(
        "--question",
        type=str,
        help="Question to ask about the video after ingestion",
    )

    args = parser.parse_args()
    config = get_config()

    logger.info("cli_started", user_id=args.user_id, has_question=bool(args.question))

    service = VideoIngestionService(config)

    try:
        ref = await service.ingest(args.user_id, args.url)
    except SmartPlayError as e:
        logger.warning("cli_ingest_failed", kind=e.kind)
        print(f"\n❌ {e.message}")
        return

    print("\n" + "=" * 60)
    print("SmartPlay")
    print("=" * 60)
    print(f"Video: {ref.title}")
    print(f"YouTube ID: {ref.youtube_video_id}")
    print(f"Library ID: {ref.id}")
    print("Status: " + ("added" if ref.created else "already in library"))

    if args.question:
        qa_service = QAService(service.storage_service, AIClient())
        try:
            answer = await qa_service.ask(args.user_id, ref.id, args.question)
        except SmartPlayError as e:
            logger.warning("cli_question_failed", kind=e.kind)
            print(f"\n❌ {e.message}")
            return

        print(f"\nQ: {args.question.strip()}")
        print(f"A: {answer}")

    print("=" * 60 + "\n")

    logger.info("cli_completed", video_id=ref.id, created=ref.created)


if __name__ == "__main__":
    asyncio.run(main())
