"""FastAPI application for the SmartPlay API.

Provides authentication, the per-user video library, and transcript-grounded
chat endpoints. Service errors are rendered as `{"message": ...}` with the
status code their kind maps to.
"""

import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from httpx import AsyncClient
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.auth.config import get_auth_config
from src.auth.service import AuthService, AuthUser
from src.qa.ai_client import AIClient
from src.qa.service import QAService
from src.utils.clients import get_service_clients
from src.utils.errors import InvalidCredentials, InvalidInput, SmartPlayError
from src.utils.logging import get_logger
from src.videos.config import get_config
from src.videos.ingestion_service import VideoIngestionService
from src.videos.storage_service import StorageService
from src.videos.transcript_service import TranscriptService

logger = get_logger(__name__)

# Check if we're in production
is_production = os.getenv("ENVIRONMENT") == "production"

if not is_production:
    # Development: prioritize .env file
    project_root = Path(__file__).resolve().parent.parent.parent
    dotenv_path = project_root / ".env"
    load_dotenv(dotenv_path, override=True)
else:
    # Production: use cloud platform env vars only
    load_dotenv()

# Global clients and services initialized in lifespan
supabase = None
http_client = None
storage_service = None
ingestion_service = None
qa_service = None
auth_service = None


# ==============================================================================
# Lifespan Management
# ==============================================================================


async def lifespan(app: FastAPI):  # type: ignore[misc]
    """Lifecycle manager for the FastAPI application.

    Handles initialization and cleanup of resources.
    """
    global supabase, http_client, storage_service, ingestion_service, qa_service, auth_service

    logger.info("application_startup_started")

    try:
        config = get_config()
        supabase, supadata = get_service_clients(config)
        http_client = AsyncClient()

        storage_service = StorageService(config, client=supabase)
        ingestion_service = VideoIngestionService(
            config,
            storage_service=storage_service,
            transcript_service=TranscriptService(config, client=supadata),
        )
        qa_service = QAService(storage_service, AIClient())
        auth_service = AuthService(http_client, get_auth_config())

        logger.info(
            "application_startup_completed",
            clients=["supabase", "supadata", "http", "ai"],
        )

    except Exception:
        logger.exception("application_startup_failed")
        raise

    yield  # Application runs here

    logger.info("application_shutdown_started")

    if http_client:
        await http_client.aclose()

    logger.info("application_shutdown_completed")


# ==============================================================================
# FastAPI Application Setup
# ==============================================================================

app = FastAPI(
    title="SmartPlay API",
    description="Ask questions about YouTube videos, answered from their transcripts",
    version="1.0.0",
    lifespan=lifespan,
)

security = HTTPBearer(auto_error=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:5173").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["*"],
)


@app.exception_handler(SmartPlayError)
async def smartplay_error_handler(request: Request, exc: SmartPlayError) -> JSONResponse:
    """Render service errors with their mapped status and message."""
    logger.info(
        "request_failed",
        path=request.url.path,
        kind=exc.kind,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown routes, wrong methods) as `{"message"}`."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their detail from the caller."""
    logger.exception("request_unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "Server error while processing the request"},
    )


# ==============================================================================
# Dependencies
# ==============================================================================


def get_auth_service() -> AuthService:
    if auth_service is None:
        logger.error("dependency_unavailable", service="auth")
        raise SmartPlayError("Auth service not initialized")
    return auth_service


def get_ingestion_service() -> VideoIngestionService:
    if ingestion_service is None:
        logger.error("dependency_unavailable", service="ingestion")
        raise SmartPlayError("Video service not initialized")
    return ingestion_service


def get_qa_service() -> QAService:
    if qa_service is None:
        logger.error("dependency_unavailable", service="qa")
        raise SmartPlayError("Chat service not initialized")
    return qa_service


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    auth: AuthService = Depends(get_auth_service),
) -> AuthUser:
    """Resolve the bearer token on the request to the authenticated user.

    Raises:
        InvalidCredentials: If the token is missing, invalid, or expired.
    """
    if credentials is None:
        raise InvalidCredentials("Not authorized, no token.")
    return await auth.resolve_user(credentials.credentials)


# ==============================================================================
# Request Models
# ==============================================================================


class AuthRequest(BaseModel):
    """Request model for registration and login."""

    email: str = ""
    password: str = ""


class VideoCreateRequest(BaseModel):
    """Request model for adding a video to the library."""

    youtube_url: str = ""


class QuestionRequest(BaseModel):
    """Request model for asking a question about a video."""

    question: str = ""


# ==============================================================================
# API Endpoints
# ==============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint.

    Returns:
        Health status and timestamp.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "services": {
            "supabase": supabase is not None,
            "http_client": http_client is not None,
            "ingestion": ingestion_service is not None,
            "qa": qa_service is not None,
        },
    }


@app.get("/api/status")
async def api_status():
    """Report whether the server is up and the video store is reachable."""
    store_ok = storage_service is not None and await storage_service.ping()
    return {
        "status": "Server is running",
        "store": "Connected" if store_ok else "Disconnected",
    }


@app.post("/api/auth/register", status_code=201)
async def register(
    request: AuthRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    user = await auth.register(request.email, request.password)
    return {"message": "User registered successfully", "user": user.model_dump()}


@app.post("/api/auth/login")
async def login(
    request: AuthRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    session = await auth.login(request.email, request.password)
    return {
        "message": "Login successful",
        "token": session.access_token,
        "user": session.user.model_dump(),
    }


@app.post("/api/videos")
async def process_video(
    request: VideoCreateRequest,
    user: AuthUser = Depends(get_current_user),
    service: VideoIngestionService = Depends(get_ingestion_service),
) -> JSONResponse:
    """Add a YouTube video to the user's library.

    Returns 201 when the video is new and 200 when the user already has it.
    """
    if not request.youtube_url.strip():
        raise InvalidInput("YouTube URL is required.")

    ref = await service.ingest(user.id, request.youtube_url)

    if ref.created:
        message = "Video processed and added successfully!"
    else:
        message = "Video already exists in your list"

    return JSONResponse(
        status_code=201 if ref.created else 200,
        content={"message": message, "video": ref.model_dump(exclude={"created"})},
    )


@app.get("/api/videos/myvideos")
async def get_user_videos(
    user: AuthUser = Depends(get_current_user),
    service: VideoIngestionService = Depends(get_ingestion_service),
) -> list[dict[str, Any]]:
    videos = await service.list_videos(user.id)
    return [video.model_dump(mode="json") for video in videos]


@app.get("/api/videos/{video_id}")
async def get_video_details(
    video_id: str,
    user: AuthUser = Depends(get_current_user),
    service: VideoIngestionService = Depends(get_ingestion_service),
) -> dict[str, Any]:
    video = await service.get_video(user.id, video_id)
    return video.model_dump(mode="json")


@app.delete("/api/videos/{video_id}")
async def delete_video(
    video_id: str,
    user: AuthUser = Depends(get_current_user),
    service: VideoIngestionService = Depends(get_ingestion_service),
) -> dict[str, str]:
    await service.delete_video(user.id, video_id)
    return {"message": "Video deleted successfully"}


@app.post("/api/chat/{video_id}")
async def ask_question(
    video_id: str,
    request: QuestionRequest,
    user: AuthUser = Depends(get_current_user),
    service: QAService = Depends(get_qa_service),
) -> dict[str, str]:
    answer = await service.ask(user.id, video_id, request.question)
    return {"answer": answer}
