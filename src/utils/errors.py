"""Error taxonomy shared by the ingestion, QA, and auth services.

Every failure that reaches a caller is a SmartPlayError subclass carrying a
stable kind, the HTTP status the API layer renders it with, and a short
human-readable message. Internal exception detail is logged where the error
is raised and never placed in the message.
"""


class SmartPlayError(Exception):
    """Base class for all errors surfaced to API callers.

    Attributes:
        kind: Stable machine-readable error kind.
        status_code: HTTP status the API layer responds with.
        message: Short human-readable message safe to return to the caller.
    """

    kind = "Unhandled"
    status_code = 500
    default_message = "Something went wrong while processing your request."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidURL(SmartPlayError):
    kind = "InvalidURL"
    status_code = 400
    default_message = "Invalid or unsupported YouTube URL format."


class InvalidInput(SmartPlayError):
    kind = "InvalidInput"
    status_code = 400
    default_message = "The request is missing a required value."


class NotFound(SmartPlayError):
    # Covers both a missing video and one owned by another user.
    kind = "NotFound"
    status_code = 404
    default_message = "Video not found or you do not have permission to access it."


class NoTranscript(SmartPlayError):
    kind = "NoTranscript"
    status_code = 400
    default_message = "Cannot ask questions: the transcript for this video is empty."


class TranscriptUnavailable(SmartPlayError):
    kind = "TranscriptUnavailable"
    status_code = 400
    default_message = (
        "This video doesn't have available transcripts. "
        "Try another video with captions enabled."
    )


class SourceUnavailable(SmartPlayError):
    kind = "SourceUnavailable"
    status_code = 400
    default_message = "The video is unavailable. It might be private, deleted, or region-blocked."


class TransientFetchError(SmartPlayError):
    kind = "TransientFetchError"
    status_code = 503
    default_message = "Could not fetch the transcript right now. Please try again later."


class ServiceUnavailable(SmartPlayError):
    kind = "ServiceUnavailable"
    status_code = 503
    default_message = "The AI service failed to provide an answer. Please try again later."


class StoreError(SmartPlayError):
    kind = "StoreError"
    status_code = 500
    default_message = "A database error occurred while processing your request."


class VideoConflict(SmartPlayError):
    kind = "VideoConflict"
    status_code = 409
    default_message = "Conflict: this video might have been added simultaneously."


class EmailInUse(SmartPlayError):
    kind = "EmailInUse"
    status_code = 400
    default_message = "Email already in use."


class InvalidCredentials(SmartPlayError):
    kind = "InvalidCredentials"
    status_code = 401
    default_message = "Invalid credentials."
