"""Registration, login, and bearer-token resolution against Supabase Auth.

Every request carries its own credential headers; the shared HTTP client
holds no per-user state.
"""

from typing import Any

import httpx
from pydantic import BaseModel

from src.utils.errors import (
    EmailInUse,
    InvalidCredentials,
    InvalidInput,
    ServiceUnavailable,
)
from src.utils.logging import get_logger

from .config import AuthConfig

logger = get_logger(__name__)

EMAIL_IN_USE_CODES = frozenset({"user_already_exists", "email_exists"})


class AuthUser(BaseModel):
    """Authenticated user identity."""

    id: str
    email: str


class AuthSession(BaseModel):
    """Result of a successful login."""

    access_token: str
    user: AuthUser


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _to_user(data: dict[str, Any]) -> AuthUser:
    return AuthUser(id=str(data["id"]), email=data.get("email") or "")


class AuthService:
    """Thin client for the Supabase Auth (GoTrue) REST API."""

    def __init__(self, http_client: httpx.AsyncClient, config: AuthConfig):
        """Initialize auth service.

        Args:
            http_client: Shared async HTTP client.
            config: Supabase URL, API key, and request timeout.
        """
        self.http_client = http_client
        self.config = config
        self.base_url = f"{config.supabase_url.rstrip('/')}/auth/v1"

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.config.supabase_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> httpx.Response:
        try:
            return await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                params=params,
                headers=self._headers(access_token),
                timeout=self.config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.exception("auth_request_failed", path=path, error_type=type(e).__name__)
            raise ServiceUnavailable("Authentication service is unavailable.") from e

    @staticmethod
    def _require(email: str, password: str) -> str:
        if not email or not email.strip() or not password:
            raise InvalidInput("Email and password are required.")
        return normalize_email(email)

    async def register(self, email: str, password: str) -> AuthUser:
        """Create a new user account.

        Raises:
            InvalidInput: If email or password is missing or the password is rejected.
            EmailInUse: If the email is already registered.
            ServiceUnavailable: If Supabase Auth cannot be reached.
        """
        email = self._require(email, password)
        logger.info("registration_started")

        response = await self._send(
            "POST", "/signup", json={"email": email, "password": password}
        )

        if response.status_code >= 500:
            logger.error("registration_failed", status_code=response.status_code)
            raise ServiceUnavailable("Authentication service is unavailable.")

        if response.status_code != 200:
            body = _error_body(response)
            code = body.get("error_code") or body.get("code")
            message = str(body.get("msg") or body.get("message") or "").lower()
            logger.warning(
                "registration_rejected",
                status_code=response.status_code,
                error_code=code,
            )
            if code in EMAIL_IN_USE_CODES or "already registered" in message:
                raise EmailInUse()
            if code == "weak_password":
                raise InvalidInput("Password does not meet the strength requirements.")
            raise InvalidInput("Registration was rejected. Check your email and password.")

        data = response.json()
        user_data = data.get("user") or data

        # With email confirmation on, an existing address comes back as a
        # user without identities instead of an error
        if user_data.get("identities") == []:
            logger.warning("registration_rejected", error_code="user_already_exists")
            raise EmailInUse()

        user = _to_user(user_data)
        logger.info("registration_completed", user_id=user.id)
        return user

    async def login(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a bearer token.

        Raises:
            InvalidInput: If email or password is missing.
            InvalidCredentials: If the credentials do not match an account.
            ServiceUnavailable: If Supabase Auth cannot be reached.
        """
        email = self._require(email, password)

        response = await self._send(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

        if response.status_code >= 500:
            logger.error("login_failed", status_code=response.status_code)
            raise ServiceUnavailable("Authentication service is unavailable.")

        if response.status_code != 200:
            logger.warning("login_rejected", status_code=response.status_code)
            raise InvalidCredentials()

        data = response.json()
        session = AuthSession(access_token=data["access_token"], user=_to_user(data["user"]))
        logger.info("login_completed", user_id=session.user.id)
        return session

    async def resolve_user(self, access_token: str) -> AuthUser:
        """Resolve a bearer token to the user it was issued for.

        Raises:
            InvalidCredentials: If the token is invalid or expired.
            ServiceUnavailable: If Supabase Auth cannot be reached.
        """
        response = await self._send("GET", "/user", access_token=access_token)

        if response.status_code >= 500:
            logger.error("auth_verification_failed", status_code=response.status_code)
            raise ServiceUnavailable("Authentication service is unavailable.")

        if response.status_code != 200:
            logger.warning(
                "auth_verification_failed",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise InvalidCredentials("Invalid authentication token.")

        user = _to_user(response.json())
        logger.debug("auth_verification_completed", user_id=user.id)
        return user
