"""Error taxonomy shared by the session layer, the API client and the flows."""

from typing import Literal, Optional

AuthFailureReason = Literal["invalid_credentials", "server_error"]
SessionFailureReason = Literal["expired", "transport"]


class ModerationConsoleError(Exception):
    """Base class for every error surfaced to the operator."""


class AuthError(ModerationConsoleError):
    """Initial login was refused. User-correctable, shown inline on the login form."""

    def __init__(self, reason: AuthFailureReason, message: str):
        super().__init__(message)
        self.reason = reason


class SessionError(ModerationConsoleError):
    """The session is gone (`expired`) or the API did not answer at all (`transport`)."""

    def __init__(self, reason: SessionFailureReason, message: str):
        super().__init__(message)
        self.reason = reason


class ValidationError(ModerationConsoleError):
    """A local precondition failed; the request never left the client."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class ApiError(ModerationConsoleError):
    """Any other non-2xx answer from the moderation API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class ConflictError(ApiError):
    """The server refused a transition because the record changed under us (HTTP 409)."""

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(status_code, message)


def server_message(payload: Optional[dict], status_code: int) -> str:
    """Server-provided `message` when present, otherwise a generic status line."""
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return f"HTTP {status_code}"
