"""Session DTOs shared across application layers."""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Session:
    """The single live admin session.

    `credential` is kept so the session can silently log in again after a 401.
    Token expiry is unknown until the API answers 401.
    """

    access_token: str
    identity: str
    credential: str

    def with_token(self, access_token: str) -> "Session":
        return replace(self, access_token=access_token)

    def __repr__(self) -> str:
        return f"Session(identity={self.identity!r}, access_token=<hidden>, credential=<hidden>)"


def is_complete(session: Optional[Session]) -> bool:
    return bool(session and session.access_token and session.identity and session.credential)
