"""Admin session lifecycle: restore, login, silent re-authentication, logout."""

import logging
from typing import Optional

from infrastructure.api.moderation_http import ApiRequest, ApiResponse, ModerationHttpTransport, TransportFailure
from infrastructure.repositories.sqlite_credential_repository import SQLiteCredentialRepository
from services.request_pipeline import BearerAuthInterceptor
from use_cases.errors import AuthError, SessionError, ValidationError, server_message
from use_cases.session_models import Session, is_complete

log = logging.getLogger(__name__)

LOGIN_PATH = "/api/admin/login"


class SessionManager:
    """Owns the one live `Session` and the store that persists it.

    Collaborators never see the token; they call `authorized_request`, which
    runs through the `BearerAuthInterceptor` built here.
    """

    def __init__(self, transport: ModerationHttpTransport, store: SQLiteCredentialRepository):
        self._transport = transport
        self._store = store
        self._session: Optional[Session] = None
        self._pipeline = BearerAuthInterceptor(
            transport,
            token_provider=self._current_token,
            reauthenticate=self.re_authenticate,
            on_expired=self._invalidate,
        )

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def identity(self) -> Optional[str]:
        return self._session.identity if self._session else None

    def _current_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def restore(self) -> bool:
        """Adopt a persisted session without a network round trip.

        Whether the token is still good is found out lazily by the first
        authorized request.
        """
        stored = self._store.load()
        if stored is None:
            return False
        token, identity, credential = stored
        self._session = Session(access_token=token, identity=identity, credential=credential)
        log.info(f"Restored stored session for {identity}")
        return True

    def login(self, identity: str, credential: str) -> Session:
        identity = (identity or "").strip()
        credential = (credential or "").strip()
        if not identity or not credential:
            raise ValidationError("missing_fields", "Both fields are required.")

        token = self._request_token(identity, credential)
        session = Session(access_token=token, identity=identity, credential=credential)
        self._store.save(token, identity, credential)
        self._session = session
        log.info(f"✅ Admin {identity} logged in")
        return session

    def authorized_request(self, request: ApiRequest) -> ApiResponse:
        return self._pipeline(request)

    def re_authenticate(self) -> bool:
        """Log in again with the stored identity and credential.

        Success swaps only the token. Any failure tears the whole session down.
        """
        session = self._session
        if not is_complete(session):
            self._invalidate()
            return False

        try:
            token = self._request_token(session.identity, session.credential)
        except (AuthError, SessionError) as e:
            log.warning(f"Re-authentication for {session.identity} failed: {e}")
            self._invalidate()
            return False

        self._session = session.with_token(token)
        self._store.update_token(token)
        log.info("Token refreshed successfully")
        return True

    def logout(self):
        self._invalidate()

    def _invalidate(self):
        self._session = None
        self._store.clear()

    def _request_token(self, identity: str, credential: str) -> str:
        request = ApiRequest("POST", LOGIN_PATH, json={"userId": identity, "password": credential})
        try:
            response = self._transport.send(request)
        except TransportFailure as e:
            raise SessionError("transport", f"Network error: {e}") from e

        if not response.ok:
            reason = "server_error" if response.status_code >= 500 else "invalid_credentials"
            log.warning(f"❌ Login for {identity} refused: HTTP {response.status_code}")
            raise AuthError(reason, f"Login failed: {server_message(response.payload, response.status_code)}")

        payload = response.payload if isinstance(response.payload, dict) else {}
        token = payload.get("access_token")
        if not token:
            raise AuthError("server_error", "Login failed: no access token in response")
        return str(token)
