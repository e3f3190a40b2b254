"""Authorized request pipeline.

Every authorized call goes through `BearerAuthInterceptor`, which attaches the
current bearer token and owns the 401 policy: at most one re-authentication and
one retry of the very same `ApiRequest` per call.
"""

import logging
from typing import Callable, Optional

from infrastructure.api.moderation_http import ApiRequest, ApiResponse, ModerationHttpTransport, TransportFailure
from use_cases.errors import SessionError

log = logging.getLogger(__name__)

EXPIRED_MESSAGE = "Session expired. Please login again."


class BearerAuthInterceptor:
    def __init__(
        self,
        transport: ModerationHttpTransport,
        token_provider: Callable[[], Optional[str]],
        reauthenticate: Callable[[], bool],
        on_expired: Callable[[], None],
    ):
        self._transport = transport
        self._token_provider = token_provider
        self._reauthenticate = reauthenticate
        self._on_expired = on_expired

    def __call__(self, request: ApiRequest) -> ApiResponse:
        token = self._token_provider()
        if not token:
            raise SessionError("expired", EXPIRED_MESSAGE)

        response = self._send(request, token)
        if response.status_code != 401:
            return response

        log.info(f"Token rejected on {request.method} {request.path}, re-authenticating...")
        if not self._reauthenticate():
            raise SessionError("expired", EXPIRED_MESSAGE)

        response = self._send(request, self._token_provider())
        if response.status_code == 401:
            # A fresh token was refused as well; no second round.
            log.warning(f"Retried {request.method} {request.path} still unauthorized, dropping session")
            self._on_expired()
            raise SessionError("expired", EXPIRED_MESSAGE)
        return response

    def _send(self, request: ApiRequest, token: Optional[str]) -> ApiResponse:
        try:
            return self._transport.send(request, bearer_token=token)
        except TransportFailure as e:
            raise SessionError("transport", f"Network error: {e}") from e
