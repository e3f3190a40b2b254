import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

log = logging.getLogger(__name__)


class TransportFailure(Exception):
    """No HTTP response was received (DNS, refused connection, reset, timeout)."""


@dataclass(frozen=True)
class ApiRequest:
    """An API call described once and sent verbatim, possibly twice after a 401."""

    method: str
    path: str
    json: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    payload: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ModerationHttpTransport:
    def __init__(self, base_url: str, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def send(self, request: ApiRequest, bearer_token: Optional[str] = None) -> ApiResponse:
        headers = {"Content-Type": "application/json"}
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token}"
        headers.update(request.headers)

        url = f"{self.base_url}{request.path}"
        try:
            resp = requests.request(
                request.method,
                url,
                json=request.json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f"❌ Network error on {request.method} {request.path}: {e}")
            raise TransportFailure(str(e)) from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code >= 400:
            log.warning(f"⚠️ {request.method} {request.path} -> HTTP {resp.status_code}")
        else:
            log.debug(f"{request.method} {request.path} -> HTTP {resp.status_code}")
        return ApiResponse(status_code=resp.status_code, payload=payload, text=resp.text or "")
