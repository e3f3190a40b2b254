import os
import logging
from typing import Optional
from urllib.parse import urlsplit

import streamlit as st
from streamlit.errors import StreamlitAPIException

from infrastructure.api.moderation_http import ModerationHttpTransport
from infrastructure.repositories.sqlite_audit_repository import SQLiteAuditRepository
from infrastructure.repositories.sqlite_credential_repository import SQLiteCredentialRepository
from services.session_service import SessionManager

log = logging.getLogger(__name__)

CREDENTIALS_DB = "admin_session.db"
DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_API_TIMEOUT = 10.0

def get_secret(key):
    try:
        return st.secrets.get(key)
    except (FileNotFoundError, StreamlitAPIException):
        return None

def get_setting(key, default=None):
    return get_secret(key) or os.getenv(key) or default

def get_api_url() -> str:
    return str(get_setting("MODERATION_API_URL", DEFAULT_API_URL)).rstrip("/")

def get_api_timeout() -> float:
    raw = get_setting("MODERATION_API_TIMEOUT", DEFAULT_API_TIMEOUT)
    try:
        return float(raw)
    except (TypeError, ValueError):
        log.warning(f"Invalid MODERATION_API_TIMEOUT {raw!r}, using {DEFAULT_API_TIMEOUT}")
        return DEFAULT_API_TIMEOUT

def get_credentials_db() -> str:
    return str(get_setting("CREDENTIALS_DB", CREDENTIALS_DB))

def api_origin(api_url: str) -> str:
    """scheme://host[:port] of the API; stored sessions are keyed by it."""
    parts = urlsplit(api_url)
    if not parts.scheme or not parts.netloc:
        return api_url
    return f"{parts.scheme}://{parts.netloc}".lower()

_credential_repo: Optional[SQLiteCredentialRepository] = None
_audit_repo: Optional[SQLiteAuditRepository] = None

def get_credential_repo(browser_key: Optional[str] = None) -> SQLiteCredentialRepository:
    global _credential_repo
    db_path = get_credentials_db()
    origin = api_origin(get_api_url())
    if (
        _credential_repo is None
        or _credential_repo.db_path != db_path
        or _credential_repo.origin != origin
        or _credential_repo.browser_key != (browser_key or None)
    ):
        _credential_repo = SQLiteCredentialRepository(db_path, origin, browser_key)
    return _credential_repo

def get_audit_repo() -> SQLiteAuditRepository:
    global _audit_repo
    db_path = get_credentials_db()
    if _audit_repo is None or _audit_repo.db_path != db_path:
        _audit_repo = SQLiteAuditRepository(db_path)
    return _audit_repo

def init_storage():
    get_credential_repo().init_db()

def build_session_manager(browser_key: Optional[str] = None) -> SessionManager:
    transport = ModerationHttpTransport(get_api_url(), timeout=get_api_timeout())
    return SessionManager(transport, get_credential_repo(browser_key))
