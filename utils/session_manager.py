import json
import logging
import re
import secrets
from urllib.parse import unquote

import streamlit as st
import streamlit.components.v1 as components
import auth
from infrastructure.repositories.sqlite_audit_repository import AuditAction
from services.report_client import ReportClient
from services.session_service import SessionManager

"""
SESSION STATE CONTRACT

Keys of st.session_state owned by this module:

console_session: SessionManager | None
    the one admin session of this browser tab
    default: None (built lazily)
    owner: session_manager

browser_key: str
    opaque key naming this browser in the credential store; read from the
    BROWSER_KEY_COOKIE cookie, otherwise freshly issued and written at login
    default: cookie value or a new random key
    owner: session_manager

dashboard: DashboardView | None
    last dashboard projection; recomputed after every action and on refresh
    default: None
    owner: dashboard_view

detail: tuple[str, ReportDetail] | None
    (report_id, detail) of the open panel, fetched once per opening
    default: None
    owner: detail_view

detail_report_id: str | None
    report open in the detail panel
    default: None
    owner: detail_view

submitted_actions: set[str]
    controls already submitted once; they stay disabled until the next refresh
    default: set()
    owner: detail_view / banned_view

flash: tuple[str, str] | None
    (level, message) to show once on the next run
    default: None
    owner: session_manager

login_error: str | None
    message shown above the login form (e.g. after the session expired)
    default: None
    owner: login_view

session_diag_seen: bool
    prevents repeating the "session restored" notice
    default: False
    owner: system
"""

log = logging.getLogger(__name__)

BROWSER_KEY_COOKIE = "moderation_console_key"
BROWSER_KEY_MAX_AGE = 2592000  # 30 days
BROWSER_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]{32,128}")

def read_browser_key():
    try:
        raw = st.context.cookies.get(BROWSER_KEY_COOKIE)
    except Exception as e:
        log.debug(f"Cookie read unavailable: {e}")
        return None
    key = unquote(raw) if raw else None
    if key and BROWSER_KEY_PATTERN.fullmatch(key):
        return key
    return None

def new_browser_key() -> str:
    return secrets.token_urlsafe(32)

def remember_browser_key():
    """Persist this tab's browser key as a cookie so a reload can restore the session."""
    key = json.dumps(st.session_state.browser_key)
    components.html(
        f"""
        <script>
            var cookieStr = "{BROWSER_KEY_COOKIE}=" + encodeURIComponent({key}) + "; path=/; max-age={BROWSER_KEY_MAX_AGE}; SameSite=Strict";
            document.cookie = cookieStr;
            try {{
                window.parent.document.cookie = cookieStr;
            }} catch (e) {{}}
        </script>
        """,
        height=0,
    )

def clear_browser_key():
    components.html(
        f"""
        <script>
            var cookieStr = "{BROWSER_KEY_COOKIE}=; path=/; max-age=0; SameSite=Strict";
            document.cookie = cookieStr;
            try {{
                window.parent.document.cookie = cookieStr;
            }} catch (e) {{}}
        </script>
        """,
        height=0,
    )

def init_session_state():
    if 'console_session' not in st.session_state:
        st.session_state.console_session = None
    if 'browser_key' not in st.session_state:
        st.session_state.browser_key = read_browser_key() or new_browser_key()
    if 'dashboard' not in st.session_state:
        st.session_state.dashboard = None
    if 'detail' not in st.session_state:
        st.session_state.detail = None
    if 'detail_report_id' not in st.session_state:
        st.session_state.detail_report_id = None
    if 'submitted_actions' not in st.session_state:
        st.session_state.submitted_actions = set()
    if 'flash' not in st.session_state:
        st.session_state.flash = None
    if 'login_error' not in st.session_state:
        st.session_state.login_error = None
    if "session_diag_seen" not in st.session_state:
        st.session_state.session_diag_seen = False

def get_session_manager() -> SessionManager:
    if st.session_state.get("console_session") is None:
        st.session_state.console_session = auth.build_session_manager(st.session_state.get("browser_key"))
    return st.session_state.console_session

def get_report_client() -> ReportClient:
    return ReportClient(get_session_manager())

def check_and_restore_session():
    """Adopt a persisted session optimistically; the first API call validates it.

    Only a browser presenting the key cookie issued at its own login restores anything.
    """
    manager = get_session_manager()
    if manager.is_active:
        return
    cookie_key = read_browser_key()
    if not cookie_key or cookie_key != st.session_state.get("browser_key"):
        return
    if manager.restore() and not st.session_state.session_diag_seen:
        log.info(f"Session restored from storage for {manager.identity}")
        st.session_state.session_diag_seen = True

def _reset_view_state():
    st.session_state.dashboard = None
    st.session_state.detail_report_id = None
    st.session_state.detail = None
    st.session_state.submitted_actions = set()

def open_detail(report_id: str):
    st.session_state.detail_report_id = report_id
    st.session_state.detail = None

def close_detail():
    st.session_state.detail_report_id = None
    st.session_state.detail = None

def mark_submitted(action_key: str):
    st.session_state.submitted_actions.add(action_key)

def is_submitted(action_key: str) -> bool:
    return action_key in st.session_state.get("submitted_actions", set())

def release_submitted(action_key: str):
    st.session_state.submitted_actions.discard(action_key)

def _forget_browser():
    """Drop the key cookie; the next login in this tab issues a fresh key."""
    clear_browser_key()
    st.session_state.console_session = None
    st.session_state.browser_key = new_browser_key()

def expire_session(message: str = "Session expired. Please login again."):
    manager = get_session_manager()
    identity = manager.identity
    manager.logout()
    auth.get_audit_repo().log_action(AuditAction.SESSION_EXPIRED, target_type="session", actor=identity, result="expired")
    _forget_browser()
    _reset_view_state()
    st.session_state.login_error = message

def logout():
    manager = get_session_manager()
    identity = manager.identity
    manager.logout()
    auth.get_audit_repo().log_action(AuditAction.LOGOUT, target_type="session", actor=identity)
    _forget_browser()
    _reset_view_state()
    st.session_state.login_error = None
    st.rerun()

def apply_action_result(result, action_key: str = None) -> bool:
    """Route a flow result into session state. Returns True when the page should rerun.

    A rejected or failed action releases its control so the operator can retry by hand.
    A failed transition also drops the cached detail so the panel refetches server state.
    """
    if result.dashboard is not None:
        st.session_state.dashboard = result.dashboard

    if result.status == "DONE":
        if result.dashboard is None and not get_session_manager().is_active:
            # The action landed but the refresh after it found the session expired
            expire_session(f"{result.message} Session expired. Please login again.")
            return True
        st.session_state.flash = ("success", result.message)
        close_detail()
        st.session_state.submitted_actions = set()
        return True
    if result.status == "EXPIRED":
        expire_session(result.message)
        return True

    if action_key:
        release_submitted(action_key)
    if result.status == "REJECTED":
        st.warning(result.message)
        return False

    if result.transition is not None:
        st.session_state.detail = None
    st.error(f"Error: {result.message}")
    return False

def show_flash():
    flash = st.session_state.get("flash")
    if not flash:
        return
    level, message = flash
    st.session_state.flash = None
    if level == "success":
        st.success(message)
    elif level == "warning":
        st.warning(message)
    else:
        st.info(message)
