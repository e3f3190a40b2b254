"""Authentication flow orchestration (application layer)."""

from dataclasses import dataclass
from typing import Literal, Optional

import streamlit as st

import auth
from infrastructure.repositories.sqlite_audit_repository import AuditAction
from use_cases.errors import AuthError, SessionError, ValidationError
from utils import session_manager

AuthFlowStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    identity: Optional[str] = None
    message: str = ""


def ensure_authenticated_session() -> AuthFlowResult:
    """Run the auth gate: init state, restore lazily, and decide whether to show the dashboard."""
    session_manager.init_session_state()
    session_manager.check_and_restore_session()

    manager = session_manager.get_session_manager()
    if not manager.is_active:
        return AuthFlowResult(status="STOP", reason="auth_required")
    return AuthFlowResult(status="CONTINUE", reason="authenticated", identity=manager.identity)


def login(identity: str, credential: str) -> AuthFlowResult:
    """Submit the login form. Failures leave any existing session untouched."""
    manager = session_manager.get_session_manager()
    try:
        session = manager.login(identity, credential)
    except ValidationError as e:
        return AuthFlowResult(status="STOP", reason=e.code, message=str(e))
    except AuthError as e:
        auth.get_audit_repo().log_action(
            AuditAction.LOGIN_FAIL,
            target_type="session",
            actor=(identity or "").strip() or None,
            metadata={"reason": e.reason},
            result="deny",
        )
        return AuthFlowResult(status="STOP", reason=e.reason, message=str(e))
    except SessionError as e:
        return AuthFlowResult(status="STOP", reason=e.reason, message=f"Login failed: {e}")

    auth.get_audit_repo().log_action(AuditAction.LOGIN_SUCCESS, target_type="session", actor=session.identity)
    st.session_state.login_error = None
    st.session_state.dashboard = None
    return AuthFlowResult(status="CONTINUE", reason="authenticated", identity=session.identity)
