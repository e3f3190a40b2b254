"""Admin action orchestration: validate the transition, submit it, refresh the dashboard."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Literal, Optional

from infrastructure.repositories.sqlite_audit_repository import AuditAction, SQLiteAuditRepository
from services import dashboard_service
from services.dashboard_service import DashboardView
from services.report_client import ReportClient
from services.review_state_machine import (
    Command,
    ResetStrikesCommand,
    ReviewAppealCommand,
    ReviewReportCommand,
    ReviewStateMachine,
    Transition,
)
from use_cases.domain_models import Appeal, BannedUser, Report
from use_cases.errors import ApiError, ConflictError, SessionError, ValidationError

log = logging.getLogger(__name__)

ActionStatus = Literal["DONE", "REJECTED", "FAILED", "EXPIRED"]

SUCCESS_MESSAGES = {
    "review_report": "Report resolved.",
    "review_appeal": "Appeal reviewed.",
    "reset_strikes": "Strikes reset and user unbanned successfully!",
}

AUDIT_ACTIONS = {
    "review_report": AuditAction.REPORT_REVIEW,
    "review_appeal": AuditAction.APPEAL_REVIEW,
    "reset_strikes": AuditAction.STRIKES_RESET,
}

_state_machine = ReviewStateMachine()


@dataclass(frozen=True)
class ActionResult:
    """Result contract for an admin action."""

    status: ActionStatus
    message: str
    transition: Optional[Transition] = None
    dashboard: Optional[DashboardView] = None


def _submit(client: ReportClient, transition: Transition) -> Any:
    payload = transition.payload
    if transition.kind == "review_report":
        return client.submit_review(transition.target_id, payload["status"], payload["notes"], payload["shouldStrike"])
    if transition.kind == "review_appeal":
        return client.submit_appeal_review(transition.target_id, payload["approved"], payload["adminResponse"])
    return client.reset_strikes(transition.target_id, payload["message"])


def refresh_dashboard(client: ReportClient, tabs: Iterable[str] = dashboard_service.TAB_KEYS) -> Optional[DashboardView]:
    """Best-effort refresh after an action; an expired session yields None."""
    try:
        return dashboard_service.load_dashboard(client, tabs)
    except SessionError as e:
        log.warning(f"Dashboard refresh skipped: {e}")
        return None


def _audit(audit: Optional[SQLiteAuditRepository], action, target_type: str, actor, target_id, metadata: Dict[str, Any], result: str):
    if audit is None:
        return
    audit.log_action(action, target_type=target_type, actor=actor, target_id=target_id, metadata=metadata, result=result)


def run_action(
    client: ReportClient,
    command: Command,
    *,
    report: Optional[Report] = None,
    appeal: Optional[Appeal] = None,
    banned_user: Optional[BannedUser] = None,
    audit: Optional[SQLiteAuditRepository] = None,
    actor: Optional[str] = None,
    tabs: Iterable[str] = dashboard_service.TAB_KEYS,
) -> ActionResult:
    target_id = getattr(command, "report_id", None) or getattr(command, "user_id", None)

    try:
        transition = _state_machine.validate(command, report=report, appeal=appeal, banned_user=banned_user)
    except ValidationError as e:
        log.info(f"Action on {target_id} rejected locally: {e.code}")
        _audit(audit, AuditAction.ACTION_REJECTED, "action", actor, target_id, {"code": e.code}, "deny")
        return ActionResult(status="REJECTED", message=str(e))

    audit_action = AUDIT_ACTIONS[transition.kind]
    metadata: Dict[str, Any] = {"decision": transition.to_status}
    if transition.kind == "review_report":
        metadata["should_strike"] = transition.payload["shouldStrike"]
    elif transition.kind == "review_appeal":
        metadata["approved"] = transition.payload["approved"]

    try:
        _submit(client, transition)
    except ConflictError as e:
        log.warning(f"Conflict on {transition.kind} {transition.target_id}: {e}")
        _audit(audit, audit_action, transition.kind, actor, transition.target_id, {**metadata, "status_code": 409}, "conflict")
        return ActionResult(status="FAILED", message=str(e), transition=transition, dashboard=refresh_dashboard(client, tabs))
    except SessionError as e:
        outcome = "expired" if e.reason == "expired" else "error"
        _audit(audit, audit_action, transition.kind, actor, transition.target_id, {**metadata, "error_message": str(e)}, outcome)
        if e.reason == "expired":
            return ActionResult(status="EXPIRED", message=str(e), transition=transition)
        return ActionResult(status="FAILED", message=str(e), transition=transition)
    except ApiError as e:
        _audit(audit, audit_action, transition.kind, actor, transition.target_id, {**metadata, "status_code": e.status_code}, "error")
        return ActionResult(status="FAILED", message=str(e), transition=transition)

    _audit(audit, audit_action, transition.kind, actor, transition.target_id, metadata, "success")
    return ActionResult(
        status="DONE",
        message=SUCCESS_MESSAGES[transition.kind],
        transition=transition,
        dashboard=refresh_dashboard(client, tabs),
    )


def review_report(
    client: ReportClient,
    report_id: str,
    decision: str,
    should_strike: bool,
    notes: str = "",
    *,
    report: Optional[Report] = None,
    **kwargs,
) -> ActionResult:
    command = ReviewReportCommand(report_id=report_id, decision=decision, should_strike=should_strike, notes=notes)
    return run_action(client, command, report=report, **kwargs)


def review_appeal(
    client: ReportClient,
    report_id: str,
    approved: bool,
    admin_response: str,
    *,
    report: Optional[Report] = None,
    appeal: Optional[Appeal] = None,
    **kwargs,
) -> ActionResult:
    command = ReviewAppealCommand(report_id=report_id, approved=approved, admin_response=admin_response)
    return run_action(client, command, report=report, appeal=appeal, **kwargs)


def reset_strikes(
    client: ReportClient,
    user_id: str,
    message: str,
    confirmed: bool,
    *,
    banned_user: Optional[BannedUser] = None,
    **kwargs,
) -> ActionResult:
    command = ResetStrikesCommand(user_id=user_id, message=message, confirmed=confirmed)
    return run_action(client, command, banned_user=banned_user, **kwargs)


def process_next(
    client: ReportClient,
    *,
    audit: Optional[SQLiteAuditRepository] = None,
    actor: Optional[str] = None,
    tabs: Iterable[str] = dashboard_service.TAB_KEYS,
) -> ActionResult:
    """Let the server run AI moderation on the next pending report."""
    try:
        message = client.process_next()
    except SessionError as e:
        status: ActionStatus = "EXPIRED" if e.reason == "expired" else "FAILED"
        outcome = "expired" if e.reason == "expired" else "error"
        _audit(audit, AuditAction.PROCESS_NEXT, "report", actor, None, {"error_message": str(e)}, outcome)
        return ActionResult(status=status, message=str(e))
    except ApiError as e:
        _audit(audit, AuditAction.PROCESS_NEXT, "report", actor, None, {"status_code": e.status_code}, "error")
        return ActionResult(status="FAILED", message=str(e))

    _audit(audit, AuditAction.PROCESS_NEXT, "report", actor, None, {}, "success")
    return ActionResult(status="DONE", message=message, dashboard=refresh_dashboard(client, tabs))


def load(client: ReportClient, tabs: Iterable[str] = dashboard_service.TAB_KEYS) -> ActionResult:
    """Dashboard refresh triggered by the operator."""
    try:
        dashboard = dashboard_service.load_dashboard(client, tabs)
    except SessionError as e:
        return ActionResult(status="EXPIRED", message=str(e))
    return ActionResult(status="DONE", message="", dashboard=dashboard)


__all__ = [
    "ActionResult",
    "ActionStatus",
    "load",
    "process_next",
    "refresh_dashboard",
    "reset_strikes",
    "review_appeal",
    "review_report",
    "run_action",
]
