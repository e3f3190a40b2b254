"""Typed operations against the moderation API, layered on the SessionManager."""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

from infrastructure.api.moderation_http import ApiRequest, ApiResponse
from services.session_service import SessionManager
from use_cases.domain_models import (
    Appeal,
    BannedUser,
    ContentSnapshot,
    DashboardSnapshot,
    DashboardStats,
    Report,
    ReportDetail,
)
from use_cases.errors import ApiError, ConflictError, server_message

log = logging.getLogger(__name__)

API_PREFIX = "/api/reports"


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _raise_for_status(response: ApiResponse):
    if response.ok:
        return
    message = server_message(response.payload, response.status_code)
    if response.status_code == 409:
        raise ConflictError(message)
    raise ApiError(response.status_code, message)


def _as_list(payload: Any) -> List[dict]:
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


class ReportClient:
    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    def _call(self, method: str, path: str, body: Optional[dict] = None) -> Any:
        response = self.session_manager.authorized_request(ApiRequest(method, path, json=body))
        _raise_for_status(response)
        return response.payload

    # --- queries ---

    def get_dashboard(self) -> DashboardSnapshot:
        payload = self._call("GET", f"{API_PREFIX}/admin/dashboard")
        payload = payload if isinstance(payload, dict) else {}
        return DashboardSnapshot(
            stats=DashboardStats.from_api(payload.get("stats")),
            pending_reports=[Report.from_api(r) for r in _as_list(payload.get("pendingReports"))],
        )

    def list_appeals(self) -> List[Appeal]:
        return [Appeal.from_api(a) for a in _as_list(self._call("GET", f"{API_PREFIX}/admin/appeals"))]

    def list_resolved(self) -> List[Report]:
        return [Report.from_api(r) for r in _as_list(self._call("GET", f"{API_PREFIX}/admin/resolved"))]

    def list_banned_users(self) -> List[BannedUser]:
        return [BannedUser.from_api(u) for u in _as_list(self._call("GET", f"{API_PREFIX}/admin/banned-users"))]

    def get_report_detail(self, report_id: str) -> ReportDetail:
        """Join report, content snapshot and appeal. Missing parts degrade to empty."""
        payload = self._call("GET", f"{API_PREFIX}/{_segment(report_id)}/content")
        payload = payload if isinstance(payload, dict) else {}

        report_data = payload.get("report") if isinstance(payload.get("report"), dict) else {}
        if not report_data.get("id"):
            report_data = {**report_data, "id": report_id}

        appeal_data = payload.get("appeal")
        appeal = Appeal.from_api(appeal_data) if isinstance(appeal_data, dict) and appeal_data else None
        if appeal is not None and not appeal.report_id:
            appeal = Appeal.from_api({**appeal_data, "reportId": report_id})

        return ReportDetail(
            report=Report.from_api(report_data),
            content=ContentSnapshot.from_api(payload.get("content")),
            appeal=appeal,
        )

    # --- mutations ---

    def submit_review(self, report_id: str, status: str, notes: str, should_strike: bool) -> Any:
        log.info(f"Submitting review for report {report_id}: {status} (strike={should_strike})")
        return self._call(
            "POST",
            f"{API_PREFIX}/{_segment(report_id)}/admin-review",
            {"status": status, "notes": notes, "shouldStrike": should_strike},
        )

    def submit_appeal_review(self, report_id: str, approved: bool, admin_response: str) -> Any:
        log.info(f"Submitting appeal review for report {report_id}: approved={approved}")
        return self._call(
            "POST",
            f"{API_PREFIX}/{_segment(report_id)}/appeal-review",
            {"approved": approved, "adminResponse": admin_response},
        )

    def reset_strikes(self, user_id: str, message: str) -> Any:
        log.info(f"Resetting strikes for user {user_id}")
        return self._call(
            "POST",
            f"{API_PREFIX}/admin/reset-strikes/{_segment(user_id)}",
            {"message": message},
        )

    def process_next(self) -> str:
        """Ask the server to run AI moderation on the next pending report."""
        payload = self._call("POST", f"{API_PREFIX}/process-next")
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return "Processing started."
