"""Dashboard composition: counters and per-tab listings, recomputed on every call."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from services import formatting
from services.report_client import ReportClient
from use_cases.domain_models import Appeal, BannedUser, DashboardStats, Report
from use_cases.errors import ModerationConsoleError, SessionError

log = logging.getLogger(__name__)

TAB_KEYS: Tuple[str, ...] = ("pending", "appeals", "resolved", "banned")
TAB_LABELS = {
    "pending": "⏳ Pending",
    "appeals": "📨 Appeals",
    "resolved": "✅ Resolved",
    "banned": "🚫 Banned users",
}
EMPTY_STATES = {
    "pending": ("✅", "No pending reports"),
    "appeals": ("🎉", "No appeals"),
    "resolved": ("📋", "No resolved reports"),
    "banned": ("🎉", "No banned users"),
}


@dataclass(frozen=True)
class DashboardView:
    counters: DashboardStats
    server_stats: Optional[DashboardStats] = None
    pending_reports: List[Report] = field(default_factory=list)
    appeals: List[Appeal] = field(default_factory=list)
    resolved_reports: List[Report] = field(default_factory=list)
    banned_users: List[BannedUser] = field(default_factory=list)
    loaded: Tuple[str, ...] = ()
    errors: Dict[str, str] = field(default_factory=dict)

    def listing(self, tab: str) -> list:
        return {
            "pending": self.pending_reports,
            "appeals": self.appeals,
            "resolved": self.resolved_reports,
            "banned": self.banned_users,
        }.get(tab, [])

    def find_report(self, report_id: str) -> Optional[Report]:
        for report in list(self.pending_reports) + list(self.resolved_reports):
            if report.id == report_id:
                return report
        return None


def tally_counters(
    pending: Iterable[Report],
    appeals: Iterable[Appeal],
    resolved: Iterable[Report],
    banned: Iterable[BannedUser],
    today: Optional[date] = None,
) -> DashboardStats:
    today = today or datetime.now(timezone.utc).date()
    return DashboardStats(
        total_pending=sum(1 for _ in pending),
        total_appealed=sum(1 for a in appeals if a.is_pending),
        total_resolved_today=sum(1 for r in resolved if formatting.is_on_day(r.resolved_at, today)),
        total_banned_users=sum(1 for _ in banned),
    )


def _fetch(tab: str, loader: Callable[[], object], errors: Dict[str, str]):
    try:
        return loader()
    except SessionError as e:
        if e.reason == "expired":
            raise
        log.error(f"❌ Failed to load {tab}: {e}")
        errors[tab] = f"Failed to load: {e}"
    except ModerationConsoleError as e:
        log.error(f"❌ Failed to load {tab}: {e}")
        errors[tab] = f"Failed to load: {e}"
    return None


def load_dashboard(client: ReportClient, tabs: Iterable[str] = TAB_KEYS, today: Optional[date] = None) -> DashboardView:
    """Fetch each listing independently; a failing listing only costs its own tab.

    An expired session is not a per-tab failure and propagates.
    """
    wanted = [t for t in TAB_KEYS if t in set(tabs)]
    errors: Dict[str, str] = {}
    loaded: List[str] = []

    server_stats = None
    pending: List[Report] = []
    appeals: List[Appeal] = []
    resolved: List[Report] = []
    banned: List[BannedUser] = []

    if "pending" in wanted:
        snapshot = _fetch("pending", client.get_dashboard, errors)
        if snapshot is not None:
            server_stats = snapshot.stats
            pending = list(snapshot.pending_reports)
            loaded.append("pending")
    if "appeals" in wanted:
        result = _fetch("appeals", client.list_appeals, errors)
        if result is not None:
            appeals = list(result)
            loaded.append("appeals")
    if "resolved" in wanted:
        result = _fetch("resolved", client.list_resolved, errors)
        if result is not None:
            resolved = list(result)
            loaded.append("resolved")
    if "banned" in wanted:
        result = _fetch("banned", client.list_banned_users, errors)
        if result is not None:
            banned = list(result)
            loaded.append("banned")

    tallied = tally_counters(pending, appeals, resolved, banned, today=today)
    counters = server_stats if server_stats is not None else tallied

    return DashboardView(
        counters=counters,
        server_stats=server_stats,
        pending_reports=pending,
        appeals=appeals,
        resolved_reports=resolved,
        banned_users=banned,
        loaded=tuple(loaded),
        errors=errors,
    )


def reports_frame(reports: Iterable[Report]) -> pd.DataFrame:
    rows = [
        {
            "ID": r.id,
            "Reason": formatting.format_reason(r.reason),
            "Status": formatting.format_status(r.status),
            "Type": r.content_type,
            "Reporter": r.reporter_name or r.reporter_id,
            "Reported": r.reported_user_name or r.reported_user_id,
            "Created": formatting.format_date(r.created_at),
        }
        for r in reports
    ]
    return pd.DataFrame(rows, columns=["ID", "Reason", "Status", "Type", "Reporter", "Reported", "Created"])


def banned_users_frame(users: Iterable[BannedUser]) -> pd.DataFrame:
    rows = [
        {
            "User": u.user_name or u.user_id,
            "ID": u.user_id,
            "Strikes": u.strike_count,
            "Banned": formatting.format_date(u.banned_at),
            "Reason": u.reason,
        }
        for u in users
    ]
    frame = pd.DataFrame(rows, columns=["User", "ID", "Strikes", "Banned", "Reason"])
    return frame.sort_values("Strikes", ascending=False, kind="stable").reset_index(drop=True)
