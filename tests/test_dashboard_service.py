from datetime import date

import pytest

from fakes import FakeReportClient
from services import dashboard_service
from services.dashboard_service import load_dashboard, tally_counters
from use_cases import review_flow
from use_cases.domain_models import Appeal, BannedUser, DashboardStats, Report
from use_cases.errors import ApiError, SessionError

TODAY = date(2026, 10, 19)


def _report(report_id, status="pending", resolved_at=None):
    return Report(
        id=report_id,
        reason="spam",
        status=status,
        content_type="post",
        reporter_id="u1",
        reported_user_id="u2",
        created_at="2026-10-18T09:00:00Z",
        resolved_at=resolved_at,
    )


def test_tally_counters():
    counters = tally_counters(
        pending=[_report("r1"), _report("r2")],
        appeals=[Appeal("r3", "why", "pending"), Appeal("r4", "why", "rejected")],
        resolved=[
            _report("r5", "resolved_valid", "2026-10-19T08:00:00Z"),
            _report("r6", "resolved_invalid", "2026-10-18T23:00:00Z"),
        ],
        banned=[BannedUser("user42", 3)],
        today=TODAY,
    )

    assert counters == DashboardStats(total_pending=2, total_appealed=1, total_resolved_today=1, total_banned_users=1)


def test_load_dashboard_prefers_server_stats():
    stats = DashboardStats(total_pending=7, total_appealed=2, total_resolved_today=3, total_banned_users=1)
    client = FakeReportClient(pending=[_report("r1")], stats=stats)

    view = load_dashboard(client, today=TODAY)

    assert view.counters == stats
    assert view.server_stats == stats
    assert view.loaded == ("pending", "appeals", "resolved", "banned")
    assert view.errors == {}


def test_failing_listing_only_costs_its_tab():
    client = FakeReportClient(pending=[_report("r1")], banned=[BannedUser("user42", 3)])
    client.failures["get_dashboard"] = ApiError(500, "HTTP 500")
    client.failures["list_resolved"] = SessionError("transport", "Network error: timed out")

    view = load_dashboard(client, today=TODAY)

    assert view.errors == {
        "pending": "Failed to load: HTTP 500",
        "resolved": "Failed to load: Network error: timed out",
    }
    assert view.loaded == ("appeals", "banned")
    assert view.server_stats is None
    assert view.counters.total_banned_users == 1
    assert view.banned_users[0].user_id == "user42"


def test_expired_session_propagates():
    client = FakeReportClient()
    client.failures["list_appeals"] = SessionError("expired", "Session expired. Please login again.")

    with pytest.raises(SessionError):
        load_dashboard(client)


def test_load_selected_tabs_only():
    client = FakeReportClient(banned=[BannedUser("user42", 3)])
    client.failures["get_dashboard"] = AssertionError("pending tab was not requested")

    view = load_dashboard(client, tabs=["banned"], today=TODAY)

    assert view.loaded == ("banned",)
    assert view.listing("pending") == []


def test_view_lookups():
    client = FakeReportClient(pending=[_report("r1")], resolved=[_report("r2", "resolved_valid")], banned=[BannedUser("user42", 3)])

    view = load_dashboard(client, today=TODAY)

    assert view.find_report("r2").status == "resolved_valid"
    assert view.find_report("nope") is None
    assert view.listing("banned")[0].strike_count == 3
    assert view.listing("unknown") == []


def test_reset_strikes_removes_user_from_banned_listing():
    user = BannedUser("user42", 3, reason="Too many strikes")
    client = FakeReportClient(banned=[user, BannedUser("user7", 4)])

    result = review_flow.reset_strikes(client, "user42", "strikes cleared per policy", True, banned_user=user)

    assert result.status == "DONE"
    assert [u.user_id for u in result.dashboard.banned_users] == ["user7"]
    assert client.submitted == [("reset", "user42", "strikes cleared per policy")]


def test_review_moves_report_out_of_pending_and_counts_it_today():
    report = _report("r9")
    client = FakeReportClient(pending=[report, _report("r10")], now="2026-10-19T12:00:00Z")
    before = load_dashboard(client, today=TODAY)

    result = review_flow.review_report(client, "r9", "resolved_valid", True, report=report)
    after = load_dashboard(client, today=TODAY)

    assert result.status == "DONE"
    assert [r.id for r in after.pending_reports] == ["r10"]
    assert after.counters.total_resolved_today == before.counters.total_resolved_today + 1
    assert after.find_report("r9").status == "resolved_valid"


def test_reports_frame():
    frame = dashboard_service.reports_frame([_report("r1", "resolved_valid")])

    assert list(frame.columns) == ["ID", "Reason", "Status", "Type", "Reporter", "Reported", "Created"]
    assert frame.iloc[0]["Status"] == "Valid"
    assert frame.iloc[0]["Created"] == "18 Oct 2026, 09:00"


def test_banned_users_frame_sorted_by_strikes():
    frame = dashboard_service.banned_users_frame([BannedUser("a", 3), BannedUser("b", 5, user_name="Bob")])

    assert list(frame["User"]) == ["Bob", "a"]
    assert dashboard_service.banned_users_frame([]).empty
