import json

from services import formatting
from use_cases.domain_models import (
    APPEAL_STATUSES,
    REPORT_REASONS,
    REPORT_STATUSES,
    Appeal,
    BannedUser,
    ContentSnapshot,
    DashboardStats,
    Report,
    parse_ai_decision,
    pick,
)


def test_pick_skips_missing_and_empty():
    assert pick({"a": "", "b": None, "c": 0}, "a", "b", "c") == 0
    assert pick({}, "a", default="x") == "x"


def test_report_accepts_camel_and_snake_keys():
    camel = Report.from_api({
        "id": "r1", "reason": "spam", "status": "pending", "contentType": "comment",
        "reporterUserId": "u1", "reportedUserId": "u2", "reporterUserName": "alice",
    })
    snake = Report.from_api({
        "id": "r1", "reason": "spam", "status": "pending", "content_type": "comment",
        "reporter_user_id": "u1", "reported_user_id": "u2", "reporter_user_name": "alice",
    })

    assert camel == snake
    assert camel.content_type == "comment"
    assert camel.reporter_name == "alice"


def test_report_defaults():
    report = Report.from_api({"id": 5})

    assert report.id == "5"
    assert (report.reason, report.status, report.content_type) == ("other", "pending", "post")
    assert report.ai_decision is None


def test_ai_decision_from_json_string_and_dict():
    raw = {"isViolation": True, "confidence": "0.9", "reasoning": "spam links", "suggestedAction": "remove"}

    from_string = parse_ai_decision(json.dumps(raw))
    from_dict = Report.from_api({"id": "r1", "aiDecision": raw}).ai_decision

    assert from_string == from_dict
    assert from_string.confidence == 0.9
    assert from_string.is_violation is True


def test_malformed_ai_decision_is_absent():
    assert parse_ai_decision("{not json") is None
    assert parse_ai_decision("[1, 2]") is None
    assert parse_ai_decision("") is None
    assert parse_ai_decision({"isViolation": False, "confidence": "high"}).confidence is None


def test_appeal_and_banned_user():
    appeal = Appeal.from_api({"report_id": "r3", "appeal_reason": "Context", "status": "approved", "admin_response": "Fair"})
    user = BannedUser.from_api({"userId": "user42", "strikes": [{"reason": "spam"}, {"reason": "fake"}, "junk"]})

    assert appeal.report_id == "r3" and not appeal.is_pending
    assert user.strike_count == 2
    assert [s.reason for s in user.strikes] == ["spam", "fake"]


def test_content_snapshot_tolerates_missing_content():
    assert ContentSnapshot.from_api(None) == ContentSnapshot()
    snapshot = ContentSnapshot.from_api({"content": "hello", "hashtags": ["#a", "#b"], "mediaUrl": "https://cdn/1.png"})
    assert snapshot.text == "hello"
    assert snapshot.hashtags == "#a, #b"
    assert snapshot.media_url == "https://cdn/1.png"
    assert ContentSnapshot.from_api({"hashtags": "[]"}).hashtags is None


def test_dashboard_stats_from_api():
    stats = DashboardStats.from_api({"totalPending": "3", "total_appealed": 1, "totalBannedUsers": "many"})

    assert stats == DashboardStats(total_pending=3, total_appealed=1, total_resolved_today=0, total_banned_users=0)
    assert DashboardStats.from_api(None) == DashboardStats()


def test_every_reason_and_status_has_a_label():
    assert set(REPORT_REASONS) == set(formatting.REASON_LABELS)
    assert set(REPORT_STATUSES) == set(formatting.STATUS_LABELS)
    assert set(APPEAL_STATUSES) == set(formatting.APPEAL_STATUS_LABELS)
