import json
from unittest.mock import patch

from infrastructure.repositories.sqlite_audit_repository import AuditAction, SQLiteAuditRepository


def _audit(store):
    return SQLiteAuditRepository(store.db_path)


def test_log_action_writes_row(store):
    audit = _audit(store)

    audit.log_action(
        AuditAction.REPORT_REVIEW,
        target_type="review_report",
        actor="admin1",
        target_id="r9",
        metadata={"decision": "resolved_valid", "should_strike": True},
    )

    rows = audit.get_logs()
    assert len(rows) == 1
    _, _, actor, action, target_type, target_id, metadata_json, result = rows[0]
    assert (actor, action, target_type, target_id, result) == ("admin1", "REPORT_REVIEW", "review_report", "r9", "success")
    assert json.loads(metadata_json) == {"decision": "resolved_valid", "should_strike": True}


def test_metadata_is_filtered_to_known_keys(store):
    audit = _audit(store)

    audit.log_action(
        AuditAction.LOGIN_FAIL,
        target_type="session",
        actor="admin1",
        metadata={"reason": "invalid_credentials", "password": "secret", "access_token": "tok-1"},
        result="deny",
    )

    metadata = json.loads(audit.get_logs()[0][6])
    assert metadata == {"reason": "invalid_credentials"}


def test_missing_actor_is_reported_as_system(store):
    audit = _audit(store)
    audit.log_action(AuditAction.PROCESS_NEXT, target_type="report")

    assert audit.get_logs()[0][2] == "SYSTEM"


def test_get_logs_filters_and_orders_newest_first(store):
    audit = _audit(store)
    audit.log_action(AuditAction.LOGIN_SUCCESS, target_type="session", actor="admin1")
    audit.log_action(AuditAction.STRIKES_RESET, target_type="reset_strikes", actor="admin1", target_id="user42")
    audit.log_action(AuditAction.LOGOUT, target_type="session", actor="admin1")

    assert [row[3] for row in audit.get_logs()] == ["LOGOUT", "STRIKES_RESET", "LOGIN_SUCCESS"]
    assert [row[5] for row in audit.get_logs(action_filter="STRIKES_RESET")] == ["user42"]
    assert len(audit.get_logs(limit=1)) == 1


def test_audit_failure_does_not_propagate(store):
    audit = _audit(store)

    with patch.object(audit, "_conn", side_effect=RuntimeError("Database is completely down")):
        audit.log_action(AuditAction.LOGOUT, target_type="session", actor="admin1")
        assert audit.get_logs() == []
