import sqlite3
import json
from typing import Optional, Dict, Any, List, Tuple
from datetime import datetime
import logging
from enum import Enum

log = logging.getLogger(__name__)

class AuditAction(str, Enum):
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAIL = "LOGIN_FAIL"
    LOGOUT = "LOGOUT"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    REPORT_REVIEW = "REPORT_REVIEW"
    APPEAL_REVIEW = "APPEAL_REVIEW"
    STRIKES_RESET = "STRIKES_RESET"
    PROCESS_NEXT = "PROCESS_NEXT"
    ACTION_REJECTED = "ACTION_REJECTED"

ALLOWED_METADATA_KEYS = {
    "reason", "decision", "should_strike", "approved", "code",
    "status_code", "error_message",
}

class SQLiteAuditRepository:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def log_action(
        self,
        action: Any,
        target_type: str,
        actor: Optional[str] = None,
        target_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        result: str = "success"
    ):
        """Logs an operator action. Metadata is filtered to known keys and JSON serialized."""
        try:
            meta_str = None
            if metadata is not None:
                safe_meta = {}
                for k, v in metadata.items():
                    if k in ALLOWED_METADATA_KEYS and "password" not in str(v).lower() and "token" not in str(v).lower():
                        safe_meta[k] = v
                try:
                    meta_str = json.dumps(safe_meta)
                    if len(meta_str) > 2000:
                        safe_meta["truncated"] = True
                        meta_str = json.dumps(safe_meta)[:2000]
                except (TypeError, ValueError):
                    meta_str = "{\"error\": \"unserializable\"}"

            ts = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S")
            action_val = action.value if hasattr(action, "value") else str(action)[:50]
            if not action_val: action_val = "UNKNOWN"

            target_type = str(target_type)[:50] if target_type else "UNKNOWN"
            actor = str(actor)[:100] if actor is not None else None
            target_id = str(target_id)[:100] if target_id is not None else None
            result = str(result)[:20] if result else "unknown"

            with self._conn() as conn:
                conn.execute("""
                    INSERT INTO audit_log
                    (ts, actor, action, target_type, target_id, metadata_json, result)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (ts, actor, action_val, target_type, target_id, meta_str, result))
                conn.commit()
        except Exception as e:
            # Audit failures must not break the operator's action
            log.error(f"Audit log failed for action {action}: {e}", exc_info=True)

    def get_logs(self, limit: int = 100, action_filter: Optional[str] = None) -> List[Tuple]:
        """Most recent audit rows, newest first."""
        try:
            with self._conn() as conn:
                query = """
                    SELECT id, ts, COALESCE(actor, 'SYSTEM'), action, target_type, target_id, metadata_json, result
                    FROM audit_log
                    WHERE 1=1
                """
                params = []
                if action_filter and action_filter != "All":
                    query += " AND action = ?"
                    params.append(action_filter)

                query += " ORDER BY id DESC LIMIT ?"
                params.append(limit)

                return conn.execute(query, tuple(params)).fetchall()
        except Exception as e:
            log.error(f"Failed to fetch audit logs: {e}", exc_info=True)
            return []
