"""Display helpers for reasons, statuses and the API's mixed date formats."""

from datetime import date, datetime, timezone
from typing import Any, Optional

REASON_LABELS = {
    "spam": "Spam",
    "harassment": "Harassment",
    "inappropriate": "Inappropriate",
    "fake": "Fake / Misleading",
    "impersonation": "Impersonation",
    "other": "Other",
}

STATUS_LABELS = {
    "pending": "Pending",
    "reviewing": "Reviewing",
    "resolved_valid": "Valid",
    "resolved_invalid": "Invalid",
    "appealed": "Appealed",
}

APPEAL_STATUS_LABELS = {
    "pending": "⏳ Pending Review",
    "approved": "✅ Approved",
    "rejected": "❌ Rejected",
}


def format_reason(reason: Optional[str]) -> str:
    return REASON_LABELS.get(reason or "", reason or "")


def format_status(status: Optional[str]) -> str:
    return STATUS_LABELS.get(status or "", status or "")


def format_appeal_status(status: Optional[str]) -> str:
    return APPEAL_STATUS_LABELS.get(status or "", status or "")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO strings, epoch seconds or epoch milliseconds (anything above 1e12)."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, str):
        raw = value.strip()
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
        try:
            value = float(raw)
        except ValueError:
            return None

    try:
        ts = float(value)
    except (TypeError, ValueError):
        return None
    if ts > 1e12:
        ts = ts / 1000
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def format_date(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d %b %Y, %H:%M")


def is_on_day(value: Any, day: date) -> bool:
    parsed = parse_timestamp(value)
    return parsed is not None and parsed.date() == day
