"""Read-only projections of the server-owned moderation records.

The API is not consistent about key casing (the list endpoints answer in
camelCase, the content endpoint in snake_case), so every `from_api` accepts both.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

log = logging.getLogger(__name__)

ReportReason = Literal["spam", "harassment", "inappropriate", "fake", "impersonation", "other"]
ReportStatus = Literal["pending", "reviewing", "resolved_valid", "resolved_invalid", "appealed"]
AppealStatus = Literal["pending", "approved", "rejected"]
ContentType = Literal["post", "comment"]

REPORT_REASONS: Tuple[str, ...] = ("spam", "harassment", "inappropriate", "fake", "impersonation", "other")
REPORT_STATUSES: Tuple[str, ...] = ("pending", "reviewing", "resolved_valid", "resolved_invalid", "appealed")
APPEAL_STATUSES: Tuple[str, ...] = ("pending", "approved", "rejected")


def pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present, non-empty value among `keys`."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return default


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class AiDecision:
    is_violation: bool
    confidence: Optional[float] = None
    reasoning: str = ""
    suggested_action: Optional[str] = None


def parse_ai_decision(raw: Any) -> Optional[AiDecision]:
    """Parse the embedded AI analysis; anything malformed is treated as absent."""
    if raw is None or raw == "":
        return None
    data = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except ValueError:
            log.debug("Ignoring malformed AI decision payload")
            return None
    if not isinstance(data, dict):
        return None

    confidence = data.get("confidence")
    try:
        confidence = float(confidence) if confidence is not None else None
    except (TypeError, ValueError):
        confidence = None

    return AiDecision(
        is_violation=bool(data.get("isViolation") or data.get("isValid")),
        confidence=confidence,
        reasoning=str(data.get("reasoning") or ""),
        suggested_action=_as_str(data.get("suggestedAction")),
    )


@dataclass(frozen=True)
class Report:
    id: str
    reason: str
    status: str
    content_type: str
    reporter_id: str
    reported_user_id: str
    created_at: Any = None
    resolved_at: Any = None
    content_preview: Optional[str] = None
    description: Optional[str] = None
    admin_notes: Optional[str] = None
    reporter_name: Optional[str] = None
    reported_user_name: Optional[str] = None
    content_author_name: Optional[str] = None
    ai_decision: Optional[AiDecision] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Report":
        return cls(
            id=str(pick(data, "id", "reportId", "report_id", default="")),
            reason=str(pick(data, "reason", default="other")),
            status=str(pick(data, "status", default="pending")),
            content_type=str(pick(data, "contentType", "content_type", default="post")),
            reporter_id=str(pick(data, "reporterUserId", "reporter_user_id", "reporterId", default="")),
            reported_user_id=str(pick(data, "reportedUserId", "reported_user_id", default="")),
            created_at=pick(data, "createdAt", "created_at"),
            resolved_at=pick(data, "resolvedAt", "resolved_at", "updatedAt", "updated_at"),
            content_preview=_as_str(pick(data, "contentPreview", "content_preview")),
            description=_as_str(pick(data, "description")),
            admin_notes=_as_str(pick(data, "adminNotes", "admin_notes")),
            reporter_name=_as_str(pick(data, "reporterUserName", "reporter_user_name")),
            reported_user_name=_as_str(pick(data, "reportedUserName", "reported_user_name")),
            content_author_name=_as_str(pick(data, "contentAuthorName", "content_author_name")),
            ai_decision=parse_ai_decision(pick(data, "aiDecision", "ai_decision")),
        )


@dataclass(frozen=True)
class Appeal:
    report_id: str
    appeal_reason: str
    status: str
    admin_response: Optional[str] = None
    created_at: Any = None
    resolved_at: Any = None
    report_reason: Optional[str] = None
    content_type: Optional[str] = None
    reported_user_name: Optional[str] = None
    reporter_name: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Appeal":
        return cls(
            report_id=str(pick(data, "reportId", "report_id", default="")),
            appeal_reason=str(pick(data, "appealReason", "appeal_reason", default="")),
            status=str(pick(data, "status", default="pending")),
            admin_response=_as_str(pick(data, "adminResponse", "admin_response")),
            created_at=pick(data, "createdAt", "created_at"),
            resolved_at=pick(data, "resolvedAt", "resolved_at"),
            report_reason=_as_str(pick(data, "reportReason", "report_reason")),
            content_type=_as_str(pick(data, "contentType", "content_type")),
            reported_user_name=_as_str(pick(data, "reportedUserName", "reported_user_name")),
            reporter_name=_as_str(pick(data, "reporterUserName", "reporter_user_name")),
        )


@dataclass(frozen=True)
class Strike:
    reason: str
    created_at: Any = None


@dataclass(frozen=True)
class BannedUser:
    user_id: str
    strike_count: int
    banned_at: Any = None
    reason: str = ""
    strikes: Tuple[Strike, ...] = ()
    user_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BannedUser":
        strikes = tuple(
            Strike(reason=str(s.get("reason") or ""), created_at=pick(s, "createdAt", "created_at"))
            for s in (data.get("strikes") or [])
            if isinstance(s, dict)
        )
        try:
            strike_count = int(pick(data, "strikeCount", "strike_count", default=len(strikes)))
        except (TypeError, ValueError):
            strike_count = len(strikes)
        return cls(
            user_id=str(pick(data, "userId", "user_id", default="")),
            strike_count=strike_count,
            banned_at=pick(data, "bannedAt", "banned_at"),
            reason=str(pick(data, "reason", default="")),
            strikes=strikes,
            user_name=_as_str(pick(data, "userName", "user_name")),
            avatar_url=_as_str(pick(data, "avatarUrl", "avatar_url")),
        )


@dataclass(frozen=True)
class ContentSnapshot:
    """Point-in-time copy of the reported content; may be partially or fully empty."""

    text: Optional[str] = None
    user_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
    media_url: Optional[str] = None
    category: Optional[str] = None
    hashtags: Optional[str] = None

    @classmethod
    def from_api(cls, data: Any) -> "ContentSnapshot":
        if not isinstance(data, dict):
            return cls()
        hashtags = pick(data, "hashtags")
        if isinstance(hashtags, list):
            hashtags = ", ".join(str(h) for h in hashtags) or None
        return cls(
            text=_as_str(pick(data, "content", "text")),
            user_name=_as_str(pick(data, "user_name", "userName")),
            user_avatar_url=_as_str(pick(data, "user_avatar_url", "userAvatarUrl")),
            media_url=_as_str(pick(data, "media_url", "mediaUrl")),
            category=_as_str(pick(data, "category")),
            hashtags=None if hashtags in (None, "[]") else str(hashtags),
        )


@dataclass(frozen=True)
class ReportDetail:
    report: Report
    content: ContentSnapshot = field(default_factory=ContentSnapshot)
    appeal: Optional[Appeal] = None


@dataclass(frozen=True)
class DashboardStats:
    total_pending: int = 0
    total_appealed: int = 0
    total_resolved_today: int = 0
    total_banned_users: int = 0

    @classmethod
    def from_api(cls, data: Any) -> "DashboardStats":
        if not isinstance(data, dict):
            return cls()

        def _count(*keys: str) -> int:
            try:
                return int(pick(data, *keys, default=0))
            except (TypeError, ValueError):
                return 0

        return cls(
            total_pending=_count("totalPending", "total_pending"),
            total_appealed=_count("totalAppealed", "total_appealed"),
            total_resolved_today=_count("totalResolvedToday", "total_resolved_today"),
            total_banned_users=_count("totalBannedUsers", "total_banned_users"),
        )


@dataclass(frozen=True)
class DashboardSnapshot:
    stats: DashboardStats
    pending_reports: List[Report] = field(default_factory=list)
