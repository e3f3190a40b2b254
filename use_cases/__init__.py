"""Application layer: session value, domain records, error taxonomy and the flows built on them.

Flows (`auth_flow`, `bootstrap`, `review_flow`) are imported by module path; only
the dependency-free contracts are re-exported here.
"""

from .domain_models import Appeal, BannedUser, ContentSnapshot, DashboardStats, Report, ReportDetail, Strike
from .errors import ApiError, AuthError, ConflictError, ModerationConsoleError, SessionError, ValidationError
from .session_models import Session, is_complete

__all__ = [
    "ApiError",
    "Appeal",
    "AuthError",
    "BannedUser",
    "ConflictError",
    "ContentSnapshot",
    "DashboardStats",
    "ModerationConsoleError",
    "Report",
    "ReportDetail",
    "Session",
    "SessionError",
    "Strike",
    "ValidationError",
    "is_complete",
]
