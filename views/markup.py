"""Pure state -> HTML builders for cards and the report detail view.

Nothing here touches Streamlit; every optional field that is absent drops
its whole section instead of rendering an empty box.
"""

from html import escape
from typing import Iterable, List, Optional

from services import formatting
from services.dashboard_service import EMPTY_STATES
from use_cases.domain_models import AiDecision, Appeal, BannedUser, ContentSnapshot, Report, ReportDetail


def _e(value) -> str:
    if value is None:
        return ""
    return escape(str(value), quote=True)


def _badges(report: Report) -> str:
    return (
        f'<span class="reason-badge reason-{_e(report.reason)}">{_e(formatting.format_reason(report.reason))}</span>'
        f'<span class="status-badge status-{_e(report.status)}">{_e(formatting.format_status(report.status))}</span>'
    )


def _avatar(image_url: Optional[str], name: Optional[str]) -> str:
    if image_url:
        return f'<div class="detail-avatar"><img src="{_e(image_url)}" alt=""></div>'
    initial = (name or "U")[:1].upper()
    return f'<div class="detail-avatar">{_e(initial)}</div>'


def _section(title: str, body: str) -> str:
    return f'<div class="detail-section"><h3>{_e(title)}</h3>{body}</div>'


def empty_state(tab: str) -> str:
    icon, text = EMPTY_STATES.get(tab, ("📋", "Nothing here"))
    return (
        '<div class="empty-state">'
        f'<div class="empty-state-icon">{icon}</div>'
        f'<div class="empty-state-text">{_e(text)}</div>'
        "</div>"
    )


def report_card(report: Report) -> str:
    parts = [
        '<div class="report-card">',
        '<div class="report-card-header">',
        f'<div class="report-card-reason">{_badges(report)}</div>',
        f'<span class="report-card-type">{_e(report.content_type)}</span>',
        "</div>",
        '<div class="report-card-users">',
        f"<span>Reporter: <strong>{_e(report.reporter_name or report.reporter_id)}</strong></span>",
        f"<span>Reported: <strong>{_e(report.reported_user_name or report.reported_user_id)}</strong></span>",
        "</div>",
    ]
    if report.content_preview:
        parts.append(f'<div class="report-card-preview">{_e(report.content_preview)}</div>')
    if report.description:
        parts.append(f'<div class="report-card-meta"><span>📝 {_e(report.description)}</span></div>')
    author = f"by {_e(report.content_author_name)}" if report.content_author_name else ""
    parts.append(
        f'<div class="report-card-meta"><span>{_e(formatting.format_date(report.created_at))}</span><span>{author}</span></div>'
    )
    parts.append("</div>")
    return "".join(parts)


def appeal_card(appeal: Appeal) -> str:
    state_class = "appeal-pending" if appeal.is_pending else "appeal-resolved"
    reason = appeal.report_reason or "other"
    parts = [
        f'<div class="report-card {state_class}">',
        '<div class="report-card-header">',
        '<div class="report-card-reason">',
        f'<span class="reason-badge reason-{_e(reason)}">{_e(formatting.format_reason(reason))}</span>',
        f'<span class="appeal-status-badge appeal-status-{_e(appeal.status)}">{_e(formatting.format_appeal_status(appeal.status))}</span>',
        "</div>",
        f'<span class="report-card-type">{_e(appeal.content_type)}</span>',
        "</div>",
        '<div class="report-card-users">',
        f"<span>Appealed by: <strong>{_e(appeal.reported_user_name)}</strong></span>",
        f"<span>Reporter: <strong>{_e(appeal.reporter_name)}</strong></span>",
        "</div>",
        f'<div class="report-card-preview">{_e(appeal.appeal_reason)}</div>',
    ]
    if appeal.admin_response:
        parts.append(
            f'<div class="admin-response-preview"><span class="admin-label">Admin:</span> {_e(appeal.admin_response)}</div>'
        )
    meta = [f"<span>Appealed: {_e(formatting.format_date(appeal.created_at))}</span>"]
    if appeal.resolved_at:
        meta.append(f"<span>Resolved: {_e(formatting.format_date(appeal.resolved_at))}</span>")
    parts.append(f'<div class="report-card-meta">{"".join(meta)}</div>')
    parts.append("</div>")
    return "".join(parts)


def strike_history(strikes: Iterable) -> str:
    items = [
        '<div class="strike-item">'
        f'<span class="strike-number">#{i}</span>'
        f'<span class="strike-reason">{_e(s.reason)}</span>'
        f'<span class="strike-date">{_e(formatting.format_date(s.created_at))}</span>'
        "</div>"
        for i, s in enumerate(strikes, start=1)
    ]
    if not items:
        return ""
    return f'<div class="strikes-list"><h4>Strike History</h4>{"".join(items)}</div>'


def banned_user_card(user: BannedUser) -> str:
    return (
        '<div class="banned-user-card">'
        '<div class="banned-user-info">'
        f"{_avatar(user.avatar_url, user.user_name)}"
        "<div>"
        f'<div class="banned-user-name">{_e(user.user_name or user.user_id)}</div>'
        f'<div class="banned-user-meta">ID: {_e(user.user_id)} &middot; Strikes: {user.strike_count}'
        f" &middot; Banned: {_e(formatting.format_date(user.banned_at))}</div>"
        "</div></div>"
        f'<div class="banned-user-reason"><strong>Ban reason:</strong> {_e(user.reason)}</div>'
        f"{strike_history(user.strikes)}"
        "</div>"
    )


def _people_section(report: Report, content: ContentSnapshot) -> str:
    author_name = content.user_name or report.reported_user_name or report.reported_user_id
    return _section(
        "People involved",
        '<div class="detail-users">'
        '<div class="detail-user">'
        f"{_avatar(content.user_avatar_url, content.user_name)}"
        f'<div class="detail-user-info"><div class="detail-user-name">{_e(author_name)}</div>'
        '<div class="detail-user-role">Reported user (author)</div></div>'
        "</div>"
        '<div class="detail-user">'
        '<div class="detail-avatar">R</div>'
        f'<div class="detail-user-info"><div class="detail-user-name">User {_e(report.reporter_name or report.reporter_id)}</div>'
        '<div class="detail-user-role">Reporter</div></div>'
        "</div>"
        "</div>",
    )


def _content_section(report: Report, content: ContentSnapshot) -> str:
    is_post = report.content_type == "post"
    text = content.text or report.content_preview
    body: List[str] = []
    if text:
        body.append(f'<div class="detail-content-text">{_e(text)}</div>')
    if is_post and content.media_url:
        body.append(f'<div class="detail-content-image"><img src="{_e(content.media_url)}" alt="Post image"></div>')
    if is_post and content.category:
        tags = f" &middot; Tags: {_e(content.hashtags)}" if content.hashtags else ""
        body.append(f'<div class="detail-content-category">Category: <strong>{_e(content.category)}</strong>{tags}</div>')
    if not body:
        # The content was edited or deleted after the report was filed.
        return ""
    title = "Reported Post" if is_post else "Reported Comment"
    return _section(title, f'<div class="detail-content-box">{"".join(body)}</div>')


def _ai_section(decision: Optional[AiDecision]) -> str:
    if decision is None:
        return ""
    verdict = "🚩 AI found violation" if decision.is_violation else "✅ AI found no violation"
    if decision.confidence:
        verdict += f" ({round(decision.confidence * 100)}% confidence)"
    suggested = ""
    if decision.suggested_action:
        suggested = f'<div class="ai-decision-suggested">Suggested: <strong>{_e(decision.suggested_action)}</strong></div>'
    return _section(
        "AI Analysis",
        '<div class="ai-decision">'
        f'<div class="ai-decision-result">{verdict}</div>'
        f'<div class="ai-decision-reasoning">{_e(decision.reasoning)}</div>'
        f"{suggested}"
        "</div>",
    )


def _appeal_section(appeal: Optional[Appeal]) -> str:
    if appeal is None:
        return ""
    response = ""
    if appeal.admin_response:
        response = f'<div class="admin-response-box"><strong>Admin Response:</strong> {_e(appeal.admin_response)}</div>'
    return _section(
        "User Appeal",
        '<div class="appeal-box">'
        f'<div class="appeal-reason">{_e(appeal.appeal_reason)}</div>'
        f'<div class="appeal-meta">Submitted: {_e(formatting.format_date(appeal.created_at))}'
        f" &middot; Status: <strong>{_e(appeal.status)}</strong></div>"
        f"{response}"
        "</div>",
    )


def detail_view(detail: ReportDetail) -> str:
    report, content = detail.report, detail.content
    sections = [
        '<div class="detail-header">'
        f"<h2>Report: {_e(formatting.format_reason(report.reason))}</h2>"
        f'<div class="detail-meta">{_badges(report)}<span class="report-card-type">{_e(report.content_type)}</span></div>'
        "</div>",
        _people_section(report, content),
        _content_section(report, content),
    ]
    if report.description:
        sections.append(_section("Reporter's Description", f'<div class="detail-description">"{_e(report.description)}"</div>'))
    sections.append(_ai_section(report.ai_decision))
    sections.append(_appeal_section(detail.appeal))
    if report.admin_notes:
        sections.append(_section("Previous Admin Notes", f'<div class="detail-description">{_e(report.admin_notes)}</div>'))
    return "".join(s for s in sections if s)
