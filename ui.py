import streamlit as st

from services.dashboard_service import TAB_LABELS
from use_cases.domain_models import DashboardStats
from views import markup

def setup_style():
    st.markdown("""
    <style>
        :root {
            --card-bg: #1a1d29;
            --card-border: #2a2e3f;
            --text-soft: #8b8fa3;
            --accent: #6c7bff;
            --ok: #2ecc71;
            --warn: #f1c40f;
            --bad: #e74c3c;
        }

        .report-card, .banned-user-card {
            background: var(--card-bg);
            border: 1px solid var(--card-border);
            border-radius: 12px;
            padding: 14px 16px;
            margin-bottom: 6px;
        }
        .report-card.appeal-pending { border-left: 3px solid var(--warn); }
        .report-card.appeal-resolved { opacity: 0.8; }

        .report-card-header, .report-card-users, .report-card-meta {
            display: flex;
            justify-content: space-between;
            gap: 12px;
        }
        .report-card-users, .report-card-meta { font-size: 13px; color: var(--text-soft); margin-top: 6px; }
        .report-card-preview {
            margin-top: 8px;
            padding: 8px 10px;
            border-radius: 8px;
            background: rgba(255, 255, 255, 0.04);
            white-space: pre-wrap;
        }
        .report-card-type { font-size: 12px; text-transform: uppercase; color: var(--text-soft); }

        .reason-badge, .status-badge, .appeal-status-badge {
            display: inline-block;
            font-size: 12px;
            font-weight: 600;
            padding: 2px 8px;
            border-radius: 999px;
            margin-right: 6px;
            background: rgba(108, 123, 255, 0.18);
        }
        .reason-harassment, .reason-impersonation { background: rgba(231, 76, 60, 0.2); }
        .reason-spam, .reason-fake { background: rgba(241, 196, 15, 0.2); }
        .status-resolved_valid, .appeal-status-approved { background: rgba(46, 204, 113, 0.2); }
        .status-resolved_invalid, .appeal-status-rejected { background: rgba(139, 143, 163, 0.25); }
        .status-appealed, .appeal-status-pending { background: rgba(241, 196, 15, 0.25); }

        .detail-section { margin-top: 18px; }
        .detail-section h3 { font-size: 15px; margin-bottom: 8px; }
        .detail-users { display: flex; gap: 24px; }
        .detail-user { display: flex; align-items: center; gap: 10px; }
        .detail-avatar {
            width: 36px; height: 36px;
            border-radius: 50%;
            display: flex; align-items: center; justify-content: center;
            background: var(--accent);
            font-weight: 700;
            overflow: hidden;
        }
        .detail-avatar img { width: 100%; height: 100%; object-fit: cover; }
        .detail-user-role, .appeal-meta, .banned-user-meta, .detail-content-category, .ai-decision-suggested {
            font-size: 12px;
            color: var(--text-soft);
        }
        .detail-content-box, .appeal-box, .ai-decision {
            background: rgba(255, 255, 255, 0.04);
            border: 1px solid var(--card-border);
            border-radius: 10px;
            padding: 12px;
        }
        .detail-content-image img { max-width: 100%; border-radius: 8px; margin-top: 8px; }
        .detail-description { font-style: italic; }
        .admin-response-box, .admin-response-preview { margin-top: 8px; font-size: 13px; }

        .banned-user-info { display: flex; align-items: center; gap: 12px; }
        .banned-user-name { font-weight: 700; }
        .strike-item { display: flex; gap: 10px; font-size: 13px; padding: 2px 0; }
        .strike-number { color: var(--bad); font-weight: 700; }
        .strike-date { margin-left: auto; color: var(--text-soft); }

        .empty-state { text-align: center; padding: 36px 0; color: var(--text-soft); }
        .empty-state-icon { font-size: 32px; }
    </style>
    """, unsafe_allow_html=True)

def render_html(html: str):
    if html:
        st.markdown(html, unsafe_allow_html=True)

def render_empty_state(tab: str):
    render_html(markup.empty_state(tab))

def render_stats(counters: DashboardStats):
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("⏳ Pending", counters.total_pending)
    c2.metric("📨 Appealed", counters.total_appealed)
    c3.metric("✅ Resolved today", counters.total_resolved_today)
    c4.metric("🚫 Banned users", counters.total_banned_users)

def tab_label(tab: str, count: int) -> str:
    return f"{TAB_LABELS.get(tab, tab)} ({count})"
