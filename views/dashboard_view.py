import pandas as pd
import streamlit as st

import auth
import ui
from services import dashboard_service
from services.dashboard_service import TAB_KEYS, DashboardView
from use_cases import review_flow
from utils import session_manager
from views import banned_view, detail_view, markup

AUDIT_COLUMNS = ["ID", "Time (UTC)", "Actor", "Action", "Target type", "Target", "Details", "Result"]


def _load_dashboard():
    with st.spinner("Loading dashboard..."):
        result = review_flow.load(session_manager.get_report_client())
    if result.status == "EXPIRED":
        session_manager.expire_session(result.message)
        st.rerun()
    st.session_state.dashboard = result.dashboard


def _render_topbar(identity: str):
    c_title, c_refresh, c_ai, c_logout = st.columns([5, 1.2, 1.8, 1])
    c_title.title("🛡️ Moderation Dashboard")
    c_title.caption(f"Signed in as {identity}")

    if c_refresh.button("🔄 Refresh", use_container_width=True):
        st.session_state.dashboard = None
        st.session_state.detail = None
        st.rerun()

    if c_ai.button("🤖 Process next with AI", use_container_width=True, help="Run AI moderation on the next pending report"):
        with st.spinner("Asking the server to process the next report..."):
            result = review_flow.process_next(
                session_manager.get_report_client(),
                audit=auth.get_audit_repo(),
                actor=identity,
            )
        if session_manager.apply_action_result(result):
            st.rerun()

    if c_logout.button("Logout", key="logout_btn", type="secondary", use_container_width=True):
        session_manager.logout()


def _render_report_list(tab: str, reports):
    for report in reports:
        ui.render_html(markup.report_card(report))
        if st.button("Open", key=f"open_{tab}_{report.id}"):
            session_manager.open_detail(report.id)
            st.rerun()


def _render_appeal_list(appeals):
    for appeal in appeals:
        ui.render_html(markup.appeal_card(appeal))
        label = "Review appeal" if appeal.is_pending else "Open"
        if st.button(label, key=f"open_appeals_{appeal.report_id}"):
            session_manager.open_detail(appeal.report_id)
            st.rerun()


def _render_tab(tab: str, view: DashboardView):
    if tab not in view.loaded:
        st.error(view.errors.get(tab, "This listing was not loaded. Refresh to try again."))
        return

    items = view.listing(tab)
    if not items:
        ui.render_empty_state(tab)
        return

    if tab == "banned":
        banned_view.render_banned_users(items)
    elif tab == "appeals":
        _render_appeal_list(items)
    elif tab == "resolved":
        with st.expander("📊 Table view", expanded=False):
            st.dataframe(dashboard_service.reports_frame(items), use_container_width=True, hide_index=True)
        _render_report_list(tab, items)
    else:
        _render_report_list(tab, items)


def render_dashboard():
    manager = session_manager.get_session_manager()
    _render_topbar(manager.identity)
    session_manager.show_flash()

    if st.session_state.dashboard is None:
        _load_dashboard()

    view = st.session_state.dashboard
    # Safe default for headless/bare runs where st.rerun() does not halt execution.
    if view is None:
        return

    ui.render_stats(view.counters)

    if st.session_state.detail_report_id:
        detail_view.render_detail_panel(st.session_state.detail_report_id)

    containers = st.tabs([ui.tab_label(tab, len(view.listing(tab))) for tab in TAB_KEYS])
    for tab, container in zip(TAB_KEYS, containers):
        with container:
            _render_tab(tab, view)

    _render_audit_log()


def _render_audit_log():
    with st.expander("🧾 Audit log", expanded=False):
        rows = auth.get_audit_repo().get_logs(limit=50)
        if not rows:
            st.caption("No actions recorded yet.")
            return
        frame = pd.DataFrame(rows, columns=AUDIT_COLUMNS).drop(columns=["ID"])
        st.dataframe(frame, use_container_width=True, hide_index=True)
