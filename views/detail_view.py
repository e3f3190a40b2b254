import logging

import streamlit as st

import auth
import ui
from services.review_state_machine import can_review_appeal, can_review_report
from use_cases import review_flow
from use_cases.domain_models import ReportDetail
from use_cases.errors import ModerationConsoleError, SessionError
from utils import session_manager
from views import markup

log = logging.getLogger(__name__)


def _load_detail(report_id: str):
    cached = st.session_state.get("detail")
    if cached and cached[0] == report_id:
        return cached[1]

    client = session_manager.get_report_client()
    try:
        with st.spinner("Loading report details..."):
            detail = client.get_report_detail(report_id)
    except SessionError as e:
        if e.reason == "expired":
            session_manager.expire_session(str(e))
            st.rerun()
        st.error(f"Failed to load report details: {e}")
        return None
    except ModerationConsoleError as e:
        log.warning(f"⚠️ Detail load failed for {report_id}: {e}")
        st.error(f"Failed to load report details: {e}")
        return None

    st.session_state.detail = (report_id, detail)
    return detail


def _render_listed_report(report_id: str):
    """Fallback card from the dashboard listing; actions stay hidden until the detail loads."""
    view = st.session_state.get("dashboard")
    listed = view.find_report(report_id) if view is not None else None
    if listed is not None:
        ui.render_html(markup.report_card(listed))


def _action_kwargs() -> dict:
    return {
        "audit": auth.get_audit_repo(),
        "actor": session_manager.get_session_manager().identity,
    }


def _render_review_form(detail: ReportDetail):
    report = detail.report
    action_key = f"review_{report.id}"
    locked = session_manager.is_submitted(action_key)

    st.markdown("#### Admin Review")
    notes = st.text_area(
        "Admin Notes",
        placeholder="Optional notes about your decision...",
        key=f"notes_{report.id}",
        disabled=locked,
    )

    c1, c2, c3 = st.columns(3)
    choice = None
    if c1.button("✅ Valid Report (Strike User)", key=f"{action_key}_strike", disabled=locked, type="primary", use_container_width=True):
        choice = ("resolved_valid", True)
    if c2.button("⚠️ Valid (No Strike)", key=f"{action_key}_nostrike", disabled=locked, use_container_width=True):
        choice = ("resolved_valid", False)
    if c3.button("❌ Invalid Report", key=f"{action_key}_invalid", disabled=locked, use_container_width=True):
        choice = ("resolved_invalid", False)

    if choice is None:
        return
    decision, should_strike = choice
    session_manager.mark_submitted(action_key)
    with st.spinner("Submitting review..."):
        result = review_flow.review_report(
            session_manager.get_report_client(),
            report.id,
            decision,
            should_strike,
            notes,
            report=report,
            **_action_kwargs(),
        )
    if session_manager.apply_action_result(result, action_key):
        st.rerun()


def _render_appeal_form(detail: ReportDetail):
    report = detail.report
    action_key = f"appeal_{report.id}"
    locked = session_manager.is_submitted(action_key)

    st.markdown("#### Review Appeal")
    response = st.text_area(
        "Response to user (required)",
        placeholder="Explain your decision to the user...",
        key=f"appeal_response_{report.id}",
        disabled=locked,
    )

    c1, c2 = st.columns(2)
    approved = None
    if c1.button("✅ Approve Appeal (Remove Strike)", key=f"{action_key}_approve", disabled=locked, type="primary", use_container_width=True):
        approved = True
    if c2.button("❌ Reject Appeal", key=f"{action_key}_reject", disabled=locked, use_container_width=True):
        approved = False

    if approved is None:
        return
    session_manager.mark_submitted(action_key)
    with st.spinner("Submitting appeal decision..."):
        result = review_flow.review_appeal(
            session_manager.get_report_client(),
            report.id,
            approved,
            response,
            report=report,
            appeal=detail.appeal,
            **_action_kwargs(),
        )
    if session_manager.apply_action_result(result, action_key):
        st.rerun()


def render_detail_panel(report_id: str):
    with st.container(border=True):
        c_title, c_close = st.columns([6, 1])
        c_title.subheader(f"🔎 Report {report_id}")
        if c_close.button("✖ Close", key="close_detail"):
            session_manager.close_detail()
            st.rerun()

        detail = _load_detail(report_id)
        if detail is None:
            _render_listed_report(report_id)
            return

        ui.render_html(markup.detail_view(detail))

        if detail.report.status == "appealed":
            if can_review_appeal(detail.report, detail.appeal):
                _render_appeal_form(detail)
            elif detail.appeal is not None:
                st.info("This appeal has already been reviewed.")
        elif can_review_report(detail.report):
            _render_review_form(detail)
