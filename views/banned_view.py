from typing import List

import streamlit as st

import auth
import ui
from services import dashboard_service
from use_cases import review_flow
from use_cases.domain_models import BannedUser
from utils import session_manager
from views import markup


def _render_reset_form(user: BannedUser):
    action_key = f"reset_{user.user_id}"
    locked = session_manager.is_submitted(action_key)

    st.markdown("#### Reset Strikes & Unban")
    message = st.text_area(
        "Admin Message (visible to user)",
        placeholder="Explain why strikes are being reset...",
        key=f"reset_message_{user.user_id}",
        disabled=locked,
    )
    confirmed = st.checkbox(
        f"I confirm resetting all strikes and unbanning user {user.user_id}",
        key=f"reset_confirm_{user.user_id}",
        disabled=locked,
    )
    if not st.button(
        "🔓 Reset Strikes & Unban User",
        key=f"{action_key}_btn",
        disabled=locked or not confirmed,
        type="primary",
    ):
        return

    session_manager.mark_submitted(action_key)
    with st.spinner("Resetting strikes..."):
        result = review_flow.reset_strikes(
            session_manager.get_report_client(),
            user.user_id,
            message,
            confirmed,
            banned_user=user,
            audit=auth.get_audit_repo(),
            actor=session_manager.get_session_manager().identity,
        )
    if session_manager.apply_action_result(result, action_key):
        st.rerun()


def render_banned_users(users: List[BannedUser]):
    with st.expander("📊 Table view", expanded=False):
        st.dataframe(dashboard_service.banned_users_frame(users), use_container_width=True, hide_index=True)

    for user in users:
        title = f"🚫 {user.user_name or user.user_id} · {user.strike_count} strikes"
        with st.expander(title, expanded=False):
            ui.render_html(markup.banned_user_card(user))
            _render_reset_form(user)
