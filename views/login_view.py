import time

import streamlit as st

from use_cases import auth_flow
from utils import session_manager

def render_auth_screen():
    st.title("🛡️ Moderation Console")
    st.caption("Sign in with your admin account to review reports, appeals and bans.")

    login_error = st.session_state.get("login_error")
    if login_error:
        st.warning(login_error)

    with st.form("login_form", clear_on_submit=False):
        user_id = st.text_input("Admin ID")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")
        if submitted:
            with st.spinner("Signing in..."):
                result = auth_flow.login(user_id, password)
            if result.status == "CONTINUE":
                # Only this browser may restore the stored session after a reload
                session_manager.remember_browser_key()
                time.sleep(1)  # Give JS time to execute
                st.rerun()
            st.error(result.message)
