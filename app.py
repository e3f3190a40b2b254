import streamlit as st
from datetime import datetime, timezone

from infrastructure.observability import setup_observability, tag_admin
setup_observability()

import ui
from use_cases import auth_flow, bootstrap
from views import dashboard_view, login_view

# --- PAGE SETTINGS ---
st.set_page_config(page_title="Moderation Console", page_icon="🛡️", layout="wide", initial_sidebar_state="collapsed")

# Health Check (Basic load-balancer heartbeat)
if st.query_params.get("health") == "1":
    st.write({"status": "ok", "version": "1.0", "time": datetime.now(timezone.utc).isoformat()})
    st.stop()

ui.setup_style()

# --- STARTUP ORCHESTRATION ---
startup_result = bootstrap.run_startup()
if startup_result.status == "STOP":
    st.error(f"🚨 Local storage is unavailable: {startup_result.message}")
    st.stop()

# --- AUTH GATE ---
# init session -> restore stored credential -> first API call validates it
auth_result = auth_flow.ensure_authenticated_session()

if auth_result.status == "STOP":
    login_view.render_auth_screen()
    st.stop()

tag_admin(auth_result.identity)

# === MAIN INTERFACE ===
dashboard_view.render_dashboard()
