"""
OpenSix Prediction
==================
Main application entry point.

Flow:
1. Landing - marketing page, "Get Started" opens the auth gate
2. Onboarding - 6-step business profile wizard with AI feedback
3. Dashboard - 7-day revenue forecast and creative studio

Run with:
    streamlit run app.py
"""

import logging

import streamlit as st

from components.auth_modal import render_auth_modal
from components.dashboard import render_dashboard
from components.landing_page import render_landing_page
from components.onboarding import render_onboarding
from components.ui_components import brand_header
from linear_theme import COLORS, configure_page
from models import AppState
from services.session_manager import AppServices, SessionManager

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# =============================================================================
# NAVIGATION
# =============================================================================

def render_nav_bar(services: AppServices):
    """Top bar shown once the user is past the landing page."""
    session = services.session
    brand_col, user_col, actions_col = st.columns([4, 2, 2])

    with brand_col:
        brand_header()
    with user_col:
        if session.demo_mode:
            label = "Local demo"
        else:
            label = (session.user.email if session.user else None) or "Signed in"
        st.markdown(
            f"<div style='text-align: right; color: {COLORS['text_tertiary']}; padding-top: 0.4rem;'>{label}</div>",
            unsafe_allow_html=True,
        )
    with actions_col:
        left, right = st.columns(2)
        with left:
            if session.app_state == AppState.DASHBOARD:
                if st.button("Edit profile", key="nav_edit", use_container_width=True):
                    SessionManager.reset_wizard()
                    session.restart_onboarding()
                    st.rerun()
            elif session.prediction is not None:
                if st.button("Dashboard", key="nav_dashboard", use_container_width=True):
                    session.go_to_dashboard()
                    st.rerun()
        with right:
            if st.button("Sign out", key="nav_sign_out", use_container_width=True):
                session.sign_out()
                SessionManager.clear_on_sign_out()
                st.rerun()

    st.markdown("---")


# =============================================================================
# MAIN
# =============================================================================

def main():
    configure_page("OpenSix Prediction")

    services = SessionManager.get_services()
    SessionManager.bootstrap_once()
    session = services.session

    if session.app_state == AppState.LANDING:
        render_auth_modal(session)
        render_landing_page(session, services.settings.currency_prefix)
        return

    render_nav_bar(services)

    if session.app_state == AppState.ONBOARDING:
        render_onboarding(SessionManager.get_wizard(), services.settings.currency_prefix)
    elif session.app_state == AppState.DASHBOARD:
        # Onboarding is finished; the next visit starts a fresh wizard.
        SessionManager.reset_wizard()
        render_dashboard(services)


if __name__ == "__main__":
    main()
