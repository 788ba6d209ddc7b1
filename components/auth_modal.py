"""
Auth Modal
==========
Email/password sign-in and sign-up gate shown before onboarding.
"""

import streamlit as st

from db_connector import AuthError
from linear_theme import COLORS
from services.session_context import SessionContext

MIN_PASSWORD_LENGTH = 6


def validate_credentials(email: str, password: str):
    """Return an error message for the form, or None if it can be submitted."""
    if not email or "@" not in email:
        return "Please enter a valid email address."
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    return None


def render_auth_modal(session: SessionContext):
    """Render the auth form while the gate is open."""
    if not session.auth_open:
        return

    is_login = st.session_state.get("auth_is_login", True)

    with st.container(border=True):
        title_col, close_col = st.columns([5, 1])
        with title_col:
            st.markdown(f"## {'Welcome back' if is_login else 'Create your account'}")
        with close_col:
            if st.button("✕", key="auth_close"):
                session.close_auth()
                st.rerun()

        if session.demo_mode:
            st.info("Supabase is not configured. Your data will only be saved on this machine.")
            if st.button("Continue in demo mode", key="auth_demo", type="primary", use_container_width=True):
                session.continue_as_demo()
                st.rerun()
            return

        with st.form("auth_form", clear_on_submit=False):
            email = st.text_input("Email", placeholder="you@email.com")
            password = st.text_input("Password", type="password", placeholder="••••••••")
            submitted = st.form_submit_button(
                "Sign in" if is_login else "Start evaluation",
                type="primary",
                use_container_width=True,
            )

        if submitted:
            error = validate_credentials(email, password)
            if error:
                st.error(error)
            else:
                with st.spinner("Authenticating..."):
                    try:
                        if is_login:
                            session.sign_in(email, password)
                        else:
                            session.sign_up(email, password)
                    except AuthError as e:
                        st.error(str(e) or "Something went wrong. Check your credentials.")
                    else:
                        st.rerun()

        prompt = "Don't have an account?" if is_login else "Already have an account?"
        st.markdown(f"<span style='color: {COLORS['text_secondary']}; font-size: 0.875rem;'>{prompt}</span>",
                    unsafe_allow_html=True)
        if st.button("Sign up" if is_login else "Sign in", key="auth_toggle"):
            st.session_state["auth_is_login"] = not is_login
            st.rerun()
