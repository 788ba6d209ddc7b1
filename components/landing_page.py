"""
Landing Page
============
Marketing page with the start action.
"""

import streamlit as st

from components.ui_components import brand_header, info_card
from linear_theme import COLORS, badge, stat_card
from services.session_context import SessionContext

FEATURES = [
    ("📈", "Time series + live data",
     "Time-series modeling combined with real-time Google Search data to adjust forecasts to real-world events."),
    ("🧠", "Generative AI",
     "Not just numbers. Strategic explanations of why your sales move the way they do."),
    ("🔎", "Search grounding",
     "Competitor monitoring and market trends, cited with their web sources."),
]


def render_landing_page(session: SessionContext, currency_prefix: str = "R$"):
    """Render the landing page; the start buttons open the auth gate or the wizard."""
    top_left, top_right = st.columns([4, 1])
    with top_left:
        brand_header()
    with top_right:
        if st.button("Login", key="landing_login", use_container_width=True):
            session.start_flow()
            st.rerun()

    st.markdown("<div style='height: 3rem'></div>", unsafe_allow_html=True)

    hero, preview = st.columns([3, 2])
    with hero:
        st.markdown(badge("#1 E-COMMERCE FORECASTING PLATFORM", "accent"), unsafe_allow_html=True)
        st.markdown(f'''
        <h1 style="font-size: 3rem; line-height: 1.1; color: {COLORS['text_primary']};">
            Know tomorrow's revenue today.
        </h1>
        <p style="font-size: 1.125rem;">
            Answer six quick questions about your store and get a 7-day revenue forecast,
            the factors behind it, and ready-to-use marketing creatives.
        </p>
        ''', unsafe_allow_html=True)
        if st.button("Get Started", key="landing_start", type="primary"):
            session.start_flow()
            st.rerun()
    with preview:
        st.markdown(stat_card("PREDICTED REVENUE", f"{currency_prefix} 142,050", trend="12.5%"), unsafe_allow_html=True)
        st.markdown("<div style='height: 1rem'></div>", unsafe_allow_html=True)
        st.markdown(stat_card("CONFIDENCE", "94%", subtitle="Time series + live data"), unsafe_allow_html=True)

    st.markdown("<div style='height: 3rem'></div>", unsafe_allow_html=True)

    cols = st.columns(len(FEATURES))
    for col, (icon, title, text) in zip(cols, FEATURES):
        with col:
            info_card(title, text, icon=icon)

    st.markdown("<div style='height: 2rem'></div>", unsafe_allow_html=True)
    _, pricing, _ = st.columns([1, 2, 1])
    with pricing:
        info_card(
            "Start today. Cancel anytime.",
            f"<span style='font-size: 2rem; color: {COLORS['text_primary']}; font-weight: 700;'>"
            f"{currency_prefix} 49.90</span> / month<br/>Unlimited revenue tracked",
            variant="accent",
        )
        if st.button("Lock in this price", key="landing_pricing", use_container_width=True):
            session.start_flow()
            st.rerun()

    st.caption("© OpenSix Prediction")
