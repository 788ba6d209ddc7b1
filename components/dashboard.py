"""
Dashboard
=========
Forecast results, the factors behind them, and the marketing creative studio.
"""

import logging

import plotly.graph_objects as go
import streamlit as st

from components.ui_components import bullet_list, info_card, metric_row, page_header
from linear_theme import COLORS, empty_state, format_currency, format_percent, section_header
from models import IMAGE_SIZES, PredictionResult
from services.gemini_service import CreativeGenerationError
from services.session_manager import AppServices, SessionManager

logger = logging.getLogger(__name__)

CHART_COLORS = {
    'forecast': COLORS['accent'],
    'band': 'rgba(99, 102, 241, 0.15)',
}


# =============================================================================
# CHARTS
# =============================================================================

def create_forecast_chart(prediction: PredictionResult, currency_prefix: str = "R$") -> go.Figure:
    """7-day forecast line with its upper/lower band."""
    df = prediction.chart_frame()
    fig = go.Figure()

    if df.empty:
        return fig

    days = df['day'].tolist()
    fig.add_trace(go.Scatter(
        x=days + days[::-1],
        y=df['upper'].tolist() + df['lower'].tolist()[::-1],
        fill='toself',
        fillcolor=CHART_COLORS['band'],
        line=dict(color='rgba(0,0,0,0)'),
        name='Range',
        hoverinfo='skip',
    ))
    fig.add_trace(go.Scatter(
        x=days,
        y=df['value'].tolist(),
        name='Forecast',
        mode='lines+markers',
        line=dict(color=CHART_COLORS['forecast'], width=3),
        fill='tozeroy',
        fillcolor='rgba(99, 102, 241, 0.08)',
    ))

    fig.update_layout(
        height=320,
        hovermode='x unified',
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        font=dict(color=COLORS['text_secondary']),
        margin=dict(l=0, r=0, t=10, b=0),
        showlegend=False,
    )
    fig.update_yaxes(tickformat=',.0f', tickprefix=f'{currency_prefix} ', gridcolor=COLORS['border_subtle'])
    fig.update_xaxes(showgrid=False)
    return fig


# =============================================================================
# SECTIONS
# =============================================================================

def _render_factors(prediction: PredictionResult):
    section_header("Key factors")
    for factor in prediction.factors:
        info_card(
            factor.name,
            f"Impact: {factor.impact}",
            icon="📈" if factor.positive else "📉",
            variant='success' if factor.positive else 'error',
        )


def _render_sources(prediction: PredictionResult):
    if not prediction.search_sources:
        return
    section_header("Sources", "Live web data used to ground this forecast")
    links = [f'<a href="{s.uri}" target="_blank">{s.title or s.uri}</a>' for s in prediction.search_sources]
    info_card("Google Search", bullet_list(links, "🔗"), icon="🔎")


def _render_creative_studio(services: AppServices):
    section_header("Creative studio", "AI-generated ad image for your store")
    profile = services.session.profile

    size = st.radio("Image size", IMAGE_SIZES, horizontal=True, key="creative_size")
    if st.button("Generate creative", key="creative_generate", type="primary"):
        with st.spinner("Generating image..."):
            try:
                creative = services.forecasts.generate_creative(profile, size)
            except CreativeGenerationError as e:
                st.error(str(e))
            except Exception as e:
                logger.error("Creative generation failed: %s", e)
                st.error("Could not generate the image. Try again in a moment.")
            else:
                SessionManager.set(SessionManager.CREATIVE, creative)

    creative = SessionManager.get(SessionManager.CREATIVE)
    if creative is not None:
        st.image(creative.data, use_container_width=True)
        extension = creative.mime_type.split("/")[-1]
        st.download_button(
            "Download",
            data=creative.data,
            file_name=f"opensix-creative.{extension}",
            mime=creative.mime_type,
            key="creative_download",
        )


def render_dashboard(services: AppServices):
    """Render the dashboard for the session's profile and prediction."""
    session = services.session
    prediction = session.prediction
    profile = session.profile
    prefix = services.settings.currency_prefix

    if prediction is None or profile is None:
        empty_state("No forecast yet", "Complete the onboarding to generate your first forecast.")
        if st.button("Start onboarding", key="dashboard_onboarding"):
            session.restart_onboarding()
            st.rerun()
        return

    page_header(
        "Your 7-day forecast",
        subtitle=profile.niche or None,
        tag=f"CONFIDENCE {format_percent(prediction.confidence_score, 0)}",
    )

    metric_row([
        {'label': 'PREDICTED REVENUE', 'value': format_currency(prediction.predicted_revenue, prefix)},
        {'label': 'CONFIDENCE', 'value': format_percent(prediction.confidence_score, 0)},
        {'label': 'AVERAGE TICKET', 'value': format_currency(profile.avg_ticket or 0, prefix)},
        {'label': 'REVENUE GOAL', 'value': format_currency(profile.revenue_goal or 0, prefix)},
    ])

    forecast_tab, studio_tab = st.tabs(["📈 Forecast", "🎨 Creative studio"])

    with forecast_tab:
        st.plotly_chart(create_forecast_chart(prediction, prefix), use_container_width=True)

        if prediction.explanation:
            info_card("Why this forecast", prediction.explanation, icon="🧠", variant='accent')

        left, right = st.columns([1, 1])
        with left:
            _render_factors(prediction)
        with right:
            _render_sources(prediction)

        if st.button("🔄 Refresh forecast", key="dashboard_refresh"):
            with st.spinner("Updating forecast..."):
                try:
                    updated = services.forecasts.refresh(profile, session.profile_id)
                except Exception as e:
                    logger.error("Forecast refresh failed: %s", e)
                    st.error("Could not refresh the forecast.")
                else:
                    session.update_prediction(updated)
                    st.rerun()

    with studio_tab:
        _render_creative_studio(services)

    with st.expander("Saved data"):
        st.caption("Your profile and last forecast are cached in this browser so a reload opens the dashboard.")
        if st.button("Forget cached data and start over", key="dashboard_clear_cache"):
            session.clear_cached_data()
            SessionManager.reset_wizard()
            SessionManager.delete(SessionManager.CREATIVE)
            st.rerun()
