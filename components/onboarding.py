"""
Onboarding Wizard
=================
Six-step business profile form with AI feedback after each step.
"""

import streamlit as st
from typing import Any, Dict

from components.ui_components import bullet_list, info_card
from linear_theme import COLORS, badge
from services.wizard_service import TOTAL_STEPS, WizardController, WizardPhase

# =============================================================================
# FIELD DEFINITIONS
# =============================================================================

# attribute -> (label, kind, placeholder)
FIELDS = {
    "niche": ("What is your sector or niche?", "text", "e.g. Sustainable fashion"),
    "products": ("Main products", "text", "e.g. T-shirts, organic cotton pants"),
    "avg_ticket": ("Average ticket", "number", None),
    "monthly_revenue": ("Last month's revenue", "number", None),
    "social_url": ("Instagram or website", "text", "@yourstore or www.yourstore.com"),
    "target_audience": ("Who is your target audience?", "text", "e.g. Women 25-40, urban, eco-conscious"),
    "competitors": ("Main competitors", "text", "e.g. 3 stores or brands you compete with"),
    "ad_spend": ("Monthly ad spend", "number", None),
    "conversion_rate": ("Conversion rate (%)", "number", None),
    "revenue_goal": ("Revenue goal for next month", "number", None),
    "main_challenge": ("Biggest challenge right now", "text", "e.g. Customer acquisition cost"),
}

MONEY_FIELDS = {"avg_ticket", "monthly_revenue", "ad_spend", "revenue_goal"}


def _render_fields(wizard: WizardController, currency_prefix: str) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    profile = wizard.profile
    numeric = [name for name in wizard.step.fields if FIELDS[name][1] == "number"]
    text = [name for name in wizard.step.fields if FIELDS[name][1] == "text"]

    for name in text:
        label, _, placeholder = FIELDS[name]
        values[name] = st.text_input(label, value=getattr(profile, name) or "", placeholder=placeholder,
                                     key=f"wizard_{name}")

    if numeric:
        cols = st.columns(len(numeric))
        for col, name in zip(cols, numeric):
            label, _, _ = FIELDS[name]
            if name in MONEY_FIELDS:
                label = f"{label} ({currency_prefix})"
            with col:
                values[name] = st.number_input(label, min_value=0.0, value=float(getattr(profile, name) or 0),
                                               step=1.0, key=f"wizard_{name}")
    return values


def _render_progress(wizard: WizardController):
    game = wizard.gamification
    left, right = st.columns([3, 1])
    with left:
        st.markdown(
            f"<span style='color: {COLORS['text_tertiary']};'>Step {wizard.current_step} of {TOTAL_STEPS}</span>",
            unsafe_allow_html=True,
        )
    with right:
        st.markdown(
            f"<div style='text-align: right;'>{badge(f'LEVEL {game.level}', 'accent')} "
            f"<b style='color: {COLORS['text_primary']};'>{game.xp} XP</b></div>",
            unsafe_allow_html=True,
        )
    st.progress(min(int(max(game.progress, wizard.progress_percent())), 100))


def _render_feedback(wizard: WizardController):
    feedback = wizard.feedback
    st.markdown(f"#### 🧠 AI analysis  {badge(f'+{wizard.step.xp} XP', 'success')}", unsafe_allow_html=True)

    left, right = st.columns(2)
    with left:
        info_card("Strengths", bullet_list(feedback.strengths, "📈"), variant="success")
    with right:
        info_card("Watch out", bullet_list(feedback.weaknesses, "⚠️"), variant="warning")
    info_card("Suggestion", feedback.suggestion, icon="💡", variant="accent")
    st.caption(f"Data confidence: {feedback.confidence_score}%")


def _finish(wizard: WizardController):
    bar = st.progress(0, text="Building your forecast...")

    def on_progress(fraction: float, message: str):
        bar.progress(min(int(fraction * 100), 100), text=message)

    try:
        wizard.confirm_step(progress_callback=on_progress)
    except Exception as e:
        st.error(f"Could not generate your forecast: {e}")
        return
    st.rerun()


def render_onboarding(wizard: WizardController, currency_prefix: str = "R$"):
    """Render the current wizard step, or the feedback for the step just submitted."""
    _render_progress(wizard)
    st.markdown(f"## {wizard.step.title}")

    if wizard.phase == WizardPhase.SHOWING_FEEDBACK and wizard.feedback is not None:
        _render_feedback(wizard)
        label = "Generate my forecast" if wizard.is_last_step else "Continue ›"
        if st.button(label, key=f"wizard_continue_{wizard.current_step}", type="primary"):
            if wizard.is_last_step:
                _finish(wizard)
            else:
                wizard.confirm_step()
                st.rerun()
        return

    with st.form(f"wizard_step_{wizard.current_step}"):
        values = _render_fields(wizard, currency_prefix)
        submitted = st.form_submit_button("Analyze with AI", type="primary")

    if submitted:
        if not wizard.can_submit(values):
            st.warning("Tell us your niche to continue.")
            return
        with st.spinner("AI is analyzing your data..."):
            wizard.submit_step(wizard.current_step, values)
        st.rerun()
