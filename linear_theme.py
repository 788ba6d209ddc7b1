"""
OpenSix Prediction - Linear Theme
=================================
Dark theme, color tokens and small HTML helpers shared by the UI components.

Usage:
    from linear_theme import configure_page
    configure_page("OpenSix Prediction")
"""

import streamlit as st
from typing import Any

# =============================================================================
# COLOR SYSTEM
# =============================================================================

COLORS = {
    # Backgrounds (darkest to lightest)
    'bg_base': '#0A0A0B',
    'bg_elevated': '#0F0F11',
    'bg_surface': '#141416',
    'bg_hover': '#1F1F23',

    # Borders
    'border_subtle': '#27272A',
    'border_default': '#3F3F46',

    # Text
    'text_primary': '#FAFAFA',
    'text_secondary': '#A1A1AA',
    'text_tertiary': '#71717A',

    # OpenSix indigo / violet
    'accent': '#6366F1',
    'accent_hover': '#4F46E5',
    'accent_secondary': '#8B5CF6',
    'accent_muted': 'rgba(99, 102, 241, 0.15)',

    # Status
    'success': '#22C55E',
    'warning': '#F59E0B',
    'error': '#EF4444',
    'info': '#3B82F6',
}

# =============================================================================
# MAIN THEME CSS
# =============================================================================

LINEAR_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');

:root {
    --bg-base: #0A0A0B;
    --bg-surface: #141416;
    --border-subtle: #27272A;
    --text-primary: #FAFAFA;
    --text-secondary: #A1A1AA;
    --text-tertiary: #71717A;
    --accent: #6366F1;
    --accent-hover: #4F46E5;
    --accent-secondary: #8B5CF6;
}

html, body, [data-testid="stAppViewContainer"] {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif !important;
    background-color: var(--bg-base) !important;
    color: var(--text-secondary) !important;
}

.stApp {
    background:
        radial-gradient(circle at 0% 0%, rgba(99, 102, 241, 0.10), transparent 40%),
        radial-gradient(circle at 100% 100%, rgba(139, 92, 246, 0.10), transparent 40%),
        var(--bg-base) !important;
}

.block-container {
    padding: 2rem 3rem !important;
    max-width: 1280px !important;
}

h1, h2, h3, h4,
.stMarkdown h1, .stMarkdown h2, .stMarkdown h3 {
    font-family: 'Inter', sans-serif !important;
    color: var(--text-primary) !important;
    font-weight: 600 !important;
    letter-spacing: -0.02em !important;
}

p, .stMarkdown p {
    color: var(--text-secondary) !important;
    line-height: 1.6 !important;
}

.stButton > button[kind="primary"] {
    background: linear-gradient(90deg, var(--accent), var(--accent-secondary)) !important;
    border: none !important;
    color: #FFFFFF !important;
}

.stButton > button:not([kind="primary"]) {
    background: var(--bg-surface) !important;
    border: 1px solid var(--border-subtle) !important;
    color: var(--text-primary) !important;
}

.stTextInput input, .stNumberInput input {
    background: var(--bg-base) !important;
    border: 1px solid var(--border-subtle) !important;
    color: var(--text-primary) !important;
    border-radius: 12px !important;
}

.stProgress > div > div > div > div {
    background: linear-gradient(90deg, var(--accent), var(--accent-secondary)) !important;
}

a {
    color: var(--accent) !important;
}
</style>
"""


def apply_theme():
    """Inject the theme CSS."""
    st.markdown(LINEAR_CSS, unsafe_allow_html=True)


def configure_page(title: str = "OpenSix Prediction"):
    """
    Configure page settings and apply theme in one call.
    """
    st.set_page_config(
        page_title=title,
        page_icon="🧠",
        layout="wide",
        initial_sidebar_state="collapsed"
    )
    apply_theme()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def format_currency(value: float, prefix: str = 'R$') -> str:
    """Format number as currency with two decimals."""
    return f"{prefix} {value:,.2f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format number as percentage."""
    return f"{value:.{decimals}f}%"


def badge(text: str, variant: str = 'neutral') -> str:
    """Create a badge HTML string."""
    color_map = {
        'accent': COLORS['accent'],
        'success': COLORS['success'],
        'warning': COLORS['warning'],
        'error': COLORS['error'],
        'info': COLORS['info'],
        'neutral': COLORS['text_tertiary'],
    }
    color = color_map.get(variant, COLORS['text_tertiary'])
    return f'<span style="background: {color}22; color: {color}; padding: 0.25rem 0.5rem; border-radius: 4px; font-size: 0.75rem; font-weight: 600; letter-spacing: 0.04em;">{text}</span>'


def stat_card(title: str, value: Any, subtitle: str = None, trend: str = None, trend_positive: bool = True) -> str:
    """Create a stat card HTML string."""
    trend_color = COLORS['success'] if trend_positive else COLORS['error']
    trend_html = f'<div style="color: {trend_color}; font-size: 0.75rem;">{"▲" if trend_positive else "▼"} {trend}</div>' if trend else ''
    subtitle_html = f'<div style="color: {COLORS["text_tertiary"]}; font-size: 0.875rem;">{subtitle}</div>' if subtitle else ''
    return f'''
    <div style="background: {COLORS["bg_surface"]}; padding: 1.25rem; border-radius: 16px; border: 1px solid {COLORS["border_subtle"]};">
        <div style="color: {COLORS["text_tertiary"]}; font-size: 0.875rem; margin-bottom: 0.5rem;">{title}</div>
        <div style="color: {COLORS["text_primary"]}; font-size: 1.5rem; font-weight: 600; margin-bottom: 0.25rem;">{value}</div>
        {subtitle_html}
        {trend_html}
    </div>
    '''


def section_header(title: str, subtitle: str = None) -> None:
    """Render a section header."""
    st.markdown(f'### {title}')
    if subtitle:
        st.caption(subtitle)


def empty_state(title: str, description: str = None) -> None:
    """Render an empty state component."""
    st.markdown(f'''
    <div style="text-align: center; padding: 3rem 2rem; color: {COLORS["text_tertiary"]};">
        <div style="font-size: 1.25rem; font-weight: 600; color: {COLORS["text_primary"]}; margin-bottom: 0.5rem;">{title}</div>
        {f'<div>{description}</div>' if description else ''}
    </div>
    ''', unsafe_allow_html=True)
