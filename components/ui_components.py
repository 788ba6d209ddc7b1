"""
OpenSix Prediction - UI Components
==================================
Reusable UI building blocks following the Linear design system.
"""

import streamlit as st
from typing import List, Dict, Any
from linear_theme import COLORS, badge, stat_card

# =============================================================================
# LAYOUT COMPONENTS
# =============================================================================

def brand_header():
    """Render the OpenSix logo mark and name."""
    st.markdown(f'''
    <div style="display: flex; align-items: center; gap: 0.5rem;">
        <div style="
            width: 2rem; height: 2rem; border-radius: 8px;
            background: linear-gradient(135deg, {COLORS['accent']}, {COLORS['accent_secondary']});
            display: flex; align-items: center; justify-content: center;
        ">🧠</div>
        <span style="font-weight: 700; font-size: 1.125rem; color: {COLORS['text_primary']};">OpenSix</span>
    </div>
    ''', unsafe_allow_html=True)


def page_header(title: str, subtitle: str = None, tag: str = None):
    """
    Render a page header with title, optional subtitle and tag badge.

    Args:
        title: Main page title
        subtitle: Optional description text
        tag: Optional small badge shown above the title
    """
    tag_html = f'<div style="margin-bottom: 0.5rem;">{badge(tag, "accent")}</div>' if tag else ''
    st.markdown(f'''
    <div style="margin-bottom: 1.5rem;">
        {tag_html}
        <h1 style="
            font-size: 2rem;
            font-weight: 700;
            color: {COLORS['text_primary']};
            margin: 0 0 0.25rem 0;
            letter-spacing: -0.02em;
        ">{title}</h1>
        {f'<p style="color: {COLORS["text_tertiary"]}; margin: 0; font-size: 0.9375rem;">{subtitle}</p>' if subtitle else ''}
    </div>
    ''', unsafe_allow_html=True)


def metric_row(metrics: List[Dict[str, Any]], columns: int = 4):
    """
    Render a row of metric cards.

    Args:
        metrics: List of dicts with keys: label, value, trend (optional), trend_positive (optional)
        columns: Number of columns
    """
    cols = st.columns(columns)
    for i, metric in enumerate(metrics):
        with cols[i % columns]:
            st.markdown(
                stat_card(
                    title=metric['label'],
                    value=metric['value'],
                    trend=metric.get('trend'),
                    trend_positive=metric.get('trend_positive', True),
                ),
                unsafe_allow_html=True
            )


def info_card(title: str, content: str, icon: str = None, variant: str = 'default'):
    """
    Render an information card.

    Args:
        title: Card title
        content: Card content (can include HTML)
        icon: Optional emoji icon
        variant: 'default', 'accent', 'success', 'warning', 'error'
    """
    border_colors = {
        'default': COLORS['border_subtle'],
        'accent': COLORS['accent'],
        'success': COLORS['success'],
        'warning': COLORS['warning'],
        'error': COLORS['error'],
    }
    border_color = border_colors.get(variant, border_colors['default'])

    icon_html = f'<span style="font-size: 1.25rem; margin-right: 0.5rem;">{icon}</span>' if icon else ''

    st.markdown(f'''
    <div style="
        background-color: {COLORS['bg_surface']};
        border: 1px solid {COLORS['border_subtle']};
        border-left: 3px solid {border_color};
        border-radius: 12px;
        padding: 1rem 1.25rem;
        margin-bottom: 1rem;
    ">
        <div style="display: flex; align-items: center; margin-bottom: 0.5rem;">
            {icon_html}
            <span style="font-size: 0.9375rem; font-weight: 600; color: {COLORS['text_primary']};">{title}</span>
        </div>
        <div style="font-size: 0.875rem; color: {COLORS['text_secondary']}; line-height: 1.5;">{content}</div>
    </div>
    ''', unsafe_allow_html=True)


def bullet_list(items: List[str], icon: str = "•") -> str:
    """HTML list of items prefixed with an icon."""
    return "".join(f'<div style="margin-bottom: 0.25rem;">{icon} {item}</div>' for item in items)
