"""
Configuration
=============
Settings for Supabase, Gemini and the local fallback store (one JSON file
per browser under ``local_store_dir``).

Values are read from Streamlit secrets when running under Streamlit, and from
environment variables otherwise (tests, scripts).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_FEEDBACK_MODEL = "gemini-3-flash-preview"
DEFAULT_FORECAST_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-3-pro-image-preview"
DEFAULT_LOCAL_STORE_DIR = Path.home() / ".opensix" / "browsers"


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    gemini_api_key: str
    feedback_model: str = DEFAULT_FEEDBACK_MODEL
    forecast_model: str = DEFAULT_FORECAST_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    local_store_dir: Path = DEFAULT_LOCAL_STORE_DIR
    rehydrate_remote_profile: bool = False
    market: str = "Brazil"
    currency_prefix: str = "R$"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)


def _streamlit_secrets() -> Dict[str, Any]:
    """Return Streamlit secrets as a plain dict, or {} outside Streamlit."""
    try:
        import streamlit as st

        return {k: st.secrets[k] for k in st.secrets.keys()}
    except Exception:
        # No secrets.toml, or not running under Streamlit.
        return {}


def _section(secrets: Dict[str, Any], name: str) -> Dict[str, Any]:
    block = secrets.get(name) or {}
    return dict(block) if hasattr(block, "keys") else {}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_settings(secrets: Optional[Dict[str, Any]] = None) -> Settings:
    if secrets is None:
        secrets = _streamlit_secrets()

    supa = _section(secrets, "supabase")
    gemini = _section(secrets, "gemini")

    supabase_url = (supa.get("url") or os.getenv("SUPABASE_URL", "")).strip()
    # Support multiple key names, anon key first (the app runs with the user's session)
    supabase_key = (
        supa.get("anon_key")
        or supa.get("key")
        or os.getenv("SUPABASE_ANON_KEY", "")
        or os.getenv("SUPABASE_KEY", "")
    ).strip()
    gemini_api_key = (
        gemini.get("api_key")
        or os.getenv("GEMINI_API_KEY", "")
        or os.getenv("API_KEY", "")
    ).strip()

    local_store = os.getenv("OPENSIX_LOCAL_STORE", "").strip()

    return Settings(
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        gemini_api_key=gemini_api_key,
        feedback_model=gemini.get("feedback_model") or os.getenv("OPENSIX_FEEDBACK_MODEL", DEFAULT_FEEDBACK_MODEL),
        forecast_model=gemini.get("forecast_model") or os.getenv("OPENSIX_FORECAST_MODEL", DEFAULT_FORECAST_MODEL),
        image_model=gemini.get("image_model") or os.getenv("OPENSIX_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        local_store_dir=Path(local_store).expanduser() if local_store else DEFAULT_LOCAL_STORE_DIR,
        rehydrate_remote_profile=_env_flag("OPENSIX_REHYDRATE_PROFILE"),
        market=os.getenv("OPENSIX_MARKET", "Brazil"),
    )
