"""
Session State Manager
=====================
Binds the per-session service objects to Streamlit session state.

Everything is built once per browser session on first access and reused on
every rerun.
"""

import uuid

import streamlit as st
from dataclasses import dataclass
from typing import Any, Optional

from config import Settings, get_settings
from db_connector import get_db_handler
from services.forecast_service import ForecastService
from services.gemini_service import GeminiService
from services.local_storage import LocalStorage, is_valid_browser_id
from services.profile_store import ProfileStore
from services.session_context import SessionContext
from services.wizard_service import WizardController


@dataclass
class AppServices:
    settings: Settings
    db: Any
    store: ProfileStore
    gemini: GeminiService
    forecasts: ForecastService
    session: SessionContext


def build_services(
    settings: Settings,
    browser_id: str,
    db: Any = None,
    gemini: Optional[GeminiService] = None,
) -> AppServices:
    """
    Wire the service graph for one session.

    Args:
        settings: App settings
        browser_id: Id of the browser's local store (see SessionManager.browser_id)
        db: SupabaseHandler or None (local demo mode)
        gemini: Optional GeminiService override

    Returns:
        AppServices bundle
    """
    store = ProfileStore(db, LocalStorage.for_browser(settings.local_store_dir, browser_id))
    gemini = gemini or GeminiService(settings)
    forecasts = ForecastService(store, gemini)
    session = SessionContext(db, store, rehydrate_remote_profile=settings.rehydrate_remote_profile)
    return AppServices(
        settings=settings,
        db=db,
        store=store,
        gemini=gemini,
        forecasts=forecasts,
        session=session,
    )


class SessionManager:
    """
    Centralized session state manager.
    """

    # Session state keys (centralized constants)
    SERVICES = 'opensix_services'
    WIZARD = 'opensix_wizard'
    BOOTSTRAPPED = 'opensix_bootstrapped'
    CREATIVE = 'opensix_creative'

    # URL query parameter holding the browser id
    BROWSER_PARAM = 'sid'

    @staticmethod
    def get(key: str, default: Any = None) -> Any:
        return st.session_state.get(key, default)

    @staticmethod
    def set(key: str, value: Any) -> None:
        st.session_state[key] = value

    @staticmethod
    def delete(key: str) -> None:
        if key in st.session_state:
            del st.session_state[key]

    @staticmethod
    def browser_id() -> str:
        """
        Id naming this browser's local store.

        Kept in the page URL so it survives reloads; a missing or malformed
        value is replaced with a fresh one.
        """
        browser_id = st.query_params.get(SessionManager.BROWSER_PARAM)
        if not is_valid_browser_id(browser_id):
            browser_id = uuid.uuid4().hex
            st.query_params[SessionManager.BROWSER_PARAM] = browser_id
        return browser_id

    @staticmethod
    def get_services() -> AppServices:
        """Return this session's services, building them on first access."""
        services = SessionManager.get(SessionManager.SERVICES)
        if services is None:
            settings = get_settings()
            services = build_services(settings, SessionManager.browser_id(), get_db_handler(settings))
            SessionManager.set(SessionManager.SERVICES, services)
        return services

    @staticmethod
    def get_session() -> SessionContext:
        return SessionManager.get_services().session

    @staticmethod
    def bootstrap_once() -> None:
        """Resume an auth session on the first run of this browser session."""
        if not SessionManager.get(SessionManager.BOOTSTRAPPED):
            SessionManager.get_session().bootstrap()
            SessionManager.set(SessionManager.BOOTSTRAPPED, True)

    @staticmethod
    def get_wizard() -> WizardController:
        """
        Get the onboarding wizard, creating a fresh one if needed.

        Returns:
            WizardController bound to this session
        """
        wizard = SessionManager.get(SessionManager.WIZARD)
        if wizard is None:
            services = SessionManager.get_services()
            wizard = WizardController(
                services.gemini, services.forecasts, services.session, profile=services.session.profile
            )
            SessionManager.set(SessionManager.WIZARD, wizard)
        return wizard

    @staticmethod
    def reset_wizard() -> None:
        SessionManager.delete(SessionManager.WIZARD)

    @staticmethod
    def clear_on_sign_out() -> None:
        """Drop per-user UI state; services stay bound to the session."""
        SessionManager.delete(SessionManager.WIZARD)
        SessionManager.delete(SessionManager.CREATIVE)
