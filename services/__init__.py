"""
Services Layer
==============
Business logic separated from the Streamlit UI.

Service classes can be used and tested independently of UI components.
"""

from .local_storage import LocalStorage
from .profile_store import ProfileStore
from .fallback_policy import FallbackPolicy
from .gemini_service import GeminiService
from .forecast_service import ForecastService
from .wizard_service import WizardController
from .session_context import SessionContext
from .session_manager import SessionManager

__all__ = [
    'LocalStorage',
    'ProfileStore',
    'FallbackPolicy',
    'GeminiService',
    'ForecastService',
    'WizardController',
    'SessionContext',
    'SessionManager',
]
