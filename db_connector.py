"""
Database Connector - Supabase Handler
Auth and table operations for business profiles and daily predictions.

Handler methods raise on failure. Callers (ProfileStore, SessionContext)
decide whether an error falls back to local storage or reaches the user.
"""
import logging
from datetime import datetime, date
from typing import Any, Dict, Optional, Tuple

from supabase import create_client, Client

from config import Settings
from models import BusinessProfile, PredictionResult, UserSession

logger = logging.getLogger(__name__)

PROFILES_TABLE = "business_profiles"
PREDICTIONS_TABLE = "daily_predictions"


class AuthError(RuntimeError):
    """Authentication failed or the auth backend is not configured."""


class SupabaseHandler:
    """
    Handler class for Supabase auth and database operations.
    Initializes the client from Settings and provides typed methods.
    """

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        if client is None:
            if not settings.supabase_configured:
                raise RuntimeError(
                    "Missing Supabase config. Set [supabase] url/anon_key in secrets "
                    "or SUPABASE_URL and SUPABASE_ANON_KEY."
                )
            client = create_client(settings.supabase_url, settings.supabase_key)
        self.client: Client = client

    # =========================================================================
    # 1. AUTH
    # =========================================================================
    def sign_in(self, email: str, password: str) -> UserSession:
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise AuthError(str(e) or "Sign-in failed. Check your credentials.") from e
        return self._user_from(response.user, email)

    def sign_up(self, email: str, password: str) -> UserSession:
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            raise AuthError(str(e) or "Sign-up failed.") from e
        return self._user_from(response.user, email)

    def sign_out(self) -> None:
        self.client.auth.sign_out()

    def get_current_user(self) -> Optional[UserSession]:
        session = self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return UserSession(id=str(session.user.id), email=getattr(session.user, "email", None))

    def get_session_tokens(self) -> Optional[Tuple[str, str]]:
        """(access_token, refresh_token) of the live auth session, or None."""
        session = self.client.auth.get_session()
        if session is None or not session.access_token or not session.refresh_token:
            return None
        return session.access_token, session.refresh_token

    def restore_session(self, access_token: str, refresh_token: str) -> UserSession:
        """Re-attach a saved auth session to this client (refreshing it if expired)."""
        try:
            response = self.client.auth.set_session(access_token, refresh_token)
        except Exception as e:
            raise AuthError(str(e) or "Saved session is no longer valid.") from e
        return self._user_from(response.user, None)

    @staticmethod
    def _user_from(user: Any, email: Optional[str]) -> UserSession:
        if user is None:
            raise AuthError("No user returned. Confirm your email address and try again.")
        return UserSession(id=str(user.id), email=getattr(user, "email", None) or email)

    def _require_user_id(self) -> str:
        user = self.get_current_user()
        if user is None:
            raise AuthError("User is not authenticated.")
        return user.id

    # =========================================================================
    # 2. BUSINESS PROFILES
    # =========================================================================
    def upsert_business_profile(self, profile: BusinessProfile) -> Dict[str, Any]:
        """Upsert the profile keyed by user_id and return the stored row."""
        user_id = self._require_user_id()
        payload = {
            "user_id": user_id,
            **profile.to_record(),
            "updated_at": datetime.now().isoformat(),
        }
        response = (
            self.client.table(PROFILES_TABLE)
            .upsert(payload, on_conflict="user_id")
            .execute()
        )
        return response.data[0] if response.data else payload

    def get_business_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self.client.table(PROFILES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    # =========================================================================
    # 3. DAILY PREDICTIONS
    # =========================================================================
    def insert_daily_prediction(
        self,
        prediction: PredictionResult,
        profile_id: Optional[str] = None,
        prediction_date: Optional[date] = None,
    ) -> None:
        user = self.get_current_user()
        payload = {
            "user_id": user.id if user else None,
            "business_profile_id": profile_id,
            "prediction_date": (prediction_date or date.today()).isoformat(),
            "predicted_revenue": prediction.predicted_revenue,
            "confidence_score": prediction.confidence_score,
            "factors": prediction.to_dict()["factors"],
            "explanation": prediction.explanation,
            "generated_at": datetime.now().isoformat(),
        }
        self.client.table(PREDICTIONS_TABLE).insert(payload).execute()


def get_db_handler(settings: Settings) -> Optional[SupabaseHandler]:
    """
    Connect to Supabase, or return None to run in local demo mode.

    Decided once per session: an unconfigured or failing connection routes
    all persistence to the local fallback store.
    """
    if not settings.supabase_configured:
        logger.warning("OpenSix: Supabase keys not found. Running in demo mode (local storage).")
        return None
    try:
        handler = SupabaseHandler(settings)
    except Exception as e:
        logger.error("OpenSix: failed to initialize Supabase client: %s", e)
        return None
    logger.info("OpenSix: connected to Supabase.")
    return handler
