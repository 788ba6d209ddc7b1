"""
Session Context
===============
Per-browser-session state: the AppState machine, the signed-in user, and the
profile and prediction owned by this session.

Components receive this object explicitly instead of reading globals.

A Streamlit rerun keeps this object, but a browser reload starts a new
Streamlit session. The auth session is therefore saved in the browser's
local store after sign-in (Supabase tokens, or a marker in demo mode) and
restored by ``bootstrap()``.
"""

import json
import logging
from typing import Optional

from db_connector import AuthError
from models import AppState, BusinessProfile, PredictionResult, UserSession
from services.local_storage import AUTH_KEY

logger = logging.getLogger(__name__)

DEMO_USER_ID = "local-demo"


class SessionContext:
    """
    Args:
        db: SupabaseHandler used for auth, or None in local demo mode
        store: ProfileStore for cached profile/prediction
        rehydrate_remote_profile: Load the remote profile on resume when no
            local profile is cached
    """

    def __init__(self, db, store, rehydrate_remote_profile: bool = False):
        self.db = db
        self.store = store
        self.rehydrate_remote_profile = rehydrate_remote_profile

        self.app_state: AppState = AppState.LANDING
        self.user: Optional[UserSession] = None
        self.profile: Optional[BusinessProfile] = None
        self.profile_id: Optional[str] = None
        self.prediction: Optional[PredictionResult] = None
        self.auth_open = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def demo_mode(self) -> bool:
        return self.db is None

    @property
    def local(self):
        return self.store.local

    # =========================================================================
    # STARTUP
    # =========================================================================
    def bootstrap(self) -> AppState:
        """Resume an existing auth session and route on the cached data."""
        user = self._current_user()
        if user is None:
            return self.app_state

        self.user = user
        self.store.bind_user(user.id)
        profile, prediction = self.store.load()

        if profile is None and self.rehydrate_remote_profile:
            profile = self.store.fetch_remote_profile(user.id)

        if profile is not None:
            self.profile = profile
            if prediction is not None:
                self.prediction = prediction
                self.app_state = AppState.DASHBOARD
            else:
                self.app_state = AppState.ONBOARDING
        else:
            self.app_state = AppState.ONBOARDING
        return self.app_state

    def _current_user(self) -> Optional[UserSession]:
        if self.db is not None:
            try:
                user = self.db.get_current_user()
            except Exception as e:
                logger.error("Could not read auth session: %s", e)
                return None
            if user is not None:
                return user
        return self._restore_saved_auth()

    def _restore_saved_auth(self) -> Optional[UserSession]:
        raw = self.local.get_item(AUTH_KEY)
        if not raw:
            return None
        try:
            saved = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt saved auth session")
            self.local.remove_item(AUTH_KEY)
            return None

        if self.db is None:
            if saved.get("demo"):
                return UserSession(id=DEMO_USER_ID)
            return None

        access_token = saved.get("access_token")
        refresh_token = saved.get("refresh_token")
        if not access_token or not refresh_token:
            return None
        try:
            user = self.db.restore_session(access_token, refresh_token)
        except AuthError as e:
            logger.info("Saved auth session rejected, signing out: %s", e)
            self.local.remove_item(AUTH_KEY)
            return None
        # The refresh may have rotated the tokens.
        self._remember_auth()
        return user

    def _remember_auth(self) -> None:
        if self.db is None:
            self.local.set_item(AUTH_KEY, json.dumps({"demo": True}))
            return
        try:
            tokens = self.db.get_session_tokens()
        except Exception as e:
            logger.error("Could not read auth tokens: %s", e)
            return
        if tokens:
            access_token, refresh_token = tokens
            self.local.set_item(
                AUTH_KEY,
                json.dumps({"access_token": access_token, "refresh_token": refresh_token}),
            )

    # =========================================================================
    # AUTH
    # =========================================================================
    def start_flow(self) -> None:
        if self.is_authenticated:
            self.app_state = AppState.ONBOARDING
        else:
            self.auth_open = True

    def close_auth(self) -> None:
        self.auth_open = False

    def sign_in(self, email: str, password: str) -> UserSession:
        if self.db is None:
            raise AuthError("Supabase is not configured.")
        user = self.db.sign_in(email, password)
        self.auth_success(user)
        return user

    def sign_up(self, email: str, password: str) -> UserSession:
        if self.db is None:
            raise AuthError("Supabase is not configured.")
        user = self.db.sign_up(email, password)
        self.auth_success(user)
        return user

    def continue_as_demo(self) -> UserSession:
        """Local-only session used when Supabase is not configured."""
        if self.db is not None:
            raise AuthError("Demo mode is only available without Supabase.")
        user = UserSession(id=DEMO_USER_ID)
        self.auth_success(user)
        return user

    def auth_success(self, user: UserSession) -> None:
        self.user = user
        self.store.bind_user(user.id)
        self._remember_auth()
        self.auth_open = False
        self.app_state = AppState.ONBOARDING

    def sign_out(self) -> None:
        if self.db is not None:
            try:
                self.db.sign_out()
            except Exception as e:
                logger.error("Supabase sign-out failed: %s", e)
        self.local.remove_item(AUTH_KEY)
        self.store.bind_user(None)
        self.user = None
        self.profile = None
        self.profile_id = None
        self.prediction = None
        self.auth_open = False
        self.app_state = AppState.LANDING

    # =========================================================================
    # DATA
    # =========================================================================
    def complete_onboarding(
        self,
        profile: BusinessProfile,
        prediction: PredictionResult,
        profile_id: Optional[str] = None,
    ) -> None:
        self.profile = profile
        self.profile_id = profile_id
        self.prediction = prediction
        self.app_state = AppState.DASHBOARD

    def update_prediction(self, prediction: PredictionResult) -> None:
        self.prediction = prediction

    def go_to_dashboard(self) -> bool:
        if self.profile is None or self.prediction is None:
            return False
        self.app_state = AppState.DASHBOARD
        return True

    def restart_onboarding(self) -> None:
        self.app_state = AppState.ONBOARDING

    def clear_cached_data(self) -> None:
        """Forget this user's cached profile and prediction and start onboarding over (remote rows are kept)."""
        self.store.clear()
        self.profile = None
        self.profile_id = None
        self.prediction = None
        self.app_state = AppState.ONBOARDING
