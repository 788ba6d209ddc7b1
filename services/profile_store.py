"""
Profile Store
=============
Persistence for the business profile and the latest prediction.

Supabase is the system of record when configured; any remote error falls back
to overwriting the local storage slot. Reads only use the local slots.

Local slots are scoped to the signed-in user, so two accounts used from the
same browser never see each other's cached profile.
"""

import json
import logging
from typing import Any, Dict, Optional, Tuple

from models import BusinessProfile, PredictionResult
from services.local_storage import LocalStorage, PROFILE_KEY, PREDICTION_KEY

logger = logging.getLogger(__name__)

LOCAL_DEMO_ID = "local-demo-id"
FALLBACK_ID = "fallback-id"


def user_slot(key: str, user_id: str) -> str:
    return f"{key}:{user_id}"


class ProfileStore:
    """
    Remote-with-local-fallback store.

    Args:
        db: SupabaseHandler, or None when Supabase is unconfigured
        local: LocalStorage fallback
        user_id: Owner of the local slots; set on sign-in via ``bind_user``
    """

    def __init__(self, db, local: LocalStorage, user_id: Optional[str] = None):
        self.db = db
        self.local = local
        self.user_id = user_id

    @property
    def remote_configured(self) -> bool:
        return self.db is not None

    def bind_user(self, user_id: Optional[str]) -> None:
        """Point the local slots at ``user_id`` (None after sign-out)."""
        self.user_id = user_id

    @property
    def profile_key(self) -> str:
        return self._slot(PROFILE_KEY)

    @property
    def prediction_key(self) -> str:
        return self._slot(PREDICTION_KEY)

    def _slot(self, key: str) -> str:
        if not self.user_id:
            raise RuntimeError("No user bound to the profile store")
        return user_slot(key, self.user_id)

    def load(self) -> Tuple[Optional[BusinessProfile], Optional[PredictionResult]]:
        """Return the bound user's cached (profile, prediction); either may be None."""
        if not self.user_id:
            return None, None

        profile = None
        prediction = None

        raw_profile = self.local.get_item(self.profile_key)
        if raw_profile:
            try:
                profile = BusinessProfile.from_dict(json.loads(raw_profile))
            except (json.JSONDecodeError, AttributeError) as e:
                logger.warning("Ignoring corrupt cached profile: %s", e)

        raw_prediction = self.local.get_item(self.prediction_key)
        if raw_prediction:
            try:
                prediction = PredictionResult.from_dict(json.loads(raw_prediction))
            except (json.JSONDecodeError, AttributeError) as e:
                logger.warning("Ignoring corrupt cached prediction: %s", e)

        return profile, prediction

    def save(self, profile: BusinessProfile) -> Dict[str, Any]:
        """Save the profile and return the stored record (always has an ``id``)."""
        if not self.remote_configured:
            logger.info("Saving profile locally...")
            self._save_local_profile(profile)
            return {"id": LOCAL_DEMO_ID, **profile.to_dict()}

        try:
            return self.db.upsert_business_profile(profile)
        except Exception as e:
            logger.error("Error saving profile to Supabase: %s", e)
            self._save_local_profile(profile)
            return {"id": FALLBACK_ID, **profile.to_dict()}

    def save_prediction(self, prediction: PredictionResult, profile_id: Optional[str] = None) -> None:
        if not self.remote_configured:
            self._save_local_prediction(prediction)
            return

        try:
            self.db.insert_daily_prediction(prediction, profile_id)
        except Exception as e:
            logger.error("Error saving prediction to Supabase: %s", e)
            self._save_local_prediction(prediction)

    def fetch_remote_profile(self, user_id: str) -> Optional[BusinessProfile]:
        """Latest remote profile for the user, or None if missing or unreachable."""
        if not self.remote_configured:
            return None
        try:
            row = self.db.get_business_profile(user_id)
        except Exception as e:
            logger.error("Error loading profile from Supabase: %s", e)
            return None
        return BusinessProfile.from_dict(row) if row else None

    def clear(self) -> None:
        """Drop the bound user's cached profile and prediction."""
        self.local.remove_item(self.profile_key)
        self.local.remove_item(self.prediction_key)

    def _save_local_profile(self, profile: BusinessProfile) -> None:
        self.local.set_item(self.profile_key, json.dumps(profile.to_dict()))

    def _save_local_prediction(self, prediction: PredictionResult) -> None:
        self.local.set_item(self.prediction_key, json.dumps(prediction.to_dict()))
