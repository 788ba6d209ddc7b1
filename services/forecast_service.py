"""
Forecast Service
================
Business logic for forecast operations.
"""

import logging
from typing import Optional, Tuple, Callable

from models import BusinessProfile, ImageSize, MarketingCreative, PredictionResult

logger = logging.getLogger(__name__)


class ForecastService:
    """
    Service for forecast business logic.

    Coordinates between the profile store and the Gemini service.
    """

    def __init__(self, store, gemini):
        """
        Initialize forecast service.

        Args:
            store: ProfileStore instance
            gemini: GeminiService instance
        """
        self.store = store
        self.gemini = gemini

    def finalize(
        self,
        profile: BusinessProfile,
        progress_callback: Optional[Callable] = None
    ) -> Tuple[dict, PredictionResult]:
        """
        Persist the profile, generate the forecast and persist it, in series.

        Args:
            profile: Completed business profile
            progress_callback: Optional callback(fraction, message)

        Returns:
            (saved profile record, prediction)
        """
        if progress_callback:
            progress_callback(0.1, "Saving profile...")
        saved = self.store.save(profile)

        if progress_callback:
            progress_callback(0.4, "Generating forecast...")
        prediction = self.gemini.generate_prediction(profile)

        if progress_callback:
            progress_callback(0.9, "Saving forecast...")
        self.store.save_prediction(prediction, saved.get("id") if saved else None)

        return saved, prediction

    def refresh(self, profile: BusinessProfile, profile_id: Optional[str] = None) -> PredictionResult:
        """Regenerate and persist the forecast for an existing profile."""
        prediction = self.gemini.generate_prediction(profile)
        self.store.save_prediction(prediction, profile_id)
        return prediction

    def generate_creative(self, profile: BusinessProfile, size: ImageSize) -> MarketingCreative:
        """Generate a marketing image. Errors propagate to the caller."""
        return self.gemini.generate_marketing_creative(profile, size)
