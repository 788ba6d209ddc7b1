"""
Wizard Service
==============
Drives the 6-step onboarding form.

Each step: submit -> AI feedback -> user confirms -> next step. Confirming
step 6 saves the profile, generates the forecast, saves it, and moves the
session to the dashboard.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from models import (
    WIZARD_STEPS,
    AIAnalysisResult,
    BusinessProfile,
    GamificationState,
    PredictionResult,
    WizardStep,
)
from services.fallback_policy import FallbackPolicy

logger = logging.getLogger(__name__)

TOTAL_STEPS = len(WIZARD_STEPS)


class WizardPhase(str, Enum):
    COLLECTING_INPUT = "collecting_input"
    AWAITING_FEEDBACK = "awaiting_feedback"
    SHOWING_FEEDBACK = "showing_feedback"


class WizardController:
    """
    Onboarding wizard state machine.

    Args:
        gemini: GeminiService (step feedback)
        forecasts: ForecastService (finalization)
        session: SessionContext updated when the wizard finishes
        profile: Optional starting profile (e.g. a cached one being edited)
    """

    def __init__(self, gemini, forecasts, session, profile: Optional[BusinessProfile] = None):
        self.gemini = gemini
        self.forecasts = forecasts
        self.session = session

        self.current_step = 1
        self.phase = WizardPhase.COLLECTING_INPUT
        self.profile = profile or BusinessProfile()
        self.feedback: Optional[AIAnalysisResult] = None
        self.gamification = GamificationState()

        # A failed finalization runs the forecast once more; a second failure propagates.
        self._finalize_policy = FallbackPolicy("Onboarding finalization", fallback=self._recover_forecast)

    @property
    def step(self) -> WizardStep:
        return WIZARD_STEPS[self.current_step - 1]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == TOTAL_STEPS

    def progress_percent(self) -> int:
        return round((self.current_step - 1) / TOTAL_STEPS * 100)

    def can_submit(self, values: Optional[Dict[str, Any]] = None) -> bool:
        """Step 1 needs a niche; every step needs the wizard to be collecting input."""
        if self.phase != WizardPhase.COLLECTING_INPUT:
            return False
        profile = self.profile.merge(values) if values else self.profile
        if self.current_step == 1 and not (profile.niche or "").strip():
            return False
        return True

    def update_fields(self, values: Dict[str, Any]) -> BusinessProfile:
        """Merge form values into the in-progress profile."""
        self.profile = self.profile.merge(values)
        return self.profile

    def submit_step(self, step_index: int, values: Dict[str, Any]) -> AIAnalysisResult:
        """
        Merge the step's values and fetch AI feedback for the profile so far.

        Feedback failures are replaced by a neutral canned result, so this
        always returns feedback to show.
        """
        if step_index != self.current_step:
            raise ValueError(f"Cannot submit step {step_index} while on step {self.current_step}")

        self.update_fields(values)
        self.phase = WizardPhase.AWAITING_FEEDBACK
        try:
            feedback = self.gemini.analyze_business_step(step_index, self.profile.to_dict())
        except Exception:
            self.phase = WizardPhase.COLLECTING_INPUT
            raise

        self.feedback = feedback
        self.gamification.award(step_index)
        self.phase = WizardPhase.SHOWING_FEEDBACK
        return feedback

    def confirm_step(self, progress_callback: Optional[Callable] = None) -> Optional[PredictionResult]:
        """Dismiss the feedback and advance, or finish on the last step."""
        if self.is_last_step:
            return self.finish(progress_callback)
        self.feedback = None
        self.phase = WizardPhase.COLLECTING_INPUT
        self.advance()
        return None

    def advance(self) -> None:
        if self.current_step < TOTAL_STEPS:
            self.current_step += 1

    def finish(self, progress_callback: Optional[Callable] = None) -> PredictionResult:
        """
        Save profile, forecast, save forecast, then open the dashboard.

        The session always reaches the dashboard when a prediction is
        obtained, even if persistence failed along the way. On failure the
        step-6 feedback stays on screen so only the confirm is retried.
        """
        previous_phase = self.phase
        self.phase = WizardPhase.AWAITING_FEEDBACK
        profile = self.profile
        try:
            saved, prediction = self._finalize_policy.call(self.forecasts.finalize, profile, progress_callback)
        except Exception:
            self.phase = previous_phase
            raise

        profile_id = saved.get("id") if saved else None
        self.session.complete_onboarding(profile, prediction, profile_id)
        self.feedback = None
        self.phase = WizardPhase.COLLECTING_INPUT
        return prediction

    def _recover_forecast(self, profile: BusinessProfile, progress_callback: Optional[Callable] = None):
        if progress_callback:
            progress_callback(0.5, "Retrying forecast...")
        return None, self.gemini.generate_prediction(profile)
