"""
Unit Tests for WizardController
===============================
Step submission, feedback, navigation and finalization.
"""

import pytest
from unittest.mock import Mock

from models import AppState, BusinessProfile
from services.gemini_service import GeminiService
from services.session_context import SessionContext
from services.wizard_service import TOTAL_STEPS, WizardController, WizardPhase


@pytest.fixture
def gemini(sample_analysis, sample_prediction):
    gemini = Mock()
    gemini.analyze_business_step.return_value = sample_analysis
    gemini.generate_prediction.return_value = sample_prediction
    return gemini


@pytest.fixture
def forecasts(sample_prediction):
    forecasts = Mock()
    forecasts.finalize.return_value = ({"id": "profile-123"}, sample_prediction)
    return forecasts


@pytest.fixture
def session(local_store):
    session = SessionContext(None, local_store)
    session.app_state = AppState.ONBOARDING
    return session


@pytest.fixture
def wizard(gemini, forecasts, session):
    return WizardController(gemini, forecasts, session)


def _walk_to_last_step(wizard, profile):
    for step in range(1, TOTAL_STEPS):
        wizard.submit_step(step, profile.to_dict())
        wizard.confirm_step()


class TestWizardSubmission:
    """Test suite for submitting steps."""

    def test_initial_state(self, wizard):
        assert wizard.current_step == 1
        assert wizard.phase == WizardPhase.COLLECTING_INPUT
        assert wizard.progress_percent() == 0
        assert wizard.gamification.xp == 0

    def test_step_one_requires_niche(self, wizard):
        assert wizard.can_submit() is False
        assert wizard.can_submit({"niche": "   "}) is False
        assert wizard.can_submit({"niche": "Pets"}) is True

    def test_later_steps_accept_empty_fields(self, wizard):
        wizard.submit_step(1, {"niche": "Pets"})
        wizard.confirm_step()

        assert wizard.can_submit({}) is True

    def test_submit_merges_and_shows_feedback(self, wizard, gemini, sample_analysis):
        feedback = wizard.submit_step(1, {"niche": "Pets", "avgTicket": 50})

        assert feedback is sample_analysis
        assert wizard.phase == WizardPhase.SHOWING_FEEDBACK
        assert wizard.feedback is sample_analysis
        assert wizard.profile.niche == "Pets"
        assert wizard.profile.avg_ticket == 50
        assert wizard.gamification.xp == 50
        gemini.analyze_business_step.assert_called_once_with(1, wizard.profile.to_dict())

    def test_cannot_submit_while_showing_feedback(self, wizard):
        wizard.submit_step(1, {"niche": "Pets"})
        assert wizard.can_submit({"niche": "Pets"}) is False

    def test_submit_wrong_step_raises(self, wizard):
        with pytest.raises(ValueError):
            wizard.submit_step(2, {})

    def test_feedback_error_resets_phase(self, wizard, gemini):
        gemini.analyze_business_step.side_effect = RuntimeError("unexpected")

        with pytest.raises(RuntimeError):
            wizard.submit_step(1, {"niche": "Pets"})

        assert wizard.phase == WizardPhase.COLLECTING_INPUT
        assert wizard.gamification.xp == 0


class TestWizardNavigation:
    """Test suite for confirming steps."""

    def test_confirm_advances(self, wizard):
        wizard.submit_step(1, {"niche": "Pets"})
        result = wizard.confirm_step()

        assert result is None
        assert wizard.current_step == 2
        assert wizard.phase == WizardPhase.COLLECTING_INPUT
        assert wizard.feedback is None
        assert wizard.progress_percent() == 17

    def test_walk_accumulates_xp(self, wizard, sample_profile):
        _walk_to_last_step(wizard, sample_profile)

        assert wizard.current_step == TOTAL_STEPS
        assert wizard.is_last_step
        assert wizard.gamification.xp == 50 + 75 + 100 + 150 + 200


class TestWizardFinish:
    """Test suite for finalization on step 6."""

    def test_finish_moves_session_to_dashboard(self, wizard, forecasts, session, sample_profile, sample_prediction):
        _walk_to_last_step(wizard, sample_profile)
        wizard.submit_step(TOTAL_STEPS, {"revenueGoal": 50000})
        progress = Mock()

        result = wizard.confirm_step(progress_callback=progress)

        assert result is sample_prediction
        assert wizard.gamification.xp == 1075
        forecasts.finalize.assert_called_once_with(wizard.profile, progress)
        assert session.app_state == AppState.DASHBOARD
        assert session.profile.revenue_goal == 50000
        assert session.profile_id == "profile-123"
        assert session.prediction is sample_prediction

    def test_finalize_failure_retries_forecast(self, wizard, forecasts, gemini, session, sample_profile,
                                               sample_prediction):
        forecasts.finalize.side_effect = RuntimeError("save failed")
        _walk_to_last_step(wizard, sample_profile)
        wizard.submit_step(TOTAL_STEPS, {})

        result = wizard.confirm_step()

        assert result is sample_prediction
        gemini.generate_prediction.assert_called_once()
        assert session.app_state == AppState.DASHBOARD
        assert session.profile_id is None

    def test_second_failure_keeps_step_six_feedback(self, wizard, forecasts, gemini, session, sample_profile,
                                                    sample_analysis):
        forecasts.finalize.side_effect = RuntimeError("save failed")
        gemini.generate_prediction.side_effect = RuntimeError("still failing")
        _walk_to_last_step(wizard, sample_profile)
        wizard.submit_step(TOTAL_STEPS, {})

        with pytest.raises(RuntimeError, match="still failing"):
            wizard.confirm_step()

        assert wizard.phase == WizardPhase.SHOWING_FEEDBACK
        assert wizard.feedback is sample_analysis
        assert wizard.current_step == TOTAL_STEPS
        assert wizard.gamification.xp == 1075
        assert session.app_state == AppState.ONBOARDING

    def test_confirm_retry_after_failure_reaches_dashboard(self, wizard, forecasts, gemini, session,
                                                           sample_profile, sample_prediction):
        """Retrying a failed finish only re-runs the confirm; XP is not awarded twice."""
        forecasts.finalize.side_effect = [RuntimeError("save failed"), ({"id": "profile-123"}, sample_prediction)]
        gemini.generate_prediction.side_effect = RuntimeError("still failing")
        _walk_to_last_step(wizard, sample_profile)
        wizard.submit_step(TOTAL_STEPS, {})

        with pytest.raises(RuntimeError):
            wizard.confirm_step()
        result = wizard.confirm_step()

        assert result is sample_prediction
        assert wizard.gamification.xp == 1075
        assert wizard.gamification.badges.count("Goals") == 1
        assert session.app_state == AppState.DASHBOARD
        assert session.profile_id == "profile-123"

    def test_resubmitting_last_step_does_not_award_twice(self, wizard, forecasts, gemini, sample_profile):
        forecasts.finalize.side_effect = RuntimeError("save failed")
        gemini.generate_prediction.side_effect = RuntimeError("still failing")
        _walk_to_last_step(wizard, sample_profile)
        wizard.submit_step(TOTAL_STEPS, {})
        with pytest.raises(RuntimeError):
            wizard.confirm_step()

        wizard.submit_step(TOTAL_STEPS, {"revenueGoal": 60000})

        assert wizard.gamification.xp == 1075
        assert wizard.profile.revenue_goal == 60000

    def test_starting_profile_is_prefilled(self, gemini, forecasts, session):
        wizard = WizardController(gemini, forecasts, session, profile=BusinessProfile(niche="Coffee"))
        assert wizard.can_submit() is True


class TestWizardWithOfflineGemini:
    """Every step shows the neutral feedback when the Gemini client fails."""

    @pytest.fixture
    def offline_wizard(self, settings, mock_genai_client, forecasts, session):
        mock_genai_client.models.generate_content.side_effect = ConnectionError("network unreachable")
        return WizardController(GeminiService(settings, client=mock_genai_client), forecasts, session)

    @pytest.mark.parametrize("step", range(1, TOTAL_STEPS + 1))
    def test_step_feedback_falls_back(self, offline_wizard, mock_genai_client, step):
        for earlier in range(1, step):
            offline_wizard.submit_step(earlier, {"niche": "Pets"})
            offline_wizard.confirm_step()

        feedback = offline_wizard.submit_step(step, {"niche": "Pets"})

        assert feedback.confidence_score == 85
        assert feedback.suggestion.strip()
        assert feedback.strengths
        assert offline_wizard.phase == WizardPhase.SHOWING_FEEDBACK
        assert offline_wizard.current_step == step
        assert mock_genai_client.models.generate_content.call_count == step
