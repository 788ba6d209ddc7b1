"""
Pytest Configuration and Fixtures
==================================
Shared test fixtures: settings, stores, sample profile and prediction,
and mock Supabase / Gemini clients.
"""

import json
import pytest
from types import SimpleNamespace
from unittest.mock import Mock

from config import Settings
from models import AIAnalysisResult, BusinessProfile, PredictionResult
from services.local_storage import LocalStorage
from services.profile_store import ProfileStore

BROWSER_ID = "0123456789abcdef0123456789abcdef"
USER_ID = "user-1"


@pytest.fixture
def settings(tmp_path):
    """Settings with Gemini configured and Supabase unconfigured."""
    return Settings(
        supabase_url="",
        supabase_key="",
        gemini_api_key="test-key",
        local_store_dir=tmp_path / "browsers",
    )


@pytest.fixture
def local_storage(settings):
    return LocalStorage.for_browser(settings.local_store_dir, BROWSER_ID)


@pytest.fixture
def mock_db_handler():
    """Create a mock SupabaseHandler."""
    db = Mock()
    db.client = Mock()
    db.get_session_tokens.return_value = ("access-token", "refresh-token")
    return db


@pytest.fixture
def local_store(local_storage):
    """ProfileStore in local demo mode, bound to USER_ID."""
    return ProfileStore(None, local_storage, user_id=USER_ID)


@pytest.fixture
def remote_store(mock_db_handler, local_storage):
    """ProfileStore backed by the mock Supabase handler, bound to USER_ID."""
    return ProfileStore(mock_db_handler, local_storage, user_id=USER_ID)


@pytest.fixture
def sample_profile():
    """Fully completed business profile."""
    return BusinessProfile(
        niche="Sustainable fashion",
        products="Organic cotton t-shirts",
        avg_ticket=120.0,
        monthly_revenue=30000.0,
        social_url="@greenthreads",
        target_audience="Women 25-40, urban",
        competitors="Two local brands",
        ad_spend=2500.0,
        conversion_rate=1.8,
        revenue_goal=45000.0,
        main_challenge="Customer acquisition cost",
    )


@pytest.fixture
def sample_prediction_payload():
    """Forecast JSON as returned by Gemini."""
    return {
        "predictedRevenue": 8400.5,
        "confidenceScore": 88,
        "factors": [
            {"name": "Black Friday week", "impact": "High", "positive": True},
            {"name": "Heavy rain forecast", "impact": "Medium", "positive": False},
        ],
        "explanation": "Seasonal demand is rising ahead of the holidays.",
        "chartData": [
            {"day": f"Day {i}", "value": 1200.0 + i, "upper": 1400.0, "lower": 1000.0}
            for i in range(1, 8)
        ],
    }


@pytest.fixture
def sample_prediction(sample_prediction_payload):
    return PredictionResult.from_dict(sample_prediction_payload)


@pytest.fixture
def sample_analysis():
    return AIAnalysisResult(
        strengths=["Clear niche", "Healthy ticket"],
        weaknesses=["Low ad spend"],
        suggestion="Test short video ads on Instagram.",
        confidence_score=78,
    )


def make_text_response(payload, chunks=None):
    """Fake generate_content response carrying JSON text and optional grounding chunks."""
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks is not None else None
    candidate = SimpleNamespace(grounding_metadata=metadata, content=None)
    text = json.dumps(payload) if payload is not None else None
    return SimpleNamespace(text=text, candidates=[candidate])


def make_web_chunk(uri, title):
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))


def make_image_response(data=b"\x89PNG-bytes", mime_type="image/png"):
    """Fake generate_content response with one text part and one inline image part."""
    parts = [
        SimpleNamespace(inline_data=None, text="Here is your image"),
        SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None),
    ]
    candidate = SimpleNamespace(content=SimpleNamespace(parts=parts), grounding_metadata=None)
    return SimpleNamespace(text=None, candidates=[candidate])


@pytest.fixture
def mock_genai_client():
    """Mock genai.Client; set ``models.generate_content`` per test."""
    client = Mock()
    client.models = Mock()
    return client
