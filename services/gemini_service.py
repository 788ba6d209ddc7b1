"""
Gemini Service
==============
Step feedback, 7-day revenue forecast and marketing creatives via Google Gemini.

The structured calls trust the JSON shape Gemini returns; values are not
checked against their declared bounds. Failures are handled by the
fallback policies below.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import numpy as np
from google import genai
from google.genai import types

from config import Settings
from models import (
    AIAnalysisResult,
    BusinessProfile,
    ChartPoint,
    Factor,
    ImageSize,
    MarketingCreative,
    PredictionResult,
    SearchSource,
)
from services.fallback_policy import FallbackPolicy

logger = logging.getLogger(__name__)

MAX_SOURCES = 3
FORECAST_DAYS = 7
FALLBACK_GROWTH = 1.15


class CreativeGenerationError(RuntimeError):
    """Gemini returned no image for a creative request."""


# =============================================================================
# FALLBACKS
# =============================================================================

def fallback_analysis(step: int, data: Optional[Dict[str, Any]] = None) -> AIAnalysisResult:
    """Neutral feedback shown when the AI call fails."""
    return AIAnalysisResult(
        strengths=["Interesting niche selection", "Solid revenue foundation"],
        weaknesses=["Data is still sparse at this stage"],
        suggestion="Keep providing data to refine our prediction model.",
        confidence_score=85,
    )


def fallback_prediction(
    profile: BusinessProfile,
    rng: Optional[np.random.Generator] = None,
) -> PredictionResult:
    """
    Linear-growth projection used when the forecast call fails.

    One uniform draw per chart point, so values differ between runs unless
    a seeded generator is passed in.
    """
    rng = rng if rng is not None else np.random.default_rng()
    daily = (profile.monthly_revenue or 0) / 30
    return PredictionResult(
        predicted_revenue=(profile.monthly_revenue or 0) * FALLBACK_GROWTH,
        confidence_score=92,
        factors=[
            Factor(name="Market Data (Simulated)", impact="High", positive=True),
            Factor(name="Seasonality", impact="Medium", positive=True),
        ],
        explanation="Projection based on standard linear growth because the AI service could not be reached.",
        chart_data=[
            ChartPoint(
                day=f"Day {i + 1}",
                value=daily * (1 + float(rng.uniform(0, 0.2))),
                upper=daily * 1.2,
                lower=daily * 0.9,
            )
            for i in range(FORECAST_DAYS)
        ],
        search_sources=[],
    )


FEEDBACK_POLICY = FallbackPolicy("Gemini analysis", fallback=fallback_analysis)
FORECAST_POLICY = FallbackPolicy("Gemini prediction", fallback=fallback_prediction)
CREATIVE_POLICY = FallbackPolicy("Gemini image generation")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "strengths": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
        "weaknesses": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
        "suggestion": types.Schema(type=types.Type.STRING),
        "confidenceScore": types.Schema(type=types.Type.NUMBER),
    },
    required=["strengths", "weaknesses", "suggestion", "confidenceScore"],
)

PREDICTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "predictedRevenue": types.Schema(type=types.Type.NUMBER),
        "confidenceScore": types.Schema(type=types.Type.NUMBER),
        "factors": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "name": types.Schema(type=types.Type.STRING),
                    "impact": types.Schema(type=types.Type.STRING),
                    "positive": types.Schema(type=types.Type.BOOLEAN),
                },
            ),
        ),
        "explanation": types.Schema(type=types.Type.STRING),
        "chartData": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "day": types.Schema(type=types.Type.STRING),
                    "value": types.Schema(type=types.Type.NUMBER),
                    "upper": types.Schema(type=types.Type.NUMBER),
                    "lower": types.Schema(type=types.Type.NUMBER),
                },
            ),
        ),
    },
)


def dedupe_sources(sources: List[SearchSource], limit: int = MAX_SOURCES) -> List[SearchSource]:
    """One entry per URI (first-seen order, last title wins), capped to ``limit``."""
    by_uri: Dict[str, SearchSource] = {}
    for source in sources:
        by_uri[source.uri] = source
    return list(by_uri.values())[:limit]


def extract_search_sources(response: Any) -> List[SearchSource]:
    """Web citations from the grounding metadata of a response."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is not None and web.uri and web.title:
            sources.append(SearchSource(title=web.title, uri=web.uri))
    return dedupe_sources(sources)


class GeminiService:
    """
    Gemini client for the three AI calls.

    Args:
        settings: App settings (API key and model names)
        client: Optional pre-built genai.Client (tests inject a mock)
    """

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.settings.gemini_configured:
                raise RuntimeError("Gemini API key not configured")
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    # =========================================================================
    # STEP FEEDBACK
    # =========================================================================
    def analyze_business_step(self, step: int, data: Dict[str, Any]) -> AIAnalysisResult:
        """Feedback for the data collected so far; never raises."""
        return FEEDBACK_POLICY.call(self._request_analysis, step, data)

    def _request_analysis(self, step: int, data: Dict[str, Any]) -> AIAnalysisResult:
        prompt = f"""
        You are an expert e-commerce analyst (OpenSix Prediction). Analyze the following
        business data collected in step {step} of the onboarding.
        Data: {json.dumps(data, default=str)}

        Provide:
        1. Two concise strengths or interesting observations.
        2. One potential weakness or area needing attention.
        3. One short, encouraging strategic suggestion (max 20 words).
        4. A confidence score (0-100) based on the quality of the data provided.

        Respond strictly in JSON.
        """
        response = self._get_client().models.generate_content(
            model=self.settings.feedback_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=ANALYSIS_SCHEMA,
            ),
        )
        if not response.text:
            raise RuntimeError("No response from AI")
        return AIAnalysisResult.from_dict(json.loads(response.text))

    # =========================================================================
    # FORECAST
    # =========================================================================
    def generate_prediction(self, profile: BusinessProfile) -> PredictionResult:
        """7-day forecast grounded on Google Search; never raises."""
        return FORECAST_POLICY.call(self._request_prediction, profile)

    def _request_prediction(self, profile: BusinessProfile) -> PredictionResult:
        prompt = f"""
        Act as an advanced predictive engine (OpenSix Prediction).

        Analyze this Business Profile:
        {json.dumps(profile.to_dict(), default=str)}

        Use Google Search to find current trends for the niche "{profile.niche}" in {self.settings.market}.

        Tasks:
        1. Predict revenue for the next {FORECAST_DAYS} days.
        2. Identify 3 real-world factors (news, weather, holidays).
        3. Provide a confidence score.
        4. Give a strategic explanation.

        Return JSON with chartData ({FORECAST_DAYS} points: day, value, upper, lower).
        """
        response = self._get_client().models.generate_content(
            model=self.settings.forecast_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
                response_mime_type="application/json",
                response_schema=PREDICTION_SCHEMA,
            ),
        )
        if not response.text:
            raise RuntimeError("No text in AI response")

        result = PredictionResult.from_dict(json.loads(response.text))
        result.search_sources = extract_search_sources(response)
        return result

    # =========================================================================
    # MARKETING CREATIVE
    # =========================================================================
    def generate_marketing_creative(self, profile: BusinessProfile, size: ImageSize) -> MarketingCreative:
        """Studio-style ad image for the profile. Raises on failure."""
        return CREATIVE_POLICY.call(self._request_creative, profile, size)

    def _request_creative(self, profile: BusinessProfile, size: ImageSize) -> MarketingCreative:
        prompt = f"""
        Create a professional advertising image, high-quality photo studio style, for an
        e-commerce business in the niche: {profile.niche}.
        Main products: {profile.products}.
        Target audience: {profile.target_audience or 'General'}.
        Style: minimalist, dramatic lighting, high resolution, award-winning, 8k.
        No text in the image.
        """
        response = self._get_client().models.generate_content(
            model=self.settings.image_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio="1:1", image_size=size),
            ),
        )
        candidates = response.candidates or []
        parts = candidates[0].content.parts if candidates and candidates[0].content else []
        for part in parts or []:
            if part.inline_data is not None and part.inline_data.data:
                return MarketingCreative(
                    data=part.inline_data.data,
                    mime_type=part.inline_data.mime_type or "image/png",
                )
        raise CreativeGenerationError("No image generated.")
