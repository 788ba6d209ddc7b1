"""
Data Model
==========
Business profile, prediction and wizard records.

Dict helpers use the camelCase keys of the Gemini JSON payloads and of the
local fallback store, so a record can be serialized and read back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

import pandas as pd


ImageSize = Literal["1K", "2K", "4K"]
IMAGE_SIZES = ("1K", "2K", "4K")


class AppState(str, Enum):
    LANDING = "LANDING"
    ONBOARDING = "ONBOARDING"
    DASHBOARD = "DASHBOARD"


# Python attribute -> payload key
_PROFILE_KEYS = {
    "niche": "niche",
    "products": "products",
    "avg_ticket": "avgTicket",
    "monthly_revenue": "monthlyRevenue",
    "social_url": "socialUrl",
    "target_audience": "targetAudience",
    "competitors": "competitors",
    "ad_spend": "adSpend",
    "conversion_rate": "conversionRate",
    "revenue_goal": "revenueGoal",
    "main_challenge": "mainChallenge",
}


@dataclass
class BusinessProfile:
    # Section 1: Basic
    niche: str = ""
    products: str = ""
    avg_ticket: float = 0
    monthly_revenue: float = 0
    social_url: str = ""
    # Sections 2-6
    target_audience: Optional[str] = ""
    competitors: Optional[str] = ""
    ad_spend: Optional[float] = 0
    conversion_rate: Optional[float] = 0
    revenue_goal: Optional[float] = 0
    main_challenge: Optional[str] = ""

    def merge(self, values: Dict[str, Any]) -> "BusinessProfile":
        """
        Return a copy with the given fields overwritten.

        Accepts either attribute names (``avg_ticket``) or payload keys
        (``avgTicket``). Unknown keys are ignored.
        """
        by_payload_key = {v: k for k, v in _PROFILE_KEYS.items()}
        updates = {}
        for key, value in (values or {}).items():
            attr = key if key in _PROFILE_KEYS else by_payload_key.get(key)
            if attr:
                updates[attr] = value
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return {payload: getattr(self, attr) for attr, payload in _PROFILE_KEYS.items()}

    def to_record(self) -> Dict[str, Any]:
        """Row for the business_profiles table."""
        return {attr: getattr(self, attr) for attr in _PROFILE_KEYS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BusinessProfile":
        return cls().merge(data or {})


@dataclass
class AIAnalysisResult:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    suggestion: str = ""
    confidence_score: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "suggestion": self.suggestion,
            "confidenceScore": self.confidence_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AIAnalysisResult":
        return cls(
            strengths=list(data.get("strengths") or []),
            weaknesses=list(data.get("weaknesses") or []),
            suggestion=data.get("suggestion") or "",
            confidence_score=data.get("confidenceScore", 0),
        )


@dataclass
class Factor:
    name: str
    impact: str
    positive: bool = True


@dataclass
class ChartPoint:
    day: str
    value: float
    upper: float
    lower: float


@dataclass
class SearchSource:
    title: str
    uri: str


@dataclass
class PredictionResult:
    predicted_revenue: float = 0
    confidence_score: float = 0
    factors: List[Factor] = field(default_factory=list)
    explanation: str = ""
    chart_data: List[ChartPoint] = field(default_factory=list)
    search_sources: Optional[List[SearchSource]] = None

    def chart_frame(self) -> pd.DataFrame:
        """Chart series as a DataFrame with columns day, value, upper, lower."""
        return pd.DataFrame(
            [
                {"day": p.day, "value": p.value, "upper": p.upper, "lower": p.lower}
                for p in self.chart_data
            ],
            columns=["day", "value", "upper", "lower"],
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "predictedRevenue": self.predicted_revenue,
            "confidenceScore": self.confidence_score,
            "factors": [
                {"name": f.name, "impact": f.impact, "positive": f.positive}
                for f in self.factors
            ],
            "explanation": self.explanation,
            "chartData": [
                {"day": p.day, "value": p.value, "upper": p.upper, "lower": p.lower}
                for p in self.chart_data
            ],
        }
        if self.search_sources is not None:
            out["searchSources"] = [{"title": s.title, "uri": s.uri} for s in self.search_sources]
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PredictionResult":
        sources = data.get("searchSources")
        return cls(
            predicted_revenue=data.get("predictedRevenue", 0),
            confidence_score=data.get("confidenceScore", 0),
            factors=[
                Factor(name=f.get("name", ""), impact=f.get("impact", ""), positive=bool(f.get("positive", True)))
                for f in data.get("factors") or []
            ],
            explanation=data.get("explanation") or "",
            chart_data=[
                ChartPoint(
                    day=str(p.get("day", "")),
                    value=p.get("value", 0),
                    upper=p.get("upper", 0),
                    lower=p.get("lower", 0),
                )
                for p in data.get("chartData") or []
            ],
            search_sources=(
                [SearchSource(title=s.get("title", ""), uri=s.get("uri", "")) for s in sources]
                if sources is not None
                else None
            ),
        )


@dataclass(frozen=True)
class WizardStep:
    id: int
    title: str
    xp: int
    fields: tuple


WIZARD_STEPS = (
    WizardStep(1, "Basic Business", 50, ("niche", "products", "avg_ticket", "monthly_revenue", "social_url")),
    WizardStep(2, "Target Audience", 75, ("target_audience",)),
    WizardStep(3, "Competition", 100, ("competitors",)),
    WizardStep(4, "Marketing", 150, ("ad_spend",)),
    WizardStep(5, "Operations", 200, ("conversion_rate",)),
    WizardStep(6, "Goals", 500, ("revenue_goal", "main_challenge")),
)

XP_PER_LEVEL = 250


@dataclass
class GamificationState:
    xp: int = 0
    level: int = 1
    badges: List[str] = field(default_factory=list)
    streak: int = 1
    progress: float = 0

    def award(self, step: int) -> None:
        """Credit the fixed XP for a completed step, once per step."""
        definition = WIZARD_STEPS[step - 1]
        if definition.title in self.badges:
            return
        self.xp += definition.xp
        self.level = 1 + self.xp // XP_PER_LEVEL
        self.progress = round((step - 1) / len(WIZARD_STEPS) * 100) + 100 / len(WIZARD_STEPS)
        self.badges.append(definition.title)


@dataclass
class UserSession:
    id: str
    email: Optional[str] = None


@dataclass
class MarketingCreative:
    data: bytes
    mime_type: str = "image/png"

