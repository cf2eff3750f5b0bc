from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

Direction = Literal["increase", "decrease"]
Magnitude = Literal["slight", "moderate", "significant", "severe"]
Timeframe = Literal["immediate", "short_term", "medium_term", "long_term"]

IMPACT_MIN = -10.0
IMPACT_MAX = 10.0
SCENARIO_TYPE_MAX_LENGTH = 64


def magnitude_label(value: float) -> str:
    """Descriptive tier for a change size. Boundaries (2, 5) fall into the lower tier."""
    if value > 5:
        return "significant"
    if value > 2:
        return "moderate"
    return "slight"


def normalize_scenario_type(value: str) -> str:
    return "_".join((value or "").strip().lower().replace("-", " ").split())


# ── Scenario descriptor ─────────────────────────────────────────────────

class ScenarioChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field(min_length=1, max_length=SCENARIO_TYPE_MAX_LENGTH)
    value: float = Field(gt=0)
    direction: Direction
    # Always derived from value; any supplied magnitude is replaced
    magnitude: Magnitude = "slight"
    rationale: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_magnitude(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            try:
                data["magnitude"] = magnitude_label(float(data.get("value")))
            except (TypeError, ValueError):
                pass
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        return normalize_scenario_type(v) if isinstance(v, str) else v

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("rationale", mode="before")
    @classmethod
    def _rationale_text(cls, v: Any) -> Any:
        return "" if v is None else v


class ScenarioDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    change: ScenarioChange
    timeframe: Timeframe = "immediate"

    @field_validator("timeframe", mode="before")
    @classmethod
    def _normalize_timeframe(cls, v: Any) -> Any:
        if v is None:
            return "immediate"
        return normalize_scenario_type(v) if isinstance(v, str) else v


# ── Impact assessment ───────────────────────────────────────────────────

class SectorImpact(BaseModel):
    impact: float
    reason: str


BondTypeImpact = SectorImpact


class StockMarketImpact(BaseModel):
    overall: float
    description: str
    sectors: Dict[str, SectorImpact] = Field(default_factory=dict)


class BondMarketImpact(BaseModel):
    overall: float
    description: str
    types: Dict[str, BondTypeImpact] = Field(default_factory=dict)


class CommodityImpact(BaseModel):
    gold: float
    oil: float
    description: str


class EconomyImpact(BaseModel):
    employment: float
    inflation: float
    gdp: float
    description: str


class MarketImpacts(BaseModel):
    stocks: StockMarketImpact
    bonds: BondMarketImpact
    commodities: CommodityImpact
    economy: EconomyImpact


class ScenarioImpact(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    markets: MarketImpacts
    analysis: str
    learning_points: List[str] = Field(default_factory=list, alias="learningPoints")


# ── Catalog ─────────────────────────────────────────────────────────────

class ScenarioCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=80)
    difficulty: int = Field(default=1, ge=1, le=3)
    details: ScenarioDetails
    impacts: ScenarioImpact
    related_topic_ids: List[int] = Field(default_factory=list)

    @field_validator("title", "description", "category")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("related_topic_ids")
    @classmethod
    def _dedupe_topics(cls, v: List[int]) -> List[int]:
        seen: set[int] = set()
        out: List[int] = []
        for topic_id in v:
            if topic_id in seen:
                continue
            seen.add(topic_id)
            out.append(topic_id)
        return out


class TopicSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    category: str


class ScenarioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    category: str
    difficulty: int
    details: ScenarioDetails
    impacts: ScenarioImpact
    popularity: int
    related_topic_ids: List[int] = Field(default_factory=list)
    created_at: datetime


class ScenarioDetailOut(ScenarioOut):
    related_topics: List[TopicSummary] = Field(default_factory=list)


# ── Custom analysis ─────────────────────────────────────────────────────

class CustomScenarioRequest(BaseModel):
    scenario_type: str = Field(
        max_length=SCENARIO_TYPE_MAX_LENGTH,
        validation_alias=AliasChoices("scenario_type", "scenarioType", "type"),
    )
    value: float
    direction: str = Field(max_length=16)
    custom_details: Optional[str] = Field(
        default=None,
        max_length=2000,
        validation_alias=AliasChoices("custom_details", "customDetails"),
    )


class CustomScenarioAnalysis(BaseModel):
    details: ScenarioDetails
    impacts: ScenarioImpact


class CustomScenarioResponse(CustomScenarioAnalysis):
    ai_enabled: bool


# ── Bookmarks ───────────────────────────────────────────────────────────

class UserScenarioCreate(BaseModel):
    scenario_id: int
    notes: Optional[str] = Field(default=None, max_length=4000)
    is_favorite: bool = False
    custom_parameters: Optional[Dict[str, Any]] = None


class UserScenarioUpdate(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=4000)
    is_favorite: Optional[bool] = None
    custom_parameters: Optional[Dict[str, Any]] = None


class UserScenarioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    scenario_id: int
    notes: Optional[str] = None
    is_favorite: bool
    custom_parameters: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
    scenario: ScenarioOut
