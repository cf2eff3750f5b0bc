"""Output gate for impact assessments.

Every assessment, whichever backend produced it, passes through
``validate_impact_assessment`` before it reaches a caller. The Pydantic
models only fix the shape; this module owns the numeric range and the
non-empty text rules.
"""
from __future__ import annotations

import math
from typing import Iterator, Tuple

from schemas.scenario import IMPACT_MAX, IMPACT_MIN, ScenarioImpact
from services.scenarios.errors import SchemaViolationError


def clamp_impact(value: float) -> float:
    return max(IMPACT_MIN, min(IMPACT_MAX, value))


def iter_impact_fields(a: ScenarioImpact) -> Iterator[Tuple[str, float]]:
    """Yield (dotted path, value) for every numeric impact in the assessment."""
    m = a.markets
    yield "markets.stocks.overall", m.stocks.overall
    for name, sector in m.stocks.sectors.items():
        yield f"markets.stocks.sectors.{name}.impact", sector.impact
    yield "markets.bonds.overall", m.bonds.overall
    for name, bond in m.bonds.types.items():
        yield f"markets.bonds.types.{name}.impact", bond.impact
    yield "markets.commodities.gold", m.commodities.gold
    yield "markets.commodities.oil", m.commodities.oil
    yield "markets.economy.employment", m.economy.employment
    yield "markets.economy.inflation", m.economy.inflation
    yield "markets.economy.gdp", m.economy.gdp


def _iter_text_fields(a: ScenarioImpact) -> Iterator[Tuple[str, str]]:
    m = a.markets
    yield "markets.stocks.description", m.stocks.description
    yield "markets.bonds.description", m.bonds.description
    yield "markets.commodities.description", m.commodities.description
    yield "markets.economy.description", m.economy.description
    for name, sector in m.stocks.sectors.items():
        yield f"markets.stocks.sectors.{name}.reason", sector.reason
    for name, bond in m.bonds.types.items():
        yield f"markets.bonds.types.{name}.reason", bond.reason
    yield "analysis", a.analysis


def validate_impact_assessment(a: ScenarioImpact) -> None:
    """Raise SchemaViolationError naming the first offending field."""
    for path, value in iter_impact_fields(a):
        if not math.isfinite(value):
            raise SchemaViolationError(path, f"impact must be a finite number, got {value!r}")
        if not IMPACT_MIN <= value <= IMPACT_MAX:
            raise SchemaViolationError(
                path, f"impact {value} outside [{IMPACT_MIN:g}, {IMPACT_MAX:g}]"
            )

    for path, text in _iter_text_fields(a):
        if not (text or "").strip():
            raise SchemaViolationError(path, "must not be empty")

    if not a.learning_points:
        raise SchemaViolationError("learningPoints", "at least one learning point is required")
    for i, point in enumerate(a.learning_points):
        if not (point or "").strip():
            raise SchemaViolationError(f"learningPoints.{i}", "must not be empty")
