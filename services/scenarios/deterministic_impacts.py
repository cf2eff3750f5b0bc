# services/scenarios/deterministic_impacts.py
from __future__ import annotations

import logging
from typing import Dict

from schemas.scenario import (
    BondMarketImpact,
    CommodityImpact,
    EconomyImpact,
    MarketImpacts,
    ScenarioDetails,
    ScenarioImpact,
    SectorImpact,
    StockMarketImpact,
)
from services.scenarios.descriptor import humanize_type
from services.scenarios.errors import SchemaViolationError
from services.scenarios.impact_profiles import (
    BOND_TYPE_MULTIPLIERS,
    BOND_TYPE_REASONS,
    SECTOR_MULTIPLIERS,
    SECTOR_REASONS,
    ImpactProfile,
    magnitude_factor,
    resolve_profile,
)
from services.scenarios.validation import clamp_impact, validate_impact_assessment

logger = logging.getLogger(__name__)

_TIMEFRAME_TEXT = {
    "immediate": "immediate",
    "short_term": "short-term",
    "medium_term": "medium-term",
    "long_term": "long-term",
}


def _score(x: float) -> float:
    # round() is symmetric around zero, so increase/decrease stay exact mirrors
    return round(clamp_impact(x), 2)


def _rise_fall(value: float, up: str, down: str) -> str:
    return up if value > 0 else down


def _sectors(profile: ImpactProfile, seed: int, stocks: float) -> Dict[str, SectorImpact]:
    out: Dict[str, SectorImpact] = {}
    for name, mult in SECTOR_MULTIPLIERS.items():
        if name == "Financials":
            base = seed if profile.financials_track_seed else stocks
            out[name] = SectorImpact(impact=_score(base * mult), reason=profile.financials_reason)
        else:
            out[name] = SectorImpact(impact=_score(stocks * mult), reason=SECTOR_REASONS[name])
    return out


def _bond_types(bonds: float) -> Dict[str, SectorImpact]:
    return {
        name: SectorImpact(impact=_score(bonds * mult), reason=BOND_TYPE_REASONS[name])
        for name, mult in BOND_TYPE_MULTIPLIERS.items()
    }


def generate_deterministic_impacts(details: ScenarioDetails) -> ScenarioImpact:
    """Rule-based impact assessment. Pure: the same details always give the same result."""
    change = details.change
    profile = resolve_profile(change.type)

    multiplier = 1 if change.direction == "increase" else -1
    seed = multiplier * magnitude_factor(change.value)

    stocks = _score(seed * profile.stocks)
    bonds = _score(seed * profile.bonds)
    gold = _score(seed * profile.gold)
    oil = _score(seed * profile.oil)
    employment = _score(seed * profile.employment)
    inflation = _score(seed * profile.inflation)
    gdp = _score(seed * profile.gdp)

    label = humanize_type(change.type)
    horizon = _TIMEFRAME_TEXT.get(details.timeframe, details.timeframe)

    assessment = ScenarioImpact(
        markets=MarketImpacts(
            stocks=StockMarketImpact(
                overall=stocks,
                description=f"Stock markets would likely {_rise_fall(stocks, 'rise', 'fall')} in response to this change.",
                sectors=_sectors(profile, seed, stocks),
            ),
            bonds=BondMarketImpact(
                overall=bonds,
                description=f"Bond markets would experience {_rise_fall(bonds, 'gains', 'pressure')} under these conditions.",
                types=_bond_types(bonds),
            ),
            commodities=CommodityImpact(
                gold=gold,
                oil=oil,
                description=(
                    f"Commodities would show mixed reactions with gold {_rise_fall(gold, 'rising', 'falling')} "
                    f"and oil {_rise_fall(oil, 'rising', 'falling')}."
                ),
            ),
            economy=EconomyImpact(
                employment=employment,
                inflation=inflation,
                gdp=gdp,
                description=(
                    f"Economic indicators would adjust with employment {_rise_fall(employment, 'increasing', 'decreasing')}, "
                    f"inflation {_rise_fall(inflation, 'rising', 'falling')}, "
                    f"and GDP growth {_rise_fall(gdp, 'accelerating', 'slowing')}."
                ),
            ),
        ),
        analysis=(
            f"{profile.analysis} A {change.magnitude} {change.direction} in {label} "
            f"is assessed over {'an' if horizon[:1] in 'aeiou' else 'a'} {horizon} horizon."
        ),
        learning_points=list(profile.learning_points),
    )

    try:
        validate_impact_assessment(assessment)
    except SchemaViolationError:
        # No further fallback exists below this path
        logger.critical(
            "Rule-based impact assessment failed validation",
            exc_info=True,
            extra={"extra": {"scenario_type": change.type, "source": "deterministic"}},
        )
        raise
    return assessment
