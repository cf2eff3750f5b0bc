# services/scenarios/impact_profiles.py
"""
Per-scenario-type heuristics for the rule-based impact generator.

A profile holds one coefficient per headline field; the generator multiplies
each by the signed seed impact (direction * magnitude factor). Positive
coefficients move with the change, negative ones against it.

Named profiles exist for interest_rate, inflation and tariff. Every other
scenario type resolves to ScenarioKind.GENERIC, whose fixed pattern is:

    stocks -0.5, bonds -0.5, employment -0.5, gdp -0.5
    gold   +0.5, oil   +0.5, inflation  +0.5

i.e. an unfamiliar shock in the "increase" direction is read as a mild
risk-off, mildly inflationary event. It is illustrative, not a model of any
specific economic theory.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ScenarioKind(str, Enum):
    INTEREST_RATE = "interest_rate"
    INFLATION = "inflation"
    TARIFF = "tariff"
    GENERIC = "generic"

    @classmethod
    def from_type(cls, scenario_type: str) -> "ScenarioKind":
        try:
            kind = cls(scenario_type)
        except ValueError:
            return cls.GENERIC
        return kind


@dataclass(frozen=True)
class ImpactProfile:
    kind: ScenarioKind
    stocks: float
    bonds: float
    gold: float
    oil: float
    employment: float
    inflation: float
    gdp: float
    analysis: str
    learning_points: Tuple[str, ...]
    financials_reason: str
    # Banks earn on the spread, so rate moves hit Financials with the seed sign
    financials_track_seed: bool = False


# Second-level multipliers applied to the stock / bond overall values
SECTOR_MULTIPLIERS: Dict[str, float] = {
    "Technology": 1.2,
    "Financials": 1.0,
    "Consumer Staples": 0.7,
}

SECTOR_REASONS: Dict[str, str] = {
    "Technology": "Technology stocks tend to be more volatile in response to economic changes.",
    "Consumer Staples": "Consumer staples tend to be more resistant to economic shifts.",
}

BOND_TYPE_MULTIPLIERS: Dict[str, float] = {
    "Government Bonds": 1.0,
    "Corporate Bonds": 1.1,
}

BOND_TYPE_REASONS: Dict[str, str] = {
    "Government Bonds": "Government bonds reflect broad interest rate and inflation expectations.",
    "Corporate Bonds": "Corporate bonds include additional credit risk considerations.",
}


PROFILES: Dict[ScenarioKind, ImpactProfile] = {
    ScenarioKind.INTEREST_RATE: ImpactProfile(
        kind=ScenarioKind.INTEREST_RATE,
        stocks=-1.0,
        bonds=-1.0,
        gold=-1.0,
        oil=-1.0,
        employment=-0.5,
        inflation=-1.0,
        gdp=-0.7,
        analysis="Changes in interest rates typically affect borrowing costs and investment decisions across the economy.",
        learning_points=(
            "Interest rates impact the cost of borrowing throughout the economy",
            "Bond prices typically move inversely to interest rates",
            "Higher rates can slow economic activity by reducing borrowing and spending",
        ),
        financials_reason="Financial sector is particularly sensitive to interest rate changes.",
        financials_track_seed=True,
    ),
    ScenarioKind.INFLATION: ImpactProfile(
        kind=ScenarioKind.INFLATION,
        stocks=-1.0,
        bonds=-1.2,
        gold=1.0,
        oil=0.5,
        employment=0.3,
        inflation=1.0,
        gdp=-0.5,
        analysis="Inflation affects purchasing power and the real value of fixed-income investments.",
        learning_points=(
            "Inflation erodes the purchasing power of fixed-income investments",
            "Some assets like commodities can provide a hedge against inflation",
            "High inflation often leads to monetary policy tightening",
        ),
        financials_reason="Lenders repriced for inflation move broadly with the equity market.",
    ),
    ScenarioKind.TARIFF: ImpactProfile(
        kind=ScenarioKind.TARIFF,
        stocks=-0.8,
        bonds=-0.3,
        gold=0.5,
        oil=-0.5,
        employment=0.3,
        inflation=0.7,
        gdp=-0.5,
        analysis="Tariffs typically impact global trade, causing market uncertainty and sector-specific effects.",
        learning_points=(
            "Tariffs can create both winners and losers in the domestic economy",
            "Trade restrictions typically increase prices for consumers",
            "Protectionist policies often lead to reduced global economic efficiency",
        ),
        financials_reason="Trade finance and credit exposure tie banks to the broader market reaction.",
    ),
    ScenarioKind.GENERIC: ImpactProfile(
        kind=ScenarioKind.GENERIC,
        stocks=-0.5,
        bonds=-0.5,
        gold=0.5,
        oil=0.5,
        employment=-0.5,
        inflation=0.5,
        gdp=-0.5,
        analysis="This economic change would have varied impacts across markets and the economy.",
        learning_points=(
            "Economic changes often have complex impacts across different markets",
            "Market reactions depend on expectations and current economic conditions",
        ),
        financials_reason="Financial stocks tend to follow the broader market for this kind of change.",
    ),
}


def resolve_profile(scenario_type: str) -> ImpactProfile:
    return PROFILES[ScenarioKind.from_type(scenario_type)]


def magnitude_factor(value: float) -> int:
    """Coarse seed multiplier: 3 above 5, 2 above 2, else 1."""
    if value > 5:
        return 3
    if value > 2:
        return 2
    return 1
