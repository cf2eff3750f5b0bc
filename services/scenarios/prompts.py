# services/scenarios/prompts.py
from __future__ import annotations

from typing import Optional

from schemas.scenario import ScenarioDetails

IMPACT_SYSTEM_PROMPT = """You are an expert financial analyst and economist. Your job is to analyze economic scenarios and provide detailed, realistic impacts across various markets and economic factors.

Analyze the provided economic scenario and return a comprehensive analysis of how it would affect:
1. Stock markets (overall and key sectors)
2. Bond markets (different types of bonds)
3. Commodities (gold and oil)
4. The broader economy (employment, inflation, GDP)

Use a scale from -10 to +10 to indicate impact severity, where:
- Negative numbers indicate negative impacts (price drops, economic contraction)
- Positive numbers indicate positive impacts (price increases, economic expansion)
- The magnitude indicates severity (±1-3 = mild, ±4-7 = moderate, ±8-10 = severe)
Every impact number MUST lie between -10 and 10 inclusive.

Return valid JSON only with this schema:
{
  "markets": {
    "stocks": {
      "overall": number,
      "description": "One sentence.",
      "sectors": {"<Sector name>": {"impact": number, "reason": "Why."}}
    },
    "bonds": {
      "overall": number,
      "description": "One sentence.",
      "types": {"<Bond type>": {"impact": number, "reason": "Why."}}
    },
    "commodities": {"gold": number, "oil": number, "description": "One sentence."},
    "economy": {"employment": number, "inflation": number, "gdp": number, "description": "One sentence."}
  },
  "analysis": "Two or three sentences summarizing the overall effect.",
  "learningPoints": ["Short takeaway for a finance student", "..."]
}

Rules:
- Include at least Technology, Financials and Consumer Staples sectors.
- Include at least Government Bonds and Corporate Bonds.
- Give 2-5 learning points.
- No empty strings. Do not use markdown.
- Base the analysis on historical precedent and mainstream economic theory.
"""

DESCRIPTOR_SYSTEM_PROMPT = """You are an expert economist. Your task is to construct a realistic economic scenario based on user input.
Use proper economic terminology.

Return valid JSON only with this schema:
{
  "change": {
    "type": "<scenario type as given>",
    "value": number,
    "direction": "increase|decrease",
    "rationale": "Two or three sentences explaining why such a change could happen."
  },
  "timeframe": "immediate|short_term|medium_term|long_term"
}

Pick the timeframe over which the effects of this change would mostly play out.
Do not use markdown.
"""


def build_impact_user_prompt(details: ScenarioDetails) -> str:
    c = details.change
    return f"""Please analyze this economic scenario:

Type: {c.type}
Value: {c.value}
Direction: {c.direction}
Magnitude: {c.magnitude}
Rationale: {c.rationale}
Timeframe: {details.timeframe}

Provide impacts on markets and the economy, with reasoning for each. Include an overall analysis and key learning points for someone studying finance."""


def build_descriptor_user_prompt(
    scenario_type: str,
    value: float,
    direction: str,
    custom_details: Optional[str] = None,
) -> str:
    lines = [
        "Create a detailed economic scenario for:",
        f"Type: {scenario_type}",
        f"Value: {value}",
        f"Direction: {direction}",
    ]
    if custom_details and custom_details.strip():
        lines.append(f"Additional context: {custom_details.strip()}")
    return "\n".join(lines)
