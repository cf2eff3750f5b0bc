from __future__ import annotations

import math
from typing import Optional

from schemas.scenario import (
    SCENARIO_TYPE_MAX_LENGTH,
    ScenarioChange,
    ScenarioDetails,
    magnitude_label,
    normalize_scenario_type,
)
from services.scenarios.errors import InvalidInputError

DIRECTIONS = ("increase", "decrease")


def humanize_type(scenario_type: str) -> str:
    return scenario_type.replace("_", " ")


def normalize_request(scenario_type: str, value: float, direction: str) -> tuple[str, float, str]:
    """Check and normalise the user-facing scenario fields.

    Raises InvalidInputError for an empty or over-long type, a non-positive (or non-finite)
    value, or a direction other than increase/decrease.
    """
    stype = normalize_scenario_type(scenario_type if isinstance(scenario_type, str) else "")
    if not stype:
        raise InvalidInputError("scenario type is required")
    if len(stype) > SCENARIO_TYPE_MAX_LENGTH:
        raise InvalidInputError(f"scenario type must be at most {SCENARIO_TYPE_MAX_LENGTH} characters")

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"value must be a number, got {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"value must be greater than 0, got {value!r}")

    token = (direction or "").strip().lower() if isinstance(direction, str) else ""
    if token not in DIRECTIONS:
        raise InvalidInputError(f"direction must be one of {', '.join(DIRECTIONS)}, got {direction!r}")

    return stype, number, token


def build_basic_descriptor(
    scenario_type: str,
    value: float,
    direction: str,
    custom_details: Optional[str] = None,
) -> ScenarioDetails:
    """Deterministic descriptor used when no richer one can be synthesized."""
    stype, number, token = normalize_request(scenario_type, value, direction)

    context = (custom_details or "").strip()
    rationale = custom_details if context else (
        f"{'Rising' if token == 'increase' else 'Falling'} {humanize_type(stype)} "
        "due to changing economic conditions."
    )

    return ScenarioDetails(
        change=ScenarioChange(
            type=stype,
            value=number,
            direction=token,
            magnitude=magnitude_label(number),
            rationale=rationale,
        ),
        timeframe="immediate",
    )
