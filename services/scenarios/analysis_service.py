# services/scenarios/analysis_service.py
from __future__ import annotations

import logging
from typing import Optional

from schemas.scenario import CustomScenarioAnalysis, ScenarioDetails
from services.ai.llm_service import LLMClient
from services.scenarios.descriptor import build_basic_descriptor
from services.scenarios.errors import SchemaViolationError
from services.scenarios.fallback import with_fallback
from services.scenarios.generative_impacts import DEFAULT_TIMEOUT_S, GenerativeImpactAdapter, request_json
from services.scenarios.prompts import DESCRIPTOR_SYSTEM_PROMPT, build_descriptor_user_prompt

logger = logging.getLogger(__name__)


class ScenarioAnalyzer:
    """Turns a user's custom scenario request into details + impacts.

    Two independent fallbacks: descriptor synthesis falls back to the basic
    descriptor, impact generation falls back to the rule-based generator.
    With ``client=None`` no external call is ever made.
    """

    def __init__(self, client: Optional[LLMClient] = None, *, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.client = client
        self.timeout_s = timeout_s
        self.impact_adapter = GenerativeImpactAdapter(client, timeout_s=timeout_s)

    @property
    def ai_enabled(self) -> bool:
        return self.client is not None

    async def analyze_custom_scenario(
        self,
        scenario_type: str,
        value: float,
        direction: str,
        custom_details: Optional[str] = None,
    ) -> CustomScenarioAnalysis:
        # Input errors surface here, before anything touches the network
        basic = build_basic_descriptor(scenario_type, value, direction, custom_details)

        if self.client is None:
            details = basic
        else:
            details = await with_fallback(
                lambda: self._synthesize_details(basic, custom_details),
                lambda: basic,
                stage="scenario_details",
                scenario_type=basic.change.type,
            )

        impacts = await self.impact_adapter.generate_impacts(details)
        return CustomScenarioAnalysis(details=details, impacts=impacts)

    async def _synthesize_details(self, basic: ScenarioDetails, custom_details: Optional[str]) -> ScenarioDetails:
        c = basic.change
        data = await request_json(
            self.client,
            system=DESCRIPTOR_SYSTEM_PROMPT,
            user=build_descriptor_user_prompt(c.type, c.value, c.direction, custom_details),
            timeout_s=self.timeout_s,
        )

        change = data.get("change")
        if not isinstance(change, dict):
            raise SchemaViolationError("change", "missing from model response")

        rationale = change.get("rationale")
        if not isinstance(rationale, str) or not rationale.strip():
            rationale = c.rationale

        # The request fixes what changes and by how much; the model only adds colour
        return ScenarioDetails.model_validate(
            {
                "change": {
                    "type": c.type,
                    "value": c.value,
                    "direction": c.direction,
                    "rationale": rationale.strip(),
                },
                "timeframe": data.get("timeframe") or basic.timeframe,
            }
        )
