# services/scenarios/generative_impacts.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from openai import OpenAIError
from pydantic import ValidationError

from schemas.scenario import ScenarioDetails, ScenarioImpact
from services.ai.json_helpers import extract_json_object
from services.ai.llm_service import LLMClient
from services.scenarios.deterministic_impacts import generate_deterministic_impacts
from services.scenarios.errors import CollaboratorUnavailableError, SchemaViolationError
from services.scenarios.fallback import with_fallback
from services.scenarios.prompts import IMPACT_SYSTEM_PROMPT, build_impact_user_prompt
from services.scenarios.validation import validate_impact_assessment

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 8.0


async def request_json(client: LLMClient, *, system: str, user: str, timeout_s: float) -> Dict[str, Any]:
    """One bounded call to the collaborator, parsed into a JSON object.

    Raises CollaboratorUnavailableError for timeouts and transport/API errors,
    SchemaViolationError when the reply is not a JSON object. Never retries.
    """
    try:
        raw = await asyncio.wait_for(
            client.complete(system=system, user=user, expect_json=True),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError as exc:
        raise CollaboratorUnavailableError(f"no response within {timeout_s:g}s") from exc
    except (httpx.HTTPError, OpenAIError) as exc:
        raise CollaboratorUnavailableError(str(exc) or type(exc).__name__) from exc

    try:
        return extract_json_object(raw)
    except ValueError as exc:
        raise SchemaViolationError("response", f"not a JSON object ({exc})") from exc


class GenerativeImpactAdapter:
    """Model-backed impact assessment with the rule-based generator behind it.

    ``generate_impacts`` has the same contract as
    ``generate_deterministic_impacts``: it always returns a validated
    assessment. With no client configured it never attempts a call.
    """

    def __init__(self, client: Optional[LLMClient] = None, *, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.client = client
        self.timeout_s = timeout_s

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def generate_impacts(self, details: ScenarioDetails) -> ScenarioImpact:
        scenario_type = details.change.type
        if self.client is None:
            logger.info(
                "Scenario impacts generated by rules",
                extra={"extra": {"scenario_type": scenario_type, "source": "deterministic"}},
            )
            return generate_deterministic_impacts(details)

        return await with_fallback(
            lambda: self._request_impacts(details),
            lambda: generate_deterministic_impacts(details),
            stage="scenario_impacts",
            scenario_type=scenario_type,
        )

    async def _request_impacts(self, details: ScenarioDetails) -> ScenarioImpact:
        data = await request_json(
            self.client,
            system=IMPACT_SYSTEM_PROMPT,
            user=build_impact_user_prompt(details),
            timeout_s=self.timeout_s,
        )
        try:
            impacts = ScenarioImpact.model_validate(data)
        except ValidationError as exc:
            raise SchemaViolationError("response", f"does not match the impact schema ({exc.error_count()} errors)") from exc

        validate_impact_assessment(impacts)
        logger.info(
            "Scenario impacts generated by model",
            extra={"extra": {"scenario_type": details.change.type, "source": "generative"}},
        )
        return impacts
