# services/ai/llm_service.py
from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

import httpx
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


# ============================================================================
# PUBLIC INTERFACE
# ============================================================================

class LLMClient(Protocol):
    async def complete(self, *, system: str, user: str, expect_json: bool = True) -> str:
        """Return the raw model text (JSON text when expect_json is set)."""


@dataclass
class LLMConfig:
    provider: str = "openai"  # openai | anthropic | cloud
    temperature: float = 0.3

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"

    # Anthropic
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-latest"

    # Cloud gateway (optional)
    cloud_base_url: str = ""
    cloud_api_key: str = ""

    # Scenario calls must answer quickly or the rule-based path takes over
    timeout_s: float = 8.0

    @staticmethod
    def from_env() -> "LLMConfig":
        return LLMConfig(
            provider=(os.getenv("AI_PROVIDER") or "openai").lower(),
            temperature=float(os.getenv("AI_TEMPERATURE", "0.3")),

            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL") or "gpt-4o",

            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            anthropic_model=os.getenv("ANTHROPIC_MODEL") or "claude-3-5-sonnet-latest",

            cloud_base_url=os.getenv("CLOUD_LLM_BASE_URL", ""),
            cloud_api_key=os.getenv("CLOUD_LLM_API_KEY", ""),

            timeout_s=float(os.getenv("SCENARIO_AI_TIMEOUT_S", "8")),
        )


# ============================================================================
# PROVIDER CLIENTS
# ============================================================================

class OpenAIClient:
    def __init__(self, api_key: str, model: str, temperature: float, timeout_s: float = 8.0):
        self.model = model
        self.temperature = temperature
        # The caller owns recovery (rule-based fallback), so the SDK must not retry
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout_s, max_retries=0)

    async def complete(self, *, system: str, user: str, expect_json: bool = True) -> str:
        kwargs = {}
        if expect_json:
            kwargs["response_format"] = {"type": "json_object"}
        resp = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.temperature,
            **kwargs,
        )
        return resp.choices[0].message.content or ""


class AnthropicClient:
    def __init__(self, api_key: str, model: str, temperature: float, timeout_s: float = 8.0):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout_s = timeout_s

    async def complete(self, *, system: str, user: str, expect_json: bool = True) -> str:
        if expect_json:
            system = f"{system}\n\nRespond with a single JSON object and nothing else."
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            r = await client.post(
                "https://api.anthropic.com/v1/messages",
                headers={
                    "x-api-key": self.api_key,
                    "Content-Type": "application/json",
                    "anthropic-version": "2023-06-01",
                },
                json={
                    "model": self.model,
                    "max_tokens": 2000,
                    "system": system,
                    "messages": [{"role": "user", "content": user}],
                    "temperature": self.temperature,
                },
            )
            r.raise_for_status()
            data = r.json()
            return data["content"][0]["text"]


class CloudLLMClient:
    def __init__(self, base_url: str, api_key: str, timeout_s: float = 8.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_s = timeout_s

    async def complete(self, *, system: str, user: str, expect_json: bool = True) -> str:
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            r = await client.post(
                f"{self.base_url}/v1/generate",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={"system": system, "user": user, "json": expect_json},
            )
            r.raise_for_status()
            data = r.json()
            return data["text"]


# ============================================================================
# CLIENT RESOLUTION
# ============================================================================

def build_llm_client(cfg: LLMConfig) -> Optional[LLMClient]:
    """Client for the configured provider, or None when it has no credentials.

    An unconfigured provider is a normal deployment state: callers go straight
    to the rule-based path without attempting a call.
    """
    p = (cfg.provider or "openai").lower()

    if p == "anthropic":
        if not cfg.anthropic_api_key:
            logger.info("ANTHROPIC_API_KEY not set; generative scenario analysis disabled")
            return None
        return AnthropicClient(
            api_key=cfg.anthropic_api_key,
            model=cfg.anthropic_model,
            temperature=cfg.temperature,
            timeout_s=cfg.timeout_s,
        )

    if p == "cloud":
        if not cfg.cloud_base_url or not cfg.cloud_api_key:
            logger.info("CLOUD_LLM_BASE_URL / CLOUD_LLM_API_KEY not set; generative scenario analysis disabled")
            return None
        return CloudLLMClient(
            base_url=cfg.cloud_base_url,
            api_key=cfg.cloud_api_key,
            timeout_s=cfg.timeout_s,
        )

    if p != "openai":
        logger.warning("Unknown AI_PROVIDER %r; falling back to openai", p)

    if not cfg.openai_api_key:
        logger.info("OPENAI_API_KEY not set; generative scenario analysis disabled")
        return None
    return OpenAIClient(
        api_key=cfg.openai_api_key,
        model=cfg.openai_model,
        temperature=cfg.temperature,
        timeout_s=cfg.timeout_s,
    )


@lru_cache(maxsize=1)
def get_llm_config() -> LLMConfig:
    return LLMConfig.from_env()


@lru_cache(maxsize=1)
def get_llm_client() -> Optional[LLMClient]:
    return build_llm_client(get_llm_config())
