"""
Thin adapter layer over LLM provider SDKs (OpenAI, Anthropic, …).

Each provider exposes the same interface so callers never import
provider-specific code.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from api.errors import ConfigurationError

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """Common interface that every concrete provider implements."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        temperature: float = 0.2,
        model: str | None = None,
        max_tokens: int = 2048,
    ) -> str:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# OpenAI
# ═══════════════════════════════════════════════════════════════════════════════


class OpenAIProvider(BaseLLMProvider):
    def __init__(self, api_key: str, default_model: str = "gpt-4o-mini"):
        from openai import AsyncOpenAI

        self.client = AsyncOpenAI(api_key=api_key)
        self.default_model = default_model

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        temperature: float = 0.2,
        model: str | None = None,
        max_tokens: int = 2048,
    ) -> str:
        model = model or self.default_model

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""


# ═══════════════════════════════════════════════════════════════════════════════
# Anthropic
# ═══════════════════════════════════════════════════════════════════════════════


class AnthropicProvider(BaseLLMProvider):
    def __init__(self, api_key: str, default_model: str = "claude-3-5-sonnet-20241022"):
        from anthropic import AsyncAnthropic

        self.client = AsyncAnthropic(api_key=api_key)
        self.default_model = default_model

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        temperature: float = 0.2,
        model: str | None = None,
        max_tokens: int = 2048,
    ) -> str:
        model = model or self.default_model

        kwargs = {}
        if system:
            kwargs["system"] = system

        response = await self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return response.content[0].text


# ═══════════════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════════════

_provider_cache: Dict[str, BaseLLMProvider] = {}


def get_llm_provider(
    provider_name: str,
    *,
    api_key: str,
    default_model: str | None = None,
) -> BaseLLMProvider:
    """
    Return (and cache) an LLM provider instance.

    Parameters
    ----------
    provider_name : "openai" | "anthropic"
    api_key       : provider API key; an empty key is a configuration error.
    default_model : override the default model for this provider instance.
    """
    if not api_key:
        logger.error("No API key configured for LLM provider %r", provider_name)
        raise ConfigurationError("AI service is not configured")

    cache_key = f"{provider_name}:{default_model or 'default'}"
    if cache_key in _provider_cache:
        return _provider_cache[cache_key]

    if provider_name == "openai":
        instance = OpenAIProvider(api_key=api_key, default_model=default_model or "gpt-4o-mini")
    elif provider_name == "anthropic":
        instance = AnthropicProvider(
            api_key=api_key,
            default_model=default_model or "claude-3-5-sonnet-20241022",
        )
    else:
        raise ConfigurationError(f"Unsupported LLM provider: {provider_name}")

    _provider_cache[cache_key] = instance
    return instance
