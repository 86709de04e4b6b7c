"""LLM client abstraction shared by the discovery and enrichment pipelines.

Providers supported:
  - openai (default)
  - anthropic
  - google (Gemini)

Every pipeline step asks for JSON and parses it with ``parse_json_response``,
which tolerates markdown code fences and chatter around the JSON payload.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Literal

import structlog

from supplier_intel.core.config import settings

logger = structlog.get_logger()

# Default models per provider
DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4.1-mini",
    "anthropic": "claude-haiku-4-5-20251001",
    "google": "gemini-2.0-flash",
}

JsonShape = Literal["object", "array"]

_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def strip_code_fences(raw_text: str) -> str:
    """Strip markdown code fences (```json ... ```) from LLM response."""
    text = raw_text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_json_response(raw_text: str, expect: JsonShape = "object") -> Any:
    """Parse LLM output as JSON.

    Strips code fences, then cuts the outermost ``{...}`` (or ``[...]``) block
    out of any surrounding prose. Raises ``ValueError`` when nothing parses or
    the payload has the wrong shape.
    """
    text = strip_code_fences(raw_text or "")
    pattern = _OBJECT_RE if expect == "object" else _ARRAY_RE
    match = pattern.search(text)
    if match:
        text = match.group(0)

    data = json.loads(text)
    expected_type = dict if expect == "object" else list
    if not isinstance(data, expected_type):
        raise ValueError(f"Expected JSON {expect}, got {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class LLMClient(ABC):
    """Abstract base for LLM providers."""

    provider: str = ""

    def __init__(self, model: str | None = None) -> None:
        self.model = model or resolve_model(self.provider)

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_object: bool = False,
    ) -> str:
        """Send a prompt and return the raw text response."""
        ...

    async def extract_json(
        self,
        system_prompt: str,
        user_content: str,
        *,
        expect: JsonShape = "object",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Any:
        """Send a prompt and return the parsed JSON payload."""
        raw = await self.complete(
            system_prompt,
            user_content,
            temperature=temperature,
            max_tokens=max_tokens,
            json_object=expect == "object",
        )
        return parse_json_response(raw, expect=expect)


class OpenAIClient(LLMClient):
    provider = "openai"

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_object: bool = False,
    ) -> str:
        from openai import AsyncOpenAI

        client = AsyncOpenAI(api_key=settings.openai_api_key)
        kwargs: dict[str, Any] = {}
        if json_object:
            kwargs["response_format"] = {"type": "json_object"}
        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            temperature=settings.llm_temperature if temperature is None else temperature,
            max_tokens=max_tokens or settings.llm_max_tokens,
            **kwargs,
        )
        return response.choices[0].message.content or ""


class AnthropicClient(LLMClient):
    provider = "anthropic"

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_object: bool = False,
    ) -> str:
        from anthropic import AsyncAnthropic

        client = AsyncAnthropic(api_key=settings.anthropic_api_key)
        response = await client.messages.create(
            model=self.model,
            max_tokens=max_tokens or settings.llm_max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_content}],
            temperature=settings.llm_temperature if temperature is None else temperature,
        )
        return response.content[0].text if response.content else ""


class GoogleClient(LLMClient):
    provider = "google"

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_object: bool = False,
    ) -> str:
        from google import genai

        client = genai.Client(api_key=settings.google_ai_api_key)
        config_kwargs: dict[str, Any] = {
            "system_instruction": system_prompt,
            "temperature": settings.llm_temperature if temperature is None else temperature,
            "max_output_tokens": max_tokens or settings.llm_max_tokens,
        }
        if json_object:
            config_kwargs["response_mime_type"] = "application/json"
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=user_content,
            config=genai.types.GenerateContentConfig(**config_kwargs),
        )
        return response.text or ""


_CLIENTS: dict[str, type[LLMClient]] = {
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "google": GoogleClient,
}


def resolve_model(provider: str) -> str:
    """Resolve the model name: use llm_model if set, else provider default."""
    if settings.llm_model:
        return settings.llm_model
    return DEFAULT_MODELS.get(provider, DEFAULT_MODELS["openai"])


def get_llm_client(model: str | None = None) -> LLMClient:
    """Factory: return the configured LLM client."""
    provider = settings.llm_provider.lower()
    client_cls = _CLIENTS.get(provider)
    if client_cls is None:
        raise ValueError(f"Unsupported LLM provider: {settings.llm_provider}")
    return client_cls(model=model)
