"""Unit tests for LLM response parsing and client selection."""

from __future__ import annotations

import pytest

from supplier_intel.core.config import settings
from supplier_intel.core.llm import (
    AnthropicClient,
    OpenAIClient,
    get_llm_client,
    parse_json_response,
    resolve_model,
    strip_code_fences,
)


def test_strip_code_fences() -> None:
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_object_surrounded_by_prose() -> None:
    raw = 'Sure! Here is the profile:\n{"companyName": "Acme", "employees": 10}\nHope this helps.'
    assert parse_json_response(raw) == {"companyName": "Acme", "employees": 10}


def test_parse_fenced_array() -> None:
    raw = '```json\n[{"companyName": "Acme"}, {"companyName": "Beta"}]\n```'
    assert parse_json_response(raw, expect="array") == [
        {"companyName": "Acme"},
        {"companyName": "Beta"},
    ]


def test_parse_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError, match="Expected JSON array"):
        parse_json_response('{"a": 1}', expect="array")


def test_parse_rejects_non_json() -> None:
    with pytest.raises(ValueError):
        parse_json_response("I could not find any suppliers.")


def test_get_llm_client_by_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "llm_model", "")
    monkeypatch.setattr(settings, "llm_provider", "Anthropic")
    client = get_llm_client()
    assert isinstance(client, AnthropicClient)
    assert client.model == resolve_model("anthropic")

    monkeypatch.setattr(settings, "llm_provider", "openai")
    assert isinstance(get_llm_client("gpt-4o"), OpenAIClient)
    assert get_llm_client("gpt-4o").model == "gpt-4o"


def test_get_llm_client_unknown_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "llm_provider", "mistral")
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        get_llm_client()


def test_resolve_model_prefers_configured_model(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "llm_model", "custom-model")
    assert resolve_model("google") == "custom-model"
