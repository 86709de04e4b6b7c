"""Unit tests for the LLM enrichment steps (LLM client mocked)."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from supplier_intel.modules.suppliers import enrichment
from supplier_intel.modules.suppliers.enrichment import (
    DEFAULT_EMPLOYEES,
    DEFAULT_REVENUE,
    analyze_company,
    analyze_url,
    company_name_from_url,
    domain_of,
    enrich_supplier,
    extract_suppliers_from_text,
    fallback_profile,
    generate_supplier_names,
    identify_procurement_categories,
    missing_required_fields,
    placeholder_news,
)
from supplier_intel.modules.suppliers.website import ContactInfo, WebsiteSignals


def _mock_llm(result=None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.extract_json = AsyncMock(side_effect=error)
    else:
        client.extract_json = AsyncMock(return_value=result)
    return client


def _patch_llm(client: MagicMock):
    return patch.object(enrichment, "get_llm_client", return_value=client)


URL_PROFILE = {
    "companyName": "Tata Steel",
    "website": "https://www.tatasteel.com",
    "employees": 77_000,
    "revenue": 27_000_000_000,
    "companyBrief": "Integrated steel producer.",
    "headquartersCity": "Mumbai",
    "headquartersCountry": "India",
    "certifications": ["ISO 9001"],
    "recentNews": [{"type": "positive", "title": "Green steel pilot", "date": "2026-10-01"}],
}


# ---------------------------------------------------------------------------
# Supplier names
# ---------------------------------------------------------------------------


async def test_generate_supplier_names_trims_and_caps() -> None:
    client = _mock_llm([" Hindalco ", "Vedanta", 42, "", "Nalco"])
    with _patch_llm(client):
        names = await generate_supplier_names("Aluminium", count=2)
    assert names == ["Hindalco", "Vedanta"]
    assert client.extract_json.call_args.kwargs["expect"] == "array"


async def test_generate_supplier_names_failure_is_empty() -> None:
    with _patch_llm(_mock_llm(error=ValueError("bad json"))):
        assert await generate_supplier_names("Aluminium") == []


# ---------------------------------------------------------------------------
# Category enrichment
# ---------------------------------------------------------------------------


async def test_enrich_supplier_applies_size_defaults() -> None:
    client = _mock_llm({"employees": 0, "headquartersCountry": "India"})
    with _patch_llm(client):
        profile = await enrich_supplier("Nalco", "Aluminium")
    assert profile.company_name == "Nalco"
    assert profile.employees == DEFAULT_EMPLOYEES
    assert profile.revenue == DEFAULT_REVENUE
    assert profile.headquarters_country == "India"


async def test_enrich_supplier_keeps_extra_fields() -> None:
    with _patch_llm(_mock_llm({"companyName": "Nalco", "revenue": 1, "employees": 2, "stockTicker": "NATIONALUM"})):
        profile = await enrich_supplier("Nalco", "Aluminium")
    assert profile.model_dump(by_alias=True)["stockTicker"] == "NATIONALUM"


async def test_enrich_supplier_failure_uses_fallback() -> None:
    with _patch_llm(_mock_llm(error=RuntimeError("rate limited"))):
        profile = await enrich_supplier("Tata Steel", "Steel")
    assert profile.website == "https://www.tatasteel.com"
    assert profile.contact_email == "contact@tatasteel.com"
    assert profile.revenue == 8_000_000_000
    assert profile.industries_served == ["Steel", "Manufacturing"]
    assert [n.type for n in profile.recent_news] == ["positive", "negative", "neutral"]


def test_fallback_profile_is_deterministic() -> None:
    assert fallback_profile("Acme", "Copper") == fallback_profile("Acme", "Copper")


# ---------------------------------------------------------------------------
# Single company analysis
# ---------------------------------------------------------------------------


async def test_analyze_company_by_name_skips_scraping() -> None:
    fetch = AsyncMock()
    client = _mock_llm({"companyType": "Public"})
    with _patch_llm(client), patch.object(enrichment, "fetch_website_signals", fetch):
        profile = await analyze_company(None, "Hindalco")
    fetch.assert_not_called()
    assert profile.company_name == "Hindalco"
    assert profile.id.startswith("single-")
    assert client.extract_json.call_args.kwargs["max_tokens"] == 4000


async def test_analyze_company_failure_falls_back_to_scraped_signals() -> None:
    signals = WebsiteSignals(
        title="Acme Metals",
        contact_info=ContactInfo(emails=["sales@acme.com"]),
        location="1200 Main Street, Springfield, IL 62704",
    )
    fetch = AsyncMock(return_value=signals)
    with _patch_llm(_mock_llm(error=ValueError("no json"))), patch.object(
        enrichment, "fetch_website_signals", fetch
    ):
        profile = await analyze_company("https://acme.com", None)

    fetch.assert_awaited_once_with("https://acme.com")
    assert profile.company_name == "Acme Metals"
    assert profile.contact_email == "sales@acme.com"
    assert profile.headquarters_address == signals.location
    assert profile.employees == 0
    assert profile.headquarters_city == "N/A"


# ---------------------------------------------------------------------------
# URL analysis
# ---------------------------------------------------------------------------


def test_url_helpers() -> None:
    assert domain_of("https://www.tatasteel.com/about") == "tatasteel.com"
    assert company_name_from_url("https://www.tatasteel.com/about") == "Tatasteel"
    assert company_name_from_url("http://jindal.co.in") == "Jindal"


def test_missing_required_fields() -> None:
    data = dict(URL_PROFILE, revenue="N/A", certifications=[])
    assert missing_required_fields(data) == ["revenue", "certifications"]
    assert missing_required_fields(URL_PROFILE) == []


def test_placeholder_news_dates() -> None:
    news = placeholder_news("Acme", today=date(2026, 10, 18))
    assert [(n.type, n.date) for n in news] == [
        ("positive", "2026-10-11"),
        ("negative", "2026-09-27"),
        ("neutral", "2026-10-04"),
    ]


async def test_analyze_url_pads_thin_news() -> None:
    url = "https://www.tatasteel.com"
    with _patch_llm(_mock_llm(dict(URL_PROFILE))):
        profile = await analyze_url(url)
    assert profile.company_name == "Tata Steel"
    assert profile.id.startswith("url-")
    assert not profile.id.startswith("url-fallback-")
    assert len(profile.recent_news) == 3
    assert profile.pdf_context.source_url == url
    assert profile.pdf_context.extracted_from_pdf is True


async def test_analyze_url_incomplete_answer_uses_fallback() -> None:
    url = "https://www.tatasteel.com/products"
    with _patch_llm(_mock_llm(dict(URL_PROFILE, headquartersCity=""))):
        profile = await analyze_url(url)
    assert profile.id.startswith("url-fallback-")
    assert profile.company_name == "Tatasteel"
    assert profile.contact_email == "contact@tatasteel.com"
    assert profile.website == url
    assert profile.pdf_context.source_url == url


# ---------------------------------------------------------------------------
# PDF supplier extraction & procurement categories
# ---------------------------------------------------------------------------


async def test_extract_suppliers_keeps_objects_only() -> None:
    with _patch_llm(_mock_llm([{"companyName": "Acme"}, "Beta", {"companyName": "Gamma"}])):
        suppliers = await extract_suppliers_from_text("vendor list ...")
    assert [s.company_name for s in suppliers] == ["Acme", "Gamma"]


async def test_extract_suppliers_propagates_parse_failure() -> None:
    with _patch_llm(_mock_llm(error=ValueError("Expected JSON array"))):
        with pytest.raises(ValueError):
            await extract_suppliers_from_text("vendor list ...")


async def test_categories_short_prompt_for_long_documents() -> None:
    items = [{"category": f"Cat {i}", "requirements": "spec", "relevance": "High"} for i in range(7)]
    items.insert(2, {"requirements": "no category"})
    client = _mock_llm(items)
    with _patch_llm(client):
        categories = await identify_procurement_categories("x" * 12_000)

    assert [c.category for c in categories] == ["Cat 0", "Cat 1", "Cat 2", "Cat 3", "Cat 4"]
    assert client.extract_json.call_args.kwargs["max_tokens"] == 300
    assert "x" * 3_001 not in client.extract_json.call_args.args[1]


async def test_categories_truncate_medium_documents() -> None:
    client = _mock_llm([{"category": "Steel"}])
    with _patch_llm(client):
        await identify_procurement_categories("y" * 9_000)
    user_content = client.extract_json.call_args.args[1]
    assert "... [truncated]" in user_content
    assert client.extract_json.call_args.kwargs["max_tokens"] == 500


async def test_categories_failure_is_empty() -> None:
    with _patch_llm(_mock_llm(error=RuntimeError("timeout"))):
        assert await identify_procurement_categories("short text") == []
