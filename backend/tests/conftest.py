"""Shared test fixtures for the supplier intelligence test suite."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from supplier_intel.core.config import settings
from supplier_intel.main import app


@pytest.fixture(autouse=True)
def _fast_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """No real API keys and no pacing delays in tests."""
    monkeypatch.setattr(settings, "serp_api_key", "")
    monkeypatch.setattr(settings, "search_delay_seconds", 0.0)
    monkeypatch.setattr(settings, "enrichment_delay_seconds", 0.0)
    monkeypatch.setattr(settings, "url_analysis_delay_seconds", 0.0)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client that talks directly to the FastAPI ASGI app."""
    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac  # type: ignore[misc]


def make_supplier(name: str, **fields: Any) -> dict[str, Any]:
    """Minimal camelCase supplier payload."""
    return {"companyName": name, **fields}


@pytest.fixture
def suppliers() -> list[dict[str, Any]]:
    """Three suppliers with distinct sizes, coverage and news."""
    return [
        make_supplier(
            "Hindalco Industries",
            id="aluminium-1",
            revenue=26_000_000_000,
            employees=40_000,
            yearFounded=1958,
            certifications=["ISO 9001", "ISO 14001", "ASI"],
            geographicCoverage=["India", "USA", "Germany"],
            esgStatus="Net zero by 2050",
            headquartersCountry="India",
            strengths=["Integrated operations"],
            weaknesses=["Energy costs"],
            productOfferings={"Rolled products": "Yes", "Extrusions": "Yes"},
            recentNews=[
                {"type": "positive", "title": "Capacity expansion", "date": "2026-10-01"},
                {"type": "negative", "title": "Plant outage", "date": "2026-09-20"},
            ],
        ),
        make_supplier(
            "Alcoa Corporation",
            id="aluminium-2",
            revenue=10_500_000_000,
            employees=13_600,
            yearFounded=1888,
            certifications=["ISO 9001"],
            geographicCoverage=["USA", "Australia"],
            esgStatus="",
            headquartersCountry="United States",
            productOfferings={"Alumina": "Yes", "Rolled products": "No"},
            recentNews=[
                {"type": "neutral", "title": "Quarterly results", "date": "2026-10-10"},
            ],
        ),
        make_supplier(
            "Chalco",
            id="aluminium-3",
            revenue="18,000,000,000",
            employees=None,
            certifications=[],
            geographicCoverage=["China"],
            headquartersCountry="China",
            recentNews=[
                {"type": "positive", "title": "New smelter", "date": "not a date"},
            ],
        ),
    ]
