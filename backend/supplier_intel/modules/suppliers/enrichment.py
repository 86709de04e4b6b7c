"""LLM enrichment steps: supplier names, full profiles, URL analysis, PDF parsing.

Each step asks the configured LLM for JSON. A failed call or an unparsable
answer degrades to a deterministic fallback instead of failing the request,
except ``extract_suppliers_from_text`` whose caller reports the failure.
"""

from __future__ import annotations

import time
import uuid
from datetime import date, timedelta
from typing import Any
from urllib.parse import urlparse

import structlog

from supplier_intel.core.llm import get_llm_client
from supplier_intel.modules.suppliers import prompts
from supplier_intel.modules.suppliers.schemas import (
    NewsItem,
    PdfContext,
    ProcurementCategory,
    SupplierProfile,
)
from supplier_intel.modules.suppliers.website import WebsiteSignals, fetch_website_signals

logger = structlog.get_logger()

DEFAULT_EMPLOYEES = 10_000
DEFAULT_REVENUE = 5_000_000_000

MAX_PROCUREMENT_CATEGORIES = 5
LONG_TEXT_THRESHOLD = 10_000
SHORT_PROMPT_CHARS = 3_000
CATEGORY_PROMPT_CHARS = 8_000

URL_REQUIRED_FIELDS = (
    "companyName",
    "website",
    "employees",
    "revenue",
    "companyBrief",
    "headquartersCity",
    "headquartersCountry",
    "certifications",
    "recentNews",
)

# Days before today for the positive / negative / neutral placeholder items
_PLACEHOLDER_NEWS_OFFSETS = (7, 21, 14)


def _millis() -> int:
    return int(time.time() * 1000)


def _slug(name: str) -> str:
    return "".join(name.lower().split())


def _news_dates(today: date | None = None) -> list[str]:
    today = today or date.today()
    return [(today - timedelta(days=days)).isoformat() for days in _PLACEHOLDER_NEWS_OFFSETS]


# ---------------------------------------------------------------------------
# Supplier names
# ---------------------------------------------------------------------------


async def generate_supplier_names(category: str, count: int = 3) -> list[str]:
    """Ask the LLM for real supplier names; empty list on failure."""
    try:
        client = get_llm_client()
        data = await client.extract_json(
            prompts.NAMES_SYSTEM_PROMPT,
            prompts.supplier_names_prompt(category, count),
            expect="array",
            max_tokens=200,
        )
    except Exception:
        logger.warning("Supplier name generation failed", category=category, exc_info=True)
        return []

    names = [str(name).strip() for name in data if isinstance(name, str) and name.strip()]
    logger.info("Supplier names generated", category=category, names=names[:count])
    return names[:count]


# ---------------------------------------------------------------------------
# Category enrichment
# ---------------------------------------------------------------------------


def fallback_profile(company_name: str, category: str) -> SupplierProfile:
    """Deterministic profile used when the LLM cannot enrich a supplier."""
    slug = _slug(company_name)
    positive, negative, neutral = _news_dates()
    return SupplierProfile(
        company_name=company_name,
        company_type="Public",
        website=f"https://www.{slug}.com",
        employees=25_000,
        revenue=8_000_000_000,
        company_brief=(
            f"{company_name} is a major player in the {category} industry, known for quality "
            "products and global operations."
        ),
        year_founded=1990,
        headquarters_address="Corporate Headquarters",
        headquarters_city="Mumbai",
        headquarters_country="India",
        latitude=19.0760,
        longitude=72.8777,
        subsidiaries=[f"{company_name} International", f"{company_name} Solutions"],
        production_capacity="Large-scale production facilities",
        contact_email=f"contact@{slug}.com",
        ceo=f"{company_name} Executive",
        certifications=["ISO 9001:2015", "ISO 14001"],
        awards=["Industry Excellence Award"],
        diversity="Committed to workplace diversity and inclusion",
        esg_status="Active sustainability and ESG initiatives",
        cybersecurity_updates="Regular security audits and updates",
        industries_served=[category, "Manufacturing"],
        net_profit_margin="12.5%",
        strengths=["Market leadership", "Quality products", "Global presence"],
        weaknesses=["Market volatility", "Regulatory challenges"],
        supply_chain_disruptions="Minimal disruptions with robust supply chain",
        product_offerings={f"{category} Products": "Yes", "Custom Solutions": "Yes"},
        value_added_services=["Technical support", "Consulting", "Maintenance"],
        geographic_coverage=["India", "Asia Pacific", "North America"],
        plant_shutdowns="Scheduled maintenance as per industry standards",
        recent_news=[
            NewsItem(
                type="positive",
                title=f"{company_name} reports strong quarterly results",
                date=positive,
                description="Company shows consistent growth and market expansion",
                source="Business Standard",
                impact="Positive investor sentiment and market confidence",
            ),
            NewsItem(
                type="negative",
                title=f"{company_name} faces supply chain challenges",
                date=negative,
                description="Raw material price volatility and logistics issues",
                source="Economic Times",
                impact="Temporary impact on margins and delivery schedules",
            ),
            NewsItem(
                type="neutral",
                title=f"{company_name} announces routine maintenance schedule",
                date=neutral,
                description="Planned maintenance across manufacturing facilities",
                source="Industry Today",
                impact="Minimal business impact",
            ),
        ],
    )


def _apply_size_defaults(data: dict[str, Any]) -> dict[str, Any]:
    if not data.get("employees"):
        data["employees"] = DEFAULT_EMPLOYEES
    if not data.get("revenue"):
        data["revenue"] = DEFAULT_REVENUE
    return data


async def enrich_supplier(company_name: str, category: str) -> SupplierProfile:
    """Full supplier profile for a named company in ``category``."""
    try:
        client = get_llm_client()
        data = await client.extract_json(
            prompts.PROFILE_SYSTEM_PROMPT,
            prompts.supplier_profile_prompt(company_name, category),
            expect="object",
        )
        data.setdefault("companyName", company_name)
        profile = SupplierProfile.model_validate(_apply_size_defaults(data))
    except Exception:
        logger.warning("Supplier enrichment failed, using defaults", company=company_name, exc_info=True)
        return fallback_profile(company_name, category)

    logger.info("Supplier enriched", company=profile.company_name, category=category)
    return profile


# ---------------------------------------------------------------------------
# Single company (website) analysis
# ---------------------------------------------------------------------------


def website_fallback_profile(
    website_url: str | None,
    company_name: str | None,
    signals: WebsiteSignals,
) -> SupplierProfile:
    """Minimal profile built from scraped signals only."""
    emails = signals.contact_info.emails
    return SupplierProfile(
        id=f"single-{_millis()}",
        company_name=company_name or signals.title or "Unknown Company",
        company_type="Unknown",
        website=website_url or "N/A",
        employees=0,
        revenue=0,
        company_brief=f"Analysis of {company_name or 'company'} from website data",
        year_founded=0,
        headquarters_address=signals.location or "N/A",
        headquarters_city="N/A",
        headquarters_country="N/A",
        latitude=0,
        longitude=0,
        contact_email=emails[0] if emails else "N/A",
        website_analysis={
            "websiteQuality": "Unknown",
            "digitalPresence": "Unknown",
            "onlineReputation": "Unknown",
        },
    )


async def analyze_company(website_url: str | None, company_name: str | None) -> SupplierProfile:
    """Scrape the company's website (when given) and enrich it with the LLM."""
    signals = await fetch_website_signals(website_url) if website_url else WebsiteSignals()

    try:
        client = get_llm_client()
        data = await client.extract_json(
            prompts.WEBSITE_SYSTEM_PROMPT,
            prompts.website_profile_prompt(website_url, company_name, signals.model_dump()),
            expect="object",
            temperature=0.2,
            max_tokens=4000,
        )
        data["id"] = f"single-{_millis()}"
        if company_name:
            data.setdefault("companyName", company_name)
        profile = SupplierProfile.model_validate(data)
    except Exception:
        logger.warning(
            "Company analysis failed, using scraped signals",
            website=website_url,
            company=company_name,
            exc_info=True,
        )
        return website_fallback_profile(website_url, company_name, signals)

    logger.info("Company analyzed", company=profile.company_name, website=website_url)
    return profile


# ---------------------------------------------------------------------------
# URL analysis (PDF discovery)
# ---------------------------------------------------------------------------


def domain_of(url: str) -> str:
    host = urlparse(url).hostname or ""
    return host.removeprefix("www.")


def company_name_from_url(url: str) -> str:
    """``https://www.tatasteel.com/x`` -> ``Tatasteel``."""
    label = domain_of(url).split(".")[0]
    return label[:1].upper() + label[1:]


def placeholder_news(company_name: str, today: date | None = None) -> list[NewsItem]:
    positive, negative, neutral = _news_dates(today)
    return [
        NewsItem(
            type="positive",
            title=f"{company_name} expands market presence",
            date=positive,
            description="Strategic growth initiatives driving business expansion",
            source="Industry Report",
            impact="Positive outlook for future growth",
        ),
        NewsItem(
            type="negative",
            title=f"{company_name} faces industry challenges",
            date=negative,
            description="Addressing market volatility and supply chain adjustments",
            source="Market Analysis",
            impact="Implementing strategic responses to challenges",
        ),
        NewsItem(
            type="neutral",
            title=f"{company_name} maintains steady operations",
            date=neutral,
            description="Consistent operational performance across key markets",
            source="Business News",
            impact="Stable market position maintained",
        ),
    ]


def missing_required_fields(data: dict[str, Any]) -> list[str]:
    """Required URL-profile fields that are absent, empty or "N/A"."""
    missing = []
    for field in URL_REQUIRED_FIELDS:
        value = data.get(field)
        if not value or value == "N/A":
            missing.append(field)
    return missing


def url_fallback_profile(url: str) -> SupplierProfile:
    domain = domain_of(url)
    company_name = company_name_from_url(url)
    return SupplierProfile(
        id=f"url-fallback-{_millis()}",
        company_name=company_name,
        company_type="Private",
        website=url,
        employees=1000,
        revenue=500_000_000,
        company_brief=(
            f"{company_name} is a leading company in its industry, providing innovative solutions "
            "and maintaining strong market presence."
        ),
        year_founded=2000,
        headquarters_address="Business District, Corporate Tower",
        headquarters_city="Mumbai",
        headquarters_country="India",
        latitude=19.0760,
        longitude=72.8777,
        subsidiaries=[f"{company_name} Solutions", f"{company_name} International"],
        production_capacity="10,000 units per month",
        contact_email=f"contact@{domain}",
        ceo=f"{company_name} CEO",
        certifications=["ISO 9001:2015", "ISO 14001"],
        awards=["Industry Excellence Award"],
        diversity="Committed to workplace diversity and inclusion",
        esg_status="Active ESG initiatives and sustainability programs",
        cybersecurity_updates="Regular security updates and compliance measures",
        industries_served=["Manufacturing", "Technology"],
        net_profit_margin="12%",
        strengths=["Market presence", "Quality products", "Customer focus"],
        weaknesses=["Market competition", "Regulatory changes"],
        supply_chain_disruptions="Minimal disruptions with strong supply chain management",
        product_offerings={"Core Products": "Yes", "Custom Solutions": "Yes"},
        value_added_services=["Technical support", "Consulting"],
        geographic_coverage=["India", "Asia Pacific"],
        plant_shutdowns="Scheduled maintenance as per industry standards",
        recent_news=placeholder_news(company_name),
    )


async def analyze_url(url: str) -> SupplierProfile:
    """Profile for the company behind ``url``, tagged with its PDF origin."""
    company_name = company_name_from_url(url)
    try:
        client = get_llm_client()
        data = await client.extract_json(
            prompts.URL_SYSTEM_PROMPT,
            prompts.url_profile_prompt(url, domain_of(url), company_name),
            expect="object",
            temperature=0.2,
        )
        missing = missing_required_fields(data)
        if missing:
            raise ValueError(f"Missing or invalid required field: {missing[0]}")

        data["id"] = f"url-{_millis()}-{uuid.uuid4().hex[:9]}"
        profile = SupplierProfile.model_validate(data)
        if len(profile.recent_news) < 3:
            profile.recent_news = placeholder_news(company_name)
    except Exception:
        logger.warning("URL analysis failed", url=url, exc_info=True)
        profile = url_fallback_profile(url)

    profile.pdf_context = PdfContext(source_url=url)
    logger.info("URL analyzed", url=url, company=profile.company_name)
    return profile


# ---------------------------------------------------------------------------
# PDF supplier extraction & procurement categories
# ---------------------------------------------------------------------------


async def extract_suppliers_from_text(text: str) -> list[SupplierProfile]:
    """Supplier records the LLM finds in a document's text.

    Raises ``ValueError`` when the answer is not a JSON array.
    """
    client = get_llm_client()
    data = await client.extract_json(
        prompts.PDF_EXTRACTION_SYSTEM_PROMPT,
        prompts.pdf_suppliers_prompt(text),
        expect="array",
        temperature=0.2,
        max_tokens=4000,
    )
    suppliers = [SupplierProfile.model_validate(item) for item in data if isinstance(item, dict)]
    logger.info("Suppliers extracted from PDF text", total=len(suppliers))
    return suppliers


async def identify_procurement_categories(text: str) -> list[ProcurementCategory]:
    """Up to five procurement categories mentioned in ``text``; [] on failure."""
    if len(text) > LONG_TEXT_THRESHOLD:
        user_content = prompts.procurement_categories_short_prompt(text[:SHORT_PROMPT_CHARS])
        max_tokens = 300
    else:
        truncated = text
        if len(text) > CATEGORY_PROMPT_CHARS:
            truncated = text[:CATEGORY_PROMPT_CHARS] + "... [truncated]"
        user_content = prompts.procurement_categories_prompt(truncated)
        max_tokens = 500

    try:
        client = get_llm_client()
        data = await client.extract_json(
            prompts.CATEGORIES_SYSTEM_PROMPT,
            user_content,
            expect="array",
            temperature=0.3,
            max_tokens=max_tokens,
        )
        categories = [
            ProcurementCategory.model_validate(item)
            for item in data
            if isinstance(item, dict) and item.get("category")
        ]
    except Exception:
        logger.warning("Procurement category detection failed", exc_info=True)
        return []

    return categories[:MAX_PROCUREMENT_CATEGORIES]
