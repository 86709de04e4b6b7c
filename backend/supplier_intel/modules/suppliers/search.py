"""Supplier name discovery via Google SERP API (serpapi.com).

Runs a set of region-flavoured queries for a category, pulls candidate
company names out of organic result titles/snippets, buckets them by the
region the query targeted, and picks a geographically balanced shortlist.
"""

from __future__ import annotations

import asyncio
import math
import re
from collections.abc import Mapping
from enum import Enum

import httpx
import structlog

from supplier_intel.core.config import settings

logger = structlog.get_logger()


class Region(str, Enum):
    india = "india"
    us = "us"
    china = "china"
    other = "other"


# Share of the shortlist reserved per region; "other" takes what is left
REGION_SHARES: dict[Region, float] = {
    Region.india: 0.35,
    Region.us: 0.25,
    Region.china: 0.20,
}

CATEGORY_QUERY_TEMPLATES = [
    # Global
    "top {category} manufacturers companies worldwide",
    "largest {category} suppliers global",
    "best {category} producers companies international",
    # India
    "top {category} manufacturers companies India",
    "largest {category} suppliers India",
    "{category} industry leaders India",
    "Indian {category} manufacturers companies",
    # US
    "top {category} manufacturers companies USA",
    "largest {category} suppliers United States",
    "{category} industry leaders USA",
    # China
    "top {category} manufacturers companies China",
    "largest {category} suppliers China",
    "{category} industry leaders China",
    # Europe
    "top {category} manufacturers companies Europe",
    "largest {category} suppliers Europe",
    # Other regions
    "top {category} manufacturers companies Asia Pacific",
    "{category} suppliers Middle East",
    "{category} manufacturers Africa",
]

REQUIREMENT_QUERY_TEMPLATES = [
    "{category} suppliers {requirements}",
    "{category} manufacturers {requirements} companies",
]

PDF_QUERY_TEMPLATES = [
    "top {category} manufacturers companies worldwide",
    "largest {category} suppliers global",
    "best {category} producers companies international",
    "top {category} manufacturers companies India",
    "largest {category} suppliers India",
    "top {category} manufacturers companies USA",
    "largest {category} suppliers United States",
    "top {category} manufacturers companies China",
    "largest {category} suppliers China",
    "top {category} manufacturers companies Europe",
]

_COMPANY_NAME_PATTERNS = [
    re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"),
    re.compile(
        r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+(?:Inc|Corp|Ltd|LLC|Company|Manufacturing|Industries)",
        re.IGNORECASE,
    ),
    re.compile(
        r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+(?:Group|Holdings|International|Global)",
        re.IGNORECASE,
    ),
]

_INVALID_NAME_TERMS = (
    "wikipedia", "linkedin", "facebook", "twitter", "youtube", "google",
    "amazon", "ebay", "alibaba", "search", "results", "news", "article",
    "blog", "forum", "directory", "list", "top", "best", "largest",
)


# ---------------------------------------------------------------------------
# Query building & name extraction
# ---------------------------------------------------------------------------


def build_search_queries(category: str, requirements: str = "", *, pdf: bool = False) -> list[str]:
    """Search queries for a category, optionally narrowed by PDF requirements."""
    templates = PDF_QUERY_TEMPLATES if pdf else CATEGORY_QUERY_TEMPLATES
    queries = [t.format(category=category) for t in templates]
    if requirements:
        specific = [t.format(category=category, requirements=requirements) for t in REQUIREMENT_QUERY_TEMPLATES]
        queries = queries[:3] + specific + queries[3:]
    return queries


def region_for_query(query: str) -> Region:
    lowered = query.lower()
    if "india" in lowered or "indian" in lowered:
        return Region.india
    if "usa" in lowered or "united states" in lowered:
        return Region.us
    if "china" in lowered or "chinese" in lowered:
        return Region.china
    return Region.other


def extract_company_name(title: str, snippet: str = "") -> str | None:
    """Best-effort company name from a search result title + snippet."""
    text = f"{title or ''} {snippet or ''}"
    for pattern in _COMPANY_NAME_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1):
            name = match.group(1).strip()
            if 2 < len(name) < 50:
                return name
    return None


def is_valid_company_name(name: str | None) -> bool:
    if not name or len(name) < 2 or len(name) > 50:
        return False
    lowered = name.lower()
    return not any(term in lowered for term in _INVALID_NAME_TERMS)


# ---------------------------------------------------------------------------
# Geographic load balancing
# ---------------------------------------------------------------------------


def region_quotas(total: int) -> dict[Region, int]:
    quotas = {region: math.ceil(total * share) for region, share in REGION_SHARES.items()}
    quotas[Region.other] = max(total - sum(quotas.values()), 0)
    return quotas


def balance_by_region(buckets: Mapping[Region, list[str]], total: int) -> list[str]:
    """Pick up to ``total`` names, filling each region's quota first.

    Shortfalls are filled from the names left over in each bucket, in
    India / US / China / other order. A name already chosen is never repeated.
    """
    if total <= 0:
        return []

    quotas = region_quotas(total)
    order = [Region.india, Region.us, Region.china, Region.other]
    chosen: list[str] = []
    seen: set[str] = set()

    def take(names: list[str], limit: int | None) -> None:
        taken = 0
        for name in names:
            if limit is not None and taken >= limit:
                break
            if name in seen:
                continue
            chosen.append(name)
            seen.add(name)
            taken += 1

    for region in order:
        take(list(buckets.get(region, [])), quotas[region])

    if len(chosen) < total:
        for region in order:
            take(list(buckets.get(region, [])), None)

    return chosen[:total]


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------


class SerpSearchCollector:
    """Collects candidate supplier names from Google organic results."""

    def __init__(
        self,
        queries: list[str],
        results_per_query: int | None = None,
        delay_seconds: float | None = None,
    ) -> None:
        self.queries = queries
        self.results_per_query = results_per_query or settings.serp_results_per_query
        self.delay_seconds = settings.search_delay_seconds if delay_seconds is None else delay_seconds

    async def collect(self) -> dict[Region, list[str]]:
        buckets: dict[Region, list[str]] = {region: [] for region in Region}

        if not settings.serp_api_key:
            logger.warning("SERP search skipped", reason="No API key configured (SERP_API_KEY)")
            return buckets

        async with httpx.AsyncClient(timeout=30.0) as client:
            for index, query in enumerate(self.queries):
                if index and self.delay_seconds:
                    await asyncio.sleep(self.delay_seconds)
                try:
                    resp = await client.get(
                        settings.serp_base_url,
                        params={
                            "q": query,
                            "api_key": settings.serp_api_key,
                            "num": self.results_per_query,
                            "gl": "us",
                            "hl": "en",
                            "safe": "active",
                        },
                    )
                    resp.raise_for_status()
                    data = resp.json()
                except Exception:
                    logger.warning("SERP query failed", query=query, exc_info=True)
                    continue

                bucket = buckets[region_for_query(query)]
                for result in data.get("organic_results", []) or []:
                    name = extract_company_name(result.get("title", ""), result.get("snippet", ""))
                    if name and is_valid_company_name(name) and name not in bucket:
                        bucket.append(name)

        logger.info(
            "SERP search collected",
            india=len(buckets[Region.india]),
            us=len(buckets[Region.us]),
            china=len(buckets[Region.china]),
            other=len(buckets[Region.other]),
        )
        return buckets


async def search_supplier_names(
    category: str,
    requirements: str = "",
    *,
    total: int | None = None,
    pdf: bool = False,
) -> list[str]:
    """Balanced shortlist of supplier names for a category (may be empty)."""
    total = total or settings.discovery_max_suppliers
    collector = SerpSearchCollector(build_search_queries(category, requirements, pdf=pdf))
    buckets = await collector.collect()
    names = balance_by_region(buckets, total)
    logger.info("Supplier names balanced by region", category=category, total=len(names))
    return names
