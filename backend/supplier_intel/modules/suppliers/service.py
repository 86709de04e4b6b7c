"""Supplier discovery orchestration.

Flows:
  - discover_suppliers: category -> SERP names (AI fallback) -> profiles
  - discover_from_pdf: PDF -> company URLs -> per-URL profiles
  - discover_by_pdf_category: PDF -> procurement categories -> SERP names -> profiles
  - extract_suppliers_from_pdf: PDF -> LLM supplier extraction
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import structlog

from supplier_intel.core.config import settings
from supplier_intel.modules.suppliers.enrichment import (
    analyze_url,
    enrich_supplier,
    extract_suppliers_from_text,
    generate_supplier_names,
    identify_procurement_categories,
)
from supplier_intel.modules.suppliers.pdf_service import extract_pdf_text, extract_urls
from supplier_intel.modules.suppliers.schemas import (
    DiscoverResponse,
    PdfCategoryDiscoveryResponse,
    PdfDiscoveryResponse,
    PdfInfo,
    SupplierProfile,
)
from supplier_intel.modules.suppliers.search import search_supplier_names
from supplier_intel.modules.suppliers.taxonomy import get_taxonomy_codes

logger = structlog.get_logger()

SEARCH_DATA_SOURCE = "Real-time Google SERP + LLM"
PDF_DATA_SOURCE = "PDF URL Extraction + Website Analysis + LLM"
PDF_CATEGORY_DATA_SOURCE = "PDF Category Analysis + Google SERP + LLM"


class NoSuppliersFoundError(LookupError):
    """Neither search nor the AI fallback produced a supplier name."""


class NoUrlsFoundError(LookupError):
    """The PDF contains no company website URL."""


class NoCategoriesFoundError(LookupError):
    """No procurement category could be identified in the PDF."""


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def find_supplier_names(
    category: str,
    requirements: str = "",
    *,
    total: int | None = None,
    pdf: bool = False,
) -> list[str]:
    """SERP shortlist, falling back to LLM-generated names when search finds nothing."""
    total = total or settings.discovery_max_suppliers
    names = await search_supplier_names(category, requirements, total=total, pdf=pdf)
    if not names:
        logger.info("SERP search empty, using AI fallback", category=category)
        names = await generate_supplier_names(category, total)
    return names


async def enrich_suppliers(names: list[str], category: str) -> list[SupplierProfile]:
    """Profiles for ``names``, ids ``<category>-<n>``, one LLM call at a time."""
    suppliers: list[SupplierProfile] = []
    for index, name in enumerate(names):
        if index and settings.enrichment_delay_seconds:
            await asyncio.sleep(settings.enrichment_delay_seconds)
        profile = await enrich_supplier(name, category)
        profile.id = f"{category.lower()}-{index + 1}"
        suppliers.append(profile)
    return suppliers


async def discover_suppliers(category: str) -> DiscoverResponse:
    names = await find_supplier_names(category)
    if not names:
        raise NoSuppliersFoundError(category)

    logger.info("Supplier names found", category=category, total=len(names))
    suppliers = await enrich_suppliers(names, category)
    logger.info("Suppliers discovered", category=category, total=len(suppliers))

    return DiscoverResponse(
        suppliers=suppliers,
        taxonomy_codes=get_taxonomy_codes(category),
        category=category,
        total_suppliers=len(suppliers),
        generated_at=utc_now(),
        data_source=SEARCH_DATA_SOURCE,
    )


async def discover_from_pdf(pdf_bytes: bytes, filename: str) -> PdfDiscoveryResponse:
    """Analyse every company URL found in the PDF, in document order."""
    extracted = extract_pdf_text(pdf_bytes)
    urls = extract_urls(extracted.text)
    if not urls:
        raise NoUrlsFoundError(filename)

    logger.info("PDF URLs extracted", filename=filename, total=len(urls))

    suppliers: list[SupplierProfile] = []
    processed: list[str] = []
    for index, url in enumerate(urls):
        if index and settings.url_analysis_delay_seconds:
            await asyncio.sleep(settings.url_analysis_delay_seconds)
        suppliers.append(await analyze_url(url))
        processed.append(url)

    logger.info("PDF suppliers discovered", filename=filename, total=len(suppliers))
    return PdfDiscoveryResponse(
        suppliers=suppliers,
        processed_urls=processed,
        total_suppliers=len(suppliers),
        generated_at=utc_now(),
        data_source=PDF_DATA_SOURCE,
        pdf_info=PdfInfo(
            filename=filename,
            text_length=len(extracted.text),
            urls_extracted=len(urls),
            urls_processed=len(processed),
        ),
    )


async def discover_by_pdf_category(pdf_bytes: bytes, filename: str) -> PdfCategoryDiscoveryResponse:
    """Discover suppliers for the first procurement category the PDF describes."""
    extracted = extract_pdf_text(pdf_bytes)
    categories = await identify_procurement_categories(extracted.text)
    if not categories:
        raise NoCategoriesFoundError(filename)

    primary = categories[0]
    names = await find_supplier_names(
        primary.category,
        primary.requirements or "",
        total=settings.pdf_discovery_max_suppliers,
        pdf=True,
    )
    if not names:
        raise NoSuppliersFoundError(primary.category)

    suppliers = await enrich_suppliers(names, primary.category)
    logger.info(
        "PDF category suppliers discovered",
        filename=filename,
        category=primary.category,
        total=len(suppliers),
    )
    return PdfCategoryDiscoveryResponse(
        categories=categories,
        category=primary.category,
        suppliers=suppliers,
        taxonomy_codes=get_taxonomy_codes(primary.category),
        total_suppliers=len(suppliers),
        generated_at=utc_now(),
        data_source=PDF_CATEGORY_DATA_SOURCE,
    )


async def extract_suppliers_from_pdf(pdf_bytes: bytes) -> list[SupplierProfile]:
    extracted = extract_pdf_text(pdf_bytes)
    return await extract_suppliers_from_text(extracted.text)
