"""Supplier discovery: /suppliers/ endpoints.

Discovery:
  - /discover: category search + LLM enrichment
  - /analyze-company: single company from website URL and/or name
  - /discover-from-pdf: company URLs found in a PDF
  - /discover-by-pdf-category: procurement categories found in a PDF
  - /extract-from-pdf: supplier records the LLM reads out of a PDF

Analysis (no external calls):
  - /news-summary, /compare, /taxonomy/{category}
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, File, HTTPException, UploadFile

from supplier_intel.core.config import settings
from supplier_intel.modules.suppliers import service
from supplier_intel.modules.suppliers.enrichment import analyze_company
from supplier_intel.modules.suppliers.news import analyze_news, compare_suppliers
from supplier_intel.modules.suppliers.pdf_service import PdfTextError
from supplier_intel.modules.suppliers.schemas import (
    AnalyzeCompanyRequest,
    AnalyzeCompanyResponse,
    CompareRequest,
    CompareResponse,
    DiscoverRequest,
    DiscoverResponse,
    NewsAnalysisResponse,
    NewsFilter,
    PdfCategoryDiscoveryResponse,
    PdfDiscoveryResponse,
    PdfExtractionResponse,
    TaxonomyCodes,
)
from supplier_intel.modules.suppliers.taxonomy import get_taxonomy_codes

logger = structlog.get_logger()

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


async def read_pdf_upload(file: UploadFile | None) -> bytes:
    """Validate an uploaded PDF and return its bytes."""
    if file is None:
        raise HTTPException(status_code=400, detail="No PDF file uploaded.")

    is_pdf = file.content_type == "application/pdf" or (file.filename or "").lower().endswith(".pdf")
    if not is_pdf:
        raise HTTPException(status_code=400, detail="Only PDF files are accepted.")

    pdf_bytes = await file.read()
    if not pdf_bytes:
        raise HTTPException(status_code=400, detail="Failed to read PDF file buffer.")

    size_mb = len(pdf_bytes) / (1024 * 1024)
    if size_mb > settings.pdf_max_file_size_mb:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {size_mb:.1f} MB (max {settings.pdf_max_file_size_mb} MB).",
        )

    logger.info("PDF upload received", filename=file.filename, size_mb=round(size_mb, 2))
    return pdf_bytes


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@router.post("/discover", response_model=DiscoverResponse, response_model_by_alias=True)
async def discover(body: DiscoverRequest) -> DiscoverResponse:
    """Discover and enrich suppliers for a product/material category."""
    category = body.category.strip()
    if not category:
        raise HTTPException(status_code=400, detail="Category is required")

    logger.info("Supplier discovery request", category=category)
    try:
        return await service.discover_suppliers(category)
    except service.NoSuppliersFoundError:
        raise HTTPException(status_code=404, detail="No suppliers found for this category")


@router.post("/analyze-company", response_model=AnalyzeCompanyResponse, response_model_by_alias=True)
async def analyze_single_company(body: AnalyzeCompanyRequest) -> AnalyzeCompanyResponse:
    """Analyse one company from its website and/or name."""
    website_url = (body.website_url or "").strip() or None
    company_name = (body.company_name or "").strip() or None
    if not website_url and not company_name:
        raise HTTPException(status_code=400, detail="Website URL or Company Name is required")

    supplier = await analyze_company(website_url, company_name)
    return AnalyzeCompanyResponse(
        supplier=supplier,
        analyzed_at=service.utc_now(),
        data_source="Website Analysis + LLM",
    )


@router.post("/discover-from-pdf", response_model=PdfDiscoveryResponse, response_model_by_alias=True)
async def discover_from_pdf(file: UploadFile | None = File(None)) -> PdfDiscoveryResponse:
    """Profile every company website linked from an uploaded PDF."""
    pdf_bytes = await read_pdf_upload(file)
    try:
        return await service.discover_from_pdf(pdf_bytes, file.filename or "document.pdf")
    except PdfTextError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except service.NoUrlsFoundError:
        raise HTTPException(status_code=404, detail="No URLs found in PDF")


@router.post(
    "/discover-by-pdf-category",
    response_model=PdfCategoryDiscoveryResponse,
    response_model_by_alias=True,
)
async def discover_by_pdf_category(file: UploadFile | None = File(None)) -> PdfCategoryDiscoveryResponse:
    """Find suppliers for the main procurement category an uploaded PDF describes."""
    pdf_bytes = await read_pdf_upload(file)
    try:
        return await service.discover_by_pdf_category(pdf_bytes, file.filename or "document.pdf")
    except PdfTextError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except service.NoCategoriesFoundError:
        raise HTTPException(status_code=404, detail="No procurement categories found in PDF")
    except service.NoSuppliersFoundError:
        raise HTTPException(status_code=404, detail="No suppliers found for this category")


@router.post("/extract-from-pdf", response_model=PdfExtractionResponse, response_model_by_alias=True)
async def extract_from_pdf(file: UploadFile | None = File(None)) -> PdfExtractionResponse:
    """Extract supplier records described in an uploaded PDF."""
    pdf_bytes = await read_pdf_upload(file)
    try:
        suppliers = await service.extract_suppliers_from_pdf(pdf_bytes)
    except PdfTextError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ValueError:
        logger.error("PDF supplier extraction failed", filename=file.filename, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to parse supplier data from LLM response.")

    return PdfExtractionResponse(suppliers=suppliers)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


@router.post("/news-summary", response_model=NewsAnalysisResponse, response_model_by_alias=True)
async def news_summary(body: NewsFilter) -> NewsAnalysisResponse:
    """Aggregate recent news across suppliers."""
    return analyze_news(body.suppliers, news_type=body.news_type, supplier_id=body.supplier_id)


@router.post("/compare", response_model=CompareResponse, response_model_by_alias=True)
async def compare(body: CompareRequest) -> CompareResponse:
    """Suppliers ordered for side-by-side comparison."""
    return CompareResponse(sort_by=body.sort_by, suppliers=compare_suppliers(body.suppliers, body.sort_by))


@router.get("/taxonomy/{category}", response_model=TaxonomyCodes)
async def taxonomy(category: str) -> TaxonomyCodes:
    """HS / SIC / UNSPSC / NAICS codes for a category."""
    return get_taxonomy_codes(category)
