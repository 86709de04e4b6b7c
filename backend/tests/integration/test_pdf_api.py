"""Integration tests for the PDF-driven /suppliers endpoints.

Uploads go through the real multipart parsing, upload validation and PyMuPDF
text extraction; per-URL analysis and LLM extraction are patched.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import fitz
import pytest
from httpx import AsyncClient

from supplier_intel.core.config import settings
from supplier_intel.modules.suppliers.schemas import PdfContext, ProcurementCategory, SupplierProfile

SERVICE = "supplier_intel.modules.suppliers.service"


def _pdf(*lines: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    for i, line in enumerate(lines):
        page.insert_text((72, 72 + 20 * i), line)
    data = doc.tobytes()
    doc.close()
    return data


def _upload(content: bytes, filename: str = "vendors.pdf", content_type: str = "application/pdf") -> dict:
    return {"file": (filename, content, content_type)}


def _url_profile(url: str) -> SupplierProfile:
    return SupplierProfile(company_name=url.split("//")[1], pdf_context=PdfContext(source_url=url))


# ---------------------------------------------------------------------------
# Upload validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "path",
    ["discover-from-pdf", "discover-by-pdf-category", "extract-from-pdf"],
)
async def test_missing_file(client: AsyncClient, path: str) -> None:
    resp = await client.post(f"/api/v1/suppliers/{path}")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No PDF file uploaded."


async def test_rejects_non_pdf(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/suppliers/discover-from-pdf",
        files=_upload(b"plain text", "notes.txt", "text/plain"),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only PDF files are accepted."


async def test_rejects_empty_pdf(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/suppliers/extract-from-pdf", files=_upload(b""))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Failed to read PDF file buffer."


async def test_rejects_oversized_pdf(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "pdf_max_file_size_mb", 0)
    resp = await client.post("/api/v1/suppliers/extract-from-pdf", files=_upload(_pdf("hello world")))
    assert resp.status_code == 413


async def test_unreadable_pdf_is_422(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/suppliers/discover-from-pdf", files=_upload(b"\x00\x01\x02\x03"))
    assert resp.status_code == 422
    assert "Unable to extract text from PDF" in resp.json()["detail"]


# ---------------------------------------------------------------------------
# /discover-from-pdf
# ---------------------------------------------------------------------------


async def test_discover_from_pdf_analyses_each_company_url(client: AsyncClient) -> None:
    pdf = _pdf(
        "Approved vendor list",
        "https://www.hindalco.com",
        "https://www.linkedin.com/company/hindalco",
        "https://www.vedantaresources.com",
    )
    analyze = AsyncMock(side_effect=_url_profile)
    with patch(f"{SERVICE}.analyze_url", analyze):
        resp = await client.post("/api/v1/suppliers/discover-from-pdf", files=_upload(pdf))

    assert resp.status_code == 200
    data = resp.json()
    assert data["processedUrls"] == ["https://www.hindalco.com", "https://www.vedantaresources.com"]
    assert data["totalSuppliers"] == 2
    assert data["pdfInfo"]["filename"] == "vendors.pdf"
    assert data["pdfInfo"]["urlsExtracted"] == 2
    assert data["pdfInfo"]["urlsProcessed"] == 2
    assert data["suppliers"][0]["pdfContext"] == {
        "sourceUrl": "https://www.hindalco.com",
        "extractedFromPdf": True,
    }
    assert analyze.await_count == 2


async def test_discover_from_pdf_without_urls(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/suppliers/discover-from-pdf",
        files=_upload(_pdf("Quarterly steel requirements, no links here")),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No URLs found in PDF"


# ---------------------------------------------------------------------------
# /discover-by-pdf-category
# ---------------------------------------------------------------------------


async def test_discover_by_pdf_category_uses_first_category(client: AsyncClient) -> None:
    categories = [
        ProcurementCategory(category="Aluminium", requirements="6061-T6 sheet", relevance="Main item"),
        ProcurementCategory(category="Packaging"),
    ]
    search = AsyncMock(return_value=["Hindalco"])
    with patch(f"{SERVICE}.identify_procurement_categories", AsyncMock(return_value=categories)), patch(
        f"{SERVICE}.search_supplier_names", search
    ), patch(
        f"{SERVICE}.enrich_supplier",
        AsyncMock(side_effect=lambda name, category: SupplierProfile(company_name=name)),
    ):
        resp = await client.post(
            "/api/v1/suppliers/discover-by-pdf-category",
            files=_upload(_pdf("RFQ: 6061-T6 aluminium sheet, 20 tonnes")),
        )

    assert resp.status_code == 200
    data = resp.json()
    assert data["category"] == "Aluminium"
    assert [c["category"] for c in data["categories"]] == ["Aluminium", "Packaging"]
    assert data["suppliers"][0]["id"] == "aluminium-1"
    assert data["dataSource"] == "PDF Category Analysis + Google SERP + LLM"
    search.assert_awaited_once_with(
        "Aluminium", "6061-T6 sheet", total=settings.pdf_discovery_max_suppliers, pdf=True
    )


async def test_discover_by_pdf_category_without_categories(client: AsyncClient) -> None:
    with patch(f"{SERVICE}.identify_procurement_categories", AsyncMock(return_value=[])):
        resp = await client.post(
            "/api/v1/suppliers/discover-by-pdf-category",
            files=_upload(_pdf("Minutes of the quarterly board meeting")),
        )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No procurement categories found in PDF"


# ---------------------------------------------------------------------------
# /extract-from-pdf
# ---------------------------------------------------------------------------


async def test_extract_from_pdf(client: AsyncClient) -> None:
    extracted = [SupplierProfile(company_name="Acme Alloys", revenue="12M")]
    with patch(f"{SERVICE}.extract_suppliers_from_text", AsyncMock(return_value=extracted)):
        resp = await client.post(
            "/api/v1/suppliers/extract-from-pdf",
            files=_upload(_pdf("Acme Alloys, revenue 12M, ISO 9001")),
        )

    assert resp.status_code == 200
    assert resp.json()["suppliers"][0]["companyName"] == "Acme Alloys"


async def test_extract_from_pdf_llm_parse_failure(client: AsyncClient) -> None:
    with patch(
        f"{SERVICE}.extract_suppliers_from_text",
        AsyncMock(side_effect=ValueError("Expected JSON array, got dict")),
    ):
        resp = await client.post(
            "/api/v1/suppliers/extract-from-pdf",
            files=_upload(_pdf("Acme Alloys, revenue 12M")),
        )

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to parse supplier data from LLM response."
