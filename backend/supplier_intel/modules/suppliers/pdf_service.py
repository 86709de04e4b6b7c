"""PDF text + URL extraction for the PDF-driven discovery flows."""

from __future__ import annotations

import re

import fitz  # PyMuPDF
import structlog
from pydantic import BaseModel

logger = structlog.get_logger()

MIN_TEXT_LENGTH = 10

EXCLUDED_URL_PATTERNS = (
    "google.com",
    "facebook.com",
    "twitter.com",
    "linkedin.com",
    "youtube.com",
    "instagram.com",
    "github.com",
    "stackoverflow.com",
    "wikipedia.org",
    "adobe.com",
    "microsoft.com",
    "apple.com",
)

_URL_RE = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*"
)
_RAW_URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")
_RAW_TEXT_RE = re.compile(r"[a-zA-Z0-9\s.,!?;:()\-/]+")


class PdfTextError(ValueError):
    """Raised when no readable text can be recovered from a PDF."""


class PdfText(BaseModel):
    text: str
    page_count: int = 0
    method: str = "pymupdf"


# ---------------------------------------------------------------------------
# Text extraction
# ---------------------------------------------------------------------------


def extract_raw_text(pdf_bytes: bytes) -> str:
    """Readable ASCII runs from the raw PDF bytes, URLs first."""
    raw = pdf_bytes.decode("utf-8", errors="ignore")
    urls = _RAW_URL_RE.findall(raw)
    chunks = [c.strip() for c in _RAW_TEXT_RE.findall(raw)]
    return " ".join(urls + [c for c in chunks if c]).strip()


def extract_pdf_text(pdf_bytes: bytes) -> PdfText:
    """Extract the text layer of a PDF.

    Uses PyMuPDF per page; if the document cannot be opened or yields no text,
    falls back to scanning the raw bytes. Raises ``PdfTextError`` when fewer
    than ``MIN_TEXT_LENGTH`` characters are recovered.
    """
    text = ""
    page_count = 0
    method = "pymupdf"
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        try:
            page_count = len(doc)
            text = "\n".join((page.get_text("text") or "") for page in doc).strip()
        finally:
            doc.close()
    except Exception:
        logger.warning("PyMuPDF text extraction failed, scanning raw bytes", exc_info=True)

    if len(text) < MIN_TEXT_LENGTH:
        text = extract_raw_text(pdf_bytes)
        method = "raw"

    if len(text) < MIN_TEXT_LENGTH:
        raise PdfTextError(
            "Unable to extract text from PDF. Please ensure the PDF contains readable text."
        )

    logger.info("PDF text extracted", pages=page_count, method=method, chars=len(text))
    return PdfText(text=text, page_count=page_count, method=method)


# ---------------------------------------------------------------------------
# URL extraction
# ---------------------------------------------------------------------------


def is_company_url(url: str) -> bool:
    lowered = url.lower()
    return not any(pattern in lowered for pattern in EXCLUDED_URL_PATTERNS)


def extract_urls(text: str) -> list[str]:
    """Company website URLs found in ``text``, de-duplicated in order."""
    urls = dict.fromkeys(_URL_RE.findall(text or ""))
    return [url for url in urls if is_company_url(url)]
