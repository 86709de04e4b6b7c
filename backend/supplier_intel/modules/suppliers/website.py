"""Lightweight company website scraping.

Pulls the handful of signals the enrichment prompt uses to ground its
answer: page title, meta description, contact details, a legal-form keyword
and a street address.
"""

from __future__ import annotations

import re

import httpx
import structlog
from bs4 import BeautifulSoup
from pydantic import BaseModel

from supplier_intel.core.config import settings

logger = structlog.get_logger()

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE_RE = re.compile(r"(?:\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
_COMPANY_TYPE_RE = re.compile(
    r"\b(inc|corp|corporation|company|ltd|limited|llc|group|holdings|international|global)\b",
    re.IGNORECASE,
)
_STREET_SUFFIX = (
    r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr|Lane|Ln|Place|Pl|"
    r"Court|Ct|Way|Terrace|Ter|Circle|Cir|Square|Sq)"
)
_ADDRESS_PATTERNS = [
    re.compile(
        rf"\d+\s+[A-Za-z\s]+{_STREET_SUFFIX}[,\s]+[A-Za-z\s]+(?:,\s*)?[A-Z]{{2}}\s*\d{{5}}(?:-\d{{4}})?",
        re.IGNORECASE,
    ),
    re.compile(
        rf"[A-Za-z\s]+{_STREET_SUFFIX}[,\s]+[A-Za-z\s]+(?:,\s*)?[A-Z]{{2}}\s*\d{{5}}(?:-\d{{4}})?",
        re.IGNORECASE,
    ),
]


class ContactInfo(BaseModel):
    emails: list[str] = []
    phones: list[str] = []


class WebsiteSignals(BaseModel):
    title: str = ""
    description: str = ""
    contact_info: ContactInfo = ContactInfo()
    company_type: str = "Unknown"
    location: str = ""


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def extract_title(soup: BeautifulSoup) -> str:
    return soup.title.get_text(strip=True) if soup.title else ""


def extract_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": re.compile(r"^description$", re.IGNORECASE)})
    if meta and meta.get("content"):
        return str(meta["content"]).strip()
    return ""


def extract_contact_info(html: str) -> ContactInfo:
    emails = list(dict.fromkeys(_EMAIL_RE.findall(html)))
    phones = list(dict.fromkeys(p.strip() for p in _PHONE_RE.findall(html)))
    return ContactInfo(emails=emails, phones=phones)


def extract_company_type(text: str) -> str:
    match = _COMPANY_TYPE_RE.search(text)
    return match.group(1).upper() if match else "Unknown"


def extract_location(text: str) -> str:
    for pattern in _ADDRESS_PATTERNS:
        match = pattern.search(text)
        if match:
            return " ".join(match.group(0).split())
    return ""


def parse_website(html: str) -> WebsiteSignals:
    """Extract company signals from raw HTML."""
    soup = BeautifulSoup(html, "html.parser")
    page_text = soup.get_text(" ", strip=True)
    return WebsiteSignals(
        title=extract_title(soup),
        description=extract_description(soup),
        contact_info=extract_contact_info(html),
        company_type=extract_company_type(page_text),
        location=extract_location(page_text),
    )


async def fetch_website_signals(url: str) -> WebsiteSignals:
    """Download ``url`` and parse it; any failure yields empty signals."""
    try:
        async with httpx.AsyncClient(
            timeout=settings.website_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            resp = await client.get(url)
            resp.raise_for_status()
    except Exception:
        logger.warning("Website fetch failed", url=url, exc_info=True)
        return WebsiteSignals()

    signals = parse_website(resp.text)
    logger.info(
        "Website parsed",
        url=url,
        has_title=bool(signals.title),
        emails=len(signals.contact_info.emails),
    )
    return signals
