"""Unit tests for company website signal extraction."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx

from supplier_intel.modules.suppliers.website import (
    WebsiteSignals,
    extract_company_type,
    extract_contact_info,
    extract_location,
    fetch_website_signals,
    parse_website,
)

SAMPLE_HTML = """
<html>
  <head>
    <title> Acme Metals | Aluminium Extrusions </title>
    <meta name="Description" content="  Extruded aluminium profiles for construction.  ">
  </head>
  <body>
    <p>Acme Metals Inc supplies aluminium to builders.</p>
    <p>1200 Main Street, Springfield, IL 62704</p>
    <p>Call +1 555-123-4567 or write to
       <a href="mailto:sales@acmemetals.com">sales@acmemetals.com</a></p>
  </body>
</html>
"""


def test_parse_website_extracts_all_signals() -> None:
    signals = parse_website(SAMPLE_HTML)
    assert signals.title == "Acme Metals | Aluminium Extrusions"
    assert signals.description == "Extruded aluminium profiles for construction."
    assert signals.contact_info.emails == ["sales@acmemetals.com"]
    assert signals.contact_info.phones == ["+1 555-123-4567"]
    assert signals.company_type == "INC"
    assert signals.location == "1200 Main Street, Springfield, IL 62704"


def test_parse_website_on_bare_page() -> None:
    signals = parse_website("<html><body><p>coming soon</p></body></html>")
    assert signals.title == ""
    assert signals.description == ""
    assert signals.company_type == "Unknown"
    assert signals.location == ""
    assert signals.contact_info.emails == []


def test_contact_info_deduplicates_in_order() -> None:
    info = extract_contact_info("a@x.com b@y.org a@x.com")
    assert info.emails == ["a@x.com", "b@y.org"]
    assert info.phones == []


def test_company_type_is_uppercased_keyword() -> None:
    assert extract_company_type("Vedanta Limited annual report") == "LIMITED"
    assert extract_company_type("a family business") == "Unknown"


def test_location_without_address() -> None:
    assert extract_location("We ship worldwide.") == ""


async def test_fetch_failure_returns_empty_signals() -> None:
    with patch("supplier_intel.modules.suppliers.website.httpx.AsyncClient") as client_cls:
        client = client_cls.return_value.__aenter__.return_value
        client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        signals = await fetch_website_signals("https://unreachable.example")

    assert signals == WebsiteSignals()
