"""Supplier profile schemas.

Wire names are camelCase (the shape the enrichment prompts ask the LLM for);
Python attributes are snake_case. Unknown keys returned by the LLM are kept.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from supplier_intel.modules.suppliers.sanitizer import sanitize_profile_payload

Numeric = int | float | str | None


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NewsType(str, Enum):
    positive = "positive"
    negative = "negative"
    neutral = "neutral"


class NewsItem(CamelModel):
    type: str = NewsType.neutral.value
    title: str = ""
    date: str | None = None
    description: str | None = None
    source: str | None = None
    impact: str | None = None


class WebsiteAnalysis(CamelModel):
    website_quality: str | None = None
    digital_presence: str | None = None
    online_reputation: str | None = None
    social_media_presence: list[str] = []
    website_features: list[str] = []


class PdfContext(CamelModel):
    source_url: str
    extracted_from_pdf: bool = True


class SupplierProfile(CamelModel):
    """Structured supplier record produced by the enrichment pipeline."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str | None = None
    company_name: str = "Unknown Company"
    company_type: str | None = None
    website: str | None = None
    company_brief: str | None = None

    # Numeric (may arrive as strings from the LLM; ranking degrades them to 0)
    revenue: Numeric = None
    employees: Numeric = None
    year_founded: Numeric = None
    latitude: Numeric = None
    longitude: Numeric = None

    # Location
    headquarters_address: str | None = None
    headquarters_city: str | None = None
    headquarters_country: str | None = None

    # Corporate
    subsidiaries: list[str] = []
    parent_company: str | None = None
    ceo: str | None = None
    contact_email: str | None = None
    production_capacity: str | None = None
    net_profit_margin: str | None = None

    # Compliance & ESG
    certifications: list[str] = []
    awards: list[str] = []
    diversity: str | None = None
    esg_status: str | None = None
    cybersecurity_updates: str | None = None

    # Market
    industries_served: list[str] = []
    geographic_coverage: list[str] = []
    strengths: list[str] = []
    weaknesses: list[str] = []
    value_added_services: list[str] = []
    product_offerings: dict[str, str] = {}

    # Operations
    supply_chain_disruptions: str | None = None
    plant_shutdowns: str | None = None

    recent_news: list[NewsItem] = []
    website_analysis: WebsiteAnalysis | None = None
    pdf_context: PdfContext | None = None

    @model_validator(mode="before")
    @classmethod
    def _sanitize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return sanitize_profile_payload(data)
        return data

    @property
    def identity(self) -> str:
        """Stable identifier: assigned id, else the company name."""
        return self.id or self.company_name


# ---------------------------------------------------------------------------
# API request / response schemas
# ---------------------------------------------------------------------------


class TaxonomyCodes(BaseModel):
    HS: list[str]
    SIC: list[str]
    UNSPSC: list[str]
    NAICS: list[str]


class DiscoverRequest(BaseModel):
    category: str = ""


class DiscoverResponse(CamelModel):
    suppliers: list[SupplierProfile]
    taxonomy_codes: TaxonomyCodes
    category: str
    total_suppliers: int
    generated_at: str
    data_source: str


class AnalyzeCompanyRequest(CamelModel):
    website_url: str | None = None
    company_name: str | None = None


class AnalyzeCompanyResponse(CamelModel):
    supplier: SupplierProfile
    analyzed_at: str
    data_source: str


class PdfInfo(CamelModel):
    filename: str
    text_length: int
    urls_extracted: int
    urls_processed: int


class PdfDiscoveryResponse(CamelModel):
    suppliers: list[SupplierProfile]
    processed_urls: list[str]
    total_suppliers: int
    generated_at: str
    data_source: str
    pdf_info: PdfInfo


class PdfExtractionResponse(BaseModel):
    suppliers: list[SupplierProfile]


class ProcurementCategory(BaseModel):
    category: str
    requirements: str | None = None
    relevance: str | None = None


class PdfCategoryDiscoveryResponse(CamelModel):
    categories: list[ProcurementCategory]
    category: str
    suppliers: list[SupplierProfile]
    taxonomy_codes: TaxonomyCodes
    total_suppliers: int
    generated_at: str
    data_source: str


# --- News analysis ---


class NewsFilter(CamelModel):
    suppliers: list[SupplierProfile]
    news_type: NewsType | None = None
    supplier_id: str | None = None


class SupplierNewsEntry(NewsItem):
    supplier_name: str
    supplier_id: str


class NewsStats(BaseModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    total: int = 0


class SupplierNewsSummary(CamelModel):
    supplier_id: str
    supplier_name: str
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    total: int = 0


class NewsAnalysisResponse(CamelModel):
    stats: NewsStats
    by_supplier: list[SupplierNewsSummary]
    news: list[SupplierNewsEntry]


# --- Comparison ---


class CompareRequest(CamelModel):
    suppliers: list[SupplierProfile]
    sort_by: str = Field("name", description="name | revenue | employees | yearFounded")


class CompareResponse(CamelModel):
    sort_by: str
    suppliers: list[SupplierProfile]
