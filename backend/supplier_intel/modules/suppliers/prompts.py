"""Prompt templates for the supplier discovery and enrichment LLM calls."""

from __future__ import annotations

import json
from datetime import date, timedelta

NEWS_WINDOW_DAYS = 45

PROFILE_SCHEMA = """{
  "companyName": "Full company name",
  "companyType": "Public/Private/Subsidiary/Joint Venture",
  "website": "Company website URL",
  "employees": 5000,  // number of employees (numeric)
  "revenue": 2500000000,  // annual revenue in USD (numeric)
  "companyBrief": "3-line summary of core business and industry position",
  "yearFounded": 1985,
  "headquartersAddress": "Full address",
  "headquartersCity": "City",
  "headquartersCountry": "Country",
  "latitude": 28.6139,
  "longitude": 77.2090,
  "subsidiaries": ["Subsidiary 1", "Subsidiary 2"],
  "productionCapacity": "Production capacity description",
  "contactEmail": "Contact email",
  "parentCompany": "Parent company name if applicable, else null",
  "ceo": "CEO name",
  "certifications": ["ISO 9001", "Other certifications"],
  "awards": ["Award 1", "Award 2"],
  "diversity": "Diversity and inclusion information",
  "esgStatus": "ESG status and commitments",
  "cybersecurityUpdates": "Cybersecurity information",
  "industriesServed": ["Industry 1", "Industry 2"],
  "netProfitMargin": "Net profit margin percentage",
  "strengths": ["Strength 1", "Strength 2"],
  "weaknesses": ["Weakness 1", "Weakness 2"],
  "supplyChainDisruptions": "Any reported disruptions",
  "productOfferings": {"Product 1": "Yes", "Product 2": "No"},
  "valueAddedServices": ["Service 1", "Service 2"],
  "geographicCoverage": ["Country 1", "Country 2"],
  "plantShutdowns": "Recent or upcoming plant shutdowns",
  "recentNews": [
    {
      "type": "positive|negative|neutral",
      "title": "News headline",
      "date": "YYYY-MM-DD",
      "description": "News description",
      "source": "News source",
      "impact": "Impact assessment"
    }
  ]
}"""

WEBSITE_ANALYSIS_SCHEMA = """"websiteAnalysis": {
    "websiteQuality": "High/Medium/Low",
    "digitalPresence": "Strong/Moderate/Weak",
    "onlineReputation": "Positive/Neutral/Negative",
    "socialMediaPresence": ["Platform 1", "Platform 2"],
    "websiteFeatures": ["Feature 1", "Feature 2"]
  }"""

PROFILE_SYSTEM_PROMPT = (
    "You are a procurement research analyst. Generate factual, realistic supplier data "
    "for real companies. Return only valid JSON."
)

WEBSITE_SYSTEM_PROMPT = (
    "You are a procurement research expert specializing in company analysis. Generate accurate, "
    "realistic company data based on website analysis and known information. Return only valid JSON."
)

URL_SYSTEM_PROMPT = (
    "You are an expert business analyst. Generate COMPLETE supplier data with ALL required "
    "fields filled. Return only valid JSON."
)

NAMES_SYSTEM_PROMPT = (
    "You are a business directory expert. Return only actual company names that can be "
    "verified online. No fictional companies. Return only a JSON array."
)

PDF_EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert at extracting structured supplier data from unstructured documents."
)

CATEGORIES_SYSTEM_PROMPT = "Extract procurement categories from text. Return only a JSON array."


def news_requirements(today: date | None = None) -> str:
    """News rules shared by every profile prompt (dates within the window)."""
    today = today or date.today()
    start = today - timedelta(days=NEWS_WINDOW_DAYS)
    return (
        "NEWS REQUIREMENTS:\n"
        f"- Recent news must be within the last {NEWS_WINDOW_DAYS} days from today ({today.isoformat()})\n"
        "- Include at least 1 POSITIVE, 1 NEGATIVE and 1 NEUTRAL news item\n"
        f"- Use realistic dates between {start.isoformat()} and {today.isoformat()}"
    )


def supplier_profile_prompt(company_name: str, category: str) -> str:
    return f"""Generate detailed information for the company "{company_name}" in the {category} industry.

Provide the following information in JSON format:
{PROFILE_SCHEMA}

Important:
- Use realistic, accurate data based on what you know about this company
- If you don't know specific details, use reasonable estimates
- Numeric values must be numbers, not strings
- Focus on {category} industry relevance

{news_requirements()}

Return only valid JSON without any additional text."""


def website_profile_prompt(
    website_url: str | None,
    company_name: str | None,
    signals: dict,
) -> str:
    schema = PROFILE_SCHEMA[:-2] + ",\n  " + WEBSITE_ANALYSIS_SCHEMA + "\n}"
    website = f" (Website: {website_url})" if website_url else ""
    return f"""Analyze and provide comprehensive information for the company "{company_name or 'from website'}"{website}.

Extracted website data:
- Title: {signals.get('title') or 'N/A'}
- Description: {signals.get('description') or 'N/A'}
- Contact: {json.dumps(signals.get('contact_info') or {})}
- Company Type: {signals.get('company_type') or 'N/A'}
- Location: {signals.get('location') or 'N/A'}

Provide the following information in JSON format:
{schema}

Important:
- Use the extracted website data to validate and improve the analysis
- If you don't know specific details, use reasonable estimates
- Numeric values must be numbers, not strings
- Include the website analysis when a URL is provided

{news_requirements()}

Return only valid JSON without any additional text."""


def url_profile_prompt(url: str, domain: str, company_name: str) -> str:
    return f"""Analyze the company at URL: {url}
Domain: {domain}
Company: {company_name}

Generate COMPLETE supplier information in JSON format with ALL fields filled:
{PROFILE_SCHEMA}

IMPORTANT:
- ALL fields must be filled with realistic, detailed information
- "companyName" is "{company_name}" unless the site clearly states otherwise; "website" is "{url}"
- Arrays must contain multiple realistic entries
- Geographic coordinates must be realistic for the company location
- Revenue in USD as a number; employee count as a number
- Provide at least 3 recent news items

{news_requirements()}

Return only valid JSON with ALL fields completed."""


def supplier_names_prompt(category: str, count: int) -> str:
    return f"""List {count} REAL, EXISTING, VERIFIABLE companies that are major suppliers/manufacturers in the {category} industry.

STRICT REQUIREMENTS:
- Companies must actually exist and be publicly known
- Must be major players in the {category} industry specifically
- Prefer geographic diversity: India first, then US/Europe, then other countries
- NO fictional or made-up company names

Return only company names as a JSON array: ["Company 1", "Company 2"]"""


def pdf_suppliers_prompt(text: str) -> str:
    return f"""Extract all supplier-related data from the following PDF text. Return a JSON array of supplier objects with as much detail as possible (companyName, revenue, employees, certifications, ceo, headquartersCountry, etc.), using camelCase keys:

{text}

Return only a valid JSON array without any extra text."""


def procurement_categories_prompt(text: str) -> str:
    return f"""Analyze this text and identify procurement categories:

{text}

Return JSON array format:
[{{"category": "name", "requirements": "details", "relevance": "why relevant"}}]

Focus on: materials, equipment, electronics, services, manufacturing needs.
Return only a JSON array, max 5 categories."""


def procurement_categories_short_prompt(text: str) -> str:
    return f"""Find procurement categories in: {text}

Return: [{{"category": "name"}}]"""
