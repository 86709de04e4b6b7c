"""xlsx workbooks for supplier analyses and database extracts (openpyxl)."""

from __future__ import annotations

import io
import json
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from supplier_intel.modules.databases.schemas import DatabaseExtract
from supplier_intel.modules.ranking.schemas import RankedSupplier
from supplier_intel.modules.ranking.topsis import score_band
from supplier_intel.modules.suppliers.schemas import SupplierProfile

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MAX_SHEET_NAME = 31
_INVALID_SHEET_CHARS = re.compile(r"[\\/?*\[\]:]")

_HEADER_FONT = Font(bold=True)
_HEADER_FILL = PatternFill("solid", fgColor="F8FAFC")
_MAX_COLUMN_WIDTH = 60


# ---------------------------------------------------------------------------
# Sheet helpers
# ---------------------------------------------------------------------------


def sanitize_sheet_name(name: str, prefix: str = "") -> str:
    """Valid Excel sheet title: no ``\\ / ? * [ ] :``, at most 31 characters."""
    cleaned = _INVALID_SHEET_CHARS.sub("_", str(name))
    title = (prefix + cleaned)[:MAX_SHEET_NAME].strip("_")
    return title or "Sheet"


def cell_value(value: Any) -> Any:
    """Value openpyxl can store in a cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (dict, list, tuple)):
        value = json.dumps(value, default=str)
    return ILLEGAL_CHARACTERS_RE.sub("", str(value))


def _joined(values: Sequence[str] | None) -> str:
    return ", ".join(values or [])


def add_sheet(wb: Workbook, title: str, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> Worksheet:
    """Append a sheet with a bold header row and sized columns."""
    ws = wb.create_sheet(title=title)
    ws.append(list(headers))
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(vertical="center")

    widths = [len(str(h)) for h in headers]
    for row in rows:
        values = [cell_value(v) for v in row]
        ws.append(values)
        for idx, value in enumerate(values[: len(widths)]):
            widths[idx] = max(widths[idx], len(str(value)))

    for cell, width in zip(ws[1], widths):
        ws.column_dimensions[cell.column_letter].width = min(width + 2, _MAX_COLUMN_WIDTH)
    ws.freeze_panes = "A2"
    return ws


def workbook_bytes(wb: Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_filename(stem: str, suffix: str) -> str:
    day = datetime.now(timezone.utc).date().isoformat()
    safe_stem = re.sub(r"[^A-Za-z0-9_.-]+", "_", stem).strip("_") or "export"
    return f"{safe_stem}_{suffix}_{day}.xlsx"


# ---------------------------------------------------------------------------
# Supplier analysis workbook
# ---------------------------------------------------------------------------


def _headquarters(s: SupplierProfile) -> str:
    return ", ".join(p for p in (s.headquarters_city, s.headquarters_country) if p)


def build_supplier_workbook(
    suppliers: Sequence[SupplierProfile],
    rankings: Sequence[RankedSupplier] | None = None,
) -> Workbook:
    """Supplier analysis workbook.

    Recent News, Geographic Coverage and Certifications & Compliance sheets
    are only added when they have rows; TOPSIS Ranking only when
    ``rankings`` is given.
    """
    wb = Workbook()
    wb.remove(wb.active)

    add_sheet(
        wb,
        "Supplier Overview",
        [
            "Company Name", "Company Type", "Website", "Employees", "Revenue (USD)",
            "Year Founded", "Headquarters", "CEO", "Parent Company", "Net Profit Margin",
            "Production Capacity", "Contact Email", "ESG Status", "Geographic Coverage",
            "Industries Served", "Certifications", "Awards", "Company Brief",
        ],
        [
            [
                s.company_name, s.company_type, s.website, s.employees, s.revenue,
                s.year_founded, _headquarters(s), s.ceo, s.parent_company, s.net_profit_margin,
                s.production_capacity, s.contact_email, s.esg_status, _joined(s.geographic_coverage),
                _joined(s.industries_served), _joined(s.certifications), _joined(s.awards),
                s.company_brief,
            ]
            for s in suppliers
        ],
    )

    products = list(dict.fromkeys(p for s in suppliers for p in s.product_offerings))
    add_sheet(
        wb,
        "Product Offerings",
        ["Company Name", *products],
        [[s.company_name, *(s.product_offerings.get(p) or "No" for p in products)] for s in suppliers],
    )

    add_sheet(
        wb,
        "Financial Analysis",
        [
            "Company Name", "Revenue (USD)", "Employees", "Net Profit Margin", "Year Founded",
            "Company Type", "Geographic Coverage Count", "Certifications Count",
            "Industries Served Count",
        ],
        [
            [
                s.company_name, s.revenue, s.employees, s.net_profit_margin, s.year_founded,
                s.company_type, len(s.geographic_coverage), len(s.certifications),
                len(s.industries_served),
            ]
            for s in suppliers
        ],
    )

    swot = [
        [s.company_name, category, text]
        for s in suppliers
        for category, items in (("Strength", s.strengths), ("Weakness", s.weaknesses))
        for text in items
    ]
    add_sheet(wb, "SWOT Analysis", ["Company Name", "Category", "Description"], swot)

    news = [
        [s.company_name, n.type, n.title, n.date, n.description, n.source, n.impact]
        for s in suppliers
        for n in s.recent_news
    ]
    if news:
        add_sheet(
            wb,
            "Recent News",
            ["Company Name", "News Type", "Title", "Date", "Description", "Source", "Impact"],
            news,
        )

    coverage = [
        [s.company_name, country, s.headquarters_country, s.company_type]
        for s in suppliers
        for country in s.geographic_coverage
    ]
    if coverage:
        add_sheet(
            wb,
            "Geographic Coverage",
            ["Company Name", "Country", "Headquarters Country", "Company Type"],
            coverage,
        )

    certifications = [
        [s.company_name, cert, s.esg_status, s.diversity, s.cybersecurity_updates]
        for s in suppliers
        for cert in s.certifications
    ]
    if certifications:
        add_sheet(
            wb,
            "Certifications & Compliance",
            ["Company Name", "Certification", "ESG Status", "Diversity", "Cybersecurity Updates"],
            certifications,
        )

    add_sheet(
        wb,
        "Supply Chain & Operations",
        [
            "Company Name", "Production Capacity", "Supply Chain Disruptions", "Plant Shutdowns",
            "Value Added Services", "Subsidiaries", "Contact Email", "Website",
        ],
        [
            [
                s.company_name, s.production_capacity, s.supply_chain_disruptions, s.plant_shutdowns,
                _joined(s.value_added_services), _joined(s.subsidiaries), s.contact_email, s.website,
            ]
            for s in suppliers
        ],
    )

    if rankings:
        add_sheet(
            wb,
            "TOPSIS Ranking",
            ["Rank", "Company Name", "Score", "Band", "Headquarters Country"],
            [
                [r.rank, r.company_name, round(r.score, 4), score_band(r.score), r.headquarters_country]
                for r in sorted(rankings, key=lambda r: r.rank)
            ],
        )

    return wb


# ---------------------------------------------------------------------------
# Database workbook
# ---------------------------------------------------------------------------


def build_database_workbook(
    extract: DatabaseExtract,
    database_type: str | None,
    database_url: str | None,
    *,
    max_tables: int = 50,
    max_rows: int = 10_000,
) -> Workbook:
    """Overview, summary, schema and one sheet per table.

    Failed tables get an ``Error_`` sheet, empty ones an ``Empty_`` sheet and
    tables cut at ``max_rows`` a ``Note_`` sheet. Only the first
    ``max_tables`` tables get sheets; the rest are listed in Export
    Limitations.
    """
    wb = Workbook()
    wb.remove(wb.active)
    tables = extract.tables

    add_sheet(
        wb,
        "Database Overview",
        ["Property", "Value"],
        [
            ["Database Type", database_type or "Unknown"],
            ["Connection URL", database_url or "N/A"],
            ["Total Tables", extract.metadata.total_tables or len(tables)],
            ["Extraction Date", datetime.now(timezone.utc).isoformat()],
            ["Database Name", extract.metadata.database_name or "N/A"],
        ],
    )

    add_sheet(
        wb,
        "Tables Summary",
        ["Table Name", "Total Rows", "Total Columns", "Has Error", "Error Message", "Sample Data Available"],
        [
            [
                name,
                t.total_rows or len(t.rows),
                t.total_columns or len(t.columns),
                "Yes" if t.error else "No",
                t.error or "None",
                "Yes" if t.rows else "No",
            ]
            for name, t in tables.items()
        ],
    )

    schema_rows = []
    for name, t in tables.items():
        if t.column_schema:
            schema_rows.extend(
                [
                    name,
                    c.name,
                    c.type or "Unknown",
                    "YES" if c.nullable else "NO",
                    "PRI" if c.primary_key else "None",
                    c.default or "None",
                ]
                for c in t.column_schema
            )
        else:
            schema_rows.extend([name, col, "Unknown", "Unknown", "None", "None"] for col in t.columns)
    if schema_rows:
        add_sheet(
            wb,
            "Column Schema",
            ["Table Name", "Column Name", "Data Type", "Nullable", "Key", "Default"],
            schema_rows,
        )

    names = list(tables)
    for name in names[:max_tables]:
        t = tables[name]
        if t.error:
            add_sheet(
                wb,
                sanitize_sheet_name(name, "Error_"),
                ["Table Name", "Error", "Status"],
                [[name, t.error, "Failed to extract data"]],
            )
            continue
        if not t.rows:
            add_sheet(
                wb,
                sanitize_sheet_name(name, "Empty_"),
                ["Table Name", "Status", "Columns"],
                [[name, "No data found", _joined(t.columns) or "Unknown"]],
            )
            continue

        headers = t.columns or list(dict.fromkeys(key for row in t.rows for key in row))
        sheet_name = sanitize_sheet_name(name)
        add_sheet(
            wb,
            sheet_name,
            headers,
            [[row.get(h) for h in headers] for row in t.rows[:max_rows]],
        )
        if len(t.rows) > max_rows:
            add_sheet(
                wb,
                sanitize_sheet_name(sheet_name, "Note_"),
                ["Note"],
                [[f"Data truncated - showing first {max_rows:,} rows of {len(t.rows):,} total rows"]],
            )

    if len(names) > max_tables:
        add_sheet(
            wb,
            "Export Limitations",
            ["Note", "Reason", "All Tables"],
            [
                [
                    f"Export limited to first {max_tables} tables out of {len(names)} total tables",
                    "Excel workbook size limitations",
                    ", ".join(names),
                ]
            ],
        )

    return wb
