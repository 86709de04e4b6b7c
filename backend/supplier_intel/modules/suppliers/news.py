"""News aggregation and side-by-side supplier comparison."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from supplier_intel.modules.ranking.criteria import to_number
from supplier_intel.modules.suppliers.schemas import (
    NewsAnalysisResponse,
    NewsStats,
    NewsType,
    SupplierNewsEntry,
    SupplierNewsSummary,
    SupplierProfile,
)


def parse_news_date(value: str | None) -> date | None:
    """ISO date (or datetime) string -> date; None when unparseable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def flatten_news(suppliers: Sequence[SupplierProfile]) -> list[SupplierNewsEntry]:
    """All news items tagged with their supplier, newest first.

    Items without a parseable date go last, in their original order.
    """
    entries = [
        SupplierNewsEntry(
            **item.model_dump(),
            supplier_name=supplier.company_name,
            supplier_id=supplier.identity,
        )
        for supplier in suppliers
        for item in supplier.recent_news
    ]
    dated = [(parse_news_date(e.date), e) for e in entries]
    with_date = sorted((p for p in dated if p[0] is not None), key=lambda p: p[0], reverse=True)
    without_date = [e for d, e in dated if d is None]
    return [e for _, e in with_date] + without_date


def _count(entries: Sequence[SupplierNewsEntry]) -> dict[str, int]:
    counts = {t.value: 0 for t in NewsType}
    for entry in entries:
        if entry.type in counts:
            counts[entry.type] += 1
    counts["total"] = len(entries)
    return counts


def analyze_news(
    suppliers: Sequence[SupplierProfile],
    news_type: NewsType | None = None,
    supplier_id: str | None = None,
) -> NewsAnalysisResponse:
    """Counts over every news item plus the filtered, date-sorted feed."""
    entries = flatten_news(suppliers)

    by_supplier = []
    for supplier in suppliers:
        own = [e for e in entries if e.supplier_id == supplier.identity]
        by_supplier.append(
            SupplierNewsSummary(
                supplier_id=supplier.identity,
                supplier_name=supplier.company_name,
                **_count(own),
            )
        )

    feed = entries
    if news_type is not None:
        feed = [e for e in feed if e.type == news_type.value]
    if supplier_id:
        feed = [e for e in feed if e.supplier_id == supplier_id]

    return NewsAnalysisResponse(
        stats=NewsStats(**_count(entries)),
        by_supplier=by_supplier,
        news=feed,
    )


def compare_suppliers(suppliers: Sequence[SupplierProfile], sort_by: str = "name") -> list[SupplierProfile]:
    """Suppliers ordered for the comparison matrix.

    ``name`` ascending (case-insensitive), ``revenue`` / ``employees``
    descending, ``yearFounded`` ascending with unknown years last. Any other
    key keeps input order.
    """
    items = list(suppliers)
    if sort_by == "name":
        return sorted(items, key=lambda s: (s.company_name or "").lower())
    if sort_by == "revenue":
        return sorted(items, key=lambda s: to_number(s.revenue), reverse=True)
    if sort_by == "employees":
        return sorted(items, key=lambda s: to_number(s.employees), reverse=True)
    if sort_by == "yearFounded":
        def founded(s: SupplierProfile) -> tuple[bool, float]:
            year = to_number(s.year_founded)
            return (year <= 0, year)

        return sorted(items, key=founded)
    return items
