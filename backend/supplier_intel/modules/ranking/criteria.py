"""Criterion registry and value extraction for supplier ranking.

Every criterion name maps to exactly one extraction rule. Extraction is total:
missing or malformed values degrade to the criterion's zero value. Unknown
criterion names are rejected when criteria are configured, before any
computation starts.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from supplier_intel.modules.ranking.schemas import CriterionSpec, Orientation
from supplier_intel.modules.suppliers.schemas import SupplierProfile


class UnknownCriterionError(ValueError):
    """Raised when a criterion has no extraction rule."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown criterion: {name!r}. Known criteria: {', '.join(sorted(EXTRACTORS))}")


class InvalidWeightError(ValueError):
    """Raised when a criterion weight is negative or not finite."""


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def to_number(value: Any) -> float:
    """Raw numeric value, or 0.0 for anything missing or non-numeric."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range
            return 0.0
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("$", "")
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def list_length(value: Any) -> float:
    if isinstance(value, (list, tuple, set, dict)):
        return float(len(value))
    return 0.0


def presence(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, str):
        return 1.0 if value.strip() else 0.0
    if isinstance(value, (list, tuple, set, dict)):
        return 1.0 if value else 0.0
    return 1.0


# ---------------------------------------------------------------------------
# Registry: criterion name (wire name) -> extractor
# ---------------------------------------------------------------------------

Extractor = Callable[[SupplierProfile], float]


def _field(attr: str, coerce: Callable[[Any], float]) -> Extractor:
    return lambda supplier: coerce(getattr(supplier, attr, None))


EXTRACTORS: dict[str, Extractor] = {
    # numeric
    "revenue": _field("revenue", to_number),
    "employees": _field("employees", to_number),
    "yearFounded": _field("year_founded", to_number),
    # list length
    "certifications": _field("certifications", list_length),
    "geographicCoverage": _field("geographic_coverage", list_length),
    "industriesServed": _field("industries_served", list_length),
    "strengths": _field("strengths", list_length),
    "weaknesses": _field("weaknesses", list_length),
    "subsidiaries": _field("subsidiaries", list_length),
    "awards": _field("awards", list_length),
    "valueAddedServices": _field("value_added_services", list_length),
    "productOfferings": _field("product_offerings", list_length),
    # presence
    "esgStatus": _field("esg_status", presence),
}

LABELS: dict[str, str] = {
    "revenue": "Revenue",
    "employees": "Employees",
    "yearFounded": "Year Founded",
    "certifications": "Certifications",
    "geographicCoverage": "Geographic Coverage",
    "industriesServed": "Industries Served",
    "strengths": "Strengths",
    "weaknesses": "Weaknesses",
    "subsidiaries": "Subsidiaries",
    "awards": "Awards",
    "valueAddedServices": "Value Added Services",
    "productOfferings": "Product Offerings",
    "esgStatus": "ESG Status",
}

# Defaults from the procurement UI sliders; all benefit-oriented
DEFAULT_WEIGHTS: dict[str, float] = {
    "revenue": 0.25,
    "employees": 0.20,
    "yearFounded": 0.15,
    "certifications": 0.15,
    "geographicCoverage": 0.15,
    "esgStatus": 0.10,
}


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def validate_criteria(criteria: Iterable[CriterionSpec]) -> list[CriterionSpec]:
    """Fail fast on unknown names or unusable weights."""
    validated = list(criteria)
    for criterion in validated:
        if criterion.name not in EXTRACTORS:
            raise UnknownCriterionError(criterion.name)
        if not math.isfinite(criterion.weight) or criterion.weight < 0:
            raise InvalidWeightError(
                f"Weight for {criterion.name!r} must be a non-negative number, got {criterion.weight}"
            )
    return validated


def build_criteria(
    weights: Mapping[str, float] | None = None,
    orientations: Mapping[str, Orientation] | None = None,
) -> list[CriterionSpec]:
    """Default criteria with optional weight overrides.

    Names in ``weights`` that are not default criteria are appended, so a
    caller can rank on any registered criterion by giving it a weight.
    """
    merged = dict(DEFAULT_WEIGHTS)
    if weights:
        merged.update(weights)
    orientations = orientations or {}

    criteria = []
    for name, weight in merged.items():
        if name not in EXTRACTORS:
            raise UnknownCriterionError(name)
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise InvalidWeightError(f"Weight for {name!r} must be numeric, got {weight!r}")
        if not math.isfinite(weight) or weight < 0:
            raise InvalidWeightError(
                f"Weight for {name!r} must be a non-negative number, got {weight}"
            )
        criteria.append(
            CriterionSpec(
                name=name,
                orientation=orientations.get(name, Orientation.benefit),
                weight=float(weight),
                label=LABELS.get(name),
            )
        )
    return criteria


def extract_features(supplier: SupplierProfile, criteria: list[CriterionSpec]) -> list[float]:
    """Feature vector for one supplier, one scalar per criterion."""
    return [EXTRACTORS[c.name](supplier) for c in criteria]
