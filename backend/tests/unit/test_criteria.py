"""Unit tests for criterion extraction and configuration."""

from __future__ import annotations

import math

import pytest

from supplier_intel.modules.ranking.criteria import (
    DEFAULT_WEIGHTS,
    InvalidWeightError,
    UnknownCriterionError,
    build_criteria,
    extract_features,
    list_length,
    presence,
    to_number,
)
from supplier_intel.modules.ranking.schemas import CriterionSpec, Orientation
from supplier_intel.modules.suppliers.schemas import SupplierProfile


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0.0),
        (True, 0.0),
        (42, 42.0),
        (3.5, 3.5),
        ("1,200", 1200.0),
        ("$5,000,000", 5_000_000.0),
        ("N/A", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (10**400, 0.0),
        ("9" * 400, 0.0),
        ([1, 2], 0.0),
    ],
)
def test_to_number(value, expected) -> None:
    assert to_number(value) == expected


def test_list_length_and_presence() -> None:
    assert list_length(["a", "b"]) == 2.0
    assert list_length(None) == 0.0
    assert list_length("abc") == 0.0
    assert presence("Net zero by 2040") == 1.0
    assert presence("   ") == 0.0
    assert presence(None) == 0.0


def test_extract_features_follows_criteria_order() -> None:
    supplier = SupplierProfile.model_validate(
        {
            "companyName": "Vedanta",
            "revenue": 17_000_000_000,
            "geographicCoverage": ["India", "Zambia"],
            "esgStatus": "Reporting to GRI",
            "productOfferings": {"Aluminium ingots": "Yes"},
        }
    )
    criteria = [
        CriterionSpec(name="esgStatus", weight=0.1),
        CriterionSpec(name="geographicCoverage", weight=0.2),
        CriterionSpec(name="revenue", weight=0.3),
        CriterionSpec(name="productOfferings", weight=0.1),
        CriterionSpec(name="employees", weight=0.1),
    ]
    assert extract_features(supplier, criteria) == [1.0, 2.0, 17_000_000_000.0, 1.0, 0.0]


def test_build_criteria_defaults() -> None:
    criteria = build_criteria()
    assert [c.name for c in criteria] == list(DEFAULT_WEIGHTS)
    assert math.isclose(sum(c.weight for c in criteria), 1.0)
    assert all(c.orientation == Orientation.benefit for c in criteria)
    assert criteria[0].label == "Revenue"


def test_build_criteria_overrides_and_extends() -> None:
    criteria = build_criteria({"revenue": 0.5, "awards": 0.2}, {"yearFounded": Orientation.cost})
    by_name = {c.name: c for c in criteria}
    assert by_name["revenue"].weight == 0.5
    assert by_name["awards"].weight == 0.2
    assert by_name["yearFounded"].orientation == Orientation.cost
    assert list(by_name)[-1] == "awards"


def test_build_criteria_rejects_unknown_name() -> None:
    with pytest.raises(UnknownCriterionError) as exc_info:
        build_criteria({"marketCap": 0.3})
    assert "marketCap" in str(exc_info.value)


@pytest.mark.parametrize("weight", [-0.1, float("nan"), float("inf"), "heavy", True])
def test_build_criteria_rejects_bad_weights(weight) -> None:
    with pytest.raises(InvalidWeightError):
        build_criteria({"revenue": weight})
