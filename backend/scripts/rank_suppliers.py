#!/usr/bin/env python3
"""Rank suppliers from a JSON file with TOPSIS.

Reads either a list of supplier profiles or a discovery response
(``{"suppliers": [...]}``), prints the ranking and optionally writes the
supplier analysis workbook with a TOPSIS Ranking sheet.

Usage:
    python -m scripts.rank_suppliers suppliers.json
    python -m scripts.rank_suppliers suppliers.json --weight revenue=0.4 --weight esgStatus=0
    python -m scripts.rank_suppliers suppliers.json --xlsx ranking.xlsx
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog

from supplier_intel.core.logging import configure_logging
from supplier_intel.modules.exports.excel import build_supplier_workbook, workbook_bytes
from supplier_intel.modules.ranking.criteria import (
    InvalidWeightError,
    UnknownCriterionError,
    build_criteria,
)
from supplier_intel.modules.ranking.topsis import rank_suppliers, score_band
from supplier_intel.modules.suppliers.schemas import SupplierProfile

logger = structlog.get_logger()


def parse_weight(raw: str) -> tuple[str, float]:
    """``name=value`` -> (name, value)."""
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=WEIGHT, got {raw!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Weight for {name!r} is not a number: {value!r}")


def load_suppliers(path: Path) -> list[SupplierProfile]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("suppliers", [])
    return [SupplierProfile.model_validate(item) for item in data]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rank suppliers with TOPSIS")
    parser.add_argument("input", type=Path, help="JSON file with supplier profiles")
    parser.add_argument(
        "--weight",
        action="append",
        type=parse_weight,
        default=[],
        metavar="NAME=WEIGHT",
        help="Override a criterion weight (repeatable)",
    )
    parser.add_argument("--xlsx", type=Path, help="Write the supplier workbook to this path")
    args = parser.parse_args(argv)

    configure_logging()

    suppliers = load_suppliers(args.input)
    try:
        criteria = build_criteria(dict(args.weight) or None)
        rankings = rank_suppliers(suppliers, criteria)
    except (UnknownCriterionError, InvalidWeightError) as exc:
        logger.error("Invalid ranking criteria", error=str(exc))
        return 2

    print(f"{'Rank':>4}  {'Score':>6}  {'Band':<9}  Company")
    for ranked in rankings:
        print(f"{ranked.rank:>4}  {ranked.score:6.4f}  {score_band(ranked.score):<9}  {ranked.company_name}")

    if args.xlsx:
        args.xlsx.write_bytes(workbook_bytes(build_supplier_workbook(suppliers, rankings)))
        logger.info("Ranking workbook written", path=str(args.xlsx), suppliers=len(suppliers))

    return 0


if __name__ == "__main__":
    sys.exit(main())
