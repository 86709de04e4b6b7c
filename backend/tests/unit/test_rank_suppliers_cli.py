"""Unit tests for the rank_suppliers command-line script."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest
from openpyxl import load_workbook

from scripts.rank_suppliers import load_suppliers, main, parse_weight


@pytest.fixture
def suppliers_file(tmp_path: Path, suppliers) -> Path:
    path = tmp_path / "suppliers.json"
    path.write_text(json.dumps({"suppliers": suppliers}), encoding="utf-8")
    return path


def test_parse_weight() -> None:
    assert parse_weight("revenue=0.4") == ("revenue", 0.4)
    assert parse_weight(" esgStatus =0") == ("esgStatus", 0.0)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_weight("revenue")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_weight("revenue=lots")


def test_load_suppliers_accepts_list_or_response(tmp_path: Path, suppliers) -> None:
    as_list = tmp_path / "list.json"
    as_list.write_text(json.dumps(suppliers), encoding="utf-8")
    assert [s.company_name for s in load_suppliers(as_list)][0] == "Hindalco Industries"


def test_main_prints_ranking_and_writes_workbook(suppliers_file: Path, tmp_path: Path, capsys) -> None:
    out = tmp_path / "ranking.xlsx"
    assert main([str(suppliers_file), "--weight", "revenue=0.5", "--xlsx", str(out)]) == 0

    lines = capsys.readouterr().out.splitlines()
    header = next(i for i, line in enumerate(lines) if line.split() == ["Rank", "Score", "Band", "Company"])
    first = lines[header + 1]
    assert first.split()[0] == "1"
    assert first.endswith("Hindalco Industries")
    assert "TOPSIS Ranking" in load_workbook(out).sheetnames


def test_main_rejects_unknown_criterion(suppliers_file: Path) -> None:
    assert main([str(suppliers_file), "--weight", "sharePrice=1"]) == 2


def test_main_rejects_malformed_weight(suppliers_file: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([str(suppliers_file), "--weight", "revenue"])
    assert exc_info.value.code == 2
