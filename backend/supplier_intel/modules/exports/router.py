"""Spreadsheet export: /exports/ endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from supplier_intel.core.config import settings
from supplier_intel.modules.exports.excel import (
    XLSX_MEDIA_TYPE,
    build_database_workbook,
    build_supplier_workbook,
    export_filename,
    workbook_bytes,
)
from supplier_intel.modules.exports.schemas import DatabaseExportRequest, SupplierExportRequest
from supplier_intel.modules.ranking.criteria import (
    InvalidWeightError,
    UnknownCriterionError,
    build_criteria,
)
from supplier_intel.modules.ranking.schemas import RankedSupplier
from supplier_intel.modules.ranking.topsis import rank_suppliers
from supplier_intel.modules.suppliers.schemas import SupplierProfile

logger = structlog.get_logger()

router = APIRouter(prefix="/exports", tags=["exports"])


def _xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def carried_rankings(suppliers: list[SupplierProfile]) -> list[RankedSupplier] | None:
    """Rankings already attached to the suppliers (``score`` and ``rank`` keys).

    Out-of-range or non-numeric carried values drop the ranking sheet rather
    than failing the export.
    """
    if not suppliers:
        return None
    for s in suppliers:
        extra = s.model_extra or {}
        if "score" not in extra or "rank" not in extra:
            return None
    try:
        return [RankedSupplier.model_validate(s.model_dump()) for s in suppliers]
    except ValidationError as exc:
        logger.warning("Carried rankings ignored", errors=exc.error_count())
        return None


@router.post("/suppliers.xlsx")
async def export_suppliers(body: SupplierExportRequest) -> Response:
    """Supplier analysis workbook, optionally with a TOPSIS ranking sheet."""
    if body.include_ranking:
        try:
            rankings = rank_suppliers(body.suppliers, build_criteria(body.weights))
        except (UnknownCriterionError, InvalidWeightError) as exc:
            raise HTTPException(status_code=422, detail=str(exc))
    else:
        rankings = carried_rankings(body.suppliers)

    wb = build_supplier_workbook(body.suppliers, rankings)
    logger.info(
        "Supplier workbook exported",
        category=body.category,
        suppliers=len(body.suppliers),
        ranked=bool(rankings),
    )
    return _xlsx_response(workbook_bytes(wb), export_filename(body.category, "supplier_analysis"))


@router.post("/database.xlsx")
async def export_database(body: DatabaseExportRequest) -> Response:
    """Workbook of a database extract from /databases/connect."""
    wb = build_database_workbook(
        body.database_data,
        body.database_type,
        body.database_url,
        max_tables=settings.export_max_tables,
        max_rows=settings.export_max_rows_per_table,
    )
    logger.info(
        "Database workbook exported",
        database_type=body.database_type,
        tables=len(body.database_data.tables),
    )
    return _xlsx_response(workbook_bytes(wb), export_filename(body.database_type or "database", "export"))
