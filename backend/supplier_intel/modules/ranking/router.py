"""Supplier ranking: /ranking/ endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException

from supplier_intel.modules.ranking.criteria import (
    InvalidWeightError,
    UnknownCriterionError,
    build_criteria,
)
from supplier_intel.modules.ranking.schemas import CriterionSpec, RankingRequest, RankingResponse
from supplier_intel.modules.ranking.topsis import rank_suppliers

logger = structlog.get_logger()

router = APIRouter(prefix="/ranking", tags=["ranking"])


@router.get("/criteria", response_model=list[CriterionSpec])
async def default_criteria() -> list[CriterionSpec]:
    """Default TOPSIS criteria and weights."""
    return build_criteria()


@router.post("/topsis", response_model=RankingResponse, response_model_by_alias=True)
async def rank_topsis(body: RankingRequest) -> RankingResponse:
    """Rank suppliers with TOPSIS.

    ``criteria`` replaces the default configuration entirely; otherwise
    ``weights`` overrides individual default weights.
    """
    try:
        criteria = body.criteria if body.criteria is not None else build_criteria(body.weights)
        rankings = rank_suppliers(body.suppliers, criteria)
    except (UnknownCriterionError, InvalidWeightError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    logger.info("Suppliers ranked", suppliers=len(rankings), criteria=len(criteria))
    return RankingResponse(rankings=rankings, criteria=criteria)
