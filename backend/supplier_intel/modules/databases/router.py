"""External database: /databases/ endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, HTTPException

from supplier_intel.modules.databases.schemas import ConnectRequest, ConnectResponse
from supplier_intel.modules.databases.service import (
    DatabaseExtractionError,
    UnsupportedDatabaseError,
    extract_database,
    mask_url,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/databases", tags=["databases"])


@router.post("/connect", response_model=ConnectResponse, response_model_by_alias=True)
async def connect_database(body: ConnectRequest) -> ConnectResponse:
    """Connect to a database and tabulate its tables (read-only)."""
    url = body.database_url.strip()
    if not url:
        raise HTTPException(status_code=400, detail="Database URL is required")

    try:
        db_type, extract = await extract_database(url, body.database_type)
    except UnsupportedDatabaseError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DatabaseExtractionError as exc:
        logger.error("Database connection failed", url=mask_url(url), error=str(exc))
        raise HTTPException(status_code=500, detail=f"Failed to connect to database: {exc}")

    return ConnectResponse(
        database_type=db_type,
        database_url=mask_url(url),
        tables=extract.tables,
        metadata=extract.metadata,
        extracted_at=datetime.now(timezone.utc).isoformat(),
    )
