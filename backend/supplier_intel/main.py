from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supplier_intel.core.config import settings
from supplier_intel.core.logging import configure_logging
from supplier_intel.modules.databases.router import router as databases_router
from supplier_intel.modules.exports.router import router as exports_router
from supplier_intel.modules.ranking.router import router as ranking_router
from supplier_intel.modules.suppliers.router import router as suppliers_router

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting Supplier Intelligence API", llm_provider=settings.llm_provider)
    yield
    logger.info("Shutting down Supplier Intelligence API")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(suppliers_router, prefix=settings.api_prefix)
app.include_router(ranking_router, prefix=settings.api_prefix)
app.include_router(databases_router, prefix=settings.api_prefix)
app.include_router(exports_router, prefix=settings.api_prefix)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
