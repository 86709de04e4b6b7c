"""Read-only extraction of an external database into plain tables.

SQL databases (MySQL, PostgreSQL, SQLite, MSSQL) go through SQLAlchemy's
inspector; MongoDB goes through pymongo. Each table is capped at
``settings.database_row_limit`` rows. A table that fails to load is recorded
with its error and never aborts the extract.
"""

from __future__ import annotations

import asyncio
import base64
import json
import re
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import create_engine, inspect, literal_column, select, table

from supplier_intel.core.config import settings
from supplier_intel.modules.databases.schemas import (
    ColumnSchema,
    DatabaseExtract,
    DatabaseMetadata,
    TableExtract,
)

logger = structlog.get_logger()

SQL_TYPES = ("mysql", "postgresql", "sqlite", "mssql")
SUPPORTED_TYPES = (*SQL_TYPES, "mongodb")

TYPE_ALIASES = {"postgres": "postgresql", "sqlserver": "mssql"}

TYPE_LABELS = {
    "mysql": "MySQL",
    "postgresql": "PostgreSQL",
    "sqlite": "SQLite",
    "mssql": "MSSQL",
    "mongodb": "MongoDB",
}

_DRIVERS = {
    "mysql": "mysql+pymysql",
    "postgresql": "postgresql+psycopg2",
    "mssql": "mssql+pymssql",
}

_CREDENTIALS_RE = re.compile(r"://([^:/@]+):([^@]+)@")


class DatabaseExtractionError(RuntimeError):
    """The database could not be reached or listed."""


class UnsupportedDatabaseError(ValueError):
    """No extractor exists for the requested database type."""


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------


def detect_database_type(url: str) -> str:
    """Database type implied by a connection URL or file path."""
    lowered = url.lower()
    if "mysql" in lowered:
        return "mysql"
    if "postgres" in lowered:
        return "postgresql"
    if "mongodb" in lowered:
        return "mongodb"
    if "sqlite" in lowered or lowered.endswith((".db", ".sqlite")):
        return "sqlite"
    if "sqlserver" in lowered or "mssql" in lowered:
        return "mssql"
    if "oracle" in lowered:
        return "oracle"
    return "generic"


def normalize_database_type(db_type: str) -> str:
    lowered = db_type.strip().lower()
    return TYPE_ALIASES.get(lowered, lowered)


def mask_url(url: str) -> str:
    """Hide the user and password of a connection URL."""
    return _CREDENTIALS_RE.sub("://***:***@", url, count=1)


def sqlite_path(url: str) -> str:
    for prefix in ("sqlite:///", "sqlite://", "file://"):
        if url.startswith(prefix):
            return url[len(prefix):]
    return url


def sqlalchemy_url(url: str, db_type: str) -> str:
    """SQLAlchemy URL with an explicit driver for ``db_type``."""
    if db_type == "sqlite":
        return f"sqlite:///{sqlite_path(url)}"

    scheme, sep, rest = url.partition("://")
    if not sep or "+" in scheme:
        return url
    return f"{_DRIVERS[db_type]}://{rest}"


def to_jsonable(value: Any) -> Any:
    """Cell value as a JSON-friendly scalar."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    return str(value)


# ---------------------------------------------------------------------------
# SQL (SQLAlchemy)
# ---------------------------------------------------------------------------


def _column_schema(column: dict[str, Any], primary_keys: set[str]) -> ColumnSchema:
    default = column.get("default")
    return ColumnSchema(
        name=column["name"],
        type=str(column.get("type", "")),
        nullable=bool(column.get("nullable", True)),
        default=None if default is None else str(default),
        primary_key=column["name"] in primary_keys,
    )


def extract_sql(url: str, db_type: str, row_limit: int) -> DatabaseExtract:
    label = TYPE_LABELS[db_type]
    if db_type == "sqlite":
        path = sqlite_path(url)
        if path != ":memory:" and not Path(path).exists():
            raise DatabaseExtractionError(f"{label} connection failed: database file not found: {path}")

    try:
        engine = create_engine(sqlalchemy_url(url, db_type))
        inspector = inspect(engine)
        table_names = inspector.get_table_names()
    except Exception as exc:
        raise DatabaseExtractionError(f"{label} connection failed: {exc}") from exc

    tables: dict[str, TableExtract] = {}
    try:
        for name in table_names:
            try:
                columns = inspector.get_columns(name)
                primary_keys = set(inspector.get_pk_constraint(name).get("constrained_columns") or [])
                query = select(literal_column("*")).select_from(table(name)).limit(row_limit)
                with engine.connect() as conn:
                    result = conn.execute(query)
                    rows = [
                        {key: to_jsonable(value) for key, value in row._mapping.items()}
                        for row in result
                    ]
            except Exception as exc:
                logger.warning("Table extraction failed", table=name, exc_info=True)
                tables[name] = TableExtract(error=str(exc))
                continue

            column_names = [c["name"] for c in columns]
            tables[name] = TableExtract(
                columns=column_names,
                rows=rows,
                total_columns=len(column_names),
                total_rows=len(rows),
                column_schema=[_column_schema(c, primary_keys) for c in columns],
            )
    finally:
        engine.dispose()

    return DatabaseExtract(
        tables=tables,
        metadata=DatabaseMetadata(total_tables=len(table_names), table_names=table_names),
    )


# ---------------------------------------------------------------------------
# MongoDB (pymongo)
# ---------------------------------------------------------------------------


def extract_mongo(url: str, row_limit: int) -> DatabaseExtract:
    from pymongo import MongoClient

    try:
        client = MongoClient(url, serverSelectionTimeoutMS=5000)
        db = client.get_default_database(default="test")
        collection_names = db.list_collection_names()
    except Exception as exc:
        raise DatabaseExtractionError(f"MongoDB connection failed: {exc}") from exc

    tables: dict[str, TableExtract] = {}
    try:
        for name in collection_names:
            try:
                collection = db[name]
                docs = list(collection.find({}).limit(row_limit))
                columns = list(dict.fromkeys(key for doc in docs for key in doc))
                rows = [{col: to_jsonable(doc.get(col)) for col in columns} for doc in docs]
                tables[name] = TableExtract(
                    columns=columns,
                    rows=rows,
                    total_columns=len(columns),
                    total_rows=len(rows),
                    document_count=collection.count_documents({}) if docs else 0,
                )
            except Exception as exc:
                logger.warning("Collection extraction failed", collection=name, exc_info=True)
                tables[name] = TableExtract(error=str(exc))
    finally:
        client.close()

    return DatabaseExtract(
        tables=tables,
        metadata=DatabaseMetadata(
            total_tables=len(collection_names),
            table_names=collection_names,
            database_name=db.name,
        ),
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def extract_database(url: str, db_type: str | None = None) -> tuple[str, DatabaseExtract]:
    """Extract every table of the database at ``url``.

    Returns the resolved database type with the extract. Raises
    ``UnsupportedDatabaseError`` for types without an extractor and
    ``DatabaseExtractionError`` when the database cannot be reached.
    """
    resolved = normalize_database_type(db_type or detect_database_type(url))
    if resolved not in SUPPORTED_TYPES:
        raise UnsupportedDatabaseError(
            f"Unsupported database type: {resolved}. Supported: {', '.join(SUPPORTED_TYPES)}"
        )

    row_limit = settings.database_row_limit
    logger.info("Database extraction started", database_type=resolved, url=mask_url(url))

    if resolved == "mongodb":
        extract = await asyncio.to_thread(extract_mongo, url, row_limit)
    else:
        extract = await asyncio.to_thread(extract_sql, url, resolved, row_limit)

    logger.info(
        "Database extraction finished",
        database_type=resolved,
        tables=extract.metadata.total_tables,
        failed=sum(1 for t in extract.tables.values() if t.error),
    )
    return resolved, extract
