"""External database extraction schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnSchema(CamelModel):
    name: str
    type: str = ""
    nullable: bool = True
    default: str | None = None
    primary_key: bool = False


class TableExtract(CamelModel):
    """Rows and columns of one table (or MongoDB collection)."""

    columns: list[str] = []
    rows: list[dict[str, Any]] = []
    total_columns: int = 0
    total_rows: int = 0
    column_schema: list[ColumnSchema] = Field(default_factory=list, alias="schema")
    document_count: int | None = None
    error: str | None = None


class DatabaseMetadata(CamelModel):
    total_tables: int = 0
    table_names: list[str] = []
    database_name: str | None = None


class DatabaseExtract(CamelModel):
    tables: dict[str, TableExtract] = {}
    metadata: DatabaseMetadata = DatabaseMetadata()


class ConnectRequest(CamelModel):
    database_url: str = ""
    database_type: str | None = None


class ConnectResponse(CamelModel):
    success: bool = True
    database_type: str
    database_url: str
    tables: dict[str, TableExtract]
    metadata: DatabaseMetadata
    extracted_at: str
