from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from supplier_intel.modules.databases.schemas import DatabaseExtract
from supplier_intel.modules.suppliers.schemas import SupplierProfile


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SupplierExportRequest(CamelModel):
    suppliers: list[SupplierProfile]
    category: str = "suppliers"
    # Rank with TOPSIS before exporting (weights override the defaults)
    include_ranking: bool = False
    weights: dict[str, float] | None = None


class DatabaseExportRequest(CamelModel):
    database_data: DatabaseExtract
    database_type: str | None = None
    database_url: str | None = None
