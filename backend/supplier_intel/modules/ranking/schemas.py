from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from supplier_intel.modules.suppliers.schemas import SupplierProfile


class Orientation(str, Enum):
    benefit = "benefit"  # higher raw value is better
    cost = "cost"  # lower raw value is better


class CriterionSpec(BaseModel):
    name: str
    orientation: Orientation = Orientation.benefit
    weight: float = Field(ge=0.0)
    label: str | None = None


class RankedSupplier(SupplierProfile):
    score: float = Field(ge=0.0, le=1.0, description="TOPSIS relative closeness")
    rank: int = Field(ge=1)


# --- API schemas ---


class RankingRequest(BaseModel):
    suppliers: list[SupplierProfile]
    weights: dict[str, float] | None = Field(
        None, description="Criterion -> weight overrides applied to the default criteria"
    )
    criteria: list[CriterionSpec] | None = Field(
        None, description="Full criteria configuration; takes precedence over weights"
    )


class RankingResponse(BaseModel):
    rankings: list[RankedSupplier]
    criteria: list[CriterionSpec]
