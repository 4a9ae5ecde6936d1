"""
Pydantic schemas for vegetable endpoints.

Field names are camelCase on the wire; snake_case is accepted on input too.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.primitives import MAX_INT, Price

from .domain import PartialVegetable, UpsertVegetable, Vegetable


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VegetableUpsertRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    # Strict: JSON true, "120" and 120.0 are rejected instead of coerced.
    unit_price: int = Field(..., strict=True, ge=0, le=MAX_INT)

    def to_domain(self) -> UpsertVegetable:
        return UpsertVegetable(name=self.name, unit_price=Price(self.unit_price))


class VegetablePatchRequest(CamelModel):
    # Omitted or null fields are left unchanged.
    name: str | None = Field(default=None, min_length=1, max_length=200)
    unit_price: int | None = Field(default=None, strict=True, ge=0, le=MAX_INT)

    def to_domain(self) -> PartialVegetable:
        return PartialVegetable(
            name=self.name,
            unit_price=Price(self.unit_price) if self.unit_price is not None else None,
        )


class VegetableResponse(CamelModel):
    id: UUID
    name: str
    unit_price: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, vegetable: Vegetable) -> "VegetableResponse":
        return cls(
            id=vegetable.id.value,
            name=vegetable.name,
            unit_price=vegetable.unit_price.value,
            created_at=vegetable.created_at,
            updated_at=vegetable.updated_at,
        )
