"""
Sale aggregate.

A sale groups one or more line items. Its total is fixed when the sale is
built and is not recomputed afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from core.errors import DomainRuleError
from core.primitives import EntityId, Price, Quantity
from vegetables.domain import VegetableId


class SaleId(EntityId):
    pass


@dataclass(frozen=True)
class SaleDetail:
    vegetable_id: VegetableId
    unit_price: Price
    quantity: Quantity

    def __post_init__(self) -> None:
        if not isinstance(self.vegetable_id, VegetableId):
            raise DomainRuleError("A sale detail must reference a VegetableId.")

    @property
    def subtotal(self) -> int:
        return self.unit_price.value * self.quantity.value


@dataclass(frozen=True)
class Sale:
    id: SaleId
    sold_at: datetime
    details: tuple[SaleDetail, ...]
    total_amount: int = field(init=False)

    def __post_init__(self) -> None:
        details = tuple(self.details)
        if not details:
            raise DomainRuleError("A sale needs at least one detail.")
        object.__setattr__(self, "details", details)
        object.__setattr__(self, "total_amount", sum(d.subtotal for d in details))

    @classmethod
    def create(
        cls,
        details: Iterable[SaleDetail],
        *,
        sale_id: SaleId | None = None,
        sold_at: datetime | None = None,
    ) -> "Sale":
        return cls(
            id=sale_id if sale_id is not None else SaleId.generate(),
            sold_at=sold_at if sold_at is not None else datetime.now(timezone.utc),
            details=tuple(details),
        )
