"""
Vegetable entity and its persistence contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from core.errors import DomainRuleError
from core.primitives import EntityId, Price


class VegetableId(EntityId):
    pass


@dataclass(frozen=True)
class Vegetable:
    id: VegetableId
    name: str
    unit_price: Price
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not (self.name or "").strip():
            raise DomainRuleError("Vegetable name must not be empty.")


@dataclass(frozen=True)
class UpsertVegetable:
    """
    Fields written by register and full update.
    """

    name: str
    unit_price: Price

    def __post_init__(self) -> None:
        if not (self.name or "").strip():
            raise DomainRuleError("Vegetable name must not be empty.")


@dataclass(frozen=True)
class PartialVegetable:
    """
    Fields written by a partial update; None means "leave unchanged".
    """

    name: str | None = None
    unit_price: Price | None = None

    def __post_init__(self) -> None:
        if self.name is not None and not self.name.strip():
            raise DomainRuleError("Vegetable name must not be empty.")

    def is_empty(self) -> bool:
        return self.name is None and self.unit_price is None


class VegetableRepository(ABC):
    """
    Persistence contract for vegetables.

    Implementations own their storage technology; the interactor and the HTTP
    layer only see this interface.
    """

    @abstractmethod
    async def find_by_id(self, vegetable_id: VegetableId) -> Vegetable | None:
        ...

    @abstractmethod
    async def find_all(self) -> list[Vegetable]:
        ...

    @abstractmethod
    async def register(self, vegetable: UpsertVegetable) -> Vegetable:
        """
        Insert a new vegetable. The identifier is generated by the store.
        """

    @abstractmethod
    async def update(self, vegetable_id: VegetableId, vegetable: UpsertVegetable) -> Vegetable | None:
        """
        Replace name and unit price. Returns None when the id does not exist.
        """

    @abstractmethod
    async def partial_update(
        self,
        vegetable_id: VegetableId,
        vegetable: PartialVegetable,
    ) -> Vegetable | None:
        """
        Write only the supplied fields. An empty patch re-fetches the row.
        """

    @abstractmethod
    async def delete(self, vegetable_id: VegetableId) -> int:
        """
        Delete by id and return the number of affected rows.
        """
