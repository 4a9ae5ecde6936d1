"""
Value objects shared by the domain packages.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TypeVar

from core.errors import DomainRuleError, ValidationError

# Prices and quantities are stored in PostgreSQL `integer` columns.
MAX_INT = 2_147_483_647

IdT = TypeVar("IdT", bound="EntityId")


def _require_int(value: object, label: str) -> int:
    # bool is an int subclass; True must not become a price of 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainRuleError(f"{label} must be an integer.")
    return value


@dataclass(frozen=True, order=True)
class Price:
    """
    Non-negative integer price.
    """

    value: int

    def __post_init__(self) -> None:
        value = _require_int(self.value, "Price")
        if value < 0:
            raise DomainRuleError("Price must be 0 or greater.")
        if value > MAX_INT:
            raise DomainRuleError(f"Price must be {MAX_INT} or less.")

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True, order=True)
class Quantity:
    """
    Integer quantity of at least one.
    """

    value: int

    def __post_init__(self) -> None:
        value = _require_int(self.value, "Quantity")
        if value < 1:
            raise DomainRuleError("Quantity must be 1 or greater.")
        if value > MAX_INT:
            raise DomainRuleError(f"Quantity must be {MAX_INT} or less.")

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class EntityId:
    """
    UUID wrapper that every entity subclasses for its own identifier type.

    Dataclass equality requires both sides to be the same class, so a
    VegetableId never equals a SaleId wrapping the same UUID.
    """

    value: uuid.UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, uuid.UUID):
            raise TypeError(f"{type(self).__name__} wraps a uuid.UUID, got {type(self.value).__name__}.")

    @classmethod
    def generate(cls: type[IdT]) -> IdT:
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls: type[IdT], raw: str) -> IdT:
        text = (raw or "").strip()
        try:
            value = uuid.UUID(text)
        except ValueError as exc:
            raise ValidationError(f"{cls.__name__} must be a UUID string, got {raw!r}.") from exc
        return cls(value)

    def __str__(self) -> str:
        return str(self.value)
