from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from core.errors import PersistenceError
from main import create_app
from vegetables import dependencies
from vegetables.domain import (
    PartialVegetable,
    UpsertVegetable,
    Vegetable,
    VegetableId,
    VegetableRepository,
)


class InMemoryVegetableRepository(VegetableRepository):
    def __init__(self) -> None:
        self.rows: dict[VegetableId, Vegetable] = {}

    async def find_by_id(self, vegetable_id: VegetableId) -> Vegetable | None:
        return self.rows.get(vegetable_id)

    async def find_all(self) -> list[Vegetable]:
        return sorted(self.rows.values(), key=lambda v: v.id.value)

    async def register(self, vegetable: UpsertVegetable) -> Vegetable:
        now = datetime.now(timezone.utc)
        row = Vegetable(
            id=VegetableId.generate(),
            name=vegetable.name,
            unit_price=vegetable.unit_price,
            created_at=now,
            updated_at=now,
        )
        self.rows[row.id] = row
        return row

    async def update(self, vegetable_id: VegetableId, vegetable: UpsertVegetable) -> Vegetable | None:
        current = self.rows.get(vegetable_id)
        if current is None:
            return None
        row = Vegetable(
            id=vegetable_id,
            name=vegetable.name,
            unit_price=vegetable.unit_price,
            created_at=current.created_at,
            updated_at=datetime.now(timezone.utc),
        )
        self.rows[vegetable_id] = row
        return row

    async def partial_update(
        self,
        vegetable_id: VegetableId,
        vegetable: PartialVegetable,
    ) -> Vegetable | None:
        current = self.rows.get(vegetable_id)
        if current is None or vegetable.is_empty():
            return current
        row = Vegetable(
            id=vegetable_id,
            name=vegetable.name if vegetable.name is not None else current.name,
            unit_price=vegetable.unit_price if vegetable.unit_price is not None else current.unit_price,
            created_at=current.created_at,
            updated_at=datetime.now(timezone.utc),
        )
        self.rows[vegetable_id] = row
        return row

    async def delete(self, vegetable_id: VegetableId) -> int:
        return 1 if self.rows.pop(vegetable_id, None) is not None else 0


class FailingVegetableRepository(VegetableRepository):
    async def find_by_id(self, vegetable_id):
        raise PersistenceError("connection refused")

    async def find_all(self):
        raise PersistenceError("connection refused")

    async def register(self, vegetable):
        raise PersistenceError("connection refused")

    async def update(self, vegetable_id, vegetable):
        raise PersistenceError("connection refused")

    async def partial_update(self, vegetable_id, vegetable):
        raise PersistenceError("connection refused")

    async def delete(self, vegetable_id):
        raise PersistenceError("connection refused")


@pytest.fixture
def repository() -> InMemoryVegetableRepository:
    return InMemoryVegetableRepository()


@pytest.fixture
def client(repository):
    app = create_app()
    app.dependency_overrides[dependencies.get_vegetable_repository] = lambda: repository
    return TestClient(app)


@pytest.fixture
def failing_client():
    app = create_app()
    app.dependency_overrides[dependencies.get_vegetable_repository] = FailingVegetableRepository
    return TestClient(app)
