import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import asyncpg
import pytest

from core.errors import PersistenceError
from core.primitives import Price
from vegetables.domain import PartialVegetable, UpsertVegetable, VegetableId
from vegetables.repository import PgVegetableRepository, partial_update_query, row_to_vegetable


def _row(**overrides):
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    row = {
        "id": uuid.uuid4(),
        "name": "carrot",
        "unit_price": 120,
        "created_at": now,
        "updated_at": now,
    }
    row.update(overrides)
    return row


class FakeConnection:
    def __init__(self, *, row=None, status="DELETE 0", error=None):
        self.row = row
        self.status = status
        self.error = error
        self.calls = []
        self.committed = False
        self.rolled_back = False

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return self.row

    async def execute(self, sql, *args):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return self.status

    @asynccontextmanager
    async def transaction(self):
        try:
            yield
        except BaseException:
            self.rolled_back = True
            raise
        else:
            self.committed = True


class FakePool:
    def __init__(self, conn: FakeConnection, rows=None):
        self.conn = conn
        self.rows = rows or []

    @asynccontextmanager
    async def acquire(self):
        yield self.conn

    async def fetchrow(self, sql, *args):
        return await self.conn.fetchrow(sql, *args)

    async def fetch(self, sql, *args):
        self.conn.calls.append((sql, args))
        return self.rows


class TestPartialUpdateQuery:
    def test_empty_patch_builds_nothing(self):
        assert partial_update_query(VegetableId.generate(), PartialVegetable()) is None

    def test_name_only(self):
        vegetable_id = VegetableId.generate()

        sql, args = partial_update_query(vegetable_id, PartialVegetable(name="leek"))

        assert args == [vegetable_id.value, "leek"]
        assert "name = $2, updated_at = CURRENT_TIMESTAMP" in sql
        assert "unit_price =" not in sql

    def test_price_only(self):
        vegetable_id = VegetableId.generate()

        sql, args = partial_update_query(vegetable_id, PartialVegetable(unit_price=Price(5)))

        assert args == [vegetable_id.value, 5]
        assert "unit_price = $2, updated_at = CURRENT_TIMESTAMP" in sql
        assert "name =" not in sql

    def test_both_fields(self):
        sql, args = partial_update_query(
            VegetableId.generate(),
            PartialVegetable(name="leek", unit_price=Price(5)),
        )

        assert args[1:] == ["leek", 5]
        assert "name = $2, unit_price = $3, updated_at = CURRENT_TIMESTAMP" in sql
        assert "WHERE id = $1" in sql


def test_row_to_vegetable():
    row = _row(unit_price=0)

    vegetable = row_to_vegetable(row)

    assert vegetable.id == VegetableId(row["id"])
    assert vegetable.unit_price == Price(0)


@pytest.mark.asyncio
async def test_register_commits_and_maps_row():
    row = _row(name="beet")
    conn = FakeConnection(row=row)
    repository = PgVegetableRepository(FakePool(conn))

    vegetable = await repository.register(UpsertVegetable(name="beet", unit_price=Price(120)))

    assert vegetable.id == VegetableId(row["id"])
    assert conn.committed
    sql, args = conn.calls[0]
    assert sql.strip().startswith("INSERT INTO vegetables (name, unit_price")
    assert args == ("beet", 120)


@pytest.mark.asyncio
async def test_update_missing_returns_none():
    conn = FakeConnection(row=None)
    repository = PgVegetableRepository(FakePool(conn))

    result = await repository.update(VegetableId.generate(), UpsertVegetable(name="x", unit_price=Price(1)))

    assert result is None
    assert conn.committed


@pytest.mark.asyncio
async def test_partial_update_empty_patch_only_reads():
    row = _row()
    conn = FakeConnection(row=row)
    repository = PgVegetableRepository(FakePool(conn))

    result = await repository.partial_update(VegetableId(row["id"]), PartialVegetable())

    assert result.name == "carrot"
    assert len(conn.calls) == 1
    assert conn.calls[0][0].strip().startswith("SELECT")
    assert not conn.committed


@pytest.mark.asyncio
async def test_delete_returns_affected_rows():
    conn = FakeConnection(status="DELETE 1")
    repository = PgVegetableRepository(FakePool(conn))

    assert await repository.delete(VegetableId.generate()) == 1
    assert conn.committed


@pytest.mark.asyncio
async def test_delete_nothing_returns_zero():
    conn = FakeConnection(status="DELETE 0")
    repository = PgVegetableRepository(FakePool(conn))

    assert await repository.delete(VegetableId.generate()) == 0


@pytest.mark.asyncio
async def test_find_all_maps_rows():
    rows = [_row(name="a"), _row(name="b")]
    conn = FakeConnection()
    repository = PgVegetableRepository(FakePool(conn, rows=rows))

    result = await repository.find_all()

    assert [v.name for v in result] == ["a", "b"]
    assert "ORDER BY id" in conn.calls[0][0]


@pytest.mark.asyncio
async def test_driver_error_rolls_back_and_becomes_persistence_error():
    conn = FakeConnection(error=asyncpg.InterfaceError("connection is closed"))
    repository = PgVegetableRepository(FakePool(conn))

    with pytest.raises(PersistenceError) as excinfo:
        await repository.delete(VegetableId.generate())

    assert conn.rolled_back
    assert isinstance(excinfo.value.__cause__, asyncpg.InterfaceError)
