"""
Vegetable persistence (raw SQL).

Every write runs as a single statement inside `db.transaction()`.

Schema comes from the dbmate migration:
- vegetables(id uuid default gen_random_uuid(), name, unit_price, created_at, updated_at)
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.errors import PersistenceError
from core.primitives import Price

from .domain import PartialVegetable, UpsertVegetable, Vegetable, VegetableId, VegetableRepository

COLUMNS = "id, name, unit_price, created_at, updated_at"


def row_to_vegetable(row: asyncpg.Record | dict[str, Any]) -> Vegetable:
    # Rows satisfy the domain rules via table CHECK constraints.
    return Vegetable(
        id=VegetableId(row["id"]),
        name=str(row["name"]),
        unit_price=Price(int(row["unit_price"])),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def partial_update_query(
    vegetable_id: VegetableId,
    vegetable: PartialVegetable,
) -> tuple[str, list[Any]] | None:
    """
    Build an UPDATE that only touches the supplied fields.

    Returns None when there is nothing to write.
    """
    if vegetable.is_empty():
        return None

    args: list[Any] = [vegetable_id.value]
    assignments: list[str] = []
    if vegetable.name is not None:
        args.append(vegetable.name)
        assignments.append(f"name = ${len(args)}")
    if vegetable.unit_price is not None:
        args.append(vegetable.unit_price.value)
        assignments.append(f"unit_price = ${len(args)}")
    assignments.append("updated_at = CURRENT_TIMESTAMP")

    sql = f"""
        UPDATE vegetables
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING {COLUMNS}
        """
    return sql, args


class PgVegetableRepository(VegetableRepository):
    """
    PostgreSQL-backed vegetable repository.
    """

    def __init__(self, pool: asyncpg.Pool | None = None) -> None:
        # Resolved lazily so the repository can be built before startup.
        self._pool = pool

    def _acquire_pool(self) -> asyncpg.Pool:
        return self._pool if self._pool is not None else db.pool()

    @db.translate_errors
    async def find_by_id(self, vegetable_id: VegetableId) -> Vegetable | None:
        row = await self._acquire_pool().fetchrow(
            f"""
            SELECT {COLUMNS}
            FROM vegetables
            WHERE id = $1
            """,
            vegetable_id.value,
        )
        return row_to_vegetable(row) if row is not None else None

    @db.translate_errors
    async def find_all(self) -> list[Vegetable]:
        rows = await self._acquire_pool().fetch(
            f"""
            SELECT {COLUMNS}
            FROM vegetables
            ORDER BY id
            """
        )
        return [row_to_vegetable(r) for r in rows]

    @db.translate_errors
    async def register(self, vegetable: UpsertVegetable) -> Vegetable:
        async with db.transaction(self._pool) as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO vegetables (name, unit_price, created_at, updated_at)
                VALUES ($1, $2, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                RETURNING {COLUMNS}
                """,
                vegetable.name,
                vegetable.unit_price.value,
            )
        if row is None:
            raise PersistenceError("Failed to insert vegetable.")
        return row_to_vegetable(row)

    @db.translate_errors
    async def update(self, vegetable_id: VegetableId, vegetable: UpsertVegetable) -> Vegetable | None:
        async with db.transaction(self._pool) as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE vegetables
                SET name = $2,
                    unit_price = $3,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = $1
                RETURNING {COLUMNS}
                """,
                vegetable_id.value,
                vegetable.name,
                vegetable.unit_price.value,
            )
        return row_to_vegetable(row) if row is not None else None

    async def partial_update(
        self,
        vegetable_id: VegetableId,
        vegetable: PartialVegetable,
    ) -> Vegetable | None:
        query = partial_update_query(vegetable_id, vegetable)
        if query is None:
            return await self.find_by_id(vegetable_id)
        return await self._partial_update(*query)

    @db.translate_errors
    async def _partial_update(self, sql: str, args: list[Any]) -> Vegetable | None:
        async with db.transaction(self._pool) as conn:
            row = await conn.fetchrow(sql, *args)
        return row_to_vegetable(row) if row is not None else None

    @db.translate_errors
    async def delete(self, vegetable_id: VegetableId) -> int:
        async with db.transaction(self._pool) as conn:
            status = await conn.execute(
                """
                DELETE FROM vegetables
                WHERE id = $1
                """,
                vegetable_id.value,
            )
        return db.rows_affected(status)
