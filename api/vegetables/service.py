"""
Vegetable use cases.

The interactor receives raw path identifiers from the HTTP layer, converts
them into `VegetableId`s and delegates persistence to whatever
`VegetableRepository` it was built with.
"""

from __future__ import annotations

import logging

from core.primitives import EntityId

from .domain import PartialVegetable, UpsertVegetable, Vegetable, VegetableId, VegetableRepository

logger = logging.getLogger(__name__)


def to_vegetable_id(raw_id: str) -> VegetableId:
    """
    Parse a path segment into a `VegetableId`.

    Raises `ValidationError` when the value is not a UUID.
    """
    return VegetableId.parse(raw_id)


class VegetableInteractor:
    def __init__(self, repository: VegetableRepository) -> None:
        self._repository = repository

    async def find_by_id(self, raw_id: str) -> Vegetable | None:
        vegetable_id = to_vegetable_id(raw_id)
        return await self._repository.find_by_id(vegetable_id)

    async def find_all(self) -> list[Vegetable]:
        return await self._repository.find_all()

    async def register(self, vegetable: UpsertVegetable) -> Vegetable:
        registered = await self._repository.register(vegetable)
        logger.info(
            "vegetable_registered id=%s name=%s unit_price=%s",
            registered.id,
            registered.name,
            registered.unit_price.value,
        )
        return registered

    async def update(self, raw_id: str, vegetable: UpsertVegetable) -> Vegetable | None:
        vegetable_id = to_vegetable_id(raw_id)
        updated = await self._repository.update(vegetable_id, vegetable)
        _log_write("vegetable_updated", vegetable_id, updated is not None)
        return updated

    async def partial_update(self, raw_id: str, vegetable: PartialVegetable) -> Vegetable | None:
        vegetable_id = to_vegetable_id(raw_id)
        if vegetable.is_empty():
            return await self._repository.find_by_id(vegetable_id)

        updated = await self._repository.partial_update(vegetable_id, vegetable)
        _log_write("vegetable_patched", vegetable_id, updated is not None)
        return updated

    async def delete(self, raw_id: str) -> int:
        vegetable_id = to_vegetable_id(raw_id)
        affected = await self._repository.delete(vegetable_id)
        _log_write("vegetable_deleted", vegetable_id, affected > 0)
        return affected


def _log_write(event: str, entity_id: EntityId, found: bool) -> None:
    logger.info("%s id=%s found=%s", event, entity_id, found)
