"""
Dependency providers wiring the vegetable routes to a repository.

Tests swap the backing store with `app.dependency_overrides[get_vegetable_repository]`.
"""

from __future__ import annotations

from fastapi import Depends

from .domain import VegetableRepository
from .repository import PgVegetableRepository
from .service import VegetableInteractor


def get_vegetable_repository() -> VegetableRepository:
    return PgVegetableRepository()


def get_vegetable_interactor(
    repository: VegetableRepository = Depends(get_vegetable_repository),
) -> VegetableInteractor:
    return VegetableInteractor(repository)
