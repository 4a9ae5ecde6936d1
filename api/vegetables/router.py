"""
FastAPI router for vegetable endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from . import dependencies, schemas
from .service import VegetableInteractor

router = APIRouter(prefix="/api/vegetables")

NOT_FOUND_DETAIL = "Vegetable not found."


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)


@router.get("", response_model=list[schemas.VegetableResponse])
async def list_vegetables(
    interactor: VegetableInteractor = Depends(dependencies.get_vegetable_interactor),
) -> list[schemas.VegetableResponse]:
    vegetables = await interactor.find_all()
    return [schemas.VegetableResponse.from_domain(v) for v in vegetables]


@router.post(
    "",
    response_model=schemas.VegetableResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_vegetable(
    request: schemas.VegetableUpsertRequest,
    interactor: VegetableInteractor = Depends(dependencies.get_vegetable_interactor),
) -> schemas.VegetableResponse:
    vegetable = await interactor.register(request.to_domain())
    return schemas.VegetableResponse.from_domain(vegetable)


@router.get("/{vegetable_id}", response_model=schemas.VegetableResponse)
async def get_vegetable(
    vegetable_id: str,
    interactor: VegetableInteractor = Depends(dependencies.get_vegetable_interactor),
) -> schemas.VegetableResponse:
    vegetable = await interactor.find_by_id(vegetable_id)
    if vegetable is None:
        raise _not_found()
    return schemas.VegetableResponse.from_domain(vegetable)


@router.put("/{vegetable_id}", response_model=schemas.VegetableResponse)
async def update_vegetable(
    vegetable_id: str,
    request: schemas.VegetableUpsertRequest,
    interactor: VegetableInteractor = Depends(dependencies.get_vegetable_interactor),
) -> schemas.VegetableResponse:
    """
    Replace name and unit price.
    """
    vegetable = await interactor.update(vegetable_id, request.to_domain())
    if vegetable is None:
        raise _not_found()
    return schemas.VegetableResponse.from_domain(vegetable)


@router.patch("/{vegetable_id}", response_model=schemas.VegetableResponse)
async def patch_vegetable(
    vegetable_id: str,
    request: schemas.VegetablePatchRequest,
    interactor: VegetableInteractor = Depends(dependencies.get_vegetable_interactor),
) -> schemas.VegetableResponse:
    """
    Update only the supplied fields. An empty body returns the current record.
    """
    vegetable = await interactor.partial_update(vegetable_id, request.to_domain())
    if vegetable is None:
        raise _not_found()
    return schemas.VegetableResponse.from_domain(vegetable)


@router.delete("/{vegetable_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vegetable(
    vegetable_id: str,
    interactor: VegetableInteractor = Depends(dependencies.get_vegetable_interactor),
) -> Response:
    affected = await interactor.delete(vegetable_id)
    if affected == 0:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
