# src/app/routers/favourites.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.app.deps import get_favourites_service
from src.app.domain.errors import (
    FatalUpstreamError,
    FavouriteAlreadyExistsError,
    FavouriteNotFoundError,
    FavouritesRepositoryError,
    TransientUpstreamError,
)
from src.app.schemas.favourites import (
    FavouriteRequest,
    FavouriteResponse,
    FavouritesListResponse,
)
from src.app.services.favourites_service import FavouritesService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favourites", tags=["favourites"])

RECIPE_ID_REQUIRED = "Recipe ID is required"


def _require_recipe_id(payload: FavouriteRequest | None) -> int:
    if payload is None or not payload.recipeId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=RECIPE_ID_REQUIRED)
    return payload.recipeId


@router.get("", response_model=FavouritesListResponse)
async def list_favourites(
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouritesListResponse:
    try:
        result = await service.list_favourites()
    except FavouritesRepositoryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    except TransientUpstreamError as exc:
        logger.error("Favourites unavailable, upstream unreachable: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc))
    except FatalUpstreamError as exc:
        logger.error("Favourites unavailable, upstream failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    return FavouritesListResponse(results=result.items, message=result.message)


@router.post("", response_model=FavouriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favourite(
    payload: FavouriteRequest | None = None,
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouriteResponse:
    recipe_id = _require_recipe_id(payload)
    try:
        record = service.add_favourite(recipe_id)
    except FavouriteAlreadyExistsError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except FavouritesRepositoryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return FavouriteResponse(
        id=record.id,
        recipeId=record.recipe_id,
        createdAt=record.created_at.isoformat() if record.created_at else None,
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favourite(
    payload: FavouriteRequest | None = None,
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    recipe_id = _require_recipe_id(payload)
    try:
        service.remove_favourite(recipe_id)
    except FavouriteNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except FavouritesRepositoryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
