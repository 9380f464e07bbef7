# src/app/routers/recipes.py
"""
Recipe search and detail routes, proxied to the recipe API.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.app.deps import get_recipe_client
from src.app.domain.errors import (
    FatalUpstreamError,
    QuotaExceededError,
    TransientUpstreamError,
    UpstreamError,
)
from src.app.services.recipe_api import RecipeApiClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _upstream_http_error(exc: UpstreamError) -> HTTPException:
    if isinstance(exc, QuotaExceededError):
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Recipe API daily limit reached. Please try again later.",
        )
    if isinstance(exc, TransientUpstreamError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, FatalUpstreamError) and exc.status_code == status.HTTP_404_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/search")
async def search_recipes(
    query: Optional[str] = Query(default=None),
    cuisine: Optional[str] = Query(default=None),
    diet: Optional[str] = Query(default=None),
    intolerances: Optional[str] = Query(default=None),
    max_ready_time: Optional[int] = Query(default=None, alias="maxReadyTime", ge=1),
    number: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0, le=900),
    client: RecipeApiClient = Depends(get_recipe_client),
) -> dict[str, Any]:
    try:
        return await client.search_recipes(
            query,
            cuisine=cuisine,
            diet=diet,
            intolerances=intolerances,
            max_ready_time=max_ready_time,
            number=number,
            offset=offset,
        )
    except UpstreamError as exc:
        logger.warning("Recipe search failed: %s", exc)
        raise _upstream_http_error(exc)


@router.get("/random")
async def random_recipes(
    number: int = Query(default=10, ge=1, le=100),
    tags: Optional[str] = Query(default=None, description="Comma-separated tags"),
    client: RecipeApiClient = Depends(get_recipe_client),
) -> dict[str, Any]:
    tag_list = [tag.strip() for tag in tags.split(",") if tag.strip()] if tags else None
    try:
        return await client.get_random_recipes(number=number, tags=tag_list)
    except UpstreamError as exc:
        logger.warning("Random recipes failed: %s", exc)
        raise _upstream_http_error(exc)


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: int,
    client: RecipeApiClient = Depends(get_recipe_client),
) -> dict[str, Any]:
    try:
        return await client.get_recipe_information(recipe_id)
    except UpstreamError as exc:
        logger.warning("Recipe %d lookup failed: %s", recipe_id, exc)
        raise _upstream_http_error(exc)
