# src/app/services/favourites_service.py
"""
Favourites management service.
Stores favourite recipe ids and resolves them into displayable records.
"""
from __future__ import annotations

import logging
from typing import Iterable

from src.app.domain.errors import QuotaExceededError
from src.app.domain.models import DegradedRecord, FavouriteRecord, FavouritesResult
from src.app.infra.db.base import FavouritesRepository
from src.app.services.recipe_api import RecipeApiClient

logger = logging.getLogger(__name__)

QUOTA_NOTICE = (
    "Your favourites are saved, but recipe details are temporarily unavailable "
    "due to API daily limit. They will appear once the limit resets."
)


def _unique_ids(recipe_ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(int(recipe_id) for recipe_id in recipe_ids))


def _recipe_id_of(recipe: dict) -> int | None:
    try:
        return int(recipe["id"])
    except (KeyError, TypeError, ValueError):
        return None


class FavouritesResolver:
    """
    Turns stored favourite ids into recipe details.

    Quota exhaustion is the one failure converted into a successful,
    degraded result; every other upstream error propagates.
    """

    def __init__(self, client: RecipeApiClient):
        self._client = client

    async def resolve(self, recipe_ids: Iterable[int]) -> FavouritesResult:
        """
        Resolve favourite ids in the order given.

        Args:
            recipe_ids: Stored favourite ids; duplicates are collapsed

        Returns:
            FavouritesResult with one item per distinct id

        Raises:
            TransientUpstreamError: Upstream unreachable
            FatalUpstreamError: Upstream rejected the request
        """
        ids = _unique_ids(recipe_ids)
        if not ids:
            return FavouritesResult()

        try:
            recipes = await self._client.get_recipes_bulk(ids)
        except QuotaExceededError as error:
            logger.warning(
                "Recipe API quota exhausted; returning %d degraded favourites: %s",
                len(ids),
                error,
            )
            return FavouritesResult(
                items=[DegradedRecord.for_quota(recipe_id).to_dict() for recipe_id in ids],
                message=QUOTA_NOTICE,
                degraded=True,
            )

        by_id = {}
        for recipe in recipes:
            recipe_id = _recipe_id_of(recipe) if isinstance(recipe, dict) else None
            if recipe_id is not None:
                by_id[recipe_id] = recipe

        items = []
        for recipe_id in ids:
            recipe = by_id.get(recipe_id)
            if recipe is None:
                logger.warning("Recipe API returned no details for favourite %d", recipe_id)
                items.append(DegradedRecord.for_missing(recipe_id).to_dict())
            else:
                items.append(recipe)
        return FavouritesResult(items=items)


class FavouritesService:
    def __init__(self, repository: FavouritesRepository, resolver: FavouritesResolver):
        self._repo = repository
        self._resolver = resolver

    def add_favourite(self, recipe_id: int) -> FavouriteRecord:
        record = self._repo.create(recipe_id)
        logger.info("Favourite added: recipe_id=%s", recipe_id)
        return record

    def remove_favourite(self, recipe_id: int) -> None:
        self._repo.delete(recipe_id)
        logger.info("Favourite removed: recipe_id=%s", recipe_id)

    async def list_favourites(self) -> FavouritesResult:
        recipe_ids = self._repo.list_recipe_ids()
        return await self._resolver.resolve(recipe_ids)
