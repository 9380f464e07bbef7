# src/app/deps.py (builds the shared services and exposes them as dependencies)

from __future__ import annotations

import logging

import httpx
from fastapi import Depends, Request
from supabase import Client, create_client

from src.app.config import Settings, settings
from src.app.infra.cache.base import ResponseCache
from src.app.infra.cache.memory_cache import InMemoryResponseCache
from src.app.infra.cache.redis_cache import RedisResponseCache
from src.app.infra.db.base import FavouritesRepository
from src.app.infra.db.supabase_favourites_repo import SupabaseFavouritesRepository
from src.app.services.favourites_service import FavouritesResolver, FavouritesService
from src.app.services.key_rotator import KeyRotator
from src.app.services.recipe_api import RecipeApiClient

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        if settings.SUPABASE_URL is None or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def build_response_cache(config: Settings) -> ResponseCache:
    if config.REDIS_URL:
        logger.info("Using Redis response cache")
        return RedisResponseCache.from_url(config.REDIS_URL)
    logger.info("Using in-memory response cache")
    return InMemoryResponseCache()


def build_recipe_client(config: Settings, http_client: httpx.AsyncClient) -> RecipeApiClient:
    keys = config.spoonacular_api_keys
    logger.info("Recipe API configured with %d key(s)", len(keys))
    return RecipeApiClient(
        http_client=http_client,
        rotator=KeyRotator(keys),
        cache=build_response_cache(config),
        base_url=config.SPOONACULAR_BASE_URL,
        cache_ttl_seconds=config.RECIPE_CACHE_TTL_SECONDS,
    )


def get_recipe_client(request: Request) -> RecipeApiClient:
    return request.app.state.recipe_client


def get_favourites_repository(supa: Client = Depends(get_supabase)) -> FavouritesRepository:
    return SupabaseFavouritesRepository(supa, table_name=settings.FAVOURITES_TABLE)


def get_favourites_resolver(
    client: RecipeApiClient = Depends(get_recipe_client),
) -> FavouritesResolver:
    return FavouritesResolver(client)


def get_favourites_service(
    repository: FavouritesRepository = Depends(get_favourites_repository),
    resolver: FavouritesResolver = Depends(get_favourites_resolver),
) -> FavouritesService:
    return FavouritesService(repository, resolver)
