# src/app/services/recipe_api.py
"""
Client for the upstream recipe API (Spoonacular).
Cache-checked GETs with key rotation and explicit failure classification.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode

import httpx

from src.app.domain.errors import (
    FatalUpstreamError,
    QuotaExceededError,
    TransientUpstreamError,
)
from src.app.domain.models import Credential
from src.app.infra.cache.base import ResponseCache
from src.app.services.key_rotator import KeyRotator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.spoonacular.com"
DEFAULT_CACHE_TTL_SECONDS = 3600
API_KEY_HEADER = "x-api-key"

QUOTA_STATUS_CODE = 402
# Only consulted on non-2xx responses whose status code is not 402.
QUOTA_BODY_MARKERS = ("points limit", "daily limit")

BULK_INFORMATION_ENDPOINT = "/recipes/informationBulk"
SEARCH_ENDPOINT = "/recipes/complexSearch"
RANDOM_ENDPOINT = "/recipes/random"

# One retry after a quota response, with the next key.
MAX_ATTEMPTS = 2


def _normalize_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(str(item) for item in value)
    return str(value)


def normalize_params(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    if not params:
        return {}
    return {
        name: _normalize_value(value)
        for name, value in sorted(params.items())
        if value is not None
    }


def make_cache_key(endpoint: str, params: Optional[Mapping[str, Any]]) -> str:
    query = urlencode(normalize_params(params))
    return f"{endpoint}?{query}" if query else endpoint


def _is_quota_response(response: httpx.Response) -> bool:
    if response.status_code == QUOTA_STATUS_CODE:
        return True
    if response.is_success:
        return False
    body = response.text.lower()
    return any(marker in body for marker in QUOTA_BODY_MARKERS)


class RecipeApiClient:
    """
    Issues requests to the recipe API.

    Every call goes through the response cache first. On a miss the key
    rotator supplies a credential; a quota response retires that credential
    and the call is retried once with the next one.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        rotator: KeyRotator,
        cache: ResponseCache,
        base_url: str = DEFAULT_BASE_URL,
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    ):
        self._http = http_client
        self._rotator = rotator
        self._cache = cache
        self.base_url = base_url.rstrip("/")
        self.cache_ttl_seconds = cache_ttl_seconds

    @property
    def rotator(self) -> KeyRotator:
        return self._rotator

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def fetch(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        GET an endpoint and return its decoded JSON body.

        Raises:
            QuotaExceededError: Every attempted credential hit its quota
            NoCredentialsAvailableError: All credentials were already exhausted
            TransientUpstreamError: Network error, timeout or redirect loop
            FatalUpstreamError: Any other non-2xx, or a body that cannot be decoded
        """
        cache_key = make_cache_key(endpoint, params)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Recipe API cache hit: %s", cache_key)
            return cached

        query = normalize_params(params)
        last_error: Optional[QuotaExceededError] = None

        for _ in range(MAX_ATTEMPTS):
            credential = self._rotator.select_credential()
            response = await self._send(endpoint, query, credential)

            if _is_quota_response(response):
                self._rotator.mark_exhausted(credential)
                last_error = QuotaExceededError(credential_label=credential.label)
                continue

            if not response.is_success:
                logger.error(
                    "Recipe API error: endpoint=%s, status=%d, key=%s",
                    endpoint,
                    response.status_code,
                    credential.label,
                )
                raise FatalUpstreamError(endpoint, response.status_code, response.text)

            payload = self._decode(endpoint, response)
            self._rotator.mark_ok(credential)
            await self._cache.set(cache_key, payload, self.cache_ttl_seconds)
            return payload

        raise last_error or QuotaExceededError()

    async def _send(self, endpoint: str, query: dict[str, str], credential: Credential) -> httpx.Response:
        url = f"{self.base_url}{endpoint}"
        try:
            return await self._http.get(url, params=query, headers={API_KEY_HEADER: credential.key})
        except httpx.TimeoutException as error:
            raise TransientUpstreamError(endpoint, f"timeout: {error}") from error
        except httpx.DecodingError as error:
            raise FatalUpstreamError(endpoint, None, str(error)) from error
        except httpx.RequestError as error:
            raise TransientUpstreamError(endpoint, str(error) or type(error).__name__) from error

    def _decode(self, endpoint: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as error:
            raise FatalUpstreamError(endpoint, response.status_code, response.text) from error

    async def get_recipes_bulk(self, recipe_ids: Iterable[int]) -> list[dict[str, Any]]:
        ids = [int(recipe_id) for recipe_id in recipe_ids]
        if not ids:
            return []
        payload = await self.fetch(BULK_INFORMATION_ENDPOINT, {"ids": ids, "includeNutrition": False})
        if not isinstance(payload, list):
            raise FatalUpstreamError(BULK_INFORMATION_ENDPOINT, 200, "Expected a JSON array")
        return payload

    async def get_recipe_information(self, recipe_id: int) -> dict[str, Any]:
        return await self.fetch(f"/recipes/{int(recipe_id)}/information", {"includeNutrition": False})

    async def search_recipes(
        self,
        query: Optional[str] = None,
        *,
        cuisine: Optional[str] = None,
        diet: Optional[str] = None,
        intolerances: Optional[str] = None,
        max_ready_time: Optional[int] = None,
        number: int = 10,
        offset: int = 0,
    ) -> dict[str, Any]:
        params = {
            "query": query or None,
            "cuisine": cuisine or None,
            "diet": diet or None,
            "intolerances": intolerances or None,
            "maxReadyTime": max_ready_time,
            "number": number,
            "offset": offset,
            "addRecipeInformation": True,
        }
        return await self.fetch(SEARCH_ENDPOINT, params)

    async def get_random_recipes(self, number: int = 10, tags: Optional[list[str]] = None) -> dict[str, Any]:
        return await self.fetch(RANDOM_ENDPOINT, {"number": number, "include-tags": tags or None})
