from __future__ import annotations

import logging
from datetime import datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from src.app.domain.errors import (
    FavouriteAlreadyExistsError,
    FavouriteNotFoundError,
    FavouritesRepositoryError,
)
from src.app.domain.models import FavouriteRecord
from src.app.infra.db.base import FavouritesRepository

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_CODE = "23505"


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _row_to_record(row: dict[str, str | int | None]) -> FavouriteRecord:
    return FavouriteRecord(
        recipe_id=int(row["recipe_id"]),
        id=int(row["id"]) if row.get("id") is not None else None,
        created_at=_parse_datetime(row.get("created_at")),
    )


class SupabaseFavouritesRepository(FavouritesRepository):
    TABLE_NAME = "favourite_recipes"

    def __init__(self, client: Client, table_name: str | None = None):
        self._client = client
        self.table_name = table_name or self.TABLE_NAME

    def create(self, recipe_id: int) -> FavouriteRecord:
        try:
            result = self._client.table(self.table_name).insert({"recipe_id": int(recipe_id)}).execute()
        except APIError as error:
            if error.code == UNIQUE_VIOLATION_CODE:
                raise FavouriteAlreadyExistsError(recipe_id) from error
            logger.error("Supabase error creating favourite %s: %s", recipe_id, error.message)
            raise FavouritesRepositoryError("create", str(error.message)) from error
        except (ConnectionError, TimeoutError, httpx.RequestError) as error:
            logger.error("Network error creating favourite: %s", error)
            raise FavouritesRepositoryError("create", str(error)) from error

        if not result.data:
            raise FavouritesRepositoryError("create", "insert returned no rows")
        return _row_to_record(result.data[0])

    def list_recipe_ids(self) -> list[int]:
        try:
            result = (
                self._client.table(self.table_name)
                .select("recipe_id")
                .order("created_at")
                .execute()
            )
        except APIError as error:
            logger.error("Supabase error listing favourites: %s", error.message)
            raise FavouritesRepositoryError("list", str(error.message)) from error
        except (ConnectionError, TimeoutError, httpx.RequestError) as error:
            logger.error("Network error listing favourites: %s", error)
            raise FavouritesRepositoryError("list", str(error)) from error

        return [int(row["recipe_id"]) for row in result.data or [] if row.get("recipe_id") is not None]

    def delete(self, recipe_id: int) -> None:
        try:
            result = (
                self._client.table(self.table_name)
                .delete()
                .eq("recipe_id", int(recipe_id))
                .execute()
            )
        except APIError as error:
            logger.error("Supabase error deleting favourite %s: %s", recipe_id, error.message)
            raise FavouritesRepositoryError("delete", str(error.message)) from error
        except (ConnectionError, TimeoutError, httpx.RequestError) as error:
            logger.error("Network error deleting favourite: %s", error)
            raise FavouritesRepositoryError("delete", str(error)) from error

        if not result.data:
            raise FavouriteNotFoundError(recipe_id)
