from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from src.app.domain.errors import (
    FavouriteAlreadyExistsError,
    FavouriteNotFoundError,
    FavouritesRepositoryError,
)
from src.app.infra.db.supabase_favourites_repo import SupabaseFavouritesRepository


def _api_error(code: str, message: str = "error") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def _make_repo() -> tuple[SupabaseFavouritesRepository, MagicMock]:
    client = MagicMock()
    return SupabaseFavouritesRepository(client, table_name="favourite_recipes"), client


class TestSupabaseFavouritesRepositoryConstruction:
    def test_client_must_be_injected(self) -> None:
        with pytest.raises(TypeError):
            SupabaseFavouritesRepository()  # type: ignore[call-arg]

    def test_default_table_name(self) -> None:
        repo = SupabaseFavouritesRepository(MagicMock())

        assert repo.table_name == "favourite_recipes"


class TestSupabaseFavouritesRepositoryCreate:
    def test_create_returns_record(self) -> None:
        repo, client = _make_repo()
        client.table.return_value.insert.return_value.execute.return_value.data = [
            {"id": 1, "recipe_id": 101, "created_at": "2024-01-15T10:00:00Z"}
        ]

        record = repo.create(101)

        client.table.assert_called_with("favourite_recipes")
        client.table.return_value.insert.assert_called_once_with({"recipe_id": 101})
        assert record.recipe_id == 101
        assert record.id == 1
        assert isinstance(record.created_at, datetime)

    def test_unique_violation_maps_to_already_exists(self) -> None:
        repo, client = _make_repo()
        client.table.return_value.insert.return_value.execute.side_effect = _api_error(
            "23505", "duplicate key value violates unique constraint"
        )

        with pytest.raises(FavouriteAlreadyExistsError) as exc_info:
            repo.create(101)

        assert exc_info.value.recipe_id == 101

    def test_other_api_error_maps_to_repository_error(self) -> None:
        repo, client = _make_repo()
        client.table.return_value.insert.return_value.execute.side_effect = _api_error("42P01", "relation missing")

        with pytest.raises(FavouritesRepositoryError):
            repo.create(101)

    def test_network_error_maps_to_repository_error(self) -> None:
        repo, client = _make_repo()
        client.table.return_value.insert.return_value.execute.side_effect = ConnectionError("refused")

        with pytest.raises(FavouritesRepositoryError) as exc_info:
            repo.create(101)

        assert exc_info.value.operation == "create"

    def test_httpx_transport_error_maps_to_repository_error(self) -> None:
        repo, client = _make_repo()
        client.table.return_value.insert.return_value.execute.side_effect = httpx.ConnectError("refused")

        with pytest.raises(FavouritesRepositoryError) as exc_info:
            repo.create(101)

        assert exc_info.value.operation == "create"


class TestSupabaseFavouritesRepositoryList:
    def test_list_returns_ids_in_row_order(self) -> None:
        repo, client = _make_repo()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.return_value.data = [{"recipe_id": 102}, {"recipe_id": "101"}]

        assert repo.list_recipe_ids() == [102, 101]
        client.table.return_value.select.return_value.order.assert_called_once_with("created_at")

    def test_list_empty(self) -> None:
        repo, client = _make_repo()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.return_value.data = None

        assert repo.list_recipe_ids() == []

    def test_list_transport_error_maps_to_repository_error(self) -> None:
        repo, client = _make_repo()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.side_effect = httpx.RemoteProtocolError("server disconnected")

        with pytest.raises(FavouritesRepositoryError) as exc_info:
            repo.list_recipe_ids()

        assert exc_info.value.operation == "list"


class TestSupabaseFavouritesRepositoryDelete:
    def test_delete_existing(self) -> None:
        repo, client = _make_repo()
        query = client.table.return_value.delete.return_value.eq.return_value
        query.execute.return_value.data = [{"id": 1, "recipe_id": 101}]

        repo.delete(101)

        client.table.return_value.delete.return_value.eq.assert_called_once_with("recipe_id", 101)

    def test_delete_missing_raises_not_found(self) -> None:
        repo, client = _make_repo()
        query = client.table.return_value.delete.return_value.eq.return_value
        query.execute.return_value.data = []

        with pytest.raises(FavouriteNotFoundError):
            repo.delete(999)

    def test_delete_read_timeout_maps_to_repository_error(self) -> None:
        repo, client = _make_repo()
        query = client.table.return_value.delete.return_value.eq.return_value
        query.execute.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(FavouritesRepositoryError) as exc_info:
            repo.delete(101)

        assert exc_info.value.operation == "delete"
