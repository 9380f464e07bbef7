# src/app/infra/db/base.py
"""
Abstract base class for the favourites store.
This interface allows easy swapping between different persistence backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from src.app.domain.models import FavouriteRecord


class FavouritesRepository(ABC):
    """
    Abstract interface for persisted favourite recipes.

    Implementations:
    - SupabaseFavouritesRepository: Postgres table via Supabase
    """

    @abstractmethod
    def create(self, recipe_id: int) -> FavouriteRecord:
        """
        Persist a new favourite.

        Args:
            recipe_id: Upstream recipe id

        Returns:
            The created FavouriteRecord

        Raises:
            FavouriteAlreadyExistsError: If the recipe is already a favourite
        """
        pass

    @abstractmethod
    def list_recipe_ids(self) -> list[int]:
        """
        List every favourite recipe id, oldest first.

        Returns:
            Recipe ids
        """
        pass

    @abstractmethod
    def delete(self, recipe_id: int) -> None:
        """
        Remove a favourite.

        Args:
            recipe_id: Upstream recipe id

        Raises:
            FavouriteNotFoundError: If the recipe is not a favourite
        """
        pass
