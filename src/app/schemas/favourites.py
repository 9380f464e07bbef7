from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class FavouriteRequest(BaseModel):
    # Optional so a missing id maps to 400 rather than 422
    recipeId: Optional[int] = None


class FavouriteResponse(BaseModel):
    id: Optional[int] = None
    recipeId: int
    createdAt: Optional[str] = None


class FavouritesListResponse(BaseModel):
    results: list[dict[str, Any]] = Field(default_factory=list)
    message: Optional[str] = None
