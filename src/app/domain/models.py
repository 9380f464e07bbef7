# src/app/domain/models.py
"""
Domain models for recipe data access and favourites.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class CredentialState(str, Enum):
    """Quota state of an upstream API key."""
    UNKNOWN = "unknown"
    OK = "ok"
    EXHAUSTED = "exhausted"


@dataclass
class Credential:
    """An upstream recipe API key in the rotation order."""
    label: str
    key: str = field(repr=False)
    state: CredentialState = CredentialState.UNKNOWN

    @property
    def is_exhausted(self) -> bool:
        return self.state is CredentialState.EXHAUSTED


@dataclass
class CacheEntry:
    """A cached upstream payload with its expiry information."""
    value: Any
    stored_at: float  # clock seconds
    ttl_seconds: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at >= self.ttl_seconds


@dataclass
class FavouriteRecord:
    """A persisted favourite. The set of recipe ids is the source of truth."""
    recipe_id: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None


DEGRADED_TITLE_TEMPLATE = "Recipe #{recipe_id} (Details unavailable - API limit reached)"
MISSING_TITLE_TEMPLATE = "Recipe #{recipe_id} (Details not found)"


@dataclass(frozen=True)
class DegradedRecord:
    """Placeholder returned when full recipe details cannot be fetched."""
    id: int
    title: str
    api_unavailable: bool = True

    @classmethod
    def for_quota(cls, recipe_id: int) -> "DegradedRecord":
        return cls(id=recipe_id, title=DEGRADED_TITLE_TEMPLATE.format(recipe_id=recipe_id))

    @classmethod
    def for_missing(cls, recipe_id: int) -> "DegradedRecord":
        return cls(id=recipe_id, title=MISSING_TITLE_TEMPLATE.format(recipe_id=recipe_id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "image": None,
            "apiUnavailable": self.api_unavailable,
        }


@dataclass
class FavouritesResult:
    """Favourites resolved for display, in the order they were requested."""
    items: list[dict[str, Any]] = field(default_factory=list)
    message: Optional[str] = None
    degraded: bool = False

    def __len__(self) -> int:
        return len(self.items)
