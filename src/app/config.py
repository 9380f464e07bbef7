from __future__ import annotations

from typing import Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"

    # Comma-separated, highest priority first
    SPOONACULAR_API_KEYS: str = ""
    SPOONACULAR_API_KEY: str = ""
    SPOONACULAR_BASE_URL: str = "https://api.spoonacular.com"
    RECIPE_CACHE_TTL_SECONDS: int = Field(default=3600, ge=1)
    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)

    REDIS_URL: Optional[str] = None

    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    FAVOURITES_TABLE: str = "favourite_recipes"

    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def spoonacular_api_keys(self) -> list[str]:
        keys = [key.strip() for key in self.SPOONACULAR_API_KEYS.split(",") if key.strip()]
        single = self.SPOONACULAR_API_KEY.strip()
        if single and single not in keys:
            keys.append(single)
        return keys


settings = Settings()
