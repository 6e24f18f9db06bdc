"""
gamesroom_persistence.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the persistence layer.
- Offer a cached settings instance for callers that do not inject their own.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GAMESROOM_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "gamesroom-persistence"
    log_level: str = "INFO"

    # Persistence
    database_url: str = Field(default="sqlite+aiosqlite:///./gamesroom.db", repr=False)

    # Audit stamps are recorded in the game room's local time.
    timezone: str = "America/Los_Angeles"
    default_actor: str = "system"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The database URL is hidden from repr because it may embed credentials.
