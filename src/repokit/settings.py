"""
repokit.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for engine construction and logging.
- Carry the explicit dialect override handed to repositories.
- Offer a cached settings instance for application wiring.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `REPOKIT_`).

    Defaults target a local SQLite file through aiosqlite.
    """

    model_config = SettingsConfigDict(env_prefix="REPOKIT_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "repokit"
    log_level: str = "INFO"

    # Persistence
    database_url: str = Field(default="sqlite+aiosqlite:///./repokit.db", repr=False)
    echo_sql: bool = False

    # When set, repositories use this instead of the engine's reported dialect name.
    dialect: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `database_url` is hidden from repr because it commonly embeds credentials.
