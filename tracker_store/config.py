"""
Configuration settings for the tracker store.

Uses Pydantic Settings to load environment variables for database connections,
logging, batching, and the rating-eligibility constants.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Start of the first AtCoder Grand Contest; older contests are never rated.
FIRST_AGC_EPOCH_SECOND = 1_468_670_400
# `rate_change` value of contests that never affect rating.
UNRATED_STATE = "-"


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("tracker", alias="DB_NAME")
    pool_min_size: int = Field(1, alias="POOL_MIN_SIZE")
    pool_max_size: int = Field(10, alias="POOL_MAX_SIZE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Store
    batch_size: int = Field(1_000, alias="STORE_BATCH_SIZE", gt=0)
    first_agc_epoch_second: int = Field(FIRST_AGC_EPOCH_SECOND, alias="FIRST_AGC_EPOCH_SECOND")
    unrated_state: str = Field(UNRATED_STATE, alias="UNRATED_STATE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a PostgreSQL DSN from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


__all__ = [
    "FIRST_AGC_EPOCH_SECOND",
    "UNRATED_STATE",
    "Settings",
    "build_dsn",
    "get_settings",
]
