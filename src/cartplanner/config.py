"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CARTPLANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database (shopping-list store)
    database_url: str = "postgresql://localhost/cartplanner"
    sql_echo: bool = False

    # Pipeline
    parse_workers: int = Field(default=1, ge=1, le=64)  # >1 fans parsing out to threads
    fallback_decimal_places: int = Field(default=1, ge=0, le=4)

    # Store writes: first attempt + one retry after a uniqueness conflict
    insert_retry_attempts: int = Field(default=2, ge=1, le=5)

    # Application
    environment: str = "development"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
