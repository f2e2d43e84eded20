"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION_ENVS = ("production", "prod")


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    The response cache is only active when ENV is a production value and
    REDIS_URL is set; every other combination runs without Redis.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App settings
    app_name: str = "CRM API"
    api_prefix: str = "/api"
    debug: bool = Field(default=False)
    env: str = Field(default="development", validation_alias="ENV")

    # Database
    database_url: str = Field(default="sqlite:///crm.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # CORS
    cors_allowed_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ALLOWED_ORIGINS")

    # Redis
    redis_url: str = Field(default="", validation_alias="REDIS_URL")
    cache_response_ttl: int = Field(default=300, gt=0, validation_alias="CACHE_RESPONSE_TTL")
    cache_default_ttl: int = Field(default=3600, gt=0, validation_alias="CACHE_DEFAULT_TTL")

    @property
    def is_production(self) -> bool:
        return self.env.lower() in PRODUCTION_ENVS

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings", "PRODUCTION_ENVS"]
