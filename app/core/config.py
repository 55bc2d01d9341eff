from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Tank Telemetry Backend"
    environment: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./tanks.db"
    log_level: str = "INFO"
    reading_retention_days: int = Field(default=90, gt=0)

    model_config = SettingsConfigDict(env_prefix="TANKS_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
