from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Sensor Log"
    environment: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./data/data.db"
    sqlite_journal_mode: Literal["DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"] = "WAL"
    sqlite_busy_timeout_ms: int = 5000
    default_page_size: int = 50
    overview_rows_per_channel: int = 20
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SENSORLOG_", env_file=".env", extra="ignore")

    @field_validator("log_level", "sqlite_journal_mode", mode="before")
    @classmethod
    def _normalize_upper(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return str(value).strip().upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
