from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Central configuration.

    - Values loaded from environment / `.env`
    - Comma-separated lists for multi-value settings like CORS_ORIGINS
    """

    # ----------------------------
    # Service
    # ----------------------------
    SERVICE_NAME: str = "zhelper"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ----------------------------
    # Database
    # ----------------------------
    database_url: str = "sqlite+aiosqlite:///./zhelper.db"
    db_echo: bool = False

    # ----------------------------
    # CORS
    # ----------------------------
    # store as raw string list from env; we will normalize in code
    CORS_ORIGINS: Any = Field(default_factory=list)

    # ----------------------------
    # JWT
    # ----------------------------
    jwt_alg: str = "HS256"
    jwt_secret: str = "change-me"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None
    access_token_expire_minutes: int = 60 * 24

    # ----------------------------
    # Paging
    # ----------------------------
    default_page_size: int = 20
    max_page_size: int = Field(default=200, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def cors_origins(self) -> list[str]:
        raw_origins = self.CORS_ORIGINS
        if isinstance(raw_origins, str):
            return [o.strip() for o in raw_origins.split(",") if o.strip()]
        if isinstance(raw_origins, (list, tuple, set)):
            return list(raw_origins)
        return []


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
