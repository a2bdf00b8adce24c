from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list(name: str, default: str) -> list[str]:
    value = _env(name, default) or ""
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str
    access_token_secret: str
    refresh_token_secret: str
    access_token_ttl_minutes: int
    refresh_token_ttl_days: int
    cookie_secure: bool
    strict_refresh_rotation: bool
    cors_origins: list[str]
    media_storage_url: str
    media_storage_api_key: str
    media_storage_timeout_seconds: float
    log_level: str


def get_settings() -> Settings:
    return Settings(
        database_url=_env("DATABASE_URL", ""),
        access_token_secret=_env("ACCESS_TOKEN_SECRET", ""),
        refresh_token_secret=_env("REFRESH_TOKEN_SECRET", ""),
        access_token_ttl_minutes=int(_env("ACCESS_TOKEN_TTL_MINUTES", "15")),
        refresh_token_ttl_days=int(_env("REFRESH_TOKEN_TTL_DAYS", "10")),
        cookie_secure=_bool("COOKIE_SECURE", True),
        strict_refresh_rotation=_bool("AUTH_STRICT_REFRESH_ROTATION", False),
        cors_origins=_list("CORS_ORIGIN", "*"),
        media_storage_url=_env("MEDIA_STORAGE_URL", ""),
        media_storage_api_key=_env("MEDIA_STORAGE_API_KEY", ""),
        media_storage_timeout_seconds=float(_env("MEDIA_STORAGE_TIMEOUT_SECONDS", "30")),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
