# gateway/core/config.py
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parents[2]

DEFAULT_DB_MAX_CONNS = 10

LIBPQ_SCHEMES = ("postgres://", "postgresql://")
ASYNC_PG_SCHEME = "postgresql+asyncpg://"


class Settings(BaseSettings):
    debug: bool = Field(False, alias="DEBUG")

    # HTTP
    api_address: str = Field("0.0.0.0", alias="API_ADDRESS")
    api_port: int = Field(8080, alias="API_PORT")
    allowed_origins: str = Field("", alias="ALLOWED_ORIGINS")

    # cookies
    session_cookie_name: str = Field("session_id", alias="SESSION_COOKIE_NAME")

    # session store
    database_url: str = Field(..., alias="DATABASE_URL")
    database_max_connections: int = Field(DEFAULT_DB_MAX_CONNS, alias="DATABASE_MAX_CONNECTIONS")

    # refresh authority
    next_refresh_url: str = Field(..., alias="NEXT_REFRESH_URL")
    refresh_timeout_seconds: float = Field(5.0, alias="REFRESH_TIMEOUT_SECONDS")
    refresh_window_minutes: int = Field(15, alias="REFRESH_WINDOW_MINUTES")

    # logs
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_style: str = Field("text", alias="LOG_STYLE")

    model_config = SettingsConfigDict(
        env_file=ROOT_DIR / ".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("database_max_connections", mode="before")
    @classmethod
    def _max_conns_fallback(cls, v):
        # unset / garbage -> default pool size
        try:
            n = int(v)
        except (TypeError, ValueError):
            return DEFAULT_DB_MAX_CONNS
        return n if n > 0 else DEFAULT_DB_MAX_CONNS

    @field_validator("log_style", mode="before")
    @classmethod
    def _log_style(cls, v):
        v = (v or "text").strip().lower()
        return v if v in ("text", "json") else "text"

    @property
    def allowed_origins_list(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL rewritten for an async SQLAlchemy driver.

        `postgres://` / `postgresql://` (libpq-style, as shared with the
        frontend) become `postgresql+asyncpg://`; anything else, including
        URLs that already name a driver, is returned untouched.
        """
        raw = self.database_url
        for scheme in LIBPQ_SCHEMES:
            if raw.startswith(scheme):
                return ASYNC_PG_SCHEME + raw[len(scheme):]
        return raw


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
