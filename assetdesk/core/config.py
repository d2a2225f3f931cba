from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "AssetDesk"
    ENV: str = "dev"
    DATABASE_URL: str | None = None

    # Entity store back-end: "sql" for the transactional database, "memory" for tests/demos
    STORE_BACKEND: str = "sql"

    # Pattern given to newly registered companies; the run of '#' is the counter slot
    DEFAULT_ASSET_ID_PATTERN: str = "A-####"

    ACTIVITY_FEED_LIMIT: int = 10
    DASHBOARD_RECENT_ACTIVITY: int = 5

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"
    AUDIT_LOG_FILE: str = "storage/audit.log"

    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    @field_validator("STORE_BACKEND", mode="before")
    @classmethod
    def normalise_store_backend(cls, v):
        if v is None:
            return "sql"
        value = str(v).strip().lower()
        if value not in {"sql", "memory"}:
            raise ValueError(f"Unsupported STORE_BACKEND '{v}' (expected 'sql' or 'memory')")
        return value

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        # Convert Heroku's postgres:// URL to postgresql://
        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        if self.ENV.lower() == "prod":
            if not self.DATABASE_URL:
                raise ValueError("Missing required production settings: DATABASE_URL")
            if self.STORE_BACKEND != "sql":
                raise ValueError("The in-memory store cannot be used in production")
        return self


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./storage/dev.db"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite:///:memory:"
    AUDIT_LOG_FILE: str = "storage/test_audit.log"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
