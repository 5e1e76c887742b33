from functools import lru_cache
from typing import Literal

from pydantic import ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_DEV_SECRET_KEY = "cookie-card-dev-secret-change-in-prod"
INSECURE_DEV_ENCRYPTION_KEY = "uZr6e4waGdI6B6xzUA8WpoJKzN-Eq9iUumBwJbLfhz0="


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # =========================
    # Environment
    # =========================
    environment: Literal["development", "test", "staging", "production"] = "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    # =========================
    # API
    # =========================
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # Database
    # =========================
    database_url: str = "sqlite:///./cookiecard.db"

    # =========================
    # Security
    # =========================
    secret_key: str = INSECURE_DEV_SECRET_KEY
    encryption_key: str = INSECURE_DEV_ENCRYPTION_KEY
    jwt_algorithm: str = "HS256"
    session_cookie_name: str = "session"
    session_max_age_seconds: int = 24 * 60 * 60

    # =========================
    # Notion
    # =========================
    notion_client_id: str = ""
    notion_client_secret: str = ""
    notion_redirect_uri: str = "http://localhost:3000/auth/notion/callback"
    notion_api_base_url: str = "https://api.notion.com/v1"
    notion_version: str = "2025-09-03"
    notion_timeout_seconds: float = 10.0
    notion_page_size: int = 100
    # Only the first result page of each data source is read unless enabled.
    notion_follow_pagination: bool = False
    notion_max_pages: int = 10
    notion_query_endpoint: Literal["data_sources", "databases"] = "data_sources"
    log_notion_requests: bool = False

    # =========================
    # Widgets
    # =========================
    default_property_name: str = "WidgetValue"
    embed_refresh_seconds: int = 300

    # ============================================================
    # Validators
    # ============================================================

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_postgres_urls(cls, value: str | None) -> str | None:
        if value and value.startswith(("postgres://", "postgresql://")):
            return value.replace("postgres://", "postgresql+psycopg://", 1).replace(
                "postgresql://", "postgresql+psycopg://", 1
            )
        return value

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: str, info: ValidationInfo) -> str:
        env = info.data.get("environment")
        if env == "production" and (value == INSECURE_DEV_SECRET_KEY or len(value) < 32):
            raise ValueError("SECRET_KEY must be strong and at least 32 chars in production")
        return value

    @field_validator("encryption_key")
    @classmethod
    def validate_encryption_key(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise ValueError("ENCRYPTION_KEY must be configured")
        env = info.data.get("environment")
        if env == "production" and value == INSECURE_DEV_ENCRYPTION_KEY:
            raise ValueError("ENCRYPTION_KEY must be configured in production")
        return value

    @field_validator("notion_page_size")
    @classmethod
    def validate_page_size(cls, value: int) -> int:
        if not 1 <= value <= 100:
            raise ValueError("NOTION_PAGE_SIZE must be between 1 and 100")
        return value

    @model_validator(mode="after")
    def validate_production_rules(self) -> "Settings":
        if self.is_production:
            if not self.notion_client_id or not self.notion_client_secret:
                raise ValueError("NOTION_CLIENT_ID and NOTION_CLIENT_SECRET must be configured in production")
            if self.log_level == "DEBUG":
                raise ValueError("DEBUG logging is not allowed in production")
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()
