"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using Fly Volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/hearth.db"
    return "sqlite:///./hearth.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Hearth"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database - defaults to Fly Volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json | text

    # Frontend
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]
    CLIENT_URL: str = "http://localhost:5173"

    # Caller identity is established upstream and forwarded in this header
    AUTH_USER_HEADER: str = "X-User-Id"

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 25
    USER_PAGE_LIMIT: int = 10
    MODERATION_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100

    # Outgoing mail; an empty SMTP_HOST logs notifications instead of sending
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT_SECONDS: float = 10.0
    MAIL_FROM_EMAIL: str = "no-reply@hearth.local"
    MAIL_FROM_NAME: str = "Hearth"


settings = Settings()
