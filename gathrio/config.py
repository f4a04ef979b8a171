"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# config.py lives in gathrio/, the project root is one level up
_CONFIG_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CONFIG_DIR.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Gathrio API", description="Application name")
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Root log level")
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Origin of the frontend allowed by CORS",
        alias="FRONTEND_URL",
    )

    # Security
    secret_key: str = Field(
        ...,
        description="Secret key for signing access tokens",
        alias="SECRET_KEY",
    )
    refresh_secret_key: str | None = Field(
        default=None,
        description="Secret key for signing refresh tokens. Falls back to SECRET_KEY",
        alias="REFRESH_SECRET_KEY",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(default=15, description="Access token expiration in minutes")
    refresh_token_expire_days: int = Field(default=7, description="Refresh token and cookie lifetime in days")
    reset_token_expire_minutes: int = Field(default=60, description="Password reset token lifetime in minutes")
    expose_reset_token: bool | None = Field(
        default=None,
        description=(
            "Return the plaintext reset token from /forgot-password. "
            "Defaults to True outside production, where no mail transport exists"
        ),
        alias="EXPOSE_RESET_TOKEN",
    )

    # Database
    database_url: str = Field(
        ...,
        description="Database connection URL",
        alias="DATABASE_URL",
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str:
        """Validate and normalize database URL."""
        if v is None or v == "":
            raise ValueError("DATABASE_URL is required")
        return v.strip()

    @field_validator("app_env", mode="before")
    @classmethod
    def normalize_app_env(cls, v: str) -> str:
        """Normalize app environment to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def refresh_signing_key(self) -> str:
        return self.refresh_secret_key or self.secret_key

    @property
    def reset_token_in_response(self) -> bool:
        """Whether /forgot-password echoes the plaintext reset token."""
        if self.expose_reset_token is None:
            return not self.is_production
        return self.expose_reset_token


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    Returns:
        Settings: Application settings instance

    Example:
        ```python
        from gathrio.config import get_settings

        settings = get_settings()
        print(settings.database_url)
        ```
    """
    return Settings()
