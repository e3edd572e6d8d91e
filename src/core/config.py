"""Client configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Notes client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Remote note store
    api_url: str = Field(
        default="http://localhost:8000",
        validation_alias="NOTES_API_URL",
    )
    api_token: str = Field(default="", validation_alias="NOTES_API_TOKEN")
    api_timeout: float = Field(default=30.0, validation_alias="NOTES_API_TIMEOUT")

    log_level: str = Field(default="INFO", validation_alias="NOTES_LOG_LEVEL")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be joined with a leading slash."""
        v = v.strip()
        if not v:
            raise ValueError("NOTES_API_URL cannot be empty")
        return v.rstrip("/")

    @field_validator("api_timeout")
    @classmethod
    def check_timeout_positive(cls, v: float) -> float:
        """Validate the request timeout is positive."""
        if v <= 0:
            raise ValueError("NOTES_API_TIMEOUT must be greater than zero")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
