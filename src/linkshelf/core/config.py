"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # Revision history - number of revisions kept per link
    revision_history_limit: int = Field(default=50, validation_alias="REVISION_HISTORY_LIMIT")
    revision_cleanup: bool = Field(default=True, validation_alias="REVISION_CLEANUP")

    # Days a link stays in the trash before the cleanup task removes it
    soft_delete_expiry_days: int = Field(default=30, validation_alias="SOFT_DELETE_EXPIRY_DAYS")

    # Internet Archive
    wayback_save_url: str = Field(
        default="https://web.archive.org/save/",
        validation_alias="WAYBACK_SAVE_URL",
    )
    archive_request_timeout: float = Field(
        default=30.0, validation_alias="ARCHIVE_REQUEST_TIMEOUT",
    )

    @field_validator("revision_history_limit", "soft_delete_expiry_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Limits and expiry windows must be at least 1."""
        if value < 1:
            raise ValueError("must be a positive integer")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
