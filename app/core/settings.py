"""Application settings using Pydantic Settings for typed configuration.

This module centralizes all configuration and provides type-safe access to settings.
Settings are loaded from environment variables with sensible defaults, and are
handed to the service and storage layers at construction time.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env_name: str = Field(default="development", alias="ENV_NAME")

    # Database
    database_url: str = Field(default="sqlite:///./users.db", alias="DATABASE_URL")
    db_auto_create: bool = Field(default=True, alias="DB_AUTO_CREATE")

    # CORS
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Profile image uploads
    upload_dir: Path = Field(default=Path("uploads"), alias="UPLOAD_DIR")
    upload_url_prefix: str = Field(default="/uploads", alias="UPLOAD_URL_PREFIX")
    profile_max_bytes: int = Field(
        default=5 * 1024 * 1024, alias="PROFILE_MAX_BYTES", ge=1
    )
    profile_image_types: str = Field(
        default="image/jpeg,image/jpg,image/png,image/gif",
        alias="PROFILE_IMAGE_TYPES",
    )

    # Listing / export
    default_page_size: int = Field(default=10, alias="DEFAULT_PAGE_SIZE", ge=1)
    csv_filename: str = Field(default="users.csv", alias="CSV_FILENAME")
    csv_date_format: str = Field(default="%m/%d/%Y", alias="CSV_DATE_FORMAT")

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return _split_csv(self.cors_origins)

    @computed_field
    @property
    def profile_image_types_list(self) -> list[str]:
        """Parse PROFILE_IMAGE_TYPES into a list of lowercase MIME types."""
        return [t.lower() for t in _split_csv(self.profile_image_types)]


def _split_csv(raw: str) -> list[str]:
    items = []
    for item in raw.split(","):
        trimmed = item.strip()
        if trimmed:
            items.append(trimmed)
    return items


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
