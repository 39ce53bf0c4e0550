"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Matrimony Profile Tracker")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./matrimony.db",
        description="Store connection URL (asyncpg for PostgreSQL, aiosqlite locally)",
    )
    inequality_requires_leading_order: bool = Field(
        default=False,
        description=(
            "Set for stores that require every inequality-filtered field to be "
            "the leading sort key"
        ),
    )
    seed_default_statuses: bool = Field(default=True)

    # Listing
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    max_cached_page_cursors: int = Field(default=256, ge=1)
    rejected_status_id: str = Field(
        default="rejected",
        description="Status hidden from listings unless explicitly requested",
    )

    # Query cache
    query_stale_time_seconds: float = Field(
        default=30.0,
        ge=0,
        description="How long a cached listing is served without revalidation",
    )

    # Filter persistence
    filter_state_path: str = Field(default=".matrimony_filters.json")
    filter_storage_prefix: str = Field(default="studio_profile_")

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses an async driver scheme.

        Hosting providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("sqlite:///"):
            url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
