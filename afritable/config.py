"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Database
    database_url: str = Field(
        "sqlite+aiosqlite:///./afritable.db", env="DATABASE_URL"
    )

    # Google Places (photo provider); only the photo jobs need the key
    google_places_api_key: Optional[str] = Field(None, env="GOOGLE_PLACES_API_KEY")
    places_base_url: str = Field(
        "https://maps.googleapis.com/maps/api/place", env="PLACES_BASE_URL"
    )
    places_timeout_seconds: float = Field(10.0, env="PLACES_TIMEOUT_SECONDS")
    places_max_attempts: int = Field(3, env="PLACES_MAX_ATTEMPTS")
    places_photo_max_width: int = Field(800, env="PLACES_PHOTO_MAX_WIDTH")

    # Classification / cleanup
    classification_keywords_path: Optional[Path] = Field(
        None, env="CLASSIFICATION_KEYWORDS_PATH"
    )
    cleanup_batch_size: int = Field(200, env="CLEANUP_BATCH_SIZE")
    cleanup_archive_dir: Path = Field(
        Path("data/cleanup_archive"), env="CLEANUP_ARCHIVE_DIR"
    )

    # Availability seeding
    availability_days: int = Field(30, env="AVAILABILITY_DAYS")
    availability_time_slots: str = Field(
        "17:00,17:30,18:00,18:30,19:00,19:30,20:00,20:30,21:00,21:30,22:00",
        env="AVAILABILITY_TIME_SLOTS",
    )
    availability_party_sizes: str = Field("2,4,6,8", env="AVAILABILITY_PARTY_SIZES")
    availability_min_slots: int = Field(2, env="AVAILABILITY_MIN_SLOTS")
    availability_max_slots: int = Field(5, env="AVAILABILITY_MAX_SLOTS")

    # Photo enrichment
    photo_batch_size: int = Field(20, env="PHOTO_BATCH_SIZE")
    photo_rate_limit_delay_ms: int = Field(1000, env="PHOTO_RATE_LIMIT_DELAY_MS")
    photo_max_results: int = Field(3, env="PHOTO_MAX_RESULTS")
    photo_placeholder_markers: str = Field(
        "images.unsplash.com,placeholder,via.placeholder.com",
        env="PHOTO_PLACEHOLDER_MARKERS",
    )
    photo_daily_limit: int = Field(100, env="PHOTO_DAILY_LIMIT")

    # Security
    allowed_origins: str = Field(
        "http://localhost:3000",
        env="ALLOWED_ORIGINS",
    )

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    @property
    def time_slots_list(self) -> list[str]:
        return [s.strip() for s in self.availability_time_slots.split(",") if s.strip()]

    @property
    def party_sizes_list(self) -> list[int]:
        return [int(s) for s in self.availability_party_sizes.split(",") if s.strip()]

    @property
    def placeholder_markers_list(self) -> list[str]:
        return [
            m.strip().lower()
            for m in self.photo_placeholder_markers.split(",")
            if m.strip()
        ]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
