"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: peak-analytics/
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./analytics.db",
        description="Database connection URL"
    )

    # === Batch reads ===
    history_page_size: int = Field(
        default=1000,
        ge=1,
        description="Rows per page when reading activity history"
    )
    variation_chunk_size: int = Field(
        default=1000,
        ge=1,
        description="Activity ids per IN-query when loading variation rows"
    )

    # === Skill level ===
    default_lookback_days: int = Field(
        default=56,
        description="Lookback window used when a request does not set one"
    )
    kmeans_seed: int = Field(
        default=42,
        description="Seed for the k-means++ xorshift generator"
    )

    # === Safety calibration ===
    calibration_window_days: int = Field(
        default=90,
        ge=1,
        description="Days of run history used for safe pace baselines"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
