"""Application configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BidLensSettings(BaseSettings):
    """Settings loaded from ``BID_LENS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BID_LENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Clustering
    similarity_threshold: float = Field(
        default=0.6, ge=0.0, le=1.0, description="Minimum score to link two emails"
    )
    use_ai: bool = Field(default=False, description="Use the AI clustering strategy")
    max_batch_size: int = Field(default=50, ge=1, description="Emails per AI clustering call")

    # Signal weights for rule-based similarity
    weight_subject: float = Field(default=0.2, ge=0.0, le=1.0)
    weight_project_name: float = Field(default=0.25, ge=0.0, le=1.0)
    weight_address: float = Field(default=0.35, ge=0.0, le=1.0)
    weight_gc: float = Field(default=0.1, ge=0.0, le=1.0)
    weight_engineer: float = Field(default=0.05, ge=0.0, le=1.0)
    weight_architect: float = Field(default=0.05, ge=0.0, le=1.0)

    # Extraction fan-out
    extraction_concurrency: int = Field(
        default=15, ge=1, le=100, description="Concurrent extraction calls"
    )

    # Seller inference
    seller_domain: str = Field(
        default="buildvision.io", description="Email domain identifying sellers"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_json: bool = Field(default=False, description="Use JSON log format")
    log_dir: Path | None = Field(default=None, description="Directory for rolling log files")


@lru_cache
def get_settings() -> BidLensSettings:
    """Get cached settings instance."""
    return BidLensSettings()
