"""
Configuration management for ClauseLens.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # Analysis
    # ==========================================================================
    analysis_model: str = Field(
        default="gpt-4o",
        description="Model name recorded when the analysis payload does not name one",
    )
    risk_id_prefix: str = "risk"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level so `debug` and `DEBUG` are equivalent."""
        return v.strip().upper() if isinstance(v, str) else v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
