"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() so every caller shares one instance.

Usage:
    from backend.settings import get_settings

    settings = get_settings()
    records = compute_records(workouts, catalog, formula=settings.one_rm_formula)
"""

from functools import lru_cache
from typing import Literal, Optional

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

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------
    one_rm_formula: Literal["epley", "brzycki"] = Field(
        default="epley",
        description="Estimated 1RM formula used by every aggregation in this deployment",
    )
    default_body_weight_kg: float = Field(
        default=80.0,
        gt=0,
        description="Body weight used when neither the workout nor the profile has one",
    )

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------
    default_locale: Literal["es", "en"] = Field(
        default="es",
        description="Locale used for exercise display names",
    )
    catalog_table: str = Field(
        default="exercise_catalog",
        description="Table holding the remote exercise catalog",
    )
    fuzzy_matching: bool = Field(
        default=False,
        description="Add a rapidfuzz stage before falling back to the raw name",
    )
    fuzzy_match_threshold: int = Field(
        default=85,
        ge=0,
        le=100,
        description="Minimum rapidfuzz score accepted by the fuzzy resolver",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase key with read access to the catalog table",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("one_rm_formula", mode="before")
    @classmethod
    def normalize_formula(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def has_remote_catalog(self) -> bool:
        """Check if a remote catalog source is configured."""
        return bool(self.supabase_url and self.supabase_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
