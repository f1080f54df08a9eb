"""Parser configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Parser settings loaded from TRAILPARSE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRAILPARSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Scoring
    # ==========================================================================
    # Parses below this confidence are answered with a clarification
    acceptance_threshold: float = Field(default=0.52, ge=0.0, le=1.0)
    # Command matches below this score hand over to free-text inference
    match_floor: float = Field(default=0.5, ge=0.0, le=1.0)

    # ==========================================================================
    # Clarification
    # ==========================================================================
    # Maximum options offered when asking for a missing target
    max_entity_options: int = Field(default=4, ge=1, le=4)

    # ==========================================================================
    # Travel
    # ==========================================================================
    tile_meters: float = Field(default=100.0, gt=0)

    # Debug
    debug: bool = False


@lru_cache
def get_settings() -> ParserSettings:
    """Get cached settings instance."""
    return ParserSettings()
