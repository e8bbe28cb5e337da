"""
Configuration module for the recipe search service.

This module provides centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the recipe search service.

    Attributes:
        APP_NAME: Display name for the service
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_JSON: Emit JSON structured logs instead of human-readable lines
        RECIPES_PATH: Optional JSON file holding the recipe catalog
        CATEGORIES_PATH: Optional JSON file holding the category list
        RESULT_CACHE_TTL_SECONDS: Lifetime of a cached result list
        RESULT_CACHE_MAX_SIZE: Maximum number of cached result lists
        DEFAULT_MAX_RESULTS: Result cap used when the caller gives none
        DEFAULT_MIN_SCORE: Score threshold used when the caller gives none
        SIMILARITY_THRESHOLD: Minimum token similarity for near-match credit
        HIGHLIGHT_OPEN_TAG: Marker inserted before highlighted keywords
        HIGHLIGHT_CLOSE_TAG: Marker inserted after highlighted keywords
        DESCRIPTION_SNIPPET_LENGTH: Description length kept in snippets
    """

    APP_NAME: str = Field(
        default="Recipe Search",
        description="Display name for the service",
    )

    # Logging configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Use JSON structured logging",
    )

    # Catalog sources
    RECIPES_PATH: Optional[str] = Field(
        default=None,
        description="Path to a JSON recipe catalog loaded at startup",
    )
    CATEGORIES_PATH: Optional[str] = Field(
        default=None,
        description="Path to a JSON category list loaded at startup",
    )

    # Result cache
    RESULT_CACHE_TTL_SECONDS: float = Field(
        default=300.0,
        gt=0,
        description="Time-to-live of cached search results in seconds",
    )
    RESULT_CACHE_MAX_SIZE: int = Field(
        default=512,
        ge=1,
        description="Maximum number of cached result lists",
    )

    # Ranking
    DEFAULT_MAX_RESULTS: int = Field(
        default=50,
        ge=1,
        description="Maximum number of results returned by default",
    )
    DEFAULT_MIN_SCORE: float = Field(
        default=0.1,
        ge=0,
        description="Minimum relevance score kept by default",
    )
    SIMILARITY_THRESHOLD: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Token similarity above which near matches earn credit",
    )

    # Snippets
    HIGHLIGHT_OPEN_TAG: str = Field(default="<mark>")
    HIGHLIGHT_CLOSE_TAG: str = Field(default="</mark>")
    DESCRIPTION_SNIPPET_LENGTH: int = Field(default=150, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("HIGHLIGHT_OPEN_TAG", "HIGHLIGHT_CLOSE_TAG")
    @classmethod
    def validate_highlight_tag(cls, value: str) -> str:
        """
        Validate that highlight markers are not empty.

        Raises:
            ValueError: If the marker is empty
        """
        if not value:
            raise ValueError("Highlight tag cannot be empty")
        return value


# Global settings instance
settings = Settings()
