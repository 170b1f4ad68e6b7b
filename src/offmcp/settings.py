"""Type-safe application settings using pydantic-settings."""

import os
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with automatic validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    # ==========================================================================
    # Upstream Services
    # ==========================================================================
    off_catalog_url: str = Field(
        "https://world.openfoodfacts.org",
        description="Open Food Facts product catalog (product API, legacy search, facets)",
    )
    off_search_url: str = Field(
        "https://search.openfoodfacts.org",
        description="Search-a-licious service (advanced search, autocomplete)",
    )
    off_prices_url: str = Field(
        "https://prices.openfoodfacts.org/api/v1",
        description="Open Prices API",
    )
    off_robotoff_url: str = Field(
        "https://robotoff.openfoodfacts.org/api/v1",
        description="Robotoff insights/questions API",
    )
    http_timeout_seconds: float = Field(10.0, description="Timeout for every upstream HTTP call")
    user_agent: str = Field(
        "offmcp/1.1.0 (https://github.com/openfoodfacts)",
        description="User-Agent sent to Open Food Facts (required by their API policy)",
    )

    @field_validator("off_catalog_url", "off_search_url", "off_prices_url", "off_robotoff_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended with a single slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Upstream URLs must start with http:// or https://")
        return v.rstrip("/")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    transport: Literal["stdio", "http"] = Field("stdio", description="MCP transport")
    port: int = Field(28375, description="HTTP server port")
    environment: str = Field("development", description="Environment (development/production/test)")

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_file: str = Field("mcp-server.log", description="Log file used in stdio mode")
    log_level: str = Field("INFO", description="Root log level")
    log_format: Literal["text", "json"] = Field("text", description="Log output format")

    # ==========================================================================
    # Feature Flags
    # ==========================================================================
    enable_metrics: bool = Field(True, description="Enable Prometheus metrics")

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() in {"production", "prod"}

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment.lower() == "test" or "PYTEST_CURRENT_TEST" in os.environ


# Global settings instance - loaded once at import time
settings = Settings()
