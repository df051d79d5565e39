"""
Configuration module for the Storefront BFF Gateway.

This module uses Pydantic Settings to load and validate environment variables
for upstream communication, runtime mode, logging, CORS and the passive
storefront constants (payment keys, upload limits, pagination) that the
client application reads from the same environment.

Environment variables are loaded from .env file or system environment.
The resulting Settings object is frozen: it is resolved once at startup and
handed explicitly to every component that needs it.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "http://localhost:3001/api"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Upstream base URL resolution, runtime mode, and the passive storefront
    constants are all defined here.
    """

    # =========================================================================
    # Upstream API Configuration
    # =========================================================================

    API_URL: str = Field(
        default=DEFAULT_API_URL,
        description="Upstream API base URL, including the /api suffix",
    )

    API_URL_PROD: Optional[str] = Field(
        default=None,
        description="Upstream API base URL used when ENVIRONMENT=production",
    )

    UPSTREAM_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        description="Outbound request timeout in seconds (unset means no timeout)",
        gt=0,
    )

    # =========================================================================
    # Runtime
    # =========================================================================

    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime mode flag (development, production, test)",
    )

    APP_VERSION: str = Field(
        default="unknown",
        description="Display-only version string reported by /health",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    GATEWAY_HOST: str = Field(default="0.0.0.0", description="Host to bind the gateway server")

    GATEWAY_PORT: int = Field(
        default=3000,
        description="Port to bind the gateway server",
        ge=1,
        le=65535,
    )

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (leave empty for no CORS)",
    )

    # =========================================================================
    # Passive storefront constants
    # =========================================================================

    STRIPE_PUBLIC_KEY: Optional[str] = None
    MERCADOPAGO_PUBLIC_KEY: Optional[str] = None

    MAX_FILE_SIZE: int = Field(default=5 * 1024 * 1024, description="Upload limit in bytes", gt=0)
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/png,image/webp,image/gif"

    DEFAULT_PAGE_SIZE: int = 10
    PAGE_SIZE_OPTIONS: str = "10,25,50,100"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def upstream_base_url(self) -> str:
        """
        Resolve the upstream base URL for the current runtime mode.

        Returns:
            Base URL without trailing slash. Production prefers API_URL_PROD
            and falls back to API_URL.
        """
        if self.is_production and self.API_URL_PROD:
            return self.API_URL_PROD.rstrip("/")
        return self.API_URL.rstrip("/")

    @property
    def allowed_origins_list(self) -> List[str]:
        if not self.ALLOWED_ORIGINS:
            return []
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_types_list(self) -> List[str]:
        return [t.strip() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def page_size_options_list(self) -> List[int]:
        return [int(p) for p in self.PAGE_SIZE_OPTIONS.split(",") if p.strip()]

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("API_URL", "API_URL_PROD")
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Validate that upstream URLs are absolute http(s) URLs.

        Raises:
            ValueError: If the scheme is missing or unsupported
        """
        if v is None:
            return v
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Upstream URL must start with http:// or https://, got: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("PAGE_SIZE_OPTIONS")
    @classmethod
    def validate_page_size_options(cls, v: str) -> str:
        try:
            options = [int(p) for p in v.split(",") if p.strip()]
        except ValueError:
            raise ValueError(f"PAGE_SIZE_OPTIONS must be comma-separated integers, got: {v}")
        if not options or any(p <= 0 for p in options):
            raise ValueError("PAGE_SIZE_OPTIONS must contain positive integers")
        return v

    @model_validator(mode="after")
    def validate_default_page_size(self) -> "Settings":
        if self.DEFAULT_PAGE_SIZE not in self.page_size_options_list:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE ({self.DEFAULT_PAGE_SIZE}) must be one of PAGE_SIZE_OPTIONS"
            )
        return self


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If environment variables are invalid.
    """
    return Settings()
