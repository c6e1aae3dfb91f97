"""
PDF Generator Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class PDFServiceSettings(BaseSettings):
    """
    PDF generator configuration with validation.

    All settings can be overridden via environment variables. The page
    dimensions are free-form CSS lengths ("8.5in", "210mm", "1cm") handed
    to Chromium verbatim.
    """

    # === Browser discovery ===
    chromium_version_url: str = Field(
        default="http://localhost:9222/json/version",
        description="Chromium /json/version endpoint reporting webSocketDebuggerUrl"
    )
    endpoint_cache_days: int = Field(
        default=365,
        ge=1,
        le=3650,
        description="How long a discovered control endpoint is cached (days)"
    )
    discovery_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout for the discovery HTTP request"
    )
    health_check_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout for the WebSocket handshake used to probe the cached endpoint"
    )

    # === Page load ===
    network_idle_max_inflight: int = Field(
        default=2,
        ge=0,
        le=50,
        description="In-flight requests tolerated when deciding a page has loaded"
    )
    network_idle_ms: int = Field(
        default=500,
        ge=0,
        le=60000,
        description="How long in-flight requests must stay at or under the limit (ms)"
    )

    # === Page layout ===
    paper_width: str = Field(default="8.5in", description="Page width")
    paper_height: str = Field(default="11in", description="Page height")
    margin_top: str = Field(default="0.5in", description="Top margin")
    margin_right: str = Field(default="0.5in", description="Right margin")
    margin_bottom: str = Field(default="0.5in", description="Bottom margin")
    margin_left: str = Field(default="0.5in", description="Left margin")

    # === Server ===
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8001, ge=1, le=65535, description="Bind port")
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("chromium_version_url")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Basic URL format validation."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v

    @field_validator(
        "paper_width", "paper_height",
        "margin_top", "margin_right", "margin_bottom", "margin_left",
    )
    @classmethod
    def validate_dimension(cls, v: str) -> str:
        """Dimensions are passed through as-is but must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Page dimensions must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(_LOG_LEVELS))}")
        return v_upper

    @property
    def endpoint_cache_ttl(self) -> timedelta:
        """TTL applied to a freshly discovered control endpoint."""
        return timedelta(days=self.endpoint_cache_days)

    @property
    def margins(self) -> dict:
        """Margins in the shape Playwright's page.pdf() expects."""
        return {
            "top": self.margin_top,
            "right": self.margin_right,
            "bottom": self.margin_bottom,
            "left": self.margin_left,
        }

    class Config:
        env_prefix = ""  # No prefix, use exact env var names
        case_sensitive = False  # PAPER_WIDTH = paper_width
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> PDFServiceSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return PDFServiceSettings()


def validate_config_on_startup() -> PDFServiceSettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    """
    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    logger.info("Configuration loaded:")
    logger.info(f"  chromium_version_url={settings.chromium_version_url}")
    logger.info(f"  paper={settings.paper_width} x {settings.paper_height}")
    logger.info(
        f"  margins={settings.margin_top} {settings.margin_right} "
        f"{settings.margin_bottom} {settings.margin_left}"
    )
    logger.info(f"  endpoint_cache_days={settings.endpoint_cache_days}")

    return settings
