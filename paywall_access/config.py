"""
Application Configuration - Pydantic Settings for type-safe config.

NO DICTIONARIES - All configuration is strongly typed.
FAIL FAST - Critical config is validated at startup.
"""

import sys
from urllib.parse import urlparse

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Vendor default - a local placeholder, never valid in production
DEFAULT_CONFIG_URL = "http://localhost:9000"

_LOOPBACK_HOSTS = ("localhost", "127.0.0.1", "::1", "0.0.0.0")


class ConfigurationError(Exception):
    """Raised when critical configuration is missing or invalid."""

    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = "development"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_title: str = "Fewcents Paywall Access API"
    api_version: str = "0.1.0"
    api_description: str = "Paywall access adapter for the Fewcents micropayment service"

    # Vendor (Fewcents)
    fewcents_config_url: str = DEFAULT_CONFIG_URL
    authorization_timeout_seconds: float = 3.0

    # Reader sessions held in memory between authorize and click
    max_reader_sessions: int = 10_000

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    # Observability - Metrics
    metrics_enabled: bool = True

    # Observability - Tracing
    tracing_enabled: bool = False
    otlp_endpoint: str = "http://otel-collector:4317"
    otlp_insecure: bool = True
    service_name: str = "fewcents-paywall-access"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @model_validator(mode="after")
    def validate_critical_config(self) -> "Settings":
        """
        FAIL FAST: Validate critical configuration at startup.

        The vendor config URL defaults to a loopback placeholder, which is
        only usable for local development.
        """
        errors: list[str] = []

        parsed = urlparse(self.fewcents_config_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(
                f"FEWCENTS_CONFIG_URL must be an absolute http(s) URL, "
                f"got: {self.fewcents_config_url[:40]!r}"
            )
        elif self.is_production and parsed.hostname in _LOOPBACK_HOSTS:
            errors.append("FEWCENTS_CONFIG_URL is required in production (loopback default set)")

        if self.authorization_timeout_seconds <= 0:
            errors.append("AUTHORIZATION_TIMEOUT_SECONDS must be positive")

        if errors:
            error_msg = "\n".join(
                [
                    "",
                    "=" * 60,
                    "CRITICAL CONFIGURATION ERROR - APPLICATION CANNOT START",
                    "=" * 60,
                    *[f"  ✗ {e}" for e in errors],
                    "=" * 60,
                    "",
                ]
            )
            print(error_msg, file=sys.stderr)
            raise ConfigurationError(error_msg)

        return self


# Global settings instance - validates at import time
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance."""
    return settings
