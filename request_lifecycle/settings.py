# ==== APPLICATION SETTINGS CONFIGURATION ==== #

"""
Settings configuration for the request lifecycle engine.

This module provides centralized configuration management using Pydantic Settings
with environment variable loading for logging, tracing and the request-type
catalog location.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


# ==== MAIN SETTINGS CLASS ==== #


class Settings(BaseSettings):
    """
    Lifecycle engine settings loaded from environment variables.

    The engine itself is configuration-free; these settings only drive the
    ambient observability stack and where request types are loaded from.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='ignore'
    )

    # --► CORE APPLICATION SETTINGS
    APP_ENV: str = "dev"
    SERVICE_NAME: str = "request-lifecycle"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str | None = None

    # --► REQUEST TYPE CATALOG
    REQUEST_TYPES_PATH: str | None = None

    # --► OBSERVABILITY CONFIGURATION
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None
    OTEL_EXPORTER_OTLP_HEADERS: str | None = None
    OTEL_SERVICE_NAME: str | None = None
    OTEL_RESOURCE_ATTRIBUTES: str | None = None


# ==== GLOBAL SETTINGS INSTANCE ==== #


# Global settings instance for application-wide access
settings = Settings()


def get_settings() -> Settings:
    """
    Get global settings instance.

    Returns:
        Settings: Global application settings instance
    """
    return settings
