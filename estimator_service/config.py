"""
Estimator Service Configuration Module

HTTP-service settings with Pydantic validation. Settings shared with the
CLI (MongoDB, Gemini, GitHub) live in src.common.config.Config.
"""

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.common.config import Config


class EstimatorSettings(BaseSettings):
    """
    Estimator service configuration with validation.

    All settings can be overridden via environment variables
    (case-insensitive, no prefix).
    """

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")

    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins"
    )
    persistence_workers: int = Field(
        default=2,
        ge=1,
        le=16,
        description="Background threads for analysis saves (1-16)"
    )
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="simple", description="simple or json")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"simple", "json"}:
            raise ValueError("log_format must be 'simple' or 'json'")
        return v_lower

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> EstimatorSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the process lifetime.
    """
    return EstimatorSettings()


def validate_config_on_startup() -> EstimatorSettings:
    """
    Validate configuration at application startup.

    Raises ValueError if settings are invalid. Missing MongoDB or Gemini
    configuration only produces warnings: both have defined degraded modes.
    """
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    if not Config.is_mongodb_configured():
        logger.warning("MONGODB_URI not set: analyses will not be stored")
    if not Config.get_llm_api_key():
        logger.warning("GEMINI_API_KEY not set: every analysis will return the fallback estimate")
    if settings.is_production and not settings.cors_origins:
        logger.warning("CORS_ORIGINS not configured in production")

    logger.info(f"Configuration loaded: environment={settings.environment}")
    for line in Config.summary().splitlines():
        logger.info(line)
    return settings
