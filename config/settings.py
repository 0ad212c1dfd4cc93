"""
Rotation executor settings loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation.
All settings can be overridden via ROTATION_* environment variables or a .env
file. The AWS region additionally honours the standard AWS_REGION variable.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class RotationSettings(BaseSettings):
    """
    Rotation executor configuration.

    Example:
        >>> settings = RotationSettings(network_timeout_seconds=2.5)
        >>> settings.network_timeout_seconds
        2.5
    """

    model_config = SettingsConfigDict(
        env_prefix="ROTATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # AWS Secrets Manager
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("ROTATION_AWS_REGION", "AWS_REGION"),
        description="AWS region of the Secrets Manager endpoint",
    )
    aws_endpoint_url: str | None = Field(
        default=None,
        description="Optional Secrets Manager endpoint override (e.g., LocalStack)",
    )

    # Store calls
    network_timeout_seconds: float = Field(
        default=1.0,
        gt=0,
        le=60,
        description="Upper bound for each secret store call, in seconds",
    )

    # Logging
    service_name: str = Field(
        default="secret_rotator",
        description="Service name stamped on every log line",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return level


@lru_cache
def get_settings() -> RotationSettings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.
    """
    return RotationSettings()
