"""Configuration models using Pydantic."""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "plain")


class EngineSettings(BaseSettings):
    """Global engine configuration settings."""

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log format (json, plain)"
    )

    # Metrics configuration
    metrics_enabled: bool = Field(
        default=False,
        description="Expose Prometheus metrics over HTTP"
    )
    metrics_port: int = Field(
        default=8080,
        ge=1024,
        le=65535,
        description="Port for Prometheus metrics server"
    )

    # Expression configuration
    strict_undefined: bool = Field(
        default=True,
        description="Fail when an expression references an unset variable"
    )

    # Modules imported to register additional actions
    plugins: List[str] = Field(
        default_factory=list,
        description="Python modules registering actions with @register_action"
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        fmt = value.lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return fmt

    class Config:
        """Pydantic configuration."""
        env_prefix = "SAPWOOD_"
        case_sensitive = False
        validate_assignment = True
