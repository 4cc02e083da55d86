"""Configuration contract for policycore.

Pydantic-validated settings shared by the evaluation engine, the builders
and the access orchestrator (log level, log format, decision logging,
default policy document version).

Direct os.environ/os.getenv usage is confined to
:func:`load_shared_config_from_env`; everything else receives a
:class:`SharedConfig` instance.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_POLICY_VERSION = "2023-11-15"


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SharedConfig(BaseModel):
    """Settings for a process embedding policycore."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    log_access_decisions: bool = Field(
        default=False,
        description="Log every has_access decision at INFO instead of DEBUG",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as the top-level logger name",
    )

    # Policy defaults
    default_policy_version: str = Field(
        default=DEFAULT_POLICY_VERSION,
        description="Version label applied by PolicyBuilder when version() is not called",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("default_policy_version")
    @classmethod
    def validate_default_policy_version(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("default_policy_version must be a non-empty string")
        return v

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_shared_config_from_env() -> SharedConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - LOG_ACCESS_DECISIONS: Log access decisions at INFO (true/false)
    - SERVICE_NAME: Service name for logging
    - POLICY_DEFAULT_VERSION: Default policy document version

    Returns:
        SharedConfig instance with values from environment or defaults.
    """
    import os

    return SharedConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        log_access_decisions=os.getenv("LOG_ACCESS_DECISIONS", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
        default_policy_version=os.getenv("POLICY_DEFAULT_VERSION", DEFAULT_POLICY_VERSION),
    )


__all__ = [
    "DEFAULT_POLICY_VERSION",
    "LogLevel",
    "SharedConfig",
    "load_shared_config_from_env",
]
