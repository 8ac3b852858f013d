"""
Configuration models for appsync_resolvers.

This module defines the runtime settings models (logging and AWS access)
with validation and defaults. The declared resolver documents themselves
live in ``appsync_resolvers.models``.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class AWSConfig(BaseModel):
    """AWS access settings used to build the AppSync client."""

    region: Optional[str] = Field(default=None, description="AWS region name")
    profile: Optional[str] = Field(default=None, description="Named AWS profile")
    endpoint_url: Optional[str] = Field(
        default=None, description="Override for the AppSync endpoint"
    )


class GlobalConfig(BaseModel):
    """Global settings container."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    aws: AWSConfig = Field(default_factory=AWSConfig)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")
