"""
Configuration management for appsync_resolvers.

This module provides the runtime settings models and the loader for settings,
declared resolver configs and persisted state.
"""

from .loader import ConfigLoader
from .models import AWSConfig, GlobalConfig, LoggingConfig, LogLevel

__all__ = [
    "ConfigLoader",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "AWSConfig",
]
