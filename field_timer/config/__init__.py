"""
Configuration management for field_timer.

This module provides configuration models and a loader that merges
configuration files with environment variables.
"""

from .loader import ConfigLoader
from .models import (
    EndpointConfig,
    GlobalConfig,
    LoggingConfig,
    LogLevel,
    OutputFormat,
    SecurityConfig,
    parse_header,
    parse_headers,
    parse_variables,
)

__all__ = [
    "ConfigLoader",
    "EndpointConfig",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "OutputFormat",
    "SecurityConfig",
    "parse_header",
    "parse_headers",
    "parse_variables",
]
