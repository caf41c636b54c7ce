"""
Configuration models for field_timer.

This module defines all configuration data models with validation and defaults.
"""

from __future__ import annotations

import json
import ssl
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OutputFormat(str, Enum):
    """Report formats."""

    TEXT = "text"
    JSON = "json"


def parse_header(header: str) -> Tuple[str, str]:
    """
    Split a ``"Name: Value"`` header string on its first colon.

    Raises:
        ConfigurationError: If the string has no colon
    """
    if ":" not in header:
        raise ConfigurationError(f"Invalid header format: {header}", header=header)
    name, value = header.split(":", 1)
    return name.strip(), value.strip()


def parse_headers(headers: Optional[Sequence[str]]) -> List[Tuple[str, str]]:
    return [parse_header(header) for header in headers or ()]


def parse_variables(variables: Optional[str]) -> Dict[str, Any]:
    """
    Decode the shared variables JSON object.

    Raises:
        ConfigurationError: If the string is not a JSON object
    """
    if variables is None:
        return {}
    try:
        decoded = json.loads(variables)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Variables are not valid JSON: {e}")
    if not isinstance(decoded, dict):
        raise ConfigurationError("Variables must be a JSON object")
    return decoded


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.WARNING, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )


class SecurityConfig(BaseModel):
    """TLS configuration for secure endpoints."""

    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    ca_bundle_path: Optional[Path] = Field(
        default=None, description="Custom CA bundle path"
    )

    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """
        Build the trust store used for every secure connection of a run.

        Returns:
            An SSLContext, or False when verification is disabled
        """
        if not self.verify_ssl:
            return False
        if self.ca_bundle_path is not None:
            if not self.ca_bundle_path.exists():
                raise ConfigurationError(
                    f"CA bundle not found: {self.ca_bundle_path}",
                    path=str(self.ca_bundle_path),
                )
            return ssl.create_default_context(cafile=str(self.ca_bundle_path))
        return ssl.create_default_context()


class EndpointConfig(BaseModel):
    """
    Target of a timing run.

    Headers and variables are fixed for the whole run and shared by every
    flattened query.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="GraphQL endpoint URL")
    scheme: str = Field(description="URL scheme")
    host: str = Field(description="Endpoint host")
    port: int = Field(ge=1, le=65535, description="Endpoint port")
    headers: List[Tuple[str, str]] = Field(
        default_factory=list, description="Extra request headers"
    )
    variables: Dict[str, Any] = Field(
        default_factory=dict, description="Variables sent with every query"
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout in seconds"
    )
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @field_validator("headers", mode="before")
    @classmethod
    def _split_header_strings(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [parse_header(item) if isinstance(item, str) else item for item in value]
        return value

    @field_validator("variables", mode="before")
    @classmethod
    def _decode_variables(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_variables(value)
        return {} if value is None else value

    @property
    def is_secure(self) -> bool:
        return self.scheme != "http"

    @property
    def host_header(self) -> str:
        """Value of the Host header; the port is omitted when it is the default."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        default_port = 443 if self.is_secure else 80
        if self.port == default_port:
            return host
        return f"{host}:{self.port}"

    @classmethod
    def from_url(
        cls,
        url: str,
        headers: Optional[Sequence[Union[str, Tuple[str, str]]]] = None,
        variables: Union[str, Dict[str, Any], None] = None,
        timeout: Optional[float] = None,
        security: Optional[SecurityConfig] = None,
    ) -> "EndpointConfig":
        """
        Build an endpoint from a URL.

        Any scheme other than ``http`` is treated as secure. The port defaults
        to 80 or 443 accordingly.

        Raises:
            ConfigurationError: If the URL has no host or the headers or
                variables are malformed
        """
        parts = urlsplit(url)
        if not parts.hostname:
            raise ConfigurationError("no host in the URI; cannot proceed", url=url)

        scheme = parts.scheme or "https"
        try:
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid port in URL: {e}", url=url)
        if port is None:
            port = 80 if scheme == "http" else 443

        try:
            return cls(
                url=url,
                scheme=scheme,
                host=parts.hostname,
                port=port,
                headers=list(headers or ()),
                variables=variables,
                timeout=timeout,
                security=security or SecurityConfig(),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid endpoint configuration: {e}", url=url)


class GlobalConfig(BaseModel):
    """Settings loaded from config files and the environment."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout in seconds"
    )
    prune_variables: bool = Field(
        default=False, description="Drop unused variable definitions per leaf query"
    )
    output_format: OutputFormat = Field(default=OutputFormat.TEXT)
    headers: List[str] = Field(
        default_factory=list, description="Default extra headers, 'Name: Value'"
    )
