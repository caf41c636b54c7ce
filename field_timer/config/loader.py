"""
Configuration loader for field_timer.

This module handles loading configuration from configuration files and
environment variables. Command-line arguments are applied on top by the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from .models import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("field_timer.yaml"),
            Path("field_timer.yml"),
            Path("field_timer.json"),
            Path.home() / ".field_timer" / "config.yaml",
            Path.home() / ".field_timer" / "config.yml",
            Path.home() / ".field_timer" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "FIELD_TIMER_"

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
        """
        Load configuration from all available sources.

        Args:
            config_file: Specific config file to load

        Returns:
            GlobalConfig instance with merged configuration

        Raises:
            ConfigurationError: If a file cannot be parsed or values are invalid
        """
        config_data: Dict[str, Any] = {}

        # Load from file
        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        # Load from environment variables
        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        try:
            return GlobalConfig(**config_data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {config_path}", path=str(config_path)
                )
            return self._parse_config_file(config_path)

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        logger.debug("Loading configuration from %s", config_path)
        suffix = config_path.suffix.lower()
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                elif suffix == ".json":
                    data = json.load(f) or {}
                else:
                    raise ConfigurationError(
                        f"Unsupported config file format: {config_path.suffix}"
                    )
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse config file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        # Map environment variables to config structure
        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            # Security
            f"{self.env_prefix}VERIFY_SSL": ("security", "verify_ssl"),
            f"{self.env_prefix}CA_BUNDLE": ("security", "ca_bundle_path"),
            # Run
            f"{self.env_prefix}TIMEOUT": ("timeout",),
            f"{self.env_prefix}PRUNE_VARIABLES": ("prune_variables",),
            f"{self.env_prefix}OUTPUT_FORMAT": ("output_format",),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = self._convert_env_value(value)

                # Set nested configuration value
                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
