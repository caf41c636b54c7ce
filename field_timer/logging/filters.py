"""
Custom logging filters for field_timer.

This module provides filters for masking credentials that travel in request
headers and for component-specific filtering.
"""

import logging
import re
from typing import List, Optional, Pattern, Set, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # Bearer tokens
            (re.compile(r"(bearer\s+)(\S+)", re.IGNORECASE), r"\1***MASKED***"),
            # Authorization and API key headers
            (
                re.compile(
                    r"((?:authorization|x-api-key|api[_-]?key|cookie)[\"']?\s*[:=]\s*[\"']?)"
                    r"(?!bearer\s)([^\s\"',]+)",
                    re.IGNORECASE,
                ),
                r"\1***MASKED***",
            ),
            # Tokens, secrets and passwords
            (
                re.compile(r"((?:token|secret|password)[\"']?\s*[:=]\s*[\"']?)([^\s\"',]+)", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            # URLs with credentials
            (re.compile(r"(https?://[^:/\s]+):([^@/\s]+)@", re.IGNORECASE), r"\1:***MASKED***@"),
        ]

    def mask(self, message: str) -> str:
        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        message = self.mask(record.getMessage())
        record.msg = message
        record.args = ()
        return True


class ComponentFilter(logging.Filter):
    """Filter for component-specific logging."""

    def __init__(self, component: str, allowed_levels: Optional[Set[str]] = None) -> None:
        """
        Initialize component filter.

        Args:
            component: Component name to filter for
            allowed_levels: Set of allowed log levels
        """
        super().__init__()
        self.component = component
        self.allowed_levels = allowed_levels or {
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        }

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter based on component and level."""
        if not record.name.startswith(self.component):
            return False

        return record.levelname in self.allowed_levels
