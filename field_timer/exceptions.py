"""
Exception hierarchy for the GraphQL field timer.

This module provides custom exceptions and error handling utilities for
document parsing, query flattening, transport failures and response decoding.
Every fatal condition of a timing run is a subclass of FieldTimerError.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import aiohttp


class FieldTimerError(Exception):
    """
    Base exception for all field timer operations.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class ConfigurationError(FieldTimerError):
    """Raised for invalid endpoint, header or variables configuration."""

    pass


class DocumentParseError(FieldTimerError):
    """
    Raised when the input document cannot be parsed.

    Attributes:
        line: Line of the syntax error (if known)
        column: Column of the syntax error (if known)
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message, line=line, column=column)
        self.line = line
        self.column = column


# Flattening errors


class FlattenError(FieldTimerError):
    """Base exception for failures while flattening a document."""

    pass


class FragmentNotFoundError(FlattenError):
    """Raised when a fragment spread references an undefined fragment."""

    def __init__(self, fragment_name: str) -> None:
        super().__init__(
            f"cannot find fragment with name {fragment_name}",
            fragment_name=fragment_name,
        )
        self.fragment_name = fragment_name


class DuplicateFragmentError(FlattenError):
    """Raised when two fragment definitions share a name."""

    def __init__(self, fragment_name: str) -> None:
        super().__init__(
            f"fragment {fragment_name} is defined more than once",
            fragment_name=fragment_name,
        )
        self.fragment_name = fragment_name


class FragmentCycleError(FlattenError):
    """Raised when a fragment spreads itself, directly or transitively."""

    def __init__(self, chain: tuple) -> None:
        super().__init__(
            f"fragment cycle detected: {' -> '.join(chain)}", chain=chain
        )
        self.chain = chain


class SerializationError(FlattenError):
    """
    Raised when a reconstructed leaf query does not re-parse.

    Attributes:
        query_text: The reconstructed text that failed to parse
    """

    def __init__(self, message: str, query_text: str) -> None:
        super().__init__(message, query_text=query_text)
        self.query_text = query_text


# Transport errors


class TransportError(FieldTimerError):
    """
    Raised for network-level failures while sending a query.

    Attributes:
        url: Endpoint the request was sent to
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, url=url, **kwargs)
        self.url = url


class ConnectionError(TransportError):
    """
    Raised when the connection or TLS handshake fails.

    Covers refused connections, DNS failures, certificate errors and streams
    reset by the server.
    """

    pass


class TimeoutError(TransportError):
    """
    Raised when a single request exceeds the configured timeout.

    Attributes:
        timeout_value: The timeout value that was exceeded (in seconds)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> None:
        super().__init__(message, url, timeout_value=timeout_value)
        self.timeout_value = timeout_value


# Response errors


class ResponseDecodeError(FieldTimerError):
    """
    Raised when a response body is not a GraphQL JSON response.

    Attributes:
        raw_body: The undecoded response bytes, kept for diagnosis
        status_code: HTTP status code of the response
    """

    def __init__(
        self,
        message: str,
        raw_body: bytes = b"",
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, raw_body=raw_body, status_code=status_code)
        self.raw_body = raw_body
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.message}; body {self.raw_body!r}"


class UnexpectedResponseError(ResponseDecodeError):
    """Raised when a JSON response carries neither ``data`` nor ``errors``."""

    pass


class ErrorHandler:
    """
    Utility class for converting aiohttp exceptions.

    Every transport failure is fatal for a timing run, so the conversion only
    needs to pick the right TransportError subclass.
    """

    @staticmethod
    def handle_aiohttp_error(
        error: BaseException,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> TransportError:
        """
        Convert aiohttp exceptions to TransportError subclasses.

        Args:
            error: The original aiohttp or asyncio exception
            url: The endpoint that caused the error
            timeout_value: Configured per-request timeout, if any

        Returns:
            Appropriate TransportError subclass
        """
        if isinstance(error, asyncio.TimeoutError):
            return TimeoutError(
                f"Request timed out: {error}", url=url, timeout_value=timeout_value
            )

        elif isinstance(error, aiohttp.ClientSSLError):
            return ConnectionError(f"SSL error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientConnectorError):
            return ConnectionError(f"Connector error: {error}", url=url)

        elif isinstance(error, aiohttp.ServerDisconnectedError):
            return ConnectionError(f"Server disconnected: {error}", url=url)

        elif isinstance(error, aiohttp.ClientConnectionError):
            return ConnectionError(f"Connection error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientPayloadError):
            return TransportError(f"Payload error: {error}", url=url)

        else:
            return TransportError(f"Unexpected network error: {error}", url=url)
