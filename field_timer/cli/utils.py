"""
Utility functions for CLI operations.

Functions handle reading the input document from a file or standard input.
"""

import sys
from pathlib import Path
from typing import BinaryIO, Optional

from ..exceptions import ConfigurationError


def load_document(file_path: Optional[Path], stdin: Optional[BinaryIO] = None) -> bytes:
    """
    Read the raw GraphQL document.

    Args:
        file_path: Document file, or None to read standard input
        stdin: Binary stream used instead of ``sys.stdin.buffer``

    Returns:
        The undecoded document bytes

    Raises:
        ConfigurationError: If the file cannot be read
    """
    if file_path is None:
        stream = stdin if stdin is not None else sys.stdin.buffer
        return stream.read()

    try:
        return file_path.read_bytes()
    except FileNotFoundError:
        raise ConfigurationError(f"File not found: {file_path}", path=str(file_path))
    except OSError as e:
        raise ConfigurationError(
            f"Error reading file {file_path}: {e}", path=str(file_path)
        )
