"""
Command-line interface for field_timer.
"""

from .main import main, run

__all__ = ["main", "run"]
