"""
Utilities module - Shared helper functions.

This module provides:
- Logger setup for the command line
"""

from vstab.utils.logging import get_logger, configure_logging

__all__ = [
    "get_logger",
    "configure_logging",
]
