"""Utility modules for cgexplore.

This module exports commonly used utility functions.
"""

from cgexplore.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_success,
    print_warning,
)
from cgexplore.utils.logging import setup_logging

__all__ = [
    "console",
    "err_console",
    "format_size",
    "print_error",
    "print_success",
    "print_warning",
    "setup_logging",
]
