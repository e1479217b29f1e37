"""
Utility helpers for modkeeper.

This package provides reusable utilities used across modkeeper:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Manifest file reading
- Async HTTP client

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

from modkeeper.utils.filesystem import safe_read_file, validate_file
from modkeeper.utils.logger import (
    get_logger,
    level_for_verbosity,
    setup_logging,
)
from modkeeper.utils.console import (
    colorize_tier,
    get_console_width,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)
from modkeeper.utils.http import HTTPClient

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "get_console_width",
    "reconfigure_console",
    "colorize_tier",
    # Logging
    "get_logger",
    "setup_logging",
    "level_for_verbosity",
    # Filesystem
    "safe_read_file",
    "validate_file",
    # HTTP
    "HTTPClient",
]
