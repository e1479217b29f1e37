"""
modkeeper version information.

This module provides a single source of truth for the package version.
"""

from __future__ import annotations

__version__ = "0.1.0"

VERSION_STRING = f"modkeeper {__version__}"
