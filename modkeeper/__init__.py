"""
modkeeper: find outdated Go module dependencies.

modkeeper reads a ``go.mod`` file, asks a Go module proxy which releases
exist for every direct requirement, classifies each newer release as a
patch, minor, major or incompatible-major upgrade, and prints the outdated
modules worst-first.
"""

from __future__ import annotations

from modkeeper.__version__ import __version__

__author__ = "modkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Report outdated Go module dependencies by upgrade severity."

__all__ = [
    "__version__",
]
