"""
Executable module for modkeeper.

Running ``python -m modkeeper`` is equivalent to running ``modkeeper``.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be imported."""
    try:
        from modkeeper.__version__ import __version__

        version = __version__
    except ImportError:
        version = "<unknown>"

    sys.stderr.write("modkeeper could not start.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    sys.stderr.write(f"modkeeper version: {version}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """Entry point for ``python -m modkeeper``.

    Returns:
        Exit code returned by the CLI, or 1 if it cannot be imported.
    """
    try:
        # Imported lazily so a missing dependency is reported cleanly
        from modkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
