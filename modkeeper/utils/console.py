"""
Console output utilities for modkeeper using Rich.

User-facing output goes through this module; diagnostics go through
:mod:`modkeeper.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Callable, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.markup import escape
from rich.console import Console

from modkeeper.models.version import SeverityTier

MODKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "module": "blue",
    }
)

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the process-wide Rich console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=MODKEEPER_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the cached console so the next call re-reads the environment."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


def get_console_width() -> int:
    """Current terminal width in columns, as Rich measures it."""
    return _get_console().width


# ---------------------------------------------------------------------------
# Status messages
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _get_console().print(f"{escape(prefix)} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{escape(prefix)} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{escape(prefix)} {message}", style="warning")


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    rows: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    row_end_section: Optional[Callable[[int, Dict[str, Any]], bool]] = None,
) -> None:
    """Render rows of data as a Rich table.

    Args:
        rows: List of row dictionaries; values may contain Rich markup.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        caption: Optional table caption.
        column_styles: Per-column keyword arguments for ``Table.add_column``.
        row_end_section: Callback ``(index, row) -> bool``; a ``True`` result
            draws a separator below that row.
    """
    if not rows:
        return

    if headers is None:
        headers = list(rows[0].keys())

    table = Table(
        title=title,
        caption=caption,
        show_header=True,
        header_style="bold",
    )

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
            max_width=config.get("max_width"),
            overflow=config.get("overflow", "fold"),
        )

    for index, row in enumerate(rows):
        values = [str(row.get(h, "")) for h in headers]
        end_section = row_end_section(index, row) if row_end_section else False
        table.add_row(*values, end_section=end_section)

    _get_console().print(table)


def colorize_tier(tier: SeverityTier, text: Optional[str] = None) -> str:
    """Return Rich markup rendering ``text`` in the tier's color.

    Args:
        tier: Severity tier deciding the color.
        text: Text to color; defaults to the tier label.

    Returns:
        Rich markup string.
    """
    body = escape(text if text is not None else tier.label)
    return f"[{tier.color}]{body}[/{tier.color}]"
