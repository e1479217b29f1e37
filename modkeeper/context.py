"""
Shared context object for modkeeper CLI commands.

The click group builds one :class:`ModKeeperContext` per invocation and
hands it to subcommands through click's context mechanism.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from modkeeper.config import ModKeeperConfig


class ModKeeperContext:
    """Global context object for modkeeper CLI commands.

    Attributes:
        config_path: Path to the configuration file in use, if any.
        config: Configuration loaded from file (or defaults).
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
    """

    __slots__ = ("config_path", "config", "verbose", "color")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.config: ModKeeperConfig = ModKeeperConfig()
        self.verbose: int = 0
        self.color: bool = True


#: Click decorator for injecting :class:`ModKeeperContext` into commands.
pass_context = click.make_pass_decorator(ModKeeperContext, ensure=True)
