"""
Command-line interface for modkeeper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import click

from modkeeper.config import load_config
from modkeeper.__version__ import __version__
from modkeeper.context import ModKeeperContext
from modkeeper.exceptions import ConfigError, ModKeeperError
from modkeeper.utils.logger import get_logger, level_for_verbosity, setup_logging
from modkeeper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="MODKEEPER_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="MODKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="modkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """modkeeper: find outdated Go module dependencies.

    \b
    Available commands:
      modkeeper check              List direct requirements with newer releases

    \b
    Examples:
      modkeeper check
      modkeeper check --filter minor,patch
      modkeeper -v check path/to/go.mod --show-incompatible

    Use ``modkeeper COMMAND --help`` for command-specific options.
    """
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at level %d", level)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    modkeeper_ctx = ModKeeperContext()
    modkeeper_ctx.config_path = config or loaded_config.source_path
    modkeeper_ctx.config = loaded_config
    modkeeper_ctx.color = color
    modkeeper_ctx.verbose = verbose
    ctx.obj = modkeeper_ctx

    logger.debug("modkeeper v%s", __version__)
    logger.debug("Config path: %s", modkeeper_ctx.config_path)
    logger.debug("Configuration: %s", loaded_config.to_log_dict())


def _register_commands() -> None:
    from modkeeper.commands.check import check

    cli.add_command(check)


_register_commands()


def main() -> int:
    """Main entry point for the modkeeper CLI.

    Returns:
        Exit code:
            0   No outdated dependencies
            1   Outdated dependencies found, or an error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except ModKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "ModKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
