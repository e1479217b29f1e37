"""Check command implementation for modkeeper.

Reads a ``go.mod`` file, looks up every direct requirement on the module
proxy, and prints the requirements that have newer releases, worst
upgrade severity first.

The command wires four pieces together:

1. **GoModParser**: reads the manifest; ``// indirect`` entries are skipped.
2. **ModuleProxySource**: fetches ``@v/list`` for every module concurrently.
3. **DependencyEvaluator**: classifies newer versions and applies the
   ``--filter`` / ``--show-incompatible`` selection.
4. **rank**: orders outdated modules for display.

Typical usage::

    # Everything newer, 10 versions per row
    $ modkeeper check

    # Only minor and patch upgrades, including +incompatible releases
    $ modkeeper check --filter minor,patch --show-incompatible

    # Machine-readable output
    $ modkeeper check --format json > outdated.json
"""

from __future__ import annotations

import json
import click
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from modkeeper.config import ModKeeperConfig, parse_severity_filter
from modkeeper.context import ModKeeperContext, pass_context
from modkeeper.exceptions import ModKeeperError
from modkeeper.models import RankedReport, SeverityTier
from modkeeper.core import (
    DependencyEvaluator,
    EvaluationResult,
    FetchResult,
    GoModParser,
    ModuleProxySource,
    VersionFilter,
    rank,
    resolve_proxy_url,
)
from modkeeper.constants import (
    GO_MOD_FILE,
    TABLE_FIXED_COLUMNS_WIDTH,
    VERSION_CELL_WIDTH,
)
from modkeeper.utils import (
    HTTPClient,
    colorize_tier,
    get_console_width,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.check")


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=GO_MOD_FILE,
)
@click.option(
    "--max-versions",
    "-n",
    type=int,
    default=None,
    help="How many versions to display per row (1-1000, default 10).",
)
@click.option(
    "--filter",
    "filter_",
    default=None,
    metavar="TIERS",
    help=(
        "Comma-separated version types to display: major, minor, patch. "
        "By default all are included."
    ),
)
@click.option(
    "--show-incompatible/--hide-incompatible",
    default=None,
    help="Show +incompatible versions (hidden by default).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--proxy",
    default=None,
    metavar="URL",
    help="Go module proxy to query (defaults to GOPROXY, then proxy.golang.org).",
)
@pass_context
def check(
    ctx: ModKeeperContext,
    file: Path,
    max_versions: Optional[int],
    filter_: Optional[str],
    show_incompatible: Optional[bool],
    output_format: str,
    proxy: Optional[str],
) -> None:
    """Check a go.mod file for newer module versions.

    Exits with status 0 when every direct requirement is up to date and 1
    when at least one has a newer version (or when an error occurs).
    """
    click_ctx = click.get_current_context()

    try:
        config = _build_run_config(
            ctx.config,
            max_versions=max_versions,
            filter_=filter_,
            show_incompatible=show_incompatible,
            proxy=proxy,
        )
        has_updates = asyncio.run(
            _check_async(file, config, output_format.lower())
        )
    except ModKeeperError as exc:
        print_error(str(exc))
        logger.debug("Check failed", exc_info=True)
        click_ctx.exit(1)

    click_ctx.exit(1 if has_updates else 0)


def _build_run_config(
    base: ModKeeperConfig,
    *,
    max_versions: Optional[int],
    filter_: Optional[str],
    show_incompatible: Optional[bool],
    proxy: Optional[str],
) -> ModKeeperConfig:
    """Layer CLI flags over the file configuration and validate the result.

    Raises:
        ConfigError: A flag value is out of range or names an unknown tier.
    """
    severity_filter = parse_severity_filter(filter_) if filter_ is not None else None
    config = base.with_overrides(
        max_versions=max_versions,
        severity_filter=severity_filter,
        show_incompatible=show_incompatible,
        proxy=proxy,
    )
    return config.validate()


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _check_async(
    file: Path,
    config: ModKeeperConfig,
    output_format: str,
) -> bool:
    """Run the check and render the result.

    Returns:
        ``True`` if any direct requirement is outdated.

    Raises:
        ModKeeperError: The manifest cannot be read or parsed.
    """
    show_progress = output_format != "json"

    logger.info("Checking %s...", file)
    gomod = GoModParser().parse_file(file)

    declared: List[Tuple[str, str]] = [
        (req.path, req.version) for req in gomod.direct_requirements
    ]
    logger.info(
        "Found %d direct requirement(s), %d indirect skipped",
        len(declared),
        len(gomod.indirect_requirements),
    )

    if not declared:
        if show_progress:
            print_warning(f"No direct requirements found in {file}")
        elif output_format == "json":
            _display_json((), EvaluationResult(), FetchResult())
        return False

    proxy_url = resolve_proxy_url(config.proxy)
    logger.info("Using module proxy %s", proxy_url)

    async with HTTPClient() as http:
        source = ModuleProxySource(http, proxy_url=proxy_url)
        fetched = await source.fetch_all(path for path, _ in declared)

    evaluator = DependencyEvaluator(VersionFilter.from_config(config))
    evaluation = evaluator.evaluate_all(
        declared,
        {path: fetched.candidates_for(path) for path, _ in declared},
    )
    ranked = rank(evaluation.reports)

    if output_format == "json":
        _display_json(ranked, evaluation, fetched)
    elif not ranked:
        if show_progress:
            print_success("There are no newer versions that fulfill provided requirements.")
            console = get_raw_console()
            console.print(f"Filter: {_describe_filter(config)}", style="dim")
    elif output_format == "simple":
        _display_simple(ranked)
    else:
        _display_table(ranked, config)

    if show_progress:
        _display_footer(ranked, evaluation, fetched)

    return bool(ranked)


def _describe_filter(config: ModKeeperConfig) -> str:
    labels = [tier.label for tier in sorted(config.severity_filter, reverse=True)]
    if config.show_incompatible:
        labels.append(SeverityTier.INCOMPATIBLE.label)
    return ",".join(labels) or "<none>"


# ---------------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------------


def versions_per_row(console_width: int, max_versions: int) -> int:
    """How many versions fit on one table row.

    Never more than ``max_versions`` and never fewer than one, whatever
    the terminal width.
    """
    fit = (console_width - TABLE_FIXED_COLUMNS_WIDTH) // VERSION_CELL_WIDTH
    return max(1, min(max_versions, fit))


def chunk_versions(versions: Sequence[Any], size: int) -> List[List[Any]]:
    """Split ``versions`` into consecutive rows of at most ``size`` items."""
    if size < 1:
        raise ValueError("size must be at least 1")
    return [list(versions[start : start + size]) for start in range(0, len(versions), size)]


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _display_table(ranked: Sequence[RankedReport], config: ModKeeperConfig) -> None:
    """Render ranked modules as a Rich table.

    Long version lists wrap onto continuation rows; a separator closes each
    module::

        ┏━━━┳━━━━━━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┓
        ┃ # ┃ Dependency           ┃ Current Version ┃ Available Versions          ┃
        ┡━━━╇━━━━━━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┩
        │ 1 │ github.com/a/b       │ v1.2.0          │ v1.2.1, v1.3.0, v2.0.0      │
        ├───┼──────────────────────┼─────────────────┼─────────────────────────────┤
    """
    per_row = versions_per_row(get_console_width(), config.max_versions)
    logger.debug("Placing up to %d version(s) per row", per_row)

    rows: List[Dict[str, Any]] = []
    for entry in ranked:
        colored = [colorize_tier(tier, version) for version, tier in entry.versions]
        chunks = chunk_versions(colored, per_row)

        for index, chunk in enumerate(chunks):
            first = index == 0
            rows.append(
                {
                    "#": str(entry.rank) if first else "",
                    "Dependency": f"[module]{entry.name}[/module]" if first else "",
                    "Current Version": entry.current_version if first else "",
                    "Available Versions": ", ".join(chunk),
                    "_last": index == len(chunks) - 1,
                }
            )

    legend = " ".join(colorize_tier(tier) for tier in SeverityTier)
    print_table(
        rows,
        headers=["#", "Dependency", "Current Version", "Available Versions"],
        caption=legend,
        column_styles={
            "#": {"justify": "center", "max_width": 3, "no_wrap": True},
            "Dependency": {"justify": "center", "max_width": 30},
            "Current Version": {"justify": "center", "max_width": 17},
            "Available Versions": {"justify": "left"},
        },
        row_end_section=lambda _index, row: bool(row["_last"]),
    )


def _display_simple(ranked: Sequence[RankedReport]) -> None:
    """Render ranked modules one per line.

    Example::

        1. github.com/a/b  v1.2.0 -> v1.2.1, v1.3.0, v2.0.0 [major]
    """
    console = get_raw_console()
    for entry in ranked:
        versions = ", ".join(colorize_tier(tier, version) for version, tier in entry.versions)
        worst = entry.report.worst_tier
        console.print(
            f"{entry.rank}. {entry.name:40} {entry.current_version:12} -> {versions} "
            f"\\[{colorize_tier(worst)}]"
        )


def _display_json(
    ranked: Sequence[RankedReport],
    evaluation: EvaluationResult,
    fetched: FetchResult,
) -> None:
    """Render the result as JSON for machine consumption.

    Example::

        {
          "outdated": [
            {"rank": 1, "name": "github.com/a/b", "current_version": "v1.2.0",
             "status": "outdated", "versions": [...], "worst_tier": "major"}
          ],
          "excluded": [],
          "fetch_failures": {}
        }
    """
    data = {
        "outdated": [entry.to_json() for entry in ranked],
        "excluded": list(evaluation.excluded),
        "fetch_failures": {path: str(exc) for path, exc in fetched.failures.items()},
    }
    click.echo(json.dumps(data, indent=2))


def _display_footer(
    ranked: Sequence[RankedReport],
    evaluation: EvaluationResult,
    fetched: FetchResult,
) -> None:
    if evaluation.excluded:
        print_warning(
            f"Skipped {len(evaluation.excluded)} module(s) with unparseable versions: "
            f"{', '.join(evaluation.excluded)}"
        )
    if fetched.failures:
        print_warning(
            f"Could not fetch versions for {len(fetched.failures)} module(s): "
            f"{', '.join(sorted(fetched.failures))}"
        )
    if ranked:
        print_warning(f"\n{len(ranked)} module(s) have newer versions available")
