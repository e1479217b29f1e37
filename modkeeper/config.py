"""Configuration file loader for modkeeper.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``modkeeper.toml``: settings under a ``[modkeeper]`` table
- ``pyproject.toml``: settings under a ``[tool.modkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``MODKEEPER_CONFIG``
2. ``modkeeper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.modkeeper]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Example (``modkeeper.toml``)::

    [modkeeper]
    max_versions = 8
    filter = ["major", "minor"]
    show_incompatible = true
    proxy = "https://goproxy.example.com"
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from modkeeper.exceptions import ConfigError
from modkeeper.models.version import SeverityTier
from modkeeper.utils.logger import get_logger
from modkeeper.constants import (
    DEFAULT_MAX_VERSIONS,
    DEFAULT_SHOW_INCOMPATIBLE,
    FILTER_TIER_NAMES,
    MAX_MAX_VERSIONS,
    MIN_MAX_VERSIONS,
)

logger = get_logger("config")

#: Tiers retained when no filter is configured.
DEFAULT_SEVERITY_FILTER: FrozenSet[SeverityTier] = frozenset(
    SeverityTier.from_label(name) for name in FILTER_TIER_NAMES
)

KNOWN_KEYS = frozenset({"max_versions", "filter", "show_incompatible", "proxy"})


@dataclass(frozen=True)
class ModKeeperConfig:
    """Parsed and validated modkeeper configuration.

    One value is built per run and handed explicitly to the evaluator and
    the presenter; nothing reads configuration from global state.

    Attributes:
        max_versions: Versions shown per table row (1 to 1000).
        severity_filter: Tiers to display out of patch, minor and major.
        show_incompatible: Whether ``+incompatible`` releases are displayed.
        proxy: Module proxy base URL, or ``None`` to use ``GOPROXY``.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    max_versions: int = DEFAULT_MAX_VERSIONS
    severity_filter: FrozenSet[SeverityTier] = DEFAULT_SEVERITY_FILTER
    show_incompatible: bool = DEFAULT_SHOW_INCOMPATIBLE
    proxy: Optional[str] = None

    source_path: Optional[Path] = field(default=None, repr=False, compare=False)

    def validate(self) -> "ModKeeperConfig":
        """Check value ranges, returning ``self`` for chaining.

        Raises:
            ConfigError: ``max_versions`` is out of range or the filter names
                an unsupported tier.
        """
        config_path = str(self.source_path) if self.source_path else None

        if not MIN_MAX_VERSIONS <= self.max_versions <= MAX_MAX_VERSIONS:
            raise ConfigError(
                f"max_versions must be between {MIN_MAX_VERSIONS} and "
                f"{MAX_MAX_VERSIONS}, got {self.max_versions}",
                config_path=config_path,
                option="max_versions",
            )

        unsupported = set(self.severity_filter) - DEFAULT_SEVERITY_FILTER
        if unsupported:
            names = ", ".join(sorted(tier.label for tier in unsupported))
            raise ConfigError(
                f"filter may only contain major, minor and patch, got {names}",
                config_path=config_path,
                option="filter",
            )

        return self

    def with_overrides(self, **overrides: Any) -> "ModKeeperConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "max_versions": self.max_versions,
            "filter": sorted(tier.label for tier in self.severity_filter),
            "show_incompatible": self.show_incompatible,
            "proxy": self.proxy,
        }


def parse_severity_filter(
    value: Union[str, Iterable[str], None],
    *,
    config_path: Optional[str] = None,
) -> FrozenSet[SeverityTier]:
    """Turn ``"major,minor"`` or ``["major", "minor"]`` into tiers.

    An empty or missing value means "no filtering" and selects every tier.

    Raises:
        ConfigError: A name other than major, minor or patch appears.
    """
    if value is None:
        return DEFAULT_SEVERITY_FILTER

    names = value.split(",") if isinstance(value, str) else list(value)
    names = [str(name).strip().lower() for name in names if str(name).strip()]
    if not names:
        return DEFAULT_SEVERITY_FILTER

    unknown = sorted(set(names) - set(FILTER_TIER_NAMES))
    if unknown:
        raise ConfigError(
            "filter can be made up only from major, minor and patch values, "
            f"got: {', '.join(unknown)}",
            config_path=config_path,
            option="filter",
        )

    return frozenset(SeverityTier.from_label(name) for name in names)


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    modkeeper_toml = cwd / "modkeeper.toml"
    if modkeeper_toml.is_file():
        logger.debug("Found modkeeper.toml: %s", modkeeper_toml)
        return modkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_modkeeper_section(pyproject_toml):
        logger.debug("Found [tool.modkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_modkeeper_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.modkeeper]`` section.

    An unreadable pyproject.toml is treated as having no section; it is not
    ours to validate.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "modkeeper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> ModKeeperConfig:
    """Load and validate modkeeper configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`ModKeeperConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return ModKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("modkeeper", {})
    else:
        section = raw.get("modkeeper", {})

    if not section:
        logger.debug("Config file found but no modkeeper section, using defaults")
        return ModKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config = replace(config, source_path=resolved).validate()

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> ModKeeperConfig:
    """Parse and type-check a ``[modkeeper]`` / ``[tool.modkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    unknown = set(section.keys()) - KNOWN_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    values: Dict[str, Any] = {}

    if "max_versions" in section:
        val = section["max_versions"]
        # bool is an int subclass; reject it explicitly
        if isinstance(val, bool) or not isinstance(val, int):
            raise ConfigError(
                f"max_versions must be an integer, got {type(val).__name__}",
                config_path=config_path,
                option="max_versions",
            )
        values["max_versions"] = val

    if "filter" in section:
        val = section["filter"]
        if not isinstance(val, (str, list)):
            raise ConfigError(
                f"filter must be a string or a list, got {type(val).__name__}",
                config_path=config_path,
                option="filter",
            )
        values["severity_filter"] = parse_severity_filter(val, config_path=config_path)

    if "show_incompatible" in section:
        val = section["show_incompatible"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"show_incompatible must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="show_incompatible",
            )
        values["show_incompatible"] = val

    if "proxy" in section:
        val = section["proxy"]
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(
                "proxy must be a non-empty string",
                config_path=config_path,
                option="proxy",
            )
        values["proxy"] = val.strip()

    return ModKeeperConfig(**values)
