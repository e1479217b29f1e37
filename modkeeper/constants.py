"""
Centralized constants for modkeeper.

This module defines immutable configuration values used across modkeeper,
including network settings, module proxy endpoints, display limits, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "modkeeper/{version} (+https://github.com/modkeeper/modkeeper)"

# ---------------------------------------------------------------------------
# Go module proxy
# ---------------------------------------------------------------------------

#: Public Go module proxy used when neither config nor GOPROXY name one.
DEFAULT_PROXY_URL: Final[str] = "https://proxy.golang.org"

#: Version list endpoint, relative to the proxy base URL.
PROXY_VERSION_LIST_PATH: Final[str] = "{module}/@v/list"

#: GOPROXY entries that do not name a fetchable proxy.
GOPROXY_NON_URL_ENTRIES: Final[Sequence[str]] = ("direct", "off")

#: Environment variable holding the Go proxy list.
GOPROXY_ENV_VAR: Final[str] = "GOPROXY"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of concurrent proxy requests.
DEFAULT_MAX_CONCURRENCY: Final[int] = 10

# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

#: Default manifest file name.
GO_MOD_FILE: Final[str] = "go.mod"

#: Comment marker flagging a requirement as transitive.
INDIRECT_MARKER: Final[str] = "indirect"

#: Build metadata marking a v2+ release published without a /vN path suffix.
INCOMPATIBLE_BUILD_TAG: Final[str] = "incompatible"

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Display and filtering defaults
# ---------------------------------------------------------------------------

#: Default number of versions shown per table row.
DEFAULT_MAX_VERSIONS: Final[int] = 10

#: Inclusive bounds accepted for ``max_versions``.
MIN_MAX_VERSIONS: Final[int] = 1
MAX_MAX_VERSIONS: Final[int] = 1000

#: Tier names accepted by ``--filter``.
FILTER_TIER_NAMES: Final[Sequence[str]] = ("major", "minor", "patch")

#: Whether +incompatible releases are shown by default.
DEFAULT_SHOW_INCOMPATIBLE: Final[bool] = False

#: Terminal columns reserved for the rank, dependency and current version.
TABLE_FIXED_COLUMNS_WIDTH: Final[int] = 60

#: Approximate terminal columns taken by one rendered version.
VERSION_CELL_WIDTH: Final[int] = 10

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
