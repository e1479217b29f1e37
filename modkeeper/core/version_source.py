"""Published-version lookup through a Go module proxy.

Implements the ``$GOPROXY/<module>/@v/list`` endpoint of the module proxy
protocol: the response body lists one version per line. Every module is
fetched at most once per :class:`ModuleProxySource`, and batches are
fetched concurrently.

Typical usage::

    async with HTTPClient() as http:
        source = ModuleProxySource(http, proxy_url=resolve_proxy_url(None))
        result = await source.fetch_all(["github.com/spf13/cobra"])
        print(result.versions["github.com/spf13/cobra"])
"""

from __future__ import annotations

import os
import asyncio
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from modkeeper.exceptions import NetworkError, ProxyError
from modkeeper.utils.http import NOT_FOUND_STATUS_CODES, HTTPClient
from modkeeper.utils.logger import get_logger
from modkeeper.constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_PROXY_URL,
    GOPROXY_ENV_VAR,
    GOPROXY_NON_URL_ENTRIES,
    PROXY_VERSION_LIST_PATH,
)

logger = get_logger("version_source")

__all__ = [
    "FetchResult",
    "ModuleProxySource",
    "escape_module_path",
    "resolve_proxy_url",
]


def escape_module_path(path: str) -> str:
    """Escape a module path for use in proxy URLs.

    Every upper-case ASCII letter is replaced by ``!`` followed by its
    lower-case form, so paths stay distinct on case-insensitive storage.

    Example::

        >>> escape_module_path("github.com/Azure/azure-sdk-for-go")
        'github.com/!azure/azure-sdk-for-go'
    """
    return "".join(f"!{char.lower()}" if "A" <= char <= "Z" else char for char in path)


def resolve_proxy_url(
    explicit: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Pick the module proxy base URL.

    Precedence: ``explicit`` (CLI or config file), then the first entry of
    ``GOPROXY`` that is an actual URL, then ``https://proxy.golang.org``.

    Args:
        explicit: Proxy URL chosen by the user, if any.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Proxy base URL without a trailing slash.
    """
    if explicit:
        return explicit.rstrip("/")

    env = os.environ if environ is None else environ
    raw = env.get(GOPROXY_ENV_VAR, "")

    # GOPROXY entries are separated by "," or "|"
    for entry in raw.replace("|", ",").split(","):
        entry = entry.strip()
        if entry and entry not in GOPROXY_NON_URL_ENTRIES:
            return entry.rstrip("/")

    return DEFAULT_PROXY_URL


def parse_version_list(body: str) -> FrozenSet[str]:
    """Split an ``@v/list`` response body into version strings."""
    return frozenset(line.strip() for line in body.splitlines() if line.strip())


@dataclass
class FetchResult:
    """Outcome of fetching version lists for a batch of modules.

    Attributes:
        versions: Published versions per module path that was fetched.
        failures: Error per module path whose fetch failed.
    """

    versions: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    failures: Dict[str, Exception] = field(default_factory=dict)

    def candidates_for(self, path: str) -> FrozenSet[str]:
        """Versions for ``path``; a failed or missing fetch yields none."""
        return self.versions.get(path, frozenset())


class ModuleProxySource:
    """Version lists for Go modules, cached per module path.

    Args:
        http_client: Shared HTTP client (owns retries and timeouts).
        proxy_url: Proxy base URL, e.g. ``https://proxy.golang.org``.
        concurrent_limit: Maximum concurrent proxy lookups.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        proxy_url: str = DEFAULT_PROXY_URL,
        concurrent_limit: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.http_client = http_client
        self.proxy_url = proxy_url.rstrip("/")
        self._semaphore = asyncio.Semaphore(concurrent_limit)
        self._versions: Dict[str, FrozenSet[str]] = {}

    def version_list_url(self, path: str) -> str:
        """Return the ``@v/list`` URL for a module path."""
        relative = PROXY_VERSION_LIST_PATH.format(module=escape_module_path(path))
        return f"{self.proxy_url}/{relative}"

    async def get_versions(self, path: str) -> FrozenSet[str]:
        """Fetch (or return cached) published versions of ``path``.

        A module the proxy does not know (404/410) has no versions.

        Raises:
            NetworkError: The proxy could not be reached or kept failing.
        """
        if path in self._versions:
            return self._versions[path]

        async with self._semaphore:
            # Another coroutine may have populated the cache while we waited
            if path in self._versions:
                return self._versions[path]

            url = self.version_list_url(path)
            try:
                body = await self.http_client.get_text(url)
            except ProxyError as exc:
                if exc.status_code not in NOT_FOUND_STATUS_CODES:
                    raise
                logger.info("Proxy has no versions of %s", path)
                body = ""

            versions = parse_version_list(body)
            self._versions[path] = versions
            logger.debug("Fetched %d version(s) of %s", len(versions), path)
            return versions

    async def fetch_all(self, paths: Iterable[str]) -> FetchResult:
        """Fetch version lists for many modules concurrently.

        A failure for one module is recorded in :attr:`FetchResult.failures`
        and never stops the others.
        """
        unique_paths = list(dict.fromkeys(paths))
        responses = await asyncio.gather(
            *(self.get_versions(path) for path in unique_paths),
            return_exceptions=True,
        )

        result = FetchResult()
        for path, response in zip(unique_paths, responses):
            if isinstance(response, NetworkError):
                logger.warning("Could not fetch versions of %s: %s", path, response)
                result.failures[path] = response
            elif isinstance(response, BaseException):
                raise response
            else:
                result.versions[path] = response

        return result
