"""
AUR Client — async access to the AUR RPC interface and PKGBUILDs.

Thin transport layer around the parsers:
- RPC search/msearch/info with anchored-query filtering
- PKGBUILD retrieval from the AUR cgit frontend
- Exponential backoff on timeouts, connection errors and rate limiting
"""

import asyncio
import logging
from functools import partial

import httpx

from aurkit.core.config import ClientConfig
from aurkit.core.errors import (
    EmptyInputError,
    MalformedResponseError,
    RemoteError,
    TransportError,
)
from aurkit.core.package import AURPackage
from aurkit.core.resilience import ExponentialBackoff
from aurkit.core.search import AnchoredQuery
from aurkit.models.package import RpcRecord, RpcResultSet
from aurkit.parsers.rpc import iter_json_events, map_info_response, map_search_response

logger = logging.getLogger(__name__)


class AURClient:
    """
    Async AUR client.

    Usage:
        async with AURClient(ClientConfig.from_env()) as aur:
            results = await aur.search("^yay$")
    """

    VALID_METHODS = frozenset({"search", "info", "msearch"})

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ClientConfig()
        self.backoff = ExponentialBackoff.from_config(self.config)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AURClient":
        timeout = httpx.Timeout(self.config.timeout, connect=self.config.connect_timeout)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("AURClient must be used as an async context manager")
        return self._client

    # ──────────────────────────────────────────────
    # URLs
    # ──────────────────────────────────────────────

    def rpc_url(self, method: str, arg: str) -> str:
        """Build the RPC URL for a method call."""
        if method not in self.VALID_METHODS:
            raise ValueError(f"{method!r} is not a valid AUR RPC method")

        params = {"v": self.config.rpc_version, "type": method, "arg": arg}
        return str(httpx.URL(f"{self.config.base_url}/rpc/", params=params))

    def pkgbuild_url(self, name: str) -> str:
        return str(httpx.URL(f"{self.config.base_url}/cgit/aur.git/plain/PKGBUILD", params={"h": name}))

    # ──────────────────────────────────────────────
    # HTTP Layer
    # ──────────────────────────────────────────────

    async def _request(self, url: str, attempt: int = 0) -> httpx.Response:
        """Make HTTP request with exponential backoff and retry logic."""
        try:
            resp = await self.http.get(url)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            if self.backoff.should_retry(attempt):
                delay = self.backoff.calculate_delay(attempt)
                logger.warning(
                    f"Request failed ({type(e).__name__}), retry {attempt + 1} after {delay:.1f}s"
                )
                await asyncio.sleep(delay)
                return await self._request(url, attempt + 1)
            raise TransportError(f"Request failed after {attempt + 1} attempts: {url}") from e

        if resp.status_code == 429:
            if self.backoff.should_retry(attempt):
                delay = self.backoff.retry_after(resp.headers.get("Retry-After"), attempt)
                logger.warning(f"Rate limited by AUR. Waiting {delay:.1f}s...")
                await asyncio.sleep(delay)
                return await self._request(url, attempt + 1)
            raise TransportError(f"Rate limited after {attempt + 1} attempts: {url}")

        return resp

    async def _get(self, url: str) -> httpx.Response:
        """GET a URL, raising EmptyInputError when nothing was retrieved."""
        resp = await self._request(url)

        if resp.status_code == 404:
            raise EmptyInputError(f"Not found: {url}")
        if resp.status_code != 200:
            raise TransportError(f"HTTP error status {resp.status_code}: {url}")
        if not resp.content.strip():
            raise EmptyInputError(f"Empty response: {url}")

        logger.debug(f"GET {url} ({len(resp.content)} bytes)")
        return resp

    async def fetch(self, url: str) -> str:
        """Retrieve a URL as text."""
        resp = await self._get(url)
        return resp.text

    # ──────────────────────────────────────────────
    # RPC
    # ──────────────────────────────────────────────

    async def search(self, query: str) -> RpcResultSet:
        """
        Search package names and descriptions.

        Leading ``^`` / trailing ``$`` anchors are stripped from the remote
        query and matched against the returned names.

        Raises:
            RemoteError: If the AUR rejects the query.
        """
        anchored = AnchoredQuery.parse(query)
        resp = await self._get(self.rpc_url("search", anchored.remote_query))
        results = map_search_response(iter_json_events(resp.content), query)
        logger.debug(f"Search {query!r}: {len(results)} results")
        return results

    async def msearch(self, maintainer: str) -> RpcResultSet:
        """List the packages of a maintainer."""
        resp = await self._get(self.rpc_url("msearch", maintainer))
        return map_search_response(iter_json_events(resp.content))

    async def info(self, name: str) -> RpcRecord | None:
        """
        Look up one package.

        Returns:
            The package record, or None when the package does not exist or
            the response could not be parsed.
        """
        resp = await self._get(self.rpc_url("info", name))
        try:
            return map_info_response(iter_json_events(resp.content))
        except (RemoteError, MalformedResponseError) as e:
            logger.warning(f"Info RPC for {name!r} failed: {e}")
            return None

    # ──────────────────────────────────────────────
    # PKGBUILDs
    # ──────────────────────────────────────────────

    async def fetch_pkgbuild(self, name: str) -> str:
        """Download the PKGBUILD text of a package."""
        try:
            return await self.fetch(self.pkgbuild_url(name))
        except EmptyInputError:
            logger.error(f"Failed to download PKGBUILD for {name}")
            raise

    async def get(self, name: str, strict: bool = True) -> AURPackage | None:
        """
        Return a package handle, or None if the package does not exist.

        The PKGBUILD is downloaded lazily by AURPackage.get_pkgbuild(),
        which must be awaited while this client is open.
        """
        info = await self.info(name)
        if info is None:
            return None
        return AURPackage(
            name=name, loader=partial(self.fetch_pkgbuild, name), info=info, strict=strict
        )
