"""Single-attempt HTTP fetcher for pages and media."""

import logging
from urllib.parse import urlsplit

import httpx

from schemas.clip import FetchedPage

from .exceptions import NetworkFault

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Fetches URLs over HTTP and returns the response as data.

    A fetch is a single attempt: non-2xx responses are returned, not
    raised, so callers own their retry and failure policy. Only transport
    failures raise.

    Example:
        async with ContentFetcher(timeout=10) as fetcher:
            page = await fetcher.fetch("https://example.com/post")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ):
        """Initialize the fetcher.

        Args:
            http_client: Optional HTTP client. If not provided, one will be
                         created lazily and closed by :meth:`close`.
            timeout: Request timeout in seconds for an owned client
            headers: Headers for an owned client
        """
        self._client = http_client
        self._owns_client = http_client is None
        self.timeout = timeout
        self.headers = dict(headers or {})

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ContentFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> FetchedPage:
        """Fetch *url* once.

        Args:
            url: Absolute URL to fetch

        Returns:
            FetchedPage with the status code and raw body

        Raises:
            NetworkFault: If no response could be obtained
        """
        client = self._get_client()
        try:
            response = await client.get(url)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise NetworkFault(f"Request to {url} failed: {e}", url=url) from e

        logger.debug(f"GET {url} -> {response.status_code}")
        return FetchedPage(
            url=url,
            hostname=urlsplit(url).hostname or "",
            status_code=response.status_code,
            content=response.content,
            encoding=response.encoding,
        )
