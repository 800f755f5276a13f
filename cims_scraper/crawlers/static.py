"""
Static HTML crawler built on httpx.

Fetches pages over a pooled async client and hands back raw HTML.
Requests are never retried: any transport error or non-success status
becomes a NetworkError.
"""

from typing import Optional, Dict
import httpx
import logging

from ..exceptions import NetworkError

logger = logging.getLogger(__name__)


class StaticCrawler:
    """
    Wrapper for fetching static HTML pages.

    Uses httpx for async HTTP requests; parsing happens in the extractors.
    Concurrency is bounded by the caller (see AdmissionGate), not here.
    """

    DEFAULT_USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'

    def __init__(
        self,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the static crawler.

        Args:
            timeout: Request timeout in seconds
            headers: Custom HTTP headers
            user_agent: User-Agent header, used when headers is not given
            transport: Custom httpx transport (e.g., httpx.MockTransport in tests)
        """
        self.timeout = timeout
        self.headers = headers or {
            'User-Agent': user_agent or self.DEFAULT_USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'ca,es;q=0.9,en;q=0.8',
            'Accept-Encoding': 'gzip, deflate',
        }
        self.transport = transport
        # Reusable HTTP client with connection pooling
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers=self.headers,
                transport=self.transport,
                # Catalog pages are fetched without a cap, so the pool must not add one
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=None,
                    keepalive_expiry=30.0
                )
            )
        return self._client

    async def close(self):
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False

    async def _send(self, method: str, url: str, data: Optional[Dict[str, str]] = None) -> str:
        client = await self._get_client()
        try:
            response = await client.request(method, url, data=data)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise NetworkError(url, f"{method} request failed: {e}") from e

        if not response.is_success:
            logger.error(f"{method} {url} returned status {response.status_code}")
            raise NetworkError(
                url,
                f"{method} request returned status {response.status_code}",
                status_code=response.status_code
            )
        return response.text

    async def fetch(self, url: str) -> str:
        """
        Fetch a URL and return HTML content.

        Args:
            url: URL to fetch

        Returns:
            HTML content as string

        Raises:
            NetworkError: On transport failure or non-success status
        """
        logger.debug(f"StaticCrawler fetching: {url}")
        return await self._send('GET', url)

    async def post_form(self, url: str, data: Dict[str, str]) -> str:
        """
        POST a form-encoded body and return the response text.

        Args:
            url: Endpoint URL
            data: Form fields

        Raises:
            NetworkError: On transport failure or non-success status
        """
        logger.debug(f"StaticCrawler posting to {url}: {data}")
        return await self._send('POST', url, data=data)

