"""
JSON fetcher for vendor calls, backed by httpx.
"""

from collections.abc import Mapping

import httpx
from structlog import get_logger

from paywall_access.exceptions import UnexpectedStatusError

logger = get_logger(__name__)


class Xhr:
    """
    Fetch JSON from vendor endpoints on behalf of one reader.

    When credentials are included the reader's cookies are forwarded, the
    way a browser would send them with a credentialed request.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        reader_cookies: Mapping[str, str] | None = None,
    ):
        self._http_client = http_client
        self.reader_cookies = dict(reader_cookies or {})

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    async def fetch_json(self, url: str, credentials: str = "omit") -> httpx.Response:
        """
        GET `url` expecting JSON.

        Returns the response for any 2xx status. Raises UnexpectedStatusError
        (carrying the response) otherwise; transport errors propagate as-is.
        """
        request = self.http_client.build_request(
            "GET", url, headers={"Accept": "application/json"}
        )
        # Only this reader's cookies, never the shared client's jar
        request.headers.pop("Cookie", None)
        if credentials == "include" and self.reader_cookies:
            httpx.Cookies(self.reader_cookies).set_cookie_header(request)

        response = await self.http_client.send(request)
        logger.debug("vendor_fetch_completed", url=url, status=response.status_code)

        if not 200 <= response.status_code < 300:
            raise UnexpectedStatusError(response)
        return response

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
