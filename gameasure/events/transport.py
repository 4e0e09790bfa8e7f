"""
HTTP transport shared by every dispatch of an engine.
"""

from http.cookiejar import CookieJar, DefaultCookiePolicy
import logging
from typing import Dict, Optional

import httpx

from gameasure.constants import REQUEST_TIMEOUT
from gameasure.errors import ServerRejectionError, TransportError
from gameasure.meta import get_meta_http_headers


def rejecting_cookie_jar() -> CookieJar:
    """
    Cookie jar whose policy accepts no domain, so nothing is ever stored.
    """
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


class Transport:
    """
    Long lived, non persistent HTTP client issuing independent POSTs.

    Nothing carries over between requests: the cookie jar refuses every
    cookie the endpoint sets and every request asks intermediaries to
    bypass their caches.

    Args:
        timeout: Request timeout in seconds.
        proxy: Optional proxy URL every request goes through.
        http_transport: Optional httpx transport, used to swap the network out.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        proxy: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.proxy = proxy
        self.http_transport = http_transport

        # HTTP client (created when needed, on the dispatch loop)
        self.http_client: Optional[httpx.AsyncClient] = None

        self.logger = logging.getLogger(__name__)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "text/plain; charset=utf-8"}
        headers.update(get_meta_http_headers())
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self.http_client is None:
            self.http_client = httpx.AsyncClient(
                timeout=self.timeout,
                proxy=self.proxy,
                cookies=rejecting_cookie_jar(),
                transport=self.http_transport,
                follow_redirects=False,
            )
        return self.http_client

    async def post(self, url: str, body: bytes) -> httpx.Response:
        """
        POST ``body`` to ``url`` once.

        Raises:
            TransportError: The request never produced a response.
            ServerRejectionError: The response status is not 200.
        """
        client = self._get_client()

        try:
            response = await client.post(url, content=body, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(e) from e

        self.logger.debug("POST %s -> %s", url, response.status_code)

        if response.status_code != 200:
            raise ServerRejectionError(response.status_code)

        return response

    async def aclose(self) -> None:
        """Close the HTTP client asynchronously."""
        if self.http_client:
            await self.http_client.aclose()
            self.http_client = None
            self.logger.debug("HTTP client closed")
