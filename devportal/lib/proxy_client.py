"""Client for the portal's outbound HTTP proxy gateway.

The gateway performs the real request to a component endpoint and returns the
upstream JSON body annotated with two synthetic fields:

- ``componentSuccess``: True iff the upstream answered with a 2xx
- ``statusCode``: the upstream's raw HTTP status code
"""

import logging
from typing import Any

import httpx

from devportal.lib.cancellation import CancellationToken, RequestAborted

logger = logging.getLogger(__name__)

DEFAULT_PROXY_PATH = "/cis-public/proxy"
DEFAULT_TIMEOUT_SECONDS = 10.0

__all__ = ["ProxyClient", "ProxyError", "RequestAborted"]


class ProxyError(Exception):
    """The proxy call itself could not complete."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ProxyClient:
    """Issues GET requests through the proxy gateway."""

    def __init__(
        self,
        base_url: str,
        proxy_path: str = DEFAULT_PROXY_PATH,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize proxy client.

        Args:
            base_url: Base URL of the portal backend hosting the proxy
            proxy_path: Path of the proxy endpoint
            token: Optional bearer token forwarded to the proxy
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.proxy_path = proxy_path
        self.timeout = timeout

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def get(self, url: str, cancel_token: CancellationToken | None = None) -> dict[str, Any]:
        """Fetch a component endpoint through the proxy.

        Args:
            url: Target component URL
            cancel_token: Optional token aborting the request

        Returns:
            Upstream body plus componentSuccess/statusCode

        Raises:
            RequestAborted: If the token was cancelled
            ProxyError: On transport failure, non-2xx proxy status or bad JSON
        """
        if cancel_token is None:
            response = await self._send(url)
        else:
            cancel_token.raise_if_cancelled(url)
            response = await cancel_token.guard(self._send(url), url=url)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProxyError(
                f"Proxy returned HTTP {response.status_code}",
                status_code=response.status_code,
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ProxyError("Proxy returned malformed JSON") from e

        if not isinstance(body, dict):
            raise ProxyError("Proxy returned a non-object JSON body")

        return body

    async def _send(self, url: str) -> httpx.Response:
        try:
            return await self.client.get(self.proxy_path, params={"url": url})
        except httpx.TimeoutException as e:
            raise ProxyError(f"Proxy request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ProxyError(str(e) or e.__class__.__name__) from e

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "ProxyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
