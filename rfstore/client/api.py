"""
Store REST API client.

Thin async wrapper around httpx. Every request goes out with the session
cookie jar, and every answer comes back either as decoded JSON or as one of
the StoreError subclasses:

- 401/403 -> AuthorizationError
- any other non-success status -> OperationFailedError (server text as message)
- transport error or timeout -> OperationFailedError without a status code
"""

import logging
from types import TracebackType
from typing import Any

import httpx

from rfstore.config import settings
from rfstore.models.failure import (
    AUTH_STATUS_CODES,
    AuthorizationError,
    OperationFailedError,
)

logger = logging.getLogger(__name__)


class StoreApiClient:
    """
    Client for the storefront REST API.

    One instance per logged-in browser session: the underlying httpx client
    keeps the session cookie between calls.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. http://localhost:8080/api.
                Defaults to settings.api_base_url.
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
            client: Optional preconfigured httpx client (tests pass one with a
                mock or ASGI transport). Not closed by aclose().
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client = client
        self._owns_client = client is None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def url_for(self, path: str) -> str:
        """Absolute URL for an API path. Absolute URLs pass through."""
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        """
        Issue a request and return the decoded JSON body.

        Returns None for empty or non-JSON success bodies (the server answers
        some deletes with plain text).

        Raises:
            AuthorizationError: On 401/403
            OperationFailedError: On any other failure
        """
        url = self.url_for(path)
        logger.debug("%s %s", method, url)

        try:
            response = await self._http().request(method, url, json=json)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise OperationFailedError(
                message=f"Could not reach the store ({type(e).__name__})",
                detail=str(e),
            ) from e

        if response.status_code in AUTH_STATUS_CODES:
            logger.info("%s %s rejected with HTTP %d", method, url, response.status_code)
            raise AuthorizationError(status_code=response.status_code, detail=response.text)

        if not response.is_success:
            text = response.text.strip()
            logger.warning("%s %s failed: HTTP %d %s", method, url, response.status_code, text)
            raise OperationFailedError(
                message=text or "Operation failed",
                detail=f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.debug("%s %s returned a non-JSON body", method, url)
            return None

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "StoreApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
