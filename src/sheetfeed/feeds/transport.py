"""HTTP transport used to fetch feed documents."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Abstract base class for feed transports."""

    @abstractmethod
    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[dict[str, str]] = None,
    ) -> tuple[int, str]:
        """Perform a request and return ``(status_code, body)``.

        Implementations raise TransportError when no response was received.
        """
        pass

    async def aclose(self) -> None:
        """Release any pooled connections."""
        pass


class HttpxTransport(Transport):
    """Transport backed by an ``httpx.AsyncClient``."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the underlying client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[dict[str, str]] = None,
    ) -> tuple[int, str]:
        try:
            response = await self.client.request(method, url, headers=headers or {})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response.status_code, response.text

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
