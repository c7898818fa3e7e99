"""Abstract base class for external data sources."""
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

import httpx

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 10.0


class QuoteSourceABC(ABC, Generic[T]):
    """Base interface for every polled data source.

    A source fetches one endpoint (or one family of endpoints) and returns
    already-validated internal values: Quote, AssetPrice or RateOffer.
    Raising is fine; callers isolate failures per source.
    """

    name: str = "source"

    @abstractmethod
    async def fetch(self) -> list[T]:
        """Fetch and parse the current data set."""

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "QuoteSourceABC[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()


class HTTPQuoteSource(QuoteSourceABC[T]):
    """Source backed by an httpx.AsyncClient.

    Pass ``client`` to share a client (tests, connection reuse); otherwise the
    source owns one and closes it in close().
    """

    BASE_URL = ""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or self.BASE_URL,
            headers={"Accept": "application/json", **(headers or {})},
            timeout=timeout,
            follow_redirects=True,
        )

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET url and decode JSON; raises on non-2xx or undecodable body."""
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()
