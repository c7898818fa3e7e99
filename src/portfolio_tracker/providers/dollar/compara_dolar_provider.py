"""ComparaDolar provider: dollar quotes from banks, exchanges and wallets."""
from collections.abc import Callable
from typing import Any

import httpx

from portfolio_tracker.providers.core import (
    PROVIDER_EXCEPTIONS,
    ExponentialBackoff,
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
    retry_async,
)
from portfolio_tracker.providers.core.utils import spread, title_case
from portfolio_tracker.schemas import Quote

SOURCE_NAME = "ComparaDolar"


def by_spread(quote: Quote) -> tuple[bool, float]:
    """Sort key: narrowest spread first, quotes without spread last."""
    return (quote.spread is None, quote.spread or 0.0)


def parse_compara_dolar(payload: Any) -> list[Quote]:
    """Convert a /quotes body into Quotes sorted by spread."""
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of quotes")
    quotes: list[Quote] = []
    for row in payload:
        if not isinstance(row, dict) or not isinstance(row.get("name"), str):
            continue
        buy = as_number(row.get("bid"))
        sell = as_number(row.get("ask"))
        quotes.append(
            Quote(
                source=row.get("url") or SOURCE_NAME,
                name=title_case(row["name"]),
                buy=buy,
                sell=sell,
                spread=spread(buy, sell),
                is_24x7=bool(row.get("is24x7", False)),
                logo=row.get("logoUrl") or None,
            )
        )
    quotes.sort(key=by_spread)
    return quotes


class ComparaDolarProvider(HTTPQuoteSource[Quote]):
    """Dollar quotes from api.comparadolar.ar."""

    BASE_URL = "https://api.comparadolar.ar"
    name = "comparadolar"

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        max_attempts: int = 3,
        backoff_factory: Callable[[], ExponentialBackoff] = ExponentialBackoff,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._max_attempts = max_attempts
        self._backoff_factory = backoff_factory

    async def fetch(self) -> list[Quote]:
        payload = await retry_async(
            lambda: self._get_json("/quotes"),
            max_attempts=self._max_attempts,
            backoff=self._backoff_factory(),
            retry_on=PROVIDER_EXCEPTIONS,
            label="ComparaDolar /quotes",
        )
        return parse_compara_dolar(payload)
