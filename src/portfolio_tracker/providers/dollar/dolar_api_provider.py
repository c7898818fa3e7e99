"""DolarAPI provider: official, blue, MEP, CCL and other dollar products."""
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
from portfolio_tracker.providers.core.utils import spread
from portfolio_tracker.schemas import Quote

SOURCE_NAME = "DolarAPI"

USD_PRIORITY = (
    "USD Oficial",
    "USD Blue",
    "USD Bolsa",
    "USD CCL",
    "USD Mayorista",
    "USD Tarjeta",
    "USD Cripto",
)

_SPECIAL_NAMES = {
    "oficial": "USD Oficial",
    "contado con liquidación": "USD CCL",
    "contado con liquidacion": "USD CCL",
    "tarjeta": "USD Tarjeta",
}


def dollar_display_name(nombre: str) -> str:
    """Display name for a DolarAPI product: "blue" -> "USD Blue"."""
    special = _SPECIAL_NAMES.get(nombre.strip().lower())
    if special:
        return special
    nombre = nombre.strip()
    return f"USD {nombre[:1].upper()}{nombre[1:]}"


def _priority(name: str) -> int:
    return USD_PRIORITY.index(name) if name in USD_PRIORITY else len(USD_PRIORITY)


def parse_dolar_api(payload: Any) -> list[Quote]:
    """Convert a /v1/dolares body into Quotes ordered by product priority."""
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of dollar products")
    quotes: list[Quote] = []
    for row in payload:
        if not isinstance(row, dict) or not isinstance(row.get("nombre"), str):
            continue
        buy = as_number(row.get("compra"))
        sell = as_number(row.get("venta"))
        casa = row.get("casa")
        quotes.append(
            Quote(
                source=SOURCE_NAME,
                name=dollar_display_name(row["nombre"]),
                key=casa if isinstance(casa, str) else None,
                buy=buy,
                sell=sell,
                spread=spread(buy, sell),
                variation=as_number(row.get("variacion")),
            )
        )
    quotes.sort(key=lambda q: _priority(q.name))
    return quotes


class DolarApiProvider(HTTPQuoteSource[Quote]):
    """Dollar quotes from dolarapi.com, retried with capped exponential backoff."""

    BASE_URL = "https://dolarapi.com/v1"
    name = "dolarapi"

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
            lambda: self._get_json("/dolares"),
            max_attempts=self._max_attempts,
            backoff=self._backoff_factory(),
            retry_on=PROVIDER_EXCEPTIONS,
            label="DolarAPI /dolares",
        )
        return parse_dolar_api(payload)
