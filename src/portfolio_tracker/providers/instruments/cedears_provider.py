"""cedears.ar provider: CEDEAR and local equity prices in ARS."""
import asyncio
import logging
from typing import Any

from portfolio_tracker.db.models import AssetType, Currency
from portfolio_tracker.providers.core import (
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
)
from portfolio_tracker.providers.core.utils import normalize_ticker
from portfolio_tracker.schemas import AssetPrice

logger = logging.getLogger(__name__)

# Endpoint per asset type.
ENDPOINTS = {
    AssetType.CEDEAR: "/cedears",
    AssetType.EQUITY: "/acciones",
}


def parse_instruments(payload: Any, asset_type: AssetType) -> list[AssetPrice]:
    """Convert a cedears.ar list into ARS AssetPrices (last price from ``ars.c``)."""
    if not isinstance(payload, list):
        raise MalformedPayloadError(f"expected a list of {asset_type.value} rows")
    prices: list[AssetPrice] = []
    for item in payload:
        if not isinstance(item, dict) or not isinstance(item.get("ticker"), str):
            continue
        ars = item.get("ars")
        price = as_number(ars.get("c")) if isinstance(ars, dict) else None
        if price is None:
            logger.debug("Skipping %s without ARS price", item["ticker"])
            continue
        prices.append(
            AssetPrice(
                ticker=normalize_ticker(item["ticker"]),
                name=item.get("name") or item["ticker"],
                asset_type=asset_type,
                price=price,
                currency=Currency.ARS,
                logo=item.get("icon"),
            )
        )
    return prices


class CedearsProvider(HTTPQuoteSource[AssetPrice]):
    """CEDEAR and equity prices from api.cedears.ar.

    Both lists are requested concurrently; either failing fails the fetch so
    the caller keeps a consistent snapshot per source.
    """

    BASE_URL = "https://api.cedears.ar"
    name = "cedears"

    async def _fetch_type(self, asset_type: AssetType) -> list[AssetPrice]:
        return parse_instruments(await self._get_json(ENDPOINTS[asset_type]), asset_type)

    async def fetch(self) -> list[AssetPrice]:
        cedears, equities = await asyncio.gather(
            self._fetch_type(AssetType.CEDEAR), self._fetch_type(AssetType.EQUITY)
        )
        return cedears + equities
