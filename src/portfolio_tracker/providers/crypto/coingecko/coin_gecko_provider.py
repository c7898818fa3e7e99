"""CoinGecko price provider for cryptocurrencies."""
import logging
import os
from typing import Any

import httpx

from portfolio_tracker.db.models import AssetType, Currency
from portfolio_tracker.providers.core import (
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
)
from portfolio_tracker.providers.core.utils import normalize_ticker
from portfolio_tracker.providers.crypto.coingecko.models import CoinGeckoMarketsParams
from portfolio_tracker.schemas import AssetPrice

logger = logging.getLogger(__name__)


def parse_coin_markets(payload: Any) -> list[AssetPrice]:
    """Convert a /coins/markets body into USD AssetPrices keyed by symbol."""
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of coins")
    prices: list[AssetPrice] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        symbol, price = item.get("symbol"), as_number(item.get("current_price"))
        if not isinstance(symbol, str) or price is None:
            logger.debug("Skipping coin without symbol/price: %s", item.get("id"))
            continue
        prices.append(
            AssetPrice(
                ticker=normalize_ticker(symbol),
                name=item.get("name") or symbol,
                asset_type=AssetType.CRYPTO,
                price=price,
                currency=Currency.USD,
                logo=item.get("image"),
                provider_id=item.get("id"),
            )
        )
    return prices


class CoinGeckoProvider(HTTPQuoteSource[AssetPrice]):
    """Crypto prices in USD via the CoinGecko API.

    Uses the Pro endpoint when an API key is configured.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"
    name = "coingecko"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        per_page: int = 100,
    ) -> None:
        """Initialize the CoinGecko provider.

        Args:
            api_key: CoinGecko API key. Defaults to COINGECKO_API_KEY env var.
            client: Optional shared httpx client.
            timeout: Request timeout in seconds.
            per_page: Number of coins (by market cap) to load.
        """
        self._api_key = api_key or os.getenv("COINGECKO_API_KEY")
        headers = {"x-cg-pro-api-key": self._api_key} if self._api_key else None
        base = self.PRO_BASE_URL if self._api_key else self.BASE_URL
        super().__init__(client=client, base_url=base, timeout=timeout, headers=headers)
        self._per_page = per_page

    async def fetch(self) -> list[AssetPrice]:
        """Fetch top coins by market cap (single API call)."""
        params = CoinGeckoMarketsParams(per_page=self._per_page).model_dump()
        return parse_coin_markets(await self._get_json("/coins/markets", params=params))
