"""Models for the CoinGecko provider (API params)."""
from pydantic import BaseModel


class CoinGeckoMarketsParams(BaseModel):
    """Params for /coins/markets."""

    vs_currency: str = "usd"
    order: str = "market_cap_desc"
    per_page: int = 100
    page: int = 1
    sparkline: str = "false"
