"""PIX provider: BRL payment quotes, paid with ARS or USD."""
import logging
from typing import Any

from portfolio_tracker.providers.core import (
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
)
from portfolio_tracker.providers.core.utils import spread, title_case
from portfolio_tracker.schemas import Quote

logger = logging.getLogger(__name__)

SOURCE_NAME = "pix.ferminrp.com"

# PIX symbol -> currency the user pays with.
SYMBOL_CURRENCY = {
    "BRLARS": "ARS",
    "BRLUSD": "USD",
    "BRLUSDT": "USD",
}


def parse_pix(payload: Any) -> list[Quote]:
    """Convert a /quotes body (provider -> {url, quotes}) into Quotes.

    Quotes paid in ARS come first, then USD. Unknown symbols are dropped.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError("expected an object of PIX providers")
    ars: list[Quote] = []
    usd: list[Quote] = []
    for provider, info in payload.items():
        if not isinstance(info, dict) or not isinstance(info.get("quotes"), list):
            continue
        for row in info["quotes"]:
            currency = SYMBOL_CURRENCY.get(row.get("symbol")) if isinstance(row, dict) else None
            if currency is None:
                logger.debug("Skipping PIX quote from %s: %r", provider, row)
                continue
            buy = as_number(row.get("buy"))
            sell = as_number(row.get("sell"))
            quote = Quote(
                source=info.get("url") or SOURCE_NAME,
                name=f"{title_case(provider)} - paga con {currency}",
                key=provider,
                buy=buy,
                sell=sell,
                spread=spread(buy, sell),
                is_24x7=True,
                variation=0.0,
                logo=info.get("logo") or None,
                currency=currency,
            )
            (ars if currency == "ARS" else usd).append(quote)
    return ars + usd


class PixProvider(HTTPQuoteSource[Quote]):
    """PIX quotes from pix.ferminrp.com."""

    BASE_URL = "https://pix.ferminrp.com"
    name = "pix"

    async def fetch(self) -> list[Quote]:
        return parse_pix(await self._get_json("/quotes"))
