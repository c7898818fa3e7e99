"""Resolution of the CCL reference rate used for ARS/USD conversion."""
import math
from collections.abc import Iterable

from portfolio_tracker.schemas import Quote

REFERENCE_KEY = "contadoconliqui"
REFERENCE_NAMES = ("usd ccl", "contado con liquidación", "contado con liquidacion")


def find_reference_quote(quotes: Iterable[Quote]) -> Quote | None:
    """The CCL quote: by provider key first, then by display name."""
    quotes = list(quotes)
    for quote in quotes:
        if quote.key == REFERENCE_KEY:
            return quote
    for quote in quotes:
        if quote.name.strip().lower() in REFERENCE_NAMES:
            return quote
    return None


def resolve_reference_rate(quotes: Iterable[Quote]) -> float | None:
    """Sell price of the CCL quote, or None when it is missing or unusable.

    None means conversions are skipped and flagged; there is no fallback rate.
    """
    quote = find_reference_quote(quotes)
    if quote is None or quote.sell is None:
        return None
    sell = float(quote.sell)
    if not math.isfinite(sell) or sell <= 0:
        return None
    return sell
