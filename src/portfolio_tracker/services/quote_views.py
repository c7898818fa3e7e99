"""Sorting and filtering of quote and rate lists for presentation."""
from collections.abc import Iterable
from enum import Enum

from portfolio_tracker.schemas import Quote, RateOffer


class QuoteSort(str, Enum):
    ALPHABETICAL = "alphabetical"
    BUY_ASC = "buy_asc"
    BUY_DESC = "buy_desc"
    SELL_ASC = "sell_asc"
    SELL_DESC = "sell_desc"


class DollarCategory(str, Enum):
    ALL = "all"
    USD = "usd"
    BANKS = "banks"
    WALLETS = "wallets"


class RateSort(str, Enum):
    ALPHABETICAL = "alphabetical"
    RATE_DESC = "rate_desc"
    RATE_ASC = "rate_asc"


CATEGORY_KEYWORDS: dict[DollarCategory, tuple[str, ...]] = {
    DollarCategory.USD: (
        "oficial",
        "blue",
        "bolsa",
        "contado con liquidación",
        "ccl",
        "tarjeta",
        "mayorista",
    ),
    DollarCategory.BANKS: (
        "banco",
        "nacion",
        "galicia",
        "santander",
        "bbva",
        "hsbc",
        "macro",
        "supervielle",
    ),
    DollarCategory.WALLETS: (
        "bit",
        "fiwind",
        "plus",
        "ripio",
        "crypto",
        "naranja",
        "brubank",
        "lemon",
    ),
}


def _by_side(quotes: list[Quote], side: str, descending: bool) -> list[Quote]:
    present = [q for q in quotes if getattr(q, side) is not None]
    missing = [q for q in quotes if getattr(q, side) is None]
    present.sort(key=lambda q: getattr(q, side), reverse=descending)
    return present + missing


def sort_quotes(quotes: Iterable[Quote], order: QuoteSort = QuoteSort.ALPHABETICAL) -> list[Quote]:
    """Sort quotes; quotes missing the sorted side always go last."""
    quotes = list(quotes)
    if order is QuoteSort.ALPHABETICAL:
        return sorted(quotes, key=lambda q: q.name.casefold())
    side = "buy" if order in (QuoteSort.BUY_ASC, QuoteSort.BUY_DESC) else "sell"
    return _by_side(quotes, side, descending=order in (QuoteSort.BUY_DESC, QuoteSort.SELL_DESC))


def filter_dollar_quotes(
    quotes: Iterable[Quote], category: DollarCategory = DollarCategory.ALL
) -> list[Quote]:
    """Keep quotes whose name contains one of the category keywords.

    Banks and wallets come back alphabetically ordered.
    """
    quotes = list(quotes)
    if category is DollarCategory.ALL:
        return quotes
    keywords = CATEGORY_KEYWORDS[category]
    kept = [q for q in quotes if any(k in q.name.lower() for k in keywords)]
    if category in (DollarCategory.BANKS, DollarCategory.WALLETS):
        kept.sort(key=lambda q: q.name.casefold())
    return kept


def sort_rates(offers: Iterable[RateOffer], order: RateSort = RateSort.ALPHABETICAL) -> list[RateOffer]:
    offers = list(offers)
    if order is RateSort.ALPHABETICAL:
        return sorted(offers, key=lambda o: o.entity.casefold())
    return sorted(offers, key=lambda o: o.rate, reverse=order is RateSort.RATE_DESC)
