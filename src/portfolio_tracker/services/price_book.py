"""Lookup of live instrument prices by (asset type, ticker)."""
from collections.abc import Iterable, Iterator

from portfolio_tracker.db.models import AssetType
from portfolio_tracker.providers.core.utils import normalize_ticker
from portfolio_tracker.schemas import AssetPrice


class PriceBook:
    """Immutable map of (AssetType, TICKER) -> AssetPrice. First price per key wins."""

    def __init__(self, prices: Iterable[AssetPrice] = ()) -> None:
        self._prices: dict[tuple[AssetType, str], AssetPrice] = {}
        for price in prices:
            self._prices.setdefault((price.asset_type, normalize_ticker(price.ticker)), price)

    def get(self, asset_type: AssetType, ticker: str) -> AssetPrice | None:
        return self._prices.get((asset_type, normalize_ticker(ticker)))

    def of_type(self, asset_type: AssetType) -> list[AssetPrice]:
        return [p for (t, _), p in self._prices.items() if t is asset_type]

    def __iter__(self) -> Iterator[AssetPrice]:
        return iter(self._prices.values())

    def __len__(self) -> int:
        return len(self._prices)
