"""Latest market snapshots, kept fresh by one polling task per section."""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from portfolio_tracker.providers.core import PollingTask, QuoteSourceABC
from portfolio_tracker.schemas import (
    AssetPrice,
    AssetSet,
    MonthlyInflation,
    Quote,
    QuoteSet,
    RateOffer,
    RateSet,
    ReferenceRate,
)
from portfolio_tracker.services.ingestion import (
    fetch_isolated,
    ingest,
    merge_dollar_quotes,
    quote_set_from,
)
from portfolio_tracker.services.price_book import PriceBook
from portfolio_tracker.services.reference_rate import (
    find_reference_quote,
    resolve_reference_rate,
)

logger = logging.getLogger(__name__)

DOLLAR = "dollar"
CRYPTO = "crypto"
PIX = "pix"
ASSETS = "assets"
RATES = "rates"
SECTIONS = (DOLLAR, CRYPTO, PIX, ASSETS, RATES)


class MarketBoard:
    """Holds the latest snapshot per section and the tasks that refresh them.

    Each task only ever replaces its own section. Results that resolve after
    stop() are dropped by the polling task.
    """

    def __init__(
        self,
        *,
        dollar_sources: Mapping[str, QuoteSourceABC[Quote]],
        crypto_sources: Mapping[str, QuoteSourceABC[Quote]],
        pix_sources: Mapping[str, QuoteSourceABC[Quote]],
        asset_sources: Mapping[str, QuoteSourceABC[AssetPrice]],
        rate_sources: Mapping[str, QuoteSourceABC[RateOffer]],
        inflation_source: QuoteSourceABC[MonthlyInflation] | None = None,
        interval_seconds: float = 300.0,
    ) -> None:
        self._dollar_sources = dollar_sources
        self._crypto_sources = crypto_sources
        self._pix_sources = pix_sources
        self._asset_sources = asset_sources
        self._rate_sources = rate_sources
        self._inflation_source = inflation_source

        self.dollar = QuoteSet(section=DOLLAR)
        self.crypto = QuoteSet(section=CRYPTO)
        self.pix = QuoteSet(section=PIX)
        self.assets = AssetSet()
        self.rates = RateSet()
        self._price_book = PriceBook()

        fetchers: dict[str, tuple[Callable[[], Awaitable[Any]], Callable[[Any], None]]] = {
            DOLLAR: (self._fetch_dollar, self._set_dollar),
            CRYPTO: (lambda: self._fetch_quotes(CRYPTO, self._crypto_sources), self._set_crypto),
            PIX: (lambda: self._fetch_quotes(PIX, self._pix_sources), self._set_pix),
            ASSETS: (self._fetch_assets, self._set_assets),
            RATES: (self._fetch_rates, self._set_rates),
        }
        self._tasks = {
            name: PollingTask(name, fetch, on_result, interval_seconds=interval_seconds)
            for name, (fetch, on_result) in fetchers.items()
        }

    # ---- Fetchers ----
    async def _fetch_dollar(self) -> QuoteSet:
        per_source = await ingest(self._dollar_sources)
        return merge_dollar_quotes(DOLLAR, per_source.values())

    async def _fetch_quotes(self, section: str, sources: Mapping[str, QuoteSourceABC[Quote]]) -> QuoteSet:
        results = await fetch_isolated(sources)
        return quote_set_from(section, results.values())

    async def _fetch_assets(self) -> AssetSet:
        results = (await fetch_isolated(self._asset_sources)).values()
        return AssetSet(
            items=[p for r in results if r.ok for p in r.items],
            available=any(r.ok for r in results),
            errors=[r.error for r in results if r.error],
            fetched_at=datetime.now(timezone.utc),
        )

    async def _fetch_rates(self) -> RateSet:
        sources: dict[str, QuoteSourceABC[Any]] = dict(self._rate_sources)
        if self._inflation_source is not None:
            sources[self._inflation_source.name] = self._inflation_source
        results = await fetch_isolated(sources)
        offer_results = [results[name] for name in self._rate_sources]
        inflation = None
        if self._inflation_source is not None:
            inflation_result = results[self._inflation_source.name]
            inflation = inflation_result.items[0] if inflation_result.items else None
        return RateSet(
            items=[o for r in offer_results if r.ok for o in r.items],
            inflation=inflation,
            available=any(r.ok for r in offer_results),
            errors=[r.error for r in results.values() if r.error],
            fetched_at=datetime.now(timezone.utc),
        )

    # ---- Snapshot setters ----
    def _set_dollar(self, snapshot: QuoteSet) -> None:
        self.dollar = snapshot

    def _set_crypto(self, snapshot: QuoteSet) -> None:
        self.crypto = snapshot

    def _set_pix(self, snapshot: QuoteSet) -> None:
        self.pix = snapshot

    def _set_assets(self, snapshot: AssetSet) -> None:
        self.assets = snapshot
        self._price_book = PriceBook(snapshot.items)

    def _set_rates(self, snapshot: RateSet) -> None:
        self.rates = snapshot

    # ---- Derived views ----
    @property
    def price_book(self) -> PriceBook:
        return self._price_book

    @property
    def reference_rate(self) -> float | None:
        return resolve_reference_rate(self.dollar.items)

    def reference(self) -> ReferenceRate:
        quote = find_reference_quote(self.dollar.items)
        return ReferenceRate(
            rate=self.reference_rate,
            source=quote.source if quote is not None else None,
            fetched_at=self.dollar.fetched_at,
        )

    def quote_set(self, section: str) -> QuoteSet:
        if section not in (DOLLAR, CRYPTO, PIX):
            raise ValueError(f"Unknown quote section: {section!r}")
        return getattr(self, section)

    # ---- Lifecycle ----
    @property
    def running(self) -> bool:
        return any(task.running for task in self._tasks.values())

    def start(self) -> None:
        """Start polling every section. Call from a running event loop."""
        for task in self._tasks.values():
            task.start()
        logger.info("Market board started (%s)", ", ".join(self._tasks))

    async def refresh(self, sections: tuple[str, ...] = SECTIONS) -> None:
        """Fetch the given sections now, concurrently."""
        unknown = set(sections) - set(self._tasks)
        if unknown:
            raise ValueError(f"Unknown sections: {sorted(unknown)}")
        await asyncio.gather(*(self._tasks[name].run_once() for name in sections))

    async def stop(self) -> None:
        await asyncio.gather(*(task.stop() for task in self._tasks.values()))

    async def close(self) -> None:
        """Stop polling and close every source. Call from app lifespan shutdown."""
        await self.stop()
        sources: list[QuoteSourceABC[Any]] = [
            *self._dollar_sources.values(),
            *self._crypto_sources.values(),
            *self._pix_sources.values(),
            *self._asset_sources.values(),
            *self._rate_sources.values(),
        ]
        if self._inflation_source is not None:
            sources.append(self._inflation_source)
        for source in sources:
            await source.close()
        logger.info("Market board closed")
