"""Concurrent, failure-isolated ingestion of quote sources."""
import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, TypeVar

from portfolio_tracker.providers.core import (
    PROVIDER_EXCEPTIONS,
    QuoteSourceABC,
    describe_provider_error,
)
from portfolio_tracker.schemas import Quote, QuoteSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SourceResult(Generic[T]):
    """Outcome of one source: items on success, error message otherwise."""

    name: str
    items: list[T] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_isolated(sources: Mapping[str, QuoteSourceABC[T]]) -> dict[str, SourceResult[T]]:
    """Fetch every source concurrently; a failing source yields an empty result.

    Only provider-level failures (network, HTTP status, malformed body) are
    isolated; programming errors propagate.
    """
    names = list(sources)
    results = await asyncio.gather(
        *(sources[name].fetch() for name in names),
        return_exceptions=True,
    )
    out: dict[str, SourceResult[T]] = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            if not isinstance(result, PROVIDER_EXCEPTIONS):
                raise result
            message = describe_provider_error(result)
            logger.warning("Source %s failed: %s", name, message)
            out[name] = SourceResult(name=name, error=f"{name}: {message}")
        else:
            out[name] = SourceResult(name=name, items=list(result))
    return out


def quote_set_from(section: str, results: Iterable[SourceResult[Quote]]) -> QuoteSet:
    """Combine source results into one QuoteSet, in source order."""
    results = list(results)
    return QuoteSet(
        section=section,
        items=[q for r in results if r.ok for q in r.items],
        available=any(r.ok for r in results),
        errors=[r.error for r in results if r.error],
        fetched_at=datetime.now(timezone.utc),
    )


async def ingest(sources: Mapping[str, QuoteSourceABC[Quote]]) -> dict[str, QuoteSet]:
    """Fetch quote sources concurrently; one QuoteSet per source name."""
    results = await fetch_isolated(sources)
    return {name: quote_set_from(name, [result]) for name, result in results.items()}


def dedupe_by_name(quotes: Iterable[Quote]) -> list[Quote]:
    """Drop quotes whose normalized name was already seen (first wins)."""
    seen: set[str] = set()
    unique: list[Quote] = []
    for quote in quotes:
        key = " ".join(quote.name.split()).casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(quote)
    return unique


def merge_dollar_quotes(section: str, sets: Iterable[QuoteSet]) -> QuoteSet:
    """Merge per-source dollar QuoteSets (DolarAPI first), deduplicated by name."""
    sets = list(sets)
    return QuoteSet(
        section=section,
        items=dedupe_by_name(q for s in sets for q in s.items),
        available=any(s.available for s in sets),
        errors=[e for s in sets for e in s.errors],
        fetched_at=datetime.now(timezone.utc),
    )
