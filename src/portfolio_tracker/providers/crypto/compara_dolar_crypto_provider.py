"""ComparaDolar crypto provider: per-exchange stablecoin/BTC/ETH quotes in ARS."""
import asyncio
import logging
from typing import Any

from portfolio_tracker.providers.core import (
    PROVIDER_EXCEPTIONS,
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
    describe_provider_error,
)
from portfolio_tracker.providers.core.utils import spread
from portfolio_tracker.providers.dollar.compara_dolar_provider import by_spread
from portfolio_tracker.schemas import Quote

logger = logging.getLogger(__name__)

DEFAULT_TOKENS = ("usdt", "usdc", "btc", "eth")


def parse_crypto_token(token: str, payload: Any) -> list[Quote]:
    """Convert a /crypto/{token} body (exchange -> info) into Quotes."""
    if not isinstance(payload, dict):
        raise MalformedPayloadError(f"expected an object of exchanges for {token}")
    quotes: list[Quote] = []
    for exchange, info in payload.items():
        if not isinstance(info, dict):
            continue
        buy = as_number(info.get("bid"))
        sell = as_number(info.get("ask"))
        pretty = info.get("prettyName") or exchange
        quotes.append(
            Quote(
                source=info.get("url") or exchange,
                name=f"{pretty} ({token.upper()})",
                key=exchange,
                buy=buy,
                sell=sell,
                spread=spread(buy, sell),
                is_24x7=True,
                logo=info.get("logo") or None,
            )
        )
    return quotes


class ComparaDolarCryptoProvider(HTTPQuoteSource[Quote]):
    """Crypto quotes for a fixed token list, one request per token.

    A failing token only drops that token's quotes; the fetch fails only when
    every token fails.
    """

    BASE_URL = "https://api.comparadolar.ar"
    name = "comparadolar-crypto"

    def __init__(self, tokens: tuple[str, ...] = DEFAULT_TOKENS, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._tokens = tokens

    async def _fetch_token(self, token: str) -> list[Quote]:
        return parse_crypto_token(token, await self._get_json(f"/crypto/{token}"))

    async def fetch(self) -> list[Quote]:
        results = await asyncio.gather(
            *(self._fetch_token(t) for t in self._tokens), return_exceptions=True
        )
        quotes: list[Quote] = []
        failures: list[Exception] = []
        for token, result in zip(self._tokens, results):
            if isinstance(result, BaseException):
                if not isinstance(result, PROVIDER_EXCEPTIONS):
                    raise result
                logger.warning("Crypto token %s failed: %s", token, describe_provider_error(result))
                failures.append(result)
                continue
            quotes.extend(result)
        if failures and len(failures) == len(self._tokens):
            raise failures[0]
        quotes.sort(key=by_spread)
        return quotes
