"""Cryptocurrency providers."""
from portfolio_tracker.providers.crypto.coingecko.coin_gecko_provider import (
    CoinGeckoProvider,
)
from portfolio_tracker.providers.crypto.compara_dolar_crypto_provider import (
    ComparaDolarCryptoProvider,
)

__all__ = ["CoinGeckoProvider", "ComparaDolarCryptoProvider"]
