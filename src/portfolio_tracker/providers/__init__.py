"""External market data sources."""
from portfolio_tracker.providers.crypto import CoinGeckoProvider, ComparaDolarCryptoProvider
from portfolio_tracker.providers.dollar import ComparaDolarProvider, DolarApiProvider
from portfolio_tracker.providers.instruments import CedearsProvider
from portfolio_tracker.providers.pix import PixProvider
from portfolio_tracker.providers.rates import ComparaTasasProvider, InflationProvider

__all__ = [
    "CedearsProvider",
    "CoinGeckoProvider",
    "ComparaDolarCryptoProvider",
    "ComparaDolarProvider",
    "ComparaTasasProvider",
    "DolarApiProvider",
    "InflationProvider",
    "PixProvider",
]
