"""Dollar exchange-rate providers."""
from portfolio_tracker.providers.dollar.compara_dolar_provider import (
    ComparaDolarProvider,
)
from portfolio_tracker.providers.dollar.dolar_api_provider import DolarApiProvider

__all__ = ["ComparaDolarProvider", "DolarApiProvider"]
