"""Yield and inflation providers."""
from portfolio_tracker.providers.rates.compara_tasas_provider import ComparaTasasProvider
from portfolio_tracker.providers.rates.inflation_provider import InflationProvider

__all__ = ["ComparaTasasProvider", "InflationProvider"]
