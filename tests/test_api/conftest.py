"""Shared fixtures for API tests: app wired to static sources and in-memory SQLite."""
from datetime import date

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from portfolio_tracker.config import AppConfig
from portfolio_tracker.container import init_container
from portfolio_tracker.db import AssetType, Currency, RateType
from portfolio_tracker.main import create_app
from portfolio_tracker.providers.core import QuoteSourceABC
from portfolio_tracker.schemas import AssetPrice, MonthlyInflation, Quote, RateOffer


class StaticSource(QuoteSourceABC):
    """Source that always returns the same items."""

    def __init__(self, name, items):
        self.name = name
        self.items = items

    async def fetch(self):
        return list(self.items)


def _quote(name, buy, sell, **kwargs):
    return Quote(source=kwargs.pop("source", "static"), name=name, buy=buy, sell=sell, **kwargs)


def _asset(ticker, price, asset_type, currency):
    return AssetPrice(ticker=ticker, name=ticker, asset_type=asset_type, price=price, currency=currency)


STATIC_SOURCES = {
    "dolar_api": StaticSource(
        "dolarapi",
        [
            _quote("USD Oficial", 950.0, 990.0, key="oficial"),
            _quote("USD Blue", 1180.0, 1200.0, key="blue"),
            _quote("USD CCL", 990.0, 1000.0, key="contadoconliqui"),
        ],
    ),
    "compara_dolar": StaticSource(
        "comparadolar",
        [_quote("Banco Nacion", 960.0, 1000.0), _quote("Fiwind", 1190.0, 1195.0, is_24x7=True)],
    ),
    "compara_dolar_crypto": StaticSource(
        "comparadolar-crypto",
        [_quote("Binance (USDT)", 1190.0, 1210.0), _quote("Lemon (BTC)", 1.0, 2.0)],
    ),
    "pix": StaticSource(
        "pix",
        [
            _quote("Belo - paga con ARS", 210.0, 215.0, currency="ARS"),
            _quote("Belo - paga con USD", 0.18, 0.19, currency="USD"),
        ],
    ),
    "coingecko": StaticSource("coingecko", [_asset("BTC", 50_000.0, AssetType.CRYPTO, Currency.USD)]),
    "cedears": StaticSource(
        "cedears",
        [
            _asset("AAPL", 15_000.0, AssetType.CEDEAR, Currency.ARS),
            _asset("GGAL", 5_000.0, AssetType.EQUITY, Currency.ARS),
        ],
    ),
    "compara_tasas": StaticSource(
        "comparatasas",
        [
            RateOffer(entity="Banco Nación", rate=36.0, rate_type=RateType.TERM_DEPOSIT),
            RateOffer(entity="Naranja X", rate=28.0, rate_type=RateType.REMUNERATED_ACCOUNT),
            RateOffer(entity="USDT (Binance)", rate=5.0, rate_type=RateType.STAKING),
        ],
    ),
    "inflation": StaticSource("inflation", [MonthlyInflation(date=date(2025, 1, 1), percent=2.5)]),
}


@pytest.fixture
def container():
    container = init_container(AppConfig(database_url="sqlite://", quotes_refresh_seconds=3600))
    for attr, source in STATIC_SOURCES.items():
        getattr(container, attr).override(providers.Object(source))
    return container


@pytest.fixture
def client(container):
    """TestClient with the lifespan run and every market section loaded."""
    app = create_app(AppConfig(database_url="sqlite://"))
    app.state.container = container
    with TestClient(app) as test_client:
        test_client.post("/quotes/refresh")
        yield test_client


@pytest.fixture
def alice():
    return {"X-User-Id": "alice"}
