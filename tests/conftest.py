"""Pytest fixtures for portfolio tracker tests."""
from datetime import date, datetime, timezone

import pytest

from portfolio_tracker.db import AssetType, Currency, Database, InvestmentRepository
from portfolio_tracker.schemas import AssetPrice, Position, Quote
from portfolio_tracker.services import PriceBook


def _make_position(
    ticker: str = "BTC",
    asset_type: AssetType = AssetType.CRYPTO,
    quantity: float = 1.0,
    purchase_price: float = 40_000.0,
    currency: Currency = Currency.USD,
    **kwargs,
) -> Position:
    """Helper to create a Position with sensible defaults."""
    return Position(
        id=kwargs.pop("id", f"{ticker.lower()}-{asset_type.name.lower()}-{currency.value.lower()}"),
        user_id=kwargs.pop("user_id", "user-1"),
        ticker=ticker,
        name=kwargs.pop("name", ticker),
        asset_type=asset_type,
        quantity=quantity,
        purchase_price=purchase_price,
        purchase_date=kwargs.pop("purchase_date", date(2024, 1, 15)),
        currency=currency,
        created_at=kwargs.pop("created_at", datetime(2024, 1, 15, tzinfo=timezone.utc)),
        **kwargs,
    )


def _make_price(
    ticker: str = "BTC",
    price: float = 50_000.0,
    asset_type: AssetType = AssetType.CRYPTO,
    currency: Currency = Currency.USD,
) -> AssetPrice:
    return AssetPrice(ticker=ticker, name=ticker, asset_type=asset_type, price=price, currency=currency)


def _make_quote(name: str, buy: float | None = None, sell: float | None = None, **kwargs) -> Quote:
    return Quote(source=kwargs.pop("source", "test"), name=name, buy=buy, sell=sell, **kwargs)


@pytest.fixture
def btc_position() -> Position:
    """1 BTC bought at 40,000 USD."""
    return _make_position()


@pytest.fixture
def price_book() -> PriceBook:
    """BTC at 50,000 USD, GGAL equity at 5,000 ARS, AAPL CEDEAR at 15,000 ARS."""
    return PriceBook(
        [
            _make_price("BTC", 50_000.0),
            _make_price("GGAL", 5_000.0, AssetType.EQUITY, Currency.ARS),
            _make_price("AAPL", 15_000.0, AssetType.CEDEAR, Currency.ARS),
        ]
    )


@pytest.fixture
def database() -> Database:
    """Fresh in-memory SQLite database with tables created."""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def repository(database: Database) -> InvestmentRepository:
    return InvestmentRepository(database)


@pytest.fixture
def position_factory():
    """Factory for Position objects: position_factory(ticker, asset_type, quantity, ...)."""
    return _make_position


@pytest.fixture
def price_factory():
    """Factory for AssetPrice objects: price_factory(ticker, price, asset_type, currency)."""
    return _make_price


@pytest.fixture
def quote_factory():
    """Factory for Quote objects: quote_factory(name, buy, sell, **fields)."""
    return _make_quote
