"""Tests for MarketBoard snapshots."""
from datetime import date

import httpx
import pytest

from portfolio_tracker.db import AssetType, Currency, RateType
from portfolio_tracker.providers.core import QuoteSourceABC
from portfolio_tracker.schemas import MonthlyInflation, RateOffer
from portfolio_tracker.services import MarketBoard, valuate


class ListSource(QuoteSourceABC):
    """Returns the queued responses in order; an Exception item is raised."""

    def __init__(self, name, *responses):
        self.name = name
        self._responses = list(responses)
        self.closed = False

    async def fetch(self):
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


@pytest.fixture
def sources(quote_factory, price_factory):
    return {
        "dolarapi": ListSource(
            "dolarapi",
            [
                quote_factory("USD Oficial", 950.0, 990.0, key="oficial"),
                quote_factory("USD CCL", 1180.0, 1200.0, key="contadoconliqui"),
            ],
        ),
        "comparadolar": ListSource(
            "comparadolar",
            [quote_factory("USD CCL", 1.0, 2.0), quote_factory("Banco Nacion", 960.0, 1000.0)],
        ),
        "crypto": ListSource("crypto", [quote_factory("Binance (USDT)", 1190.0, 1210.0)]),
        "pix": ListSource("pix", httpx.ConnectError("down")),
        "coingecko": ListSource("coingecko", [price_factory("BTC", 50_000.0)]),
        "cedears": ListSource(
            "cedears", [price_factory("AAPL", 15_000.0, AssetType.CEDEAR, Currency.ARS)]
        ),
        "comparatasas": ListSource(
            "comparatasas",
            [RateOffer(entity="Banco Nación", rate=35.0, rate_type=RateType.TERM_DEPOSIT)],
        ),
        "inflation": ListSource("inflation", [MonthlyInflation(date=date(2025, 1, 1), percent=2.2)]),
    }


@pytest.fixture
def board(sources):
    return MarketBoard(
        dollar_sources={"dolarapi": sources["dolarapi"], "comparadolar": sources["comparadolar"]},
        crypto_sources={"comparadolar": sources["crypto"]},
        pix_sources={"pix": sources["pix"]},
        asset_sources={"coingecko": sources["coingecko"], "cedears": sources["cedears"]},
        rate_sources={"comparatasas": sources["comparatasas"]},
        inflation_source=sources["inflation"],
        interval_seconds=60,
    )


class TestMarketBoard:
    """Tests for MarketBoard refresh and derived views."""

    def test_starts_empty_and_unavailable(self, board):
        assert board.dollar.available is False
        assert board.reference_rate is None
        assert len(board.price_book) == 0

    @pytest.mark.asyncio
    async def test_refresh_fills_every_section(self, board):
        await board.refresh()

        assert [q.name for q in board.dollar.items] == ["USD Oficial", "USD CCL", "Banco Nacion"]
        assert board.reference_rate == 1200.0
        assert board.reference().source == "test"
        assert board.crypto.available is True
        assert board.pix.available is False
        assert board.pix.errors == ["pix: network error: ConnectError"]
        assert board.price_book.get(AssetType.CEDEAR, "aapl").price == 15_000.0
        assert board.rates.inflation.percent == 2.2
        assert board.rates.items[0].entity == "Banco Nación"

    @pytest.mark.asyncio
    async def test_crypto_outage_leaves_dollar_and_valuation_working(
        self, board, sources, quote_factory, btc_position
    ):
        sources["crypto"]._responses = [httpx.ConnectError("down")]
        sources["pix"]._responses = [[quote_factory("Belo - paga con ARS", 210.0, 215.0)]]

        await board.refresh()

        assert board.crypto.available is False
        assert board.crypto.items == []
        assert board.dollar.available is True
        assert board.pix.available is True
        assert board.assets.available is True
        assert board.rates.available is True
        assert board.reference_rate == 1200.0
        valuation = valuate(btc_position, board.price_book, board.reference_rate, Currency.ARS)
        assert valuation.unconverted is False
        assert valuation.current_value == pytest.approx(60_000_000.0)

    @pytest.mark.asyncio
    async def test_refresh_single_section_leaves_others(self, board):
        await board.refresh(("crypto",))

        assert board.crypto.available is True
        assert board.dollar.fetched_at is None

    @pytest.mark.asyncio
    async def test_failed_refresh_replaces_snapshot(self, board, sources, quote_factory):
        sources["crypto"]._responses = [[quote_factory("Binance (USDT)", 1.0, 2.0)], httpx.ReadTimeout("slow")]

        await board.refresh(("crypto",))
        assert board.crypto.items
        await board.refresh(("crypto",))

        assert board.crypto.available is False
        assert board.crypto.items == []

    @pytest.mark.asyncio
    async def test_unknown_section_rejected(self, board):
        with pytest.raises(ValueError):
            await board.refresh(("stocks",))

    @pytest.mark.asyncio
    async def test_close_stops_and_closes_sources(self, board, sources):
        board.start()
        assert board.running is True

        await board.close()

        assert board.running is False
        assert all(source.closed for source in sources.values())

    @pytest.mark.asyncio
    async def test_refresh_after_stop_is_discarded(self, board):
        await board.stop()
        await board.refresh(("dollar",))

        assert board.dollar.items == []
