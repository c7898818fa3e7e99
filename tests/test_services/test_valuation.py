"""Tests for position valuation and currency conversion."""
import math

import pytest

from portfolio_tracker.db import AssetType, Currency
from portfolio_tracker.services import PriceBook, convert, valuate
from portfolio_tracker.services.valuation import percentage_change


class TestConvert:
    """Tests for convert()."""

    def test_same_currency_is_identity(self):
        """Should return the amount unchanged without needing a rate."""
        assert convert(123.0, Currency.ARS, Currency.ARS, None) == 123.0

    def test_usd_to_ars_multiplies(self):
        assert convert(10.0, Currency.USD, Currency.ARS, 1000.0) == pytest.approx(10_000.0)

    def test_ars_to_usd_divides(self):
        assert convert(10_000.0, Currency.ARS, Currency.USD, 1000.0) == pytest.approx(10.0)

    @pytest.mark.parametrize("rate", [None, 0.0, -5.0])
    def test_unknown_rate_returns_none(self, rate):
        """Should refuse to convert with a missing or non-positive rate."""
        assert convert(10.0, Currency.USD, Currency.ARS, rate) is None

    @pytest.mark.parametrize("amount", [0.0, 1.0, 123_456.78, 9_999_999.99])
    @pytest.mark.parametrize("rate", [1.0, 1187.5, 1432.25])
    def test_ars_usd_round_trip(self, amount, rate):
        """Converting to USD and back returns the original ARS amount."""
        usd = convert(amount, Currency.ARS, Currency.USD, rate)

        assert convert(usd, Currency.USD, Currency.ARS, rate) == pytest.approx(amount)


class TestPercentageChange:
    def test_zero_cost_basis_is_zero(self):
        """A zero cost basis yields 0.0 rather than NaN or a ZeroDivisionError."""
        result = percentage_change(0.0, 500.0)

        assert result == 0.0
        assert not math.isnan(result)

    def test_gain(self):
        assert percentage_change(40_000.0, 50_000.0) == pytest.approx(25.0)


class TestValuate:
    """Tests for valuate()."""

    def test_btc_valued_in_ars(self, btc_position, price_book):
        """1 BTC bought at 40k USD, now 50k USD, CCL 1000 -> 50,000,000 ARS, +25%."""
        valuation = valuate(btc_position, price_book, 1000.0, Currency.ARS)

        assert valuation.currency == Currency.ARS
        assert valuation.current_value == pytest.approx(50_000_000.0)
        assert valuation.cost_basis == pytest.approx(40_000_000.0)
        assert valuation.absolute_change == pytest.approx(10_000_000.0)
        assert valuation.percentage_change == pytest.approx(25.0)
        assert valuation.live_price is True
        assert valuation.unconverted is False

    def test_btc_valued_in_usd(self, btc_position, price_book):
        valuation = valuate(btc_position, price_book, 1000.0, Currency.USD)

        assert valuation.currency == Currency.USD
        assert valuation.current_value == pytest.approx(50_000.0)
        assert valuation.percentage_change == pytest.approx(25.0)

    def test_unknown_rate_keeps_native_figures(self, btc_position, price_book):
        """Should leave figures in USD and flag the valuation when ARS is requested without a rate."""
        valuation = valuate(btc_position, price_book, None, Currency.ARS)

        assert valuation.unconverted is True
        assert valuation.currency == Currency.USD
        assert valuation.current_value == pytest.approx(50_000.0)
        assert valuation.percentage_change == pytest.approx(25.0)

    def test_missing_live_price_falls_back_to_purchase_price(self, position_factory):
        position = position_factory("XYZ", AssetType.EQUITY, 10, 100.0, Currency.ARS)

        valuation = valuate(position, PriceBook(), 1000.0, Currency.ARS)

        assert valuation.live_price is False
        assert valuation.current_price == 100.0
        assert valuation.absolute_change == 0.0
        assert valuation.percentage_change == 0.0

    def test_ticker_lookup_is_case_insensitive(self, position_factory, price_book):
        position = position_factory("ggal", AssetType.EQUITY, 2, 4_000.0, Currency.ARS)

        valuation = valuate(position, price_book, None, Currency.ARS)

        assert valuation.live_price is True
        assert valuation.current_value == pytest.approx(10_000.0)

    def test_lookup_is_scoped_by_asset_type(self, position_factory, price_book):
        """A CEDEAR ticker must not pick up the price of an equity with the same symbol."""
        position = position_factory("GGAL", AssetType.CEDEAR, 1, 3_000.0, Currency.ARS)

        valuation = valuate(position, price_book, None, Currency.ARS)

        assert valuation.live_price is False
        assert valuation.current_price == 3_000.0

    def test_live_price_converted_to_position_currency(self, position_factory, price_book):
        """BTC recorded in ARS uses the USD price times the reference rate."""
        position = position_factory("BTC", AssetType.CRYPTO, 1, 40_000_000.0, Currency.ARS)

        valuation = valuate(position, price_book, 1000.0, Currency.ARS)

        assert valuation.current_price == pytest.approx(50_000_000.0)
        assert valuation.percentage_change == pytest.approx(25.0)

    def test_live_price_in_other_currency_without_rate(self, position_factory, price_book):
        position = position_factory("BTC", AssetType.CRYPTO, 1, 40_000_000.0, Currency.ARS)

        valuation = valuate(position, price_book, None, Currency.ARS)

        assert valuation.unconverted is True
        assert valuation.live_price is False
        assert valuation.current_price == 40_000_000.0
        assert valuation.currency == Currency.ARS

    def test_percentage_is_independent_of_display_currency(self, position_factory, price_book):
        position = position_factory("AAPL", AssetType.CEDEAR, 3, 12_000.0, Currency.ARS)

        in_ars = valuate(position, price_book, 1000.0, Currency.ARS)
        in_usd = valuate(position, price_book, 1000.0, Currency.USD)

        assert in_ars.percentage_change == pytest.approx(in_usd.percentage_change)
        assert in_usd.current_value == pytest.approx(45.0)
