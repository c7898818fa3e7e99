"""Tests for quote and rate presentation helpers."""
from portfolio_tracker.db import RateType
from portfolio_tracker.schemas import RateOffer
from portfolio_tracker.services.quote_views import (
    DollarCategory,
    QuoteSort,
    RateSort,
    filter_dollar_quotes,
    sort_quotes,
    sort_rates,
)


def _names(quotes):
    return [q.name for q in quotes]


class TestSortQuotes:
    def test_alphabetical_ignores_case(self, quote_factory):
        quotes = [quote_factory("banco b"), quote_factory("Astropay"), quote_factory("Banco A")]

        assert _names(sort_quotes(quotes, QuoteSort.ALPHABETICAL)) == ["Astropay", "Banco A", "banco b"]

    def test_missing_side_always_last(self, quote_factory):
        quotes = [
            quote_factory("A", buy=None, sell=10.0),
            quote_factory("B", buy=5.0, sell=None),
            quote_factory("C", buy=7.0, sell=8.0),
        ]

        assert _names(sort_quotes(quotes, QuoteSort.BUY_ASC)) == ["B", "C", "A"]
        assert _names(sort_quotes(quotes, QuoteSort.BUY_DESC)) == ["C", "B", "A"]
        assert _names(sort_quotes(quotes, QuoteSort.SELL_ASC)) == ["C", "A", "B"]
        assert _names(sort_quotes(quotes, QuoteSort.SELL_DESC)) == ["A", "C", "B"]


class TestFilterDollarQuotes:
    def test_categories(self, quote_factory):
        quotes = [
            quote_factory("USD Blue"),
            quote_factory("USD CCL"),
            quote_factory("Banco Santander"),
            quote_factory("Banco Nacion"),
            quote_factory("Fiwind"),
            quote_factory("Lemon Cash"),
        ]

        assert _names(filter_dollar_quotes(quotes, DollarCategory.USD)) == ["USD Blue", "USD CCL"]
        assert _names(filter_dollar_quotes(quotes, DollarCategory.BANKS)) == ["Banco Nacion", "Banco Santander"]
        assert _names(filter_dollar_quotes(quotes, DollarCategory.WALLETS)) == ["Fiwind", "Lemon Cash"]
        assert len(filter_dollar_quotes(quotes, DollarCategory.ALL)) == 6


class TestSortRates:
    def test_rate_orders(self):
        offers = [
            RateOffer(entity="Naranja X", rate=30.0, rate_type=RateType.REMUNERATED_ACCOUNT),
            RateOffer(entity="banco provincia", rate=35.0, rate_type=RateType.TERM_DEPOSIT),
            RateOffer(entity="USDT (Binance)", rate=5.0, rate_type=RateType.STAKING),
        ]

        assert [o.entity for o in sort_rates(offers, RateSort.ALPHABETICAL)] == [
            "banco provincia",
            "Naranja X",
            "USDT (Binance)",
        ]
        assert [o.rate for o in sort_rates(offers, RateSort.RATE_DESC)] == [35.0, 30.0, 5.0]
        assert [o.rate for o in sort_rates(offers, RateSort.RATE_ASC)] == [5.0, 30.0, 35.0]
