"""Service layer: ingestion, valuation, aggregation, simulation and portfolio sessions."""
from portfolio_tracker.services.aggregator import PositionFilter, aggregate
from portfolio_tracker.services.ingestion import ingest
from portfolio_tracker.services.market_board import MarketBoard
from portfolio_tracker.services.portfolio_service import PortfolioService, PortfolioSession
from portfolio_tracker.services.price_book import PriceBook
from portfolio_tracker.services.reference_rate import resolve_reference_rate
from portfolio_tracker.services.valuation import convert, valuate

__all__ = [
    "MarketBoard",
    "PortfolioService",
    "PortfolioSession",
    "PositionFilter",
    "PriceBook",
    "aggregate",
    "convert",
    "ingest",
    "resolve_reference_rate",
    "valuate",
]
