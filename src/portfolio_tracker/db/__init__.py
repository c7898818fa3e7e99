"""Database package: models, engine and the investment repository."""
from portfolio_tracker.db.models import AssetType, Currency, Investment, RateType
from portfolio_tracker.db.repository import InvestmentRepository
from portfolio_tracker.db.sessions import Database

__all__ = [
    "AssetType",
    "Currency",
    "Database",
    "Investment",
    "InvestmentRepository",
    "RateType",
]
