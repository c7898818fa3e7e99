"""API routers.

Includes routes for:
- /quotes - Dollar, crypto and PIX quotes, CCL reference rate, instrument prices
- /rates - Term deposits, remunerated accounts, staking and official inflation
- /portfolio - Investments of the calling user (X-User-Id), summary, CSV export
- /simulator - Compound interest and installments vs cash
"""
from portfolio_tracker.routers.portfolio import router as portfolio_router
from portfolio_tracker.routers.quotes import router as quotes_router
from portfolio_tracker.routers.rates import router as rates_router
from portfolio_tracker.routers.simulator import router as simulator_router

__all__ = ["portfolio_router", "quotes_router", "rates_router", "simulator_router"]
