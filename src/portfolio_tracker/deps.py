"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

The lifespan (main.py) builds the container once and publishes its services on
app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from portfolio_tracker.services import MarketBoard, PortfolioService, PortfolioSession


def get_market_board(request: Request) -> MarketBoard:
    """Resolve the MarketBoard from app.state (created at startup)."""
    return request.app.state.market_board


def get_portfolio_service(request: Request) -> PortfolioService:
    """Resolve the PortfolioService from app.state."""
    return request.app.state.portfolio_service


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Owner id from the X-User-Id header; authentication happens upstream."""
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_portfolio_session(
    service: Annotated[PortfolioService, Depends(get_portfolio_service)],
    user_id: Annotated[str, Depends(get_user_id)],
) -> PortfolioSession:
    """The calling user's PortfolioSession."""
    return service.session(user_id)


# Type aliases for route injection
MarketBoardDep = Annotated[MarketBoard, Depends(get_market_board)]
PortfolioServiceDep = Annotated[PortfolioService, Depends(get_portfolio_service)]
PortfolioSessionDep = Annotated[PortfolioSession, Depends(get_portfolio_session)]
