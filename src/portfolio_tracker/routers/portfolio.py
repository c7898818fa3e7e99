"""Investment CRUD, portfolio summary and CSV export for the calling user."""
import logging
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from portfolio_tracker.db.models import Currency
from portfolio_tracker.deps import PortfolioServiceDep, PortfolioSessionDep
from portfolio_tracker.errors import ErrorMapper, NotFoundError, PersistenceError
from portfolio_tracker.routers.params import AssetTypeParam
from portfolio_tracker.schemas import (
    PortfolioSummary,
    Position,
    PositionCreate,
    PositionUpdate,
    PurchaseSuggestion,
)
from portfolio_tracker.services.aggregator import PositionFilter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/portfolio", tags=["portfolio"])

_errors = ErrorMapper("Investment")
_asset_errors = ErrorMapper("Asset")


# Handlers are sync: the repository is blocking, so FastAPI runs them in its threadpool.
@router.get("/investments", response_model=list[Position])
def list_investments(session: PortfolioSessionDep) -> list[Position]:
    """The user's investments, newest first. Always read from the store."""
    try:
        return session.reload()
    except PersistenceError as e:
        _errors.raise_http(e)


@router.post("/investments", response_model=Position, status_code=status.HTTP_201_CREATED)
def create_investment(data: PositionCreate, session: PortfolioSessionDep) -> Position:
    try:
        return session.add(data)
    except PersistenceError as e:
        logger.warning("Insert failed for user %s: %s", session.user_id, e)
        _errors.raise_http(e)


@router.patch("/investments/{investment_id}", response_model=Position)
def update_investment(
    investment_id: str, changes: PositionUpdate, session: PortfolioSessionDep
) -> Position:
    try:
        return session.update(investment_id, changes)
    except PersistenceError as e:
        _errors.raise_http(e, identifier=investment_id)


@router.delete("/investments/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_investment(investment_id: str, session: PortfolioSessionDep) -> Response:
    try:
        session.delete(investment_id)
    except PersistenceError as e:
        _errors.raise_http(e, identifier=investment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/investments/{investment_id}/favorite", response_model=Position)
def toggle_favorite(investment_id: str, session: PortfolioSessionDep) -> Position:
    """Flip the favorite flag. On a store failure the flag is restored and 502 returned."""
    try:
        return session.toggle_favorite(investment_id)
    except PersistenceError as e:
        _errors.raise_http(e, identifier=investment_id)


@router.get("/summary", response_model=PortfolioSummary)
def get_summary(
    session: PortfolioSessionDep,
    asset_type: AssetTypeParam,
    currency: Currency = Currency.ARS,
    search: Annotated[str | None, Query(description="Ticker or name substring")] = None,
    merge: Annotated[bool, Query(description="Merge lots of the same asset")] = False,
) -> PortfolioSummary:
    """Valued positions and totals in ``currency``.

    Positions that cannot be converted (unknown reference rate) are listed in
    ``unconverted_ids`` and excluded from the totals.
    """
    try:
        return session.summary(
            currency,
            filters=PositionFilter(asset_type=asset_type, search=search),
            merge_duplicates=merge,
        )
    except PersistenceError as e:
        _errors.raise_http(e)


@router.get("/export.csv")
def export_csv(session: PortfolioSessionDep) -> Response:
    try:
        content = session.export_csv()
    except PersistenceError as e:
        _errors.raise_http(e)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="inversiones.csv"'},
    )


@router.get("/suggestion", response_model=PurchaseSuggestion)
def suggest_purchase(
    service: PortfolioServiceDep,
    session: PortfolioSessionDep,
    asset_type: AssetTypeParam,
    ticker: Annotated[str, Query(min_length=1)],
) -> PurchaseSuggestion:
    """Prefilled investment form for an asset with a live price."""
    if asset_type is None:
        _asset_errors.raise_http(ValueError("type is required"))
    try:
        asset = service.lookup_asset(asset_type, ticker)
    except NotFoundError as e:
        _asset_errors.raise_http(e, identifier=ticker.upper())
    return session.suggest_purchase(asset)
