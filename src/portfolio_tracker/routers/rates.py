"""Yield offer and inflation routes."""
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from portfolio_tracker.db.models import RateType
from portfolio_tracker.deps import MarketBoardDep
from portfolio_tracker.schemas import MonthlyInflation, RateSet
from portfolio_tracker.services.quote_views import RateSort, sort_rates

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=RateSet)
async def get_rates(
    board: MarketBoardDep,
    rate_type: Annotated[RateType | None, Query(alias="type")] = None,
    sort: RateSort = RateSort.ALPHABETICAL,
) -> RateSet:
    """Term deposits, remunerated accounts and staking yields."""
    offers = board.rates.items
    if rate_type is not None:
        offers = [o for o in offers if o.rate_type == rate_type]
    return board.rates.model_copy(update={"items": sort_rates(offers, sort)})


@router.get("/inflation", response_model=MonthlyInflation)
async def get_inflation(board: MarketBoardDep) -> MonthlyInflation:
    """Latest official monthly inflation."""
    if board.rates.inflation is None:
        raise HTTPException(status_code=503, detail="Inflation data temporarily unavailable")
    return board.rates.inflation
