"""Market quote routes: dollar, crypto, PIX, reference rate and instrument prices."""
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from portfolio_tracker.db.models import Currency
from portfolio_tracker.deps import MarketBoardDep
from portfolio_tracker.routers.params import AssetTypeParam
from portfolio_tracker.schemas import AssetSet, QuoteSet, ReferenceRate
from portfolio_tracker.services.market_board import SECTIONS
from portfolio_tracker.services.quote_views import (
    DollarCategory,
    QuoteSort,
    filter_dollar_quotes,
    sort_quotes,
)

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _sorted(quote_set: QuoteSet, sort: QuoteSort | None) -> QuoteSet:
    if sort is None:
        return quote_set
    return quote_set.model_copy(update={"items": sort_quotes(quote_set.items, sort)})


@router.get("/dollar", response_model=QuoteSet)
async def get_dollar_quotes(
    board: MarketBoardDep,
    sort: QuoteSort | None = None,
    category: DollarCategory = DollarCategory.ALL,
) -> QuoteSet:
    """Dollar quotes (DolarAPI products first, then banks and wallets by spread).

    An unavailable, empty set means the sources are temporarily down.
    """
    snapshot = board.dollar
    filtered = snapshot.model_copy(update={"items": filter_dollar_quotes(snapshot.items, category)})
    return _sorted(filtered, sort)


@router.get("/crypto", response_model=QuoteSet)
async def get_crypto_quotes(
    board: MarketBoardDep,
    sort: QuoteSort | None = None,
    token: Annotated[str | None, Query(description="e.g. usdt, btc")] = None,
) -> QuoteSet:
    """Crypto quotes in ARS per exchange, narrowest spread first."""
    snapshot = board.crypto
    if token:
        suffix = f"({token.strip().upper()})"
        snapshot = snapshot.model_copy(
            update={"items": [q for q in snapshot.items if q.name.endswith(suffix)]}
        )
    return _sorted(snapshot, sort)


@router.get("/pix", response_model=QuoteSet)
async def get_pix_quotes(
    board: MarketBoardDep,
    sort: QuoteSort | None = None,
    currency: Currency | None = None,
) -> QuoteSet:
    """PIX quotes; ARS-paid first. Filter by the currency used to pay."""
    snapshot = board.pix
    if currency is not None:
        snapshot = snapshot.model_copy(
            update={"items": [q for q in snapshot.items if q.currency == currency.value]}
        )
    return _sorted(snapshot, sort)


@router.get("/reference-rate", response_model=ReferenceRate)
async def get_reference_rate(board: MarketBoardDep) -> ReferenceRate:
    """CCL sell price used for ARS/USD conversion; ``rate`` is null when unknown."""
    return board.reference()


@router.get("/assets", response_model=AssetSet)
async def get_assets(board: MarketBoardDep, asset_type: AssetTypeParam) -> AssetSet:
    """Live instrument prices (crypto in USD, CEDEARs and equities in ARS)."""
    snapshot = board.assets
    if asset_type is None:
        return snapshot
    return snapshot.model_copy(
        update={"items": [p for p in snapshot.items if p.asset_type == asset_type]}
    )


@router.post("/refresh")
async def refresh_quotes(
    board: MarketBoardDep,
    section: Annotated[str | None, Query(description=f"One of {', '.join(SECTIONS)}")] = None,
) -> dict[str, str]:
    """Fetch one section (or all of them) right now."""
    sections = SECTIONS if section is None else (section,)
    try:
        await board.refresh(sections)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"status": "refreshed"}
