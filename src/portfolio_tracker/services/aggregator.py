"""Portfolio aggregation: filtering, lot merging and totals."""
from collections.abc import Iterable
from dataclasses import dataclass

from portfolio_tracker.db.models import AssetType, Currency
from portfolio_tracker.providers.core.utils import normalize_ticker
from portfolio_tracker.schemas import PortfolioSummary, Position, TypeBreakdown, Valuation
from portfolio_tracker.services.price_book import PriceBook
from portfolio_tracker.services.valuation import convert, percentage_change, valuate


@dataclass(frozen=True)
class PositionFilter:
    """Optional asset type plus a case-insensitive search over ticker and name."""

    asset_type: AssetType | None = None
    search: str | None = None

    def matches(self, position: Position) -> bool:
        if self.asset_type is not None and position.asset_type != self.asset_type:
            return False
        needle = (self.search or "").strip().lower()
        if needle and needle not in position.ticker.lower() and needle not in position.name.lower():
            return False
        return True


def filter_positions(
    positions: Iterable[Position], filters: PositionFilter | None = None
) -> list[Position]:
    if filters is None:
        return list(positions)
    return [p for p in positions if filters.matches(p)]


@dataclass
class _Group:
    lots: list[Position]
    # Purchase price of each lot expressed in the group's currency.
    prices: list[float]

    @property
    def currency(self) -> Currency:
        return self.lots[0].currency

    def to_position(self) -> Position:
        first = self.lots[0]
        quantity = sum(lot.quantity for lot in self.lots)
        cost = sum(lot.quantity * price for lot, price in zip(self.lots, self.prices))
        return first.model_copy(
            update={
                "ticker": normalize_ticker(first.ticker),
                "quantity": quantity,
                "purchase_price": cost / quantity,
                "purchase_date": min(lot.purchase_date for lot in self.lots),
                "is_favorite": any(lot.is_favorite for lot in self.lots),
            }
        )


def merge_lots(
    positions: Iterable[Position], reference_rate: float | None
) -> list[tuple[Position, list[str]]]:
    """Combine lots sharing (TICKER, asset type) into synthetic positions.

    Quantities add up and the purchase price becomes the quantity-weighted
    average. Lots in another currency than the group's first lot are converted
    with the reference rate, or kept as a separate group when it is unknown.
    Returns (merged position, lot ids) in first-seen order.
    """
    groups: dict[tuple, _Group] = {}
    for lot in positions:
        base_key = (normalize_ticker(lot.ticker), lot.asset_type)
        group = groups.get(base_key)
        if group is None:
            groups[base_key] = _Group([lot], [lot.purchase_price])
            continue
        price = convert(lot.purchase_price, lot.currency, group.currency, reference_rate)
        if price is not None:
            group.lots.append(lot)
            group.prices.append(price)
            continue
        own_key = (*base_key, lot.currency)
        if own_key in groups:
            groups[own_key].lots.append(lot)
            groups[own_key].prices.append(lot.purchase_price)
        else:
            groups[own_key] = _Group([lot], [lot.purchase_price])
    return [(g.to_position(), [lot.id for lot in g.lots]) for g in groups.values()]


def _breakdown(valuations: list[Valuation]) -> list[TypeBreakdown]:
    rows = []
    for asset_type in AssetType:
        matching = [v for v in valuations if v.asset_type == asset_type]
        invested = sum(v.cost_basis for v in matching)
        current = sum(v.current_value for v in matching)
        rows.append(
            TypeBreakdown(
                asset_type=asset_type,
                invested=invested,
                current_value=current,
                change_amount=current - invested,
                change_percent=percentage_change(invested, current),
            )
        )
    return rows


def aggregate(
    positions: Iterable[Position],
    prices: PriceBook,
    reference_rate: float | None,
    display_currency: Currency,
    *,
    filters: PositionFilter | None = None,
    merge_duplicates: bool = False,
) -> PortfolioSummary:
    """Value and total a portfolio in display_currency.

    Valuations flagged unconverted are reported but left out of every total,
    so amounts in different currencies are never added together.
    """
    selected = filter_positions(positions, filters)
    if merge_duplicates:
        valuations = [
            valuate(merged, prices, reference_rate, display_currency).model_copy(
                update={"lot_ids": lot_ids}
            )
            for merged, lot_ids in merge_lots(selected, reference_rate)
        ]
    else:
        valuations = [valuate(p, prices, reference_rate, display_currency) for p in selected]

    counted = [v for v in valuations if not v.unconverted]
    invested = sum(v.cost_basis for v in counted)
    current = sum(v.current_value for v in counted)
    return PortfolioSummary(
        currency=display_currency,
        invested=invested,
        current_value=current,
        change_amount=current - invested,
        change_percent=percentage_change(invested, current),
        breakdown=_breakdown(counted),
        positions=valuations,
        unconverted_ids=[i for v in valuations if v.unconverted for i in v.lot_ids],
        reference_rate=reference_rate,
    )
