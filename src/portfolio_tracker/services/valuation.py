"""Position valuation and ARS/USD conversion."""
from portfolio_tracker.db.models import Currency
from portfolio_tracker.schemas import Position, Valuation
from portfolio_tracker.services.price_book import PriceBook


def convert(
    amount: float,
    from_currency: Currency,
    to_currency: Currency,
    rate: float | None,
) -> float | None:
    """Convert amount between ARS and USD with the reference rate (ARS per USD).

    Returns None when a conversion is needed but the rate is unknown.
    """
    if from_currency == to_currency:
        return amount
    if rate is None or rate <= 0:
        return None
    if from_currency == Currency.USD:
        return amount * rate
    return amount / rate


def percentage_change(cost_basis: float, current_value: float) -> float:
    """Change in percent; 0.0 for a zero cost basis."""
    if cost_basis == 0:
        return 0.0
    return (current_value - cost_basis) / cost_basis * 100


def _current_price(
    position: Position, prices: PriceBook, reference_rate: float | None
) -> tuple[float, bool, bool]:
    """(price in the position's currency, live, unconverted)."""
    live = prices.get(position.asset_type, position.ticker)
    if live is None:
        return position.purchase_price, False, False
    price = convert(live.price, live.currency, position.currency, reference_rate)
    if price is None:
        return position.purchase_price, False, True
    return price, True, False


def valuate(
    position: Position,
    prices: PriceBook,
    reference_rate: float | None,
    display_currency: Currency,
) -> Valuation:
    """Value a position in display_currency.

    The percentage change is computed on native figures. If conversion to the
    display currency is impossible, figures stay native and the result is
    flagged ``unconverted``.
    """
    current_price, live, unconverted = _current_price(position, prices, reference_rate)
    cost_basis = position.quantity * position.purchase_price
    current_value = position.quantity * current_price
    change_pct = percentage_change(cost_basis, current_value)

    native = (position.purchase_price, current_price, cost_basis, current_value)
    converted = [convert(x, position.currency, display_currency, reference_rate) for x in native]
    if None in converted:
        currency, figures, unconverted = position.currency, native, True
    else:
        currency, figures = display_currency, tuple(converted)
    purchase_price, current_price, cost_basis, current_value = figures

    return Valuation(
        position_id=position.id,
        lot_ids=[position.id],
        ticker=position.ticker,
        name=position.name,
        asset_type=position.asset_type,
        quantity=position.quantity,
        purchase_price=purchase_price,
        current_price=current_price,
        cost_basis=cost_basis,
        current_value=current_value,
        absolute_change=current_value - cost_basis,
        percentage_change=change_pct,
        currency=currency,
        unconverted=unconverted,
        live_price=live,
    )
