"""Pure financial simulator math: compound interest and installments vs cash."""
import math
from collections.abc import Iterable

from portfolio_tracker.errors import SimulationInputError
from portfolio_tracker.schemas import (
    AlternativeProjection,
    CompoundProjection,
    InstallmentComparison,
)

DAYS_PER_YEAR = 365
# Installments must beat cash by at least this fraction of the cash price.
INSTALLMENT_MARGIN = 0.01
DEFAULT_WALLET_RATE = 30.0
DEFAULT_BANK_RATE = 35.0

FAVOR_INSTALLMENTS = "favor installments"
FAVOR_CASH = "favor cash"


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise SimulationInputError(f"{name} must be a finite number")


def project_compound(principal: float, annual_rate_percent: float, days: int) -> CompoundProjection:
    """Daily-compounded growth of principal at a nominal annual rate."""
    _require_finite(principal=principal, annual_rate_percent=annual_rate_percent, days=days)
    if principal < 0:
        raise SimulationInputError("principal must not be negative")
    if days < 0:
        raise SimulationInputError("days must not be negative")
    daily = 1 + annual_rate_percent / 100 / DAYS_PER_YEAR
    if daily <= 0:
        raise SimulationInputError("annual_rate_percent is too negative")
    final = principal * daily**days
    return CompoundProjection(
        final_amount=final,
        interest=final - principal,
        effective_annual_rate=(daily**DAYS_PER_YEAR - 1) * 100,
    )


def annualize_monthly_rate(monthly_percent: float) -> float:
    """Compound a monthly percentage over twelve months."""
    _require_finite(monthly_percent=monthly_percent)
    return ((1 + monthly_percent / 100) ** 12 - 1) * 100


def compare_installments_to_cash(
    cash_price: float,
    total_installment_price: float,
    installment_count: int,
    monthly_inflation_percent: float,
) -> InstallmentComparison:
    """Present value of equal installments discounted by monthly inflation.

    Installment i (0-based) is discounted by (1 + inflation) ** (i + 1).
    """
    _require_finite(
        cash_price=cash_price,
        total_installment_price=total_installment_price,
        monthly_inflation_percent=monthly_inflation_percent,
    )
    if cash_price <= 0:
        raise SimulationInputError("cash_price must be positive")
    if total_installment_price <= 0:
        raise SimulationInputError("total_installment_price must be positive")
    if isinstance(installment_count, bool) or not isinstance(installment_count, int) or installment_count < 1:
        raise SimulationInputError("installment_count must be an integer >= 1")
    if monthly_inflation_percent <= -100:
        raise SimulationInputError("monthly_inflation_percent must be greater than -100")
    growth = (total_installment_price / cash_price) ** (1 / installment_count)
    if growth <= 0:
        raise SimulationInputError("installment plan implies a non-positive monthly rate")

    installment = total_installment_price / installment_count
    discount = 1 + monthly_inflation_percent / 100
    adjusted = [installment / discount ** (i + 1) for i in range(installment_count)]
    total_adjusted = sum(adjusted)
    favor = total_adjusted < cash_price * (1 - INSTALLMENT_MARGIN)
    return InstallmentComparison(
        installment_amount=installment,
        adjusted_installments=adjusted,
        total_adjusted=total_adjusted,
        cft=(growth**12 - 1) * 100,
        recommendation=FAVOR_INSTALLMENTS if favor else FAVOR_CASH,
    )


def _average(rates: Iterable[float], default: float) -> float:
    rates = list(rates)
    return sum(rates) / len(rates) if rates else default


def project_alternatives(
    cash_price: float,
    months: int,
    wallet_rates: Iterable[float] = (),
    bank_rates: Iterable[float] = (),
) -> AlternativeProjection:
    """Growth of the cash price in an average wallet account and term deposit."""
    _require_finite(cash_price=cash_price, months=months)
    if cash_price <= 0:
        raise SimulationInputError("cash_price must be positive")
    if months < 0:
        raise SimulationInputError("months must not be negative")
    wallet = _average(wallet_rates, DEFAULT_WALLET_RATE)
    bank = _average(bank_rates, DEFAULT_BANK_RATE)
    return AlternativeProjection(
        months=months,
        wallet_rate=wallet,
        bank_rate=bank,
        wallet_projection=cash_price * (1 + wallet / 100) ** (months / 12),
        term_deposit_projection=cash_price * (1 + bank / 100) ** (months / 12),
    )
