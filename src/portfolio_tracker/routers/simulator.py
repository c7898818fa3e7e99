"""Simulator routes: compound interest and installments vs cash."""
from fastapi import APIRouter

from portfolio_tracker.db.models import RateType
from portfolio_tracker.deps import MarketBoardDep
from portfolio_tracker.errors import ErrorMapper, SimulationInputError
from portfolio_tracker.schemas import (
    CompoundProjection,
    CompoundRequest,
    InstallmentRequest,
    InstallmentResponse,
)
from portfolio_tracker.services.simulator import (
    annualize_monthly_rate,
    compare_installments_to_cash,
    project_alternatives,
    project_compound,
)

router = APIRouter(prefix="/simulator", tags=["simulator"])

_errors = ErrorMapper("Simulation")


@router.post("/compound", response_model=CompoundProjection)
async def simulate_compound(request: CompoundRequest) -> CompoundProjection:
    """Daily-compounded projection of a deposit."""
    try:
        return project_compound(request.principal, request.annual_rate_percent, request.days)
    except SimulationInputError as e:
        _errors.raise_http(e)


@router.post("/installments", response_model=InstallmentResponse)
async def simulate_installments(
    request: InstallmentRequest, board: MarketBoardDep
) -> InstallmentResponse:
    """Compare paying in installments against paying cash.

    Uses the latest official monthly inflation unless one is given.
    """
    inflation = request.monthly_inflation_percent
    if inflation is None and board.rates.inflation is not None:
        inflation = board.rates.inflation.percent
    if inflation is None:
        _errors.raise_http(
            SimulationInputError(
                "monthly_inflation_percent is required while official inflation is unavailable"
            )
        )
    offers = board.rates.items
    try:
        comparison = compare_installments_to_cash(
            request.cash_price,
            request.total_installment_price,
            request.installment_count,
            inflation,
        )
        alternatives = project_alternatives(
            request.cash_price,
            request.installment_count,
            wallet_rates=[o.rate for o in offers if o.rate_type == RateType.REMUNERATED_ACCOUNT],
            bank_rates=[o.rate for o in offers if o.rate_type == RateType.TERM_DEPOSIT],
        )
        annual = annualize_monthly_rate(inflation)
    except SimulationInputError as e:
        _errors.raise_http(e)
    return InstallmentResponse(
        comparison=comparison,
        monthly_inflation_percent=inflation,
        annual_inflation_percent=annual,
        alternatives=alternatives,
    )
