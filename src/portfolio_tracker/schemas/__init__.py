"""Pydantic schemas for API and runtime use. Only Investment is persisted."""
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from portfolio_tracker.db.models import AssetType, Currency, RateType


class Quote(BaseModel):
    """Unified buy/sell quote across providers (dollar, crypto, PIX)."""

    source: str
    name: str
    key: str | None = None  # provider key, e.g. "contadoconliqui"
    buy: float | None = None
    sell: float | None = None
    spread: float | None = None
    is_24x7: bool = False
    variation: float | None = None
    logo: str | None = None
    currency: str | None = None


class QuoteSet(BaseModel):
    """Latest snapshot of one ingestion section.

    An empty, unavailable set means "temporarily unavailable", not "no quotes".
    """

    section: str
    items: list[Quote] = Field(default_factory=list)
    available: bool = False
    errors: list[str] = Field(default_factory=list)
    fetched_at: datetime | None = None


class AssetPrice(BaseModel):
    """Live market price of an instrument (crypto, CEDEAR or equity)."""

    ticker: str
    name: str
    asset_type: AssetType
    price: float
    currency: Currency
    logo: str | None = None
    provider_id: str | None = None


class AssetSet(BaseModel):
    """Latest snapshot of the instrument price sources."""

    items: list[AssetPrice] = Field(default_factory=list)
    available: bool = False
    errors: list[str] = Field(default_factory=list)
    fetched_at: datetime | None = None


class RateOffer(BaseModel):
    """Yield offer from a bank, wallet or exchange."""

    entity: str
    rate: float  # nominal annual %, APY for staking
    rate_type: RateType
    minimum_amount: float | None = None
    limit: float | None = None
    term_days: int | None = None
    logo: str | None = None


class MonthlyInflation(BaseModel):
    """Latest official monthly CPI change."""

    date: date
    percent: float


class RateSet(BaseModel):
    """Latest snapshot of yield offers and official inflation."""

    items: list[RateOffer] = Field(default_factory=list)
    inflation: MonthlyInflation | None = None
    available: bool = False
    errors: list[str] = Field(default_factory=list)
    fetched_at: datetime | None = None


class ReferenceRate(BaseModel):
    """The CCL sell price used for every ARS/USD conversion, if known."""

    rate: float | None = None
    source: str | None = None
    fetched_at: datetime | None = None


def _parse_asset_type(value):
    return AssetType.parse(value) if value is not None else None


def _strip_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class Position(BaseModel):
    """An investment as seen by the valuation engine."""

    id: str
    user_id: str
    ticker: str
    name: str
    asset_type: AssetType
    quantity: float = Field(gt=0, allow_inf_nan=False)
    purchase_price: float = Field(gt=0, allow_inf_nan=False)
    purchase_date: date
    currency: Currency
    is_favorite: bool = False
    created_at: datetime | None = None

    @field_validator("asset_type", mode="before")
    @classmethod
    def coerce_asset_type(cls, value):
        return _parse_asset_type(value)


class PositionCreate(BaseModel):
    """Payload to register a new investment."""

    ticker: str = Field(min_length=1)
    name: str = Field(min_length=1)
    asset_type: AssetType
    quantity: float = Field(gt=0, allow_inf_nan=False)
    purchase_price: float = Field(gt=0, allow_inf_nan=False)
    purchase_date: date
    currency: Currency

    @field_validator("asset_type", mode="before")
    @classmethod
    def coerce_asset_type(cls, value):
        return _parse_asset_type(value)

    @field_validator("ticker", "name")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return _strip_text(value)


class PositionUpdate(BaseModel):
    """Partial edit of an investment. Unset fields are left untouched."""

    ticker: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1)
    asset_type: AssetType | None = None
    quantity: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    purchase_price: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    purchase_date: date | None = None
    currency: Currency | None = None
    is_favorite: bool | None = None

    @field_validator("asset_type", mode="before")
    @classmethod
    def coerce_asset_type(cls, value):
        return _parse_asset_type(value)

    @field_validator("ticker", "name")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _strip_text(value)


class Valuation(BaseModel):
    """Valued position. Figures are expressed in ``currency``.

    ``unconverted`` is set when the display currency was requested but the
    reference rate was unknown; figures then stay in the native currency.
    """

    position_id: str | None = None
    lot_ids: list[str] = Field(default_factory=list)
    ticker: str
    name: str
    asset_type: AssetType
    quantity: float
    purchase_price: float
    current_price: float
    cost_basis: float
    current_value: float
    absolute_change: float
    percentage_change: float
    currency: Currency
    unconverted: bool = False
    live_price: bool = False


class TypeBreakdown(BaseModel):
    """Totals for one asset type."""

    asset_type: AssetType
    invested: float = 0.0
    current_value: float = 0.0
    change_amount: float = 0.0
    change_percent: float = 0.0


class PortfolioSummary(BaseModel):
    """Aggregated portfolio totals in a display currency."""

    currency: Currency
    invested: float = 0.0
    current_value: float = 0.0
    change_amount: float = 0.0
    change_percent: float = 0.0
    breakdown: list[TypeBreakdown] = Field(default_factory=list)
    positions: list[Valuation] = Field(default_factory=list)
    unconverted_ids: list[str] = Field(default_factory=list)
    reference_rate: float | None = None


class PurchaseSuggestion(BaseModel):
    """Prefilled investment form for a picked asset."""

    ticker: str
    name: str
    asset_type: AssetType
    currency: Currency
    purchase_price: float | None = None
    logo: str | None = None


class CompoundProjection(BaseModel):
    final_amount: float
    interest: float
    effective_annual_rate: float


class InstallmentComparison(BaseModel):
    installment_amount: float
    adjusted_installments: list[float]
    total_adjusted: float
    cft: float
    recommendation: str


class AlternativeProjection(BaseModel):
    """What the cash price would grow to if invested instead."""

    months: int
    wallet_rate: float
    bank_rate: float
    wallet_projection: float
    term_deposit_projection: float


class CompoundRequest(BaseModel):
    principal: float
    annual_rate_percent: float
    days: int


class InstallmentRequest(BaseModel):
    cash_price: float
    total_installment_price: float
    installment_count: int
    monthly_inflation_percent: float | None = None


class InstallmentResponse(BaseModel):
    comparison: InstallmentComparison
    monthly_inflation_percent: float
    annual_inflation_percent: float
    alternatives: AlternativeProjection


__all__ = [
    "AlternativeProjection",
    "AssetPrice",
    "AssetSet",
    "CompoundProjection",
    "CompoundRequest",
    "InstallmentComparison",
    "InstallmentRequest",
    "InstallmentResponse",
    "MonthlyInflation",
    "PortfolioSummary",
    "Position",
    "PositionCreate",
    "PositionUpdate",
    "PurchaseSuggestion",
    "Quote",
    "QuoteSet",
    "RateOffer",
    "RateSet",
    "ReferenceRate",
    "TypeBreakdown",
    "Valuation",
]
