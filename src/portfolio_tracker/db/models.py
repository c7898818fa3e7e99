"""Database models for the portfolio tracker.

Only the user's investments are persisted. Quotes, rates and prices are
fetched on a timer and kept in memory; they are not stored.
"""
import unicodedata
import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _fold(label: str) -> str:
    """Lowercase and strip accents ("Acción" -> "accion")."""
    decomposed = unicodedata.normalize("NFD", label.strip())
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


class AssetType(str, Enum):
    """Asset class of an investment. Values are the labels stored in the table."""

    CRYPTO = "Cripto"
    EQUITY = "Acción"
    CEDEAR = "CEDEAR"

    @classmethod
    def parse(cls, raw: "str | AssetType") -> "AssetType":
        """Parse a stored or user-supplied label, ignoring case and accents."""
        if isinstance(raw, cls):
            return raw
        folded = _fold(str(raw))
        for member in cls:
            if folded in (_fold(member.value), member.name.lower()):
                return member
        raise ValueError(f"Unknown asset type: {raw!r}")


class Currency(str, Enum):
    """Transaction / display currency."""

    ARS = "ARS"
    USD = "USD"


class RateType(str, Enum):
    """Kind of yield offer."""

    TERM_DEPOSIT = "Plazo Fijo"
    REMUNERATED_ACCOUNT = "Cuenta Remunerada"
    STAKING = "Staking"


class Investment(SQLModel, table=True):
    """A single purchase lot owned by a user."""

    __tablename__ = "investments"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    ticker: str
    name: str
    type: str  # AssetType value
    quantity: float
    purchase_price: float
    purchase_date: date
    currency: str  # Currency value
    is_favorite: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
