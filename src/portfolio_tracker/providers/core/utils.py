"""Shared utilities for quote providers."""
import math
from typing import Any

DECIMALS = 2
LOGO_BASE_URL = "https://icons.com.ar/logos"


def normalize_ticker(ticker: str) -> str:
    """Normalize a ticker (strip + uppercase)."""
    return ticker.strip().upper()


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)


def as_number(value: Any) -> float | None:
    """Return value as float if it is a finite JSON number, else None.

    Strings, booleans and NaN are rejected so they never reach valuation math.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def spread(buy: float | None, sell: float | None) -> float | None:
    """sell - buy rounded to 2 decimals; None if either side is missing."""
    if buy is None or sell is None:
        return None
    return round2(sell - buy)


def title_case(text: str) -> str:
    """Title-case each word: "BANCO NACION" -> "Banco Nacion"."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split(" "))


def logo_url(entity: str) -> str:
    """Logo URL for an entity name ("Banco Nación" -> .../banco-nación.svg)."""
    return f"{LOGO_BASE_URL}/{'-'.join(entity.lower().split())}.svg"
