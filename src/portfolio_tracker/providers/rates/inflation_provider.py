"""Official monthly CPI change from the datos.gob.ar time-series API."""
import logging
from datetime import date
from typing import Any

from portfolio_tracker.providers.core import (
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
    round2,
)
from portfolio_tracker.schemas import MonthlyInflation

logger = logging.getLogger(__name__)

CPI_SERIES_ID = "103.1_I2N_2016_M_19"


def parse_inflation_series(payload: Any, today: date | None = None) -> MonthlyInflation:
    """Latest non-null, non-future row of a percent_change series, as a percentage.

    Values come as fractions (0.027 -> 2.7).
    """
    rows = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(rows, list):
        raise MalformedPayloadError("expected a data list")
    today = today or date.today()
    for row in reversed(rows):
        if not isinstance(row, list) or len(row) < 2:
            continue
        try:
            month = date.fromisoformat(str(row[0])[:10])
        except ValueError:
            continue
        value = as_number(row[1])
        if value is None or month > today:
            continue
        return MonthlyInflation(date=month, percent=round2(value * 100))
    raise MalformedPayloadError("no published inflation value")


class InflationProvider(HTTPQuoteSource[MonthlyInflation]):
    """Monthly inflation (INDEC CPI, national level) from apis.datos.gob.ar."""

    BASE_URL = "https://apis.datos.gob.ar/series/api"
    name = "inflation"

    def __init__(self, series_id: str = CPI_SERIES_ID, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._series_id = series_id

    async def fetch(self) -> list[MonthlyInflation]:
        params = {
            "ids": self._series_id,
            "collapse": "month",
            "representation_mode": "percent_change",
            "limit": 5000,
            "start": 0,
        }
        payload = await self._get_json("/series/", params=params)
        latest = parse_inflation_series(payload)
        logger.debug("Latest monthly inflation %s: %.2f%%", latest.date, latest.percent)
        return [latest]
