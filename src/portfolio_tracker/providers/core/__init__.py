"""Core provider abstractions."""
from portfolio_tracker.providers.core.exceptions import (
    PROVIDER_EXCEPTIONS,
    MalformedPayloadError,
    describe_provider_error,
)
from portfolio_tracker.providers.core.polling import PollingTask
from portfolio_tracker.providers.core.quote_source_abc import (
    HTTPQuoteSource,
    QuoteSourceABC,
)
from portfolio_tracker.providers.core.retry import ExponentialBackoff, retry_async
from portfolio_tracker.providers.core.utils import as_number, round2

__all__ = [
    "PROVIDER_EXCEPTIONS",
    "ExponentialBackoff",
    "HTTPQuoteSource",
    "MalformedPayloadError",
    "PollingTask",
    "QuoteSourceABC",
    "as_number",
    "describe_provider_error",
    "retry_async",
    "round2",
]
