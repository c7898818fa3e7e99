"""Provider-side error types."""
import asyncio

import httpx


class MalformedPayloadError(ValueError):
    """The upstream body did not have the expected shape."""


# What a single source may raise on a bad day; anything else is a bug and propagates.
PROVIDER_EXCEPTIONS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    TypeError,
    TimeoutError,
    OSError,
    asyncio.TimeoutError,
    httpx.HTTPError,
)


def describe_provider_error(exc: Exception) -> str:
    """Short, log- and banner-friendly description of a provider failure."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from {exc.request.url.host}"
    if isinstance(exc, httpx.TimeoutException | asyncio.TimeoutError | TimeoutError):
        return "request timed out"
    if isinstance(exc, httpx.RequestError):
        return f"network error: {type(exc).__name__}"
    if isinstance(exc, MalformedPayloadError):
        return f"malformed response: {exc}"
    return f"{type(exc).__name__}: {exc}"
