"""Domain exceptions and their mapping to HTTP responses."""
from dataclasses import dataclass

from fastapi import HTTPException


class SimulationInputError(ValueError):
    """Simulator input that would produce NaN/Infinity or a meaningless result."""


class PersistenceError(Exception):
    """The row store rejected an insert/update/delete. Message is passed through."""


class NotFoundError(Exception):
    """The requested resource does not exist (for this user)."""


class InvestmentNotFoundError(PersistenceError, NotFoundError):
    """No investment with that id belongs to the user."""


class AssetNotFoundError(NotFoundError):
    """No live price is known for that asset."""


@dataclass(frozen=True)
class ErrorMapper:
    """Maps domain exceptions to HTTP (status_code, detail).

    One instance per router so 404 messages name the right resource.
    """

    resource_name: str = "Resource"

    def to_http(self, exc: Exception, identifier: str | None = None) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTPException."""
        if isinstance(exc, NotFoundError):
            if identifier is None:
                return (404, f"{self.resource_name} not found")
            return (404, f"{self.resource_name} '{identifier}' not found")
        if isinstance(exc, PersistenceError):
            return (502, str(exc) or "Storage error")
        if isinstance(exc, ValueError):
            return (422, str(exc) or "Invalid input")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception, identifier: str | None = None) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc, identifier=identifier)
        raise HTTPException(status_code=status_code, detail=detail) from exc
