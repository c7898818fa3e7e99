"""Listed instrument providers (CEDEARs and local equities)."""
from portfolio_tracker.providers.instruments.cedears_provider import CedearsProvider

__all__ = ["CedearsProvider"]
