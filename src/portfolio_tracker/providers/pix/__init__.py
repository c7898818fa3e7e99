"""PIX (Brazil instant payments) providers."""
from portfolio_tracker.providers.pix.pix_provider import PixProvider

__all__ = ["PixProvider"]
