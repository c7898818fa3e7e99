"""Application settings read from environment variables."""
import logging
import os

from pydantic import BaseModel, Field

_DEFAULT_DATABASE_URL = "sqlite:///./portfolio.db"


class AppConfig(BaseModel):
    """Runtime configuration. Build with AppConfig.from_env()."""

    database_url: str = _DEFAULT_DATABASE_URL
    sql_echo: bool = False
    quotes_refresh_seconds: float = Field(default=300.0, gt=0)
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    coingecko_api_key: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            database_url=os.getenv("DATABASE_URL", _DEFAULT_DATABASE_URL),
            sql_echo=os.getenv("SQL_ECHO", "0") == "1",
            quotes_refresh_seconds=os.getenv("QUOTES_REFRESH_SECONDS", "300"),
            http_timeout_seconds=os.getenv("HTTP_TIMEOUT_SECONDS", "10"),
            coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Root logger at ``level``; httpx request lines only at WARNING and above."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
