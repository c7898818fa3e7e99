"""DI container: the composition root for sources, the market board and storage."""
from dependency_injector import containers, providers

from portfolio_tracker.config import AppConfig
from portfolio_tracker.db import Database, InvestmentRepository
from portfolio_tracker.providers import (
    CedearsProvider,
    CoinGeckoProvider,
    ComparaDolarCryptoProvider,
    ComparaDolarProvider,
    ComparaTasasProvider,
    DolarApiProvider,
    InflationProvider,
    PixProvider,
)
from portfolio_tracker.services import MarketBoard, PortfolioService


class Container(containers.DeclarativeContainer):
    config = providers.Dependency(instance_of=AppConfig)

    timeout = providers.Callable(lambda c: c.http_timeout_seconds, config)

    # ---- Sources ----
    dolar_api = providers.Singleton(DolarApiProvider, timeout=timeout)
    compara_dolar = providers.Singleton(ComparaDolarProvider, timeout=timeout)
    compara_dolar_crypto = providers.Singleton(ComparaDolarCryptoProvider, timeout=timeout)
    pix = providers.Singleton(PixProvider, timeout=timeout)
    coingecko = providers.Singleton(
        CoinGeckoProvider,
        api_key=providers.Callable(lambda c: c.coingecko_api_key, config),
        timeout=timeout,
    )
    cedears = providers.Singleton(CedearsProvider, timeout=timeout)
    compara_tasas = providers.Singleton(ComparaTasasProvider, timeout=timeout)
    inflation = providers.Singleton(InflationProvider, timeout=timeout)

    market_board = providers.Singleton(
        MarketBoard,
        dollar_sources=providers.Dict(dolarapi=dolar_api, comparadolar=compara_dolar),
        crypto_sources=providers.Dict(comparadolar=compara_dolar_crypto),
        pix_sources=providers.Dict(pix=pix),
        asset_sources=providers.Dict(coingecko=coingecko, cedears=cedears),
        rate_sources=providers.Dict(comparatasas=compara_tasas),
        inflation_source=inflation,
        interval_seconds=providers.Callable(lambda c: c.quotes_refresh_seconds, config),
    )

    # ---- Storage ----
    database = providers.Singleton(
        Database,
        url=providers.Callable(lambda c: c.database_url, config),
        echo=providers.Callable(lambda c: c.sql_echo, config),
    )
    investment_repository = providers.Singleton(InvestmentRepository, database)
    portfolio_service = providers.Singleton(PortfolioService, investment_repository, market_board)


def init_container(config: AppConfig | None = None) -> Container:
    """Create the container for the given (or environment) configuration."""
    return Container(config=providers.Object(config or AppConfig.from_env()))
