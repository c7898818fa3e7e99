"""ComparaTasas provider: term deposits, remunerated accounts and crypto yields."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from portfolio_tracker.db.models import RateType
from portfolio_tracker.providers.core import (
    PROVIDER_EXCEPTIONS,
    HTTPQuoteSource,
    MalformedPayloadError,
    as_number,
    describe_provider_error,
    round2,
)
from portfolio_tracker.providers.core.utils import logo_url
from portfolio_tracker.schemas import RateOffer

logger = logging.getLogger(__name__)

FCI_DETAIL_URL = "https://good-cafci.comparatasas.ar/v1/finanzas/fci/detalle/nombre"


@dataclass(frozen=True)
class WalletFund:
    """A wallet whose remunerated balance is invested in a money-market fund."""

    entity: str
    fund: str
    logo: str

    @property
    def url(self) -> str:
        return f"{FCI_DETAIL_URL}/{quote(self.fund)}"


WALLET_FUNDS: tuple[WalletFund, ...] = (
    WalletFund("Prex", "Allaria Ahorro - Clase A", logo_url("prex")),
    WalletFund("Cocos", "Cocos Daruma Renta Mixta - Clase A", logo_url("cocos")),
    WalletFund("Personal Pay", "Delta Pesos - Clase X", logo_url("personal pay")),
    WalletFund("MercadoPago", "Mercado Fondo - Clase A", logo_url("mercadopago")),
    WalletFund("LB Finanzas", "ST Zero - Clase D", logo_url("lb finanzas")),
    WalletFund("AstroPay", "ST Zero - Clase D", logo_url("astropay")),
    WalletFund("Lemon", "Fima Premium - Clase P", logo_url("lemoncash")),
)


def parse_term_deposits(payload: Any) -> list[RateOffer]:
    """/plazos-fijos rows; ``tnaClientes`` is a fraction (0.35 -> 35.0)."""
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of term deposits")
    offers: list[RateOffer] = []
    for row in payload:
        if not isinstance(row, dict) or not isinstance(row.get("entidad"), str):
            continue
        tna = as_number(row.get("tnaClientes"))
        if tna is None:
            logger.debug("Skipping term deposit without rate: %s", row["entidad"])
            continue
        offers.append(
            RateOffer(
                entity=row["entidad"],
                rate=round2(tna * 100),
                rate_type=RateType.TERM_DEPOSIT,
                logo=logo_url(row["entidad"]),
            )
        )
    return offers


def parse_remunerated_accounts(payload: Any) -> list[RateOffer]:
    """/cuentas-remuneradas rows; ``tna`` is already a percentage."""
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of remunerated accounts")
    offers: list[RateOffer] = []
    for row in payload:
        if not isinstance(row, dict) or not isinstance(row.get("nombre"), str):
            continue
        tna = as_number(row.get("tna"))
        if tna is None:
            logger.debug("Skipping account without rate: %s", row["nombre"])
            continue
        offers.append(
            RateOffer(
                entity=row["nombre"],
                rate=tna,
                rate_type=RateType.REMUNERATED_ACCOUNT,
                limit=as_number(row.get("limite")),
                logo=logo_url(row["nombre"]),
            )
        )
    return offers


def parse_crypto_yields(payload: Any) -> list[RateOffer]:
    """/v1/finanzas/rendimientos: one Staking offer per coin with a positive APY."""
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of exchanges")
    offers: list[RateOffer] = []
    for exchange in payload:
        if not isinstance(exchange, dict):
            continue
        entity = exchange.get("entidad")
        for item in exchange.get("rendimientos") or []:
            if not isinstance(item, dict) or not isinstance(item.get("moneda"), str):
                continue
            apy = as_number(item.get("apy"))
            if apy is None or apy <= 0:
                continue
            offers.append(
                RateOffer(
                    entity=f"{item['moneda']} ({entity})",
                    rate=apy,
                    rate_type=RateType.STAKING,
                    logo=logo_url(item["moneda"]),
                )
            )
    return offers


def parse_fund_rate(payload: Any) -> float | None:
    """Daily-window TNA of an FCI detail body, or None when absent."""
    try:
        return as_number(payload["detalle"]["rendimientos"]["diario"]["tna"])
    except (KeyError, TypeError):
        return None


def merge_wallet_funds(accounts: list[RateOffer], funds: list[RateOffer]) -> list[RateOffer]:
    """Replace remunerated accounts by fund-backed rates with the same entity name."""
    by_entity = {offer.entity: offer for offer in accounts}
    for offer in funds:
        by_entity[offer.entity] = offer
    return list(by_entity.values())


class ComparaTasasProvider(HTTPQuoteSource[RateOffer]):
    """Yield offers from api.comparatasas.ar.

    The three listings are fetched concurrently and fail independently; the
    fetch only fails when all of them do. Wallet fund rates are best effort.
    """

    BASE_URL = "https://api.comparatasas.ar"
    name = "comparatasas"

    def __init__(self, wallet_funds: tuple[WalletFund, ...] = WALLET_FUNDS, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._wallet_funds = wallet_funds

    async def _fetch_fund(self, fund: WalletFund) -> RateOffer | None:
        try:
            rate = parse_fund_rate(await self._get_json(fund.url))
        except PROVIDER_EXCEPTIONS as exc:
            logger.warning("Fund rate for %s failed: %s", fund.entity, describe_provider_error(exc))
            return None
        if rate is None:
            return None
        return RateOffer(
            entity=fund.entity,
            rate=rate,
            rate_type=RateType.REMUNERATED_ACCOUNT,
            logo=fund.logo,
        )

    async def fetch(self) -> list[RateOffer]:
        listings = (
            ("/plazos-fijos", parse_term_deposits),
            ("/cuentas-remuneradas", parse_remunerated_accounts),
            ("/v1/finanzas/rendimientos", parse_crypto_yields),
        )
        raw = await asyncio.gather(
            *(self._get_json(path) for path, _ in listings), return_exceptions=True
        )
        parsed: list[list[RateOffer]] = []
        failures: list[Exception] = []
        for (path, parse), payload in zip(listings, raw):
            try:
                if isinstance(payload, BaseException):
                    raise payload
                parsed.append(parse(payload))
            except PROVIDER_EXCEPTIONS as exc:
                logger.warning("Rates listing %s failed: %s", path, describe_provider_error(exc))
                failures.append(exc)
                parsed.append([])
        if len(failures) == len(listings):
            raise failures[0]

        funds = await asyncio.gather(*(self._fetch_fund(f) for f in self._wallet_funds))
        term_deposits, accounts, staking = parsed
        accounts = merge_wallet_funds(accounts, [f for f in funds if f is not None])
        return term_deposits + accounts + staking
