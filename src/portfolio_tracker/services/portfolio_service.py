"""Per-user portfolio sessions over the investment repository."""
import csv
import io
import logging
import threading
from collections import OrderedDict

from portfolio_tracker.db.models import AssetType, Currency
from portfolio_tracker.db.repository import InvestmentRepository
from portfolio_tracker.errors import (
    AssetNotFoundError,
    InvestmentNotFoundError,
    PersistenceError,
)
from portfolio_tracker.providers.core import round2
from portfolio_tracker.schemas import (
    AssetPrice,
    PortfolioSummary,
    Position,
    PositionCreate,
    PositionUpdate,
    PurchaseSuggestion,
)
from portfolio_tracker.services.aggregator import PositionFilter, aggregate
from portfolio_tracker.services.market_board import MarketBoard
from portfolio_tracker.services.valuation import convert

logger = logging.getLogger(__name__)

# Least recently used sessions beyond this are dropped; they reload from the store.
MAX_SESSIONS = 256

CSV_HEADERS = ("Ticker", "Nombre", "Tipo", "Cantidad", "Precio Compra", "Fecha", "Moneda")


class PortfolioSession:
    """One user's investments, cached in memory and written through to the store."""

    def __init__(self, user_id: str, repository: InvestmentRepository, board: MarketBoard) -> None:
        self.user_id = user_id
        self._repository = repository
        self._board = board
        self._investments: list[Position] | None = None
        self._lock = threading.RLock()

    @property
    def investments(self) -> list[Position]:
        """Cached list, loaded on first access."""
        with self._lock:
            if self._investments is None:
                return self.reload()
            return list(self._investments)

    def reload(self) -> list[Position]:
        with self._lock:
            self._investments = self._repository.list(self.user_id)
            return list(self._investments)

    def get(self, investment_id: str) -> Position:
        for position in self.investments:
            if position.id == investment_id:
                return position
        raise InvestmentNotFoundError(f"Investment '{investment_id}' not found")

    def add(self, data: PositionCreate) -> Position:
        with self._lock:
            created = self._repository.insert(self.user_id, data)
            self.reload()
            return created

    def update(self, investment_id: str, changes: PositionUpdate) -> Position:
        with self._lock:
            self._repository.update(self.user_id, investment_id, changes)
            self.reload()
            return self.get(investment_id)

    def delete(self, investment_id: str) -> None:
        with self._lock:
            self._repository.delete(self.user_id, investment_id)
            self.reload()

    def toggle_favorite(self, investment_id: str) -> Position:
        """Flip the favorite flag locally first; restore it if the store rejects the write."""
        with self._lock:
            current = self.get(investment_id)
            toggled = current.model_copy(update={"is_favorite": not current.is_favorite})
            self._replace(toggled)
            try:
                self._repository.set_favorite(self.user_id, investment_id, toggled.is_favorite)
            except PersistenceError:
                logger.warning("Reverting favorite toggle for %s", investment_id)
                self._replace(current)
                raise
            return toggled

    def _replace(self, position: Position) -> None:
        self._investments = [position if p.id == position.id else p for p in self.investments]

    def summary(
        self,
        display_currency: Currency,
        *,
        filters: PositionFilter | None = None,
        merge_duplicates: bool = False,
    ) -> PortfolioSummary:
        return aggregate(
            self.investments,
            self._board.price_book,
            self._board.reference_rate,
            display_currency,
            filters=filters,
            merge_duplicates=merge_duplicates,
        )

    def export_csv(self) -> str:
        """Investments as CSV with every field quoted."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for p in self.investments:
            writer.writerow(
                (
                    p.ticker,
                    p.name,
                    p.asset_type.value,
                    p.quantity,
                    p.purchase_price,
                    p.purchase_date.isoformat(),
                    p.currency.value,
                )
            )
        return buffer.getvalue()

    def suggest_purchase(self, asset: AssetPrice) -> PurchaseSuggestion:
        """Prefill for a picked asset: crypto in USD, everything else in ARS.

        The price is left empty when it needs conversion and the rate is unknown.
        """
        currency = Currency.USD if asset.asset_type == AssetType.CRYPTO else Currency.ARS
        price = convert(asset.price, asset.currency, currency, self._board.reference_rate)
        return PurchaseSuggestion(
            ticker=asset.ticker,
            name=asset.name,
            asset_type=asset.asset_type,
            currency=currency,
            purchase_price=round2(price),
            logo=asset.logo,
        )


class PortfolioService:
    """Hands out one PortfolioSession per user id, keeping at most ``max_sessions``."""

    def __init__(
        self,
        repository: InvestmentRepository,
        board: MarketBoard,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        self._repository = repository
        self._board = board
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, PortfolioSession] = OrderedDict()
        self._lock = threading.Lock()

    def session(self, user_id: str) -> PortfolioSession:
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = PortfolioSession(user_id, self._repository, self._board)
                self._sessions[user_id] = session
                while len(self._sessions) > self._max_sessions:
                    evicted, _ = self._sessions.popitem(last=False)
                    logger.debug("Evicted portfolio session for %s", evicted)
            else:
                self._sessions.move_to_end(user_id)
            return session

    def lookup_asset(self, asset_type: AssetType, ticker: str) -> AssetPrice:
        asset = self._board.price_book.get(asset_type, ticker)
        if asset is None:
            raise AssetNotFoundError(f"No live price for {asset_type.value} {ticker.upper()}")
        return asset
