"""Investment CRUD scoped by owning user."""
import logging
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from portfolio_tracker.db.models import Investment
from portfolio_tracker.db.sessions import Database
from portfolio_tracker.errors import InvestmentNotFoundError, PersistenceError
from portfolio_tracker.schemas import Position, PositionCreate, PositionUpdate

logger = logging.getLogger(__name__)

# PositionUpdate field -> column name
_COLUMNS = {"asset_type": "type"}


def _aware(value: datetime | None) -> datetime | None:
    # SQLite drops the offset; stored values are always UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_position(row: Investment) -> Position:
    return Position(
        id=row.id,
        user_id=row.user_id,
        ticker=row.ticker,
        name=row.name,
        asset_type=row.type,
        quantity=row.quantity,
        purchase_price=row.purchase_price,
        purchase_date=row.purchase_date,
        currency=row.currency,
        is_favorite=row.is_favorite,
        created_at=_aware(row.created_at),
    )


class InvestmentRepository:
    """Row-level CRUD over the ``investments`` table.

    Every statement filters on ``user_id``; a row owned by someone else is
    reported as not found.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def list(self, user_id: str) -> list[Position]:
        """All valid investments of a user, newest first. Malformed rows are skipped."""
        try:
            with self._db.session() as session:
                rows = session.exec(
                    select(Investment)
                    .where(Investment.user_id == user_id)
                    .order_by(Investment.created_at.desc())
                ).all()
                positions: list[Position] = []
                for row in rows:
                    try:
                        positions.append(_to_position(row))
                    except (ValidationError, ValueError) as exc:
                        logger.warning("Skipping malformed investment %s: %s", row.id, exc)
                return positions
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def insert(self, user_id: str, data: PositionCreate) -> Position:
        row = Investment(
            user_id=user_id,
            ticker=data.ticker,
            name=data.name,
            type=data.asset_type.value,
            quantity=data.quantity,
            purchase_price=data.purchase_price,
            purchase_date=data.purchase_date,
            currency=data.currency.value,
            is_favorite=False,
        )
        try:
            with self._db.session() as session:
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_position(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def update(self, user_id: str, investment_id: str, changes: PositionUpdate) -> None:
        values = changes.model_dump(exclude_unset=True)
        try:
            with self._db.session() as session:
                row = self._get_owned(session, user_id, investment_id)
                for field, value in values.items():
                    if value is None:
                        continue
                    if hasattr(value, "value"):
                        value = value.value
                    setattr(row, _COLUMNS.get(field, field), value)
                session.add(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def delete(self, user_id: str, investment_id: str) -> None:
        try:
            with self._db.session() as session:
                row = self._get_owned(session, user_id, investment_id)
                session.delete(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def set_favorite(self, user_id: str, investment_id: str, is_favorite: bool) -> None:
        self.update(user_id, investment_id, PositionUpdate(is_favorite=is_favorite))

    @staticmethod
    def _get_owned(session, user_id: str, investment_id: str) -> Investment:
        row = session.exec(
            select(Investment).where(
                Investment.id == investment_id, Investment.user_id == user_id
            )
        ).first()
        if row is None:
            raise InvestmentNotFoundError(f"Investment '{investment_id}' not found")
        return row
