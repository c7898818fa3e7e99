"""Tests for InvestmentRepository against in-memory SQLite."""
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from portfolio_tracker.db import AssetType, Currency, Investment
from portfolio_tracker.errors import InvestmentNotFoundError, PersistenceError
from portfolio_tracker.schemas import PositionCreate, PositionUpdate


def _create(ticker: str = "GGAL", **kwargs) -> PositionCreate:
    return PositionCreate(
        ticker=ticker,
        name=kwargs.pop("name", "Grupo Galicia"),
        asset_type=kwargs.pop("asset_type", "Acción"),
        quantity=kwargs.pop("quantity", 10),
        purchase_price=kwargs.pop("purchase_price", 4_000.0),
        purchase_date=kwargs.pop("purchase_date", date(2024, 3, 1)),
        currency=kwargs.pop("currency", "ARS"),
    )


class TestInvestmentRepository:
    """CRUD scoped by owner."""

    def test_insert_and_list(self, repository):
        created = repository.insert("alice", _create())

        listed = repository.list("alice")

        assert [p.id for p in listed] == [created.id]
        assert listed[0].asset_type == AssetType.EQUITY
        assert listed[0].currency == Currency.ARS
        assert listed[0].is_favorite is False

    def test_created_at_is_timezone_aware(self, repository):
        created = repository.insert("alice", _create())

        listed = repository.list("alice")

        assert created.created_at.tzinfo is not None
        assert listed[0].created_at.utcoffset() == timedelta(0)

    def test_list_newest_first(self, repository, database):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        with database.session() as session:
            for offset, ticker in enumerate(["OLD", "MID", "NEW"]):
                session.add(
                    Investment(
                        user_id="alice", ticker=ticker, name=ticker, type="CEDEAR", quantity=1,
                        purchase_price=1, purchase_date=date(2024, 1, 1), currency="ARS",
                        created_at=base + timedelta(days=offset),
                    )
                )

        assert [p.ticker for p in repository.list("alice")] == ["NEW", "MID", "OLD"]

    def test_list_is_scoped_by_owner(self, repository):
        repository.insert("alice", _create())

        assert repository.list("bob") == []

    def test_malformed_rows_are_skipped(self, repository, database):
        repository.insert("alice", _create())
        with database.session() as session:
            session.add(
                Investment(
                    user_id="alice", ticker="BAD", name="Bad", type="Bono", quantity=1,
                    purchase_price=1, purchase_date=date(2024, 1, 1), currency="ARS",
                )
            )

        assert [p.ticker for p in repository.list("alice")] == ["GGAL"]

    def test_update_changes_only_given_fields(self, repository):
        created = repository.insert("alice", _create())

        repository.update("alice", created.id, PositionUpdate(quantity=25, asset_type="cedear"))

        [updated] = repository.list("alice")
        assert updated.quantity == 25
        assert updated.asset_type == AssetType.CEDEAR
        assert updated.purchase_price == 4_000.0

    def test_update_other_users_row_is_not_found(self, repository):
        created = repository.insert("alice", _create())

        with pytest.raises(InvestmentNotFoundError):
            repository.update("bob", created.id, PositionUpdate(quantity=1))

    def test_delete(self, repository):
        created = repository.insert("alice", _create())

        repository.delete("alice", created.id)

        assert repository.list("alice") == []
        with pytest.raises(InvestmentNotFoundError):
            repository.delete("alice", created.id)

    def test_set_favorite(self, repository):
        created = repository.insert("alice", _create())

        repository.set_favorite("alice", created.id, True)

        assert repository.list("alice")[0].is_favorite is True

    def test_store_errors_pass_message_through(self, repository, monkeypatch):
        def fail(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(repository._db, "session", fail)

        with pytest.raises(PersistenceError, match="disk I/O error"):
            repository.insert("alice", _create())


class TestPositionCreate:
    def test_asset_type_parsing_ignores_accents_and_case(self):
        assert _create(asset_type="ACCION").asset_type == AssetType.EQUITY
        assert _create(asset_type="cripto").asset_type == AssetType.CRYPTO

    def test_unknown_asset_type_rejected(self):
        with pytest.raises(ValueError):
            _create(asset_type="Bono")

    @pytest.mark.parametrize("field", ["quantity", "purchase_price"])
    def test_non_positive_numbers_rejected(self, field):
        with pytest.raises(ValueError):
            _create(**{field: 0})

    def test_blank_ticker_rejected(self):
        with pytest.raises(ValueError):
            _create(ticker="   ")
