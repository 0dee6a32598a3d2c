"""Unit tests for idempotent monthly closure"""

import pytest
from datetime import datetime
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from ledger_bot.infrastructure.database.models import MonthlyClosure
from ledger_bot.infrastructure.database.repositories import ClosureRepository
from ledger_bot.services.closure import ClosureService
from ledger_bot.services.ledger import TransactionLedger


@pytest.fixture
def ledger(db, clock) -> TransactionLedger:
    return TransactionLedger(db, clock=clock)


@pytest.fixture
def service(db, clock) -> ClosureService:
    return ClosureService(db, clock=clock)


def test_close_month_computes_totals(db, ledger, service):
    ledger.register("ingreso", "1000 sueldo", "123", None)
    ledger.register("gasto", "300 comida", "123", None)
    ledger.register("gasto", "150 transporte subte", "123", None)

    closure = service.close_month(5, 2025)

    assert (closure.month, closure.year) == (5, 2025)
    assert closure.income == Decimal("1000")
    assert closure.outgo == Decimal("450")
    assert closure.balance == Decimal("550")


def test_close_month_with_no_transactions(service):
    closure = service.close_month(2, 2025)

    assert closure.income == 0
    assert closure.outgo == 0
    assert closure.balance == 0


def test_close_month_is_idempotent(db, ledger, service):
    ledger.register("ingreso", "1000 sueldo", "123", None)
    first = service.close_month(5, 2025)

    # Late transaction for the already closed month
    ledger.register("gasto", "999 olvidado", "123", None)
    second = service.close_month(5, 2025)

    assert second.id == first.id
    assert second.income == Decimal("1000")
    assert second.outgo == Decimal("0")
    assert db.query(MonthlyClosure).filter_by(month=5, year=2025).count() == 1


def test_same_month_of_different_years_are_distinct(db, service):
    service.close_month(5, 2024)
    service.close_month(5, 2025)

    assert db.query(MonthlyClosure).count() == 2


def test_store_rejects_duplicate_period(db, clock):
    repo = ClosureRepository(db)
    repo.create(5, 2025, Decimal(0), Decimal(0), Decimal(0), clock())
    db.commit()

    with pytest.raises(IntegrityError):
        repo.create(5, 2025, Decimal(1), Decimal(0), Decimal(1), clock())
    db.rollback()


def test_close_month_returns_row_inserted_concurrently(db, clock, service, monkeypatch):
    """A request that lost the race returns the winner's row instead of failing"""
    winner = ClosureRepository(db).create(
        5, 2025, Decimal("42"), Decimal("0"), Decimal("42"), datetime(2025, 5, 31, 23, 0)
    )
    db.commit()
    winner_id = winner.id

    real_get = service.closures.get
    lookups = []

    def stale_then_real(month, year):
        lookups.append((month, year))
        if len(lookups) == 1:
            return None
        return real_get(month, year)

    monkeypatch.setattr(service.closures, "get", stale_then_real)

    closure = service.close_month(5, 2025)

    assert closure.id == winner_id
    assert closure.income == Decimal("42")
    assert len(lookups) == 2
    assert db.query(MonthlyClosure).filter_by(month=5, year=2025).count() == 1
