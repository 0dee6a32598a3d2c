"""Unit tests for transaction registration and aggregation"""

import pytest
from datetime import datetime
from sqlalchemy.exc import OperationalError
from ledger_bot.domain.exceptions import InvalidFormatError, InvalidTypeError, PersistenceError
from ledger_bot.domain.models import Balance
from ledger_bot.infrastructure.database.models import Transaction
from ledger_bot.infrastructure.database.repositories import TransactionRepository
from ledger_bot.services.ledger import TransactionLedger


@pytest.fixture
def ledger(db, clock) -> TransactionLedger:
    return TransactionLedger(db, clock=clock)


def _register_at(ledger, clock, when, raw_type, args):
    clock.now = when
    return ledger.register(raw_type, args, "123", "maria")


def test_register_outgo_with_subcategory(db, ledger):
    summary = ledger.register("gasto", "500 servicios metrogas", "123", "maria")

    assert summary.amount == -500
    assert summary.category == "servicios"
    assert summary.subcategory == "metrogas"

    stored = db.query(Transaction).one()
    assert stored.type == "outgo"
    assert stored.amount == -500
    assert stored.category == "servicios"
    assert stored.subcategory == "metrogas"
    assert stored.owner_id == "123"
    assert stored.owner_name == "maria"
    assert stored.created_at == datetime(2025, 5, 5, 12, 0, 0)


def test_register_outgo_without_subcategory(db, ledger):
    summary = ledger.register("gasto", "800 supermercado", "123", "maria")

    assert summary.subcategory is None
    stored = db.query(Transaction).one()
    assert stored.amount == -800
    assert stored.subcategory is None


def test_register_income_is_positive(db, ledger):
    summary = ledger.register("ingreso", "250000 sueldo", "123", None)

    assert summary.type == "income"
    assert summary.amount == 250000
    assert db.query(Transaction).one().owner_name is None


def test_register_rejects_unknown_type(db, ledger):
    with pytest.raises(InvalidTypeError):
        ledger.register("prestamo", "500 amigo", "123", None)

    assert db.query(Transaction).count() == 0


def test_register_rejects_bad_format(db, ledger):
    with pytest.raises(InvalidFormatError):
        ledger.register("gasto", "quinientos comida", "123", None)

    assert db.query(Transaction).count() == 0


def test_register_persistence_failure_rolls_back(db, ledger, monkeypatch):
    def failing_create(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(TransactionRepository, "create", failing_create)

    with pytest.raises(PersistenceError) as exc_info:
        ledger.register("gasto", "500 comida", "123", None)

    assert exc_info.value.message == "Ocurrió un error al registrar la transacción."
    assert db.query(Transaction).count() == 0


def test_get_balance_current_month(ledger, clock):
    _register_at(ledger, clock, datetime(2025, 4, 30, 23, 59), "ingreso", "9999 otro_mes")
    _register_at(ledger, clock, datetime(2025, 5, 1, 0, 0), "ingreso", "1000 sueldo")
    _register_at(ledger, clock, datetime(2025, 5, 2, 8, 0), "gasto", "300 comida")
    _register_at(ledger, clock, datetime(2025, 5, 31, 23, 59), "gasto", "200 transporte")
    _register_at(ledger, clock, datetime(2025, 6, 1, 0, 0), "gasto", "7777 otro_mes")

    clock.now = datetime(2025, 5, 15)
    assert ledger.get_balance() == Balance(income=1000, outgo=500, balance=500)


def test_get_balance_ignores_same_month_of_other_year(ledger, clock):
    _register_at(ledger, clock, datetime(2024, 5, 10), "ingreso", "500 sueldo")

    clock.now = datetime(2025, 5, 15)
    assert ledger.get_balance() == Balance(income=0, outgo=0, balance=0)


def test_get_balance_negative(ledger, clock):
    ledger.register("gasto", "1500 alquiler", "123", None)

    assert ledger.get_balance() == Balance(income=0, outgo=1500, balance=-1500)


def test_get_category_totals_grouped_and_ordered(ledger):
    ledger.register("gasto", "300 comida", "123", None)
    ledger.register("gasto", "200 comida super", "123", None)
    ledger.register("gasto", "100 auto nafta", "123", None)
    ledger.register("ingreso", "1000 sueldo", "123", None)

    totals = ledger.get_category_totals(5, 2025)

    assert [(t.type, t.category, t.total, t.count) for t in totals] == [
        ("income", "sueldo", 1000, 1),
        ("outgo", "auto", -100, 1),
        ("outgo", "comida", -500, 2),
    ]


def test_get_balance_per_category_report(ledger):
    ledger.register("gasto", "300 comida", "123", None)
    ledger.register("ingreso", "1000 sueldo", "123", None)

    report = ledger.get_balance_per_category(5, 2025)

    assert report.splitlines()[0] == "*Resumen de mayo 2025*"
    assert "• *ingreso* - sueldo: $1000 (1 tx)" in report
    assert "• *gasto* - comida: $300 (1 tx)" in report


def test_get_balance_per_category_empty_month(ledger):
    report = ledger.get_balance_per_category(1, 2025)

    assert "Sin movimientos." in report


def test_get_filtered_transactions(ledger, clock):
    _register_at(ledger, clock, datetime(2025, 5, 3), "gasto", "300 comida")
    _register_at(ledger, clock, datetime(2025, 5, 1), "gasto", "100 comida kiosco")
    _register_at(ledger, clock, datetime(2025, 5, 2), "ingreso", "1000 sueldo")
    _register_at(ledger, clock, datetime(2025, 6, 1), "gasto", "50 comida")

    everything = ledger.get_filtered_transactions(None, None, 5, 2025)
    assert [t.created_at.day for t in everything] == [1, 2, 3]

    food = ledger.get_filtered_transactions("outgo", "COMIDA", 5, 2025)
    assert [t.amount for t in food] == [-100, -300]

    income = ledger.get_filtered_transactions("income", None, 5, 2025)
    assert [t.category for t in income] == ["sueldo"]
