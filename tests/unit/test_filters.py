"""Unit tests for filtro_tx argument validation"""

import pytest
from datetime import datetime
from ledger_bot.domain.exceptions import FilterValidationError, InvalidMonthError, InvalidYearError
from ledger_bot.domain.filters import FilterValidator


@pytest.fixture
def validator(clock) -> FilterValidator:
    return FilterValidator(clock=clock)


def test_empty_args_default_to_current_period(validator):
    criteria = validator.parse("")

    assert criteria.type is None
    assert criteria.category is None
    assert (criteria.month, criteria.year) == (5, 2025)
    assert criteria.month_provided is False
    assert criteria.year_provided is False


def test_bare_category(validator):
    criteria = validator.parse("supermercado")

    assert criteria.category == "supermercado"
    assert criteria.type is None
    assert criteria.month_provided is False


def test_all_filters(validator):
    criteria = validator.parse("gasto comida marzo 2024")

    assert criteria.type == "outgo"
    assert criteria.category == "comida"
    assert criteria.month == 3
    assert criteria.year == 2024
    assert criteria.month_provided is True
    assert criteria.year_provided is True


def test_tokens_in_any_order(validator):
    criteria = validator.parse("2024 7 sueldo ingreso")

    assert criteria.type == "income"
    assert criteria.category == "sueldo"
    assert criteria.month == 7
    assert criteria.year == 2024


def test_mapped_type_value_is_accepted(validator):
    assert validator.parse("outgo").type == "outgo"
    assert validator.parse("INCOME").type == "income"


def test_first_claim_wins(validator):
    """Second month-like token falls through to category"""
    criteria = validator.parse("mayo junio")

    assert criteria.month == 5
    assert criteria.category == "junio"


def test_year_only_keeps_current_month(validator):
    criteria = validator.parse("2023")

    assert criteria.year == 2023
    assert criteria.month == 5
    assert criteria.year_provided is True
    assert criteria.month_provided is False


@pytest.mark.parametrize("args", ["13", "gasto 0", "comida 99"])
def test_rejects_month_out_of_range(validator, args):
    with pytest.raises(InvalidMonthError) as exc_info:
        validator.parse(args)

    assert exc_info.value.message == "Mes inválido. Usá nombre (mayo) o número (5)."


@pytest.mark.parametrize("args", ["1999", "2101", "mayo 0999"])
def test_rejects_year_out_of_range(validator, args):
    with pytest.raises(InvalidYearError) as exc_info:
        validator.parse(args)

    assert exc_info.value.message.startswith("Año inválido")


def test_filter_errors_share_a_base_class():
    assert issubclass(InvalidMonthError, FilterValidationError)
    assert issubclass(InvalidYearError, FilterValidationError)


def test_defaults_follow_the_clock():
    validator = FilterValidator(clock=lambda: datetime(2030, 1, 15))

    criteria = validator.parse("comida")

    assert (criteria.month, criteria.year) == (1, 2030)
