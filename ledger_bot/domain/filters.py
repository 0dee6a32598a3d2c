"""Token classifier and validator for filtro_tx arguments"""

import re
from typing import Optional

from ledger_bot.domain.exceptions import FilterValidationError, InvalidMonthError, InvalidYearError
from ledger_bot.domain.models import FilterCriteria
from ledger_bot.domain.vocabulary import MONTH_MAP, translate_type
from ledger_bot.utils.date_utils import Clock, now_local

_WHITESPACE = re.compile(r"\s+")
_MONTH_NUMBER = re.compile(r"^[0-9]{1,2}$")
_YEAR_NUMBER = re.compile(r"^[0-9]{4}$")

MIN_YEAR = 2000
MAX_YEAR = 2100


class FilterValidator:
    """
    Parse free-form filter tokens into FilterCriteria.

    Each token is claimed by the first free slot it fits, in priority order:
    type word, month (name or 1-2 digit number), 4-digit year, category.
    Tokens that fit no free slot are ignored.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or now_local

    def parse(self, args: str) -> FilterCriteria:
        """
        Raises:
            FilterValidationError: On an unknown type word
            InvalidMonthError: On a month number outside 1-12
            InvalidYearError: On a year outside 2000-2100
        """
        type_raw: Optional[str] = None
        category: Optional[str] = None
        month_token: Optional[str] = None
        year_token: Optional[str] = None

        for token in _WHITESPACE.split(args.strip()):
            if not token:
                continue
            normalized = token.lower()

            if type_raw is None and translate_type(normalized):
                type_raw = normalized
                continue

            if month_token is None and (normalized in MONTH_MAP or _MONTH_NUMBER.match(normalized)):
                month_token = normalized
                continue

            if year_token is None and _YEAR_NUMBER.match(normalized):
                year_token = normalized
                continue

            if category is None:
                category = token

        return self._validate(type_raw, category, month_token, year_token)

    def _validate(
        self,
        type_raw: Optional[str],
        category: Optional[str],
        month_token: Optional[str],
        year_token: Optional[str],
    ) -> FilterCriteria:
        tx_type = translate_type(type_raw) if type_raw else None
        if type_raw and tx_type is None:
            raise FilterValidationError("Tipo inválido. Usá ingreso/gasto.")

        month = None
        if month_token is not None:
            month = MONTH_MAP.get(month_token) or int(month_token)
            if not 1 <= month <= 12:
                raise InvalidMonthError("Mes inválido. Usá nombre (mayo) o número (5).")

        year = None
        if year_token is not None:
            year = int(year_token)
            if not MIN_YEAR <= year <= MAX_YEAR:
                raise InvalidYearError("Año inválido. Usá un año con 4 dígitos (ej: 2024).")

        now = self.clock()
        return FilterCriteria(
            type=tx_type,
            category=category,
            month=month if month is not None else now.month,
            year=year if year is not None else now.year,
            month_provided=month is not None,
            year_provided=year is not None,
        )
