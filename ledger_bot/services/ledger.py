"""Transaction registration and period aggregation"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ledger_bot.domain.exceptions import InvalidTypeError
from ledger_bot.domain.grammar import parse_transaction_args
from ledger_bot.domain.models import Balance, CategoryTotal, TransactionSummary
from ledger_bot.domain.vocabulary import TYPE_MAP
from ledger_bot.infrastructure.database.models import Transaction
from ledger_bot.infrastructure.database.repositories import TransactionRepository
from ledger_bot.services.persistence import committing
from ledger_bot.services.replies import render_category_report
from ledger_bot.utils.date_utils import Clock, month_period, now_local

INCOME = TYPE_MAP["ingreso"]
OUTGO = TYPE_MAP["gasto"]


class TransactionLedger:
    """
    Registers signed transactions and answers balance queries.

    Amounts are stored signed: positive for income, negative for outgo, so
    any period total is a plain sum.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.repo = TransactionRepository(db)
        self.clock = clock or now_local

    def register(
        self,
        raw_type: str,
        args: str,
        owner_id: str,
        owner_name: Optional[str] = None,
    ) -> TransactionSummary:
        """
        Parse "<amount> <category> [<subcategory>]" and persist it.

        Raises:
            InvalidTypeError: raw_type is not "ingreso" or "gasto"
            InvalidFormatError: args do not match the grammar
            PersistenceError: the store rejected the write
        """
        tx_type = TYPE_MAP.get(raw_type.strip().lower())
        if tx_type is None:
            raise InvalidTypeError('Tipo inválido. Usá "ingreso" o "gasto".')

        parsed = parse_transaction_args(raw_type, args)
        amount = parsed.amount if tx_type == INCOME else -parsed.amount

        with committing(self.db, "register_transaction", "Ocurrió un error al registrar la transacción."):
            self.repo.create(
                tx_type=tx_type,
                amount=amount,
                category=parsed.category,
                subcategory=parsed.subcategory,
                owner_id=owner_id,
                owner_name=owner_name,
                created_at=self.clock(),
            )

        return TransactionSummary(
            type=tx_type,
            amount=amount,
            category=parsed.category,
            subcategory=parsed.subcategory,
        )

    def get_balance(self, month: Optional[int] = None, year: Optional[int] = None) -> Balance:
        """Income, outgo magnitude and balance for a month (default: current)"""
        now = self.clock()
        period = month_period(month or now.month, year or now.year)

        income = self.repo.sum_by_type(INCOME, period)
        raw_outgo = self.repo.sum_by_type(OUTGO, period)

        return Balance(income=income, outgo=abs(raw_outgo), balance=income + raw_outgo)

    def get_category_totals(self, month: int, year: int) -> List[CategoryTotal]:
        return self.repo.totals_by_category(month_period(month, year))

    def get_balance_per_category(self, month: int, year: int) -> str:
        """Per (type, category) report for the month, ready to send"""
        return render_category_report(month, year, self.get_category_totals(month, year))

    def get_filtered_transactions(
        self,
        tx_type: Optional[str],
        category: Optional[str],
        month: int,
        year: int,
    ) -> List[Transaction]:
        """Transactions of the month, optionally narrowed, oldest first"""
        return self.repo.list_filtered(month_period(month, year), tx_type=tx_type, category=category)
