"""Credit card purchases split into monthly installments"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ledger_bot.domain.grammar import parse_purchase_args
from ledger_bot.domain.installments import CENTS, generate_installment_plan
from ledger_bot.domain.models import PurchaseSummary
from ledger_bot.infrastructure.database.models import CreditCardPurchase
from ledger_bot.infrastructure.database.repositories import PurchaseRepository
from ledger_bot.services.persistence import committing
from ledger_bot.utils.date_utils import Clock, format_cycle, now_local


class CreditCardScheduler:
    """
    Registers card purchases and answers billing-cycle queries.

    A purchase of N installments is stored as N rows sharing vendor, card and
    owner, one per consecutive billing cycle.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.repo = PurchaseRepository(db)
        self.clock = clock or now_local

    def register_purchase(
        self,
        args: str,
        owner_id: str,
        owner_name: Optional[str] = None,
    ) -> PurchaseSummary:
        """
        Parse "<amount> <vendor> [<card_name>] [<installments>]" and persist
        every installment in a single transaction.

        Raises:
            InvalidFormatError: args do not match the grammar
            PersistenceError: any installment write failed (nothing is kept)
        """
        parsed = parse_purchase_args(args)
        now = self.clock()
        installments = generate_installment_plan(
            parsed.amount,
            num_installments=parsed.installments,
            card_name=parsed.card_name,
            now=now,
        )

        with committing(self.db, "register_purchase", "Error interno al registrar la compra de tarjeta."):
            self.repo.create_installments(
                owner_id=owner_id,
                owner_name=owner_name,
                vendor=parsed.vendor,
                card_name=parsed.card_name,
                installments=installments,
                purchased_at=now,
            )

        return PurchaseSummary(
            amount=parsed.amount,
            vendor=parsed.vendor,
            card_name=parsed.card_name,
            installments=installments,
        )

    def _cycle(self, month: Optional[int], year: Optional[int]) -> str:
        now = self.clock()
        return format_cycle(date(year or now.year, month or now.month, 1))

    def get_monthly_balance(self, month: Optional[int] = None, year: Optional[int] = None) -> Decimal:
        """Sum of installments billed in the cycle, 0 if none"""
        return self.repo.sum_for_cycle(self._cycle(month, year)).quantize(CENTS)

    def list_monthly_purchases(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[CreditCardPurchase]:
        return self.repo.list_for_cycle(self._cycle(month, year))
