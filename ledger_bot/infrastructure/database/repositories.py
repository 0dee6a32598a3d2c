"""Data access layer for ledger entities"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ledger_bot.domain.models import CategoryTotal, Installment, Period
from ledger_bot.infrastructure.database.models import CreditCardPurchase, MonthlyClosure, Transaction


class TransactionRepository:
    """Repository for income/outgo transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        tx_type: str,
        amount: int,
        category: str,
        subcategory: Optional[str],
        owner_id: str,
        owner_name: Optional[str],
        created_at: datetime,
    ) -> Transaction:
        db_transaction = Transaction(
            type=tx_type,
            amount=amount,
            category=category,
            subcategory=subcategory,
            owner_id=owner_id,
            owner_name=owner_name,
            created_at=created_at,
        )
        self.db.add(db_transaction)
        self.db.flush()
        return db_transaction

    def _in_period(self, query, period: Period):
        return query.filter(Transaction.created_at >= period.start, Transaction.created_at < period.end)

    def sum_by_type(self, tx_type: str, period: Period) -> int:
        """Signed sum of amounts of one type within the period"""
        query = self.db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
            Transaction.type == tx_type
        )
        return int(self._in_period(query, period).scalar())

    def totals_by_category(self, period: Period) -> List[CategoryTotal]:
        """Signed totals and counts grouped by (type, category)"""
        query = self.db.query(
            Transaction.type,
            Transaction.category,
            func.sum(Transaction.amount),
            func.count(Transaction.id),
        )
        rows = (
            self._in_period(query, period)
            .group_by(Transaction.type, Transaction.category)
            .order_by(Transaction.type, Transaction.category)
            .all()
        )
        return [
            CategoryTotal(type=tx_type, category=category, total=int(total), count=count)
            for tx_type, category, total, count in rows
        ]

    def list_filtered(
        self,
        period: Period,
        tx_type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Transaction]:
        """Transactions in the period, oldest first"""
        query = self._in_period(self.db.query(Transaction), period)
        if tx_type:
            query = query.filter(Transaction.type == tx_type)
        if category:
            query = query.filter(func.lower(Transaction.category) == category.lower())
        return query.order_by(Transaction.created_at.asc(), Transaction.id.asc()).all()


class ClosureRepository:
    """Repository for monthly closures"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, month: int, year: int) -> Optional[MonthlyClosure]:
        return (
            self.db.query(MonthlyClosure)
            .filter(MonthlyClosure.month == month, MonthlyClosure.year == year)
            .first()
        )

    def create(
        self,
        month: int,
        year: int,
        income: Decimal,
        outgo: Decimal,
        balance: Decimal,
        created_at: datetime,
    ) -> MonthlyClosure:
        """Insert a closure; raises IntegrityError if the period is already closed"""
        db_closure = MonthlyClosure(
            month=month,
            year=year,
            income=income,
            outgo=outgo,
            balance=balance,
            created_at=created_at,
        )
        self.db.add(db_closure)
        self.db.flush()
        return db_closure


class PurchaseRepository:
    """Repository for credit card installments"""

    def __init__(self, db: Session):
        self.db = db

    def create_installments(
        self,
        owner_id: str,
        owner_name: Optional[str],
        vendor: str,
        card_name: Optional[str],
        installments: List[Installment],
        purchased_at: datetime,
    ) -> List[CreditCardPurchase]:
        """Stage one row per installment; caller commits or rolls back as a unit"""
        rows = [
            CreditCardPurchase(
                owner_id=owner_id,
                owner_name=owner_name,
                amount=inst.amount,
                vendor=vendor,
                card_name=card_name,
                billing_cycle=inst.billing_cycle,
                purchased_at=purchased_at,
            )
            for inst in installments
        ]
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def sum_for_cycle(self, billing_cycle: str) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(CreditCardPurchase.amount), 0))
            .filter(CreditCardPurchase.billing_cycle == billing_cycle)
            .scalar()
        )
        return Decimal(str(total))

    def list_for_cycle(self, billing_cycle: str) -> List[CreditCardPurchase]:
        """Installments billed in the cycle, newest purchase first"""
        return (
            self.db.query(CreditCardPurchase)
            .filter(CreditCardPurchase.billing_cycle == billing_cycle)
            .order_by(CreditCardPurchase.purchased_at.desc(), CreditCardPurchase.id.desc())
            .all()
        )
