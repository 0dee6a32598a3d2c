"""Idempotent monthly closure"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_bot.domain.vocabulary import TYPE_MAP
from ledger_bot.infrastructure.database.models import MonthlyClosure
from ledger_bot.infrastructure.database.repositories import ClosureRepository, TransactionRepository
from ledger_bot.services.persistence import committing
from ledger_bot.utils.date_utils import Clock, month_period, now_local


class ClosureService:
    """Computes and stores one income/outgo/balance snapshot per month"""

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.closures = ClosureRepository(db)
        self.transactions = TransactionRepository(db)
        self.clock = clock or now_local

    def close_month(self, month: int, year: int) -> MonthlyClosure:
        """
        Return the closure for (month, year), creating it on first request.

        An existing closure is returned unchanged even if the month's
        transactions changed since. When a concurrent request inserts the same
        period first, the unique constraint rejects our insert and the stored
        row is returned instead.
        """
        existing = self.closures.get(month, year)
        if existing:
            logging.info("Monthly closure already exists", extra={"month": month, "year": year})
            return existing

        period = month_period(month, year)
        income = self.transactions.sum_by_type(TYPE_MAP["ingreso"], period)
        raw_outgo = self.transactions.sum_by_type(TYPE_MAP["gasto"], period)

        with committing(self.db, "close_month", "Ocurrió un error al generar el cierre mensual."):
            try:
                closure = self.closures.create(
                    month=month,
                    year=year,
                    income=Decimal(income),
                    outgo=Decimal(abs(raw_outgo)),
                    balance=Decimal(income + raw_outgo),
                    created_at=self.clock(),
                )
            except IntegrityError:
                self.db.rollback()
                closure = self.closures.get(month, year)
                if closure is None:
                    raise
                logging.info("Monthly closure created concurrently", extra={"month": month, "year": year})

        return closure
