"""SQLAlchemy ORM models for the ledger tables"""

from sqlalchemy import Column, String, Integer, DateTime, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Transaction(Base):
    """Income or outgo record; outgo amounts are stored negative"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(16), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    category = Column(Text, nullable=False)
    subcategory = Column(Text, nullable=True)
    owner_id = Column(Text, nullable=False)
    owner_name = Column(Text, nullable=True)
    # Local wall-clock time, see utils.date_utils.now_local
    created_at = Column(DateTime, nullable=False, index=True)


class MonthlyClosure(Base):
    """Immutable income/outgo/balance snapshot of one calendar month"""

    __tablename__ = "monthly_closures"
    __table_args__ = (UniqueConstraint("month", "year", name="uq_monthly_closure_period"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    income = Column(Numeric(12, 2), nullable=False)
    outgo = Column(Numeric(12, 2), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, nullable=False)


class CreditCardPurchase(Base):
    """One installment of a card purchase, billed in `billing_cycle`"""

    __tablename__ = "credit_card_purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    owner_name = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    vendor = Column(Text, nullable=False)
    card_name = Column(Text, nullable=True)
    billing_cycle = Column(String(7), nullable=False, index=True)
    purchased_at = Column(DateTime, nullable=False)
