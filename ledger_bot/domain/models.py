"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class TransactionSummary:
    """What was persisted by a register call, used to compose the reply"""

    type: str  # "income" or "outgo"
    amount: int  # signed as stored
    category: str
    subcategory: Optional[str] = None


@dataclass(frozen=True)
class Balance:
    """Income/outgo totals for a period; outgo is a non-negative magnitude"""

    income: int
    outgo: int
    balance: int


@dataclass(frozen=True)
class CategoryTotal:
    """One (type, category) group of the per-category report"""

    type: str
    category: str
    total: int
    count: int


@dataclass(frozen=True)
class Installment:
    """Single installment of a card purchase"""

    billing_cycle: str  # "YYYY-MM"
    amount: Decimal


@dataclass(frozen=True)
class PurchaseSummary:
    """Result of registering a card purchase"""

    amount: Decimal
    vendor: str
    card_name: Optional[str]
    installments: List[Installment] = field(default_factory=list)

    @property
    def first_cycle(self) -> str:
        return self.installments[0].billing_cycle


@dataclass(frozen=True)
class FilterCriteria:
    """Parsed filtro_tx arguments"""

    type: Optional[str]
    category: Optional[str]
    month: int
    year: int
    month_provided: bool = False
    year_provided: bool = False


@dataclass(frozen=True)
class CallerContext:
    """Identity of the sender of a command"""

    chat_id: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class Period:
    """Half-open [start, end) calendar month"""

    month: int
    year: int
    start: datetime
    end: datetime
