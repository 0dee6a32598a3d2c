"""Installment scheduling for credit card purchases"""

from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_DOWN
from typing import List, Optional

from ledger_bot.domain.models import Installment
from ledger_bot.utils.date_utils import add_months, consecutive_cycles, first_thursday, now_local

CENTS = Decimal("0.01")

# Cards that close on the first Thursday of the month
THURSDAY_CUTOFF_CARDS = frozenset({"visa", "amex"})

# Every other card closes at the end of this day of the month
DEFAULT_CUTOFF_DAY = 10


def resolve_cutoff(card_name: Optional[str], year: int, month: int) -> datetime:
    """
    Return the instant a billing cycle closes for the given card and month.

    Purchases strictly before the cutoff are billed in that month.

    - Visa/Amex: start of the month's first Thursday, recomputed per month
    - Any other card: end of the 10th (purchases on the 10th still count)
    """
    if card_name and card_name.lower() in THURSDAY_CUTOFF_CARDS:
        return first_thursday(year, month)
    return datetime(year, month, DEFAULT_CUTOFF_DAY) + timedelta(days=1)


def first_billing_month(card_name: Optional[str], now: datetime) -> date:
    """First day of the month the first installment is billed in"""
    current = date(now.year, now.month, 1)
    if now < resolve_cutoff(card_name, now.year, now.month):
        return current
    return add_months(current, 1)


def split_amount(amount: Decimal, num_installments: int) -> List[Decimal]:
    """
    Split an amount into equal installments truncated to cents.

    Last installment absorbs the truncation remainder so the parts add up to
    exactly `amount`.

    Example:
        1000 / 3 → [333.33, 333.33, 333.34]
    """
    num_installments = max(num_installments, 1)
    base_amount = (amount / num_installments).quantize(CENTS, rounding=ROUND_DOWN)
    remainder = amount - base_amount * num_installments

    amounts = [base_amount] * num_installments
    amounts[-1] = base_amount + remainder
    return amounts


def generate_installment_plan(
    amount: Decimal,
    num_installments: int = 1,
    card_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Installment]:
    """
    Schedule a purchase as consecutive monthly installments.

    Args:
        amount: Total purchase amount
        num_installments: Number of monthly payments, clamped to at least 1
        card_name: Card used, selects the cutoff rule
        now: Purchase time (default: current local time)

    Returns:
        One Installment per billing cycle, in cycle order
    """
    if now is None:
        now = now_local()

    num_installments = max(num_installments, 1)
    cycles = consecutive_cycles(first_billing_month(card_name, now), num_installments)
    amounts = split_amount(amount, num_installments)

    return [
        Installment(billing_cycle=cycle, amount=part)
        for cycle, part in zip(cycles, amounts)
    ]
