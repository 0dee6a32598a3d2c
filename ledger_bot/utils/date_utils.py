"""Date manipulation utilities"""

from datetime import date, datetime, time
from typing import Callable, List

import pytz
from dateutil.relativedelta import relativedelta, TH

from ledger_bot.config import settings
from ledger_bot.domain.models import Period

Clock = Callable[[], datetime]


def now_local(tz_name: str | None = None) -> datetime:
    """Current wall-clock time in the configured zone, as a naive datetime"""
    tz = pytz.timezone(tz_name or settings.timezone)
    return datetime.now(tz).replace(tzinfo=None)


def month_period(month: int, year: int) -> Period:
    """Calendar month as a half-open [start, end) range"""
    start = datetime(year, month, 1)
    return Period(month=month, year=year, start=start, end=start + relativedelta(months=1))


def first_thursday(year: int, month: int) -> datetime:
    """Start of the first Thursday of the given month"""
    day = date(year, month, 1) + relativedelta(weekday=TH(1))
    return datetime.combine(day, time.min)


def add_months(day: date, months: int) -> date:
    """Add calendar months without overflowing into the next month"""
    return day + relativedelta(months=months)


def format_cycle(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def consecutive_cycles(first: date, count: int) -> List[str]:
    """`count` consecutive YYYY-MM cycles starting at the month of `first`"""
    return [format_cycle(add_months(first, i)) for i in range(count)]
