"""Billing-cycle date arithmetic.

All functions work on plain ``datetime.date`` values. Bank cycle days are
clamped to 1-28 so every month has a valid occurrence.
"""

from datetime import date, timedelta

MIN_CYCLE_DAY = 1
MAX_CYCLE_DAY = 28


def parse_iso_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def _clamp_cycle_day(day: int) -> int:
    return max(MIN_CYCLE_DAY, min(MAX_CYCLE_DAY, int(day)))


def _shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def days_between(a: date, b: date) -> int:
    return abs((b - a).days)


def next_day_of_month(base: date, day: int) -> date:
    """Next occurrence of ``day`` on or after ``base``."""
    target = _clamp_cycle_day(day)
    if base.day <= target:
        return base.replace(day=target)

    year, month = _shift_month(base.year, base.month, 1)
    return date(year, month, target)


def add_months(value: date, months: int) -> date:
    year, month = _shift_month(value.year, value.month, months)
    return date(year, month, min(MAX_CYCLE_DAY, value.day))


def next_statement_date(purchase_date: date, statement_day: int) -> date:
    return next_day_of_month(purchase_date, statement_day)


def next_due_date(purchase_date: date, statement_day: int, due_day: int) -> date:
    """First ``due_day`` strictly after the statement that covers the purchase."""
    statement_date = next_statement_date(purchase_date, statement_day)
    return next_day_of_month(statement_date + timedelta(days=1), due_day)
