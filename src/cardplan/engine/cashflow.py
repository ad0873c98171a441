"""Installment plans and how long they defer the cash outlay."""

from datetime import date

from pydantic import BaseModel

from cardplan.utils.dates import add_months, next_due_date
from cardplan.utils.money import clamp01, round2

FULL_CASHFLOW_DAYS = 60


class PaymentPlanEntry(BaseModel):
    due_date: date
    amount: float | None = None
    days_from_purchase: int


def _entry(purchase_date: date, due: date, amount: float) -> PaymentPlanEntry:
    return PaymentPlanEntry(
        due_date=due,
        amount=amount,
        days_from_purchase=max(0, (due - purchase_date).days),
    )


def build_installment_plan(
    purchase_date: date,
    installments: int,
    statement_day: int,
    due_day: int,
) -> list[PaymentPlanEntry]:
    """Payment schedule with amounts expressed as fractions of the purchase total.

    The first payment falls on the next due date after the statement closes;
    each further installment is one calendar month later. The last entry
    absorbs the rounding remainder so the fractions add up to 1.
    """
    first_due = next_due_date(purchase_date, statement_day, due_day)
    if installments <= 1:
        return [_entry(purchase_date, first_due, 1.0)]

    share = round2(1.0 / installments)
    last_share = round2(1.0 - share * (installments - 1))

    plan = []
    for i in range(installments):
        due = first_due if i == 0 else add_months(first_due, i)
        plan.append(_entry(purchase_date, due, last_share if i == installments - 1 else share))
    return plan


def cashflow_score(plan: list[PaymentPlanEntry]) -> float:
    if not plan:
        return 0.0

    total_days = 0.0
    total_weight = 0.0
    for entry in plan:
        weight = entry.amount if entry.amount is not None else 1.0 / len(plan)
        total_days += entry.days_from_purchase * weight
        total_weight += weight

    average_days = total_days / total_weight if total_weight > 0 else 0.0
    return clamp01(min(average_days, FULL_CASHFLOW_DAYS) / FULL_CASHFLOW_DAYS)
