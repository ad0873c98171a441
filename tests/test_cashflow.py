import math
from datetime import date

import pytest

from cardplan.engine.cashflow import PaymentPlanEntry, build_installment_plan, cashflow_score


def test_single_payment_plan() -> None:
    plan = build_installment_plan(date(2024, 8, 10), 1, 15, 5)

    assert len(plan) == 1
    assert plan[0].due_date == date(2024, 9, 5)
    assert plan[0].amount == 1.0
    assert plan[0].days_from_purchase == 26


def test_installments_are_one_month_apart() -> None:
    plan = build_installment_plan(date(2024, 8, 10), 3, 15, 5)

    assert [entry.due_date for entry in plan] == [date(2024, 9, 5), date(2024, 10, 5), date(2024, 11, 5)]
    assert [entry.days_from_purchase for entry in plan] == [26, 56, 87]
    assert [entry.amount for entry in plan] == [0.33, 0.33, 0.34]


@pytest.mark.parametrize("installments", [2, 3, 6, 7, 9, 12, 24])
def test_plan_amounts_sum_to_one(installments: int) -> None:
    plan = build_installment_plan(date(2024, 1, 20), installments, 10, 2)

    assert len(plan) == installments
    assert math.isclose(sum(entry.amount for entry in plan), 1.0, abs_tol=1e-9)


def test_last_installment_absorbs_rounding() -> None:
    plan = build_installment_plan(date(2024, 1, 20), 7, 10, 2)

    assert all(entry.amount == 0.14 for entry in plan[:-1])
    assert plan[-1].amount == pytest.approx(0.16)


def test_cashflow_score_of_three_installments() -> None:
    plan = build_installment_plan(date(2024, 8, 10), 3, 15, 5)

    # weighted average of 26/56/87 days is 56.64
    assert cashflow_score(plan) == pytest.approx(56.64 / 60)


def test_cashflow_score_saturates_at_sixty_days() -> None:
    def entry(days: int) -> PaymentPlanEntry:
        return PaymentPlanEntry(due_date=date(2024, 1, 1), amount=1.0, days_from_purchase=days)

    assert cashflow_score([entry(30)]) == 0.5
    assert cashflow_score([entry(60)]) == 1.0
    assert cashflow_score([entry(90)]) == 1.0

    scores = [cashflow_score([entry(days)]) for days in range(0, 120, 5)]
    assert scores == sorted(scores)


def test_cashflow_score_equal_weights_without_amounts() -> None:
    plan = [
        PaymentPlanEntry(due_date=date(2024, 1, 1), days_from_purchase=12),
        PaymentPlanEntry(due_date=date(2024, 2, 1), days_from_purchase=36),
    ]

    assert cashflow_score(plan) == pytest.approx(24 / 60)


def test_cashflow_score_of_empty_plan() -> None:
    assert cashflow_score([]) == 0.0
