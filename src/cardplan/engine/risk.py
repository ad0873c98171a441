import logging

from pydantic import BaseModel, Field

from cardplan.domain.models import Card, Purchase
from cardplan.engine.campaigns import CampaignRequirements
from cardplan.utils.dates import days_between, next_due_date
from cardplan.utils.money import clamp01, format_try, round2

logger = logging.getLogger(__name__)

INSUFFICIENT_LIMIT_PENALTY = 0.6
# (threshold, penalty, label), checked highest first; only one tier applies
UTILIZATION_TIERS = (
    (0.8, 0.15, "High"),
    (0.5, 0.10, "Moderate"),
    (0.3, 0.05, "Low"),
)
DUE_SOON_DAYS = 3
DUE_SOON_PENALTY = 0.1
INSTALLMENT_MISMATCH_PENALTY = 0.2
ENROLLMENT_PENALTY = 0.15
PROMO_CODE_PENALTY = 0.15


class RiskPenaltyResult(BaseModel):
    penalty: float
    notes: list[str] = Field(default_factory=list)


def compute_risk_penalty(
    card: Card,
    purchase: Purchase,
    adjusted_installments: int,
    requirements: CampaignRequirements | None = None,
) -> RiskPenaltyResult:
    """Sum independent risk signals into one penalty in [0, 1].

    The raw sum is clamped only at the end, so several simultaneous signals
    may saturate the penalty.
    """
    notes: list[str] = []
    total = 0.0

    if card.available_limit < purchase.amount:
        total += INSUFFICIENT_LIMIT_PENALTY
        notes.append(
            f"Insufficient credit limit (need {format_try(purchase.amount)}, "
            f"available {format_try(card.available_limit)})"
        )

    utilization = card.utilization_after(purchase.amount)
    for threshold, penalty, label in UTILIZATION_TIERS:
        if utilization > threshold:
            total += penalty
            notes.append(
                f"{label} utilization risk ({round2(utilization * 100)}% > {threshold:.0%})"
            )
            break

    try:
        due = next_due_date(purchase.date, card.statement_day, card.due_day)
        days_until_due = days_between(purchase.date, due)
    except (ValueError, OverflowError) as exc:
        logger.debug("due date for card %s not computable: %s", card.id, exc)
        notes.append("Unable to calculate due date proximity")
    else:
        if days_until_due <= DUE_SOON_DAYS:
            total += DUE_SOON_PENALTY
            notes.append(f"Purchase close to due date ({days_until_due} days until payment)")

    if adjusted_installments < purchase.installment_count:
        total += INSTALLMENT_MISMATCH_PENALTY
        notes.append(
            f"Installments reduced from {purchase.installment_count} to {adjusted_installments}"
        )

    if requirements is not None:
        if not requirements.enrollment_ok:
            total += ENROLLMENT_PENALTY
            notes.append("Campaign enrollment requirement not met")
        if not requirements.code_ok:
            total += PROMO_CODE_PENALTY
            notes.append("Campaign promo code requirement not met")

    if total > 1:
        notes.append(f"Total penalty capped at 100% (was {round2(total * 100)}%)")

    return RiskPenaltyResult(penalty=clamp01(total), notes=notes)
