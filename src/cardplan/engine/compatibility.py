from pydantic import BaseModel, Field

from cardplan.domain.models import Campaign, Card, Purchase
from cardplan.utils.money import format_try

HIGH_UTILIZATION = 0.9
REDUCED_INSTALLMENTS_USABILITY = 0.4
HIGH_UTILIZATION_USABILITY = 0.6


class CompatibilityResult(BaseModel):
    compatible: bool
    adjusted_installments: int
    usability_score: float
    notes: list[str] = Field(default_factory=list)


def campaign_installment_boost(campaigns: list[Campaign]) -> int:
    # Any campaign on the card counts, whether or not it applies to the purchase.
    return max((c.max_installments or 0 for c in campaigns), default=0)


def max_allowed_installments(card: Card, campaigns: list[Campaign]) -> int:
    return max(card.max_installments, campaign_installment_boost(campaigns))


def check_compatibility(
    purchase: Purchase,
    card: Card,
    campaigns: list[Campaign] | None = None,
) -> CompatibilityResult:
    campaigns = campaigns or []
    notes: list[str] = []

    if card.available_limit < purchase.amount:
        notes.append(
            f"Insufficient credit limit: need {format_try(purchase.amount)}, "
            f"available {format_try(card.available_limit)}"
        )
        return CompatibilityResult(
            compatible=False,
            adjusted_installments=purchase.installment_count,
            usability_score=0.0,
            notes=notes,
        )

    usability = 1.0
    adjusted = purchase.installment_count
    ceiling = max_allowed_installments(card, campaigns)

    if purchase.installment_count > ceiling:
        adjusted = max(1, ceiling)
        usability = REDUCED_INSTALLMENTS_USABILITY
        if ceiling == 0:
            notes.append("Card does not support installments, using single payment")
        else:
            notes.append(
                f"Installments reduced from {purchase.installment_count} to {adjusted} (card limit)"
            )

    if card.utilization_after(purchase.amount) > HIGH_UTILIZATION:
        usability = min(usability, HIGH_UTILIZATION_USABILITY)
        notes.append("Purchase would result in very high utilization (>90%)")

    boost = campaign_installment_boost(campaigns)
    if boost > card.max_installments:
        notes.append(f"Campaign allows up to {boost} installments")

    return CompatibilityResult(
        compatible=True,
        adjusted_installments=adjusted,
        usability_score=usability,
        notes=notes,
    )
