"""Campaign eligibility matching and benefit aggregation.

A campaign is scored per purchase by how many of its targeting criteria
(date range, channel, category, brand, minimum amount) the purchase meets.
Benefits are aggregated only from campaigns that apply and whose enrollment
and promo-code requirements are satisfied: extra cashback and extra points
add up, while flat discounts, installment boosts and interest-free periods
take the largest value seen.
"""

import logging

from pydantic import BaseModel, Field

from cardplan.domain.models import Campaign, Card, Purchase
from cardplan.utils.money import clamp01, format_try

logger = logging.getLogger(__name__)

PARTIAL_MATCH_FLOOR = 0.3


class CampaignMatch(BaseModel):
    score: float
    reasons: list[str] = Field(default_factory=list)

    @property
    def applicable(self) -> bool:
        return self.score > 0


class EffectiveCampaignBenefits(BaseModel):
    extra_cashback_percent: float = 0.0
    extra_point_rate: float = 0.0
    flat_discount: float = 0.0
    max_installments_boost: int | None = None
    interest_free_months: int | None = None


class CampaignRequirements(BaseModel):
    enrollment_ok: bool = True
    code_ok: bool = True


class CampaignEvaluation(BaseModel):
    effective: EffectiveCampaignBenefits
    match_score: float
    requirements_ok: CampaignRequirements
    notes: list[str] = Field(default_factory=list)


def match_campaign(purchase: Purchase, campaign: Campaign) -> CampaignMatch:
    checks: list[tuple[bool, str]] = []

    if campaign.date_range:
        window = campaign.date_range
        if window.contains(purchase.date):
            checks.append((True, "Date range matches"))
        else:
            checks.append((False, f"Date outside range ({window.start} to {window.end})"))

    if campaign.channel and campaign.channel != "any":
        if campaign.channel == purchase.channel:
            checks.append((True, f"Channel matches ({purchase.channel})"))
        else:
            checks.append(
                (False, f"Channel mismatch (need {campaign.channel}, got {purchase.channel})")
            )

    if campaign.category and campaign.category != "general":
        if campaign.category == purchase.category:
            checks.append((True, f"Category matches ({purchase.category})"))
        else:
            checks.append(
                (False, f"Category mismatch (need {campaign.category}, got {purchase.category})")
            )

    if campaign.brand and campaign.brand != "general":
        if campaign.brand == purchase.merchant:
            checks.append((True, f"Brand matches ({purchase.merchant})"))
        else:
            checks.append(
                (False, f"Brand mismatch (need {campaign.brand}, got {purchase.merchant or 'none'})")
            )

    if campaign.min_amount:
        amount, minimum = format_try(purchase.amount), format_try(campaign.min_amount)
        if purchase.amount >= campaign.min_amount:
            checks.append((True, f"Minimum amount satisfied ({amount} >= {minimum})"))
        else:
            checks.append((False, f"Below minimum amount ({amount} < {minimum})"))

    matched = sum(1 for ok, _ in checks if ok)
    total = len(checks)
    if total == 0 or matched == total:
        score = 1.0
    elif matched > 0:
        score = max(PARTIAL_MATCH_FLOOR, matched / total)
    else:
        score = 0.0

    return CampaignMatch(score=score, reasons=[reason for _, reason in checks])


def _absorb_benefits(effective: EffectiveCampaignBenefits, campaign: Campaign, notes: list[str]) -> None:
    if campaign.extra_cashback_percent:
        effective.extra_cashback_percent += campaign.extra_cashback_percent
        notes.append(f"Added {campaign.extra_cashback_percent:.2%} extra cashback")

    if campaign.extra_point_rate:
        effective.extra_point_rate += campaign.extra_point_rate
        notes.append(f"Added {campaign.extra_point_rate:.2f} extra points per TRY")

    # flat discounts do not stack
    if campaign.flat_discount and campaign.flat_discount > effective.flat_discount:
        effective.flat_discount = campaign.flat_discount
        notes.append(f"Applied flat discount of {format_try(campaign.flat_discount)}")

    if campaign.max_installments:
        effective.max_installments_boost = max(
            effective.max_installments_boost or 0, campaign.max_installments
        )

    if campaign.interest_free_months:
        effective.interest_free_months = max(
            effective.interest_free_months or 0, campaign.interest_free_months
        )


def evaluate_campaigns(
    purchase: Purchase,
    card: Card,
    campaigns: list[Campaign] | None = None,
) -> CampaignEvaluation:
    notes: list[str] = []
    effective = EffectiveCampaignBenefits()
    requirements = CampaignRequirements()
    scores: list[float] = []

    for campaign in campaigns or []:
        match = match_campaign(purchase, campaign)
        if not match.applicable:
            notes.append(f"Campaign \"{campaign.name}\" does not apply: {', '.join(match.reasons)}")
            continue

        scores.append(match.score)
        notes.append(f"Campaign \"{campaign.name}\" applies (score: {match.score:.0%})")

        if campaign.requires_enrollment and not campaign.enrolled:
            requirements.enrollment_ok = False
            notes.append(f"Campaign \"{campaign.name}\" requires enrollment (not enrolled)")

        if campaign.requires_code and not campaign.code_provided:
            requirements.code_ok = False
            notes.append(f"Campaign \"{campaign.name}\" requires promo code (not provided)")

        if campaign.requirements_met:
            _absorb_benefits(effective, campaign, notes)
        else:
            notes.append(f"Campaign \"{campaign.name}\" benefits not applied due to unmet requirements")

    match_score = clamp01(sum(scores) / len(scores)) if scores else 0.0

    if scores:
        notes.append(
            f"{len(scores)} campaign(s) applicable with average match score {match_score:.0%}"
        )
    else:
        notes.append("No applicable campaigns found")

    logger.debug(
        "card %s: %d/%d campaigns applicable, match score %.2f",
        card.id,
        len(scores),
        len(campaigns or []),
        match_score,
    )
    return CampaignEvaluation(
        effective=effective,
        match_score=match_score,
        requirements_ok=requirements,
        notes=notes,
    )
