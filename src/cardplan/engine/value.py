from pydantic import BaseModel, Field

from cardplan.domain.models import Campaign, Card, Purchase
from cardplan.utils.money import format_try, round2


class ValueResult(BaseModel):
    reward_tl: float
    cost_tl: float
    net_value_tl: float
    notes: list[str] = Field(default_factory=list)


def is_campaign_applicable(purchase: Purchase, campaign: Campaign) -> bool:
    if campaign.date_range and not campaign.date_range.contains(purchase.date):
        return False
    if campaign.min_amount and purchase.amount < campaign.min_amount:
        return False
    if campaign.channel and campaign.channel != "any" and campaign.channel != purchase.channel:
        return False
    if campaign.category and campaign.category != "general" and campaign.category != purchase.category:
        return False
    if campaign.brand and campaign.brand != "general" and campaign.brand != purchase.merchant:
        return False
    return campaign.requirements_met


def _campaign_benefit(purchase: Purchase, card: Card, campaign: Campaign, notes: list[str]) -> float:
    benefit = 0.0

    if campaign.extra_cashback_percent:
        extra_cashback = purchase.amount * campaign.extra_cashback_percent
        benefit += extra_cashback
        notes.append(
            f"{format_try(extra_cashback)} extra cashback from \"{campaign.name}\" "
            f"(+{campaign.extra_cashback_percent:.2%})"
        )

    if campaign.extra_point_rate:
        extra_points = purchase.amount * campaign.extra_point_rate
        extra_points_value = extra_points * card.point_value
        benefit += extra_points_value
        notes.append(
            f"{format_try(extra_points_value)} extra points from \"{campaign.name}\" "
            f"(+{round2(extra_points)} pts)"
        )

    if campaign.flat_discount:
        benefit += campaign.flat_discount
        notes.append(f"{format_try(campaign.flat_discount)} flat discount from \"{campaign.name}\"")

    return benefit


def compute_value(purchase: Purchase, card: Card, campaigns: list[Campaign] | None = None) -> ValueResult:
    notes: list[str] = []
    reward = 0.0
    cost = 0.0

    base_cashback = purchase.amount * card.cashback_percent
    if base_cashback > 0:
        reward += base_cashback
        notes.append(f"{format_try(base_cashback)} base cashback ({card.cashback_percent:.2%})")

    base_points = purchase.amount * card.point_rate
    base_points_value = base_points * card.point_value
    if base_points_value > 0:
        reward += base_points_value
        notes.append(
            f"{format_try(base_points_value)} base points "
            f"({round2(base_points)} pts @ {format_try(card.point_value)}/pt)"
        )

    applicable = [c for c in campaigns or [] if is_campaign_applicable(purchase, c)]
    campaign_benefit = sum(_campaign_benefit(purchase, card, c, notes) for c in applicable)

    if campaign_benefit > 0:
        caps = [c.cap_amount for c in applicable if c.cap_amount]
        if caps and campaign_benefit > min(caps):
            cap = min(caps)
            notes.append(
                f"Campaign benefit capped by {format_try(campaign_benefit - cap)} "
                f"(limit: {format_try(cap)})"
            )
            campaign_benefit = cap
        reward += campaign_benefit

    pos_fee_percent = purchase.pos_fee_percent or 0.0
    pos_fee = purchase.amount * pos_fee_percent
    if pos_fee > 0:
        cost += pos_fee
        notes.append(f"{format_try(pos_fee)} POS commission ({pos_fee_percent:.2%})")

    return ValueResult(
        reward_tl=round2(reward),
        cost_tl=round2(cost),
        net_value_tl=round2(reward - cost),
        notes=notes,
    )
