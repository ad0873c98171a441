import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cmp_to_key

from cardplan.domain.models import (
    Campaign,
    Card,
    Purchase,
    ScoreBreakdown,
    ScoredCard,
    ScoreWeights,
)
from cardplan.engine.campaigns import evaluate_campaigns
from cardplan.engine.cashflow import build_installment_plan, cashflow_score
from cardplan.engine.compatibility import check_compatibility
from cardplan.engine.risk import compute_risk_penalty
from cardplan.engine.value import compute_value
from cardplan.utils.money import clamp01, format_try, min_max_normalize, round2

logger = logging.getLogger(__name__)

TIE_EPSILON = 1e-6
IMPORTANT_NOTE_KEYWORDS = ("campaign", "cashback", "discount", "penalty")
MAX_EXPLANATION_NOTES = 2


@dataclass
class _CardMetrics:
    card: Card
    net_value_tl: float
    cashflow_score: float
    risk_penalty: float
    usability_score: float
    campaign_match_score: float
    adjusted_installments: int
    resulting_utilization: float
    notes: list[str] = field(default_factory=list)
    value_score: float = 0.0


def resolve_weights(
    weights: ScoreWeights | Mapping[str, float] | None = None,
    base: ScoreWeights | None = None,
) -> ScoreWeights:
    """Merge a partial weight override over ``base`` (the defaults if omitted)."""
    base = base or ScoreWeights()
    if weights is None:
        return base
    if isinstance(weights, ScoreWeights):
        return weights
    return ScoreWeights(**{**base.model_dump(), **dict(weights)})


def _measure_card(purchase: Purchase, card: Card, campaigns: list[Campaign]) -> _CardMetrics | None:
    compatibility = check_compatibility(purchase, card, campaigns)
    if not compatibility.compatible:
        logger.info("card %s (%s) excluded: %s", card.id, card.name, "; ".join(compatibility.notes))
        return None

    campaign_eval = evaluate_campaigns(purchase, card, campaigns)
    value = compute_value(purchase, card, campaigns)
    plan = build_installment_plan(
        purchase.date,
        compatibility.adjusted_installments,
        card.statement_day,
        card.due_day,
    )
    risk = compute_risk_penalty(
        card,
        purchase,
        compatibility.adjusted_installments,
        campaign_eval.requirements_ok,
    )

    return _CardMetrics(
        card=card,
        net_value_tl=value.net_value_tl,
        cashflow_score=cashflow_score(plan),
        risk_penalty=risk.penalty,
        usability_score=compatibility.usability_score,
        campaign_match_score=campaign_eval.match_score,
        adjusted_installments=compatibility.adjusted_installments,
        resulting_utilization=card.utilization_after(purchase.amount),
        notes=[*compatibility.notes, *campaign_eval.notes, *value.notes, *risk.notes],
    )


def _explain(metrics: _CardMetrics) -> str:
    # Rough estimate from the installment count, not from the actual plan.
    if metrics.adjusted_installments <= 1:
        avg_days = 30
    else:
        avg_days = 30 + (metrics.adjusted_installments - 1) * 15

    current = metrics.card.current_utilization
    utilization_change = ""
    if metrics.resulting_utilization > current + 0.01:
        utilization_change = (
            f" ({round2(current * 100)}%→{round2(metrics.resulting_utilization * 100)}%)"
        )

    if metrics.adjusted_installments > 1:
        installments = f"{metrics.adjusted_installments} installments"
    else:
        installments = "single payment"

    campaign = "with campaign benefits" if metrics.campaign_match_score > 0.5 else "no campaigns"

    important = [
        note for note in metrics.notes if any(keyword in note for keyword in IMPORTANT_NOTE_KEYWORDS)
    ][:MAX_EXPLANATION_NOTES]
    notes_text = f" ({'; '.join(important)})" if important else ""

    return (
        f"{format_try(metrics.net_value_tl)} net benefit; payment in ~{avg_days} days; "
        f"utilization{utilization_change}; {installments}; {campaign}{notes_text}"
    )


def _compare(a: ScoredCard, b: ScoredCard) -> int:
    pairs = (
        (b.total_score, a.total_score),
        (b.breakdown.value_score, a.breakdown.value_score),
        (b.breakdown.cashflow_score, a.breakdown.cashflow_score),
        (a.breakdown.risk_penalty, b.breakdown.risk_penalty),
        (a.resulting_utilization, b.resulting_utilization),
    )
    for left, right in pairs:
        diff = left - right
        if abs(diff) > TIE_EPSILON:
            return -1 if diff < 0 else 1
    return (a.card.name > b.card.name) - (a.card.name < b.card.name)


def score_cards(
    purchase: Purchase,
    cards: list[Card],
    campaigns_by_card_id: Mapping[int, list[Campaign]] | None = None,
    weights: ScoreWeights | Mapping[str, float] | None = None,
) -> list[ScoredCard]:
    """Rank the cards usable for ``purchase`` by composite score, best first.

    Cards without enough available limit are left out entirely. An empty list
    means no card can take the purchase.
    """
    campaigns_by_card_id = campaigns_by_card_id or {}
    w = resolve_weights(weights)

    measured = []
    for card in cards:
        metrics = _measure_card(purchase, card, campaigns_by_card_id.get(card.id, []))
        if metrics is not None:
            measured.append(metrics)

    if not measured:
        return []

    lo = min(m.net_value_tl for m in measured)
    hi = max(m.net_value_tl for m in measured)
    for metrics in measured:
        metrics.value_score = min_max_normalize(metrics.net_value_tl, lo, hi)

    scored = []
    for m in measured:
        total = round2(
            100
            * (
                w.value * m.value_score
                + w.cashflow * m.cashflow_score
                + w.risk * (1 - m.risk_penalty)
                + w.usability * m.usability_score
                + w.campaign * m.campaign_match_score
            )
        )
        scored.append(
            ScoredCard(
                card=m.card,
                total_score=max(0.0, min(100.0, total)),
                breakdown=ScoreBreakdown(
                    net_value_tl=m.net_value_tl,
                    value_score=clamp01(m.value_score),
                    cashflow_score=clamp01(m.cashflow_score),
                    risk_penalty=clamp01(m.risk_penalty),
                    usability_score=clamp01(m.usability_score),
                    campaign_match_score=clamp01(m.campaign_match_score),
                    notes=m.notes,
                ),
                explanation=_explain(m),
                resulting_utilization=round2(m.resulting_utilization),
                adjusted_installments=m.adjusted_installments,
            )
        )

    scored.sort(key=cmp_to_key(_compare))
    logger.debug(
        "ranked %d of %d cards: %s",
        len(scored),
        len(cards),
        ", ".join(f"{s.card.name}={s.total_score}" for s in scored),
    )
    return scored

