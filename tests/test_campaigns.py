from datetime import date

import pytest

from cardplan.domain.models import Campaign, DateRange, Purchase
from cardplan.engine.campaigns import evaluate_campaigns, match_campaign


@pytest.fixture
def purchase() -> Purchase:
    return Purchase(
        amount=1500,
        category="electronics",
        installment_count=1,
        date=date(2024, 8, 10),
        channel="offline",
        merchant="TechStore",
    )


def test_general_campaign_matches_everything(purchase) -> None:
    match = match_campaign(purchase, Campaign(name="Everything", channel="any", category="general"))

    assert match.score == 1.0
    assert match.applicable
    assert match.reasons == []


def test_all_criteria_met_scores_full(purchase) -> None:
    campaign = Campaign(
        name="Full",
        date_range=DateRange(start=date(2024, 8, 1), end=date(2024, 8, 31)),
        channel="offline",
        category="electronics",
        brand="TechStore",
        min_amount=1000,
    )

    assert match_campaign(purchase, campaign).score == 1.0


def test_partial_match_scores_by_ratio(purchase) -> None:
    campaign = Campaign(name="Half", category="electronics", channel="online")

    match = match_campaign(purchase, campaign)

    assert match.score == 0.5
    assert "Channel mismatch (need online, got offline)" in match.reasons


def test_partial_match_has_floor(purchase) -> None:
    campaign = Campaign(
        name="Quarter",
        date_range=DateRange(start=date(2024, 8, 1), end=date(2024, 8, 31)),
        channel="online",
        category="travel",
        brand="AirCo",
    )

    assert match_campaign(purchase, campaign).score == 0.3


def test_no_criterion_met_is_inapplicable(purchase) -> None:
    campaign = Campaign(name="Travel", category="travel", min_amount=5000)

    match = match_campaign(purchase, campaign)

    assert match.score == 0
    assert not match.applicable
    assert "Below minimum amount (₺1,500.00 < ₺5,000.00)" in match.reasons


def test_evaluate_sums_cashback_and_points_but_maxes_flat_discount(purchase, alpha_card) -> None:
    campaigns = [
        Campaign(name="A", extra_cashback_percent=0.02, extra_point_rate=1.0, flat_discount=100),
        Campaign(name="B", extra_cashback_percent=0.03, extra_point_rate=2.0, flat_discount=200),
        Campaign(name="C", flat_discount=50, max_installments=9, interest_free_months=3),
    ]

    result = evaluate_campaigns(purchase, alpha_card, campaigns)

    assert result.effective.extra_cashback_percent == pytest.approx(0.05)
    assert result.effective.extra_point_rate == pytest.approx(3.0)
    assert result.effective.flat_discount == 200
    assert result.effective.max_installments_boost == 9
    assert result.effective.interest_free_months == 3
    assert result.match_score == 1.0


def test_match_score_averages_applicable_campaigns(purchase, alpha_card) -> None:
    campaigns = [
        Campaign(name="Full", category="electronics"),
        Campaign(name="Half", category="electronics", channel="online"),
        Campaign(name="Never", category="travel"),
    ]

    result = evaluate_campaigns(purchase, alpha_card, campaigns)

    assert result.match_score == pytest.approx(0.75)
    assert any(note.startswith('Campaign "Never" does not apply') for note in result.notes)


def test_unmet_requirements_block_benefits(purchase, alpha_card) -> None:
    campaigns = [
        Campaign(name="Needs enrollment", extra_cashback_percent=0.05, requires_enrollment=True),
        Campaign(name="Needs code", flat_discount=300, requires_code=True, code_provided=False),
    ]

    result = evaluate_campaigns(purchase, alpha_card, campaigns)

    assert result.requirements_ok.enrollment_ok is False
    assert result.requirements_ok.code_ok is False
    assert result.effective.extra_cashback_percent == 0
    assert result.effective.flat_discount == 0
    assert result.match_score == 1.0


def test_satisfied_requirements_are_ok(purchase, alpha_card, electronics_campaign) -> None:
    result = evaluate_campaigns(purchase, alpha_card, [electronics_campaign])

    assert result.requirements_ok.enrollment_ok is True
    assert result.requirements_ok.code_ok is True
    assert result.effective.extra_cashback_percent == 0.03


def test_requirements_of_inapplicable_campaigns_are_ignored(purchase, alpha_card) -> None:
    campaign = Campaign(name="Travel", category="travel", requires_enrollment=True)

    result = evaluate_campaigns(purchase, alpha_card, [campaign])

    assert result.requirements_ok.enrollment_ok is True
    assert result.match_score == 0
    assert result.notes[-1] == "No applicable campaigns found"
