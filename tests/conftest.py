from datetime import date
from pathlib import Path

import pytest

from cardplan.domain.models import Campaign, Card, Purchase

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
SAMPLE_CARDS = DATA_DIR / "cards" / "sample_cards.json"
SAMPLE_CAMPAIGNS = DATA_DIR / "campaigns" / "sample_campaigns.json"


@pytest.fixture
def alpha_card() -> Card:
    return Card(
        id=1,
        name="AlphaBank Platinum",
        total_limit=50000,
        available_limit=45000,
        statement_day=15,
        due_day=5,
        cashback_percent=0.025,
        point_rate=1.0,
        point_value=0.01,
        installment_support=12,
    )


@pytest.fixture
def electronics_purchase() -> Purchase:
    return Purchase(
        amount=1500,
        category="electronics",
        installment_count=3,
        date=date(2024, 8, 10),
        channel="online",
    )


@pytest.fixture
def electronics_campaign() -> Campaign:
    return Campaign(
        name="Electronics Cashback Boost",
        types=["cashback"],
        category="electronics",
        min_amount=1000,
        cap_amount=500,
        extra_cashback_percent=0.03,
        requires_enrollment=True,
        enrolled=True,
    )
