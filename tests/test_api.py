import pytest
from fastapi.testclient import TestClient

from cardplan.agents.orchestrator import RecommendationOrchestrator
from cardplan.api.app import app
from cardplan.api.routes import recommend as recommend_route
from cardplan.repository.card_store import CardStore

from conftest import SAMPLE_CAMPAIGNS, SAMPLE_CARDS


@pytest.fixture
def client(monkeypatch) -> TestClient:
    orchestrator = RecommendationOrchestrator(CardStore(str(SAMPLE_CARDS), str(SAMPLE_CAMPAIGNS)))
    monkeypatch.setattr(recommend_route, "orchestrator", orchestrator)
    return TestClient(app)


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_recommend(client) -> None:
    response = client.post(
        "/recommend",
        json={
            "amount": 1500,
            "category": "electronics",
            "installment_count": 3,
            "date": "2024-08-10",
            "channel": "online",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["best_card"]["card"]["name"] == "AlphaBank Platinum"
    assert body["purchase"]["date"] == "2024-08-10"
    assert len(body["ranked_cards"]) == 3


def test_recommend_without_category_is_bad_request(client) -> None:
    response = client.post("/recommend", json={"amount": 1500})

    assert response.status_code == 400
    assert "amount and category" in response.json()["detail"]


def test_recommend_rejects_unknown_channel(client) -> None:
    response = client.post("/recommend", json={"amount": 10, "category": "x", "channel": "phone"})

    assert response.status_code == 422


def test_recommend_huge_amount_ranks_nothing(client) -> None:
    response = client.post(
        "/recommend",
        json={"amount": 1e307, "category": "electronics", "date": "2024-08-10", "channel": "online"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["best_card"] is None
    assert body["ranked_cards"] == []
    assert body["excluded_card_ids"] == [1, 2, 3]


def test_recommend_rejects_unknown_weight_name(client) -> None:
    response = client.post(
        "/recommend",
        json={"amount": 1500, "category": "electronics", "weights": {"valeu": 1.0}},
    )

    assert response.status_code == 400
    assert "valeu" in response.json()["detail"]


def test_missing_card_data_is_service_unavailable(monkeypatch, tmp_path) -> None:
    broken = RecommendationOrchestrator(CardStore(str(tmp_path / "missing.json")))
    monkeypatch.setattr(recommend_route, "orchestrator", broken)

    response = TestClient(app).post("/recommend", json={"amount": 1500, "category": "electronics"})

    assert response.status_code == 503
    assert response.json()["detail"].startswith("Card data unavailable")
