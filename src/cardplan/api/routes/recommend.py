from fastapi import APIRouter

from cardplan.agents.orchestrator import RecommendationOrchestrator
from cardplan.config import settings
from cardplan.repository.card_store import CardStore
from cardplan.schemas.requests import RecommendRequest
from cardplan.schemas.responses import RecommendResponse

router = APIRouter(tags=["recommend"])
orchestrator = RecommendationOrchestrator(
    CardStore(settings.cards_file, settings.campaigns_file),
    weights=settings.weights,
)


@router.post("/recommend", response_model=RecommendResponse)
def recommend(request: RecommendRequest) -> RecommendResponse:
    # ValueError -> 400 and store failures -> 503 are mapped in cardplan.api.app
    return orchestrator.recommend(request)
