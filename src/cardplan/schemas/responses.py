from pydantic import BaseModel, Field

from cardplan.domain.models import Purchase, ScoredCard


class RecommendResponse(BaseModel):
    best_card: ScoredCard | None
    ranked_cards: list[ScoredCard]
    purchase: Purchase
    excluded_card_ids: list[int] = Field(default_factory=list)
