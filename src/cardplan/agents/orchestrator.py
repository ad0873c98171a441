import datetime as dt
import logging

from cardplan.domain.models import Campaign, Card, Purchase, ScoreWeights
from cardplan.engine.scoring import resolve_weights, score_cards
from cardplan.repository.card_store import CardStore
from cardplan.schemas.requests import RecommendRequest
from cardplan.schemas.responses import RecommendResponse

logger = logging.getLogger(__name__)


class RecommendationOrchestrator:
    def __init__(self, card_store: CardStore, weights: ScoreWeights | None = None):
        self.card_store = card_store
        self.weights = weights or ScoreWeights()

    def _build_purchase(self, request: RecommendRequest) -> Purchase:
        if request.amount is None or request.category is None:
            raise ValueError("Both amount and category are required.")

        return Purchase(
            amount=request.amount,
            category=request.category,
            installment_count=request.installment_count,
            date=request.date or dt.date.today(),
            channel=request.channel,
            merchant=request.merchant,
            pos_fee_percent=request.pos_fee_percent,
        )

    def _campaigns_for(self, cards: list[Card], request: RecommendRequest) -> dict[int, list[Campaign]]:
        if not request.campaigns_active:
            return {}

        stored = self.card_store.load_campaigns()
        # ad-hoc campaigns from the request apply to every card
        return {card.id: [*stored.get(card.id, []), *request.campaigns] for card in cards}

    def recommend(self, request: RecommendRequest) -> RecommendResponse:
        purchase = self._build_purchase(request)
        cards = self.card_store.load_cards()
        if not cards:
            raise ValueError("No cards available.")

        ranked = score_cards(
            purchase,
            cards,
            campaigns_by_card_id=self._campaigns_for(cards, request),
            weights=resolve_weights(request.weights, base=self.weights),
        )

        ranked_ids = {item.card.id for item in ranked}
        excluded = [card.id for card in cards if card.id not in ranked_ids]
        logger.info(
            "recommendation for %.2f TRY %s: %d ranked, %d excluded",
            purchase.amount,
            purchase.category,
            len(ranked),
            len(excluded),
        )

        return RecommendResponse(
            best_card=ranked[0] if ranked else None,
            ranked_cards=ranked,
            purchase=purchase,
            excluded_card_ids=excluded,
        )

    @staticmethod
    def apply_purchase(card: Card, purchase: Purchase) -> Card:
        """Card as it would look after the purchase is charged to it."""
        return card.model_copy(
            update={"available_limit": max(0.0, card.available_limit - purchase.amount)}
        )
