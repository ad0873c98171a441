import datetime as dt

from pydantic import BaseModel, Field

from cardplan.domain.models import Campaign, Channel


class RecommendRequest(BaseModel):
    amount: float | None = None
    category: str | None = None
    installment_count: int = 1
    date: dt.date | None = None
    channel: Channel = "offline"
    merchant: str | None = None
    pos_fee_percent: float | None = None
    campaigns: list[Campaign] = Field(default_factory=list)
    campaigns_active: bool = True
    weights: dict[str, float] | None = None
