import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Channel = Literal["online", "offline"]
CampaignType = Literal["cashback", "points", "flatDiscount", "installmentBoost", "interestFree"]

UNLIMITED_INSTALLMENTS_CAP = 24


class Purchase(BaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)
    category: str
    installment_count: int = Field(default=1, ge=1)
    date: dt.date
    channel: Channel
    merchant: str | None = None
    pos_fee_percent: float | None = Field(default=None, ge=0, le=1)
    currency: Literal["TRY"] = "TRY"


class Card(BaseModel):
    id: int
    name: str
    total_limit: float = Field(gt=0, allow_inf_nan=False)
    available_limit: float = Field(allow_inf_nan=False)
    statement_day: int
    due_day: int
    cashback_percent: float = Field(default=0, ge=0, le=1)
    point_rate: float = Field(default=0, ge=0)
    point_value: float = Field(default=0, ge=0)
    installment_support: int | bool = 1
    utilization: float | None = Field(default=None, ge=0, le=1)

    @property
    def max_installments(self) -> int:
        """Installment ceiling of the card on its own, before campaign boosts."""
        if isinstance(self.installment_support, bool):
            return UNLIMITED_INSTALLMENTS_CAP if self.installment_support else 0
        return self.installment_support

    @property
    def current_utilization(self) -> float:
        if self.utilization is not None:
            return self.utilization
        return (self.total_limit - self.available_limit) / self.total_limit

    def utilization_after(self, amount: float) -> float:
        return (self.total_limit - (self.available_limit - amount)) / self.total_limit


class DateRange(BaseModel):
    start: dt.date
    end: dt.date

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


class Campaign(BaseModel):
    name: str
    types: list[CampaignType] = Field(default_factory=list)

    category: str | None = None
    channel: Literal["online", "offline", "any"] | None = None
    brand: str | None = None
    date_range: DateRange | None = None
    min_amount: float | None = None

    extra_cashback_percent: float | None = None
    extra_point_rate: float | None = None
    flat_discount: float | None = None
    max_installments: int | None = None
    interest_free_months: int | None = None
    cap_amount: float | None = None
    monthly_cap: bool = False

    requires_enrollment: bool = False
    enrolled: bool = False
    requires_code: bool = False
    code_provided: bool = False

    @property
    def requirements_met(self) -> bool:
        return (not self.requires_enrollment or self.enrolled) and (
            not self.requires_code or self.code_provided
        )


class ScoreWeights(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: float = 0.45
    cashflow: float = 0.25
    risk: float = 0.20
    usability: float = 0.05
    campaign: float = 0.05


class ScoreBreakdown(BaseModel):
    net_value_tl: float
    value_score: float
    cashflow_score: float
    risk_penalty: float
    usability_score: float
    campaign_match_score: float
    notes: list[str] = Field(default_factory=list)


class ScoredCard(BaseModel):
    card: Card
    total_score: float
    breakdown: ScoreBreakdown
    explanation: str
    resulting_utilization: float
    adjusted_installments: int
