import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from cardplan.domain.models import ScoreWeights


class Settings(BaseSettings):
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    cards_file: str = "data/cards/sample_cards.json"
    campaigns_file: str = "data/campaigns/sample_campaigns.json"
    log_level: str = "INFO"

    weight_value: float = 0.45
    weight_cashflow: float = 0.25
    weight_risk: float = 0.20
    weight_usability: float = 0.05
    weight_campaign: float = 0.05

    model_config = SettingsConfigDict(
        env_prefix="CARDPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def weights(self) -> ScoreWeights:
        return ScoreWeights(
            value=self.weight_value,
            cashflow=self.weight_cashflow,
            risk=self.weight_risk,
            usability=self.weight_usability,
            campaign=self.weight_campaign,
        )


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
