"""JSON-backed card and campaign rows.

Rows use the storage layout of the mobile app: snake_case columns, 0/1
integers for flags, campaign ``types`` serialized as a JSON list string and
the validity window split into ``date_range_start``/``date_range_end``.
"""

import json
import logging
from collections import defaultdict
from pathlib import Path

from pydantic import ValidationError

from cardplan.domain.models import Campaign, Card

logger = logging.getLogger(__name__)

_CAMPAIGN_FLAGS = ("monthly_cap", "requires_enrollment", "enrolled", "requires_code", "code_provided")


class CardStoreError(ValueError):
    pass


def campaign_from_row(row: dict) -> Campaign:
    data = {key: value for key, value in row.items() if value is not None}
    data.pop("id", None)
    data.pop("card_id", None)

    types = data.get("types")
    if isinstance(types, str):
        data["types"] = json.loads(types) if types.strip() else []

    start = data.pop("date_range_start", None)
    end = data.pop("date_range_end", None)
    if start and end:
        data["date_range"] = {"start": start, "end": end}

    for flag in _CAMPAIGN_FLAGS:
        if flag in data:
            data[flag] = bool(data[flag])

    return Campaign.model_validate(data)


class CardStore:
    def __init__(self, cards_file: str, campaigns_file: str | None = None):
        self.cards_file = Path(cards_file)
        self.campaigns_file = Path(campaigns_file) if campaigns_file else None

    def _read_rows(self, path: Path) -> list[dict]:
        with path.open("r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                raise CardStoreError(f"{path}: invalid JSON ({exc})") from exc

        if not isinstance(data, list):
            raise CardStoreError(f"{path}: expected a JSON array of rows")
        return data

    def load_cards(self) -> list[Card]:
        if not self.cards_file.exists():
            raise FileNotFoundError(f"Cards file not found: {self.cards_file}")

        cards = []
        for index, row in enumerate(self._read_rows(self.cards_file)):
            try:
                cards.append(Card.model_validate(row))
            except ValidationError as exc:
                raise CardStoreError(f"{self.cards_file}: bad card row {index}: {exc}") from exc

        logger.debug("loaded %d cards from %s", len(cards), self.cards_file)
        return cards

    def load_campaigns(self) -> dict[int, list[Campaign]]:
        if self.campaigns_file is None or not self.campaigns_file.exists():
            return {}

        by_card: dict[int, list[Campaign]] = defaultdict(list)
        for index, row in enumerate(self._read_rows(self.campaigns_file)):
            if "card_id" not in row:
                raise CardStoreError(f"{self.campaigns_file}: campaign row {index} has no card_id")
            try:
                by_card[int(row["card_id"])].append(campaign_from_row(row))
            except (ValidationError, json.JSONDecodeError) as exc:
                raise CardStoreError(
                    f"{self.campaigns_file}: bad campaign row {index}: {exc}"
                ) from exc

        logger.debug(
            "loaded %d campaigns for %d cards from %s",
            sum(len(items) for items in by_card.values()),
            len(by_card),
            self.campaigns_file,
        )
        return dict(by_card)
