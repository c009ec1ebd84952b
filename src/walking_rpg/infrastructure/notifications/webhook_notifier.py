from typing import Any, Dict

import httpx

from walking_rpg.domain.models.encounter import Encounter
from walking_rpg.domain.repositories import EncounterNotifier
from walking_rpg.infrastructure.resilient_http import post_json_with_retry


ENCOUNTER_TITLE = "🎮 Creature Encounter!"


def build_encounter_payload(encounter: Encounter) -> Dict[str, Any]:
    creature = encounter.creature
    return {
        "title": ENCOUNTER_TITLE,
        "body": f"A {creature.name} appeared! Tap to view.",
        "data": {
            "type": "encounter",
            "encounterId": str(encounter.timestamp),
            "creatureId": creature.id,
            "creatureLevel": creature.level,
        },
    }


class WebhookEncounterNotifier(EncounterNotifier):
    """Posts encounter alerts to a push gateway webhook."""

    def __init__(
        self,
        url: str,
        timeout: float = 2.0,
        retries: int = 1,
        backoff_seconds: float = 0.1,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self.client = http_client or httpx.Client(timeout=timeout)

    def notify_encounter(self, encounter: Encounter) -> None:
        post_json_with_retry(
            self.client,
            self._url,
            payload=build_encounter_payload(encounter),
            headers={"Accept": "application/json"},
            retries=self._retries,
            backoff_seconds=self._backoff_seconds,
        )

    def close(self) -> None:
        self.client.close()
