import logging
from typing import List

from walking_rpg.domain.models.encounter import Encounter
from walking_rpg.domain.repositories import EncounterNotifier


class LoggingEncounterNotifier(EncounterNotifier):
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self.sent: List[str] = []

    def notify_encounter(self, encounter: Encounter) -> None:
        message = f"A {encounter.creature.name} appeared! Tap to view."
        self.sent.append(message)
        self._logger.info(
            message,
            extra={"encounter_id": str(encounter.timestamp), "creature_id": encounter.creature.id},
        )
