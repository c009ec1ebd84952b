from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from walking_rpg.domain.models.encounter import Encounter
from walking_rpg.domain.models.location import DistanceUpdate, GeoPoint
from walking_rpg.domain.models.player import Player


PLAYER_STORAGE_KEY = "walking_rpg:player_data"


class PlayerRepository(ABC):
    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def save(self, player: Player) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


class EncounterNotifier(ABC):
    @abstractmethod
    def notify_encounter(self, encounter: Encounter) -> None:
        raise NotImplementedError


class LocationFeed(ABC):
    @abstractmethod
    def current_location(self) -> GeoPoint:
        raise NotImplementedError

    @abstractmethod
    def advance(self, meters: float) -> DistanceUpdate:
        raise NotImplementedError
