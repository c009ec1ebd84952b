from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from walking_rpg.domain.models.creature import Creature, CreatureTemplate, create_creature_from_template
from walking_rpg.domain.models.location import GeoPoint
from walking_rpg.domain.services.creature_catalog import CREATURE_TEMPLATES


def now_ms() -> int:
    return int(time.time() * 1000)


class EncounterStatus(str, Enum):
    ACTIVE = "active"
    CAUGHT = "caught"
    DEFEATED = "defeated"
    FLED = "fled"


@dataclass
class Encounter:
    creature: Creature
    location: GeoPoint
    timestamp: int = field(default_factory=now_ms)
    player_level: int = 1
    status: EncounterStatus = EncounterStatus.ACTIVE

    def __post_init__(self) -> None:
        if self.creature is None:
            raise ValueError("Encounter requires a creature")
        if self.location is None:
            raise ValueError("Encounter requires a location")
        self.status = EncounterStatus(self.status)
        self.player_level = max(1, int(self.player_level))

    def is_active(self) -> bool:
        return self.status is EncounterStatus.ACTIVE

    def _close(self, status: EncounterStatus) -> bool:
        if not self.is_active():
            return False
        self.status = status
        return True

    def catch(self) -> bool:
        return self._close(EncounterStatus.CAUGHT)

    def defeat(self) -> bool:
        return self._close(EncounterStatus.DEFEATED)

    def flee(self) -> bool:
        return self._close(EncounterStatus.FLED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "creature": self.creature.to_dict(),
            "location": self.location.to_dict(),
            "timestamp": self.timestamp,
            "playerLevel": self.player_level,
            "status": self.status.value,
        }

    @classmethod
    def create_random(
        cls,
        location: GeoPoint,
        player_level: int = 1,
        rng: Optional[random.Random] = None,
        templates: Optional[Sequence[CreatureTemplate]] = None,
        timestamp: Optional[int] = None,
    ) -> "Encounter":
        """Spawn a leveled creature from ``templates`` (the catalog by default), chosen uniformly."""
        pool = list(CREATURE_TEMPLATES if templates is None else templates)
        if not pool:
            raise ValueError("Cannot create an encounter without creature templates")
        rng = rng or random.Random()
        # A caller that already picked the template passes a single-entry pool.
        template = pool[0] if len(pool) == 1 else rng.choice(pool)
        creature = create_creature_from_template(template, player_level, rng)
        return cls(
            creature=creature,
            location=location,
            timestamp=now_ms() if timestamp is None else int(timestamp),
            player_level=player_level,
        )
