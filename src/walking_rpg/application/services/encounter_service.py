from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from walking_rpg.application.dtos import EncounterStatusView
from walking_rpg.application.services.balance_tables import (
    AUTO_FLEE_DISTANCE_M,
    ENCOUNTER_CHANCE_PER_METER,
    MIN_ENCOUNTER_DISTANCE_M,
    MIN_TIME_BETWEEN_ENCOUNTERS_MS,
    TEMPLATE_SELECTION_MODES,
    distance_encounter_probability,
    seconds_remaining,
)
from walking_rpg.domain.events import EncounterGenerated
from walking_rpg.domain.models.creature import CreatureTemplate
from walking_rpg.domain.models.encounter import Encounter, now_ms
from walking_rpg.domain.models.location import DistanceUpdate, GeoPoint
from walking_rpg.domain.models.rarity import RARITY_SPAWN_WEIGHTS
from walking_rpg.domain.services.creature_catalog import CREATURE_TEMPLATES


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncounterConfig:
    min_encounter_distance: float = MIN_ENCOUNTER_DISTANCE_M
    encounter_chance_per_meter: float = ENCOUNTER_CHANCE_PER_METER
    min_time_between_encounters_ms: int = MIN_TIME_BETWEEN_ENCOUNTERS_MS
    auto_flee_distance: float = AUTO_FLEE_DISTANCE_M
    template_selection: str = "uniform"

    def __post_init__(self) -> None:
        if float(self.min_encounter_distance) < 0:
            raise ValueError("min_encounter_distance cannot be negative")
        if float(self.encounter_chance_per_meter) < 0:
            raise ValueError("encounter_chance_per_meter cannot be negative")
        if int(self.min_time_between_encounters_ms) < 0:
            raise ValueError("min_time_between_encounters_ms cannot be negative")
        if float(self.auto_flee_distance) < 0:
            raise ValueError("auto_flee_distance cannot be negative")
        mode = str(self.template_selection or "uniform").strip().lower()
        if mode not in TEMPLATE_SELECTION_MODES:
            raise ValueError(f"Unsupported template selection: {self.template_selection}")
        object.__setattr__(self, "template_selection", mode)


class EncounterService:
    """Turns the walking distance stream into encounters.

    Two gates must both be open before the roll: accumulated distance has
    reached ``min_encounter_distance`` and, once an encounter has happened,
    ``min_time_between_encounters_ms`` has elapsed. The roll probability
    then grows linearly with the distance past the threshold, capped at 1.
    """

    def __init__(
        self,
        config: EncounterConfig | None = None,
        *,
        templates: Sequence[CreatureTemplate] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] | None = None,
        on_encounter: Optional[Callable[[Encounter], None]] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self.config = config or EncounterConfig()
        self.templates = tuple(templates if templates is not None else CREATURE_TEMPLATES)
        self.rng = rng or random.Random()
        self.clock = clock or now_ms
        self.on_encounter = on_encounter
        self.event_publisher = event_publisher
        self.distance_since_last_encounter = 0.0
        self.last_encounter_time: int | None = None

    def set_seed(self, seed: int) -> None:
        self.rng.seed(seed)

    def configure(self, **overrides) -> EncounterConfig:
        self.config = replace(self.config, **overrides)
        return self.config

    def reset(self) -> None:
        self.distance_since_last_encounter = 0.0
        self.last_encounter_time = None

    # Gates and probabilities

    def _elapsed_ms(self) -> int | None:
        if self.last_encounter_time is None:
            return None
        return int(self.clock()) - int(self.last_encounter_time)

    def is_time_constraint_blocking(self) -> bool:
        elapsed = self._elapsed_ms()
        if elapsed is None:
            return False
        return elapsed < int(self.config.min_time_between_encounters_ms)

    def time_remaining_until_encounter(self) -> int:
        """Whole seconds until the time gate reopens; 0 when it is already open."""
        elapsed = self._elapsed_ms()
        if elapsed is None:
            return 0
        return seconds_remaining(int(self.config.min_time_between_encounters_ms) - elapsed)

    def _probability_for(self, distance: float) -> float:
        return distance_encounter_probability(
            distance,
            min_distance_m=self.config.min_encounter_distance,
            chance_per_meter=self.config.encounter_chance_per_meter,
        )

    def distance_based_probability(self) -> float:
        return self._probability_for(self.distance_since_last_encounter)

    def current_encounter_probability(self) -> float:
        if self.is_time_constraint_blocking():
            return 0.0
        return self.distance_based_probability()

    def distance_based_probability_after(self, increment: float) -> float:
        return self._probability_for(self.distance_since_last_encounter + float(increment))

    def probability_after(self, increment: float) -> float:
        if self.is_time_constraint_blocking():
            return 0.0
        return self.distance_based_probability_after(increment)

    def encounter_status(self) -> EncounterStatusView:
        elapsed = self._elapsed_ms()
        return EncounterStatusView(
            distance_since_last_encounter=self.distance_since_last_encounter,
            min_encounter_distance=float(self.config.min_encounter_distance),
            probability=self.current_encounter_probability(),
            distance_probability=self.distance_based_probability(),
            time_since_last_encounter_ms=elapsed,
            time_blocked=self.is_time_constraint_blocking(),
            seconds_until_ready=self.time_remaining_until_encounter(),
        )

    # Generation

    def process_distance_update(self, update: DistanceUpdate | None, player_level: int = 1) -> Encounter | None:
        if update is None or update.location is None:
            return None

        self.distance_since_last_encounter += float(update.incremental)

        if self.distance_since_last_encounter < float(self.config.min_encounter_distance):
            return None
        if self.is_time_constraint_blocking():
            return None

        probability = self.distance_based_probability()
        if self.rng.random() >= probability:
            return None

        return self._generate(update.location, player_level, forced=False)

    def force_encounter(self, location: GeoPoint, player_level: int = 1) -> Encounter:
        return self._generate(location, player_level, forced=True)

    def _pick_template(self) -> CreatureTemplate:
        if not self.templates:
            raise ValueError("EncounterService has no creature templates")
        if self.config.template_selection == "weighted":
            weights = [max(0.0, float(template.encounter_rate)) for template in self.templates]
            if sum(weights) > 0:
                return self.rng.choices(self.templates, weights=weights, k=1)[0]
        elif self.config.template_selection == "rarity":
            weights = [RARITY_SPAWN_WEIGHTS[template.rarity] for template in self.templates]
            return self.rng.choices(self.templates, weights=weights, k=1)[0]
        return self.rng.choice(self.templates)

    def _generate(self, location: GeoPoint, player_level: int, *, forced: bool) -> Encounter:
        timestamp = int(self.clock())
        encounter = Encounter.create_random(
            location,
            player_level,
            rng=self.rng,
            templates=[self._pick_template()],
            timestamp=timestamp,
        )
        creature = encounter.creature
        self.distance_since_last_encounter = 0.0
        self.last_encounter_time = timestamp
        logger.info(
            "Encounter generated",
            extra={"creature_id": creature.id, "creature_level": creature.level, "forced": forced},
        )
        self._publish(
            EncounterGenerated(
                encounter_timestamp=timestamp,
                creature_id=creature.id,
                creature_name=creature.name,
                creature_level=creature.level,
                forced=forced,
            )
        )
        if self.on_encounter is not None:
            self.on_encounter(encounter)
        return encounter

    def _publish(self, event: object) -> None:
        if self.event_publisher is None:
            return
        self.event_publisher(event)
