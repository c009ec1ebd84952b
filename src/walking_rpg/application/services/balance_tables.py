from __future__ import annotations

import math


MIN_ENCOUNTER_DISTANCE_M = 50.0
ENCOUNTER_CHANCE_PER_METER = 0.001
MIN_TIME_BETWEEN_ENCOUNTERS_MS = 30_000
AUTO_FLEE_DISTANCE_M = 100.0

TEMPLATE_SELECTION_MODES = ("uniform", "weighted", "rarity")

BASE_DROP_CHANCE = 0.3

SIMULATED_MOVEMENT_M = 100.0
SIMULATED_LOCATION_STEP_M = 10.0
# Roughly 10 m of latitude.
SIMULATED_LOCATION_STEP_DEGREES = 0.0001
DEFAULT_DEBUG_LOCATION = (37.7749, -122.4194)


def distance_encounter_probability(
    distance_m: float,
    *,
    min_distance_m: float = MIN_ENCOUNTER_DISTANCE_M,
    chance_per_meter: float = ENCOUNTER_CHANCE_PER_METER,
) -> float:
    if float(distance_m) < float(min_distance_m):
        return 0.0
    return min(1.0, (float(distance_m) - float(min_distance_m)) * float(chance_per_meter))


def seconds_remaining(remaining_ms: float) -> int:
    return max(0, int(math.ceil(float(remaining_ms) / 1000.0)))


def loot_rolls_drop(roll: float, drop_chance: float = BASE_DROP_CHANCE) -> bool:
    return float(roll) < float(drop_chance)
