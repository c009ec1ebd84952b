from __future__ import annotations

import math
from dataclasses import dataclass


STARTING_ATTACK = 20
STARTING_DEFENSE = 5
STARTING_HP = 100

ATTACK_PER_LEVEL = 3
DEFENSE_PER_LEVEL = 2
HP_PER_LEVEL = 10

EXPERIENCE_CURVE_BASE = 100
EXPERIENCE_CURVE_EXPONENT = 1.5

MINIMUM_DAMAGE = 1


@dataclass(frozen=True)
class LevelStats:
    level: int
    attack: int
    defense: int
    max_hp: int

    def __post_init__(self) -> None:
        if int(self.level) < 1:
            raise ValueError("Level must be at least 1")
        if int(self.max_hp) < 1:
            raise ValueError("Max HP must be positive")


def stats_for_level(level: int) -> LevelStats:
    safe_level = max(1, int(level))
    gained = safe_level - 1
    return LevelStats(
        level=safe_level,
        attack=STARTING_ATTACK + gained * ATTACK_PER_LEVEL,
        defense=STARTING_DEFENSE + gained * DEFENSE_PER_LEVEL,
        max_hp=STARTING_HP + gained * HP_PER_LEVEL,
    )


def experience_for_next_level(level: int) -> int:
    safe_level = max(1, int(level))
    return int(math.floor(EXPERIENCE_CURVE_BASE * (safe_level ** EXPERIENCE_CURVE_EXPONENT)))


def calculate_damage(attack: int, target_defense: int, multiplier: float = 1.0) -> int:
    """Damage after defense, floored at one."""
    return max(MINIMUM_DAMAGE, int(math.floor((int(attack) - int(target_defense)) * float(multiplier))))
