from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Dict

from walking_rpg.domain.models.progression import calculate_damage
from walking_rpg.domain.models.rarity import Rarity


DEFAULT_ENCOUNTER_RATE = 0.5
LEVEL_VARIATION = 2
LEVEL_STAT_SCALING = 0.1
EXPERIENCE_PER_LEVEL = 10


@dataclass(frozen=True)
class CreatureTemplate:
    id: str
    name: str
    type: str
    max_hp: int
    attack: int
    defense: int
    speed: int
    rarity: Rarity = Rarity.COMMON
    description: str = ""
    encounter_rate: float = DEFAULT_ENCOUNTER_RATE

    def __post_init__(self) -> None:
        if int(self.max_hp) < 1:
            raise ValueError("Creature template max_hp must be positive")
        object.__setattr__(self, "rarity", Rarity.normalize(self.rarity))


@dataclass
class Creature:
    id: str
    name: str
    type: str
    level: int = 1
    max_hp: int = 1
    hp: int | None = None
    attack: int = 0
    defense: int = 0
    speed: int = 0
    rarity: Rarity = Rarity.COMMON
    description: str = ""
    encounter_rate: float = DEFAULT_ENCOUNTER_RATE

    def __post_init__(self) -> None:
        self.level = max(1, int(self.level))
        self.max_hp = max(1, int(self.max_hp))
        self.hp = self.max_hp if self.hp is None else max(0, min(int(self.hp), self.max_hp))
        self.rarity = Rarity.normalize(self.rarity)
        if not self.description:
            self.description = f"A {self.type} creature"

    def take_damage(self, amount: int) -> None:
        self.hp = max(0, int(self.hp) - int(amount))

    def is_defeated(self) -> bool:
        return int(self.hp) <= 0

    def calculate_damage(self, target_defense: int, multiplier: float = 1.0) -> int:
        return calculate_damage(self.attack, target_defense, multiplier)

    def experience_reward(self) -> int:
        return int(math.floor(EXPERIENCE_PER_LEVEL * self.level * self.rarity.experience_multiplier))

    def hp_percentage(self) -> float:
        return (int(self.hp) / self.max_hp) * 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "level": self.level,
            "hp": self.hp,
            "maxHp": self.max_hp,
            "attack": self.attack,
            "defense": self.defense,
            "speed": self.speed,
            "rarity": self.rarity.value,
            "description": self.description,
            "encounterRate": self.encounter_rate,
        }


def create_creature_from_template(
    template: CreatureTemplate,
    player_level: int = 1,
    rng: random.Random | None = None,
) -> Creature:
    """Roll a creature within two levels of the player and scale its stats 10% per level."""
    rng = rng or random.Random()
    level = max(1, int(player_level) + rng.randint(-LEVEL_VARIATION, LEVEL_VARIATION))
    multiplier = 1 + (level - 1) * LEVEL_STAT_SCALING

    def _scaled(value: int) -> int:
        return int(math.floor(value * multiplier))

    max_hp = _scaled(template.max_hp)
    return Creature(
        id=template.id,
        name=template.name,
        type=template.type,
        level=level,
        max_hp=max_hp,
        hp=max_hp,
        attack=_scaled(template.attack),
        defense=_scaled(template.defense),
        speed=_scaled(template.speed),
        rarity=template.rarity,
        description=template.description,
        encounter_rate=template.encounter_rate,
    )
