from enum import Enum
from typing import Dict


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @classmethod
    def normalize(cls, value: "str | Rarity | None") -> "Rarity":
        if isinstance(value, Rarity):
            return value
        raw = str(value or "").strip().lower()
        for item in cls:
            if item.value == raw:
                return item
        return cls.COMMON

    @property
    def experience_multiplier(self) -> float:
        return RARITY_EXPERIENCE_MULTIPLIERS[self]


RARITY_EXPERIENCE_MULTIPLIERS: Dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.UNCOMMON: 1.5,
    Rarity.RARE: 2.0,
    Rarity.EPIC: 3.0,
    Rarity.LEGENDARY: 5.0,
}

# Relative spawn weights per tier, used when template selection is weighted by rarity.
RARITY_SPAWN_WEIGHTS: Dict[Rarity, int] = {
    Rarity.COMMON: 50,
    Rarity.UNCOMMON: 30,
    Rarity.RARE: 15,
    Rarity.EPIC: 4,
    Rarity.LEGENDARY: 1,
}
