from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class AttackType(str, Enum):
    BASIC = "basic"
    STRONG = "strong"
    HEAVY = "heavy"

    @classmethod
    def normalize(cls, value: "str | AttackType | None") -> Optional["AttackType"]:
        if isinstance(value, AttackType):
            return value
        raw = str(value or "").strip().lower()
        for item in cls:
            if item.value == raw:
                return item
        return None

    @property
    def profile(self) -> "AttackProfile":
        return ATTACK_PROFILES[self]


@dataclass(frozen=True)
class AttackProfile:
    name: str
    multiplier: float
    cooldown_ms: int
    icon: str

    def __post_init__(self) -> None:
        if float(self.multiplier) <= 0:
            raise ValueError("Attack multiplier must be positive")
        if int(self.cooldown_ms) < 0:
            raise ValueError("Attack cooldown cannot be negative")


ATTACK_PROFILES: Dict[AttackType, AttackProfile] = {
    AttackType.BASIC: AttackProfile(name="Basic Attack", multiplier=1.0, cooldown_ms=1000, icon="⚔️"),
    AttackType.STRONG: AttackProfile(name="Strong Attack", multiplier=1.5, cooldown_ms=3000, icon="💥"),
    AttackType.HEAVY: AttackProfile(name="Heavy Attack", multiplier=2.0, cooldown_ms=5000, icon="🔨"),
}
