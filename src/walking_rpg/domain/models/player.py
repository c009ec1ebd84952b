from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from walking_rpg.domain.models.equipment import Equipment
from walking_rpg.domain.models.item import Item
from walking_rpg.domain.models.progression import (
    ATTACK_PER_LEVEL,
    DEFENSE_PER_LEVEL,
    HP_PER_LEVEL,
    calculate_damage,
    experience_for_next_level,
    stats_for_level,
)


logger = logging.getLogger(__name__)

INVENTORY_SIZE = 50
DEFAULT_PLAYER_ID = "player1"
DEFAULT_PLAYER_NAME = "Adventurer"


def _empty_inventory() -> List[Optional[Item]]:
    return [None] * INVENTORY_SIZE


def _coerce_number(value: Any, field_name: str) -> Optional[float]:
    """Parse a saved scalar; ``None`` means missing or unreadable."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        logger.warning("Ignoring unreadable saved value", extra={"field": field_name})
        return None
    return number


def _coerce_int(value: Any, default: Optional[int], field_name: str) -> Optional[int]:
    number = _coerce_number(value, field_name)
    return default if number is None else int(number)


def _coerce_float(value: Any, default: float, field_name: str) -> float:
    number = _coerce_number(value, field_name)
    return default if number is None else number


def _read_item(entry: Any, **log_extra: Any) -> Optional[Item]:
    if entry is None:
        return None
    if isinstance(entry, Item):
        return entry
    try:
        return Item.from_dict(entry)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Dropping unreadable inventory entry", extra=log_extra)
        return None


def normalize_inventory(raw: Any) -> List[Optional[Item]]:
    """Copy ``raw`` into a fresh list of exactly INVENTORY_SIZE slots."""
    inventory = _empty_inventory()
    if not isinstance(raw, (list, tuple)):
        return inventory
    for index, entry in enumerate(list(raw)[:INVENTORY_SIZE]):
        inventory[index] = _read_item(entry, slot_index=index)
    return inventory


def normalize_pending_loot(raw: Any) -> List[Item]:
    if not isinstance(raw, (list, tuple)):
        return []
    items = (_read_item(entry, pending_index=index) for index, entry in enumerate(raw))
    return [item for item in items if item is not None]


@dataclass
class Player:
    id: str = DEFAULT_PLAYER_ID
    name: str = DEFAULT_PLAYER_NAME
    level: int = 1
    experience: int = 0
    attack: Optional[int] = None
    defense: Optional[int] = None
    max_hp: Optional[int] = None
    hp: Optional[int] = None
    total_distance: float = 0.0
    total_encounters: int = 0
    creatures_caught: int = 0
    creatures_defeated: int = 0
    equipment: Equipment = field(default_factory=Equipment)
    inventory: List[Optional[Item]] = field(default_factory=_empty_inventory)
    pending_loot: List[Item] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.level = max(1, int(self.level))
        baseline = stats_for_level(self.level)
        self.attack = baseline.attack if self.attack is None else int(self.attack)
        self.defense = baseline.defense if self.defense is None else int(self.defense)
        self.max_hp = baseline.max_hp if self.max_hp is None else max(1, int(self.max_hp))
        self.hp = self.max_hp if self.hp is None else max(0, min(int(self.hp), self.max_hp))
        self.experience = max(0, int(self.experience))
        if not isinstance(self.equipment, Equipment):
            self.equipment = Equipment.from_dict(self.equipment)
        self.inventory = normalize_inventory(self.inventory)
        self.pending_loot = normalize_pending_loot(self.pending_loot)

    # Progression

    def experience_for_next_level(self) -> int:
        return experience_for_next_level(self.level)

    def add_experience(self, amount: int) -> int:
        self.experience += max(0, int(amount))
        levels_gained = 0
        needed = self.experience_for_next_level()
        while self.experience >= needed:
            self.experience -= needed
            self._apply_level_up()
            levels_gained += 1
            needed = self.experience_for_next_level()
        return levels_gained

    def _apply_level_up(self) -> None:
        self.level += 1
        self.attack += ATTACK_PER_LEVEL
        self.defense += DEFENSE_PER_LEVEL
        self.max_hp += HP_PER_LEVEL
        self.hp = min(self.hp + HP_PER_LEVEL, self.max_hp)

    def force_level_up(self) -> None:
        """Debug: gain one level without touching experience."""
        self._apply_level_up()

    def reset_level(self) -> None:
        """Debug: back to the level-1 baseline with full HP."""
        baseline = stats_for_level(1)
        self.level = baseline.level
        self.experience = 0
        self.attack = baseline.attack
        self.defense = baseline.defense
        self.max_hp = baseline.max_hp
        self.hp = self.max_hp

    # Combat

    def calculate_damage(self, target_defense: int, multiplier: float = 1.0) -> int:
        return calculate_damage(self.attack, target_defense, multiplier)

    def effective_attack(self) -> int:
        return int(self.attack) + self.equipment.total_attack_bonus()

    def effective_defense(self) -> int:
        return int(self.defense) + self.equipment.total_defense_bonus()

    def take_damage(self, amount: int) -> None:
        self.hp = max(0, int(self.hp) - int(amount))

    def restore_hp(self, amount: int) -> None:
        self.hp = min(self.max_hp, int(self.hp) + max(0, int(amount)))

    def full_heal(self) -> None:
        self.hp = self.max_hp

    def is_defeated(self) -> bool:
        return int(self.hp) <= 0

    # Counters

    def add_distance(self, meters: float) -> None:
        self.total_distance += max(0.0, float(meters))

    def increment_encounters(self) -> None:
        self.total_encounters += 1

    def catch_creature(self) -> None:
        self.creatures_caught += 1

    def defeat_creature(self) -> None:
        self.creatures_defeated += 1

    # Inventory

    def add_item_to_inventory(self, item: Item) -> int:
        for index, slot in enumerate(self.inventory):
            if slot is None:
                self.inventory[index] = item
                return index
        return -1

    def remove_item_from_inventory(self, index: int) -> Optional[Item]:
        if not isinstance(index, int) or index < 0 or index >= len(self.inventory):
            return None
        item = self.inventory[index]
        self.inventory[index] = None
        return item

    def get_inventory_item(self, index: int) -> Optional[Item]:
        if not isinstance(index, int) or index < 0 or index >= len(self.inventory):
            return None
        return self.inventory[index]

    def empty_inventory_slots(self) -> int:
        return sum(1 for slot in self.inventory if slot is None)

    def used_inventory_slots(self) -> int:
        return INVENTORY_SIZE - self.empty_inventory_slots()

    def is_inventory_full(self) -> bool:
        return self.empty_inventory_slots() == 0

    def receive_item(self, item: Item) -> int:
        """Store ``item`` in the first free slot, or hold it as pending loot (returns -1)."""
        index = self.add_item_to_inventory(item)
        if index < 0:
            self.pending_loot.append(item)
        return index

    def claim_pending_loot(self) -> List[Item]:
        """Move held loot into free slots, oldest first; returns what was collected."""
        collected: List[Item] = []
        remaining: List[Item] = []
        for item in self.pending_loot:
            if self.add_item_to_inventory(item) < 0:
                remaining.append(item)
            else:
                collected.append(item)
        self.pending_loot = remaining
        return collected

    # Snapshots

    def get_stats(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "experience": self.experience,
            "experience_for_next_level": self.experience_for_next_level(),
            "attack": self.attack,
            "defense": self.defense,
            "effective_attack": self.effective_attack(),
            "effective_defense": self.effective_defense(),
            "hp": self.hp,
            "max_hp": self.max_hp,
            "total_distance": self.total_distance,
            "total_encounters": self.total_encounters,
            "creatures_caught": self.creatures_caught,
            "creatures_defeated": self.creatures_defeated,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "experience": self.experience,
            "attack": self.attack,
            "defense": self.defense,
            "hp": self.hp,
            "maxHp": self.max_hp,
            "totalDistance": self.total_distance,
            "totalEncounters": self.total_encounters,
            "creaturesCaught": self.creatures_caught,
            "creaturesDefeated": self.creatures_defeated,
            "equipment": self.equipment.to_dict(),
            "inventory": [item.to_dict() if item is not None else None for item in self.inventory],
            "pendingLoot": [item.to_dict() for item in self.pending_loot],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Player":
        """Rebuild a player from a saved snapshot.

        Unreadable numbers fall back to the level-derived value (or zero) with
        a warning; a damaged save never stops the game from loading.
        """
        data = payload if isinstance(payload, dict) else {}
        return cls(
            id=str(data.get("id") or DEFAULT_PLAYER_ID),
            name=str(data.get("name") or DEFAULT_PLAYER_NAME),
            level=max(1, _coerce_int(data.get("level"), 1, "level")),
            experience=_coerce_int(data.get("experience"), 0, "experience"),
            attack=_coerce_int(data.get("attack"), None, "attack"),
            defense=_coerce_int(data.get("defense"), None, "defense"),
            max_hp=_coerce_int(data.get("maxHp"), None, "maxHp"),
            hp=_coerce_int(data.get("hp"), None, "hp"),
            total_distance=max(0.0, _coerce_float(data.get("totalDistance"), 0.0, "totalDistance")),
            total_encounters=max(0, _coerce_int(data.get("totalEncounters"), 0, "totalEncounters")),
            creatures_caught=max(0, _coerce_int(data.get("creaturesCaught"), 0, "creaturesCaught")),
            creatures_defeated=max(0, _coerce_int(data.get("creaturesDefeated"), 0, "creaturesDefeated")),
            equipment=Equipment.from_dict(data.get("equipment")),
            inventory=normalize_inventory(data.get("inventory")),
            pending_loot=normalize_pending_loot(data.get("pendingLoot")),
        )
