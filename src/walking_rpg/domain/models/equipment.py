from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from walking_rpg.domain.models.item import EquipmentSlot, Item


logger = logging.getLogger(__name__)


@dataclass
class Equipment:
    slots: Dict[EquipmentSlot, Optional[Item]] = field(
        default_factory=lambda: {slot: None for slot in EquipmentSlot}
    )

    def __post_init__(self) -> None:
        normalized: Dict[EquipmentSlot, Optional[Item]] = {slot: None for slot in EquipmentSlot}
        for raw_slot, item in dict(self.slots or {}).items():
            slot = EquipmentSlot.normalize(raw_slot)
            if slot is None:
                continue
            normalized[slot] = item if isinstance(item, Item) else None
        self.slots = normalized

    def get(self, slot: "EquipmentSlot | str") -> Optional[Item]:
        resolved = EquipmentSlot.normalize(slot)
        if resolved is None:
            return None
        return self.slots.get(resolved)

    def set(self, slot: EquipmentSlot, item: Optional[Item]) -> Optional[Item]:
        """Place ``item`` (or clear with None) and return whatever was displaced."""
        previous = self.slots.get(slot)
        self.slots[slot] = item
        return previous

    def items(self) -> Iterator[Tuple[EquipmentSlot, Optional[Item]]]:
        for slot in EquipmentSlot:
            yield slot, self.slots.get(slot)

    def equipped_items(self) -> list[Item]:
        return [item for _, item in self.items() if item is not None]

    def total_attack_bonus(self) -> int:
        return sum(int(item.attack or 0) for item in self.equipped_items())

    def total_defense_bonus(self) -> int:
        return sum(int(item.defense or 0) for item in self.equipped_items())

    def total_hp_bonus(self) -> int:
        return sum(int(item.hp or 0) + int(item.max_hp or 0) for item in self.equipped_items())

    def to_dict(self) -> Dict[str, Any]:
        return {slot.value: (item.to_dict() if item is not None else None) for slot, item in self.items()}

    @classmethod
    def from_dict(cls, payload: Any) -> "Equipment":
        equipment = cls()
        if not isinstance(payload, dict):
            return equipment
        for raw_slot, raw_item in payload.items():
            slot = EquipmentSlot.normalize(raw_slot)
            if slot is None or raw_item is None:
                continue
            try:
                item = Item.from_dict(raw_item)
            except (TypeError, ValueError):
                logger.warning("Dropping unreadable equipped item", extra={"slot": str(raw_slot)})
                continue
            if not item.can_equip_in_slot(slot):
                logger.warning("Dropping item equipped in incompatible slot", extra={"slot": slot.value, "item_id": item.id})
                continue
            equipment.slots[slot] = item
        return equipment
