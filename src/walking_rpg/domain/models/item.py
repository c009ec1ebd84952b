from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from walking_rpg.domain.models.rarity import Rarity


class ItemKind(str, Enum):
    WEAPON = "weapon"
    OFFHAND = "offhand"
    HEAD = "head"
    CHEST = "chest"
    LEGS = "legs"
    BOOTS = "boots"
    GLOVES = "gloves"
    ACCESSORY = "accessory"

    @classmethod
    def normalize(cls, value: "str | ItemKind | None") -> "ItemKind":
        if isinstance(value, ItemKind):
            return value
        raw = str(value or "").strip().lower()
        for item in cls:
            if item.value == raw:
                return item
        raise ValueError(f"Unknown item kind: {value}")


class EquipmentSlot(str, Enum):
    WEAPON = "weapon"
    OFFHAND = "offhand"
    HEAD = "head"
    CHEST = "chest"
    LEGS = "legs"
    BOOTS = "boots"
    GLOVES = "gloves"
    ACCESSORY1 = "accessory1"
    ACCESSORY2 = "accessory2"

    @classmethod
    def normalize(cls, value: "str | EquipmentSlot | None") -> Optional["EquipmentSlot"]:
        if isinstance(value, EquipmentSlot):
            return value
        raw = str(value or "").strip().lower()
        for item in cls:
            if item.value == raw:
                return item
        return None


ACCESSORY_SLOTS: Tuple[EquipmentSlot, ...] = (EquipmentSlot.ACCESSORY1, EquipmentSlot.ACCESSORY2)

KIND_SLOTS: Dict[ItemKind, Tuple[EquipmentSlot, ...]] = {
    ItemKind.WEAPON: (EquipmentSlot.WEAPON,),
    ItemKind.OFFHAND: (EquipmentSlot.OFFHAND,),
    ItemKind.HEAD: (EquipmentSlot.HEAD,),
    ItemKind.CHEST: (EquipmentSlot.CHEST,),
    ItemKind.LEGS: (EquipmentSlot.LEGS,),
    ItemKind.BOOTS: (EquipmentSlot.BOOTS,),
    ItemKind.GLOVES: (EquipmentSlot.GLOVES,),
    ItemKind.ACCESSORY: ACCESSORY_SLOTS,
}


@dataclass(frozen=True)
class Item:
    """Equippable item. ``kind`` is the tag; it pins the slot(s) the item may occupy."""

    id: str
    name: str
    kind: ItemKind
    rarity: Rarity = Rarity.COMMON
    level: int = 1
    description: str = ""
    attack: Optional[int] = None
    defense: Optional[int] = None
    hp: Optional[int] = None
    max_hp: Optional[int] = None
    drop_chance: float = 0.0

    def __post_init__(self) -> None:
        if not str(self.id or "").strip():
            raise ValueError("Item id is required")
        object.__setattr__(self, "kind", ItemKind.normalize(self.kind))
        object.__setattr__(self, "rarity", Rarity.normalize(self.rarity))
        if int(self.level) < 1:
            raise ValueError("Item level must be at least 1")

    @property
    def slot(self) -> EquipmentSlot:
        """Default slot for the item; accessories default to the first accessory slot."""
        return KIND_SLOTS[self.kind][0]

    @property
    def compatible_slots(self) -> Tuple[EquipmentSlot, ...]:
        return KIND_SLOTS[self.kind]

    def can_equip_in_slot(self, slot: "EquipmentSlot | str") -> bool:
        resolved = EquipmentSlot.normalize(slot)
        return resolved is not None and resolved in KIND_SLOTS[self.kind]

    def copy(self) -> "Item":
        return replace(self)

    def stat_lines(self) -> list[str]:
        lines: list[str] = []
        if self.attack:
            lines.append(f"+{self.attack} Attack")
        if self.defense:
            lines.append(f"+{self.defense} Defense")
        if self.hp:
            lines.append(f"+{self.hp} HP")
        if self.max_hp:
            lines.append(f"+{self.max_hp} Max HP")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.kind.value,
            "slot": self.slot.value,
            "rarity": self.rarity.value,
            "level": int(self.level),
            "dropChance": float(self.drop_chance),
        }
        for key, value in (("attack", self.attack), ("defense", self.defense), ("hp", self.hp), ("maxHp", self.max_hp)):
            if value is not None:
                payload[key] = int(value)
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Item":
        if not isinstance(payload, dict):
            raise ValueError("Item payload must be a mapping")

        def _optional_int(key: str) -> Optional[int]:
            value = payload.get(key)
            return None if value is None else int(value)

        return cls(
            id=str(payload.get("id") or ""),
            name=str(payload.get("name") or payload.get("id") or ""),
            kind=ItemKind.normalize(payload.get("type")),
            rarity=Rarity.normalize(payload.get("rarity")),
            level=int(payload.get("level", 1) or 1),
            description=str(payload.get("description") or ""),
            attack=_optional_int("attack"),
            defense=_optional_int("defense"),
            hp=_optional_int("hp"),
            max_hp=_optional_int("maxHp"),
            drop_chance=float(payload.get("dropChance", 0.0) or 0.0),
        )
