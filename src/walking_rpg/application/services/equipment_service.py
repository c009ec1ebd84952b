from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from walking_rpg.domain.models.item import ACCESSORY_SLOTS, EquipmentSlot, Item, ItemKind
from walking_rpg.domain.models.player import Player


logger = logging.getLogger(__name__)


@dataclass
class EquipmentChange:
    ok: bool
    message: str
    item: Optional[Item] = None
    slot: Optional[EquipmentSlot] = None
    displaced: Optional[Item] = None


def can_equip(player: Player, item: Item) -> bool:
    return int(item.level) <= int(player.level)


class EquipmentService:
    """Moves items between inventory and equipment so an item is never in both places."""

    def _target_slot(self, player: Player, item: Item, requested: EquipmentSlot | str | None) -> Optional[EquipmentSlot]:
        if requested is not None:
            slot = EquipmentSlot.normalize(requested)
            if slot is None or not item.can_equip_in_slot(slot):
                return None
            return slot
        if item.kind is ItemKind.ACCESSORY:
            for slot in ACCESSORY_SLOTS:
                if player.equipment.get(slot) is None:
                    return slot
        return item.slot

    def equip_from_inventory(
        self,
        player: Player,
        index: int,
        slot: EquipmentSlot | str | None = None,
    ) -> EquipmentChange:
        item = player.get_inventory_item(index)
        if item is None:
            return EquipmentChange(ok=False, message="That inventory slot is empty.")
        if not can_equip(player, item):
            return EquipmentChange(
                ok=False,
                message=f"{item.name} requires level {item.level}.",
                item=item,
            )
        target = self._target_slot(player, item, slot)
        if target is None:
            return EquipmentChange(ok=False, message=f"{item.name} cannot be equipped there.", item=item)

        player.remove_item_from_inventory(index)
        displaced = player.equipment.set(target, item)
        if displaced is not None:
            player.inventory[index] = displaced
        logger.info(
            "Item equipped",
            extra={"item_id": item.id, "slot": target.value, "displaced": displaced.id if displaced else None},
        )
        message = f"Equipped {item.name}."
        if displaced is not None:
            message = f"Equipped {item.name}; {displaced.name} returned to your pack."
        return EquipmentChange(ok=True, message=message, item=item, slot=target, displaced=displaced)

    def unequip(self, player: Player, slot: EquipmentSlot | str) -> EquipmentChange:
        resolved = EquipmentSlot.normalize(slot)
        if resolved is None:
            return EquipmentChange(ok=False, message="Unknown equipment slot.")
        item = player.equipment.get(resolved)
        if item is None:
            return EquipmentChange(ok=False, message="Nothing is equipped there.", slot=resolved)
        if player.is_inventory_full():
            return EquipmentChange(ok=False, message="Your inventory is full.", item=item, slot=resolved)

        player.equipment.set(resolved, None)
        player.add_item_to_inventory(item)
        return EquipmentChange(ok=True, message=f"Unequipped {item.name}.", item=item, slot=resolved)

    def drop_from_inventory(self, player: Player, index: int) -> EquipmentChange:
        item = player.remove_item_from_inventory(index)
        if item is None:
            return EquipmentChange(ok=False, message="That inventory slot is empty.")
        return EquipmentChange(ok=True, message=f"Dropped {item.name}.", item=item)
