from __future__ import annotations

import random
from typing import Optional, Sequence

from walking_rpg.application.services.balance_tables import BASE_DROP_CHANCE, loot_rolls_drop
from walking_rpg.domain.models.item import Item
from walking_rpg.domain.services.item_catalog import ALL_ITEMS


class LootService:
    """Flat-chance drop table; rarity is a property of the picked item, not a weight."""

    def __init__(
        self,
        catalog: Sequence[Item] | None = None,
        *,
        drop_chance: float = BASE_DROP_CHANCE,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = tuple(catalog if catalog is not None else ALL_ITEMS)
        self.drop_chance = float(drop_chance)
        self.rng = rng or random.Random()

    def roll_drop(self) -> Optional[Item]:
        if not loot_rolls_drop(self.rng.random(), self.drop_chance):
            return None
        return self.random_item()

    def random_item(self) -> Optional[Item]:
        if not self.catalog:
            return None
        return self.rng.choice(self.catalog).copy()
