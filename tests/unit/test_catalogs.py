import sys
from collections import Counter
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from walking_rpg.domain.models.attack import ATTACK_PROFILES, AttackType
from walking_rpg.domain.models.item import ItemKind
from walking_rpg.domain.models.rarity import RARITY_SPAWN_WEIGHTS, Rarity
from walking_rpg.domain.services.creature_catalog import CREATURE_TEMPLATES, get_creature_template
from walking_rpg.domain.services.item_catalog import (
    ALL_ITEMS,
    get_item_by_id,
    get_items_by_kind,
    get_items_by_rarity,
)


class ItemCatalogTests(unittest.TestCase):
    def test_catalog_has_one_item_per_rarity_for_every_kind(self) -> None:
        self.assertEqual(40, len(ALL_ITEMS))
        for kind in ItemKind:
            items = get_items_by_kind(kind)
            self.assertEqual(5, len(items), kind)
            self.assertEqual(set(Rarity), {item.rarity for item in items})

    def test_item_ids_are_unique(self) -> None:
        counts = Counter(item.id for item in ALL_ITEMS)
        self.assertEqual([], [item_id for item_id, count in counts.items() if count > 1])

    def test_lookup_helpers(self) -> None:
        sword = get_item_by_id("weapon_wooden_sword")
        self.assertIsNotNone(sword)
        self.assertEqual(5, sword.attack)
        self.assertIsNone(get_item_by_id("nope"))
        self.assertEqual(8, len(get_items_by_rarity("legendary")))

    def test_legendary_items_require_level_fifteen(self) -> None:
        self.assertEqual({15}, {item.level for item in get_items_by_rarity(Rarity.LEGENDARY)})


class CreatureCatalogTests(unittest.TestCase):
    def test_five_templates_with_unique_ids(self) -> None:
        self.assertEqual(5, len(CREATURE_TEMPLATES))
        self.assertEqual(5, len({template.id for template in CREATURE_TEMPLATES}))

    def test_lookup(self) -> None:
        guardian = get_creature_template("Mountain_Guardian")
        self.assertIsNotNone(guardian)
        self.assertIs(Rarity.RARE, guardian.rarity)
        self.assertIsNone(get_creature_template("dragon"))


class AttackProfileTests(unittest.TestCase):
    def test_profiles(self) -> None:
        self.assertEqual((1.0, 1000), (ATTACK_PROFILES[AttackType.BASIC].multiplier, ATTACK_PROFILES[AttackType.BASIC].cooldown_ms))
        self.assertEqual((1.5, 3000), (AttackType.STRONG.profile.multiplier, AttackType.STRONG.profile.cooldown_ms))
        self.assertEqual((2.0, 5000), (AttackType.HEAVY.profile.multiplier, AttackType.HEAVY.profile.cooldown_ms))

    def test_normalize(self) -> None:
        self.assertIs(AttackType.HEAVY, AttackType.normalize(" Heavy "))
        self.assertIsNone(AttackType.normalize("kick"))

    def test_rarity_tables_cover_every_tier(self) -> None:
        self.assertEqual(set(Rarity), set(RARITY_SPAWN_WEIGHTS))
        self.assertEqual(5.0, Rarity.LEGENDARY.experience_multiplier)
        self.assertIs(Rarity.COMMON, Rarity.normalize(None))


if __name__ == "__main__":
    unittest.main()
