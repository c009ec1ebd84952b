from __future__ import annotations

from collections.abc import Mapping, Sequence

from walking_rpg.domain.models.item import Item, ItemKind
from walking_rpg.domain.models.rarity import Rarity


# One item per rarity tier for every kind.
WEAPON_ITEMS: Sequence[Item] = (
    Item("weapon_wooden_sword", "Wooden Sword", ItemKind.WEAPON, Rarity.COMMON, 1,
         "A basic wooden training sword. Simple but reliable.", attack=5, drop_chance=0.3),
    Item("weapon_iron_blade", "Iron Blade", ItemKind.WEAPON, Rarity.UNCOMMON, 5,
         "A well-crafted iron sword with a sharp edge.", attack=12, drop_chance=0.15),
    Item("weapon_steel_rapier", "Steel Rapier", ItemKind.WEAPON, Rarity.RARE, 8,
         "An elegant steel rapier favored by skilled duelists.", attack=18, drop_chance=0.08),
    Item("weapon_flamebrand", "Flamebrand", ItemKind.WEAPON, Rarity.EPIC, 12,
         "A magical sword wreathed in eternal flames. Burns enemies with each strike.", attack=28, drop_chance=0.05),
    Item("weapon_dragon_fang", "Dragon Fang", ItemKind.WEAPON, Rarity.LEGENDARY, 15,
         "A legendary blade forged from a dragon's fang. Extremely rare and powerful.", attack=35, drop_chance=0.02),
)

OFFHAND_ITEMS: Sequence[Item] = (
    Item("offhand_wooden_shield", "Wooden Shield", ItemKind.OFFHAND, Rarity.COMMON, 1,
         "A simple wooden shield that provides basic protection.", defense=5, drop_chance=0.3),
    Item("offhand_steel_buckler", "Steel Buckler", ItemKind.OFFHAND, Rarity.UNCOMMON, 5,
         "A sturdy steel shield that offers excellent defense.", defense=12, drop_chance=0.15),
    Item("offhand_tower_shield", "Tower Shield", ItemKind.OFFHAND, Rarity.RARE, 8,
         "A massive tower shield that provides formidable defense.", defense=18, drop_chance=0.08),
    Item("offhand_guardian_aegis", "Guardian Aegis", ItemKind.OFFHAND, Rarity.EPIC, 12,
         "An ancient shield blessed by the guardians. Provides exceptional protection.", defense=25, hp=20, drop_chance=0.05),
    Item("offhand_shield_of_eternity", "Shield of Eternity", ItemKind.OFFHAND, Rarity.LEGENDARY, 15,
         "A legendary shield said to have protected the gods themselves. Grants immense power.",
         defense=35, hp=30, max_hp=30, drop_chance=0.02),
)

HEAD_ITEMS: Sequence[Item] = (
    Item("head_leather_cap", "Leather Cap", ItemKind.HEAD, Rarity.COMMON, 1,
         "A simple leather cap that offers minimal protection.", defense=3, drop_chance=0.3),
    Item("head_iron_helmet", "Iron Helmet", ItemKind.HEAD, Rarity.UNCOMMON, 5,
         "A sturdy iron helmet that protects your head in battle.", defense=8, drop_chance=0.15),
    Item("head_crown_of_wisdom", "Crown of Wisdom", ItemKind.HEAD, Rarity.RARE, 10,
         "A mystical crown that enhances your combat abilities.", attack=5, defense=15, drop_chance=0.08),
    Item("head_helmet_of_valor", "Helmet of Valor", ItemKind.HEAD, Rarity.EPIC, 12,
         "An epic helmet worn by legendary warriors. Inspires courage and strength.",
         attack=8, defense=20, hp=15, drop_chance=0.05),
    Item("head_crown_of_kings", "Crown of Kings", ItemKind.HEAD, Rarity.LEGENDARY, 15,
         "The legendary crown of ancient rulers. Bestows incredible power upon its wearer.",
         attack=12, defense=25, max_hp=25, drop_chance=0.02),
)

CHEST_ITEMS: Sequence[Item] = (
    Item("chest_cloth_robe", "Cloth Robe", ItemKind.CHEST, Rarity.COMMON, 1,
         "A basic cloth robe that provides minimal protection.", defense=4, drop_chance=0.3),
    Item("chest_chainmail", "Chainmail", ItemKind.CHEST, Rarity.UNCOMMON, 5,
         "A flexible chainmail armor that offers good protection.", defense=10, drop_chance=0.15),
    Item("chest_plate_armor", "Plate Armor", ItemKind.CHEST, Rarity.RARE, 10,
         "Heavy plate armor that provides excellent defense at the cost of mobility.",
         defense=20, max_hp=15, drop_chance=0.08),
    Item("chest_dragon_scale_mail", "Dragon Scale Mail", ItemKind.CHEST, Rarity.EPIC, 12,
         "Armor crafted from the scales of a dragon. Provides exceptional protection.",
         attack=5, defense=28, max_hp=25, drop_chance=0.05),
    Item("chest_armor_of_the_titans", "Armor of the Titans", ItemKind.CHEST, Rarity.LEGENDARY, 15,
         "Legendary armor forged by the titans themselves. Grants godlike protection.",
         attack=10, defense=40, max_hp=40, drop_chance=0.02),
)

LEGS_ITEMS: Sequence[Item] = (
    Item("legs_cloth_pants", "Cloth Pants", ItemKind.LEGS, Rarity.COMMON, 1,
         "Simple cloth pants that offer minimal protection.", defense=3, drop_chance=0.3),
    Item("legs_leather_leggings", "Leather Leggings", ItemKind.LEGS, Rarity.UNCOMMON, 5,
         "Durable leather leggings that provide decent protection.", defense=8, drop_chance=0.15),
    Item("legs_plated_greaves", "Plated Greaves", ItemKind.LEGS, Rarity.RARE, 10,
         "Heavy plated leg armor that offers excellent protection.", defense=15, drop_chance=0.08),
    Item("legs_dragonhide_leggings", "Dragonhide Leggings", ItemKind.LEGS, Rarity.EPIC, 12,
         "Leggings made from the hide of a dragon. Extremely durable and protective.",
         defense=22, max_hp=20, drop_chance=0.05),
    Item("legs_greaves_of_immortality", "Greaves of Immortality", ItemKind.LEGS, Rarity.LEGENDARY, 15,
         "Legendary greaves that grant near-immortal protection to the wearer.",
         defense=32, max_hp=30, drop_chance=0.02),
)

BOOTS_ITEMS: Sequence[Item] = (
    Item("boots_leather_boots", "Leather Boots", ItemKind.BOOTS, Rarity.COMMON, 1,
         "Basic leather boots that provide minimal protection.", defense=2, drop_chance=0.3),
    Item("boots_iron_greaves", "Iron Greaves", ItemKind.BOOTS, Rarity.UNCOMMON, 5,
         "Sturdy iron boots that offer good protection for your feet.", defense=7, drop_chance=0.15),
    Item("boots_boots_of_swiftness", "Boots of Swiftness", ItemKind.BOOTS, Rarity.RARE, 8,
         "Enchanted boots that enhance your speed and agility.", attack=3, defense=10, drop_chance=0.08),
    Item("boots_windwalkers", "Windwalkers", ItemKind.BOOTS, Rarity.EPIC, 12,
         "Epic boots that allow you to move like the wind itself.", attack=6, defense=15, drop_chance=0.05),
    Item("boots_boots_of_the_gods", "Boots of the Gods", ItemKind.BOOTS, Rarity.LEGENDARY, 15,
         "Legendary boots blessed by the gods. Grants incredible speed and power.",
         attack=10, defense=20, max_hp=20, drop_chance=0.02),
)

GLOVES_ITEMS: Sequence[Item] = (
    Item("gloves_cloth_gloves", "Cloth Gloves", ItemKind.GLOVES, Rarity.COMMON, 1,
         "Simple cloth gloves that offer minimal protection.", defense=2, drop_chance=0.3),
    Item("gloves_leather_gauntlets", "Leather Gauntlets", ItemKind.GLOVES, Rarity.UNCOMMON, 5,
         "Durable leather gauntlets that provide decent hand protection.", attack=2, defense=6, drop_chance=0.15),
    Item("gloves_iron_fists", "Iron Fists", ItemKind.GLOVES, Rarity.RARE, 8,
         "Heavy iron gauntlets that pack a powerful punch.", attack=5, defense=8, drop_chance=0.08),
    Item("gloves_power_gauntlets", "Power Gauntlets", ItemKind.GLOVES, Rarity.EPIC, 12,
         "Magical gauntlets that enhance your striking power.", attack=8, defense=10, drop_chance=0.05),
    Item("gloves_gauntlets_of_destruction", "Gauntlets of Destruction", ItemKind.GLOVES, Rarity.LEGENDARY, 15,
         "Legendary gauntlets that can shatter mountains with a single strike.",
         attack=15, defense=15, hp=15, drop_chance=0.02),
)

ACCESSORY_ITEMS: Sequence[Item] = (
    Item("accessory_copper_ring", "Copper Ring", ItemKind.ACCESSORY, Rarity.COMMON, 1,
         "A simple copper ring that provides a small stat boost.", attack=2, defense=2, drop_chance=0.3),
    Item("accessory_silver_amulet", "Silver Amulet", ItemKind.ACCESSORY, Rarity.UNCOMMON, 5,
         "A silver amulet that enhances your combat abilities.", attack=5, defense=5, hp=10, drop_chance=0.15),
    Item("accessory_golden_medallion", "Golden Medallion", ItemKind.ACCESSORY, Rarity.RARE, 8,
         "A rare golden medallion that provides substantial stat boosts.",
         attack=8, defense=8, max_hp=15, drop_chance=0.08),
    Item("accessory_amulet_of_the_ancients", "Amulet of the Ancients", ItemKind.ACCESSORY, Rarity.EPIC, 12,
         "An epic amulet from an ancient civilization. Grants immense power.",
         attack=12, defense=12, hp=25, max_hp=25, drop_chance=0.05),
    Item("accessory_ring_of_power", "Ring of Power", ItemKind.ACCESSORY, Rarity.LEGENDARY, 15,
         "A legendary ring that significantly boosts all your stats.",
         attack=15, defense=15, max_hp=30, drop_chance=0.02),
)

ALL_ITEMS: Sequence[Item] = (
    *WEAPON_ITEMS,
    *OFFHAND_ITEMS,
    *HEAD_ITEMS,
    *CHEST_ITEMS,
    *LEGS_ITEMS,
    *BOOTS_ITEMS,
    *GLOVES_ITEMS,
    *ACCESSORY_ITEMS,
)

ITEMS_BY_ID: Mapping[str, Item] = {item.id: item for item in ALL_ITEMS}


def get_items_by_kind(kind: ItemKind | str) -> list[Item]:
    resolved = ItemKind.normalize(kind)
    return [item for item in ALL_ITEMS if item.kind is resolved]


def get_item_by_id(item_id: str) -> Item | None:
    return ITEMS_BY_ID.get(str(item_id or "").strip())


def get_items_by_rarity(rarity: Rarity | str) -> list[Item]:
    resolved = Rarity.normalize(rarity)
    return [item for item in ALL_ITEMS if item.rarity is resolved]
