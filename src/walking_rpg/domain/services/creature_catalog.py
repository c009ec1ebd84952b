from __future__ import annotations

from collections.abc import Mapping, Sequence

from walking_rpg.domain.models.creature import CreatureTemplate
from walking_rpg.domain.models.rarity import Rarity


CREATURE_TEMPLATES: Sequence[CreatureTemplate] = (
    CreatureTemplate(
        id="forest_sprite",
        name="Forest Sprite",
        type="Nature",
        max_hp=50,
        attack=15,
        defense=5,
        speed=20,
        rarity=Rarity.COMMON,
        description="A small nature spirit found in wooded areas",
        encounter_rate=0.6,
    ),
    CreatureTemplate(
        id="urban_phantom",
        name="Urban Phantom",
        type="Shadow",
        max_hp=60,
        attack=18,
        defense=8,
        speed=25,
        rarity=Rarity.COMMON,
        description="A mysterious entity that appears in city areas",
        encounter_rate=0.5,
    ),
    CreatureTemplate(
        id="coastal_spirit",
        name="Coastal Spirit",
        type="Water",
        max_hp=70,
        attack=20,
        defense=10,
        speed=15,
        rarity=Rarity.UNCOMMON,
        description="A spirit drawn to bodies of water",
        encounter_rate=0.3,
    ),
    CreatureTemplate(
        id="mountain_guardian",
        name="Mountain Guardian",
        type="Earth",
        max_hp=100,
        attack=25,
        defense=20,
        speed=10,
        rarity=Rarity.RARE,
        description="A powerful guardian of elevated terrain",
        encounter_rate=0.15,
    ),
    CreatureTemplate(
        id="wind_dancer",
        name="Wind Dancer",
        type="Air",
        max_hp=55,
        attack=22,
        defense=6,
        speed=35,
        rarity=Rarity.UNCOMMON,
        description="An agile creature that moves with the wind",
        encounter_rate=0.35,
    ),
)

CREATURE_TEMPLATES_BY_ID: Mapping[str, CreatureTemplate] = {template.id: template for template in CREATURE_TEMPLATES}


def get_creature_template(template_id: str) -> CreatureTemplate | None:
    return CREATURE_TEMPLATES_BY_ID.get(str(template_id or "").strip().lower())
