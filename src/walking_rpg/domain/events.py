from dataclasses import dataclass


@dataclass
class EncounterGenerated:
    encounter_timestamp: int
    creature_id: str
    creature_name: str
    creature_level: int
    forced: bool = False


@dataclass
class CreatureDefeated:
    player_id: str
    encounter_timestamp: int
    creature_id: str
    experience_gained: int


@dataclass
class CreatureCaught:
    player_id: str
    encounter_timestamp: int
    creature_id: str
    experience_gained: int


@dataclass
class EncounterFled:
    player_id: str
    encounter_timestamp: int
    creature_id: str
    automatic: bool = False


@dataclass
class PlayerDefeated:
    player_id: str
    encounter_timestamp: int
    creature_id: str


@dataclass
class LevelUpAppliedEvent:
    player_id: str
    from_level: int
    to_level: int
    hp_gain: int


@dataclass
class ItemDropped:
    player_id: str
    item_id: str
    rarity: str
    inventory_index: int
