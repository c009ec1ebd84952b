from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ActionResult:
    messages: List[str] = field(default_factory=list)
    accepted: bool = True
    game_over: bool = False


@dataclass
class EncounterStatusView:
    distance_since_last_encounter: float
    min_encounter_distance: float
    probability: float
    distance_probability: float
    time_since_last_encounter_ms: Optional[int]
    time_blocked: bool = False
    seconds_until_ready: int = 0


@dataclass
class PlayerStatsView:
    name: str
    level: int
    experience: int
    experience_for_next_level: int
    attack: int
    defense: int
    effective_attack: int
    effective_defense: int
    hp: int
    max_hp: int
    total_distance_m: float
    total_encounters: int
    creatures_caught: int
    creatures_defeated: int
    inventory_used: int
    inventory_capacity: int


@dataclass
class CreatureView:
    name: str
    type: str
    level: int
    rarity: str
    hp: int
    max_hp: int
    attack: int
    defense: int
    speed: int
    description: str
    experience_reward: int


@dataclass
class EncounterView:
    timestamp: int
    status: str
    minimized: bool
    creature: CreatureView
    latitude: float
    longitude: float
    distance_since_start_m: float = 0.0


@dataclass
class AttackOptionView:
    attack_type: str
    name: str
    icon: str
    multiplier: float
    cooldown_ms: int
    remaining_ms: int
    expected_damage: int
    available: bool


@dataclass
class ItemView:
    index: int
    id: str
    name: str
    kind: str
    rarity: str
    level: int
    stat_lines: List[str] = field(default_factory=list)
    description: str = ""
    can_equip: bool = True


@dataclass
class EquipmentSlotView:
    slot: str
    item: Optional[ItemView] = None


@dataclass
class InventoryView:
    items: List[ItemView] = field(default_factory=list)
    used: int = 0
    capacity: int = 0
    pending_loot: List[ItemView] = field(default_factory=list)
