from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from walking_rpg.application.dtos import AttackOptionView
from walking_rpg.application.services.loot_service import LootService
from walking_rpg.application.services.progression_service import ProgressionService, RewardSummary
from walking_rpg.domain.events import CreatureDefeated, PlayerDefeated
from walking_rpg.domain.models.attack import ATTACK_PROFILES, AttackType
from walking_rpg.domain.models.encounter import Encounter, now_ms
from walking_rpg.domain.models.item import Item
from walking_rpg.domain.models.player import Player
from walking_rpg.domain.models.progression import calculate_damage


logger = logging.getLogger(__name__)

OUTCOME_REJECTED = "rejected"
OUTCOME_ONGOING = "ongoing"
OUTCOME_VICTORY = "victory"
OUTCOME_DEFEAT = "defeat"


class AttackCooldowns:
    """Single store of last-use times per attack type.

    ``try_start`` checks and records in one call, so a second request for
    the same attack always sees the first one's write.
    """

    def __init__(self) -> None:
        self._last_used_ms: Dict[AttackType, int] = {}

    def remaining_ms(self, attack_type: AttackType, at_ms: int) -> int:
        last_used = self._last_used_ms.get(attack_type)
        if last_used is None:
            return 0
        cooldown = ATTACK_PROFILES[attack_type].cooldown_ms
        return max(0, int(last_used) + int(cooldown) - int(at_ms))

    def is_ready(self, attack_type: AttackType, at_ms: int) -> bool:
        return self.remaining_ms(attack_type, at_ms) == 0

    def try_start(self, attack_type: AttackType, at_ms: int) -> bool:
        if not self.is_ready(attack_type, at_ms):
            return False
        self._last_used_ms[attack_type] = int(at_ms)
        return True

    def clear(self) -> None:
        self._last_used_ms.clear()


@dataclass
class CombatSession:
    encounter_timestamp: int
    cooldowns: AttackCooldowns = field(default_factory=AttackCooldowns)
    resolved: bool = False
    outcome: Optional[str] = None
    exchanges: int = 0


@dataclass
class VictoryOutcome:
    reward: RewardSummary
    loot: Optional[Item] = None


@dataclass
class CombatExchange:
    attack_type: AttackType
    outcome: str = OUTCOME_ONGOING
    player_damage: int = 0
    creature_damage: int = 0
    rejected_reason: Optional[str] = None
    victory: Optional[VictoryOutcome] = None
    log: List[str] = field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return self.outcome == OUTCOME_REJECTED


class CombatService:
    def __init__(
        self,
        progression_service: ProgressionService | None = None,
        loot_service: LootService | None = None,
        *,
        clock: Callable[[], int] | None = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self.progression_service = progression_service or ProgressionService(event_publisher=event_publisher)
        self.loot_service = loot_service or LootService()
        self.clock = clock or now_ms
        self.event_publisher = event_publisher
        self._session: CombatSession | None = None

    @property
    def session(self) -> CombatSession | None:
        return self._session

    def open_session(self, encounter: Encounter) -> CombatSession:
        """Reuse the session for the same encounter; a new encounter starts with fresh cooldowns."""
        if self._session is None or self._session.encounter_timestamp != encounter.timestamp:
            self._session = CombatSession(encounter_timestamp=encounter.timestamp)
        return self._session

    def close_session(self) -> None:
        self._session = None

    def attack_options(self, player: Player, encounter: Encounter) -> List[AttackOptionView]:
        session = self.open_session(encounter)
        at_ms = int(self.clock())
        combat_open = encounter.is_active() and not player.is_defeated() and not encounter.creature.is_defeated()
        options: List[AttackOptionView] = []
        for attack_type in AttackType:
            profile = ATTACK_PROFILES[attack_type]
            remaining = session.cooldowns.remaining_ms(attack_type, at_ms)
            options.append(
                AttackOptionView(
                    attack_type=attack_type.value,
                    name=profile.name,
                    icon=profile.icon,
                    multiplier=profile.multiplier,
                    cooldown_ms=profile.cooldown_ms,
                    remaining_ms=remaining,
                    expected_damage=self.expected_damage(player, encounter, attack_type),
                    available=combat_open and remaining == 0,
                )
            )
        return options

    @staticmethod
    def expected_damage(player: Player, encounter: Encounter, attack_type: AttackType) -> int:
        profile = ATTACK_PROFILES[attack_type]
        return calculate_damage(player.effective_attack(), encounter.creature.defense, profile.multiplier)

    def attack(self, player: Player, encounter: Encounter, attack_type: AttackType | str) -> CombatExchange:
        resolved_type = AttackType.normalize(attack_type)
        if resolved_type is None:
            return CombatExchange(attack_type=AttackType.BASIC, outcome=OUTCOME_REJECTED, rejected_reason="unknown_attack")

        session = self.open_session(encounter)
        creature = encounter.creature
        if not encounter.is_active() or session.resolved:
            return CombatExchange(attack_type=resolved_type, outcome=OUTCOME_REJECTED, rejected_reason="encounter_closed")
        if creature.is_defeated() or player.is_defeated():
            return CombatExchange(attack_type=resolved_type, outcome=OUTCOME_REJECTED, rejected_reason="combatant_defeated")
        if not session.cooldowns.try_start(resolved_type, int(self.clock())):
            return CombatExchange(attack_type=resolved_type, outcome=OUTCOME_REJECTED, rejected_reason="cooldown")

        profile = ATTACK_PROFILES[resolved_type]
        exchange = CombatExchange(attack_type=resolved_type)
        session.exchanges += 1

        exchange.player_damage = calculate_damage(player.effective_attack(), creature.defense, profile.multiplier)
        creature.take_damage(exchange.player_damage)
        exchange.log.append(f"You used {profile.name} for {exchange.player_damage} damage.")

        if not creature.is_defeated():
            exchange.creature_damage = creature.calculate_damage(player.effective_defense())
            player.take_damage(exchange.creature_damage)
            exchange.log.append(f"{creature.name} strikes back for {exchange.creature_damage} damage.")

        if creature.is_defeated():
            exchange.outcome = OUTCOME_VICTORY
            exchange.victory = self.resolve_victory(player, encounter)
            exchange.log.append(f"{creature.name} was defeated!")
        elif player.is_defeated():
            exchange.outcome = OUTCOME_DEFEAT
            self.resolve_defeat(player, encounter)
            exchange.log.append("You were defeated and retreat to recover.")
        return exchange

    def resolve_victory(self, player: Player, encounter: Encounter) -> VictoryOutcome | None:
        """Grant victory rewards once per encounter; repeated calls return None."""
        session = self.open_session(encounter)
        if session.resolved or not encounter.creature.is_defeated():
            return None
        session.resolved = True
        session.outcome = OUTCOME_VICTORY

        creature = encounter.creature
        reward = self.progression_service.reward_defeat(player, creature)
        loot = self.loot_service.roll_drop()
        encounter.defeat()
        logger.info(
            "Creature defeated",
            extra={"creature_id": creature.id, "experience": reward.experience, "loot": loot.id if loot else None},
        )
        self._publish(
            CreatureDefeated(
                player_id=player.id,
                encounter_timestamp=encounter.timestamp,
                creature_id=creature.id,
                experience_gained=reward.experience,
            )
        )
        return VictoryOutcome(reward=reward, loot=loot)

    def mark_resolved(self, encounter: Encounter, outcome: str) -> None:
        session = self.open_session(encounter)
        session.resolved = True
        session.outcome = outcome

    def resolve_defeat(self, player: Player, encounter: Encounter) -> bool:
        session = self.open_session(encounter)
        if session.resolved or not player.is_defeated():
            return False
        session.resolved = True
        session.outcome = OUTCOME_DEFEAT

        self.progression_service.record_knockout(player)
        encounter.flee()
        logger.info("Player defeated", extra={"creature_id": encounter.creature.id})
        self._publish(
            PlayerDefeated(
                player_id=player.id,
                encounter_timestamp=encounter.timestamp,
                creature_id=encounter.creature.id,
            )
        )
        return True

    def _publish(self, event: object) -> None:
        if self.event_publisher is None:
            return
        self.event_publisher(event)
