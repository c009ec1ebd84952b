from __future__ import annotations

import logging
from typing import Callable, List

from walking_rpg.application.dtos import (
    ActionResult,
    AttackOptionView,
    CreatureView,
    EncounterStatusView,
    EncounterView,
    EquipmentSlotView,
    InventoryView,
    ItemView,
    PlayerStatsView,
)
from walking_rpg.application.services.balance_tables import (
    DEFAULT_DEBUG_LOCATION,
    SIMULATED_LOCATION_STEP_M,
    SIMULATED_MOVEMENT_M,
)
from walking_rpg.application.services.combat_service import (
    OUTCOME_DEFEAT,
    OUTCOME_VICTORY,
    CombatService,
)
from walking_rpg.application.services.encounter_service import EncounterService
from walking_rpg.application.services.equipment_service import EquipmentService, can_equip
from walking_rpg.application.services.event_bus import EventBus
from walking_rpg.application.services.progression_service import ProgressionService, RewardSummary
from walking_rpg.domain.events import CreatureCaught, EncounterFled, ItemDropped
from walking_rpg.domain.models.encounter import Encounter, EncounterStatus
from walking_rpg.domain.models.item import EquipmentSlot, Item
from walking_rpg.domain.models.location import DistanceUpdate, GeoPoint
from walking_rpg.domain.models.player import INVENTORY_SIZE, Player
from walking_rpg.domain.repositories import EncounterNotifier, LocationFeed, PlayerRepository


logger = logging.getLogger(__name__)


def _item_view(index: int, item: Item, player: Player | None = None) -> ItemView:
    return ItemView(
        index=index,
        id=item.id,
        name=item.name,
        kind=item.kind.value,
        rarity=item.rarity.value,
        level=int(item.level),
        stat_lines=item.stat_lines(),
        description=item.description,
        can_equip=True if player is None else can_equip(player, item),
    )


class GameService:
    """Session facade: owns the player, the encounter generator and the active encounter.

    Every intent returns an ``ActionResult`` (or a view DTO) and persists the
    player as one whole-object write after any state change.
    """

    def __init__(
        self,
        player_repo: PlayerRepository,
        encounter_service: EncounterService | None = None,
        combat_service: CombatService | None = None,
        equipment_service: EquipmentService | None = None,
        progression_service: ProgressionService | None = None,
        notifier: EncounterNotifier | None = None,
        location_feed: LocationFeed | None = None,
        event_bus: EventBus | None = None,
        atomic_state_persistor: Callable[..., None] | None = None,
    ) -> None:
        self.player_repo = player_repo
        self.event_bus = event_bus or EventBus()
        publish = self.event_bus.publish
        self.encounter_service = encounter_service or EncounterService(event_publisher=publish)
        self.progression_service = progression_service or ProgressionService(event_publisher=publish)
        self.combat_service = combat_service or CombatService(
            progression_service=self.progression_service,
            event_publisher=publish,
        )
        self.equipment_service = equipment_service or EquipmentService()
        self.notifier = notifier
        self.location_feed = location_feed
        self.atomic_state_persistor = atomic_state_persistor

        self.player: Player | None = None
        self.current_encounter: Encounter | None = None
        self.encounter_minimized = False
        self.distance_since_encounter_start = 0.0

    @property
    def pending_loot(self) -> List[Item]:
        """Loot that dropped while the inventory was full; it is saved with the player."""
        return list(self.player.pending_loot) if self.player is not None else []

    # Player lifecycle

    def load_or_create_player(self) -> Player:
        if self.player is not None:
            return self.player
        payload = self.player_repo.load()
        if payload is None:
            self.player = Player()
            logger.info("Created new player", extra={"player_id": self.player.id})
            self._persist()
        else:
            self.player = Player.from_dict(payload)
        return self.player

    def _require_player(self) -> Player:
        return self.load_or_create_player()

    def _persist(self) -> None:
        if self.player is None:
            return
        if self.atomic_state_persistor is not None:
            self.atomic_state_persistor(self.player)
        else:
            self.player_repo.save(self.player)

    def reset_progress_intent(self) -> ActionResult:
        self.player_repo.clear()
        self.player = None
        self.current_encounter = None
        self.encounter_minimized = False
        self.distance_since_encounter_start = 0.0
        self.encounter_service.reset()
        self.combat_service.close_session()
        self.load_or_create_player()
        return ActionResult(messages=["Progress cleared. A new adventurer sets out."])

    def get_player_stats_intent(self) -> PlayerStatsView:
        player = self._require_player()
        stats = player.get_stats()
        return PlayerStatsView(
            name=player.name,
            level=stats["level"],
            experience=stats["experience"],
            experience_for_next_level=stats["experience_for_next_level"],
            attack=stats["attack"],
            defense=stats["defense"],
            effective_attack=stats["effective_attack"],
            effective_defense=stats["effective_defense"],
            hp=stats["hp"],
            max_hp=stats["max_hp"],
            total_distance_m=stats["total_distance"],
            total_encounters=stats["total_encounters"],
            creatures_caught=stats["creatures_caught"],
            creatures_defeated=stats["creatures_defeated"],
            inventory_used=player.used_inventory_slots(),
            inventory_capacity=INVENTORY_SIZE,
        )

    # Walking

    def handle_distance_update_intent(self, update: DistanceUpdate | None) -> ActionResult:
        if update is None:
            return ActionResult(messages=[], accepted=False)
        player = self._require_player()
        messages: List[str] = []

        player.add_distance(update.incremental)
        messages.extend(self._track_auto_flee(player, float(update.incremental)))

        encounter = self.encounter_service.process_distance_update(update, player.level)
        if encounter is not None:
            messages.extend(self._start_encounter(player, encounter))

        self._persist()
        return ActionResult(messages=messages)

    def simulate_movement_intent(self, meters: float = SIMULATED_MOVEMENT_M) -> ActionResult:
        update = self._next_update(meters)
        result = self.handle_distance_update_intent(update)
        result.messages.insert(0, f"Walked {float(meters):.0f} m.")
        return result

    def simulate_location_update_intent(self) -> ActionResult:
        update = self._next_update(SIMULATED_LOCATION_STEP_M)
        result = self.handle_distance_update_intent(update)
        result.messages.insert(0, f"Location updated (+{update.incremental:.1f} m).")
        return result

    def _current_location(self) -> GeoPoint:
        if self.location_feed is not None:
            return self.location_feed.current_location()
        latitude, longitude = DEFAULT_DEBUG_LOCATION
        return GeoPoint(latitude=latitude, longitude=longitude)

    def _next_update(self, meters: float) -> DistanceUpdate:
        if self.location_feed is not None:
            return self.location_feed.advance(meters)
        player = self._require_player()
        return DistanceUpdate(
            incremental=float(meters),
            total=player.total_distance + float(meters),
            location=self._current_location(),
        )

    def _track_auto_flee(self, player: Player, incremental: float) -> List[str]:
        encounter = self.current_encounter
        if encounter is None or not encounter.is_active():
            return []
        self.distance_since_encounter_start += max(0.0, incremental)
        if self.distance_since_encounter_start <= float(self.encounter_service.config.auto_flee_distance):
            return []
        self._close_as_fled(player, encounter, automatic=True)
        return [f"You walked away and the {encounter.creature.name} lost interest."]

    # Encounters

    def force_encounter_intent(self) -> ActionResult:
        player = self._require_player()
        encounter = self.encounter_service.force_encounter(self._current_location(), player.level)
        messages = self._start_encounter(player, encounter)
        self._persist()
        return ActionResult(messages=messages)

    def _start_encounter(self, player: Player, encounter: Encounter) -> List[str]:
        messages: List[str] = []
        previous = self.current_encounter
        if previous is not None and previous.is_active():
            self._close_as_fled(player, previous, automatic=True)
            messages.append(f"The {previous.creature.name} slipped away.")
        self.current_encounter = encounter
        self.encounter_minimized = False
        self.distance_since_encounter_start = 0.0
        self._notify(encounter)
        creature = encounter.creature
        messages.append(f"A wild {creature.name} (Lv {creature.level}) appeared!")
        return messages

    def _notify(self, encounter: Encounter) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify_encounter(encounter)
        except Exception:
            logger.exception(
                "Encounter notification failed",
                extra={"creature_id": encounter.creature.id, "encounter_timestamp": encounter.timestamp},
            )

    def _active_encounter(self) -> Encounter | None:
        encounter = self.current_encounter
        if encounter is None or not encounter.is_active():
            return None
        return encounter

    def get_encounter_view_intent(self) -> EncounterView | None:
        encounter = self.current_encounter
        if encounter is None:
            return None
        creature = encounter.creature
        return EncounterView(
            timestamp=encounter.timestamp,
            status=encounter.status.value,
            minimized=self.encounter_minimized,
            creature=CreatureView(
                name=creature.name,
                type=creature.type,
                level=creature.level,
                rarity=creature.rarity.value,
                hp=int(creature.hp),
                max_hp=creature.max_hp,
                attack=creature.attack,
                defense=creature.defense,
                speed=creature.speed,
                description=creature.description,
                experience_reward=creature.experience_reward(),
            ),
            latitude=encounter.location.latitude,
            longitude=encounter.location.longitude,
            distance_since_start_m=self.distance_since_encounter_start,
        )

    def minimize_encounter_intent(self) -> ActionResult:
        if self._active_encounter() is None:
            return ActionResult(messages=["There is no encounter to minimize."], accepted=False)
        self.encounter_minimized = True
        return ActionResult(messages=["Encounter minimized. It will wait for you."])

    def resume_encounter_intent(self) -> ActionResult:
        encounter = self._active_encounter()
        if encounter is None:
            return ActionResult(messages=["There is no encounter to resume."], accepted=False)
        self.encounter_minimized = False
        return ActionResult(messages=[f"The {encounter.creature.name} is still here."])

    def catch_intent(self) -> ActionResult:
        player = self._require_player()
        encounter = self._active_encounter()
        if encounter is None:
            return ActionResult(messages=["There is nothing to catch."], accepted=False)
        creature = encounter.creature
        reward = self.progression_service.reward_catch(player, creature)
        encounter.catch()
        self.combat_service.mark_resolved(encounter, EncounterStatus.CAUGHT.value)
        self.event_bus.publish(
            CreatureCaught(
                player_id=player.id,
                encounter_timestamp=encounter.timestamp,
                creature_id=creature.id,
                experience_gained=reward.experience,
            )
        )
        self._persist()
        messages = [f"You caught the {creature.name}!", f"+{reward.experience} XP"]
        messages.extend(self._level_up_lines(reward))
        return ActionResult(messages=messages)

    def flee_intent(self) -> ActionResult:
        player = self._require_player()
        encounter = self._active_encounter()
        if encounter is None:
            return ActionResult(messages=["There is nothing to flee from."], accepted=False)
        self._close_as_fled(player, encounter, automatic=False)
        self._persist()
        return ActionResult(messages=[f"You fled from the {encounter.creature.name}."])

    def _close_as_fled(self, player: Player, encounter: Encounter, *, automatic: bool) -> None:
        if not encounter.flee():
            return
        self.progression_service.record_flee(player)
        self.combat_service.mark_resolved(encounter, EncounterStatus.FLED.value)
        if encounter is self.current_encounter:
            self.encounter_minimized = False
        self.event_bus.publish(
            EncounterFled(
                player_id=player.id,
                encounter_timestamp=encounter.timestamp,
                creature_id=encounter.creature.id,
                automatic=automatic,
            )
        )

    def encounter_status_intent(self) -> EncounterStatusView:
        return self.encounter_service.encounter_status()

    # Combat

    def open_combat_intent(self) -> ActionResult:
        player = self._require_player()
        encounter = self._active_encounter()
        if encounter is None:
            return ActionResult(messages=["There is nothing to fight."], accepted=False)
        self.combat_service.open_session(encounter)
        self.encounter_minimized = False
        creature = encounter.creature
        return ActionResult(
            messages=[
                f"You square up against the {creature.name}.",
                f"{creature.name}: {creature.hp}/{creature.max_hp} HP | You: {player.hp}/{player.max_hp} HP",
            ]
        )

    def attack_options_intent(self) -> List[AttackOptionView]:
        player = self._require_player()
        encounter = self.current_encounter
        if encounter is None:
            return []
        return self.combat_service.attack_options(player, encounter)

    def attack_intent(self, attack_type: str) -> ActionResult:
        player = self._require_player()
        encounter = self.current_encounter
        if encounter is None:
            return ActionResult(messages=["There is nothing to fight."], accepted=False)

        exchange = self.combat_service.attack(player, encounter, attack_type)
        if exchange.rejected:
            return ActionResult(messages=[self._rejection_line(exchange.rejected_reason)], accepted=False)

        messages = list(exchange.log)
        creature = encounter.creature
        if exchange.outcome == OUTCOME_VICTORY and exchange.victory is not None:
            messages.append(f"+{exchange.victory.reward.experience} XP")
            messages.extend(self._level_up_lines(exchange.victory.reward))
            if exchange.victory.loot is not None:
                messages.extend(self._receive_loot(player, exchange.victory.loot))
        elif exchange.outcome == OUTCOME_DEFEAT:
            messages.append("You have been fully healed.")
        else:
            messages.append(f"{creature.name}: {creature.hp}/{creature.max_hp} HP | You: {player.hp}/{player.max_hp} HP")

        self._persist()
        return ActionResult(messages=messages, game_over=exchange.outcome == OUTCOME_DEFEAT)

    @staticmethod
    def _rejection_line(reason: str | None) -> str:
        lookup = {
            "cooldown": "That attack is still on cooldown.",
            "encounter_closed": "This encounter is already over.",
            "combatant_defeated": "The fight is already decided.",
            "unknown_attack": "Unknown attack.",
        }
        return lookup.get(str(reason), "The attack was not possible.")

    @staticmethod
    def _level_up_lines(reward: RewardSummary) -> List[str]:
        if reward.levels_gained <= 0:
            return []
        return [f"Level up! You are now level {reward.to_level}."]

    # Loot and inventory

    def _receive_loot(self, player: Player, item: Item) -> List[str]:
        index = player.receive_item(item)
        if index < 0:
            logger.info("Loot held as pending; inventory full", extra={"item_id": item.id})
            return [f"Dropped: {item.name} ({item.rarity.value}). Your inventory is full; it is waiting for you."]
        self.event_bus.publish(
            ItemDropped(
                player_id=player.id,
                item_id=item.id,
                rarity=item.rarity.value,
                inventory_index=index,
            )
        )
        return [f"Dropped: {item.name} ({item.rarity.value})!"]

    def claim_pending_loot_intent(self) -> ActionResult:
        player = self._require_player()
        if not player.pending_loot:
            return ActionResult(messages=["No loot is waiting."], accepted=False)
        collected = player.claim_pending_loot()
        messages = [f"Collected {item.name}." for item in collected]
        if player.pending_loot:
            messages.append(f"{len(player.pending_loot)} item(s) still waiting; free some space.")
        self._persist()
        return ActionResult(messages=messages, accepted=not player.pending_loot)

    def inventory_view_intent(self) -> InventoryView:
        player = self._require_player()
        items = [
            _item_view(index, item, player)
            for index, item in enumerate(player.inventory)
            if item is not None
        ]
        return InventoryView(
            items=items,
            used=player.used_inventory_slots(),
            capacity=INVENTORY_SIZE,
            pending_loot=[_item_view(-1, item, player) for item in player.pending_loot],
        )

    def equipment_view_intent(self) -> List[EquipmentSlotView]:
        player = self._require_player()
        return [
            EquipmentSlotView(slot=slot.value, item=_item_view(-1, item) if item is not None else None)
            for slot, item in player.equipment.items()
        ]

    def equip_item_intent(self, index: int, slot: str | None = None) -> ActionResult:
        player = self._require_player()
        change = self.equipment_service.equip_from_inventory(player, index, slot)
        if change.ok:
            self._persist()
        return ActionResult(messages=[change.message], accepted=change.ok)

    def unequip_slot_intent(self, slot: str) -> ActionResult:
        player = self._require_player()
        change = self.equipment_service.unequip(player, slot)
        if change.ok:
            self._persist()
        return ActionResult(messages=[change.message], accepted=change.ok)

    def drop_inventory_item_intent(self, index: int) -> ActionResult:
        player = self._require_player()
        change = self.equipment_service.drop_from_inventory(player, index)
        if change.ok:
            self._persist()
        return ActionResult(messages=[change.message], accepted=change.ok)

    # Debug

    def force_level_up_intent(self) -> ActionResult:
        player = self._require_player()
        reward = self.progression_service.force_level_up(player)
        self._persist()
        return ActionResult(messages=[f"Forced level up to {reward.to_level}."])

    def reset_level_intent(self) -> ActionResult:
        player = self._require_player()
        self.progression_service.reset_level(player)
        self._persist()
        return ActionResult(messages=["Level reset to 1."])

    def full_heal_intent(self) -> ActionResult:
        player = self._require_player()
        player.full_heal()
        self._persist()
        return ActionResult(messages=[f"HP restored to {player.max_hp}."])

    @staticmethod
    def equipment_slots() -> List[str]:
        return [slot.value for slot in EquipmentSlot]
