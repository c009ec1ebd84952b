import random
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from walking_rpg.application.services.combat_service import CombatService
from walking_rpg.application.services.encounter_service import EncounterService
from walking_rpg.application.services.event_bus import EventBus
from walking_rpg.application.services.game_service import GameService
from walking_rpg.application.services.loot_service import LootService
from walking_rpg.application.services.progression_service import ProgressionService
from walking_rpg.domain.events import CreatureCaught, EncounterFled, ItemDropped
from walking_rpg.domain.models.creature import CreatureTemplate
from walking_rpg.domain.models.item import Item, ItemKind
from walking_rpg.domain.models.location import DistanceUpdate, GeoPoint
from walking_rpg.domain.models.player import INVENTORY_SIZE
from walking_rpg.domain.repositories import PLAYER_STORAGE_KEY, EncounterNotifier
from walking_rpg.infrastructure.inmemory.inmemory_player_repo import InMemoryPlayerRepository


SLIME = CreatureTemplate(id="slime", name="Slime", type="Goo", max_hp=5, attack=1, defense=0, speed=1)
BRUTE = CreatureTemplate(id="brute", name="Brute", type="Stone", max_hp=1000, attack=500, defense=0, speed=1)
TROPHY = Item("weapon_trophy", "Trophy Blade", ItemKind.WEAPON, attack=4)


class _Clock:
    def __init__(self, now_ms: int = 5_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


class _RecordingNotifier(EncounterNotifier):
    def __init__(self) -> None:
        self.encounters = []

    def notify_encounter(self, encounter) -> None:
        self.encounters.append(encounter)


class _BrokenNotifier(EncounterNotifier):
    def notify_encounter(self, encounter) -> None:
        raise RuntimeError("push gateway down")


def _build(templates=(SLIME,), *, notifier=None, drop_chance: float = 0.0):
    clock = _Clock()
    bus = EventBus()
    events: list[object] = []
    for event_type in (CreatureCaught, EncounterFled, ItemDropped):
        bus.subscribe(event_type, events.append)
    progression = ProgressionService(event_publisher=bus.publish)
    repo = InMemoryPlayerRepository()
    game = GameService(
        player_repo=repo,
        encounter_service=EncounterService(templates=list(templates), rng=random.Random(7), clock=clock, event_publisher=bus.publish),
        combat_service=CombatService(
            progression_service=progression,
            loot_service=LootService(catalog=[TROPHY], drop_chance=drop_chance, rng=random.Random(3)),
            clock=clock,
            event_publisher=bus.publish,
        ),
        progression_service=progression,
        notifier=notifier,
        event_bus=bus,
    )
    return game, repo, clock, events


class GameServiceTests(unittest.TestCase):
    def test_first_load_creates_and_persists_player(self) -> None:
        game, repo, _, _ = _build()

        player = game.load_or_create_player()

        self.assertEqual("Adventurer", player.name)
        self.assertEqual(1, repo.load()["level"])
        self.assertIs(player, game.load_or_create_player())

    def test_existing_save_is_restored(self) -> None:
        game, repo, _, _ = _build()
        game.load_or_create_player().add_distance(500)
        game.full_heal_intent()

        restored, _, _, _ = _build()
        restored.player_repo = repo
        self.assertEqual(500.0, restored.load_or_create_player().total_distance)

    def test_force_encounter_notifies_and_reports(self) -> None:
        notifier = _RecordingNotifier()
        game, _, _, _ = _build(notifier=notifier)

        result = game.force_encounter_intent()

        self.assertTrue(result.accepted)
        self.assertIn("A wild Slime", result.messages[-1])
        self.assertEqual(1, len(notifier.encounters))
        view = game.get_encounter_view_intent()
        self.assertEqual("active", view.status)
        self.assertEqual("Slime", view.creature.name)

    def test_notifier_failure_does_not_block_encounter(self) -> None:
        game, _, _, _ = _build(notifier=_BrokenNotifier())

        with self.assertLogs("walking_rpg.application.services.game_service", level="ERROR"):
            result = game.force_encounter_intent()

        self.assertIn("A wild Slime", result.messages[-1])
        self.assertTrue(game.current_encounter.is_active())

    def test_walking_accrues_distance_and_persists(self) -> None:
        game, repo, _, _ = _build()

        result = game.handle_distance_update_intent(
            DistanceUpdate(incremental=20.0, total=20.0, location=GeoPoint(latitude=1.0, longitude=1.0))
        )

        self.assertTrue(result.accepted)
        self.assertEqual(20.0, repo.load()["totalDistance"])
        self.assertFalse(game.handle_distance_update_intent(None).accepted)

    def test_walking_far_from_open_encounter_auto_flees(self) -> None:
        game, repo, _, events = _build()
        game.force_encounter_intent()

        stay = game.simulate_movement_intent(100)
        self.assertTrue(game.current_encounter.is_active())
        self.assertEqual("Walked 100 m.", stay.messages[0])

        result = game.simulate_movement_intent(1)

        self.assertFalse(game.current_encounter.is_active())
        self.assertEqual("fled", game.current_encounter.status.value)
        self.assertTrue(any("lost interest" in line for line in result.messages))
        self.assertEqual(1, repo.load()["totalEncounters"])
        self.assertTrue(events[-1].automatic)

    def test_new_encounter_replaces_open_one(self) -> None:
        game, _, _, events = _build()
        game.force_encounter_intent()
        first = game.current_encounter

        result = game.force_encounter_intent()

        self.assertEqual("fled", first.status.value)
        self.assertIsNot(first, game.current_encounter)
        self.assertIn("slipped away", result.messages[0])
        self.assertEqual(1, game.player.total_encounters)
        self.assertIsInstance(events[-1], EncounterFled)

    def test_catch_grants_experience_and_closes_encounter(self) -> None:
        game, repo, _, events = _build()
        game.force_encounter_intent()
        reward = game.current_encounter.creature.experience_reward()

        result = game.catch_intent()

        self.assertTrue(result.accepted)
        self.assertEqual("caught", game.current_encounter.status.value)
        saved = repo.load()
        self.assertEqual(1, saved["creaturesCaught"])
        self.assertEqual(reward, saved["experience"])
        self.assertIsInstance(events[-1], CreatureCaught)
        self.assertFalse(game.attack_intent("basic").accepted)
        self.assertFalse(game.catch_intent().accepted)

    def test_flee_without_encounter_is_rejected(self) -> None:
        game, _, _, _ = _build()
        self.assertFalse(game.flee_intent().accepted)
        self.assertFalse(game.minimize_encounter_intent().accepted)

    def test_minimize_and_resume(self) -> None:
        game, _, _, _ = _build()
        game.force_encounter_intent()

        self.assertTrue(game.minimize_encounter_intent().accepted)
        self.assertTrue(game.get_encounter_view_intent().minimized)
        self.assertTrue(game.resume_encounter_intent().accepted)
        self.assertFalse(game.get_encounter_view_intent().minimized)

    def test_victory_persists_rewards_and_loot(self) -> None:
        game, repo, _, events = _build(drop_chance=1.0)
        game.force_encounter_intent()
        game.open_combat_intent()

        result = game.attack_intent("basic")

        self.assertTrue(result.accepted)
        self.assertFalse(result.game_over)
        self.assertTrue(any("Trophy Blade" in line for line in result.messages))
        saved = repo.load()
        self.assertEqual(1, saved["creaturesDefeated"])
        self.assertEqual("weapon_trophy", saved["inventory"][0]["id"])
        self.assertIsInstance(events[-1], ItemDropped)

    def test_loot_waits_when_inventory_is_full(self) -> None:
        game, _, _, _ = _build(drop_chance=1.0)
        player = game.load_or_create_player()
        for _ in range(INVENTORY_SIZE):
            player.add_item_to_inventory(TROPHY.copy())
        game.force_encounter_intent()

        result = game.attack_intent("basic")

        self.assertTrue(any("inventory is full" in line for line in result.messages))
        self.assertEqual(1, len(game.inventory_view_intent().pending_loot))
        self.assertFalse(game.claim_pending_loot_intent().accepted)

        game.drop_inventory_item_intent(0)
        claimed = game.claim_pending_loot_intent()
        self.assertTrue(claimed.accepted)
        self.assertEqual([], game.pending_loot)
        self.assertEqual(INVENTORY_SIZE, game.inventory_view_intent().used)

    def test_waiting_loot_is_still_there_after_restart(self) -> None:
        game, repo, _, _ = _build(drop_chance=1.0)
        player = game.load_or_create_player()
        for _ in range(INVENTORY_SIZE):
            player.add_item_to_inventory(TROPHY.copy())
        game.force_encounter_intent()
        game.attack_intent("basic")
        self.assertEqual(["weapon_trophy"], [item.id for item in game.pending_loot])

        restarted = GameService(player_repo=InMemoryPlayerRepository(repo._storage))
        restarted.load_or_create_player()

        self.assertEqual(["weapon_trophy"], [item.id for item in restarted.pending_loot])
        restarted.drop_inventory_item_intent(0)
        self.assertTrue(restarted.claim_pending_loot_intent().accepted)
        self.assertEqual([], InMemoryPlayerRepository(repo._storage).load()["pendingLoot"])

    def test_corrupted_save_loads_with_defaults(self) -> None:
        repo = InMemoryPlayerRepository({PLAYER_STORAGE_KEY: '{"level": "abc", "attack": "strong", "inventory": []}'})
        game = GameService(player_repo=repo)

        player = game.load_or_create_player()

        self.assertEqual(1, player.level)
        self.assertEqual(20, player.attack)
        self.assertEqual(INVENTORY_SIZE, len(player.inventory))

    def test_defeat_heals_player_and_ends_encounter(self) -> None:
        game, repo, _, _ = _build(templates=(BRUTE,))
        game.force_encounter_intent()

        result = game.attack_intent("basic")

        self.assertTrue(result.game_over)
        self.assertEqual(100, game.player.hp)
        self.assertEqual("fled", game.current_encounter.status.value)
        self.assertEqual(1, repo.load()["totalEncounters"])

    def test_attack_on_cooldown_is_rejected_with_message(self) -> None:
        game, _, clock, _ = _build(templates=(BRUTE,))
        game.force_encounter_intent()
        game.player.max_hp = 10_000
        game.player.full_heal()

        game.attack_intent("basic")
        result = game.attack_intent("basic")

        self.assertFalse(result.accepted)
        self.assertIn("cooldown", result.messages[0])
        clock.now_ms += 1000
        self.assertTrue(game.attack_intent("basic").accepted)

    def test_attack_options_intent(self) -> None:
        game, _, _, _ = _build()
        self.assertEqual([], game.attack_options_intent())
        game.force_encounter_intent()
        options = game.attack_options_intent()
        self.assertEqual(["basic", "strong", "heavy"], [option.attack_type for option in options])

    def test_equip_and_unequip_intents(self) -> None:
        game, repo, _, _ = _build()
        player = game.load_or_create_player()
        player.add_item_to_inventory(TROPHY.copy())

        self.assertTrue(game.equip_item_intent(0).accepted)
        self.assertEqual("weapon_trophy", repo.load()["equipment"]["weapon"]["id"])
        self.assertEqual(24, game.get_player_stats_intent().effective_attack)
        equipped = {view.slot: view.item for view in game.equipment_view_intent()}
        self.assertEqual("Trophy Blade", equipped["weapon"].name)

        self.assertTrue(game.unequip_slot_intent("weapon").accepted)
        self.assertEqual(1, game.inventory_view_intent().used)
        self.assertFalse(game.unequip_slot_intent("weapon").accepted)

    def test_debug_intents(self) -> None:
        game, repo, _, _ = _build()
        game.force_level_up_intent()
        self.assertEqual(2, repo.load()["level"])
        game.player.take_damage(50)
        game.full_heal_intent()
        self.assertEqual(110, game.player.hp)
        game.reset_level_intent()
        self.assertEqual(1, repo.load()["level"])

    def test_simulate_location_update_moves_ten_meters(self) -> None:
        game, _, _, _ = _build()
        result = game.simulate_location_update_intent()
        self.assertIn("+10.0 m", result.messages[0])
        self.assertEqual(10.0, game.get_player_stats_intent().total_distance_m)

    def test_reset_progress_starts_fresh(self) -> None:
        game, repo, _, _ = _build()
        game.force_encounter_intent()
        game.catch_intent()

        game.reset_progress_intent()

        self.assertIsNone(game.current_encounter)
        self.assertEqual(0, repo.load()["creaturesCaught"])
        self.assertIsNone(game.encounter_service.last_encounter_time)

    def test_encounter_status_intent(self) -> None:
        game, _, _, _ = _build()
        game.force_encounter_intent()
        status = game.encounter_status_intent()
        self.assertTrue(status.time_blocked)
        self.assertEqual(30, status.seconds_until_ready)

    def test_atomic_persistor_is_preferred_over_repo_save(self) -> None:
        saved = []
        game, repo, _, _ = _build()
        game.atomic_state_persistor = saved.append

        game.load_or_create_player()

        self.assertEqual(1, len(saved))
        self.assertIsNone(repo.load())


if __name__ == "__main__":
    unittest.main()
