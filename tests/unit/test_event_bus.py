import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from walking_rpg.application.services.event_bus import EventBus
from walking_rpg.domain.events import CreatureDefeated, EncounterFled


def _defeated() -> CreatureDefeated:
    return CreatureDefeated(player_id="player1", encounter_timestamp=1, creature_id="c", experience_gained=10)


class EventBusTests(unittest.TestCase):
    def test_publish_notifies_handlers_in_priority_order(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        bus.subscribe(CreatureDefeated, lambda evt: seen.append("late"), priority=200)
        bus.subscribe(CreatureDefeated, lambda evt: seen.append("early"), priority=10)
        bus.subscribe(CreatureDefeated, lambda evt: seen.append("default"))

        bus.publish(_defeated())

        self.assertEqual(["early", "default", "late"], seen)

    def test_publish_only_reaches_matching_event_type(self) -> None:
        bus = EventBus()
        seen: list[object] = []
        bus.subscribe(EncounterFled, seen.append)

        bus.publish(_defeated())

        self.assertEqual([], seen)
        self.assertEqual(1, bus.published_count)

    def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        def broken(_event) -> None:
            raise RuntimeError("handler exploded")

        bus.subscribe(CreatureDefeated, broken, priority=1)
        bus.subscribe(CreatureDefeated, lambda evt: seen.append(evt.creature_id), priority=2)

        with self.assertLogs("walking_rpg.application.services.event_bus", level="ERROR"):
            bus.publish(_defeated())

        self.assertEqual(["c"], seen)
        errors = bus.last_publish_errors()
        self.assertEqual(1, len(errors))
        self.assertIn("handler exploded", str(errors[0]))

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        seen: list[object] = []
        handler = seen.append
        bus.subscribe(CreatureDefeated, handler)

        self.assertTrue(bus.unsubscribe(CreatureDefeated, handler))
        self.assertFalse(bus.unsubscribe(CreatureDefeated, handler))
        bus.publish(_defeated())

        self.assertEqual([], seen)


if __name__ == "__main__":
    unittest.main()
