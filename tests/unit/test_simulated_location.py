import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from walking_rpg.domain.models.location import GeoPoint
from walking_rpg.infrastructure.simulated_location import SimulatedLocationFeed, haversine_distance_m


START = GeoPoint(latitude=37.7749, longitude=-122.4194)


class SimulatedLocationTests(unittest.TestCase):
    def test_haversine_one_degree_of_longitude_at_equator(self) -> None:
        distance = haversine_distance_m(GeoPoint(latitude=0.0, longitude=0.0), GeoPoint(latitude=0.0, longitude=1.0))
        self.assertAlmostEqual(111_195.0, distance, delta=5.0)

    def test_advance_moves_north_and_accumulates(self) -> None:
        feed = SimulatedLocationFeed(START)

        first = feed.advance(100)
        second = feed.advance(10)

        self.assertEqual(100.0, first.incremental)
        self.assertEqual(110.0, second.total)
        self.assertGreater(second.location.latitude, START.latitude)
        self.assertEqual(START.longitude, second.location.longitude)
        self.assertEqual(second.location, feed.current_location())

    def test_advance_ignores_negative_distance(self) -> None:
        feed = SimulatedLocationFeed(START)
        self.assertEqual(0.0, feed.advance(-5).incremental)

    def test_record_fix_accepts_plausible_movement(self) -> None:
        feed = SimulatedLocationFeed(START)
        update = feed.record_fix(GeoPoint(latitude=START.latitude + 0.0001, longitude=START.longitude))

        self.assertIsNotNone(update)
        self.assertAlmostEqual(11.1, update.incremental, delta=0.2)
        self.assertEqual(update.incremental, feed.total_distance)

    def test_record_fix_drops_gps_jumps_and_standing_still(self) -> None:
        feed = SimulatedLocationFeed(START)
        far = GeoPoint(latitude=START.latitude + 0.05, longitude=START.longitude)

        self.assertIsNone(feed.record_fix(far))
        self.assertIsNone(feed.record_fix(far))
        self.assertEqual(0.0, feed.total_distance)
        self.assertEqual(far, feed.current_location())


if __name__ == "__main__":
    unittest.main()
