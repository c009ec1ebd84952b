import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from walking_rpg.domain.models.progression import (
    LevelStats,
    calculate_damage,
    experience_for_next_level,
    stats_for_level,
)


class ProgressionCurveTests(unittest.TestCase):
    def test_level_one_baseline(self) -> None:
        stats = stats_for_level(1)
        self.assertEqual(LevelStats(level=1, attack=20, defense=5, max_hp=100), stats)

    def test_stats_grow_by_fixed_deltas_per_level(self) -> None:
        stats = stats_for_level(5)
        self.assertEqual(32, stats.attack)
        self.assertEqual(13, stats.defense)
        self.assertEqual(140, stats.max_hp)

    def test_levels_below_one_clamp_to_baseline(self) -> None:
        self.assertEqual(stats_for_level(1), stats_for_level(0))
        self.assertEqual(stats_for_level(1), stats_for_level(-3))

    def test_experience_curve_is_floored_power_curve(self) -> None:
        self.assertEqual(100, experience_for_next_level(1))
        self.assertEqual(282, experience_for_next_level(2))
        self.assertEqual(519, experience_for_next_level(3))
        self.assertEqual(800, experience_for_next_level(4))

    def test_damage_subtracts_defense_then_applies_multiplier(self) -> None:
        self.assertEqual(22, calculate_damage(32, 10))
        self.assertEqual(33, calculate_damage(32, 10, 1.5))
        self.assertEqual(44, calculate_damage(32, 10, 2.0))

    def test_damage_is_floored_at_one(self) -> None:
        self.assertEqual(1, calculate_damage(5, 50))
        self.assertEqual(1, calculate_damage(10, 10))
        self.assertEqual(1, calculate_damage(10, 10, 2.0))

    def test_level_stats_reject_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            LevelStats(level=0, attack=1, defense=1, max_hp=1)
        with self.assertRaises(ValueError):
            LevelStats(level=1, attack=1, defense=1, max_hp=0)


if __name__ == "__main__":
    unittest.main()
