import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from walking_rpg.domain.models.item import Item
from walking_rpg.domain.models.player import Player
from walking_rpg.domain.repositories import PLAYER_STORAGE_KEY
from walking_rpg.infrastructure.db.sql import atomic_persistence, repos
from walking_rpg.infrastructure.db.sql.migrate import build_migration_plan


class SqlPlayerRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        with self.engine.begin() as conn:
            for statement in build_migration_plan().statements:
                conn.exec_driver_sql(statement)
        session_factory = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)
        self._patches = [
            mock.patch.object(repos, "SessionLocal", session_factory),
            mock.patch.object(atomic_persistence, "SessionLocal", session_factory),
        ]
        for patcher in self._patches:
            patcher.start()
        self.repo = repos.SqlPlayerRepository()

    def tearDown(self) -> None:
        for patcher in reversed(self._patches):
            patcher.stop()
        self.engine.dispose()

    def _count(self, table: str) -> int:
        with self.engine.connect() as conn:
            return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()

    def test_load_returns_none_when_nothing_saved(self) -> None:
        self.assertIsNone(self.repo.load())

    def test_save_and_load_round_trip_player_snapshot(self) -> None:
        player = Player()
        player.add_experience(150)
        player.add_distance(1234.5)
        player.add_item_to_inventory(Item(id="rusty_sword", name="Rusty Sword", kind="weapon", attack=2))

        self.repo.save(player)
        restored = Player.from_dict(self.repo.load())

        self.assertEqual(player.level, restored.level)
        self.assertEqual(player.experience, restored.experience)
        self.assertAlmostEqual(1234.5, restored.total_distance)
        self.assertEqual("rusty_sword", restored.inventory[0].id)

    def test_saving_twice_upserts_single_rows(self) -> None:
        player = Player()
        self.repo.save(player)
        player.add_distance(10)
        player.defeat_creature()
        self.repo.save(player)

        self.assertEqual(1, self._count("player_store"))
        self.assertEqual(1, self._count("player_stats"))
        with self.engine.connect() as conn:
            row = conn.execute(
                text("SELECT creatures_defeated, total_distance FROM player_stats WHERE player_id = :id"),
                {"id": player.id},
            ).one()
        self.assertEqual(1, row.creatures_defeated)
        self.assertAlmostEqual(10.0, row.total_distance)

    def test_clear_removes_snapshot_and_stats_row(self) -> None:
        self.repo.save(Player(id="walker-7"))
        self.repo.save(Player(id="someone-else"))
        self.assertEqual(2, self._count("player_stats"))

        self.repo.clear()

        self.assertIsNone(self.repo.load())
        self.assertEqual(0, self._count("player_store"))
        with self.engine.connect() as conn:
            remaining = conn.execute(text("SELECT player_id FROM player_stats")).scalars().all()
        self.assertEqual(["walker-7"], remaining)

    def test_clear_without_save_is_harmless(self) -> None:
        self.repo.clear()
        self.assertEqual(0, self._count("player_stats"))

    def test_pending_loot_round_trips_through_sql(self) -> None:
        player = Player()
        player.pending_loot.append(Item(id="rusty_sword", name="Rusty Sword", kind="weapon", attack=2))

        self.repo.save(player)

        restored = Player.from_dict(self.repo.load())
        self.assertEqual(["rusty_sword"], [item.id for item in restored.pending_loot])

    def test_unreadable_payload_loads_as_none(self) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text("INSERT INTO player_store (storage_key, payload_json, updated_at) VALUES (:k, :p, 0)"),
                {"k": PLAYER_STORAGE_KEY, "p": "{not json"},
            )

        self.assertIsNone(self.repo.load())

    def test_atomic_save_runs_extra_operations_in_same_transaction(self) -> None:
        seen = []
        atomic_persistence.save_player_atomic(Player(), [lambda session: seen.append(session)])

        self.assertEqual(1, len(seen))
        self.assertIsNotNone(self.repo.load())

    def test_atomic_save_rolls_back_when_stats_write_fails(self) -> None:
        with mock.patch.object(atomic_persistence, "_upsert_player_stats", side_effect=RuntimeError("stats write failed")):
            with self.assertRaises(RuntimeError):
                atomic_persistence.save_player_atomic(Player())

        self.assertEqual(0, self._count("player_store"))
        self.assertIsNone(self.repo.load())

    def test_atomic_save_rolls_back_when_extra_operation_fails(self) -> None:
        def failing(_session):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            atomic_persistence.save_player_atomic(Player(), [failing])

        self.assertEqual(0, self._count("player_store"))
        self.assertEqual(0, self._count("player_stats"))


if __name__ == "__main__":
    unittest.main()
