import json
import logging
import time
from typing import Any, Dict, Optional

from sqlalchemy import text

from walking_rpg.domain.models.player import DEFAULT_PLAYER_ID, Player
from walking_rpg.domain.repositories import PLAYER_STORAGE_KEY, PlayerRepository
from .connection import SessionLocal


logger = logging.getLogger(__name__)


def _dialect_name(session) -> str:
    return session.bind.dialect.name if session.bind is not None else "sqlite"


def _upsert_player_payload(session, storage_key: str, player: Player) -> None:
    params = {
        "storage_key": storage_key,
        "payload_json": json.dumps(player.to_dict()),
        "updated_at": int(time.time() * 1000),
    }
    if _dialect_name(session) == "mysql":
        statement = """
            INSERT INTO player_store (storage_key, payload_json, updated_at)
            VALUES (:storage_key, :payload_json, :updated_at)
            ON DUPLICATE KEY UPDATE
                payload_json = VALUES(payload_json),
                updated_at = VALUES(updated_at)
        """
    else:
        statement = """
            INSERT INTO player_store (storage_key, payload_json, updated_at)
            VALUES (:storage_key, :payload_json, :updated_at)
            ON CONFLICT (storage_key) DO UPDATE SET
                payload_json = excluded.payload_json,
                updated_at = excluded.updated_at
        """
    session.execute(text(statement), params)


def _upsert_player_stats(session, player: Player) -> None:
    params = {
        "player_id": player.id,
        "level": player.level,
        "experience": player.experience,
        "total_distance": float(player.total_distance),
        "total_encounters": player.total_encounters,
        "creatures_caught": player.creatures_caught,
        "creatures_defeated": player.creatures_defeated,
    }
    columns = "player_id, level, experience, total_distance, total_encounters, creatures_caught, creatures_defeated"
    values = ":player_id, :level, :experience, :total_distance, :total_encounters, :creatures_caught, :creatures_defeated"
    if _dialect_name(session) == "mysql":
        statement = f"""
            INSERT INTO player_stats ({columns})
            VALUES ({values})
            ON DUPLICATE KEY UPDATE
                level = VALUES(level),
                experience = VALUES(experience),
                total_distance = VALUES(total_distance),
                total_encounters = VALUES(total_encounters),
                creatures_caught = VALUES(creatures_caught),
                creatures_defeated = VALUES(creatures_defeated)
        """
    else:
        statement = f"""
            INSERT INTO player_stats ({columns})
            VALUES ({values})
            ON CONFLICT (player_id) DO UPDATE SET
                level = excluded.level,
                experience = excluded.experience,
                total_distance = excluded.total_distance,
                total_encounters = excluded.total_encounters,
                creatures_caught = excluded.creatures_caught,
                creatures_defeated = excluded.creatures_defeated
        """
    session.execute(text(statement), params)


class SqlPlayerRepository(PlayerRepository):
    def __init__(self, storage_key: str = PLAYER_STORAGE_KEY) -> None:
        self.storage_key = storage_key

    def _select_payload(self, session) -> Optional[Dict[str, Any]]:
        row = session.execute(
            text("SELECT payload_json FROM player_store WHERE storage_key = :storage_key"),
            {"storage_key": self.storage_key},
        ).first()
        if row is None:
            return None
        try:
            payload = json.loads(row.payload_json)
        except (TypeError, ValueError):
            logger.warning("Stored player data is unreadable; starting fresh", extra={"key": self.storage_key})
            return None
        return payload if isinstance(payload, dict) else None

    def load(self) -> Optional[Dict[str, Any]]:
        with SessionLocal() as session:
            return self._select_payload(session)

    def save(self, player: Player) -> None:
        with SessionLocal.begin() as session:
            _upsert_player_payload(session, self.storage_key, player)
            _upsert_player_stats(session, player)

    def clear(self) -> None:
        with SessionLocal.begin() as session:
            payload = self._select_payload(session) or {}
            session.execute(
                text("DELETE FROM player_stats WHERE player_id = :player_id"),
                {"player_id": str(payload.get("id") or DEFAULT_PLAYER_ID)},
            )
            session.execute(
                text("DELETE FROM player_store WHERE storage_key = :storage_key"),
                {"storage_key": self.storage_key},
            )
