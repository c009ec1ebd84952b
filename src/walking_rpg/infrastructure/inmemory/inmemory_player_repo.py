from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from walking_rpg.domain.models.player import Player
from walking_rpg.domain.repositories import PLAYER_STORAGE_KEY, PlayerRepository


logger = logging.getLogger(__name__)


class InMemoryPlayerRepository(PlayerRepository):
    """Key-value store holding the player as a serialized JSON string."""

    def __init__(self, storage: Dict[str, str] | None = None, key: str = PLAYER_STORAGE_KEY) -> None:
        self._storage: Dict[str, str] = storage if storage is not None else {}
        self._key = key

    def load(self) -> Optional[Dict[str, Any]]:
        raw = self._storage.get(self._key)
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Stored player data is unreadable; starting fresh", extra={"key": self._key})
            return None
        return payload if isinstance(payload, dict) else None

    def save(self, player: Player) -> None:
        self._storage[self._key] = json.dumps(player.to_dict())

    def clear(self) -> None:
        self._storage.pop(self._key, None)
