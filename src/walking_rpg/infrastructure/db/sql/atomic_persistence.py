from __future__ import annotations

from collections.abc import Callable, Sequence

from walking_rpg.domain.models.player import Player
from walking_rpg.domain.repositories import PLAYER_STORAGE_KEY
from .connection import SessionLocal
from .repos import _upsert_player_payload, _upsert_player_stats


def save_player_atomic(
    player: Player,
    operations: Sequence[Callable[[object], None]] | None = None,
    *,
    storage_key: str = PLAYER_STORAGE_KEY,
) -> None:
    """Persist the player blob, its stats row and any extra operations in one DB transaction."""
    with SessionLocal.begin() as session:
        _upsert_player_payload(session, storage_key, player)
        _upsert_player_stats(session, player)
        for operation in operations or ():
            operation(session)
