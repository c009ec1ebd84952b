from __future__ import annotations

import copy
from collections.abc import Callable, Sequence

from walking_rpg.domain.models.player import Player


def create_inmemory_atomic_persistor(player_repo) -> Callable[..., None]:
    def _persist(
        player: Player,
        operations: Sequence[Callable[[object], None]] | None = None,
    ) -> None:
        snapshot = copy.deepcopy(getattr(player_repo, "_storage", None))
        try:
            player_repo.save(player)
            for operation in operations or ():
                operation(None)
        except Exception:
            if snapshot is not None and hasattr(player_repo, "_storage"):
                player_repo._storage.clear()
                player_repo._storage.update(snapshot)
            raise

    return _persist
