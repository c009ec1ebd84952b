from __future__ import annotations

import logging
from dataclasses import dataclass

from walking_rpg.domain.events import LevelUpAppliedEvent
from walking_rpg.domain.models.creature import Creature
from walking_rpg.domain.models.player import Player


logger = logging.getLogger(__name__)


@dataclass
class RewardSummary:
    experience: int = 0
    levels_gained: int = 0
    from_level: int = 1
    to_level: int = 1


class ProgressionService:
    def __init__(self, event_publisher=None) -> None:
        self._event_publisher = event_publisher

    def grant_experience(self, player: Player, amount: int) -> RewardSummary:
        from_level = player.level
        hp_before = player.max_hp
        levels = player.add_experience(amount)
        summary = RewardSummary(
            experience=max(0, int(amount)),
            levels_gained=levels,
            from_level=from_level,
            to_level=player.level,
        )
        if levels > 0:
            logger.info(
                "Player levelled up",
                extra={"player_id": player.id, "from_level": from_level, "to_level": player.level},
            )
            self._publish(
                LevelUpAppliedEvent(
                    player_id=player.id,
                    from_level=from_level,
                    to_level=player.level,
                    hp_gain=player.max_hp - hp_before,
                )
            )
        return summary

    def reward_defeat(self, player: Player, creature: Creature) -> RewardSummary:
        summary = self.grant_experience(player, creature.experience_reward())
        player.defeat_creature()
        player.increment_encounters()
        return summary

    def reward_catch(self, player: Player, creature: Creature) -> RewardSummary:
        player.catch_creature()
        player.increment_encounters()
        return self.grant_experience(player, creature.experience_reward())

    def record_flee(self, player: Player) -> None:
        player.increment_encounters()

    def record_knockout(self, player: Player) -> None:
        player.full_heal()
        player.increment_encounters()

    def force_level_up(self, player: Player) -> RewardSummary:
        from_level = player.level
        hp_before = player.max_hp
        player.force_level_up()
        self._publish(
            LevelUpAppliedEvent(
                player_id=player.id,
                from_level=from_level,
                to_level=player.level,
                hp_gain=player.max_hp - hp_before,
            )
        )
        return RewardSummary(levels_gained=1, from_level=from_level, to_level=player.level)

    def reset_level(self, player: Player) -> None:
        player.reset_level()

    def _publish(self, event: object) -> None:
        if self._event_publisher is None:
            return
        self._event_publisher(event)
