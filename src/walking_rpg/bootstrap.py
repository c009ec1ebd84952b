import logging
import os
import random

from walking_rpg.application.services.balance_tables import DEFAULT_DEBUG_LOCATION
from walking_rpg.application.services.combat_service import CombatService
from walking_rpg.application.services.encounter_service import EncounterConfig, EncounterService
from walking_rpg.application.services.event_bus import EventBus
from walking_rpg.application.services.game_service import GameService
from walking_rpg.application.services.loot_service import LootService
from walking_rpg.application.services.progression_service import ProgressionService
from walking_rpg.domain.models.location import GeoPoint
from walking_rpg.domain.repositories import EncounterNotifier
from walking_rpg.infrastructure.inmemory.atomic_persistence import create_inmemory_atomic_persistor
from walking_rpg.infrastructure.inmemory.inmemory_player_repo import InMemoryPlayerRepository
from walking_rpg.infrastructure.notifications.log_notifier import LoggingEncounterNotifier
from walking_rpg.infrastructure.notifications.webhook_notifier import WebhookEncounterNotifier
from walking_rpg.infrastructure.simulated_location import SimulatedLocationFeed


logger = logging.getLogger(__name__)


def _is_enabled(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def build_encounter_config() -> EncounterConfig:
    defaults = EncounterConfig()
    return EncounterConfig(
        min_encounter_distance=float(os.getenv("WALKRPG_MIN_ENCOUNTER_DISTANCE", str(defaults.min_encounter_distance))),
        encounter_chance_per_meter=float(
            os.getenv("WALKRPG_ENCOUNTER_CHANCE_PER_METER", str(defaults.encounter_chance_per_meter))
        ),
        min_time_between_encounters_ms=int(
            os.getenv("WALKRPG_MIN_TIME_BETWEEN_ENCOUNTERS_MS", str(defaults.min_time_between_encounters_ms))
        ),
        auto_flee_distance=float(os.getenv("WALKRPG_AUTO_FLEE_DISTANCE", str(defaults.auto_flee_distance))),
        template_selection=os.getenv("WALKRPG_TEMPLATE_SELECTION", defaults.template_selection),
    )


def _build_notifier() -> EncounterNotifier:
    url = os.getenv("WALKRPG_NOTIFY_WEBHOOK_URL", "").strip()
    if not url:
        return LoggingEncounterNotifier()

    timeout = float(os.getenv("WALKRPG_NOTIFY_TIMEOUT_S", "2"))
    retries = int(os.getenv("WALKRPG_NOTIFY_RETRIES", "1"))
    backoff_seconds = float(os.getenv("WALKRPG_NOTIFY_BACKOFF_S", "0.1"))
    return WebhookEncounterNotifier(url, timeout=timeout, retries=retries, backoff_seconds=backoff_seconds)


def _build_rng() -> random.Random:
    seed = os.getenv("WALKRPG_SEED", "").strip()
    return random.Random(int(seed)) if seed else random.Random()


def _build_game_service(player_repo, atomic_state_persistor) -> GameService:
    event_bus = EventBus()
    rng = _build_rng()
    progression_service = ProgressionService(event_publisher=event_bus.publish)
    encounter_service = EncounterService(
        build_encounter_config(),
        rng=rng,
        event_publisher=event_bus.publish,
    )
    combat_service = CombatService(
        progression_service=progression_service,
        loot_service=LootService(rng=rng),
        event_publisher=event_bus.publish,
    )
    latitude, longitude = DEFAULT_DEBUG_LOCATION
    return GameService(
        player_repo=player_repo,
        encounter_service=encounter_service,
        combat_service=combat_service,
        progression_service=progression_service,
        notifier=_build_notifier(),
        location_feed=SimulatedLocationFeed(GeoPoint(latitude=latitude, longitude=longitude)),
        event_bus=event_bus,
        atomic_state_persistor=atomic_state_persistor,
    )


def _build_inmemory_game_service() -> GameService:
    player_repo = InMemoryPlayerRepository()
    return _build_game_service(player_repo, create_inmemory_atomic_persistor(player_repo))


def _build_sql_game_service(database_url: str) -> GameService:
    from walking_rpg.infrastructure.db.sql.atomic_persistence import save_player_atomic
    from walking_rpg.infrastructure.db.sql.connection import bind_engine
    from walking_rpg.infrastructure.db.sql.migrate import build_migration_plan, execute_statements
    from walking_rpg.infrastructure.db.sql.repos import SqlPlayerRepository

    if _is_enabled("WALKRPG_DB_AUTO_MIGRATE", "1"):
        execute_statements(build_migration_plan().statements, database_url)
    bind_engine(database_url)
    return _build_game_service(SqlPlayerRepository(), save_player_atomic)


def create_game_service() -> GameService:
    database_url = os.getenv("WALKRPG_DATABASE_URL", "").strip()
    if not database_url:
        return _build_inmemory_game_service()
    logger.info("Using SQL player storage", extra={"dialect": database_url.split(":", 1)[0]})
    return _build_sql_game_service(database_url)
