from pathlib import Path
import logging
import os
import sys

try:
    from dotenv import load_dotenv
except Exception:
    load_dotenv = None

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from walking_rpg.bootstrap import create_game_service
from walking_rpg.presentation.main_menu import main_menu

if load_dotenv is not None:
    load_dotenv()


def _configure_logging() -> None:
    level_name = os.getenv("WALKRPG_LOG_LEVEL", "WARNING").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- Main menu: use UP/DOWN (or W/S), ENTER to select, ESC/Q to go back.")
    print("- On the trail: Walk, Force Encounter, Inventory, Equipment, Debug, Quit.")
    print("- Startup issues: verify WALKRPG_DATABASE_URL or unset it to use in-memory mode.")


def _is_database_connectivity_error(exc: Exception) -> bool:
    text = str(exc).lower()
    markers = (
        "can't connect to mysql server",
        "could not connect to server",
        "unable to open database file",
        "connection refused",
        "sqlalchemy.exc.operationalerror",
        "(10061)",
    )
    return any(marker in text for marker in markers) or type(exc).__name__ == "OperationalError"


def main():
    _configure_logging()
    try:
        game_service = create_game_service()
        main_menu(game_service)
    except KeyboardInterrupt:
        print("\nSession ended.")
    except Exception as exc:
        if os.getenv("WALKRPG_DATABASE_URL") and _is_database_connectivity_error(exc):
            print("Database unavailable; retrying in-memory mode.")
            os.environ.pop("WALKRPG_DATABASE_URL", None)
            try:
                game_service = create_game_service()
                main_menu(game_service)
                return
            except KeyboardInterrupt:
                print("\nSession ended.")
                return
            except Exception as fallback_exc:
                exc = fallback_exc
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()
