from walking_rpg.application.services.game_service import GameService
from walking_rpg.presentation.game_loop import run_game_loop
from walking_rpg.presentation.menu_controls import arrow_menu, clear_screen

try:
    from rich.console import Console
    from rich.panel import Panel
except Exception:  # pragma: no cover - optional dependency fallback
    Console = None
    Panel = None


_CONSOLE = Console() if Console is not None else None
_HELP_BORDER = "green"
_EXIT_BORDER = "magenta"

_HELP_LINES = [
    "- Move menus: W/S (or arrows on Windows), ENTER or a number to select",
    "- Cancel/Back: Q (or ESC)",
    "- Walk to cover ground; encounters need 50 m and a 30 s rest between them",
    "- In an encounter: Fight, Catch, Flee, or Minimize to keep walking",
    "- Walking 100 m away from an open encounter makes the creature leave",
    "- Defeated creatures may drop gear; equip it from the Inventory",
    "- Set WALKRPG_DATABASE_URL to keep progress in a database",
]


def _ornate_title(title: str) -> str:
    return f"[bold green]{title}[/bold green]"


def _show_help() -> None:
    clear_screen()
    if _CONSOLE is not None and Panel is not None:
        _CONSOLE.print(
            Panel.fit(
                "\n".join(["[bold]Help & Controls[/bold]", *_HELP_LINES]),
                title=_ornate_title("Guidance"),
                border_style=_HELP_BORDER,
            )
        )
    else:
        print("=== Help & Controls ===")
        for line in _HELP_LINES:
            print(line)
    input("Press ENTER to return to the menu...")
    clear_screen()


def _show_farewell(game_service: GameService) -> None:
    clear_screen()
    distance = game_service.player.total_distance if game_service.player is not None else 0.0
    message = f"Happy trails! You walked {distance:.0f} m."
    if _CONSOLE is not None and Panel is not None:
        _CONSOLE.print(
            Panel.fit(
                f"[bold magenta]{message}[/bold magenta]",
                title=_ornate_title("Farewell"),
                border_style=_EXIT_BORDER,
            )
        )
    else:
        print(message)


def main_menu(game_service: GameService) -> None:
    while True:
        start_label = "Continue Walking" if game_service.player_repo.load() is not None else "Start Walking"
        choice_idx = arrow_menu("Walking RPG", [start_label, "Help", "Quit"])

        if choice_idx == 0:
            run_game_loop(game_service)
        elif choice_idx == 1:
            _show_help()
        else:
            _show_farewell(game_service)
            break
