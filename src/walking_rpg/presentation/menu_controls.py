import os
import sys

try:
    from rich.console import Console
    from rich.panel import Panel
except Exception:  # pragma: no cover - optional dependency fallback
    Console = None
    Panel = None

try:  # Windows-specific keyboard handling
    import msvcrt  # type: ignore
except ImportError:  # pragma: no cover - fallback for non-Windows
    msvcrt = None


_CONSOLE = Console() if Console is not None else None
_MENU_BORDER = "green"


def _decorate_title(title: str) -> str:
    core = str(title or "").strip() or "Menu"
    return f"[bold green]{core}[/bold green]"


def clear_screen() -> None:
    """Clear the console in a basic cross-platform way."""

    os.system("cls" if os.name == "nt" else "clear")


def _read_key_windows():
    ch = msvcrt.getch()

    if ch in (b"\x00", b"\xe0"):
        ch2 = msvcrt.getch()
        if ch2 == b"H":
            return "UP"
        if ch2 == b"P":
            return "DOWN"
        return None

    if ch in (b"\r", b"\n"):
        return "ENTER"
    if ch == b"\x1b":
        return "ESC"

    try:
        return ch.decode("utf-8")
    except UnicodeDecodeError:
        return None


def read_key():
    """Read a key, defaulting to line input when msvcrt is unavailable."""

    if msvcrt is not None:
        return _read_key_windows()

    line = sys.stdin.readline()
    if line == "":
        return "ESC"
    return line.strip()


def normalize_menu_key(key):
    if key is None or not isinstance(key, str):
        return key

    if key in {"UP", "DOWN", "ENTER", "ESC"}:
        return key

    lowered = key.lower().strip()
    mapping = {
        "w": "UP",
        "s": "DOWN",
        "": "ENTER",
        "enter": "ENTER",
        "q": "ESC",
        "esc": "ESC",
    }
    return mapping.get(lowered, lowered)


def resolve_menu_key(key, selected: int, option_count: int) -> tuple[int, bool]:
    """Apply one key press. Returns (selection, confirmed); selection -1 means cancelled."""
    normalized = normalize_menu_key(key)
    if normalized == "UP":
        return (selected - 1) % option_count, False
    if normalized == "DOWN":
        return (selected + 1) % option_count, False
    if normalized == "ENTER":
        return selected, True
    if normalized == "ESC":
        return -1, True
    if isinstance(normalized, str) and normalized.isdigit():
        number = int(normalized)
        if 1 <= number <= option_count:
            return number - 1, True
    return selected, False


def _render_menu(title: str, options: list[str], selected: int, footer_hint: str | None) -> None:
    if _CONSOLE is not None and Panel is not None:
        lines: list[str] = []
        for idx, option in enumerate(options):
            label = f"{idx + 1}. {option}"
            if idx == selected:
                lines.append(f"[bold black on green] ▶ {label} [/bold black on green]")
            else:
                lines.append(f"[white]  {label}[/white]")
        lines.append("")
        if footer_hint:
            lines.append(f"[green]{footer_hint}[/green]")
        lines.append("[dim]W/S or arrows to move, ENTER or a number to select, Q to go back.[/dim]")
        _CONSOLE.print(
            Panel.fit(
                "\n".join(lines),
                title=_decorate_title(title),
                border_style=_MENU_BORDER,
                padding=(0, 1),
            )
        )
        return

    print("=" * 40)
    print(f"{title:^40}")
    print("=" * 40)
    for idx, option in enumerate(options):
        prefix = "> " if idx == selected else "  "
        print(f"{prefix}{idx + 1}. {option}")
    if footer_hint:
        print(footer_hint)
    print("W/S to move, ENTER or a number to select, Q to go back.")


def arrow_menu(title: str, options: list[str], footer_hint: str | None = None) -> int:
    """Render a vertical menu and return the selected index, or -1 on cancel."""

    if not options:
        raise ValueError("arrow_menu requires at least one option")

    selected = 0
    while True:
        clear_screen()
        _render_menu(title, options, selected, footer_hint)
        selected, confirmed = resolve_menu_key(read_key(), selected, len(options))
        if confirmed:
            return selected
