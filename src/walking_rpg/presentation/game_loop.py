from walking_rpg.presentation.menu_controls import arrow_menu, clear_screen

try:
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table
except Exception:  # pragma: no cover - optional dependency fallback
    Console = None
    Panel = None
    Table = None


_CONSOLE = Console() if Console is not None else None
_BORDER_TRAIL = "green"
_BORDER_ENCOUNTER = "red"
_BORDER_COMBAT = "bright_red"
_BORDER_CHARACTER = "yellow"
_BORDER_INVENTORY = "cyan"
_BORDER_DEBUG = "magenta"

_RARITY_COLOURS = {
    "common": "white",
    "uncommon": "green",
    "rare": "blue",
    "epic": "magenta",
    "legendary": "yellow",
}


def _ornate_title(title: str) -> str:
    core = str(title or "").strip() or "Panel"
    return f"[bold green]{core}[/bold green]"


def _panel_subtitle(panel_key: str) -> str:
    lookup = {
        "trail": "[dim]Every step counts[/dim]",
        "encounter": "[dim]Something stirs nearby[/dim]",
        "combat": "[dim]Pick your strike[/dim]",
        "character": "[dim]Your walking record[/dim]",
        "inventory": "[dim]Pack and gear[/dim]",
        "debug": "[dim]Developer tools[/dim]",
    }
    return lookup.get(str(panel_key), "[dim]Walking log[/dim]")


def _rarity_label(rarity: str) -> str:
    if _CONSOLE is None:
        return rarity
    colour = _RARITY_COLOURS.get(rarity, "white")
    return f"[{colour}]{rarity}[/{colour}]"


def _prompt_continue(message: str = "Press ENTER to continue...") -> None:
    if _CONSOLE is not None:
        _CONSOLE.input(f"[dim]{message}[/dim]")
        clear_screen()
        return
    input(message)
    clear_screen()


def _render_message_panel(
    title: str,
    lines: list[str],
    *,
    border_style: str = _BORDER_TRAIL,
    panel_key: str = "trail",
) -> None:
    rows = [str(line) for line in lines if str(line).strip()]
    if _CONSOLE is not None and Panel is not None:
        body = "\n".join(rows) if rows else "Nothing happened."
        _CONSOLE.print(
            Panel.fit(
                body,
                title=_ornate_title(title),
                subtitle=_panel_subtitle(panel_key),
                subtitle_align="left",
                border_style=border_style,
            )
        )
        return

    print(f"=== {title} ===")
    for row in rows:
        print(row)


def _show_result(title: str, result, *, border_style: str = _BORDER_TRAIL, panel_key: str = "trail") -> None:
    clear_screen()
    _render_message_panel(title, list(result.messages or []), border_style=border_style, panel_key=panel_key)
    _prompt_continue()


def _render_trail_header(stats, status, encounter_view) -> None:
    if encounter_view is not None and encounter_view.status == "active":
        encounter_line = f"{encounter_view.creature.name} (Lv {encounter_view.creature.level})"
        if encounter_view.minimized:
            encounter_line += " [minimized]"
    else:
        encounter_line = "None"
    if status.time_blocked:
        chance_line = f"Resting ({status.seconds_until_ready}s)"
    else:
        chance_line = f"{status.probability * 100:.1f}%"
    distance_line = f"{status.distance_since_last_encounter:.0f} / {status.min_encounter_distance:.0f} m"

    if _CONSOLE is not None and Panel is not None and Table is not None:
        header = Table.grid(padding=(0, 1))
        header.add_column(style="bold green", justify="right")
        header.add_column(style="white")
        header.add_row("Adventurer", f"{stats.name} (Lv {stats.level})")
        header.add_row("HP", f"{stats.hp}/{stats.max_hp}")
        header.add_row("XP", f"{stats.experience}/{stats.experience_for_next_level}")
        header.add_row("Walked", f"{stats.total_distance_m:.0f} m")
        header.add_row("Since encounter", distance_line)
        header.add_row("Encounter chance", chance_line)
        header.add_row("Encounter", encounter_line)
        _CONSOLE.print(
            Panel.fit(
                header,
                title=_ornate_title("On the Trail"),
                subtitle=_panel_subtitle("trail"),
                subtitle_align="left",
                border_style=_BORDER_TRAIL,
            )
        )
        return

    print("=== On the Trail ===")
    print(f"{stats.name} (Lv {stats.level}) | HP {stats.hp}/{stats.max_hp} | XP {stats.experience}/{stats.experience_for_next_level}")
    print(f"Walked {stats.total_distance_m:.0f} m | Since encounter {distance_line} | Chance {chance_line}")
    print(f"Encounter: {encounter_line}")


def _render_encounter(encounter_view, stats) -> None:
    creature = encounter_view.creature
    if _CONSOLE is not None and Panel is not None and Table is not None:
        card = Table.grid(padding=(0, 1))
        card.add_column(style="bold red", justify="right")
        card.add_column(style="white")
        card.add_row("Creature", f"{creature.name} ({creature.type})")
        card.add_row("Level", str(creature.level))
        card.add_row("Rarity", _rarity_label(creature.rarity))
        card.add_row("HP", f"{creature.hp}/{creature.max_hp}")
        card.add_row("ATK / DEF / SPD", f"{creature.attack} / {creature.defense} / {creature.speed}")
        card.add_row("Reward", f"{creature.experience_reward} XP")
        card.add_row("You", f"{stats.hp}/{stats.max_hp} HP")
        card.add_row("", f"[dim]{creature.description}[/dim]")
        _CONSOLE.print(
            Panel.fit(
                card,
                title=_ornate_title("Wild Encounter"),
                subtitle=_panel_subtitle("encounter"),
                subtitle_align="left",
                border_style=_BORDER_ENCOUNTER,
            )
        )
        return

    print("=== Wild Encounter ===")
    print(f"{creature.name} ({creature.type}) Lv {creature.level} [{creature.rarity}]")
    print(f"HP {creature.hp}/{creature.max_hp} | ATK {creature.attack} DEF {creature.defense} SPD {creature.speed}")
    print(f"Reward: {creature.experience_reward} XP")
    print(creature.description)
    print(f"You: {stats.hp}/{stats.max_hp} HP")


def _attack_label(option) -> str:
    if option.available:
        return f"{option.icon} {option.name} (x{option.multiplier:g}, ~{option.expected_damage} dmg)"
    seconds = (option.remaining_ms + 999) // 1000
    return f"{option.icon} {option.name} (cooldown {seconds}s)"


def _run_combat(game_service) -> None:
    result = game_service.open_combat_intent()
    if not result.accepted:
        _show_result("Combat", result, border_style=_BORDER_COMBAT, panel_key="combat")
        return

    while True:
        encounter_view = game_service.get_encounter_view_intent()
        if encounter_view is None or encounter_view.status != "active":
            return
        options = game_service.attack_options_intent()
        labels = [_attack_label(option) for option in options] + ["Back"]
        creature = encounter_view.creature
        stats = game_service.get_player_stats_intent()
        choice = arrow_menu(
            "Combat",
            labels,
            footer_hint=f"{creature.name}: {creature.hp}/{creature.max_hp} HP | You: {stats.hp}/{stats.max_hp} HP",
        )
        if choice < 0 or choice == len(options):
            return

        outcome = game_service.attack_intent(options[choice].attack_type)
        if not outcome.accepted:
            _show_result("Combat", outcome, border_style=_BORDER_COMBAT, panel_key="combat")
            continue
        clear_screen()
        _render_message_panel("Combat", list(outcome.messages), border_style=_BORDER_COMBAT, panel_key="combat")
        refreshed = game_service.get_encounter_view_intent()
        if outcome.game_over or refreshed is None or refreshed.status != "active":
            _prompt_continue()
            return
        _prompt_continue()


def _run_encounter(game_service) -> None:
    game_service.resume_encounter_intent()
    while True:
        encounter_view = game_service.get_encounter_view_intent()
        if encounter_view is None or encounter_view.status != "active":
            return
        clear_screen()
        _render_encounter(encounter_view, game_service.get_player_stats_intent())
        choice = arrow_menu(
            f"{encounter_view.creature.name} appeared!",
            ["Fight", "Catch", "Flee", "Minimize"],
        )
        if choice == 0:
            _run_combat(game_service)
        elif choice == 1:
            _show_result("Catch", game_service.catch_intent(), border_style=_BORDER_ENCOUNTER, panel_key="encounter")
            return
        elif choice == 2:
            _show_result("Flee", game_service.flee_intent(), border_style=_BORDER_ENCOUNTER, panel_key="encounter")
            return
        else:
            game_service.minimize_encounter_intent()
            return


def _render_character(stats) -> None:
    rows = [
        ("Name", stats.name),
        ("Level", str(stats.level)),
        ("Experience", f"{stats.experience}/{stats.experience_for_next_level}"),
        ("Attack", f"{stats.effective_attack} (base {stats.attack})"),
        ("Defense", f"{stats.effective_defense} (base {stats.defense})"),
        ("HP", f"{stats.hp}/{stats.max_hp}"),
        ("Distance", f"{stats.total_distance_m:.0f} m"),
        ("Encounters", str(stats.total_encounters)),
        ("Caught", str(stats.creatures_caught)),
        ("Defeated", str(stats.creatures_defeated)),
        ("Inventory", f"{stats.inventory_used}/{stats.inventory_capacity}"),
    ]
    if _CONSOLE is not None and Panel is not None and Table is not None:
        sheet = Table.grid(padding=(0, 1))
        sheet.add_column(style="bold yellow", justify="right")
        sheet.add_column(style="white")
        for label, value in rows:
            sheet.add_row(label, value)
        _CONSOLE.print(
            Panel.fit(
                sheet,
                title=_ornate_title("Character"),
                subtitle=_panel_subtitle("character"),
                subtitle_align="left",
                border_style=_BORDER_CHARACTER,
            )
        )
        return

    print("=== Character ===")
    for label, value in rows:
        print(f"{label}: {value}")


def _item_label(item) -> str:
    stats = ", ".join(item.stat_lines)
    suffix = "" if item.can_equip else " (level too high)"
    return f"{item.name} [{item.rarity}] Lv {item.level} {stats}".rstrip() + suffix


def _render_inventory(inventory_view) -> None:
    if _CONSOLE is not None and Panel is not None and Table is not None:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Item")
        table.add_column("Type")
        table.add_column("Rarity")
        table.add_column("Lv", justify="right")
        table.add_column("Stats")
        for item in inventory_view.items:
            table.add_row(
                str(item.index + 1),
                item.name,
                item.kind,
                _rarity_label(item.rarity),
                str(item.level),
                ", ".join(item.stat_lines),
            )
        _CONSOLE.print(
            Panel.fit(
                table,
                title=_ornate_title(f"Inventory {inventory_view.used}/{inventory_view.capacity}"),
                subtitle=_panel_subtitle("inventory"),
                subtitle_align="left",
                border_style=_BORDER_INVENTORY,
            )
        )
    else:
        print(f"=== Inventory {inventory_view.used}/{inventory_view.capacity} ===")
        for item in inventory_view.items:
            print(f"{item.index + 1}. {_item_label(item)}")
    if inventory_view.pending_loot:
        print(f"{len(inventory_view.pending_loot)} dropped item(s) waiting to be collected.")


def _run_inventory(game_service) -> None:
    while True:
        inventory_view = game_service.inventory_view_intent()
        clear_screen()
        _render_inventory(inventory_view)
        options = [_item_label(item) for item in inventory_view.items]
        if inventory_view.pending_loot:
            options.append(f"Collect waiting loot ({len(inventory_view.pending_loot)})")
        options.append("Back")
        choice = arrow_menu("Inventory", options)
        if choice < 0 or choice == len(options) - 1:
            return
        if choice >= len(inventory_view.items):
            _show_result("Loot", game_service.claim_pending_loot_intent(), border_style=_BORDER_INVENTORY, panel_key="inventory")
            continue

        item = inventory_view.items[choice]
        action = arrow_menu(item.name, ["Equip", "Drop", "Back"], footer_hint=item.description or None)
        if action == 0:
            result = game_service.equip_item_intent(item.index)
        elif action == 1:
            result = game_service.drop_inventory_item_intent(item.index)
        else:
            continue
        _show_result("Inventory", result, border_style=_BORDER_INVENTORY, panel_key="inventory")


def _run_equipment(game_service) -> None:
    while True:
        slots = game_service.equipment_view_intent()
        options = []
        for slot_view in slots:
            label = slot_view.item.name if slot_view.item is not None else "(empty)"
            options.append(f"{slot_view.slot.title()}: {label}")
        options.append("Back")
        choice = arrow_menu("Equipment", options, footer_hint="Select a filled slot to unequip it.")
        if choice < 0 or choice == len(slots):
            return
        slot_view = slots[choice]
        if slot_view.item is None:
            continue
        _show_result(
            "Equipment",
            game_service.unequip_slot_intent(slot_view.slot),
            border_style=_BORDER_INVENTORY,
            panel_key="inventory",
        )


def _encounter_status_lines(status) -> list[str]:
    lines = [
        f"Distance since last encounter: {status.distance_since_last_encounter:.1f} m",
        f"Minimum distance: {status.min_encounter_distance:.0f} m",
        f"Distance probability: {status.distance_probability * 100:.2f}%",
        f"Current probability: {status.probability * 100:.2f}%",
    ]
    if status.time_since_last_encounter_ms is None:
        lines.append("No encounter yet this session.")
    else:
        lines.append(f"Time since last encounter: {status.time_since_last_encounter_ms // 1000}s")
    if status.time_blocked:
        lines.append(f"Encounters resume in {status.seconds_until_ready}s.")
    return lines


def _run_debug(game_service) -> None:
    options = [
        "Force Level Up",
        "Reset Level",
        "Full Heal",
        "Simulate Location Update",
        "Encounter Status",
        "Reset Progress",
        "Back",
    ]
    while True:
        choice = arrow_menu("Debug", options)
        if choice == 0:
            result = game_service.force_level_up_intent()
        elif choice == 1:
            result = game_service.reset_level_intent()
        elif choice == 2:
            result = game_service.full_heal_intent()
        elif choice == 3:
            result = game_service.simulate_location_update_intent()
        elif choice == 4:
            clear_screen()
            _render_message_panel(
                "Encounter Status",
                _encounter_status_lines(game_service.encounter_status_intent()),
                border_style=_BORDER_DEBUG,
                panel_key="debug",
            )
            _prompt_continue()
            continue
        elif choice == 5:
            confirm = arrow_menu("Erase all progress?", ["No", "Yes"])
            if confirm != 1:
                continue
            result = game_service.reset_progress_intent()
        else:
            return
        _show_result("Debug", result, border_style=_BORDER_DEBUG, panel_key="debug")


def _has_active_encounter(encounter_view) -> bool:
    return encounter_view is not None and encounter_view.status == "active"


def run_game_loop(game_service) -> None:
    game_service.load_or_create_player()
    while True:
        clear_screen()
        stats = game_service.get_player_stats_intent()
        status = game_service.encounter_status_intent()
        encounter_view = game_service.get_encounter_view_intent()
        _render_trail_header(stats, status, encounter_view)

        encounter_label = "Resume Encounter" if _has_active_encounter(encounter_view) else "Force Encounter"
        options = ["Walk", encounter_label, "Character", "Inventory", "Equipment", "Debug", "Quit"]
        choice = arrow_menu("What next?", options)

        if choice == 0:
            _show_result("Walk", game_service.simulate_movement_intent())
            if _has_active_encounter(game_service.get_encounter_view_intent()):
                _run_encounter(game_service)
        elif choice == 1:
            if not _has_active_encounter(encounter_view):
                _show_result("Encounter", game_service.force_encounter_intent(), border_style=_BORDER_ENCOUNTER, panel_key="encounter")
            _run_encounter(game_service)
        elif choice == 2:
            clear_screen()
            _render_character(stats)
            _prompt_continue()
        elif choice == 3:
            _run_inventory(game_service)
        elif choice == 4:
            _run_equipment(game_service)
        elif choice == 5:
            _run_debug(game_service)
        else:
            return
