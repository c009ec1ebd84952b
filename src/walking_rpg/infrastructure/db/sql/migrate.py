"""Create the player storage tables using SQLAlchemy.

Usage examples:
    set WALKRPG_DATABASE_URL=sqlite:///walking_rpg.db
    python -m walking_rpg.infrastructure.db.sql.migrate

    python -m walking_rpg.infrastructure.db.sql.migrate --dry-run
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError


@dataclass(frozen=True)
class MigrationPlan:
    file_path: Path
    statements: list[str]


def _schema_path() -> Path:
    return Path(__file__).resolve().parents[1] / "create_tables.sql"


def _split_sql_statements(sql_text: str) -> list[str]:
    statements: list[str] = []
    buffer: list[str] = []
    in_single = False
    in_line_comment = False
    i = 0
    size = len(sql_text)

    while i < size:
        ch = sql_text[i]
        nxt = sql_text[i + 1] if i + 1 < size else ""

        if in_line_comment:
            if ch == "\n":
                in_line_comment = False
                buffer.append(ch)
            i += 1
            continue

        if not in_single and ch == "-" and nxt == "-":
            in_line_comment = True
            i += 2
            continue

        if ch == "'":
            in_single = not in_single
        if ch == ";" and not in_single:
            statement = "".join(buffer).strip()
            if statement:
                statements.append(statement)
            buffer = []
            i += 1
            continue

        buffer.append(ch)
        i += 1

    trailing = "".join(buffer).strip()
    if trailing:
        statements.append(trailing)
    return statements


def build_migration_plan(script_path: Path | str | None = None) -> MigrationPlan:
    resolved = Path(script_path).resolve() if script_path else _schema_path()
    if not resolved.exists():
        raise FileNotFoundError(f"Migration script not found: {resolved}")
    return MigrationPlan(
        file_path=resolved,
        statements=_split_sql_statements(resolved.read_text(encoding="utf-8")),
    )


def execute_statements(statements: Iterable[str], database_url: str) -> int:
    engine = create_engine(database_url, echo=False, future=True)
    count = 0
    with engine.begin() as conn:
        for count, statement in enumerate(statements, start=1):
            conn.exec_driver_sql(statement)
    engine.dispose()
    return count


def _resolve_database_url(explicit_url: str | None) -> str:
    if explicit_url:
        return explicit_url
    from walking_rpg.infrastructure.db.sql.connection import DEFAULT_DATABASE_URL

    env_url = os.getenv("WALKRPG_DATABASE_URL")
    return env_url or DEFAULT_DATABASE_URL


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create player storage tables using SQLAlchemy")
    parser.add_argument(
        "--script",
        type=str,
        default=None,
        help="Optional SQL script path. Defaults to the bundled create_tables.sql.",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL override (defaults to WALKRPG_DATABASE_URL)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only parse the script and print the statements it would run",
    )
    args = parser.parse_args(argv)

    plan = build_migration_plan(args.script)
    print(f"Resolved {plan.file_path} with {len(plan.statements)} statement(s).")

    if args.dry_run:
        print("Dry run complete. No SQL executed.")
        return

    database_url = _resolve_database_url(args.database_url)
    try:
        executed = execute_statements(plan.statements, database_url)
    except SQLAlchemyError as exc:
        raise SystemExit(
            "Migration execution failed. Verify WALKRPG_DATABASE_URL points to a reachable database instance. "
            f"Details: {exc}"
        ) from exc
    print(f"Executed {executed} statement(s) successfully.")


if __name__ == "__main__":
    main()
