# Area: Shared
"""
ringside.cli — Command-line interface
=====================================

Provides a CLI entry point for administering a roster database.

Usage:
    python -m ringside init
    python -m ringside create wrestler "John Cena"
    python -m ringside transition wrestler 1 employ --date 2024-01-01
    python -m ringside status wrestler 1
    python -m ringside history wrestler 1
    python -m ringside refresh
    python -m ringside longest-reign 3

Settings come from --config, a .env file, or RINGSIDE_* environment
variables (see ringside._config).
"""

import argparse
import json
import sys
from typing import List, Optional

from ._config import load_config
from ._lifecycle.enums import EntityType, Transition
from ._lifecycle.models import EntityRef
from ._shared import log_engine_error
from .engine import RosterEngine
from .errors import RingsideError

_ENTITY_CHOICES = [t.value for t in EntityType]
_TRANSITION_CHOICES = [t.value for t in Transition] + ["reunite", "pull"]
_ALIASES = {"reunite": Transition.ACTIVATE, "pull": Transition.DEACTIVATE}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ringside",
        description="Ringside - temporal status lifecycle for a wrestling roster",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m ringside create wrestler "John Cena"
  python -m ringside transition wrestler 1 employ --date 2024-01-01
  RINGSIDE_DATABASE_PATH=promo.db python -m ringside status wrestler 1
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init", help="Create the database schema")

    create = commands.add_parser("create", help="Create an entity")
    create.add_argument("entity_type", choices=_ENTITY_CHOICES)
    create.add_argument("name")

    transition = commands.add_parser("transition", help="Apply a lifecycle transition")
    transition.add_argument("entity_type", choices=_ENTITY_CHOICES)
    transition.add_argument("entity_id", type=int)
    transition.add_argument("transition", choices=_TRANSITION_CHOICES)
    transition.add_argument("--date", help="Effective date (ISO format); defaults to now")

    status = commands.add_parser("status", help="Show the derived status")
    status.add_argument("entity_type", choices=_ENTITY_CHOICES)
    status.add_argument("entity_id", type=int)
    status.add_argument("--as-of", dest="as_of", help="Instant to evaluate at (ISO format)")

    history = commands.add_parser("history", help="Show the status history")
    history.add_argument("entity_type", choices=_ENTITY_CHOICES)
    history.add_argument("entity_id", type=int)

    commands.add_parser("refresh", help="Re-derive every cached status")

    longest = commands.add_parser("longest-reign", help="Longest reigning champion of a title")
    longest.add_argument("title_id", type=int)

    return parser.parse_args(argv)


def run_command(engine: RosterEngine, args: argparse.Namespace) -> None:
    """Execute one parsed command and print its result."""
    if args.command == "init":
        print(f"Database ready at {engine.config.database_path}")

    elif args.command == "create":
        ref = engine.create(EntityType(args.entity_type), args.name)
        print(f"{ref.entity_type.value} {ref.entity_id}")

    elif args.command == "transition":
        ref = EntityRef.parse(args.entity_type, args.entity_id)
        transition = _ALIASES.get(args.transition) or Transition(args.transition)
        for event in engine.transition(ref, transition, args.date):
            print(f"{event.entity}: {event.from_status.value} -> {event.to_status.value}")

    elif args.command == "status":
        ref = EntityRef.parse(args.entity_type, args.entity_id)
        print(engine.current_status(ref, args.as_of).value)

    elif args.command == "history":
        ref = EntityRef.parse(args.entity_type, args.entity_id)
        for row in engine.status_history(ref):
            print(f"{row['changed_at']}  {row['transition']:<13} {row['from_status']} -> {row['to_status']}")

    elif args.command == "refresh":
        print(f"{engine.refresh_statuses()} cached status(es) updated")

    elif args.command == "longest-reign":
        summary = engine.get_longest_reigning_champion(EntityRef(EntityType.TITLE, args.title_id))
        print(json.dumps(summary.to_dict() if summary else None, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
        with RosterEngine(config, configure_logging=True) as engine:
            run_command(engine, args)
    except RingsideError as e:
        log_engine_error(e)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
