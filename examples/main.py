"""
main.py — Walk a small roster through its lifecycle
===================================================

Creates a throwaway database, builds a stable, books a title match and
prints each status change as it happens.

    python examples/main.py
"""

import tempfile
from pathlib import Path

from ringside import (
    EngineConfig,
    FixedClock,
    LoggingSink,
    RosterEngine,
    setup_logging,
)

setup_logging(log_file_path=None, level="INFO")

workdir = Path(tempfile.mkdtemp())
config = EngineConfig(database_path=str(workdir / "promo.db"), log_file=None)
clock = FixedClock("2024-09-01")

with RosterEngine(config, clock=clock, sinks=[LoggingSink()]) as engine:
    # ── Roster ──
    bret = engine.create_wrestler("Bret Hart")
    owen = engine.create_wrestler("Owen Hart")
    davey = engine.create_wrestler("Davey Boy Smith")
    jim = engine.create_manager("Jim Neidhart")
    earl = engine.create_referee("Earl Hebner")
    for person in (bret, owen, davey, jim, earl):
        engine.employ(person, "2024-01-01")

    # ── Stable ──
    foundation = engine.create_stable("Hart Foundation")
    engine.debut(foundation, "2024-02-01")
    engine.replace_members(foundation, [bret, owen], "2024-02-01")
    engine.assign_manager(jim, bret, "2024-02-01")

    # ── Title ──
    belt = engine.create_title("Intercontinental Championship")
    engine.debut(belt, "2024-01-01")
    engine.award_title(belt, bret, "2024-03-01")

    # ── Match ──
    match_id = engine.add_match(event_id=1, event_date="2024-09-15")
    engine.add_competitors(match_id, [[bret], [davey]])
    engine.matches.add_referees(match_id, [earl])
    engine.matches.add_titles(match_id, [belt])

    # ── Injury and retirement ──
    engine.injure(owen, "2024-06-01")
    print("Owen on event day available?", engine.is_available(owen, "2024-09-15"))
    engine.retire(foundation, "2024-08-01")

    for member in (bret, owen):
        print(engine.name_of(member), "->", engine.current_status(member).value)

    summary = engine.get_longest_reigning_champion(belt)
    print("Longest reign:", summary.champion_name, summary.reign_length_in_days, "days")
