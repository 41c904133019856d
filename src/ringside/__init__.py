"""
ringside — Temporal Status Lifecycle Engine
===========================================

Tracks wrestlers, managers, referees, tag teams, stables and titles as
they move between employment and activity states. Status is derived
from time-stamped period records, never stored as the source of truth.

Quick Start:
    from ringside import RosterEngine, EngineConfig

    engine = RosterEngine(EngineConfig(database_path="promo.db"))
    wrestler = engine.create_wrestler("Bret Hart")
    engine.employ(wrestler, "2024-01-01")
    engine.injure(wrestler, "2024-06-01")
    engine.current_status(wrestler)          # EmploymentStatus.INJURED

Deterministic time:
    from ringside import FixedClock
    engine = RosterEngine(config, clock=FixedClock("2024-09-01"))

Listening for changes:
    engine.add_listener(lambda event: print(event.to_dict()))
"""

from .engine import RosterEngine
from ._config import EngineConfig, load_config
from ._shared import setup_logging, log_engine_error
from ._lifecycle import (
    ActivityStatus,
    ChampionshipSummary,
    EmploymentStatus,
    EntityRef,
    EntityType,
    FixedClock,
    LoggingSink,
    Manager,
    Period,
    ParticipantRole,
    PeriodKind,
    Referee,
    Stable,
    StatusChanged,
    SystemClock,
    TagTeam,
    Title,
    Transition,
    Wrestler,
)
from ._lifecycle.membership import MembershipDiff
from .errors import (
    RingsideError,
    InvalidTransition,
    CannotBeEmployed,
    CannotBeReleased,
    CannotBeInjured,
    CannotBeClearedFromInjury,
    CannotBeSuspended,
    CannotBeReinstated,
    CannotBeRetired,
    CannotBeUnretired,
    CannotBeDebuted,
    CannotBeActivated,
    CannotBeDeactivated,
    CannotBeDisbanded,
    NoOpenPeriod,
    OverlappingPeriod,
    InvalidDateRange,
    AmbiguousMember,
    UnknownEntity,
    EntityNotAvailable,
    InvalidMatchConfiguration,
    InvalidChampionship,
    ConfigurationError,
)
from .types import (
    StatusChangedPayload,
    StatusHistoryEntry,
    ChampionshipSummaryPayload,
)

__all__ = [
    # Main classes
    "RosterEngine",
    "EngineConfig",
    "load_config",
    "setup_logging",
    "log_engine_error",
    # References and enums
    "EntityRef",
    "EntityType",
    "Wrestler",
    "Manager",
    "Referee",
    "TagTeam",
    "Stable",
    "Title",
    "EmploymentStatus",
    "ActivityStatus",
    "PeriodKind",
    "ParticipantRole",
    "Transition",
    # Clocks
    "FixedClock",
    "SystemClock",
    # Read models and events
    "Period",
    "ChampionshipSummary",
    "MembershipDiff",
    "StatusChanged",
    "LoggingSink",
    # Errors
    "RingsideError",
    "InvalidTransition",
    "CannotBeEmployed",
    "CannotBeReleased",
    "CannotBeInjured",
    "CannotBeClearedFromInjury",
    "CannotBeSuspended",
    "CannotBeReinstated",
    "CannotBeRetired",
    "CannotBeUnretired",
    "CannotBeDebuted",
    "CannotBeActivated",
    "CannotBeDeactivated",
    "CannotBeDisbanded",
    "NoOpenPeriod",
    "OverlappingPeriod",
    "InvalidDateRange",
    "AmbiguousMember",
    "UnknownEntity",
    "EntityNotAvailable",
    "InvalidMatchConfiguration",
    "InvalidChampionship",
    "ConfigurationError",
    # Payload types
    "StatusChangedPayload",
    "StatusHistoryEntry",
    "ChampionshipSummaryPayload",
]
__version__ = "1.0.0"
