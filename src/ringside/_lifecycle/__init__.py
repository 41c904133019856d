# Area: Lifecycle
"""
Temporal status lifecycle for roster entities, stables and titles.

This package handles:
- Status derivation from period records
- Transition validation and execution with cascades
- Group membership and manager relationships
- Availability, championships and match assembly
"""

from .enums import (
    ActivityStatus,
    Capability,
    EmploymentStatus,
    EntityType,
    ParticipantRole,
    PeriodKind,
    Transition,
)
from .models import (
    ChampionshipSummary,
    EntityRef,
    Manager,
    Period,
    Referee,
    Stable,
    TagTeam,
    Title,
    Wrestler,
)
from .clock import FixedClock, SystemClock
from .deriver import StatusDeriver, StatusSnapshot, derive_snapshot, derive_status
from .events import EventDispatcher, LoggingSink, StatusChanged

__all__ = [
    "ActivityStatus",
    "Capability",
    "EmploymentStatus",
    "EntityType",
    "ParticipantRole",
    "PeriodKind",
    "Transition",
    "ChampionshipSummary",
    "EntityRef",
    "Manager",
    "Period",
    "Referee",
    "Stable",
    "TagTeam",
    "Title",
    "Wrestler",
    "FixedClock",
    "SystemClock",
    "StatusDeriver",
    "StatusSnapshot",
    "derive_snapshot",
    "derive_status",
    "EventDispatcher",
    "LoggingSink",
    "StatusChanged",
]
