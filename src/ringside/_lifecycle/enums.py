# Area: Lifecycle
"""
ringside._lifecycle.enums — Lifecycle Enums
===========================================

Defines the entity types, period kinds, derived statuses and transition
names shared by every lifecycle component.
"""

from enum import Enum


class EntityType(Enum):
    """Kinds of entity the engine tracks."""
    WRESTLER = "wrestler"
    MANAGER = "manager"
    REFEREE = "referee"
    TAG_TEAM = "tag_team"
    STABLE = "stable"
    TITLE = "title"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class PeriodKind(Enum):
    """
    Kinds of time-boxed period records.

    EMPLOYMENT, INJURY, SUSPENSION, RETIREMENT and ACTIVITY are status periods:
    at most one may be open per owner. MEMBERSHIP is scoped by group type,
    MANAGEMENT by manager, CHAMPIONSHIP by title.
    """
    EMPLOYMENT = "employment"
    INJURY = "injury"
    SUSPENSION = "suspension"
    RETIREMENT = "retirement"
    ACTIVITY = "activity"
    MEMBERSHIP = "membership"
    MANAGEMENT = "management"
    CHAMPIONSHIP = "championship"


class EmploymentStatus(Enum):
    """
    Derived status of a roster entity (wrestler, manager, referee, tag team).

    Priority, highest first:
    RETIRED -> SUSPENDED -> INJURED -> EMPLOYED -> FUTURE_EMPLOYMENT
    -> RELEASED -> UNEMPLOYED

    EMPLOYED is the bookable state. SUSPENDED and INJURED both imply an
    active employment period.
    """
    RETIRED = "retired"
    SUSPENDED = "suspended"
    INJURED = "injured"
    EMPLOYED = "employed"
    FUTURE_EMPLOYMENT = "future_employment"
    RELEASED = "released"
    UNEMPLOYED = "unemployed"

    @property
    def is_employed(self) -> bool:
        return self in (
            EmploymentStatus.EMPLOYED,
            EmploymentStatus.INJURED,
            EmploymentStatus.SUSPENDED,
        )


class ActivityStatus(Enum):
    """
    Derived status of a group entity (stable) or title.

    Priority, highest first:
    RETIRED -> ACTIVE -> PENDING_ESTABLISHMENT -> INACTIVE
    """
    RETIRED = "retired"
    ACTIVE = "active"
    PENDING_ESTABLISHMENT = "pending_establishment"
    INACTIVE = "inactive"


class Transition(Enum):
    """Named lifecycle transitions."""
    EMPLOY = "employ"
    RELEASE = "release"
    INJURE = "injure"
    CLEAR_INJURY = "clear_injury"
    SUSPEND = "suspend"
    REINSTATE = "reinstate"
    RETIRE = "retire"
    UNRETIRE = "unretire"
    DEBUT = "debut"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    DISBAND = "disband"

    @property
    def verb(self) -> str:
        return self.value.replace("_", " ")


class Capability(Enum):
    """Period-backed capabilities an entity type is composed of."""
    HAS_EMPLOYMENT = "has_employment"
    HAS_INJURY = "has_injury"
    HAS_SUSPENSION = "has_suspension"
    HAS_RETIREMENT = "has_retirement"
    HAS_ACTIVITY = "has_activity"


class ParticipantRole(Enum):
    """Roles an entity can be booked in for a match."""
    COMPETITOR = "competitor"
    REFEREE = "referee"
    TITLE = "title"
