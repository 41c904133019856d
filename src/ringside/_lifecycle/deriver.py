# Area: Lifecycle
"""
ringside._lifecycle.deriver — Status Deriver
============================================

Computes an entity's status from its period records at a given instant.
Derivation is pure: it reads periods and never consults the cached
status column.

Roster priority (first match wins):
    RETIRED -> SUSPENDED -> INJURED -> EMPLOYED -> FUTURE_EMPLOYMENT
    -> RELEASED -> UNEMPLOYED

Group and title priority:
    RETIRED -> ACTIVE -> PENDING_ESTABLISHMENT -> INACTIVE
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Union

from .capabilities import is_roster_type, status_period_kinds
from .enums import ActivityStatus, EmploymentStatus, PeriodKind
from .models import EntityRef, Period

if TYPE_CHECKING:
    from .._store.repo_periods import PeriodRepository

Status = Union[EmploymentStatus, ActivityStatus]


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Everything the validator needs to know about an entity at one instant.

    ``active`` holds, per status period kind, the period active at
    ``as_of``. ``open`` holds the period without an end (started or
    scheduled). Kinds the entity type lacks never appear.
    """

    entity: EntityRef
    as_of: datetime
    status: Status
    active: Dict[PeriodKind, Period] = field(default_factory=dict)
    open: Dict[PeriodKind, Period] = field(default_factory=dict)
    history: Dict[PeriodKind, List[Period]] = field(default_factory=dict)

    def is_active(self, kind: PeriodKind) -> bool:
        return kind in self.active

    def open_and_active(self, kind: PeriodKind) -> Optional[Period]:
        """The open period of ``kind`` if it has already started at ``as_of``."""
        period = self.open.get(kind)
        if period is not None and period.is_active_at(self.as_of):
            return period
        return None

    def scheduled(self, kind: PeriodKind) -> Optional[Period]:
        """The open period of ``kind`` if it starts after ``as_of``."""
        period = self.open.get(kind)
        if period is not None and period.started_at > self.as_of:
            return period
        return None

    def has_started_before(self, kind: PeriodKind) -> bool:
        """True if any period of ``kind`` started at or before ``as_of``."""
        return any(p.has_started_by(self.as_of) for p in self.history.get(kind, []))

    @property
    def is_retired(self) -> bool:
        return self.status in (EmploymentStatus.RETIRED, ActivityStatus.RETIRED)


def active_at(periods: Iterable[Period], as_of: datetime) -> Optional[Period]:
    """Return the period active at ``as_of``, the most recently started if several."""
    candidates = [p for p in periods if p.is_active_at(as_of)]
    if not candidates:
        return None
    return max(candidates, key=lambda p: (p.started_at, p.period_id))


def derive_snapshot(entity: EntityRef, periods: Iterable[Period], as_of: datetime) -> StatusSnapshot:
    """
    Build a snapshot from the entity's periods.

    Args:
        entity: Entity the periods belong to
        periods: Any of the entity's periods; kinds that do not feed the
            entity type's status are ignored
        as_of: Instant to evaluate at

    Returns:
        StatusSnapshot with the derived status
    """
    kinds = status_period_kinds(entity.entity_type)
    history: Dict[PeriodKind, List[Period]] = {}
    for period in periods:
        if period.kind in kinds:
            history.setdefault(period.kind, []).append(period)

    active: Dict[PeriodKind, Period] = {}
    open_periods: Dict[PeriodKind, Period] = {}
    for kind, kind_periods in history.items():
        current = active_at(kind_periods, as_of)
        if current is not None:
            active[kind] = current
        for period in kind_periods:
            if period.is_open:
                open_periods[kind] = period

    if is_roster_type(entity.entity_type):
        status: Status = _roster_status(active, history.get(PeriodKind.EMPLOYMENT, []), as_of)
    else:
        status = _group_status(active, history.get(PeriodKind.ACTIVITY, []), as_of)

    return StatusSnapshot(
        entity=entity,
        as_of=as_of,
        status=status,
        active=active,
        open=open_periods,
        history=history,
    )


def derive_status(entity: EntityRef, periods: Iterable[Period], as_of: datetime) -> Status:
    return derive_snapshot(entity, periods, as_of).status


def _roster_status(
    active: Dict[PeriodKind, Period],
    employments: List[Period],
    as_of: datetime,
) -> EmploymentStatus:
    if PeriodKind.RETIREMENT in active:
        return EmploymentStatus.RETIRED
    if PeriodKind.EMPLOYMENT in active:
        if PeriodKind.SUSPENSION in active:
            return EmploymentStatus.SUSPENDED
        if PeriodKind.INJURY in active:
            return EmploymentStatus.INJURED
        return EmploymentStatus.EMPLOYED
    if any(p.started_at > as_of for p in employments):
        return EmploymentStatus.FUTURE_EMPLOYMENT
    if employments:
        return EmploymentStatus.RELEASED
    return EmploymentStatus.UNEMPLOYED


def _group_status(
    active: Dict[PeriodKind, Period],
    activities: List[Period],
    as_of: datetime,
) -> ActivityStatus:
    if PeriodKind.RETIREMENT in active:
        return ActivityStatus.RETIRED
    if PeriodKind.ACTIVITY in active:
        return ActivityStatus.ACTIVE
    if any(p.started_at > as_of for p in activities):
        return ActivityStatus.PENDING_ESTABLISHMENT
    return ActivityStatus.INACTIVE


class StatusDeriver:
    """
    Reads an entity's periods from the period store and derives its status.

    Usage:
        deriver = StatusDeriver(period_repo)
        deriver.derive_status(Wrestler(1), as_of)
    """

    def __init__(self, periods: "PeriodRepository"):
        self.periods = periods

    def snapshot(self, entity: EntityRef, as_of: datetime) -> StatusSnapshot:
        kinds = status_period_kinds(entity.entity_type)
        return derive_snapshot(entity, self.periods.periods_for(entity, kinds), as_of)

    def derive_status(self, entity: EntityRef, as_of: datetime) -> Status:
        return self.snapshot(entity, as_of).status

    def is_bookable(self, entity: EntityRef, as_of: datetime) -> bool:
        """True iff the entity is EMPLOYED (roster) or ACTIVE (group, title) at ``as_of``."""
        status = self.derive_status(entity, as_of)
        return status in (EmploymentStatus.EMPLOYED, ActivityStatus.ACTIVE)
