# Area: Lifecycle
"""
ringside._lifecycle.orchestrator — Lifecycle Orchestrator
=========================================================

Executes transitions: validates against the status at the effective
date, opens and closes periods, runs cascades on related entities,
records status history, refreshes the cached status and finally emits
StatusChanged events.

Everything up to event delivery runs inside one database transaction.
A precondition violation aborts before any write; any other failure
rolls the whole cascade back. Events are published only after commit.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from .capabilities import is_roster_type
from .cascades import CascadeRegistry, default_cascades
from .clock import Clock, DateLike, resolve
from .deriver import StatusDeriver, StatusSnapshot
from .enums import PeriodKind, Transition
from .events import EventDispatcher, StatusChanged
from .models import EntityRef
from .transitions import TransitionValidator
from ..errors import UnknownEntity

if TYPE_CHECKING:
    from .._store.database import Database
    from .._store.repo_entities import EntityRepository
    from .._store.repo_periods import PeriodRepository
    from .._store.repo_status_changes import StatusChangeRepository

logger = logging.getLogger("ringside.lifecycle.orchestrator")


@dataclass
class TransitionRun:
    """Per-call state collected while one transition and its cascades execute."""

    at: datetime
    events: List[StatusChanged] = field(default_factory=list)
    depth: int = 0

    def touched(self, entity: EntityRef) -> bool:
        return any(event.entity == entity for event in self.events)


class LifecycleOrchestrator:
    """
    Applies lifecycle transitions to entities.

    Usage:
        orchestrator.transition(Wrestler(1), Transition.EMPLOY, "2024-01-01")
    """

    def __init__(
        self,
        db: "Database",
        periods: "PeriodRepository",
        entities: "EntityRepository",
        status_changes: "StatusChangeRepository",
        clock: Clock,
        dispatcher: Optional[EventDispatcher] = None,
        cascades: Optional[CascadeRegistry] = None,
    ):
        self.db = db
        self.periods = periods
        self.entities = entities
        self.status_changes = status_changes
        self.clock = clock
        self.deriver = StatusDeriver(periods)
        self.validator = TransitionValidator(self.deriver)
        self.dispatcher = dispatcher or EventDispatcher()
        self.cascades = cascades or default_cascades()
        self._actions: Dict[Transition, Callable[[StatusSnapshot], None]] = {}
        self._register_actions()

    def _register_actions(self) -> None:
        """Register the core period change for each transition."""
        reg = self._actions.__setitem__
        reg(Transition.EMPLOY, self._employ)
        reg(Transition.RELEASE, self._release)
        reg(Transition.INJURE, lambda s: self._open(s, PeriodKind.INJURY))
        reg(Transition.CLEAR_INJURY, lambda s: self._close(s, PeriodKind.INJURY))
        reg(Transition.SUSPEND, lambda s: self._open(s, PeriodKind.SUSPENSION))
        reg(Transition.REINSTATE, lambda s: self._close(s, PeriodKind.SUSPENSION))
        reg(Transition.RETIRE, self._retire)
        reg(Transition.UNRETIRE, self._unretire)
        reg(Transition.DEBUT, self._activate)
        reg(Transition.ACTIVATE, self._activate)
        reg(Transition.DEACTIVATE, lambda s: self._close(s, PeriodKind.ACTIVITY))
        reg(Transition.DISBAND, lambda s: self._close(s, PeriodKind.ACTIVITY))

    # ── Public API ───────────────────────────────────────────────

    def transition(
        self,
        entity: EntityRef,
        transition: Transition,
        effective_date: Optional[DateLike] = None,
    ) -> List[StatusChanged]:
        """
        Apply a transition and its cascades atomically.

        Args:
            entity: Entity to transition
            transition: Transition to apply
            effective_date: When it takes effect; defaults to the clock's now

        Returns:
            StatusChanged events, the requested entity's first

        Raises:
            InvalidTransition: If a precondition fails (for the entity or
                any cascaded entity)
            UnknownEntity: If the entity does not exist or is deleted
        """
        run = TransitionRun(at=resolve(effective_date, self.clock))
        with self.db.transaction():
            self.apply(entity, transition, run)

        primary = run.events[0]
        logger.info(
            f"{transition.value}: {entity} {primary.from_status.value} -> "
            f"{primary.to_status.value} at {run.at}"
            + (f" (+{len(run.events) - 1} cascaded)" if len(run.events) > 1 else "")
        )
        self.dispatcher.publish(run.events)
        return run.events

    def apply(self, entity: EntityRef, transition: Transition, run: TransitionRun) -> StatusChanged:
        """
        Apply a transition inside the caller's transaction.

        Cascades call this for dependent entities so that their changes
        share the triggering transition's transaction and event batch.
        """
        self.require_entity(entity)
        snapshot = self.validator.assert_can_transition(entity, transition, run.at)

        run.depth += 1
        try:
            self._actions[transition](snapshot)
            self.cascades.run(self, entity, transition, run)
        finally:
            run.depth -= 1

        after = self.deriver.derive_status(entity, run.at)
        self.status_changes.record(
            entity, transition.value, snapshot.status.value, after.value, run.at
        )
        self.refresh_cached_status(entity)

        event = StatusChanged(
            entity=entity,
            from_status=snapshot.status,
            to_status=after,
            at=run.at,
            transition=transition,
            cascade=run.depth > 0,
        )
        # Primary event first, cascaded events in the order they completed
        if run.depth == 0:
            run.events.insert(0, event)
        else:
            run.events.append(event)
            logger.debug(f"Cascade {transition.value} -> {entity} ({after.value})")
        return event

    def can_transition(
        self, entity: EntityRef, transition: Transition, effective_date: Optional[DateLike] = None
    ) -> bool:
        self.require_entity(entity)
        return self.validator.can_transition(entity, transition, resolve(effective_date, self.clock))

    def require_entity(self, entity: EntityRef) -> None:
        """
        Raises:
            UnknownEntity: If the reference does not resolve to a live entity
        """
        if self.entities.get(entity) is None:
            reason = "deleted" if self.entities.get(entity, include_deleted=True) else "not found"
            raise UnknownEntity(entity, reason)

    def refresh_cached_status(self, entity: EntityRef) -> str:
        """Rewrite the entity's cached status as of the clock's now."""
        status = self.deriver.derive_status(entity, self.clock.now()).value
        self.entities.update_status(entity, status)
        return status

    # ── Core actions ─────────────────────────────────────────────

    def _open(self, s: StatusSnapshot, kind: PeriodKind) -> None:
        self.periods.open_period(s.entity, kind, s.as_of)

    def _close(self, s: StatusSnapshot, kind: PeriodKind) -> None:
        self.periods.close_period(s.entity, kind, s.as_of)

    def _close_if_active(self, s: StatusSnapshot, kind: PeriodKind) -> None:
        period = s.open_and_active(kind)
        if period is not None:
            self.periods.close_period_by_id(period, s.as_of)

    def _open_or_reschedule(self, s: StatusSnapshot, kind: PeriodKind) -> None:
        """Move a scheduled period to the effective date, or open a new one."""
        scheduled = s.scheduled(kind)
        if scheduled is not None:
            self.periods.reschedule(scheduled, s.as_of)
        else:
            self._open(s, kind)

    def _employ(self, s: StatusSnapshot) -> None:
        self._close_if_active(s, PeriodKind.RETIREMENT)
        self._open_or_reschedule(s, PeriodKind.EMPLOYMENT)

    def _release(self, s: StatusSnapshot) -> None:
        self._close_if_active(s, PeriodKind.INJURY)
        self._close_if_active(s, PeriodKind.SUSPENSION)
        self._close(s, PeriodKind.EMPLOYMENT)

    def _retire(self, s: StatusSnapshot) -> None:
        if is_roster_type(s.entity.entity_type):
            self._close_if_active(s, PeriodKind.INJURY)
            self._close_if_active(s, PeriodKind.SUSPENSION)
            self._close_if_active(s, PeriodKind.EMPLOYMENT)
        else:
            self._close_if_active(s, PeriodKind.ACTIVITY)
        self._open(s, PeriodKind.RETIREMENT)

    def _unretire(self, s: StatusSnapshot) -> None:
        self._close(s, PeriodKind.RETIREMENT)
        if is_roster_type(s.entity.entity_type):
            self._open(s, PeriodKind.EMPLOYMENT)
        else:
            self._open(s, PeriodKind.ACTIVITY)

    def _activate(self, s: StatusSnapshot) -> None:
        self._open_or_reschedule(s, PeriodKind.ACTIVITY)
