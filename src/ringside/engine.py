# Area: Engine
"""
ringside.engine — Roster Engine
===============================

Public facade wiring the period store, lifecycle orchestrator,
membership manager, availability resolver, championships and match
booking together.

Usage:
    from ringside import RosterEngine, FixedClock

    engine = RosterEngine(EngineConfig(database_path="promo.db"))
    cena = engine.create_wrestler("John Cena")
    engine.employ(cena, "2024-01-01")
    engine.current_status(cena)        # EmploymentStatus.EMPLOYED
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from ._config import EngineConfig
from ._lifecycle.availability import AvailabilityResolver, BookingQuery
from ._lifecycle.capabilities import is_roster_type
from ._lifecycle.championships import ChampionshipService
from ._lifecycle.clock import Clock, DateLike, SystemClock, resolve
from ._lifecycle.deriver import Status, StatusSnapshot
from ._lifecycle.enums import ActivityStatus, EmploymentStatus, EntityType, Transition
from ._lifecycle.events import EventDispatcher, Listener, StatusChanged
from ._lifecycle.match_booking import MatchBooker
from ._lifecycle.membership import MembershipDiff, MembershipManager
from ._lifecycle.models import ChampionshipSummary, EntityRef, Period
from ._lifecycle.orchestrator import LifecycleOrchestrator
from ._shared import setup_logging
from ._store import (
    BookingRepository,
    Database,
    EntityRepository,
    PeriodRepository,
    StatusChangeRepository,
    init_database,
)
from .errors import UnknownEntity
from .types import StatusHistoryEntry

logger = logging.getLogger("ringside")


class RosterEngine:
    """
    Entry point for recording and querying roster lifecycles.

    Every transition method takes an optional effective date (date,
    datetime or ISO string) defaulting to the clock's current instant,
    and returns the entity it was applied to.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        clock: Optional[Clock] = None,
        bookings: Optional[BookingQuery] = None,
        sinks: Iterable[Listener] = (),
        configure_logging: bool = False,
    ):
        self.config = config or EngineConfig()
        if configure_logging:
            setup_logging(log_file_path=self.config.log_file, level=self.config.log_level)

        self.clock: Clock = clock or SystemClock()

        init_database(self.config.database_path)
        self.db = Database(self.config.database_path, self.config.busy_timeout_seconds)
        self.periods = PeriodRepository(self.db)
        self.entities = EntityRepository(self.db)
        self.status_changes = StatusChangeRepository(self.db)
        self.booking_repo = BookingRepository(self.db)

        self.dispatcher = EventDispatcher()
        for sink in sinks:
            self.dispatcher.register_listener(sink)

        self.orchestrator = LifecycleOrchestrator(
            self.db, self.periods, self.entities, self.status_changes,
            self.clock, self.dispatcher,
        )
        self.deriver = self.orchestrator.deriver
        self.membership = MembershipManager(self.db, self.periods, self.entities, self.clock)
        self.availability = AvailabilityResolver(self.deriver, bookings or self.booking_repo)
        self.championships = ChampionshipService(self.db, self.periods, self.entities, self.clock)
        self.matches = MatchBooker(self.db, self.booking_repo, self.entities, self.availability)

        logger.debug(f"Engine ready on {self.config.database_path}")

    # ── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "RosterEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def add_listener(self, listener: Listener) -> None:
        """Register a StatusChanged listener (sink object or callable)."""
        self.dispatcher.register_listener(listener)

    # ── Entities ─────────────────────────────────────────────────

    def create_wrestler(self, name: str) -> EntityRef:
        return self._create(EntityType.WRESTLER, name)

    def create_manager(self, name: str) -> EntityRef:
        return self._create(EntityType.MANAGER, name)

    def create_referee(self, name: str) -> EntityRef:
        return self._create(EntityType.REFEREE, name)

    def create_tag_team(self, name: str) -> EntityRef:
        return self._create(EntityType.TAG_TEAM, name)

    def create_stable(self, name: str) -> EntityRef:
        return self._create(EntityType.STABLE, name)

    def create_title(self, name: str) -> EntityRef:
        return self._create(EntityType.TITLE, name)

    def create(self, entity_type: EntityType, name: str) -> EntityRef:
        return self._create(entity_type, name)

    def _create(self, entity_type: EntityType, name: str) -> EntityRef:
        initial = EmploymentStatus.UNEMPLOYED if is_roster_type(entity_type) else ActivityStatus.INACTIVE
        ref = self.entities.create(entity_type, name, initial.value)
        logger.info(f"Created {ref} ({name})")
        return ref

    def name_of(self, entity: EntityRef) -> str:
        self.orchestrator.require_entity(entity)
        return self.entities.name_of(entity)

    def delete(self, entity: EntityRef, deleted_at: Optional[DateLike] = None) -> None:
        """Soft-delete an entity. Its periods are kept for history."""
        with self.db.transaction():
            self.orchestrator.require_entity(entity)
            self.entities.mark_deleted(entity, resolve(deleted_at, self.clock))
        logger.info(f"Deleted {entity}")

    def restore(self, entity: EntityRef) -> Status:
        """
        Undo a soft delete and re-derive the cached status from the
        remaining periods.

        Raises:
            UnknownEntity: If the entity never existed
        """
        with self.db.transaction():
            if self.entities.get(entity, include_deleted=True) is None:
                raise UnknownEntity(entity)
            self.entities.restore(entity)
            self.orchestrator.refresh_cached_status(entity)
        logger.info(f"Restored {entity}")
        return self.current_status(entity)

    # ── Transitions ──────────────────────────────────────────────

    def transition(
        self, entity: EntityRef, transition: Transition, effective_date: Optional[DateLike] = None
    ) -> List[StatusChanged]:
        """Apply any transition; returns the StatusChanged events it produced."""
        return self.orchestrator.transition(entity, transition, effective_date)

    def _do(self, entity: EntityRef, transition: Transition, effective_date: Optional[DateLike]) -> EntityRef:
        self.orchestrator.transition(entity, transition, effective_date)
        return entity

    def employ(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.EMPLOY, effective_date)

    def release(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.RELEASE, effective_date)

    def injure(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.INJURE, effective_date)

    def clear_injury(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.CLEAR_INJURY, effective_date)

    def suspend(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.SUSPEND, effective_date)

    def reinstate(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.REINSTATE, effective_date)

    def retire(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.RETIRE, effective_date)

    def unretire(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.UNRETIRE, effective_date)

    def debut(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.DEBUT, effective_date)

    def activate(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.ACTIVATE, effective_date)

    reunite = activate

    def deactivate(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.DEACTIVATE, effective_date)

    pull = deactivate

    def disband(self, entity: EntityRef, effective_date: Optional[DateLike] = None) -> EntityRef:
        return self._do(entity, Transition.DISBAND, effective_date)

    # ── Status ───────────────────────────────────────────────────

    def current_status(self, entity: EntityRef, as_of: Optional[DateLike] = None) -> Status:
        """Derive the entity's status from its periods (never from the cache)."""
        self.orchestrator.require_entity(entity)
        return self.deriver.derive_status(entity, resolve(as_of, self.clock))

    def status_snapshot(self, entity: EntityRef, as_of: Optional[DateLike] = None) -> StatusSnapshot:
        self.orchestrator.require_entity(entity)
        return self.deriver.snapshot(entity, resolve(as_of, self.clock))

    def cached_status(self, entity: EntityRef) -> Optional[str]:
        """The denormalized status column, for fast listing only."""
        row = self.entities.get(entity, include_deleted=True)
        if row is None:
            raise UnknownEntity(entity)
        return row["status"]

    def status_history(self, entity: EntityRef) -> List[StatusHistoryEntry]:
        if self.entities.get(entity, include_deleted=True) is None:
            raise UnknownEntity(entity)
        return self.status_changes.history(entity)

    def periods_of(self, entity: EntityRef) -> List[Period]:
        return self.periods.periods_for(entity)

    def refresh_statuses(self) -> int:
        """
        Re-derive every cached status as of the clock's now.

        Future-dated periods that have since started leave the cache
        stale until this runs.

        Returns:
            Number of entities whose cached status changed
        """
        changed = 0
        with self.db.transaction():
            for ref in self.entities.list_refs():
                before = self.entities.get(ref)["status"]
                if self.orchestrator.refresh_cached_status(ref) != before:
                    changed += 1
        logger.info(f"Refreshed cached statuses ({changed} changed)")
        return changed

    # ── Membership ───────────────────────────────────────────────

    def add_member(self, group: EntityRef, member: EntityRef, joined_at: Optional[DateLike] = None) -> Optional[int]:
        return self.membership.add_member(group, member, joined_at)

    def remove_member(self, group: EntityRef, member: EntityRef, left_at: Optional[DateLike] = None) -> None:
        self.membership.remove_member(group, member, left_at)

    def replace_members(
        self, group: EntityRef, desired: Iterable[EntityRef], effective_date: Optional[DateLike] = None
    ) -> MembershipDiff:
        return self.membership.replace_members(group, desired, effective_date)

    def current_members(self, group: EntityRef, as_of: Optional[DateLike] = None) -> List[EntityRef]:
        return self.membership.current_members(group, as_of)

    def assign_manager(self, manager: EntityRef, client: EntityRef, started_at: Optional[DateLike] = None) -> int:
        return self.membership.assign_manager(manager, client, started_at)

    def remove_manager(self, manager: EntityRef, client: EntityRef, ended_at: Optional[DateLike] = None) -> None:
        self.membership.remove_manager(manager, client, ended_at)

    def current_managers(self, client: EntityRef, as_of: Optional[DateLike] = None) -> List[EntityRef]:
        return self.membership.current_managers(client, as_of)

    # ── Availability ─────────────────────────────────────────────

    def is_available(self, entity: EntityRef, on_date: Optional[DateLike] = None, event_id: Optional[int] = None) -> bool:
        self.orchestrator.require_entity(entity)
        return self.availability.is_available(entity, resolve(on_date, self.clock), event_id)

    def add_match(self, event_id: int, event_date: DateLike) -> int:
        return self.matches.add_match(event_id, event_date)

    def add_competitors(self, match_id: int, sides: Sequence[Iterable[EntityRef]]) -> None:
        self.matches.add_competitors(match_id, sides)

    # ── Championships ────────────────────────────────────────────

    def award_title(self, title: EntityRef, champion: EntityRef, won_at: Optional[DateLike] = None) -> int:
        return self.championships.award_title(title, champion, won_at)

    def vacate_title(self, title: EntityRef, vacated_at: Optional[DateLike] = None) -> Period:
        return self.championships.vacate_title(title, vacated_at)

    def current_champion(self, title: EntityRef, as_of: Optional[DateLike] = None) -> Optional[EntityRef]:
        return self.championships.current_champion(title, as_of)

    def title_reigns(self, title: EntityRef) -> List[ChampionshipSummary]:
        return self.championships.title_reigns(title)

    def get_longest_reigning_champion(self, title: EntityRef) -> Optional[ChampionshipSummary]:
        self.orchestrator.require_entity(title)
        return self.championships.longest_reigning_champion(title)
