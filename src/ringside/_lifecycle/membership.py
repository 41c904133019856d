# Area: Lifecycle
"""
ringside._lifecycle.membership — Group Membership Manager
=========================================================

Time-boxed membership of wrestlers and tag teams in stables and tag
teams, plus manager relationships with wrestlers and tag teams.

A member may hold at most one open membership per group type: a
wrestler can belong to one stable and one tag team at the same time,
never to two stables. Managers are not direct group members; their
association is derived through the wrestlers and tag teams they manage,
so membership calls for a manager do nothing.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional

from .capabilities import GROUP_MEMBER_TYPES, is_group_type
from .clock import Clock, DateLike, resolve
from .deriver import StatusDeriver
from .enums import EntityType, PeriodKind
from .models import MANAGEABLE_TYPES, EntityRef, management_scope, membership_scope
from ..errors import AmbiguousMember, UnknownEntity

if TYPE_CHECKING:
    from .._store.database import Database
    from .._store.repo_entities import EntityRepository
    from .._store.repo_periods import PeriodRepository

logger = logging.getLogger("ringside.lifecycle.membership")

# Wrestlers per tag team
TAG_TEAM_SIZE = 2


def members_of(periods: "PeriodRepository", group: EntityRef, as_of: datetime) -> List[EntityRef]:
    """Members whose membership of ``group`` is active at ``as_of``."""
    active = periods.periods_with_counterpart(group, PeriodKind.MEMBERSHIP, as_of=as_of)
    return _unique(p.owner for p in active)


def groups_of(periods: "PeriodRepository", member: EntityRef, as_of: datetime) -> List[EntityRef]:
    """Groups whose membership ``member`` holds at ``as_of``."""
    return _unique(
        p.counterpart for p in periods.periods_for(member, [PeriodKind.MEMBERSHIP])
        if p.is_active_at(as_of) and p.counterpart is not None
    )


def managers_of(periods: "PeriodRepository", client: EntityRef, as_of: datetime) -> List[EntityRef]:
    """Managers whose management of ``client`` is active at ``as_of``."""
    active = [
        p for p in periods.periods_for(client, [PeriodKind.MANAGEMENT])
        if p.is_active_at(as_of) and p.counterpart is not None
    ]
    return _unique(p.counterpart for p in active)


def clients_of(periods: "PeriodRepository", manager: EntityRef, as_of: datetime) -> List[EntityRef]:
    """Wrestlers and tag teams ``manager`` manages at ``as_of``."""
    active = periods.periods_with_counterpart(manager, PeriodKind.MANAGEMENT, as_of=as_of)
    return _unique(p.owner for p in active)


def _unique(refs: Iterable[EntityRef]) -> List[EntityRef]:
    seen: List[EntityRef] = []
    for ref in refs:
        if ref not in seen:
            seen.append(ref)
    return seen


@dataclass
class MembershipDiff:
    """
    Result of ``replace_members``.

    Attributes:
        added: Members whose membership was opened
        removed: Members whose membership was closed
        unchanged: Members present before and after
    """

    added: List[EntityRef] = field(default_factory=list)
    removed: List[EntityRef] = field(default_factory=list)
    unchanged: List[EntityRef] = field(default_factory=list)


class MembershipManager:
    """
    Opens and closes membership and management periods.

    Usage:
        manager = MembershipManager(db, periods, entities, clock)
        manager.add_member(Stable(4), Wrestler(1), "2024-01-01")
        manager.replace_members(Stable(4), {Wrestler(1), Wrestler(2)}, "2024-06-01")
    """

    def __init__(
        self,
        db: "Database",
        periods: "PeriodRepository",
        entities: "EntityRepository",
        clock: Clock,
    ):
        self.db = db
        self.periods = periods
        self.entities = entities
        self.clock = clock
        self.deriver = StatusDeriver(periods)

    # ── Group membership ─────────────────────────────────────────

    def add_member(
        self, group: EntityRef, member: EntityRef, joined_at: Optional[DateLike] = None
    ) -> Optional[int]:
        """
        Open a membership of ``member`` in ``group``.

        Returns:
            The membership period id, or None for a manager (no-op)

        Raises:
            UnknownEntity: If either side does not exist
            AmbiguousMember: If the member already has an open membership of
                that group type, cannot join this kind of group, is retired,
                or the group is retired or a full tag team
        """
        at = resolve(joined_at, self.clock)
        if member.entity_type == EntityType.MANAGER:
            logger.debug(f"Ignoring add_member for {member}; managers join through their clients")
            return None

        with self.db.transaction():
            self._require(group, member)
            self._check_can_join(group, member, at)
            period_id = self.periods.open_period(
                member, PeriodKind.MEMBERSHIP, at,
                counterpart=group, scope=membership_scope(group.entity_type),
            )
        logger.info(f"{member} joined {group} at {at}")
        return period_id

    def remove_member(
        self, group: EntityRef, member: EntityRef, left_at: Optional[DateLike] = None
    ) -> None:
        """
        Close the open membership of ``member`` in ``group``.

        Raises:
            AmbiguousMember: If ``member`` is not an open member of ``group``
        """
        at = resolve(left_at, self.clock)
        if member.entity_type == EntityType.MANAGER:
            logger.debug(f"Ignoring remove_member for {member}; managers join through their clients")
            return

        with self.db.transaction():
            self._require(group, member)
            self._close_membership(group, member, at)
        logger.info(f"{member} left {group} at {at}")

    def replace_members(
        self,
        group: EntityRef,
        desired: Iterable[EntityRef],
        effective_date: Optional[DateLike] = None,
    ) -> MembershipDiff:
        """
        Make ``desired`` the group's roster at the effective date.

        Members absent from ``desired`` are removed first, then newly
        present members are added, each as its own period change. A
        desired member whose membership of this group is scheduled to
        start later is moved to the effective date instead of added
        again. The whole replacement is atomic.
        """
        at = resolve(effective_date, self.clock)
        wanted = _unique(m for m in desired if m.entity_type != EntityType.MANAGER)

        with self.db.transaction():
            self._require(group)
            current = members_of(self.periods, group, at)
            scheduled = {
                p.owner: p
                for p in self.periods.periods_with_counterpart(group, PeriodKind.MEMBERSHIP, open_only=True)
                if p.started_at > at
            }
            diff = MembershipDiff(
                added=[m for m in wanted if m not in current],
                removed=[m for m in current if m not in wanted],
                unchanged=[m for m in current if m in wanted],
            )
            for member in diff.removed:
                self._close_membership(group, member, at)
            for member in diff.added:
                if member in scheduled:
                    self.periods.reschedule(scheduled[member], at)
                    continue
                self._require(member)
                self._check_can_join(group, member, at)
                self.periods.open_period(
                    member, PeriodKind.MEMBERSHIP, at,
                    counterpart=group, scope=membership_scope(group.entity_type),
                )

        logger.info(
            f"Replaced members of {group} at {at}: "
            f"+{len(diff.added)} -{len(diff.removed)} ={len(diff.unchanged)}"
        )
        return diff

    def current_members(self, group: EntityRef, as_of: Optional[DateLike] = None) -> List[EntityRef]:
        return members_of(self.periods, group, resolve(as_of, self.clock))

    def current_groups(self, member: EntityRef, as_of: Optional[DateLike] = None) -> List[EntityRef]:
        """Groups ``member`` belongs to at ``as_of`` (at most one per group type)."""
        return groups_of(self.periods, member, resolve(as_of, self.clock))

    # ── Manager relationships ────────────────────────────────────

    def assign_manager(
        self, manager: EntityRef, client: EntityRef, started_at: Optional[DateLike] = None
    ) -> int:
        """
        Start managing a wrestler or tag team.

        Raises:
            AmbiguousMember: If the pair already has an open relationship,
                the client is not manageable, or either side is retired
        """
        at = resolve(started_at, self.clock)
        if manager.entity_type != EntityType.MANAGER:
            raise AmbiguousMember(client, manager, "only managers can manage")
        if client.entity_type not in MANAGEABLE_TYPES:
            raise AmbiguousMember(client, manager, "only wrestlers and tag teams can be managed")

        with self.db.transaction():
            self._require(manager, client)
            for side in (manager, client):
                if self.deriver.snapshot(side, at).is_retired:
                    raise AmbiguousMember(client, manager, f"{side} is retired")
            scope = management_scope(manager)
            if self.periods.open_period_for(client, PeriodKind.MANAGEMENT, scope) is not None:
                raise AmbiguousMember(client, manager, f"already managed by {manager}")
            period_id = self.periods.open_period(
                client, PeriodKind.MANAGEMENT, at, counterpart=manager, scope=scope,
            )
        logger.info(f"{manager} started managing {client} at {at}")
        return period_id

    def remove_manager(
        self, manager: EntityRef, client: EntityRef, ended_at: Optional[DateLike] = None
    ) -> None:
        """
        Raises:
            AmbiguousMember: If ``manager`` does not currently manage ``client``
        """
        at = resolve(ended_at, self.clock)
        with self.db.transaction():
            self._require(manager, client)
            period = self.periods.open_period_for(client, PeriodKind.MANAGEMENT, management_scope(manager))
            if period is None:
                raise AmbiguousMember(client, manager, f"not managed by {manager}")
            self.periods.close_period_by_id(period, at)
        logger.info(f"{manager} stopped managing {client} at {at}")

    def current_managers(self, client: EntityRef, as_of: Optional[DateLike] = None) -> List[EntityRef]:
        return managers_of(self.periods, client, resolve(as_of, self.clock))

    def current_clients(self, manager: EntityRef, as_of: Optional[DateLike] = None) -> List[EntityRef]:
        return clients_of(self.periods, manager, resolve(as_of, self.clock))

    # ── Helpers ──────────────────────────────────────────────────

    def _require(self, *refs: EntityRef) -> None:
        for ref in refs:
            if self.entities.get(ref) is None:
                raise UnknownEntity(ref)

    def _check_can_join(self, group: EntityRef, member: EntityRef, at: datetime) -> None:
        if not is_group_type(group.entity_type):
            raise AmbiguousMember(group, member, f"{group.entity_type.label}s have no members")
        if member.entity_type not in GROUP_MEMBER_TYPES[group.entity_type]:
            raise AmbiguousMember(
                group, member,
                f"{member.entity_type.label}s cannot join a {group.entity_type.label}",
            )

        scope = membership_scope(group.entity_type)
        existing = self.periods.open_period_for(member, PeriodKind.MEMBERSHIP, scope)
        if existing is not None:
            raise AmbiguousMember(
                group, member,
                f"already an open member of {existing.counterpart} since {existing.started_at}",
            )
        if self.deriver.snapshot(group, at).is_retired:
            raise AmbiguousMember(group, member, f"{group} is retired")
        if self.deriver.snapshot(member, at).is_retired:
            raise AmbiguousMember(group, member, f"{member} is retired")
        if group.entity_type == EntityType.TAG_TEAM:
            partners = self.periods.periods_with_counterpart(group, PeriodKind.MEMBERSHIP, open_only=True)
            if len(partners) >= TAG_TEAM_SIZE:
                raise AmbiguousMember(group, member, f"tag team already has {TAG_TEAM_SIZE} wrestlers")

    def _close_membership(self, group: EntityRef, member: EntityRef, at: datetime) -> None:
        period = self.periods.open_period_for(member, PeriodKind.MEMBERSHIP, membership_scope(group.entity_type))
        if period is None or period.counterpart != group:
            raise AmbiguousMember(group, member, f"not an open member of {group}")
        self.periods.close_period_by_id(period, at)
