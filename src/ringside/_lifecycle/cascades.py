# Area: Lifecycle
"""
ringside._lifecycle.cascades — Cascading Effects
================================================

Side effects a transition has on related entities. Cascades run inside
the triggering transition's transaction after its core period change.
Dependent transitions go back through the orchestrator so they are
validated, recorded and reported like any other transition.
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Tuple

from .enums import EmploymentStatus, EntityType, PeriodKind, Transition
from .membership import members_of, managers_of
from .models import EntityRef

if TYPE_CHECKING:
    from .orchestrator import LifecycleOrchestrator, TransitionRun

logger = logging.getLogger("ringside.lifecycle.cascades")

CascadeFn = Callable[["LifecycleOrchestrator", EntityRef, "TransitionRun"], None]

_ROSTER_TYPES = (EntityType.WRESTLER, EntityType.TAG_TEAM, EntityType.MANAGER, EntityType.REFEREE)


class CascadeRegistry:
    """
    Registry of cascade functions keyed by (transition, entity type).

    Usage:
        registry = CascadeRegistry()
        registry.register(Transition.RETIRE, [EntityType.TITLE], end_current_reign)
        registry.run(orchestrator, Title(3), Transition.RETIRE, run)
    """

    def __init__(self):
        self._cascades: Dict[Tuple[Transition, EntityType], List[CascadeFn]] = {}

    def register(
        self, transition: Transition, entity_types: Iterable[EntityType], fn: CascadeFn
    ) -> None:
        for entity_type in entity_types:
            self._cascades.setdefault((transition, entity_type), []).append(fn)

    def cascades_for(self, entity_type: EntityType, transition: Transition) -> List[CascadeFn]:
        return list(self._cascades.get((transition, entity_type), []))

    def run(
        self,
        orchestrator: "LifecycleOrchestrator",
        entity: EntityRef,
        transition: Transition,
        run: "TransitionRun",
    ) -> None:
        for fn in self.cascades_for(entity.entity_type, transition):
            fn(orchestrator, entity, run)


# ── Relationship endings ─────────────────────────────────────────


def _close_started(orchestrator: "LifecycleOrchestrator", periods, run: "TransitionRun") -> int:
    """Close every period in ``periods`` that has started by the effective date."""
    closed = 0
    for period in periods:
        if period.is_open and period.started_at <= run.at:
            orchestrator.periods.close_period_by_id(period, run.at)
            closed += 1
    return closed


def end_own_relationships(orchestrator: "LifecycleOrchestrator", entity: EntityRef, run: "TransitionRun") -> None:
    """End the entity's group memberships and the management of it."""
    store = orchestrator.periods
    closed = _close_started(orchestrator, store.open_periods_for(entity, PeriodKind.MEMBERSHIP), run)
    closed += _close_started(orchestrator, store.open_periods_for(entity, PeriodKind.MANAGEMENT), run)
    if closed:
        logger.debug(f"Ended {closed} relationship(s) of {entity} at {run.at}")


def end_managed_relationships(orchestrator: "LifecycleOrchestrator", manager: EntityRef, run: "TransitionRun") -> None:
    """End every management period in which ``manager`` is the manager."""
    managed = orchestrator.periods.periods_with_counterpart(manager, PeriodKind.MANAGEMENT, open_only=True)
    closed = _close_started(orchestrator, managed, run)
    if closed:
        logger.debug(f"{manager} stopped managing {closed} client(s) at {run.at}")


def end_group_memberships(orchestrator: "LifecycleOrchestrator", group: EntityRef, run: "TransitionRun") -> None:
    """End every open membership of the group without touching the members' status."""
    memberships = orchestrator.periods.periods_with_counterpart(group, PeriodKind.MEMBERSHIP, open_only=True)
    closed = _close_started(orchestrator, memberships, run)
    if closed:
        logger.debug(f"Ended {closed} membership(s) of {group} at {run.at}")


def end_current_reign(orchestrator: "LifecycleOrchestrator", title: EntityRef, run: "TransitionRun") -> None:
    reign = orchestrator.periods.open_period_for(title, PeriodKind.CHAMPIONSHIP)
    if reign is not None and reign.started_at <= run.at:
        orchestrator.periods.close_period_by_id(reign, run.at)
        logger.debug(f"Reign of {reign.counterpart} on {title} ended at {run.at}")


# ── Dependent transitions ────────────────────────────────────────


def _cascade_to(
    orchestrator: "LifecycleOrchestrator",
    target: EntityRef,
    transition: Transition,
    run: "TransitionRun",
    skip_statuses: Tuple = (),
) -> Optional[bool]:
    """Apply ``transition`` to ``target`` if it is live and the transition is legal."""
    if orchestrator.entities.get(target) is None or run.touched(target):
        return None
    snapshot = orchestrator.deriver.snapshot(target, run.at)
    if snapshot.status in skip_statuses:
        return False
    if not orchestrator.validator.can_transition(target, transition, run.at):
        logger.debug(
            f"Skipping cascaded {transition.value} for {target} ({snapshot.status.value})"
        )
        return False
    orchestrator.apply(target, transition, run)
    return True


def retire_members(orchestrator: "LifecycleOrchestrator", stable: EntityRef, run: "TransitionRun") -> None:
    """Retire each current member wrestler and tag team (one level only)."""
    for member in members_of(orchestrator.periods, stable, run.at):
        _cascade_to(orchestrator, member, Transition.RETIRE, run)


def employ_partners(orchestrator: "LifecycleOrchestrator", tag_team: EntityRef, run: "TransitionRun") -> None:
    """Employ the tag team's current wrestlers who are not employed."""
    for partner in members_of(orchestrator.periods, tag_team, run.at):
        _cascade_to(orchestrator, partner, Transition.EMPLOY, run, skip_statuses=(EmploymentStatus.RETIRED,))


def employ_managers(orchestrator: "LifecycleOrchestrator", client: EntityRef, run: "TransitionRun") -> None:
    """Employ the current managers of a wrestler or tag team who are not employed."""
    for manager in managers_of(orchestrator.periods, client, run.at):
        _cascade_to(orchestrator, manager, Transition.EMPLOY, run, skip_statuses=(EmploymentStatus.RETIRED,))


def default_cascades() -> CascadeRegistry:
    """Build the registry of cascades the engine applies."""
    registry = CascadeRegistry()
    reg = registry.register

    reg(Transition.EMPLOY, [EntityType.TAG_TEAM], employ_partners)
    reg(Transition.EMPLOY, [EntityType.WRESTLER, EntityType.TAG_TEAM], employ_managers)

    reg(Transition.RELEASE, _ROSTER_TYPES, end_own_relationships)
    reg(Transition.RELEASE, [EntityType.MANAGER], end_managed_relationships)

    reg(Transition.RETIRE, _ROSTER_TYPES, end_own_relationships)
    reg(Transition.RETIRE, [EntityType.MANAGER], end_managed_relationships)
    reg(Transition.RETIRE, [EntityType.TAG_TEAM], end_group_memberships)
    reg(Transition.RETIRE, [EntityType.STABLE], retire_members)
    reg(Transition.RETIRE, [EntityType.STABLE], end_group_memberships)
    reg(Transition.RETIRE, [EntityType.TITLE], end_current_reign)

    reg(Transition.DISBAND, [EntityType.STABLE], end_group_memberships)
    return registry
