# Area: Lifecycle
"""
ringside._lifecycle.transitions — Transition Validator
======================================================

Decides whether a requested transition is legal for an entity at the
effective date. Validity is judged against the status as of that date,
not as of now, so a future-dated employ against an entity that will
still be employed then is rejected.
"""

from datetime import datetime
from typing import Callable, Dict, Optional, Type

from .capabilities import REQUIRED_CAPABILITY, has_capability, is_group_type
from .deriver import StatusDeriver, StatusSnapshot
from .enums import ActivityStatus, EmploymentStatus, PeriodKind, Transition
from .models import EntityRef
from ..errors import (
    CannotBeActivated,
    CannotBeClearedFromInjury,
    CannotBeDeactivated,
    CannotBeDebuted,
    CannotBeDisbanded,
    CannotBeEmployed,
    CannotBeInjured,
    CannotBeReinstated,
    CannotBeReleased,
    CannotBeRetired,
    CannotBeSuspended,
    CannotBeUnretired,
    InvalidTransition,
)

# Error raised for each transition: {transition: exception class}
TRANSITION_ERRORS: Dict[Transition, Type[InvalidTransition]] = {
    Transition.EMPLOY: CannotBeEmployed,
    Transition.RELEASE: CannotBeReleased,
    Transition.INJURE: CannotBeInjured,
    Transition.CLEAR_INJURY: CannotBeClearedFromInjury,
    Transition.SUSPEND: CannotBeSuspended,
    Transition.REINSTATE: CannotBeReinstated,
    Transition.RETIRE: CannotBeRetired,
    Transition.UNRETIRE: CannotBeUnretired,
    Transition.DEBUT: CannotBeDebuted,
    Transition.ACTIVATE: CannotBeActivated,
    Transition.DEACTIVATE: CannotBeDeactivated,
    Transition.DISBAND: CannotBeDisbanded,
}

Rule = Callable[[StatusSnapshot], Optional[str]]


def _employ(s: StatusSnapshot) -> Optional[str]:
    if s.status.is_employed:
        return "already employed"
    return None


def _later_condition(s: StatusSnapshot) -> Optional[str]:
    """Refuse to end employment before an injury or suspension that starts later."""
    for kind in (PeriodKind.INJURY, PeriodKind.SUSPENSION):
        if any(p.started_at > s.as_of for p in s.history.get(kind, [])):
            return f"has a later {kind.value} period"
    return None


def _release(s: StatusSnapshot) -> Optional[str]:
    if s.status == EmploymentStatus.RETIRED:
        return "retired"
    if s.open_and_active(PeriodKind.EMPLOYMENT) is None:
        if s.status == EmploymentStatus.FUTURE_EMPLOYMENT:
            return "employment has not started yet"
        return "not currently employed"
    return _later_condition(s)


def _condition_rule(kind: PeriodKind, noun: str) -> Rule:
    """Rule for opening an injury or suspension."""

    def rule(s: StatusSnapshot) -> Optional[str]:
        if s.status == EmploymentStatus.RETIRED:
            return "retired"
        if s.open_and_active(PeriodKind.EMPLOYMENT) is None:
            return "not currently employed"
        if s.is_active(kind):
            return f"already {noun}"
        if kind in s.open:
            return f"{noun} period already scheduled"
        return None

    return rule


def _clearing_rule(kind: PeriodKind, noun: str) -> Rule:
    """Rule for ending an injury or suspension."""

    def rule(s: StatusSnapshot) -> Optional[str]:
        if s.open_and_active(kind) is None:
            return f"not currently {noun}"
        return None

    return rule


def _retire(s: StatusSnapshot) -> Optional[str]:
    if s.is_retired:
        return "already retired"
    if PeriodKind.RETIREMENT in s.open:
        return "retirement already scheduled"
    if s.status == EmploymentStatus.FUTURE_EMPLOYMENT:
        return "has a future employment scheduled"
    if s.status == ActivityStatus.PENDING_ESTABLISHMENT:
        return "has a future activation scheduled"
    return _later_condition(s)


def _unretire(s: StatusSnapshot) -> Optional[str]:
    if not s.is_retired or s.open_and_active(PeriodKind.RETIREMENT) is None:
        return "not currently retired"
    return None


def _debut(s: StatusSnapshot) -> Optional[str]:
    if s.is_retired:
        return "retired"
    if s.status == ActivityStatus.ACTIVE:
        return "already active"
    if s.has_started_before(PeriodKind.ACTIVITY):
        return "has already debuted"
    return None


def _activate(s: StatusSnapshot) -> Optional[str]:
    if s.is_retired:
        return "retired"
    if s.status == ActivityStatus.ACTIVE:
        return "already active"
    return None


def _deactivate(s: StatusSnapshot) -> Optional[str]:
    if s.open_and_active(PeriodKind.ACTIVITY) is None:
        return "not currently active"
    return None


def _disband(s: StatusSnapshot) -> Optional[str]:
    if not is_group_type(s.entity.entity_type):
        return f"{s.entity.entity_type.label}s have no members to disband"
    return _deactivate(s)


# Precondition per transition: returns the violated rule, or None when legal
TRANSITION_RULES: Dict[Transition, Rule] = {
    Transition.EMPLOY: _employ,
    Transition.RELEASE: _release,
    Transition.INJURE: _condition_rule(PeriodKind.INJURY, "injured"),
    Transition.CLEAR_INJURY: _clearing_rule(PeriodKind.INJURY, "injured"),
    Transition.SUSPEND: _condition_rule(PeriodKind.SUSPENSION, "suspended"),
    Transition.REINSTATE: _clearing_rule(PeriodKind.SUSPENSION, "suspended"),
    Transition.RETIRE: _retire,
    Transition.UNRETIRE: _unretire,
    Transition.DEBUT: _debut,
    Transition.ACTIVATE: _activate,
    Transition.DEACTIVATE: _deactivate,
    Transition.DISBAND: _disband,
}


def check_transition(snapshot: StatusSnapshot, transition: Transition) -> Optional[str]:
    """
    Check a transition against a snapshot.

    Returns:
        The violated precondition, or None if the transition is legal
    """
    entity_type = snapshot.entity.entity_type
    if not has_capability(entity_type, REQUIRED_CAPABILITY[transition]):
        return f"{entity_type.label}s cannot be {TRANSITION_ERRORS[transition].past_tense}"
    return TRANSITION_RULES[transition](snapshot)


def can_transition(snapshot: StatusSnapshot, transition: Transition) -> bool:
    return check_transition(snapshot, transition) is None


def assert_can_transition(snapshot: StatusSnapshot, transition: Transition) -> None:
    """
    Raise the transition's typed error if the transition is not legal.

    Raises:
        InvalidTransition: A CannotBe* subclass naming the current status
            and the violated precondition
    """
    reason = check_transition(snapshot, transition)
    if reason is not None:
        raise TRANSITION_ERRORS[transition](
            snapshot.entity, transition, snapshot.status, reason, snapshot.as_of
        )


class TransitionValidator:
    """
    Guards transitions using the status as of the effective date.

    Usage:
        validator = TransitionValidator(deriver)
        snapshot = validator.assert_can_transition(Wrestler(1), Transition.EMPLOY, date)
    """

    def __init__(self, deriver: StatusDeriver):
        self.deriver = deriver

    def assert_can_transition(
        self, entity: EntityRef, transition: Transition, as_of: datetime
    ) -> StatusSnapshot:
        """
        Validate a transition and return the snapshot it was judged on.

        Raises:
            InvalidTransition: If the precondition is violated
        """
        snapshot = self.deriver.snapshot(entity, as_of)
        assert_can_transition(snapshot, transition)
        return snapshot

    def can_transition(self, entity: EntityRef, transition: Transition, as_of: datetime) -> bool:
        return can_transition(self.deriver.snapshot(entity, as_of), transition)
