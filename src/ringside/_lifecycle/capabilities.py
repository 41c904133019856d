# Area: Lifecycle
"""
ringside._lifecycle.capabilities — Entity Capabilities
======================================================

Each entity type is composed from a set of period-backed capabilities
rather than inheriting behaviour. The validator and orchestrator consult
this table to decide which transitions and periods apply.
"""

from typing import Dict, FrozenSet

from .enums import Capability, EntityType, PeriodKind, Transition

_ROSTER = frozenset({
    Capability.HAS_EMPLOYMENT,
    Capability.HAS_INJURY,
    Capability.HAS_SUSPENSION,
    Capability.HAS_RETIREMENT,
})

CAPABILITIES: Dict[EntityType, FrozenSet[Capability]] = {
    EntityType.WRESTLER: _ROSTER,
    EntityType.MANAGER: _ROSTER,
    EntityType.REFEREE: _ROSTER,
    EntityType.TAG_TEAM: frozenset({
        Capability.HAS_EMPLOYMENT,
        Capability.HAS_SUSPENSION,
        Capability.HAS_RETIREMENT,
    }),
    EntityType.STABLE: frozenset({Capability.HAS_ACTIVITY, Capability.HAS_RETIREMENT}),
    EntityType.TITLE: frozenset({Capability.HAS_ACTIVITY, Capability.HAS_RETIREMENT}),
}

# Capability each transition needs from the entity it is applied to
REQUIRED_CAPABILITY: Dict[Transition, Capability] = {
    Transition.EMPLOY: Capability.HAS_EMPLOYMENT,
    Transition.RELEASE: Capability.HAS_EMPLOYMENT,
    Transition.INJURE: Capability.HAS_INJURY,
    Transition.CLEAR_INJURY: Capability.HAS_INJURY,
    Transition.SUSPEND: Capability.HAS_SUSPENSION,
    Transition.REINSTATE: Capability.HAS_SUSPENSION,
    Transition.RETIRE: Capability.HAS_RETIREMENT,
    Transition.UNRETIRE: Capability.HAS_RETIREMENT,
    Transition.DEBUT: Capability.HAS_ACTIVITY,
    Transition.ACTIVATE: Capability.HAS_ACTIVITY,
    Transition.DEACTIVATE: Capability.HAS_ACTIVITY,
    Transition.DISBAND: Capability.HAS_ACTIVITY,
}

CAPABILITY_PERIOD: Dict[Capability, PeriodKind] = {
    Capability.HAS_EMPLOYMENT: PeriodKind.EMPLOYMENT,
    Capability.HAS_INJURY: PeriodKind.INJURY,
    Capability.HAS_SUSPENSION: PeriodKind.SUSPENSION,
    Capability.HAS_RETIREMENT: PeriodKind.RETIREMENT,
    Capability.HAS_ACTIVITY: PeriodKind.ACTIVITY,
}

# Which member types each group type accepts
GROUP_MEMBER_TYPES: Dict[EntityType, FrozenSet[EntityType]] = {
    EntityType.STABLE: frozenset({EntityType.WRESTLER, EntityType.TAG_TEAM}),
    EntityType.TAG_TEAM: frozenset({EntityType.WRESTLER}),
}


def capabilities_of(entity_type: EntityType) -> FrozenSet[Capability]:
    return CAPABILITIES.get(entity_type, frozenset())


def has_capability(entity_type: EntityType, capability: Capability) -> bool:
    return capability in capabilities_of(entity_type)


def status_period_kinds(entity_type: EntityType) -> FrozenSet[PeriodKind]:
    """Period kinds that feed the status of ``entity_type``."""
    return frozenset(CAPABILITY_PERIOD[c] for c in capabilities_of(entity_type))


def is_roster_type(entity_type: EntityType) -> bool:
    return has_capability(entity_type, Capability.HAS_EMPLOYMENT)


def is_group_type(entity_type: EntityType) -> bool:
    return entity_type in GROUP_MEMBER_TYPES
