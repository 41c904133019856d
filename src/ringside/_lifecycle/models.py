# Area: Lifecycle
"""
ringside._lifecycle.models — Lifecycle Dataclasses
==================================================

Value objects passed between the period store, the status deriver and
the orchestrator.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Union

from .clock import to_timestamp
from .enums import EntityType, PeriodKind

if TYPE_CHECKING:
    from ..types import ChampionshipSummaryPayload


@dataclass(frozen=True)
class EntityRef:
    """
    Typed reference to a tracked entity.

    Attributes:
        entity_type: Kind of entity
        entity_id: Primary key in the entities table
    """

    entity_type: EntityType
    entity_id: int

    def __str__(self) -> str:
        return f"{self.entity_type.label} #{self.entity_id}"

    @classmethod
    def parse(cls, entity_type: Union[str, EntityType], entity_id: Union[str, int]) -> "EntityRef":
        """Build a reference from loose values (CLI arguments, JSON rows)."""
        if not isinstance(entity_type, EntityType):
            entity_type = EntityType(str(entity_type).lower().replace("-", "_"))
        return cls(entity_type, int(entity_id))


def Wrestler(entity_id: int) -> EntityRef:
    return EntityRef(EntityType.WRESTLER, entity_id)


def Manager(entity_id: int) -> EntityRef:
    return EntityRef(EntityType.MANAGER, entity_id)


def Referee(entity_id: int) -> EntityRef:
    return EntityRef(EntityType.REFEREE, entity_id)


def TagTeam(entity_id: int) -> EntityRef:
    return EntityRef(EntityType.TAG_TEAM, entity_id)


def Stable(entity_id: int) -> EntityRef:
    return EntityRef(EntityType.STABLE, entity_id)


def Title(entity_id: int) -> EntityRef:
    return EntityRef(EntityType.TITLE, entity_id)


# Manageable = Wrestler(id) | TagTeam(id)
MANAGEABLE_TYPES = frozenset({EntityType.WRESTLER, EntityType.TAG_TEAM})
CHAMPION_TYPES = MANAGEABLE_TYPES


@dataclass(frozen=True)
class Period:
    """
    A time-boxed record with a start and an optional end.

    Attributes:
        period_id: Row identifier
        owner: Entity that owns the period
        kind: Period kind
        started_at: Start instant (inclusive)
        ended_at: End instant (exclusive), None while open
        counterpart: Group, manager or champion on the other side, if any
        notes: Free-form notes
    """

    period_id: int
    owner: EntityRef
    kind: PeriodKind
    started_at: datetime
    ended_at: Optional[datetime] = None
    counterpart: Optional[EntityRef] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    def is_active_at(self, as_of: datetime) -> bool:
        """True iff ``started_at <= as_of`` and the period has not ended by ``as_of``."""
        if self.started_at > as_of:
            return False
        return self.ended_at is None or self.ended_at > as_of

    def has_started_by(self, as_of: datetime) -> bool:
        return self.started_at <= as_of


@dataclass(frozen=True)
class ChampionshipSummary:
    """
    Read model describing one title reign.

    Attributes:
        title: The title
        champion: Wrestler or tag team that held it
        champion_name: Display name of the champion
        won_at: Start of the reign
        lost_at: End of the reign, None while current
        reign_length_in_days: Whole days between won_at and lost_at (or now)
    """

    title: EntityRef
    champion: EntityRef
    champion_name: str
    won_at: datetime
    lost_at: Optional[datetime]
    reign_length_in_days: int

    def to_dict(self) -> "ChampionshipSummaryPayload":
        return {
            "champion_type": self.champion.entity_type.value,
            "champion_id": self.champion.entity_id,
            "champion_name": self.champion_name,
            "won_at": to_timestamp(self.won_at),
            "lost_at": to_timestamp(self.lost_at) if self.lost_at else None,
            "reign_length_in_days": self.reign_length_in_days,
        }


def management_scope(manager: EntityRef) -> str:
    """Scope key of a management period; one open period per manager."""
    return f"{manager.entity_type.value}:{manager.entity_id}"


def membership_scope(group_type: EntityType) -> str:
    """Scope key of a membership period; one open period per group type."""
    return group_type.value
