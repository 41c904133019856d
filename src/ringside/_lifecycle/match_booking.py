# Area: Lifecycle
"""
ringside._lifecycle.match_booking — Match Assembly
==================================================

Builds matches from available competitors, referees and titles. Every
participant is checked with the availability resolver at the event
date; a rejected participant aborts the whole call.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

from .availability import AvailabilityResolver
from .clock import DateLike, coerce_datetime, parse_timestamp
from .enums import EntityType, ParticipantRole
from .membership import members_of
from .models import EntityRef
from ..errors import EntityNotAvailable, InvalidMatchConfiguration, UnknownEntity

if TYPE_CHECKING:
    from .._store.database import Database
    from .._store.repo_bookings import BookingRepository
    from .._store.repo_entities import EntityRepository

logger = logging.getLogger("ringside.lifecycle.matches")

COMPETITOR_TYPES = frozenset({EntityType.WRESTLER, EntityType.TAG_TEAM})


class MatchBooker:
    """
    Assembles matches on top of the booking repository.

    Usage:
        match_id = booker.add_match(event_id=12, event_date="2024-09-01")
        booker.add_competitors(match_id, [[Wrestler(1)], [Wrestler(2)]])
        booker.add_referees(match_id, [Referee(5)])
        booker.add_titles(match_id, [Title(3)])
    """

    def __init__(
        self,
        db: "Database",
        bookings: "BookingRepository",
        entities: "EntityRepository",
        availability: AvailabilityResolver,
    ):
        self.db = db
        self.bookings = bookings
        self.entities = entities
        self.availability = availability

    def add_match(self, event_id: int, event_date: DateLike) -> int:
        match_id = self.bookings.create_match(event_id, coerce_datetime(event_date))
        logger.info(f"Created match {match_id} for event {event_id}")
        return match_id

    def add_competitors(self, match_id: int, sides: Sequence[Iterable[EntityRef]]) -> None:
        """
        Add competitors grouped by side.

        Args:
            match_id: Match to add to
            sides: One collection of wrestlers/tag teams per side

        Raises:
            InvalidMatchConfiguration: Fewer than two sides, an empty side,
                a non-competitor, or the same wrestler appearing twice
            EntityNotAvailable: If any competitor cannot be booked
        """
        sides = [list(side) for side in sides]
        if len(sides) < 2:
            raise InvalidMatchConfiguration("a match needs at least two sides", match_id)
        if any(not side for side in sides):
            raise InvalidMatchConfiguration("every side needs at least one competitor", match_id)

        with self.db.transaction():
            match = self._require_match(match_id)
            on_date = parse_timestamp(match["event_date"])
            existing = [p["entity"] for p in self.bookings.participants(match_id, ParticipantRole.COMPETITOR)]

            seen: List[EntityRef] = []
            for competitor in [c for side in sides for c in side] + existing:
                if competitor.entity_type not in COMPETITOR_TYPES:
                    raise InvalidMatchConfiguration(f"{competitor} cannot compete", match_id)
                for wrestler in self._wrestlers_in(competitor, on_date):
                    if wrestler in seen:
                        raise InvalidMatchConfiguration(f"{wrestler} appears more than once", match_id)
                    seen.append(wrestler)

            for index, side in enumerate(sides):
                for competitor in side:
                    self._require_available(competitor, match, on_date)
                    self.bookings.add_participant(match_id, competitor, ParticipantRole.COMPETITOR, side=index)
        logger.info(f"Added {sum(len(s) for s in sides)} competitor(s) to match {match_id}")

    def add_referees(self, match_id: int, referees: Iterable[EntityRef]) -> None:
        self._add_role(match_id, referees, ParticipantRole.REFEREE, EntityType.REFEREE)

    def add_titles(self, match_id: int, titles: Iterable[EntityRef]) -> None:
        self._add_role(match_id, titles, ParticipantRole.TITLE, EntityType.TITLE)

    def participants(self, match_id: int, role: Optional[ParticipantRole] = None) -> List[Dict[str, Any]]:
        self._require_match(match_id)
        return self.bookings.participants(match_id, role)

    def _add_role(
        self,
        match_id: int,
        entities: Iterable[EntityRef],
        role: ParticipantRole,
        entity_type: EntityType,
    ) -> None:
        entities = list(entities)
        with self.db.transaction():
            match = self._require_match(match_id)
            on_date = parse_timestamp(match["event_date"])
            seen = [p["entity"] for p in self.bookings.participants(match_id, role)]
            for entity in entities:
                if entity.entity_type != entity_type:
                    raise InvalidMatchConfiguration(f"{entity} cannot be added as {role.value}", match_id)
                if entity in seen:
                    raise InvalidMatchConfiguration(f"{entity} appears more than once", match_id)
                seen.append(entity)
                self._require_available(entity, match, on_date)
                self.bookings.add_participant(match_id, entity, role)
        logger.info(f"Added {len(entities)} {role.value}(s) to match {match_id}")

    def _require_match(self, match_id: int) -> Dict[str, Any]:
        match = self.bookings.get_match(match_id)
        if match is None:
            raise UnknownEntity(f"Match #{match_id}")
        return match

    def _require_available(self, entity: EntityRef, match: Dict[str, Any], on_date) -> None:
        if self.entities.get(entity) is None:
            raise UnknownEntity(entity)
        reason = self.availability.unavailability_reason(
            entity, on_date, event_id=match["event_id"], exclude_match_id=match["id"]
        )
        if reason is not None:
            raise EntityNotAvailable(entity, reason, on_date)

    def _wrestlers_in(self, competitor: EntityRef, on_date) -> List[EntityRef]:
        """A wrestler stands for itself; a tag team for itself and its partners."""
        if competitor.entity_type != EntityType.TAG_TEAM:
            return [competitor]
        return [competitor] + members_of(self.availability.deriver.periods, competitor, on_date)
