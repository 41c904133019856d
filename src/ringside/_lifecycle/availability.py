# Area: Lifecycle
"""
ringside._lifecycle.availability — Availability Resolver
========================================================

Answers "can this competitor, referee or title be used in a match on
date D" by combining the derived status with existing bookings.
"""

import logging
from datetime import datetime
from typing import Optional, Protocol

from .clock import DateLike, coerce_datetime
from .deriver import StatusDeriver
from .enums import ActivityStatus, EmploymentStatus, EntityType
from .membership import groups_of, members_of
from .models import EntityRef

logger = logging.getLogger("ringside.lifecycle.availability")


class BookingQuery(Protocol):
    """Protocol for the booking-conflict collaborator."""

    def is_booked(
        self, entity: EntityRef, on_date: datetime, exclude_match_id: Optional[int] = None
    ) -> bool:
        """True if the entity competes or referees in another match that day."""
        ...

    def is_title_staked(
        self,
        title: EntityRef,
        on_date: datetime,
        event_id: Optional[int] = None,
        exclude_match_id: Optional[int] = None,
    ) -> bool:
        """True if the title is already on the line in another match of the event."""
        ...


# Reason reported for each non-bookable roster status
_STATUS_REASONS = {
    EmploymentStatus.RETIRED: "retired",
    EmploymentStatus.SUSPENDED: "suspended",
    EmploymentStatus.INJURED: "injured",
    EmploymentStatus.FUTURE_EMPLOYMENT: "unemployed",
    EmploymentStatus.RELEASED: "unemployed",
    EmploymentStatus.UNEMPLOYED: "unemployed",
}


class AvailabilityResolver:
    """
    Read-side availability checks for match assembly.

    Usage:
        resolver = AvailabilityResolver(deriver, bookings)
        resolver.is_available(Wrestler(1), "2024-09-01")
    """

    def __init__(self, deriver: StatusDeriver, bookings: Optional[BookingQuery] = None):
        self.deriver = deriver
        self.bookings = bookings

    def unavailability_reason(
        self,
        entity: EntityRef,
        on_date: DateLike,
        event_id: Optional[int] = None,
        exclude_match_id: Optional[int] = None,
    ) -> Optional[str]:
        """
        Explain why an entity cannot be booked.

        Returns:
            None if available, otherwise one of: retired, suspended,
            injured, unemployed, inactive, already_booked, not_bookable
        """
        at = coerce_datetime(on_date)
        entity_type = entity.entity_type

        if entity_type == EntityType.STABLE:
            return "not_bookable"
        if entity_type == EntityType.TITLE:
            return self._title_reason(entity, at, event_id, exclude_match_id)

        status = self.deriver.derive_status(entity, at)
        if status != EmploymentStatus.EMPLOYED:
            return _STATUS_REASONS[status]
        if self._is_booked(entity, at, exclude_match_id):
            return "already_booked"

        if entity_type == EntityType.WRESTLER:
            for team in groups_of(self.deriver.periods, entity, at):
                if team.entity_type == EntityType.TAG_TEAM and self._is_booked(team, at, exclude_match_id):
                    logger.debug(f"{entity} unavailable on {at}: tag team {team} already booked")
                    return "already_booked"

        if entity_type == EntityType.TAG_TEAM:
            for partner in members_of(self.deriver.periods, entity, at):
                reason = self.unavailability_reason(partner, at, event_id, exclude_match_id)
                if reason is not None:
                    logger.debug(f"{entity} unavailable on {at}: partner {partner} {reason}")
                    return reason
        return None

    def is_available(
        self,
        entity: EntityRef,
        on_date: DateLike,
        event_id: Optional[int] = None,
        exclude_match_id: Optional[int] = None,
    ) -> bool:
        return self.unavailability_reason(entity, on_date, event_id, exclude_match_id) is None

    def _is_booked(self, entity: EntityRef, at: datetime, exclude_match_id: Optional[int]) -> bool:
        if self.bookings is None:
            return False
        return self.bookings.is_booked(entity, at, exclude_match_id=exclude_match_id)

    def _title_reason(
        self,
        title: EntityRef,
        at: datetime,
        event_id: Optional[int],
        exclude_match_id: Optional[int],
    ) -> Optional[str]:
        status = self.deriver.derive_status(title, at)
        if status == ActivityStatus.RETIRED:
            return "retired"
        if status != ActivityStatus.ACTIVE:
            return "inactive"
        if self.bookings is not None and self.bookings.is_title_staked(
            title, at, event_id=event_id, exclude_match_id=exclude_match_id
        ):
            return "already_booked"
        return None
