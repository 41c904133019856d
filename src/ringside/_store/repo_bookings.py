# Area: Store
"""
ringside._store.repo_bookings — Match Bookings Repository
=========================================================

Repository for matches and match_participants. It is the default
booking-conflict collaborator used by the availability resolver.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .database import BaseRepository
from .._lifecycle.clock import to_timestamp
from .._lifecycle.enums import EntityType, ParticipantRole
from .._lifecycle.models import EntityRef


class BookingRepository(BaseRepository):
    """
    Repository for matches and match_participants tables.

    Usage:
        repo = BookingRepository(db)
        match_id = repo.create_match(event_id=7, event_date=date)
        repo.add_participant(match_id, wrestler, ParticipantRole.COMPETITOR, side=0)
    """

    def create_match(self, event_id: int, event_date: datetime) -> int:
        return self._insert(
            "INSERT INTO matches (event_id, event_date) VALUES (?, ?)",
            (event_id, to_timestamp(event_date)),
        )

    def get_match(self, match_id: int) -> Optional[Dict[str, Any]]:
        return self._execute_one("SELECT * FROM matches WHERE id = ?", (match_id,))

    def add_participant(
        self,
        match_id: int,
        entity: EntityRef,
        role: ParticipantRole,
        side: Optional[int] = None,
    ) -> int:
        return self._insert(
            """
            INSERT INTO match_participants (match_id, entity_type, entity_id, role, side)
            VALUES (?, ?, ?, ?, ?)
            """,
            (match_id, entity.entity_type.value, entity.entity_id, role.value, side),
        )

    def participants(
        self, match_id: int, role: Optional[ParticipantRole] = None
    ) -> List[Dict[str, Any]]:
        """
        Get a match's participants.

        Returns:
            List of dicts with keys entity, role, side
        """
        query = "SELECT * FROM match_participants WHERE match_id = ?"
        params: List[Any] = [match_id]
        if role is not None:
            query += " AND role = ?"
            params.append(role.value)
        query += " ORDER BY id"
        rows = self._execute(query, tuple(params), fetch=True) or []
        return [
            {
                "entity": EntityRef(EntityType(row["entity_type"]), row["entity_id"]),
                "role": ParticipantRole(row["role"]),
                "side": row["side"],
            }
            for row in rows
        ]

    def is_booked(
        self,
        entity: EntityRef,
        on_date: datetime,
        exclude_match_id: Optional[int] = None,
    ) -> bool:
        """True if the entity competes or referees in a match on the same calendar day."""
        query = """
            SELECT 1 FROM match_participants p
            JOIN matches m ON m.id = p.match_id
            WHERE p.entity_type = ? AND p.entity_id = ?
              AND p.role IN (?, ?)
              AND date(m.event_date) = date(?)
        """
        params: List[Any] = [
            entity.entity_type.value, entity.entity_id,
            ParticipantRole.COMPETITOR.value, ParticipantRole.REFEREE.value,
            to_timestamp(on_date),
        ]
        if exclude_match_id is not None:
            query += " AND m.id != ?"
            params.append(exclude_match_id)
        return self._execute_one(query + " LIMIT 1", tuple(params)) is not None

    def is_title_staked(
        self,
        title: EntityRef,
        on_date: datetime,
        event_id: Optional[int] = None,
        exclude_match_id: Optional[int] = None,
    ) -> bool:
        """True if the title is already on the line in another match of the event (or day)."""
        query = """
            SELECT 1 FROM match_participants p
            JOIN matches m ON m.id = p.match_id
            WHERE p.entity_type = ? AND p.entity_id = ? AND p.role = ?
        """
        params: List[Any] = [title.entity_type.value, title.entity_id, ParticipantRole.TITLE.value]
        if event_id is not None:
            query += " AND m.event_id = ?"
            params.append(event_id)
        else:
            query += " AND date(m.event_date) = date(?)"
            params.append(to_timestamp(on_date))
        if exclude_match_id is not None:
            query += " AND m.id != ?"
            params.append(exclude_match_id)
        return self._execute_one(query + " LIMIT 1", tuple(params)) is not None
