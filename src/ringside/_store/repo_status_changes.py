# Area: Store
"""
ringside._store.repo_status_changes — Status Change Repository
==============================================================

Append-only audit trail of committed transitions.
"""

from datetime import datetime
from typing import Any, Dict, List

from .database import BaseRepository
from .._lifecycle.clock import to_timestamp
from .._lifecycle.models import EntityRef


class StatusChangeRepository(BaseRepository):
    """Repository for status_changes table."""

    def record(
        self,
        entity: EntityRef,
        transition: str,
        from_status: str,
        to_status: str,
        changed_at: datetime,
    ) -> int:
        """
        Append one status change.

        Args:
            entity: Entity that transitioned
            transition: Transition name
            from_status: Status before, at the effective date
            to_status: Status after, at the effective date
            changed_at: Effective date of the transition

        Returns:
            The new row id
        """
        return self._insert(
            """
            INSERT INTO status_changes
            (entity_type, entity_id, transition, from_status, to_status, changed_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (entity.entity_type.value, entity.entity_id, transition,
             from_status, to_status, to_timestamp(changed_at)),
        )

    def history(self, entity: EntityRef) -> List[Dict[str, Any]]:
        """
        Get every recorded change for an entity, in effective-date order.

        Returns:
            List of status change records
        """
        query = """
            SELECT transition, from_status, to_status, changed_at
            FROM status_changes
            WHERE entity_type = ? AND entity_id = ?
            ORDER BY changed_at, id
        """
        return self._execute(
            query, (entity.entity_type.value, entity.entity_id), fetch=True
        ) or []
