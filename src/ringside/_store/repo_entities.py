# Area: Store
"""
ringside._store.repo_entities — Entities Repository
===================================================

Repository for the entities table: identity, display name, the cached
status column and soft-delete markers.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .database import BaseRepository
from .._lifecycle.clock import to_timestamp
from .._lifecycle.enums import EntityType
from .._lifecycle.models import EntityRef


class EntityRepository(BaseRepository):
    """
    Repository for entities table.

    The ``status`` column is a denormalized cache of the derived status.
    It is rewritten on every transition and never read by lifecycle logic.
    """

    def create(self, entity_type: EntityType, name: str, status: Optional[str] = None) -> EntityRef:
        """
        Insert a new entity.

        Args:
            entity_type: Kind of entity
            name: Display name
            status: Initial cached status

        Returns:
            Reference to the new entity
        """
        entity_id = self._insert(
            "INSERT INTO entities (entity_type, name, status) VALUES (?, ?, ?)",
            (entity_type.value, name, status),
        )
        return EntityRef(entity_type, entity_id)

    def get(self, ref: EntityRef, include_deleted: bool = False) -> Optional[Dict[str, Any]]:
        """
        Get an entity row by reference.

        Returns:
            Entity record dict or None if not found (or soft-deleted)
        """
        query = "SELECT * FROM entities WHERE id = ? AND entity_type = ?"
        if not include_deleted:
            query += " AND deleted_at IS NULL"
        return self._execute_one(query, (ref.entity_id, ref.entity_type.value))

    def exists(self, ref: EntityRef) -> bool:
        return self.get(ref) is not None

    def name_of(self, ref: EntityRef) -> Optional[str]:
        row = self.get(ref, include_deleted=True)
        return row["name"] if row else None

    def update_status(self, ref: EntityRef, status: str) -> None:
        """Rewrite the cached status column."""
        self._execute(
            "UPDATE entities SET status = ? WHERE id = ? AND entity_type = ?",
            (status, ref.entity_id, ref.entity_type.value),
        )

    def mark_deleted(self, ref: EntityRef, deleted_at: datetime) -> None:
        self._execute(
            "UPDATE entities SET deleted_at = ? WHERE id = ? AND entity_type = ?",
            (to_timestamp(deleted_at), ref.entity_id, ref.entity_type.value),
        )

    def restore(self, ref: EntityRef) -> None:
        self._execute(
            "UPDATE entities SET deleted_at = NULL WHERE id = ? AND entity_type = ?",
            (ref.entity_id, ref.entity_type.value),
        )

    def list_refs(
        self, entity_type: Optional[EntityType] = None, include_deleted: bool = False
    ) -> List[EntityRef]:
        """
        List entity references, oldest first.

        Args:
            entity_type: Restrict to one kind of entity
            include_deleted: Include soft-deleted entities
        """
        query = "SELECT id, entity_type FROM entities WHERE 1 = 1"
        params: List[Any] = []
        if entity_type is not None:
            query += " AND entity_type = ?"
            params.append(entity_type.value)
        if not include_deleted:
            query += " AND deleted_at IS NULL"
        query += " ORDER BY id"
        rows = self._execute(query, tuple(params), fetch=True) or []
        return [EntityRef(EntityType(row["entity_type"]), row["id"]) for row in rows]
