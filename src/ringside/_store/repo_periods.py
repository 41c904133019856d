# Area: Store
"""
ringside._store.repo_periods — Period Store
===========================================

Generic storage for "has a start, optionally has an end" records.
Every period kind shares one table; the open-period invariant is
checked before each write and enforced again by a partial unique index.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .database import BaseRepository
from .._lifecycle.clock import parse_timestamp, to_timestamp
from .._lifecycle.enums import EntityType, PeriodKind
from .._lifecycle.models import EntityRef, Period
from ..errors import InvalidDateRange, NoOpenPeriod, OverlappingPeriod

logger = logging.getLogger("ringside.store.periods")


class PeriodRepository(BaseRepository):
    """
    Repository for the periods table.

    ``started_at`` is inclusive and ``ended_at`` exclusive: a period is
    active at ``as_of`` iff ``started_at <= as_of`` and it has not ended
    by ``as_of``.
    """

    def open_period(
        self,
        owner: EntityRef,
        kind: PeriodKind,
        started_at: datetime,
        *,
        counterpart: Optional[EntityRef] = None,
        scope: str = "",
        ended_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> int:
        """
        Open a new period (or record a closed one when ``ended_at`` is given).

        Args:
            owner: Entity owning the period
            kind: Period kind
            started_at: Start instant
            counterpart: Group, manager or champion on the other side
            scope: Scope within which only one period may be open
            ended_at: Optional end instant for backfilled history
            notes: Free-form notes

        Returns:
            The new period id

        Raises:
            InvalidDateRange: If ended_at precedes started_at
            OverlappingPeriod: If an open period exists in the scope or the
                new range overlaps an existing period
        """
        if ended_at is not None and ended_at < started_at:
            raise InvalidDateRange(started_at, ended_at)

        if ended_at is None and self.open_period_for(owner, kind, scope) is not None:
            raise OverlappingPeriod(owner, kind, started_at, "an open period already exists")
        self._assert_no_overlap(owner, kind, scope, started_at, ended_at)

        query = """
            INSERT INTO periods
            (owner_type, owner_id, kind, scope, counterpart_type, counterpart_id,
             started_at, ended_at, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        params = (
            owner.entity_type.value,
            owner.entity_id,
            kind.value,
            scope,
            counterpart.entity_type.value if counterpart else None,
            counterpart.entity_id if counterpart else None,
            to_timestamp(started_at),
            to_timestamp(ended_at) if ended_at is not None else None,
            notes,
        )
        try:
            period_id = self._insert(query, params)
        except sqlite3.IntegrityError as exc:
            raise OverlappingPeriod(owner, kind, started_at, str(exc)) from exc

        logger.debug(f"Opened {kind.value} period {period_id} for {owner} at {started_at}")
        return period_id

    def close_period(
        self,
        owner: EntityRef,
        kind: PeriodKind,
        ended_at: datetime,
        scope: str = "",
    ) -> Period:
        """
        Close the single open period of ``kind`` in ``scope``.

        Raises:
            NoOpenPeriod: If no period of that kind is open
            InvalidDateRange: If ended_at precedes the period's start
        """
        period = self.open_period_for(owner, kind, scope)
        if period is None:
            raise NoOpenPeriod(owner, kind, scope)
        return self.close_period_by_id(period, ended_at)

    def close_period_by_id(self, period: Period, ended_at: datetime) -> Period:
        """Close a specific open period and return its closed form."""
        if not period.is_open:
            raise NoOpenPeriod(period.owner, period.kind)
        if ended_at < period.started_at:
            raise InvalidDateRange(period.started_at, ended_at)

        self._execute(
            "UPDATE periods SET ended_at = ? WHERE id = ? AND ended_at IS NULL",
            (to_timestamp(ended_at), period.period_id),
        )
        logger.debug(
            f"Closed {period.kind.value} period {period.period_id} for {period.owner} at {ended_at}"
        )
        return self.get_period(period.period_id)

    def reschedule(self, period: Period, started_at: datetime) -> Period:
        """
        Move the start of an open, not yet started period.

        Raises:
            OverlappingPeriod: If the new start overlaps another period
        """
        if not period.is_open:
            raise OverlappingPeriod(
                period.owner, period.kind, started_at, "only open periods can be rescheduled"
            )
        self._assert_no_overlap(
            period.owner, period.kind, self._scope_of(period.period_id),
            started_at, None, exclude_id=period.period_id,
        )
        self._execute(
            "UPDATE periods SET started_at = ? WHERE id = ?",
            (to_timestamp(started_at), period.period_id),
        )
        logger.debug(
            f"Rescheduled {period.kind.value} period {period.period_id} "
            f"from {period.started_at} to {started_at}"
        )
        return self.get_period(period.period_id)

    def get_period(self, period_id: int) -> Optional[Period]:
        row = self._execute_one("SELECT * FROM periods WHERE id = ?", (period_id,))
        return _row_to_period(row) if row else None

    def open_period_for(
        self, owner: EntityRef, kind: PeriodKind, scope: str = ""
    ) -> Optional[Period]:
        """Return the open period (started or scheduled) of ``kind`` in ``scope``."""
        row = self._execute_one(
            """
            SELECT * FROM periods
            WHERE owner_type = ? AND owner_id = ? AND kind = ? AND scope = ?
              AND ended_at IS NULL
            """,
            (owner.entity_type.value, owner.entity_id, kind.value, scope),
        )
        return _row_to_period(row) if row else None

    def current_period(
        self,
        owner: EntityRef,
        kind: PeriodKind,
        as_of: datetime,
        scope: Optional[str] = None,
    ) -> Optional[Period]:
        """
        Return the period active at ``as_of``, the most recently started if
        several qualify. ``scope=None`` searches every scope.
        """
        query = """
            SELECT * FROM periods
            WHERE owner_type = ? AND owner_id = ? AND kind = ?
              AND started_at <= ? AND (ended_at IS NULL OR ended_at > ?)
        """
        ts = to_timestamp(as_of)
        params: List[Any] = [owner.entity_type.value, owner.entity_id, kind.value, ts, ts]
        if scope is not None:
            query += " AND scope = ?"
            params.append(scope)
        query += " ORDER BY started_at DESC, id DESC LIMIT 1"
        row = self._execute_one(query, tuple(params))
        return _row_to_period(row) if row else None

    def periods_in_range(
        self,
        owner: EntityRef,
        kind: PeriodKind,
        start: datetime,
        end: datetime,
    ) -> List[Period]:
        """Return periods of ``kind`` that overlap the inclusive range [start, end]."""
        if end < start:
            raise InvalidDateRange(start, end)
        rows = self._execute(
            """
            SELECT * FROM periods
            WHERE owner_type = ? AND owner_id = ? AND kind = ?
              AND started_at <= ? AND (ended_at IS NULL OR ended_at >= ?)
            ORDER BY started_at, id
            """,
            (owner.entity_type.value, owner.entity_id, kind.value,
             to_timestamp(end), to_timestamp(start)),
            fetch=True,
        ) or []
        return [_row_to_period(row) for row in rows]

    def periods_for(
        self, owner: EntityRef, kinds: Optional[Iterable[PeriodKind]] = None
    ) -> List[Period]:
        """Return every period owned by ``owner``, oldest first."""
        query = "SELECT * FROM periods WHERE owner_type = ? AND owner_id = ?"
        params: List[Any] = [owner.entity_type.value, owner.entity_id]
        if kinds is not None:
            kind_values = [k.value for k in kinds]
            if not kind_values:
                return []
            query += f" AND kind IN ({', '.join('?' for _ in kind_values)})"
            params.extend(kind_values)
        query += " ORDER BY started_at, id"
        rows = self._execute(query, tuple(params), fetch=True) or []
        return [_row_to_period(row) for row in rows]

    def open_periods_for(self, owner: EntityRef, kind: PeriodKind) -> List[Period]:
        """Return every open period of ``kind`` across all scopes."""
        rows = self._execute(
            """
            SELECT * FROM periods
            WHERE owner_type = ? AND owner_id = ? AND kind = ? AND ended_at IS NULL
            ORDER BY started_at, id
            """,
            (owner.entity_type.value, owner.entity_id, kind.value),
            fetch=True,
        ) or []
        return [_row_to_period(row) for row in rows]

    def periods_with_counterpart(
        self,
        counterpart: EntityRef,
        kind: PeriodKind,
        *,
        open_only: bool = False,
        as_of: Optional[datetime] = None,
    ) -> List[Period]:
        """
        Return periods of ``kind`` whose counterpart is ``counterpart``.

        Args:
            counterpart: Group, manager or title on the other side
            kind: Period kind
            open_only: Only periods without an end
            as_of: Only periods active at this instant
        """
        query = """
            SELECT * FROM periods
            WHERE counterpart_type = ? AND counterpart_id = ? AND kind = ?
        """
        params: List[Any] = [counterpart.entity_type.value, counterpart.entity_id, kind.value]
        if open_only:
            query += " AND ended_at IS NULL"
        if as_of is not None:
            ts = to_timestamp(as_of)
            query += " AND started_at <= ? AND (ended_at IS NULL OR ended_at > ?)"
            params.extend([ts, ts])
        query += " ORDER BY started_at, id"
        rows = self._execute(query, tuple(params), fetch=True) or []
        return [_row_to_period(row) for row in rows]

    def _scope_of(self, period_id: int) -> str:
        row = self._execute_one("SELECT scope FROM periods WHERE id = ?", (period_id,))
        return row["scope"] if row else ""

    def _assert_no_overlap(
        self,
        owner: EntityRef,
        kind: PeriodKind,
        scope: str,
        started_at: datetime,
        ended_at: Optional[datetime],
        exclude_id: Optional[int] = None,
    ) -> None:
        """Reject a [started_at, ended_at) range that overlaps a stored period."""
        query = """
            SELECT id, started_at, ended_at FROM periods
            WHERE owner_type = ? AND owner_id = ? AND kind = ? AND scope = ?
              AND (ended_at IS NULL OR ended_at > ?)
        """
        params: List[Any] = [
            owner.entity_type.value, owner.entity_id, kind.value, scope,
            to_timestamp(started_at),
        ]
        if ended_at is not None:
            query += " AND started_at < ?"
            params.append(to_timestamp(ended_at))
        if exclude_id is not None:
            query += " AND id != ?"
            params.append(exclude_id)

        clash = self._execute_one(query + " LIMIT 1", tuple(params))
        if clash is not None:
            raise OverlappingPeriod(
                owner, kind, started_at,
                f"overlaps period {clash['id']} "
                f"({clash['started_at']} to {clash['ended_at'] or 'open'})",
            )


def _row_to_period(row: Dict[str, Any]) -> Period:
    counterpart = None
    if row.get("counterpart_type"):
        counterpart = EntityRef(EntityType(row["counterpart_type"]), row["counterpart_id"])
    return Period(
        period_id=row["id"],
        owner=EntityRef(EntityType(row["owner_type"]), row["owner_id"]),
        kind=PeriodKind(row["kind"]),
        started_at=parse_timestamp(row["started_at"]),
        ended_at=parse_timestamp(row["ended_at"]),
        counterpart=counterpart,
        notes=row.get("notes"),
    )
