# Area: Shared
"""
ringside.errors — Custom exception classes
==========================================

Defines the exception hierarchy raised by the lifecycle engine.
Each exception stores full context for structured logging and can
render itself as an error block via ``format_error_log()``.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import json


class RingsideError(Exception):
    """Base exception for all ringside errors."""

    error_type = "RINGSIDE_ERROR"

    def context(self) -> Dict[str, Any]:
        """Structured attributes describing the failure."""
        return {}

    def details(self) -> List[str]:
        """Human-readable detail lines for the error block."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.error_type,
            "error_class": self.__class__.__name__,
            "message": str(self),
            "context": self.context(),
        }

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
            details=self.details(),
        )


# ── Transition errors ────────────────────────────────────────────


class InvalidTransition(RingsideError):
    """
    Raised when a transition's precondition is not met.

    Attributes:
        entity: The entity the transition was requested for
        transition: The attempted transition
        current_status: Status of the entity at the effective date
        reason: The violated precondition
        effective_date: Instant the transition was requested for
    """

    error_type = "INVALID_TRANSITION"
    past_tense = "transitioned"

    def __init__(
        self,
        entity: Any,
        transition: Any,
        current_status: Any,
        reason: str,
        effective_date: Optional[datetime] = None,
    ):
        self.entity = entity
        self.transition = transition
        self.current_status = current_status
        self.reason = reason
        self.effective_date = effective_date
        super().__init__(
            f"{entity} cannot be {self.past_tense}: {reason} "
            f"(current status: {_plain(current_status)})"
        )

    def context(self) -> Dict[str, Any]:
        return {
            "entity": str(self.entity),
            "transition": _plain(self.transition),
            "current_status": _plain(self.current_status),
            "effective_date": _plain(self.effective_date),
        }

    def details(self) -> List[str]:
        return [self.reason]


class CannotBeEmployed(InvalidTransition):
    past_tense = "employed"


class CannotBeReleased(InvalidTransition):
    past_tense = "released"


class CannotBeInjured(InvalidTransition):
    past_tense = "injured"


class CannotBeClearedFromInjury(InvalidTransition):
    past_tense = "cleared from injury"


class CannotBeSuspended(InvalidTransition):
    past_tense = "suspended"


class CannotBeReinstated(InvalidTransition):
    past_tense = "reinstated"


class CannotBeRetired(InvalidTransition):
    past_tense = "retired"


class CannotBeUnretired(InvalidTransition):
    past_tense = "unretired"


class CannotBeDebuted(InvalidTransition):
    past_tense = "debuted"


class CannotBeActivated(InvalidTransition):
    past_tense = "activated"


class CannotBeDeactivated(InvalidTransition):
    past_tense = "deactivated"


class CannotBeDisbanded(InvalidTransition):
    past_tense = "disbanded"


# ── Period store errors ──────────────────────────────────────────


class NoOpenPeriod(RingsideError):
    """Raised when closing a period kind that has no open period."""

    error_type = "NO_OPEN_PERIOD"

    def __init__(self, owner: Any, kind: Any, scope: str = ""):
        self.owner = owner
        self.kind = kind
        self.scope = scope
        suffix = f" (scope {scope})" if scope else ""
        super().__init__(f"{owner} has no open {_plain(kind)} period{suffix}")

    def context(self) -> Dict[str, Any]:
        return {"owner": str(self.owner), "kind": _plain(self.kind), "scope": self.scope}


class OverlappingPeriod(RingsideError):
    """Raised when a write would leave two overlapping periods of one kind."""

    error_type = "OVERLAPPING_PERIOD"

    def __init__(self, owner: Any, kind: Any, started_at: Any, reason: str):
        self.owner = owner
        self.kind = kind
        self.started_at = started_at
        self.reason = reason
        super().__init__(
            f"Cannot open {_plain(kind)} period for {owner} at {_plain(started_at)}: {reason}"
        )

    def context(self) -> Dict[str, Any]:
        return {
            "owner": str(self.owner),
            "kind": _plain(self.kind),
            "started_at": _plain(self.started_at),
        }

    def details(self) -> List[str]:
        return [self.reason]


class InvalidDateRange(RingsideError):
    """Raised when a period would end before it starts."""

    error_type = "INVALID_DATE_RANGE"

    def __init__(self, started_at: Any, ended_at: Any):
        self.started_at = started_at
        self.ended_at = ended_at
        super().__init__(
            f"Period cannot end at {_plain(ended_at)} before it starts at {_plain(started_at)}"
        )

    def context(self) -> Dict[str, Any]:
        return {"started_at": _plain(self.started_at), "ended_at": _plain(self.ended_at)}


# ── Membership and reference errors ──────────────────────────────


class AmbiguousMember(RingsideError):
    """Raised when a membership change breaks the one-open-membership rule."""

    error_type = "AMBIGUOUS_MEMBER"

    def __init__(self, group: Any, member: Any, reason: str):
        self.group = group
        self.member = member
        self.reason = reason
        super().__init__(f"{member} cannot change membership of {group}: {reason}")

    def context(self) -> Dict[str, Any]:
        return {"group": str(self.group), "member": str(self.member)}

    def details(self) -> List[str]:
        return [self.reason]


class UnknownEntity(RingsideError):
    """Raised for a reference that does not resolve to a live entity."""

    error_type = "UNKNOWN_ENTITY"

    def __init__(self, reference: Any, reason: str = "not found"):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Unknown entity {reference}: {reason}")

    def context(self) -> Dict[str, Any]:
        return {"reference": str(self.reference), "reason": self.reason}


# ── Booking and championship errors ──────────────────────────────


class EntityNotAvailable(RingsideError):
    """
    Raised when booking an entity that cannot be used on the event date.

    ``reason`` is one of: injured, suspended, retired, unemployed,
    inactive, already_booked.
    """

    error_type = "ENTITY_NOT_AVAILABLE"

    def __init__(self, entity: Any, reason: str, on_date: Any = None):
        self.entity = entity
        self.reason = reason
        self.on_date = on_date
        when = f" on {_plain(on_date)}" if on_date is not None else ""
        super().__init__(f"{entity} is not available{when}: {reason.replace('_', ' ')}")

    def context(self) -> Dict[str, Any]:
        return {"entity": str(self.entity), "reason": self.reason, "date": _plain(self.on_date)}


class InvalidMatchConfiguration(RingsideError):
    """Raised for a structurally invalid match (too few sides, duplicates)."""

    error_type = "INVALID_MATCH_CONFIGURATION"

    def __init__(self, reason: str, match_id: Optional[int] = None):
        self.reason = reason
        self.match_id = match_id
        prefix = f"Match {match_id}: " if match_id is not None else ""
        super().__init__(f"{prefix}{reason}")

    def context(self) -> Dict[str, Any]:
        return {"match_id": self.match_id}


class InvalidChampionship(RingsideError):
    """Raised when a title cannot be awarded or vacated."""

    error_type = "INVALID_CHAMPIONSHIP"

    def __init__(self, title: Any, reason: str, champion: Any = None):
        self.title = title
        self.champion = champion
        self.reason = reason
        super().__init__(f"{title}: {reason}")

    def context(self) -> Dict[str, Any]:
        return {
            "title": str(self.title),
            "champion": str(self.champion) if self.champion is not None else None,
        }


# ── Configuration ────────────────────────────────────────────────


class ConfigurationError(RingsideError):
    """Raised when engine configuration is missing or invalid."""

    error_type = "CONFIGURATION_ERROR"

    def __init__(self, errors: List[str], source: Optional[str] = None):
        self.errors = errors
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid configuration{where}: {'; '.join(errors)}")

    def context(self) -> Dict[str, Any]:
        return {"source": self.source}

    def details(self) -> List[str]:
        return list(self.errors)


def _plain(value: Any) -> Any:
    """Flatten enums and datetimes for messages and JSON payloads."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    return getattr(value, "value", value)


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
    details: Optional[List[str]],
) -> str:
    """Format a structured error block for terminal and log output."""
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " RINGSIDE ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    formatted = json.dumps(data, indent=indent, default=str)
    return "\n".join(" " + line for line in formatted.split("\n"))
