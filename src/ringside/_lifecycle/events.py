# Area: Lifecycle
"""
ringside._lifecycle.events — Status-Changed Events
==================================================

Delivers StatusChanged events to external listeners after a transition
commits. Delivery is best-effort: a failing listener is logged and
skipped, and never affects the committed transition.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Protocol, Union

from .clock import to_timestamp
from .enums import Transition
from .models import EntityRef
from ..types import StatusChangedPayload

logger = logging.getLogger("ringside.lifecycle.events")


@dataclass(frozen=True)
class StatusChanged:
    """
    Event emitted once per entity touched by a committed transition.

    Attributes:
        entity: Entity whose status changed
        from_status: Status before, at the effective date
        to_status: Status after, at the effective date
        at: Effective date
        transition: Transition that was applied to the entity
        cascade: True when triggered by another entity's transition
    """

    entity: EntityRef
    from_status: Any
    to_status: Any
    at: datetime
    transition: Transition
    cascade: bool = False

    @property
    def entity_id(self) -> int:
        return self.entity.entity_id

    def to_dict(self) -> StatusChangedPayload:
        return {
            "entity_type": self.entity.entity_type.value,
            "entity_id": self.entity.entity_id,
            "transition": self.transition.value,
            "from_status": self.from_status.value,
            "to_status": self.to_status.value,
            "at": to_timestamp(self.at),
            "cascade": self.cascade,
        }


class StatusSink(Protocol):
    """Protocol for status-changed listeners."""

    def handle(self, event: StatusChanged) -> None:
        """Receive one committed status change."""
        ...


Listener = Union[StatusSink, Callable[[StatusChanged], Any]]


class EventDispatcher:
    """
    Fans StatusChanged events out to registered listeners.

    Listeners may be objects with a ``handle(event)`` method or plain
    callables.

    Usage:
        dispatcher = EventDispatcher()
        dispatcher.register_listener(audit_sink)
        dispatcher.publish(events)
    """

    def __init__(self):
        """Initialize dispatcher with no listeners."""
        self._listeners: List[Listener] = []

    def register_listener(self, listener: Listener) -> None:
        """
        Register a listener.

        Args:
            listener: Sink object or callable
        """
        self._listeners.append(listener)
        logger.debug(f"Registered listener {listener!r}")

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> List[Listener]:
        return list(self._listeners)

    def publish(self, events: List[StatusChanged]) -> int:
        """
        Deliver events to every listener.

        Returns:
            Number of failed deliveries
        """
        failures = 0
        for event in events:
            for listener in self._listeners:
                if not self._deliver(listener, event):
                    failures += 1
        return failures

    def _deliver(self, listener: Listener, event: StatusChanged) -> bool:
        handler = getattr(listener, "handle", listener)
        try:
            handler(event)
        except Exception:
            logger.warning(
                f"Listener {listener!r} failed for {event.entity} "
                f"({event.transition.value})",
                exc_info=True,
            )
            return False
        return True


class LoggingSink:
    """Listener that writes every status change to the package log."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def handle(self, event: StatusChanged) -> None:
        self.log.info(
            f"{event.entity} {event.from_status.value} -> {event.to_status.value} "
            f"({event.transition.value} at {to_timestamp(event.at)})"
        )
