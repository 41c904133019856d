# Area: Store
"""
SQLite persistence for the lifecycle engine.

This package contains:
- Connection and transaction management
- The period store
- Entity, status change and booking repositories
"""

from .database import BaseRepository, Database, get_connection, init_database
from .repo_bookings import BookingRepository
from .repo_entities import EntityRepository
from .repo_periods import PeriodRepository
from .repo_status_changes import StatusChangeRepository

__all__ = [
    "BaseRepository",
    "Database",
    "get_connection",
    "init_database",
    "BookingRepository",
    "EntityRepository",
    "PeriodRepository",
    "StatusChangeRepository",
]
