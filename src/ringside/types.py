"""
ringside.types — TypedDict schemas for engine payloads
======================================================

Documents the dictionaries the engine hands to listeners and returns
from read operations in serialized form.

    from ringside import StatusChangedPayload, ChampionshipSummaryPayload

Use __annotations__ to inspect fields:

    >>> StatusChangedPayload.__annotations__
    {'entity_type': str, 'entity_id': int, 'transition': str, ...}
"""

from typing import Optional, TypedDict


# ============================================
# Status-changed events
# ============================================

class StatusChangedPayload(TypedDict):
    """Serialized form of a StatusChanged event.

    Fields
    ------
    entity_type : str
        e.g. "wrestler", "tag_team", "stable".
    entity_id : int
        Entity primary key.
    transition : str
        Transition that caused the change, e.g. "employ".
    from_status : str
        Derived status before the transition, at the effective date.
    to_status : str
        Derived status after the transition, at the effective date.
    at : str
        Effective date, "YYYY-MM-DD HH:MM:SS".
    cascade : bool
        True when triggered by another entity's transition.
    """
    entity_type: str
    entity_id: int
    transition: str
    from_status: str
    to_status: str
    at: str
    cascade: bool


# ============================================
# Status history
# ============================================

class StatusHistoryEntry(TypedDict):
    """One row of an entity's status history."""
    transition: str
    from_status: str
    to_status: str
    changed_at: str


# ============================================
# get_longest_reigning_champion()
# ============================================

class ChampionshipSummaryPayload(TypedDict):
    """Serialized form of a ChampionshipSummary.

    Fields
    ------
    champion_type : str
        "wrestler" or "tag_team".
    champion_id : int
    champion_name : str
    won_at : str
    lost_at : Optional[str]
        None while the reign is current.
    reign_length_in_days : int
        Whole days from won_at to lost_at (or now).
    """
    champion_type: str
    champion_id: int
    champion_name: str
    won_at: str
    lost_at: Optional[str]
    reign_length_in_days: int
