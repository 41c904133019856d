# Area: Lifecycle
"""
ringside._lifecycle.championships — Title Reigns
================================================

Championship periods are owned by the title with the champion (a
wrestler or tag team) as counterpart: ``started_at`` is when the title
was won and ``ended_at`` when it was lost. At most one reign per title
is open.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from .clock import Clock, DateLike, resolve
from .deriver import StatusDeriver
from .enums import ActivityStatus, EntityType, PeriodKind
from .models import CHAMPION_TYPES, ChampionshipSummary, EntityRef, Period
from ..errors import InvalidChampionship, NoOpenPeriod, UnknownEntity

if TYPE_CHECKING:
    from .._store.database import Database
    from .._store.repo_entities import EntityRepository
    from .._store.repo_periods import PeriodRepository

logger = logging.getLogger("ringside.lifecycle.championships")

SECONDS_PER_DAY = 86400


def reign_length_seconds(period: Period, now: datetime) -> float:
    end = period.ended_at if period.ended_at is not None else now
    return (end - period.started_at).total_seconds()


def longest_reign(reigns: List[Period], now: datetime) -> Optional[Period]:
    """
    Pick the longest reign; an open reign runs until ``now``.
    Ties go to the reign won first.
    """
    if not reigns:
        return None
    return min(reigns, key=lambda p: (-reign_length_seconds(p, now), p.started_at, p.period_id))


class ChampionshipService:
    """
    Awards, vacates and reports on title reigns.

    Usage:
        service = ChampionshipService(db, periods, entities, clock)
        service.award_title(Title(3), Wrestler(1), "2024-01-01")
        service.longest_reigning_champion(Title(3))
    """

    def __init__(
        self,
        db: "Database",
        periods: "PeriodRepository",
        entities: "EntityRepository",
        clock: Clock,
    ):
        self.db = db
        self.periods = periods
        self.entities = entities
        self.clock = clock
        self.deriver = StatusDeriver(periods)

    def award_title(
        self, title: EntityRef, champion: EntityRef, won_at: Optional[DateLike] = None
    ) -> int:
        """
        Start a new reign, ending the current one at ``won_at``.

        Returns:
            The championship period id

        Raises:
            InvalidChampionship: If the title is not active, the champion
                cannot hold titles or is not employed, the champion already
                holds the title, or the current reign began after ``won_at``
            UnknownEntity: If either entity does not exist
        """
        at = resolve(won_at, self.clock)
        if title.entity_type != EntityType.TITLE:
            raise InvalidChampionship(title, "only titles can be awarded", champion)
        if champion.entity_type not in CHAMPION_TYPES:
            raise InvalidChampionship(title, "champions must be wrestlers or tag teams", champion)

        with self.db.transaction():
            self._require(title, champion)
            if self.deriver.derive_status(title, at) != ActivityStatus.ACTIVE:
                raise InvalidChampionship(title, f"not active on {at}", champion)
            champion_status = self.deriver.derive_status(champion, at)
            if not champion_status.is_employed:
                raise InvalidChampionship(
                    title, f"{champion} is {champion_status.value} on {at}", champion
                )

            current = self.periods.open_period_for(title, PeriodKind.CHAMPIONSHIP)
            if current is not None:
                if current.counterpart == champion:
                    raise InvalidChampionship(title, f"{champion} is already champion", champion)
                if current.started_at > at:
                    raise InvalidChampionship(
                        title, f"current reign began {current.started_at}, after {at}", champion
                    )
                self.periods.close_period_by_id(current, at)

            period_id = self.periods.open_period(
                title, PeriodKind.CHAMPIONSHIP, at, counterpart=champion
            )
        logger.info(f"{champion} won {title} at {at}")
        return period_id

    def vacate_title(self, title: EntityRef, vacated_at: Optional[DateLike] = None) -> Period:
        """
        End the current reign without a new champion.

        Raises:
            NoOpenPeriod: If the title has no current reign
        """
        at = resolve(vacated_at, self.clock)
        with self.db.transaction():
            self._require(title)
            current = self.periods.open_period_for(title, PeriodKind.CHAMPIONSHIP)
            if current is None:
                raise NoOpenPeriod(title, PeriodKind.CHAMPIONSHIP)
            closed = self.periods.close_period_by_id(current, at)
        logger.info(f"{title} vacated at {at}")
        return closed

    def current_champion(self, title: EntityRef, as_of: Optional[DateLike] = None) -> Optional[EntityRef]:
        reign = self.periods.current_period(title, PeriodKind.CHAMPIONSHIP, resolve(as_of, self.clock))
        return reign.counterpart if reign else None

    def title_reigns(self, title: EntityRef) -> List[ChampionshipSummary]:
        """Every reign of the title, oldest first."""
        now = self.clock.now()
        return [
            self._summarize(title, period, now)
            for period in self.periods.periods_for(title, [PeriodKind.CHAMPIONSHIP])
        ]

    def longest_reigning_champion(self, title: EntityRef) -> Optional[ChampionshipSummary]:
        """
        Return the longest reign of the title, or None if it has never
        been held. Reign length is ``(lost_at or now) - won_at``.
        """
        now = self.clock.now()
        reign = longest_reign(self.periods.periods_for(title, [PeriodKind.CHAMPIONSHIP]), now)
        return self._summarize(title, reign, now) if reign else None

    def _summarize(self, title: EntityRef, period: Period, now: datetime) -> ChampionshipSummary:
        name = self.entities.name_of(period.counterpart) if period.counterpart else None
        return ChampionshipSummary(
            title=title,
            champion=period.counterpart,
            champion_name=name or "Unknown",
            won_at=period.started_at,
            lost_at=period.ended_at,
            reign_length_in_days=int(reign_length_seconds(period, now) // SECONDS_PER_DAY),
        )

    def _require(self, *refs: EntityRef) -> None:
        for ref in refs:
            if self.entities.get(ref) is None:
                raise UnknownEntity(ref)
