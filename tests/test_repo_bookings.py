# Area: Store Tests
"""Tests for the booking repository."""

from datetime import datetime

import pytest

from ringside import ParticipantRole, Referee, Title, Wrestler
from ringside._store.repo_bookings import BookingRepository


class TestBookingRepository:
    """Tests for BookingRepository."""

    @pytest.fixture
    def repo(self, db):
        return BookingRepository(db)

    def test_create_match(self, repo):
        match_id = repo.create_match(7, datetime(2024, 9, 1, 20, 0))
        match = repo.get_match(match_id)
        assert match["event_id"] == 7
        assert match["event_date"] == "2024-09-01 20:00:00"

    def test_participants(self, repo):
        """Test participants come back as references with role and side."""
        match_id = repo.create_match(7, datetime(2024, 9, 1))
        repo.add_participant(match_id, Wrestler(1), ParticipantRole.COMPETITOR, side=0)
        repo.add_participant(match_id, Referee(2), ParticipantRole.REFEREE)

        everyone = repo.participants(match_id)
        referees = repo.participants(match_id, ParticipantRole.REFEREE)

        assert everyone[0] == {"entity": Wrestler(1), "role": ParticipantRole.COMPETITOR, "side": 0}
        assert [p["entity"] for p in referees] == [Referee(2)]

    def test_is_booked_same_day(self, repo):
        """Test a booking counts for the whole calendar day."""
        match_id = repo.create_match(7, datetime(2024, 9, 1, 20, 0))
        repo.add_participant(match_id, Wrestler(1), ParticipantRole.COMPETITOR, side=0)

        assert repo.is_booked(Wrestler(1), datetime(2024, 9, 1))
        assert not repo.is_booked(Wrestler(1), datetime(2024, 9, 2))
        assert not repo.is_booked(Wrestler(2), datetime(2024, 9, 1))
        assert not repo.is_booked(Wrestler(1), datetime(2024, 9, 1), exclude_match_id=match_id)

    def test_is_title_staked(self, repo):
        """Test titles are matched by event, or by day without one."""
        match_id = repo.create_match(7, datetime(2024, 9, 1))
        repo.add_participant(match_id, Title(1), ParticipantRole.TITLE)

        assert repo.is_title_staked(Title(1), datetime(2024, 9, 1), event_id=7)
        assert not repo.is_title_staked(Title(1), datetime(2024, 9, 1), event_id=8)
        assert repo.is_title_staked(Title(1), datetime(2024, 9, 1))
        assert not repo.is_title_staked(Title(1), datetime(2024, 9, 1), event_id=7,
                                        exclude_match_id=match_id)
