# Area: Lifecycle Tests
"""Tests for the Group Membership Manager."""

from datetime import datetime
from unittest.mock import patch

import pytest

from ringside import AmbiguousMember, PeriodKind, UnknownEntity, Wrestler
from ringside._lifecycle.membership import TAG_TEAM_SIZE

JAN = "2024-01-01"
JUN = "2024-06-01"


def memberships(engine, member):
    return [p for p in engine.periods_of(member) if p.kind == PeriodKind.MEMBERSHIP]


class TestGroupMembership:
    """Tests for add_member and remove_member."""

    def test_add_and_remove(self, engine):
        s = engine.create_stable("Hart Foundation")
        w = engine.create_wrestler("Bret Hart")

        period_id = engine.add_member(s, w, JAN)
        assert period_id is not None
        assert engine.current_members(s) == [w]

        engine.remove_member(s, w, JUN)
        assert engine.current_members(s) == []
        assert engine.current_members(s, "2024-03-01") == [w]
        assert memberships(engine, w)[0].ended_at == datetime(2024, 6, 1)

    def test_one_open_membership_per_group_type(self, engine):
        """Test a wrestler cannot be an open member of two stables."""
        s1 = engine.create_stable("Hart Foundation")
        s2 = engine.create_stable("Nation of Domination")
        w = engine.create_wrestler("Bret Hart")
        engine.add_member(s1, w, JAN)

        with pytest.raises(AmbiguousMember):
            engine.add_member(s2, w, JUN)

    def test_stable_and_tag_team_together(self, engine):
        """Test a wrestler can hold one stable and one tag team membership."""
        s = engine.create_stable("Hart Foundation")
        tt = engine.create_tag_team("Hart Brothers")
        w = engine.create_wrestler("Bret Hart")
        engine.add_member(s, w, JAN)
        engine.add_member(tt, w, JAN)

        assert set(engine.membership.current_groups(w)) == {s, tt}

    def test_tag_team_size(self, engine):
        tt = engine.create_tag_team("Hart Foundation")
        for name in ("Bret Hart", "Jim Neidhart"):
            engine.add_member(tt, engine.create_wrestler(name), JAN)
        assert len(engine.current_members(tt)) == TAG_TEAM_SIZE

        with pytest.raises(AmbiguousMember) as exc_info:
            engine.add_member(tt, engine.create_wrestler("Owen Hart"), JAN)
        assert "already has 2" in str(exc_info.value)

    def test_member_type_rules(self, engine):
        s = engine.create_stable("Hart Foundation")
        tt = engine.create_tag_team("Hart Brothers")
        t = engine.create_title("Intercontinental")

        with pytest.raises(AmbiguousMember):
            engine.add_member(s, engine.create_stable("Nation"), JAN)
        with pytest.raises(AmbiguousMember):
            engine.add_member(tt, engine.create_tag_team("Bulldogs"), JAN)
        with pytest.raises(AmbiguousMember):
            engine.add_member(t, engine.create_wrestler("Bret Hart"), JAN)

    def test_tag_team_joins_stable(self, engine):
        s = engine.create_stable("Hart Foundation")
        tt = engine.create_tag_team("Hart Brothers")
        engine.add_member(s, tt, JAN)
        assert engine.current_members(s) == [tt]

    def test_retired_member_rejected(self, engine):
        s = engine.create_stable("Hart Foundation")
        w = engine.retire(engine.create_wrestler("Bret Hart"), JAN)
        with pytest.raises(AmbiguousMember):
            engine.add_member(s, w, JUN)

    def test_retired_group_rejected(self, engine):
        s = engine.retire(engine.create_stable("Hart Foundation"), JAN)
        with pytest.raises(AmbiguousMember):
            engine.add_member(s, engine.create_wrestler("Bret Hart"), JUN)

    def test_remove_non_member(self, engine):
        s = engine.create_stable("Hart Foundation")
        w = engine.create_wrestler("Bret Hart")
        with pytest.raises(AmbiguousMember):
            engine.remove_member(s, w, JUN)

    def test_remove_from_wrong_group(self, engine):
        s1 = engine.create_stable("Hart Foundation")
        s2 = engine.create_stable("Nation of Domination")
        w = engine.create_wrestler("Bret Hart")
        engine.add_member(s1, w, JAN)
        with pytest.raises(AmbiguousMember):
            engine.remove_member(s2, w, JUN)

    def test_unknown_member(self, engine):
        s = engine.create_stable("Hart Foundation")
        with pytest.raises(UnknownEntity):
            engine.add_member(s, Wrestler(99), JAN)

    def test_manager_is_noop(self, engine):
        """Test membership calls for a manager do nothing."""
        s = engine.create_stable("Hart Foundation")
        m = engine.create_manager("Jimmy Hart")

        with patch("ringside._lifecycle.membership.logger") as mock_logger:
            assert engine.add_member(s, m, JAN) is None
            engine.remove_member(s, m, JUN)
            assert mock_logger.debug.call_count == 2

        assert engine.current_members(s) == []
        assert engine.periods_of(m) == []

    def test_rejoin_after_leaving(self, engine):
        s = engine.create_stable("Hart Foundation")
        w = engine.create_wrestler("Bret Hart")
        engine.add_member(s, w, JAN)
        engine.remove_member(s, w, "2024-03-01")
        engine.add_member(s, w, "2024-03-01")
        assert len(memberships(engine, w)) == 2


class TestReplaceMembers:
    """Tests for replace_members."""

    def test_replace_diff(self, engine):
        """Test {W1, TT1} replaced by {W1, W2}."""
        s = engine.create_stable("Hart Foundation")
        w1 = engine.create_wrestler("Bret Hart")
        w2 = engine.create_wrestler("Owen Hart")
        tt1 = engine.create_tag_team("British Bulldogs")
        engine.add_member(s, w1, JAN)
        engine.add_member(s, tt1, JAN)

        diff = engine.replace_members(s, {w1, w2}, JUN)

        assert diff.added == [w2]
        assert diff.removed == [tt1]
        assert diff.unchanged == [w1]
        assert memberships(engine, tt1)[0].ended_at == datetime(2024, 6, 1)
        assert memberships(engine, w2)[0].started_at == datetime(2024, 6, 1)
        w1_periods = memberships(engine, w1)
        assert len(w1_periods) == 1
        assert w1_periods[0].started_at == datetime(2024, 1, 1)
        assert w1_periods[0].is_open

    def test_replace_is_atomic(self, engine):
        """Test a rejected addition rolls back the removals."""
        s1 = engine.create_stable("Hart Foundation")
        s2 = engine.create_stable("Nation of Domination")
        w1 = engine.create_wrestler("Bret Hart")
        w2 = engine.create_wrestler("Faarooq")
        engine.add_member(s1, w1, JAN)
        engine.add_member(s2, w2, JAN)

        with pytest.raises(AmbiguousMember):
            engine.replace_members(s1, [w2], JUN)

        assert engine.current_members(s1) == [w1]

    def test_replace_ignores_managers(self, engine):
        s = engine.create_stable("Hart Foundation")
        m = engine.create_manager("Jimmy Hart")
        diff = engine.replace_members(s, [m], JAN)
        assert diff.added == []

    def test_move_between_tag_team_slots(self, engine):
        """Test remove-then-add lets a full tag team swap a partner."""
        tt = engine.create_tag_team("Hart Foundation")
        w1 = engine.create_wrestler("Bret Hart")
        w2 = engine.create_wrestler("Jim Neidhart")
        w3 = engine.create_wrestler("Owen Hart")
        engine.add_member(tt, w1, JAN)
        engine.add_member(tt, w2, JAN)

        diff = engine.replace_members(tt, [w1, w3], JUN)

        assert diff.removed == [w2]
        assert set(engine.current_members(tt)) == {w1, w3}

    def test_scheduled_member_moved_to_effective_date(self, engine):
        """Test a member due to join later is brought forward, not added twice."""
        s = engine.create_stable("Hart Foundation")
        w1 = engine.create_wrestler("Bret Hart")
        w2 = engine.create_wrestler("Owen Hart")
        engine.add_member(s, w1, JAN)
        engine.add_member(s, w2, "2024-10-01")

        diff = engine.replace_members(s, [w1, w2], JUN)

        assert diff.added == [w2]
        assert diff.unchanged == [w1]
        w2_periods = memberships(engine, w2)
        assert len(w2_periods) == 1
        assert w2_periods[0].started_at == datetime(2024, 6, 1)
        assert w2_periods[0].is_open
        assert set(engine.current_members(s, "2024-07-01")) == {w1, w2}


class TestManagers:
    """Tests for manager relationships."""

    def test_assign_and_remove(self, engine):
        m = engine.create_manager("Jimmy Hart")
        w = engine.create_wrestler("Bret Hart")

        engine.assign_manager(m, w, JAN)
        assert engine.current_managers(w) == [m]
        assert engine.membership.current_clients(m) == [w]

        engine.remove_manager(m, w, JUN)
        assert engine.current_managers(w) == []

    def test_manager_with_several_clients(self, engine):
        m = engine.create_manager("Jimmy Hart")
        w = engine.create_wrestler("Bret Hart")
        tt = engine.create_tag_team("Hart Foundation")
        engine.assign_manager(m, w, JAN)
        engine.assign_manager(m, tt, JAN)
        assert engine.membership.current_clients(m) == [w, tt]

    def test_client_with_several_managers(self, engine):
        m1 = engine.create_manager("Jimmy Hart")
        m2 = engine.create_manager("Paul Bearer")
        w = engine.create_wrestler("Bret Hart")
        engine.assign_manager(m1, w, JAN)
        engine.assign_manager(m2, w, JAN)
        assert engine.current_managers(w) == [m1, m2]

    def test_duplicate_rejected(self, engine):
        m = engine.create_manager("Jimmy Hart")
        w = engine.create_wrestler("Bret Hart")
        engine.assign_manager(m, w, JAN)
        with pytest.raises(AmbiguousMember):
            engine.assign_manager(m, w, JUN)

    def test_only_managers_manage(self, engine):
        w1 = engine.create_wrestler("Bret Hart")
        w2 = engine.create_wrestler("Owen Hart")
        with pytest.raises(AmbiguousMember):
            engine.assign_manager(w1, w2, JAN)

    def test_only_wrestlers_and_tag_teams_managed(self, engine):
        m = engine.create_manager("Jimmy Hart")
        s = engine.create_stable("Hart Foundation")
        with pytest.raises(AmbiguousMember):
            engine.assign_manager(m, s, JAN)

    def test_retired_manager_rejected(self, engine):
        m = engine.retire(engine.create_manager("Jimmy Hart"), JAN)
        w = engine.create_wrestler("Bret Hart")
        with pytest.raises(AmbiguousMember):
            engine.assign_manager(m, w, JUN)

    def test_remove_without_relationship(self, engine):
        m = engine.create_manager("Jimmy Hart")
        w = engine.create_wrestler("Bret Hart")
        with pytest.raises(AmbiguousMember):
            engine.remove_manager(m, w, JUN)
