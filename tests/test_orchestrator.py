# Area: Lifecycle Tests
"""Tests for the Lifecycle Orchestrator."""

import threading
from datetime import datetime
from unittest.mock import Mock, patch

import pytest

from ringside import (
    CannotBeEmployed, CannotBeReleased, CannotBeRetired, EmploymentStatus, EntityType, InvalidTransition,
    PeriodKind, Transition, UnknownEntity, Wrestler,
)


def employment_periods(engine, entity):
    return [p for p in engine.periods_of(entity) if p.kind == PeriodKind.EMPLOYMENT]


class TestTransitionScenarios:
    """End-to-end transition scenarios."""

    def test_employ_injure_clear(self, engine):
        """Test the employ, injure, rejected employ, clear injury sequence."""
        w = engine.create_wrestler("Bret Hart")

        engine.employ(w, "2024-01-01")
        assert engine.current_status(w, "2024-01-02") == EmploymentStatus.EMPLOYED

        engine.injure(w, "2024-06-01")
        assert engine.current_status(w, "2024-06-02") == EmploymentStatus.INJURED

        with pytest.raises(InvalidTransition) as exc_info:
            engine.employ(w, "2024-07-01")
        assert isinstance(exc_info.value, CannotBeEmployed)
        assert exc_info.value.current_status == EmploymentStatus.INJURED

        engine.clear_injury(w, "2024-08-01")
        assert engine.current_status(w) == EmploymentStatus.EMPLOYED

    def test_release_twice(self, engine):
        """Test a second release is rejected and writes nothing."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.release(w, "2024-03-01")

        with pytest.raises(CannotBeReleased):
            engine.release(w, "2024-04-01")

        periods = employment_periods(engine, w)
        assert len(periods) == 1
        assert periods[0].ended_at == datetime(2024, 3, 1)

    def test_employ_release_round_trip(self, engine):
        """Test employ then release leaves one closed employment period."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.release(w, "2024-03-01")

        periods = employment_periods(engine, w)
        assert len(periods) == 1
        assert periods[0].started_at == datetime(2024, 1, 1)
        assert periods[0].ended_at == datetime(2024, 3, 1)
        assert engine.current_status(w, "2024-04-01") == EmploymentStatus.RELEASED

    def test_release_closes_conditions(self, engine):
        """Test releasing an injured and suspended wrestler closes both periods."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.injure(w, "2024-02-01")
        engine.suspend(w, "2024-03-01")
        assert engine.current_status(w, "2024-03-02") == EmploymentStatus.SUSPENDED

        engine.release(w, "2024-04-01")

        assert all(not p.is_open for p in engine.periods_of(w))

    def test_future_employment_rescheduled(self, engine):
        """Test a second employ moves the scheduled period instead of adding one."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2025-01-01")
        assert engine.current_status(w) == EmploymentStatus.FUTURE_EMPLOYMENT

        engine.employ(w, "2024-10-01")

        periods = employment_periods(engine, w)
        assert len(periods) == 1
        assert periods[0].started_at == datetime(2024, 10, 1)

    def test_future_employ_while_employed_rejected(self, engine):
        """Test validity is judged at the effective date."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        with pytest.raises(CannotBeEmployed):
            engine.employ(w, "2025-01-01")

    def test_retire_and_unretire(self, engine):
        """Test retiring closes employment and unretiring re-employs."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.injure(w, "2024-02-01")
        engine.retire(w, "2024-03-01")
        assert engine.current_status(w, "2024-03-02") == EmploymentStatus.RETIRED
        assert [p.kind for p in engine.periods_of(w) if p.is_open] == [PeriodKind.RETIREMENT]

        engine.unretire(w, "2024-05-01")
        assert engine.current_status(w) == EmploymentStatus.EMPLOYED
        assert len(employment_periods(engine, w)) == 2

    def test_employ_from_retired(self, engine):
        w = engine.create_wrestler("Bret Hart")
        engine.retire(w, "2024-01-01")
        engine.employ(w, "2024-02-01")
        assert engine.current_status(w) == EmploymentStatus.EMPLOYED

    def test_backdated_transition(self, engine):
        """Test transitions may be dated before the clock's now."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2020-01-01")
        assert engine.current_status(w, "2020-06-01") == EmploymentStatus.EMPLOYED
        assert engine.current_status(w, "2019-06-01") == EmploymentStatus.FUTURE_EMPLOYMENT

    def test_backdated_release_before_later_injury_rejected(self, engine):
        """Test a release dated before a recorded injury is refused."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.injure(w, "2024-06-01")

        with pytest.raises(CannotBeReleased) as exc_info:
            engine.release(w, "2024-03-01")
        assert "later injury" in exc_info.value.reason

        engine.release(w, "2024-07-01")
        engine.employ(w, "2024-08-01")
        assert engine.current_status(w, "2024-08-15") == EmploymentStatus.EMPLOYED

    def test_backdated_retire_before_later_suspension_rejected(self, engine):
        """Test a retirement dated before a recorded suspension is refused."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.suspend(w, "2024-06-01")
        engine.reinstate(w, "2024-07-01")

        with pytest.raises(CannotBeRetired):
            engine.retire(w, "2024-03-01")

        assert not any(p.kind == PeriodKind.RETIREMENT for p in engine.periods_of(w))
        assert engine.current_status(w, "2024-06-15") == EmploymentStatus.SUSPENDED


class TestTransitionResults:
    """Tests for events, history and cached status."""

    def test_returns_event(self, engine):
        """Test the transition returns the primary StatusChanged event."""
        w = engine.create_wrestler("Bret Hart")
        events = engine.transition(w, Transition.EMPLOY, "2024-01-01")

        assert len(events) == 1
        event = events[0]
        assert event.entity == w
        assert event.entity_id == w.entity_id
        assert event.from_status == EmploymentStatus.UNEMPLOYED
        assert event.to_status == EmploymentStatus.EMPLOYED
        assert event.at == datetime(2024, 1, 1)
        assert not event.cascade

    def test_engine_methods_return_entity(self, engine):
        w = engine.create_wrestler("Bret Hart")
        assert engine.employ(w, "2024-01-01") == w

    def test_history_recorded(self, engine):
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.injure(w, "2024-06-01")

        history = engine.status_history(w)

        assert [h["transition"] for h in history] == ["employ", "injure"]
        assert history[1]["from_status"] == "employed"
        assert history[1]["to_status"] == "injured"

    def test_cached_status_updated(self, engine):
        w = engine.create_wrestler("Bret Hart")
        assert engine.cached_status(w) == "unemployed"
        engine.employ(w, "2024-01-01")
        assert engine.cached_status(w) == "employed"

    def test_cached_status_refreshed_after_clock_moves(self, engine, clock):
        """Test refresh_statuses catches up with scheduled periods."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-10-01")
        assert engine.cached_status(w) == "future_employment"

        clock.set("2024-10-02")

        assert engine.refresh_statuses() == 1
        assert engine.cached_status(w) == "employed"
        assert engine.refresh_statuses() == 0

    def test_logs_transition(self, engine):
        w = engine.create_wrestler("Bret Hart")
        with patch("ringside._lifecycle.orchestrator.logger") as mock_logger:
            engine.employ(w, "2024-01-01")
            mock_logger.info.assert_called_once()

    def test_listener_receives_events(self, engine):
        listener = Mock()
        engine.add_listener(listener)
        w = engine.create_wrestler("Bret Hart")

        engine.employ(w, "2024-01-01")

        listener.handle.assert_called_once()
        assert listener.handle.call_args[0][0].entity == w

    def test_listener_failure_does_not_roll_back(self, engine):
        """Test a failing listener leaves the transition committed."""
        def broken(event):
            raise RuntimeError("sink down")

        engine.add_listener(broken)
        w = engine.create_wrestler("Bret Hart")

        with patch("ringside._lifecycle.events.logger") as mock_logger:
            engine.employ(w, "2024-01-01")
            mock_logger.warning.assert_called_once()

        assert engine.current_status(w) == EmploymentStatus.EMPLOYED
        assert engine.cached_status(w) == "employed"


class TestAtomicity:
    """Tests for rollback and serialization."""

    def test_rejected_transition_writes_nothing(self, engine):
        w = engine.create_wrestler("Bret Hart")
        with pytest.raises(CannotBeReleased):
            engine.release(w, "2024-01-01")
        assert engine.periods_of(w) == []
        assert engine.status_history(w) == []

    def test_cascade_failure_rolls_back(self, engine):
        """Test an error inside a cascade undoes the triggering transition."""
        def broken_cascade(orchestrator, entity, run):
            raise RuntimeError("cascade failed")

        engine.orchestrator.cascades.register(Transition.EMPLOY, [EntityType.WRESTLER], broken_cascade)
        w = engine.create_wrestler("Bret Hart")

        with pytest.raises(RuntimeError):
            engine.employ(w, "2024-01-01")

        assert engine.periods_of(w) == []
        assert engine.status_history(w) == []
        assert engine.cached_status(w) == "unemployed"

    def test_concurrent_employ_opens_one_period(self, engine):
        """Test two simultaneous employs serialize: one wins, one is rejected."""
        w = engine.create_wrestler("Bret Hart")
        barrier = threading.Barrier(2)
        outcomes = []

        def employ():
            barrier.wait()
            try:
                engine.employ(w, "2024-01-01")
                outcomes.append("ok")
            except InvalidTransition:
                outcomes.append("rejected")

        threads = [threading.Thread(target=employ) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["ok", "rejected"]
        assert len(employment_periods(engine, w)) == 1


class TestEntityReferences:
    """Tests for unknown and deleted entities."""

    def test_unknown_entity(self, engine):
        with pytest.raises(UnknownEntity) as exc_info:
            engine.employ(Wrestler(99), "2024-01-01")
        assert exc_info.value.reason == "not found"

    def test_deleted_entity(self, engine):
        w = engine.create_wrestler("Bret Hart")
        engine.delete(w)
        with pytest.raises(UnknownEntity) as exc_info:
            engine.employ(w, "2024-01-01")
        assert exc_info.value.reason == "deleted"

    def test_restore_rederives_status(self, engine):
        """Test restoring re-evaluates status from the kept periods."""
        w = engine.create_wrestler("Bret Hart")
        engine.employ(w, "2024-01-01")
        engine.delete(w)
        engine.entities.update_status(w, "stale")

        assert engine.restore(w) == EmploymentStatus.EMPLOYED
        assert engine.cached_status(w) == "employed"
