# Area: Shared Tests
"""Tests for the error hierarchy and error blocks."""

from datetime import datetime

from ringside import (
    AmbiguousMember, CannotBeEmployed, ConfigurationError, EmploymentStatus, EntityNotAvailable,
    InvalidTransition, NoOpenPeriod, PeriodKind, RingsideError, Stable, Transition, Wrestler,
)
from ringside._lifecycle.transitions import TRANSITION_ERRORS


class TestInvalidTransition:
    """Tests for InvalidTransition and its subclasses."""

    def test_message_names_status_and_transition(self):
        error = CannotBeEmployed(
            Wrestler(1), Transition.EMPLOY, EmploymentStatus.INJURED, "already employed",
            datetime(2024, 7, 1),
        )
        assert str(error) == "Wrestler #1 cannot be employed: already employed (current status: injured)"

    def test_hierarchy(self):
        for error_class in TRANSITION_ERRORS.values():
            assert issubclass(error_class, InvalidTransition)
            assert issubclass(error_class, RingsideError)

    def test_to_dict(self):
        error = CannotBeEmployed(
            Wrestler(1), Transition.EMPLOY, EmploymentStatus.INJURED, "already employed",
            datetime(2024, 7, 1),
        )
        data = error.to_dict()
        assert data["error_type"] == "INVALID_TRANSITION"
        assert data["error_class"] == "CannotBeEmployed"
        assert data["context"] == {
            "entity": "Wrestler #1",
            "transition": "employ",
            "current_status": "injured",
            "effective_date": "2024-07-01 00:00:00",
        }


class TestErrorBlock:
    """Tests for format_error_log."""

    def test_block_sections(self):
        error = AmbiguousMember(Stable(2), Wrestler(1), "already an open member")
        block = error.format_error_log()
        assert "RINGSIDE ERROR" in block
        assert "AMBIGUOUS_MEMBER" in block
        assert "CONTEXT" in block
        assert "already an open member" in block

    def test_no_details_section(self):
        block = NoOpenPeriod(Wrestler(1), PeriodKind.INJURY).format_error_log()
        assert "DETAILS" not in block
        assert "has no open injury period" in block


class TestOtherErrors:
    """Tests for remaining error messages."""

    def test_entity_not_available(self):
        error = EntityNotAvailable(Wrestler(1), "already_booked", datetime(2024, 9, 1))
        assert str(error) == "Wrestler #1 is not available on 2024-09-01 00:00:00: already booked"

    def test_configuration_error(self):
        error = ConfigurationError(["log_level: bad", "busy_timeout_seconds: bad"], "config.json")
        assert "in config.json" in str(error)
        assert error.details() == ["log_level: bad", "busy_timeout_seconds: bad"]
