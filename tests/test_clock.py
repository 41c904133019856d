# Area: Lifecycle Tests
"""Tests for clocks, date coercion and entity references."""

from datetime import date, datetime

import pytest

from ringside import EntityRef, EntityType, FixedClock, SystemClock, TagTeam
from ringside._lifecycle.clock import coerce_datetime, parse_timestamp, resolve, to_timestamp


class TestCoerceDatetime:
    """Tests for coerce_datetime."""

    def test_date_becomes_midnight(self):
        assert coerce_datetime(date(2024, 1, 1)) == datetime(2024, 1, 1)

    def test_iso_string(self):
        assert coerce_datetime(" 2024-01-01 10:30 ") == datetime(2024, 1, 1, 10, 30)

    def test_microseconds_dropped(self):
        assert coerce_datetime(datetime(2024, 1, 1, 0, 0, 0, 999)).microsecond == 0

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            coerce_datetime(20240101)

    def test_timestamp_format(self):
        value = datetime(2024, 1, 1, 8, 5, 3)
        assert to_timestamp(value) == "2024-01-01 08:05:03"
        assert parse_timestamp(to_timestamp(value)) == value
        assert parse_timestamp(None) is None


class TestClocks:
    """Tests for FixedClock and SystemClock."""

    def test_fixed_clock(self):
        clock = FixedClock("2024-09-01")
        assert clock.now() == datetime(2024, 9, 1)
        assert clock.advance(hours=6) == datetime(2024, 9, 1, 6)
        clock.set(date(2025, 1, 1))
        assert clock.now() == datetime(2025, 1, 1)

    def test_resolve_defaults_to_clock(self):
        clock = FixedClock("2024-09-01")
        assert resolve(None, clock) == datetime(2024, 9, 1)
        assert resolve("2024-01-01", clock) == datetime(2024, 1, 1)

    def test_system_clock_has_no_microseconds(self):
        assert SystemClock().now().microsecond == 0


class TestEntityRef:
    """Tests for EntityRef."""

    def test_str(self):
        assert str(TagTeam(3)) == "Tag Team #3"

    def test_parse(self):
        assert EntityRef.parse("tag-team", "3") == TagTeam(3)
        assert EntityRef.parse(EntityType.TAG_TEAM, 3) == TagTeam(3)

    def test_parse_unknown_type(self):
        with pytest.raises(ValueError):
            EntityRef.parse("promoter", 1)
