"""Tests for timestamp helpers."""

from datetime import datetime, timezone

from board_agent.utils.clock import format_timestamp, next_after, parse_timestamp

from conftest import FrozenClock


class TestTimestamps:
    def test_format_is_sortable_utc(self):
        stamp = format_timestamp(datetime(2026, 3, 4, 5, 6, 7, 890, tzinfo=timezone.utc))

        assert stamp == "2026-03-04T05:06:07.000890Z"

    def test_parse_accepts_millisecond_strings(self):
        assert parse_timestamp("2026-03-04T05:06:07.123Z") == datetime(
            2026, 3, 4, 5, 6, 7, 123000, tzinfo=timezone.utc
        )

    def test_next_after_uses_the_clock_when_it_moved(self):
        clock = FrozenClock(datetime(2026, 1, 1, 12, tzinfo=timezone.utc))

        assert next_after("2026-01-01T00:00:00.000000Z", clock) == "2026-01-01T12:00:00.000000Z"

    def test_next_after_bumps_a_stalled_clock(self):
        clock = FrozenClock(datetime(2026, 1, 1, tzinfo=timezone.utc))

        assert next_after("2026-01-01T00:00:00.000000Z", clock) == "2026-01-01T00:00:00.000001Z"

    def test_next_after_handles_clock_behind_previous(self):
        clock = FrozenClock(datetime(2025, 1, 1, tzinfo=timezone.utc))

        assert next_after("2026-01-01T00:00:00.999Z", clock) == "2026-01-01T00:00:00.999001Z"

    def test_next_after_ignores_unparseable_previous(self):
        clock = FrozenClock(datetime(2026, 1, 1, tzinfo=timezone.utc))

        assert next_after("yesterday", clock) == "2026-01-01T00:00:00.000000Z"
