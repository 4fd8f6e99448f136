"""Tests for cron evaluation and duration rendering."""

import time
from datetime import datetime, timedelta, timezone

import pytest
from dateutil import tz

from valheimstatus.exceptions import InvalidScheduleError
from valheimstatus.schedule import (
    human_readable,
    local_now,
    next_execution,
    parse_schedule,
    time_to_next,
)


@pytest.fixture
def berlin_local(monkeypatch):
    """Run with the process local zone set to Europe/Berlin."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() not available")
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestHumanReadable:
    """human_readable() rendering."""

    def test_all_units(self) -> None:
        assert human_readable(timedelta(seconds=3665)) == "1h 1m 5s"

    def test_trailing_zero_units_dropped(self) -> None:
        assert human_readable(timedelta(seconds=300)) == "5m"
        assert human_readable(timedelta(hours=2)) == "2h"

    def test_middle_zero_unit_dropped(self) -> None:
        assert human_readable(timedelta(seconds=3601)) == "1h 1s"

    def test_seconds_only(self) -> None:
        assert human_readable(timedelta(seconds=42)) == "42s"

    def test_hours_are_not_folded_into_days(self) -> None:
        assert human_readable(timedelta(days=2, hours=1, minutes=30)) == "49h 30m"

    def test_sub_second_part_is_truncated(self) -> None:
        assert human_readable(timedelta(minutes=4, seconds=59, microseconds=999999)) == "4m 59s"

    def test_zero_duration(self) -> None:
        assert human_readable(timedelta(0)) == "0s"
        assert human_readable(timedelta(microseconds=500)) == "0s"

    def test_no_leading_or_trailing_space(self) -> None:
        rendered = human_readable(timedelta(hours=1, minutes=5, seconds=3))
        assert rendered == rendered.strip()
        assert rendered == rendered.lower()


class TestParseSchedule:
    """parse_schedule() validation."""

    @pytest.mark.parametrize(
        "expression",
        ["* * * * *", "*/5 * * * *", "0 3 * * *", "30 4 1,15 * 5", "0 0 * * MON-FRI"],
    )
    def test_accepts_five_field_expressions(self, expression: str, now: datetime) -> None:
        parse_schedule(expression, now)

    def test_rejects_six_fields(self, now: datetime) -> None:
        with pytest.raises(InvalidScheduleError) as exc_info:
            parse_schedule("0 */5 * * * *", now)
        assert exc_info.value.expression == "0 */5 * * * *"

    def test_rejects_too_few_fields(self, now: datetime) -> None:
        with pytest.raises(InvalidScheduleError):
            parse_schedule("* * *", now)

    @pytest.mark.parametrize("expression", ["", "   ", "not a cron at all", "61 * * * *", "* 25 * * *"])
    def test_rejects_invalid_expressions(self, expression: str, now: datetime) -> None:
        with pytest.raises(InvalidScheduleError):
            parse_schedule(expression, now)

    def test_error_message_is_descriptive(self, now: datetime) -> None:
        with pytest.raises(InvalidScheduleError) as exc_info:
            parse_schedule("* *", now)
        assert "* *" in str(exc_info.value)
        assert "5" in str(exc_info.value)


class TestTimeToNext:
    """time_to_next() and next_execution()."""

    def test_every_five_minutes(self, now: datetime) -> None:
        assert time_to_next("*/5 * * * *", now) == timedelta(minutes=5)

    def test_strictly_after_now(self, now: datetime) -> None:
        # now is exactly on an hourly boundary
        assert time_to_next("0 * * * *", now) == timedelta(hours=1)

    def test_daily_job(self, now: datetime) -> None:
        assert time_to_next("0 3 * * *", now) == timedelta(hours=15)

    def test_partial_minute(self, now: datetime) -> None:
        remaining = time_to_next("*/5 * * * *", now + timedelta(seconds=30))
        assert remaining == timedelta(minutes=4, seconds=30)
        assert human_readable(remaining) == "4m 30s"

    def test_next_execution_keeps_timezone(self, now: datetime) -> None:
        upcoming = next_execution("15 12 * * *", now)
        assert upcoming == datetime(2024, 1, 1, 12, 15, tzinfo=timezone.utc)

    def test_naive_now_is_accepted(self) -> None:
        remaining = time_to_next("* * * * *", datetime(2024, 1, 1, 12, 0, 0))
        assert remaining == timedelta(minutes=1)

    def test_invalid_expression_raises(self, now: datetime) -> None:
        with pytest.raises(InvalidScheduleError):
            time_to_next("every day", now)


class TestDaylightSaving:
    """Next runs across a DST change are measured in real elapsed time."""

    def test_spring_forward_with_zone(self) -> None:
        berlin = tz.gettz("Europe/Berlin")
        # 12:00 CET is 11:00 UTC; next 03:00 is CEST, 01:00 UTC
        now = datetime(2024, 3, 30, 12, 0, tzinfo=berlin)
        assert time_to_next("0 3 * * *", now) == timedelta(hours=14)

    def test_fall_back_with_zone(self) -> None:
        berlin = tz.gettz("Europe/Berlin")
        # 12:00 CEST is 10:00 UTC; next 03:00 is CET, 02:00 UTC
        now = datetime(2024, 10, 26, 12, 0, tzinfo=berlin)
        assert time_to_next("0 3 * * *", now) == timedelta(hours=16)

    def test_naive_now_uses_local_dst_rules(self, berlin_local) -> None:
        remaining = time_to_next("0 3 * * *", datetime(2024, 3, 30, 12, 0))
        assert remaining == timedelta(hours=14)
        assert human_readable(remaining) == "14h"

    def test_local_now_follows_dst(self, berlin_local) -> None:
        now = local_now()
        winter = datetime(2024, 1, 15, 12, 0, tzinfo=now.tzinfo)
        summer = datetime(2024, 7, 15, 12, 0, tzinfo=now.tzinfo)
        assert winter.utcoffset() == timedelta(hours=1)
        assert summer.utcoffset() == timedelta(hours=2)
