"""Unit tests for date and time token parsing."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from showlist.parsing.temporal import (
    combine_epoch_ms,
    iso_date,
    month_number,
    parse_date,
    parse_time,
    year_month,
)
from showlist.utils.errors import DateFormatError, TimeFormatError

LA = ZoneInfo("America/Los_Angeles")
NOW = datetime(2024, 8, 20, 12, 0, tzinfo=LA)


def _midnight_ms(year: int, month: int, day: int) -> int:
    return int(datetime(year, month, day, tzinfo=LA).timestamp()) * 1000


# ======================================================================
# month_number
# ======================================================================


class TestMonthNumber:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [("jan", 1), ("Aug", 8), ("sept", 9), ("Sept.", 9), ("december", 12)],
    )
    def test_known_months(self, token: str, expected: int) -> None:
        assert month_number(token) == expected

    def test_unknown(self) -> None:
        assert month_number("foo") is None


# ======================================================================
# parse_date
# ======================================================================


class TestParseDate:
    """Tests for year inference and date validation."""

    def test_current_year(self) -> None:
        parsed = parse_date("aug 23 fri", now=NOW)
        assert parsed.date == "2024-08-23"
        assert parsed.epoch_ms == _midnight_ms(2024, 8, 23)

    def test_recent_past_stays_in_current_year(self) -> None:
        assert parse_date("jul 25", now=NOW).date == "2024-07-25"

    def test_old_date_rolls_to_next_year(self) -> None:
        assert parse_date("jul 1", now=NOW).date == "2025-07-01"

    def test_january_rolls_forward(self) -> None:
        assert parse_date("jan 5 sun", now=NOW).date == "2025-01-05"

    def test_rollover_window_configurable(self) -> None:
        assert parse_date("jul 1", now=NOW, rollover_days=60).date == "2024-07-01"

    def test_naive_now_is_local(self) -> None:
        naive = datetime(2024, 8, 20, 12, 0)
        assert parse_date("aug 23", now=naive) == parse_date("aug 23", now=NOW)

    def test_trailing_comma_on_day(self) -> None:
        assert parse_date("Sept. 3, tue", now=NOW).date == "2024-09-03"

    @pytest.mark.parametrize("text", ["aug", "foo 3", "aug x", "aug 32", "aug 0", ""])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(DateFormatError):
            parse_date(text, now=NOW)

    def test_impossible_day(self) -> None:
        with pytest.raises(DateFormatError):
            parse_date("feb 30", now=NOW)

    def test_leap_day_rolling_into_non_leap_year(self) -> None:
        # Feb 29 2024 is in the past, and 2025 has no Feb 29.
        with pytest.raises(DateFormatError):
            parse_date("feb 29", now=NOW)

    def test_leap_day_in_non_leap_year_means_next_year(self) -> None:
        december = datetime(2027, 12, 20, tzinfo=LA)
        parsed = parse_date("feb 29 tue", now=december)
        assert parsed.date == "2028-02-29"
        assert parsed.epoch_ms == _midnight_ms(2028, 2, 29)


# ======================================================================
# parse_time
# ======================================================================


class TestParseTime:
    """Tests for door/show time parsing."""

    def test_door_and_show(self) -> None:
        parsed = parse_time("7pm/8pm")
        assert parsed.start_time == "20:00"
        assert parsed.door_time == "19:00"

    def test_show_only(self) -> None:
        parsed = parse_time("8:30pm")
        assert parsed.start_time == "20:30"
        assert parsed.door_time is None

    def test_bare_hour_defaults_to_evening(self) -> None:
        assert parse_time("9").start_time == "21:00"

    def test_bare_noon(self) -> None:
        assert parse_time("12").start_time == "12:00"

    def test_midnight_am(self) -> None:
        assert parse_time("12am").start_time == "00:00"

    def test_noon_pm(self) -> None:
        assert parse_time("12pm").start_time == "12:00"

    def test_morning(self) -> None:
        assert parse_time("11am").start_time == "11:00"

    def test_mixed_door_show(self) -> None:
        parsed = parse_time("6:30/7:30")
        assert parsed.door_time == "18:30"
        assert parsed.start_time == "19:30"

    @pytest.mark.parametrize("text", ["13pm", "25", "8:75pm", "noon", "", "7pm/"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(TimeFormatError):
            parse_time(text)


# ======================================================================
# Epoch helpers
# ======================================================================


class TestEpochHelpers:
    def test_combine_epoch_ms(self) -> None:
        start = combine_epoch_ms("2024-08-23", "20:00")
        assert start == _midnight_ms(2024, 8, 23) + 20 * 3600 * 1000

    def test_year_month_uses_local_time(self) -> None:
        # 20:00 on Aug 31 in California is already September in UTC.
        late = combine_epoch_ms("2024-08-31", "20:00")
        assert year_month(late) == "2024-08"
        assert year_month(late, "UTC") == "2024-09"

    def test_iso_date(self) -> None:
        assert iso_date(_midnight_ms(2024, 8, 23)) == "2024-08-23"
