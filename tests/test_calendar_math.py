"""Tests for calendar_math.py date helpers and window resolution."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from calendar_math import (
    EPOCH,
    InvalidWindow,
    UnparseableRecordDate,
    Window,
    add_days,
    add_months,
    day_key,
    days_between,
    explicit_window,
    is_same_day,
    month_end,
    month_key,
    parse_calendar_date,
    resolve_window,
    week_start,
)


# ── Keys & alignment ─────────────────────────


class TestKeys:
    def test_day_key_zero_pads(self):
        assert day_key(date(2024, 1, 5)) == "2024-01-05"

    def test_month_key(self):
        assert month_key(date(2024, 11, 30)) == "2024-11"

    def test_week_start_is_monday(self):
        # 2024-01-07 is a Sunday; its week began Monday 2024-01-01
        assert week_start(date(2024, 1, 7)) == date(2024, 1, 1)
        assert week_start(date(2024, 1, 8)) == date(2024, 1, 8)

    def test_week_start_crosses_year(self):
        assert week_start(date(2025, 1, 1)) == date(2024, 12, 30)

    def test_month_end_leap_year(self):
        assert month_end(date(2024, 2, 10)) == date(2024, 2, 29)
        assert month_end(date(2023, 2, 10)) == date(2023, 2, 28)


class TestArithmetic:
    def test_days_between(self):
        assert days_between(date(2024, 1, 1), date(2024, 1, 31)) == 30
        assert days_between(date(2024, 1, 31), date(2024, 1, 1)) == -30

    def test_days_between_across_dst_is_whole_days(self):
        # US DST began 2024-03-10; calendar math must not notice
        assert days_between(date(2024, 3, 9), date(2024, 3, 11)) == 2

    def test_add_days(self):
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_add_months_clamps_day(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)

    def test_add_months_crosses_year(self):
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
        assert add_months(date(2024, 1, 15), -13) == date(2022, 12, 15)

    def test_is_same_day(self):
        assert is_same_day(date(2024, 1, 1), date(2024, 1, 1))
        assert not is_same_day(date(2024, 1, 1), date(2024, 1, 2))


# ── Parsing ──────────────────────────────────


class TestParseCalendarDate:
    def test_date_passthrough(self):
        assert parse_calendar_date(date(2024, 1, 5)) == date(2024, 1, 5)

    def test_datetime_keeps_its_own_day(self):
        assert parse_calendar_date(datetime(2024, 1, 5, 23, 59)) == date(2024, 1, 5)

    def test_iso_string(self):
        assert parse_calendar_date("2024-01-05") == date(2024, 1, 5)

    def test_timestamp_string_ignores_offset(self):
        """A late-evening entry with a negative offset stays on its own day."""
        assert parse_calendar_date("2024-01-05T23:30:00-08:00") == date(2024, 1, 5)
        assert parse_calendar_date("2024-01-05T00:10:00Z") == date(2024, 1, 5)

    @pytest.mark.parametrize("value", ["not-a-date", "", None, 20240105, "2024-13-01"])
    def test_unparseable(self, value):
        with pytest.raises(UnparseableRecordDate):
            parse_calendar_date(value)


# ── Window ───────────────────────────────────


class TestWindow:
    def test_length_is_inclusive(self):
        assert Window(date(2024, 1, 1), date(2024, 1, 31)).length_days == 31
        assert Window(date(2024, 1, 1), date(2024, 1, 1)).length_days == 1

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidWindow):
            Window(date(2024, 1, 2), date(2024, 1, 1))

    def test_contains_is_inclusive(self):
        w = Window(date(2024, 1, 1), date(2024, 1, 31))
        assert w.contains(date(2024, 1, 1))
        assert w.contains(date(2024, 1, 31))
        assert not w.contains(date(2024, 2, 1))

    def test_explicit_window_from_strings(self):
        w = explicit_window("2024-01-01", "2024-01-31")
        assert w == Window(date(2024, 1, 1), date(2024, 1, 31))

    def test_explicit_window_bad_date_is_invalid_window(self):
        with pytest.raises(InvalidWindow):
            explicit_window("yesterday", "2024-01-31")


class TestResolveWindow:
    def test_concrete_window_unchanged(self):
        w = Window(date(2024, 1, 1), date(2024, 1, 31))
        assert resolve_window(w) is w

    def test_week_is_last_seven_days(self, ref_date):
        w = resolve_window("week", reference_date=ref_date)
        assert w.start == date(2024, 3, 4)
        assert w.end == ref_date
        assert w.length_days == 7
        assert w.key == "week"

    def test_month_is_last_thirty_days(self, ref_date):
        w = resolve_window("month", reference_date=ref_date)
        assert w.start == date(2024, 2, 10)
        assert w.length_days == 30

    @pytest.mark.parametrize("key, days", [("3months", 90), ("6months", 180), ("year", 365)])
    def test_fixed_lengths(self, ref_date, key, days):
        assert resolve_window(key, reference_date=ref_date).length_days == days

    def test_all_starts_at_earliest_record(self, ref_date):
        dates = [date(2023, 5, 1), date(2022, 7, 9), date(2024, 1, 1)]
        w = resolve_window("all", dates, reference_date=ref_date)
        assert w.start == date(2022, 7, 9)
        assert w.end == ref_date
        assert w.key == "all"

    def test_all_without_records_uses_epoch(self, ref_date):
        assert resolve_window("all", [], reference_date=ref_date).start == EPOCH

    def test_all_with_only_future_records_starts_today(self, ref_date):
        w = resolve_window("all", [date(2030, 1, 1)], reference_date=ref_date)
        assert w.start == ref_date

    def test_unknown_key(self, ref_date):
        with pytest.raises(InvalidWindow):
            resolve_window("fortnight", reference_date=ref_date)
