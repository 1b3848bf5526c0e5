"""
Tests for Clock Tool
Tests offset parsing, "today" resolution and due-instant computation
"""

import pytest
from datetime import datetime, date, time, timedelta, timezone

from tools.clock import (
    InvalidTimeError,
    due_instant,
    format_reminder_time,
    parse_offset,
    parse_reminder_time,
    today_in_zone,
    utc_now,
)
from tests import IST


class TestParseOffset:
    """Tests for UTC offset parsing"""

    @pytest.mark.unit
    def test_positive_offset(self):
        tz = parse_offset("+05:30")
        assert tz.utcoffset(None) == timedelta(hours=5, minutes=30)

    @pytest.mark.unit
    def test_negative_offset(self):
        tz = parse_offset("-04:00")
        assert tz.utcoffset(None) == timedelta(hours=-4)

    @pytest.mark.unit
    def test_empty_offset_uses_default(self):
        assert parse_offset(None).utcoffset(None) == timedelta(hours=5, minutes=30)
        assert parse_offset("").utcoffset(None) == timedelta(hours=5, minutes=30)

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["IST", "5:30", "+5:30", "+05:75", "+15:00", "UTC+1"])
    def test_invalid_offset(self, raw):
        with pytest.raises(InvalidTimeError):
            parse_offset(raw)


class TestTodayInZone:
    """Tests for calendar date resolution"""

    @pytest.mark.unit
    def test_date_rolls_over_before_utc(self):
        # 20:00 UTC on Feb 29 is already Mar 1 in IST
        now = datetime(2024, 2, 29, 20, 0, tzinfo=timezone.utc)
        assert today_in_zone(now, IST) == date(2024, 3, 1)

    @pytest.mark.unit
    def test_same_date(self):
        now = datetime(2024, 3, 1, 3, 0, tzinfo=timezone.utc)
        assert today_in_zone(now, IST) == date(2024, 3, 1)

    @pytest.mark.unit
    def test_naive_datetime_rejected(self):
        with pytest.raises(InvalidTimeError):
            today_in_zone(datetime(2024, 3, 1, 10, 0), IST)

    @pytest.mark.unit
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None


class TestDueInstant:
    """Tests for reminder instant computation"""

    @pytest.mark.unit
    def test_reminder_in_offset(self):
        due = due_instant("09:00", date(2024, 3, 1), IST)
        assert due == datetime(2024, 3, 1, 3, 30, tzinfo=timezone.utc)

    @pytest.mark.unit
    def test_accepts_iso_date_string(self):
        due = due_instant("21:15", "2024-03-01", IST)
        assert due.astimezone(IST).time() == time(21, 15)

    @pytest.mark.unit
    def test_accepts_seconds(self):
        assert parse_reminder_time("08:00:30") == time(8, 0, 30)

    @pytest.mark.unit
    @pytest.mark.parametrize("reminder", ["25:00", "08:61", "8am", "", None, "08-00"])
    def test_malformed_reminder_time(self, reminder):
        with pytest.raises(InvalidTimeError):
            due_instant(reminder, date(2024, 3, 1), IST)

    @pytest.mark.unit
    def test_invalid_date_string(self):
        with pytest.raises(InvalidTimeError):
            due_instant("09:00", "2024-02-30", IST)


class TestFormatReminderTime:
    """Tests for display formatting"""

    @pytest.mark.unit
    def test_formats_twelve_hour(self):
        assert format_reminder_time("21:05") == "09:05 PM"

    @pytest.mark.unit
    def test_passes_through_unparseable(self):
        assert format_reminder_time("soon") == "soon"
