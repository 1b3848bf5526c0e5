"""
Clock Tool
Resolves "today" and dose due-instants in a fixed UTC offset
"""

import logging
import re
from datetime import datetime, date, time, timedelta, timezone
from typing import Optional, Union

from config import settings


logger = logging.getLogger(__name__)


_OFFSET_PATTERN = re.compile(r"^([+-])(\d{2}):(\d{2})$")
_REMINDER_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class InvalidTimeError(ValueError):
    """Raised when a reminder time or offset cannot form a valid instant"""


def utc_now() -> datetime:
    """Current instant, always timezone-aware"""
    return datetime.now(timezone.utc)


def parse_offset(offset: Optional[str] = None) -> timezone:
    """
    Convert an offset string like "+05:30" into a fixed timezone.

    Falls back to settings.DEFAULT_TIMEZONE_OFFSET when offset is empty.
    """
    raw = (offset or settings.DEFAULT_TIMEZONE_OFFSET).strip()
    match = _OFFSET_PATTERN.match(raw)
    if not match:
        raise InvalidTimeError(f"Invalid UTC offset: {raw!r}")

    sign, hours, minutes = match.groups()
    if int(hours) > 14 or int(minutes) >= 60:
        raise InvalidTimeError(f"UTC offset out of range: {raw!r}")

    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta, name=raw)


def today_in_zone(now: datetime, tz: timezone) -> date:
    """Calendar date of `now` as seen in `tz`"""
    if now.tzinfo is None:
        raise InvalidTimeError("now must be timezone-aware")
    return now.astimezone(tz).date()


def parse_reminder_time(reminder_time: Optional[str]) -> time:
    """Parse an "HH:MM" (or "HH:MM:SS") wall-clock reminder"""
    if not reminder_time:
        raise InvalidTimeError("Reminder time is empty")

    match = _REMINDER_PATTERN.match(reminder_time.strip())
    if not match:
        raise InvalidTimeError(f"Invalid reminder time: {reminder_time!r}")

    hours, minutes, seconds = match.groups()
    try:
        return time(int(hours), int(minutes), int(seconds or 0))
    except ValueError as e:
        raise InvalidTimeError(f"Invalid reminder time: {reminder_time!r}") from e


def due_instant(
    reminder_time: Optional[str],
    today: Union[date, str],
    tz: timezone
) -> datetime:
    """
    Absolute instant at which a dose becomes due.

    Args:
        reminder_time: "HH:MM" in the patient's local wall-clock
        today: calendar date of the occurrence (date or "YYYY-MM-DD")
        tz: fixed offset the reminder is expressed in

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimeError: if the pair does not form a valid date/time
    """
    if isinstance(today, str):
        try:
            today = date.fromisoformat(today)
        except ValueError as e:
            raise InvalidTimeError(f"Invalid date: {today!r}") from e

    return datetime.combine(today, parse_reminder_time(reminder_time), tzinfo=tz)


def format_reminder_time(reminder_time: Optional[str]) -> str:
    """Human readable form of a reminder, e.g. "09:00" -> "09:00 AM" """
    try:
        return parse_reminder_time(reminder_time).strftime("%I:%M %p")
    except InvalidTimeError:
        return reminder_time or ""
