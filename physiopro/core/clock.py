"""Wall-clock helpers for the calendar time zone.

Appointment times are stored as naive datetimes in ``CALENDAR_TIMEZONE``.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from physiopro.core import config


def calendar_zone() -> ZoneInfo:
    return ZoneInfo(config.CALENDAR_TIMEZONE)


def local_now() -> datetime:
    return datetime.now(calendar_zone()).replace(tzinfo=None, second=0, microsecond=0)


def local_today() -> date:
    return local_now().date()


def to_calendar_time(value: datetime) -> datetime:
    """Convert an aware datetime to naive calendar-zone time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(calendar_zone()).replace(tzinfo=None)
