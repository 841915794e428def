"""
Time slot helpers for the scheduling system.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

import pytz

from ...exceptions import ConfigurationError
from ...models import ScheduledTask, TimeSlot, UserSchedulePreferences


def times_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap."""
    return start1 < end2 and end1 > start2


def slots_overlap(slot: TimeSlot, other: TimeSlot) -> bool:
    return times_overlap(slot.start, slot.end, other.start, other.end)


def slot_overlaps_task(slot: TimeSlot, scheduled: ScheduledTask) -> bool:
    return times_overlap(slot.start, slot.end, scheduled.start_time, scheduled.end_time)


def make_slot(start: datetime, duration_minutes: float) -> TimeSlot:
    return TimeSlot(start=start, end=start + timedelta(minutes=duration_minutes))


def work_day_bounds(day: date, preferences: UserSchedulePreferences, tzinfo=None) -> tuple:
    """Return (work_start, work_end) datetimes for a calendar day."""
    midnight = datetime.combine(day, time.min, tzinfo=tzinfo)
    return (midnight + timedelta(hours=preferences.work_start_hour),
            midnight + timedelta(hours=preferences.work_end_hour))


def within_work_hours(slot: TimeSlot, preferences: UserSchedulePreferences) -> bool:
    """True when the slot sits entirely inside the work hours of its start day."""
    work_start, work_end = work_day_bounds(slot.start.date(), preferences, slot.start.tzinfo)
    return slot.start >= work_start and slot.end <= work_end


def is_work_day(day: date, preferences: UserSchedulePreferences) -> bool:
    # Preferences count days from Sunday = 0; date.weekday() counts from Monday = 0
    if not preferences.preferred_work_days:
        return True
    return (day.weekday() + 1) % 7 in preferences.preferred_work_days


def next_work_day_start(after: date, preferences: UserSchedulePreferences, tzinfo=None,
                        max_days: int = 7) -> Optional[datetime]:
    """First work-hours start on a work day strictly after `after`, within max_days."""
    for offset in range(1, max_days + 1):
        day = after + timedelta(days=offset)
        if is_work_day(day, preferences):
            return work_day_bounds(day, preferences, tzinfo)[0]
    return None


def load_timezone(name: Optional[str]):
    try:
        return pytz.timezone(name or 'UTC')
    except pytz.UnknownTimeZoneError:
        raise ConfigurationError(f"Unknown timezone: {name}", details={"timezone": name})


def to_local_naive(value: Optional[datetime], tz) -> Optional[datetime]:
    """
    Convert an aware datetime to naive wall time in `tz`. Naive values are
    already local and pass through unchanged.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)
