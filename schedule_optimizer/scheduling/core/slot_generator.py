"""
Candidate slot generation.

Slots are produced lazily on a fixed grid inside the user's work hours; the
candidate pool for one task is the concatenation of the per-day generators
over the lookahead window.
"""

from datetime import date, datetime, timedelta
from typing import Iterator

from ...models import TimeSlot, UserSchedulePreferences
from .time_slot import is_work_day, work_day_bounds

SLOT_GRANULARITY_MINUTES = 30
LOOKAHEAD_DAYS = 7


def generate_day_slots(day: date, preferences: UserSchedulePreferences, duration_minutes: int,
                       granularity_minutes: int = SLOT_GRANULARITY_MINUTES, tzinfo=None) -> Iterator[TimeSlot]:
    """Yield every slot of `duration_minutes` starting on the grid between work start and work end."""
    work_start, work_end = work_day_bounds(day, preferences, tzinfo)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=granularity_minutes)

    start = work_start
    while start < work_end:
        end = start + duration
        if end > work_end:
            # Later starts only end later
            return
        yield TimeSlot(start=start, end=end)
        start += step


def generate_candidate_pool(reference: datetime, preferences: UserSchedulePreferences, duration_minutes: int,
                            lookahead_days: int = LOOKAHEAD_DAYS,
                            granularity_minutes: int = SLOT_GRANULARITY_MINUTES) -> Iterator[TimeSlot]:
    """
    Yield candidate slots for one task across the lookahead window, in chronological order.
    Day 0 is the reference date; slots starting before the reference instant are skipped.
    """
    first_day = reference.date()
    for offset in range(lookahead_days):
        day = first_day + timedelta(days=offset)
        if not is_work_day(day, preferences):
            continue
        for slot in generate_day_slots(day, preferences, duration_minutes, granularity_minutes, reference.tzinfo):
            if slot.start < reference:
                continue
            yield slot
