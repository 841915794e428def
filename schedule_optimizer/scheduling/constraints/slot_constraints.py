"""
Slot validity checks against constraints, existing placements and workload preferences.
"""

from datetime import timedelta
from typing import Iterable, Optional, Sequence

from ...models import ConstraintType, ScheduleConstraint, ScheduledTask, TimeSlot, UserSchedulePreferences
from ..core.time_slot import slot_overlaps_task, times_overlap

FIXED_PRIORITY_THRESHOLD = 5


def is_blocked_by_constraint(slot: TimeSlot, constraint: ScheduleConstraint,
                             fixed_priority_threshold: int = FIXED_PRIORITY_THRESHOLD) -> bool:
    """
    Unavailable windows always block; fixed windows block only above the
    priority threshold; flexible windows never block.
    """
    if not times_overlap(slot.start, slot.end, constraint.start, constraint.end):
        return False
    if constraint.type == ConstraintType.UNAVAILABLE:
        return True
    if constraint.type == ConstraintType.FIXED:
        return constraint.priority is not None and constraint.priority > fixed_priority_threshold
    return False


def is_slot_valid(slot: TimeSlot, constraints: Iterable[ScheduleConstraint],
                  existing_tasks: Iterable[ScheduledTask],
                  fixed_priority_threshold: int = FIXED_PRIORITY_THRESHOLD) -> bool:
    """Check a slot against hard constraints and already placed tasks."""
    for constraint in constraints:
        if is_blocked_by_constraint(slot, constraint, fixed_priority_threshold):
            return False

    for existing in existing_tasks:
        if slot_overlaps_task(slot, existing):
            return False

    return True


def respects_workload(slot: TimeSlot, existing_tasks: Sequence[ScheduledTask],
                      preferences: Optional[UserSchedulePreferences]) -> bool:
    """
    Check break spacing and the daily work-hours cap.
    A slot must keep `break_duration` minutes away from every placement and
    must not push its day's placed minutes above `max_work_hours_per_day`.
    """
    if preferences is None:
        return True

    gap = timedelta(minutes=preferences.break_duration)
    slot_day = slot.start.date()
    day_minutes = slot.duration_minutes()

    for existing in existing_tasks:
        if gap and times_overlap(slot.start, slot.end, existing.start_time - gap, existing.end_time + gap):
            return False
        if existing.start_time.date() == slot_day:
            day_minutes += (existing.end_time - existing.start_time).total_seconds() / 60

    return day_minutes <= preferences.max_work_hours_per_day * 60


def is_placement_allowed(slot: TimeSlot, constraints: Iterable[ScheduleConstraint],
                         existing_tasks: Sequence[ScheduledTask], preferences: UserSchedulePreferences,
                         fixed_priority_threshold: int = FIXED_PRIORITY_THRESHOLD) -> bool:
    """Full check used when choosing a new slot for a task."""
    return (is_slot_valid(slot, constraints, existing_tasks, fixed_priority_threshold)
            and respects_workload(slot, existing_tasks, preferences))
