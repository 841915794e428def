"""
Heuristic desirability score for placing a task in a candidate slot.
"""

import math

from ...models import Task, TimeSlot, UserSchedulePreferences
from ..core.time_slot import slots_overlap

PREFERRED_WINDOW_BONUS = 20.0
WORK_HOURS_BONUS = 10.0
LUNCH_PENALTY = 5.0
OVERDUE_PENALTY = 20.0
DUE_DATE_HORIZON_DAYS = 10
HIGH_PRIORITY = 4


def calculate_preferred_window_score(task: Task, slot: TimeSlot) -> float:
    """Bonus when the slot touches any of the task's preferred windows."""
    if any(slots_overlap(slot, preferred) for preferred in task.preferred_time_slots):
        return PREFERRED_WINDOW_BONUS
    return 0.0


def calculate_time_of_day_score(task: Task, slot: TimeSlot) -> float:
    hour = slot.start.hour
    score = 0.0

    # Conventional work hours
    if 9 <= hour <= 17:
        score += WORK_HOURS_BONUS

    # Lunch
    if 12 <= hour <= 13:
        score -= LUNCH_PENALTY

    # Pull high priority work towards the morning
    if task.priority >= HIGH_PRIORITY:
        score += (24 - hour) * 2

    return score


def calculate_due_date_score(task: Task, slot: TimeSlot) -> float:
    """
    Small bonus that grows as the due date approaches, or an overdue penalty
    when the slot starts on or after the due date.
    """
    if not task.due_date:
        return 0.0

    days_until_due = math.ceil((task.due_date - slot.start).total_seconds() / 86400)
    if days_until_due > 0:
        return max(0, DUE_DATE_HORIZON_DAYS - days_until_due)
    return -OVERDUE_PENALTY


def score_slot(slot: TimeSlot, task: Task, preferences: UserSchedulePreferences = None) -> float:
    """
    Additive slot score for a task. Higher is better.
    Preferences are accepted for callers that score per user; the heuristic
    itself uses conventional work hours.
    """
    return (
        calculate_preferred_window_score(task, slot) +
        calculate_time_of_day_score(task, slot) +
        calculate_due_date_score(task, slot)
    )
