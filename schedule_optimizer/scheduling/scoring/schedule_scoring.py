"""
Per-placement confidence and aggregate schedule score.

The aggregate score is always recomputed from the placements and conflicts
handed in; no stage carries a score forward.
"""

from typing import Iterable, List, Sequence

from ...models import OptimizedSchedule, ScheduleConflict, ScheduleConstraint, ScheduledTask, Task, TimeSlot
from ..conflicts.detector import detect_conflicts, detect_dependency_conflicts, unschedulable_conflict
from ..core.context import SchedulingContext
from ..core.time_slot import slots_overlap, times_overlap

BASE_CONFIDENCE = 0.5
PREFERRED_CONFIDENCE_BONUS = 0.3
CONSTRAINT_CONFIDENCE_PENALTY = 0.2

TASK_WEIGHT = 10
CONFLICT_WEIGHT = 20


def calculate_confidence(task: Task, slot: TimeSlot, constraints: Iterable[ScheduleConstraint]) -> float:
    confidence = BASE_CONFIDENCE

    if any(slots_overlap(slot, preferred) for preferred in task.preferred_time_slots):
        confidence += PREFERRED_CONFIDENCE_BONUS

    for constraint in constraints:
        if times_overlap(slot.start, slot.end, constraint.start, constraint.end):
            confidence -= CONSTRAINT_CONFIDENCE_PENALTY

    return max(0.0, min(1.0, confidence))


def calculate_schedule_score(scheduled_tasks: Sequence[ScheduledTask],
                             conflicts: Sequence[ScheduleConflict]) -> float:
    score = TASK_WEIGHT * len(scheduled_tasks)
    score -= CONFLICT_WEIGHT * len(conflicts)
    score += sum(scheduled.confidence for scheduled in scheduled_tasks)
    return max(0.0, score)


def place_task(task: Task, slot: TimeSlot, constraints: Iterable[ScheduleConstraint]) -> ScheduledTask:
    return ScheduledTask(
        task_id=task.id,
        start_time=slot.start,
        end_time=slot.end,
        confidence=calculate_confidence(task, slot, constraints),
    )


def build_schedule(context: SchedulingContext, scheduled_tasks: Iterable[ScheduledTask],
                   unscheduled_task_ids: Iterable[str] = ()) -> OptimizedSchedule:
    """
    Annotate placements with every conflict and a freshly computed score.
    Placements are returned in start-time order.
    """
    ordered = sorted(scheduled_tasks, key=lambda s: s.start_time)
    unscheduled = tuple(unscheduled_task_ids)

    conflicts: List[ScheduleConflict] = []
    for task_id in unscheduled:
        task = context.find_task(task_id)
        if task is not None:
            conflicts.append(unschedulable_conflict(task))
    conflicts.extend(detect_conflicts(ordered, context.constraints))
    conflicts.extend(detect_dependency_conflicts(ordered, context.tasks_by_id))

    return OptimizedSchedule(
        tasks=tuple(ordered),
        score=calculate_schedule_score(ordered, conflicts),
        conflicts=tuple(conflicts),
        unscheduled_task_ids=unscheduled,
    )
