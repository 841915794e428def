"""
Conflict detection over a set of placements.

Detection only annotates: it never moves or removes a placement.
"""

from typing import Dict, Iterable, List, Sequence

from ...models import (
    ConflictSeverity, ConflictType, ConstraintType, ScheduleConflict, ScheduleConstraint, ScheduledTask, Task,
)
from ..core.time_slot import times_overlap


def detect_overlaps(scheduled_tasks: Sequence[ScheduledTask]) -> List[ScheduleConflict]:
    conflicts = []
    for i in range(len(scheduled_tasks)):
        for j in range(i + 1, len(scheduled_tasks)):
            first, second = scheduled_tasks[i], scheduled_tasks[j]
            if times_overlap(first.start_time, first.end_time, second.start_time, second.end_time):
                conflicts.append(ScheduleConflict(
                    type=ConflictType.OVERLAP,
                    description=f"Tasks {first.task_id} and {second.task_id} overlap",
                    severity=ConflictSeverity.HIGH,
                    task_ids=(first.task_id, second.task_id),
                ))
    return conflicts


def detect_constraint_violations(scheduled_tasks: Iterable[ScheduledTask],
                                 constraints: Sequence[ScheduleConstraint]) -> List[ScheduleConflict]:
    conflicts = []
    for scheduled in scheduled_tasks:
        for constraint in constraints:
            if (constraint.type == ConstraintType.UNAVAILABLE and
                    times_overlap(scheduled.start_time, scheduled.end_time, constraint.start, constraint.end)):
                conflicts.append(ScheduleConflict(
                    type=ConflictType.CONSTRAINT_VIOLATION,
                    description=f"Task {scheduled.task_id} violates unavailable time constraint",
                    severity=ConflictSeverity.HIGH,
                    task_ids=(scheduled.task_id,),
                ))
    return conflicts


def detect_dependency_conflicts(scheduled_tasks: Sequence[ScheduledTask],
                                tasks_by_id: Dict[str, Task]) -> List[ScheduleConflict]:
    """
    A placed task's dependency is unmet when it is unknown (low), was not
    placed (medium) or finishes after the dependent task starts (medium).
    """
    placed = {scheduled.task_id: scheduled for scheduled in scheduled_tasks}
    conflicts = []

    for scheduled in scheduled_tasks:
        task = tasks_by_id.get(scheduled.task_id)
        if task is None:
            continue
        for dependency_id in task.dependencies:
            if dependency_id not in tasks_by_id:
                description = f"Task {task.id} depends on unknown task {dependency_id}"
                severity = ConflictSeverity.LOW
            elif dependency_id not in placed:
                description = f"Task {task.id} depends on unscheduled task {dependency_id}"
                severity = ConflictSeverity.MEDIUM
            elif placed[dependency_id].end_time > scheduled.start_time:
                description = f"Task {task.id} starts before its dependency {dependency_id} finishes"
                severity = ConflictSeverity.MEDIUM
            else:
                continue
            conflicts.append(ScheduleConflict(
                type=ConflictType.DEPENDENCY_UNMET,
                description=description,
                severity=severity,
                task_ids=(task.id, dependency_id),
            ))
    return conflicts


def unschedulable_conflict(task: Task) -> ScheduleConflict:
    return ScheduleConflict(
        type=ConflictType.CONSTRAINT_VIOLATION,
        description=f"Unable to schedule task: {task.title}",
        severity=ConflictSeverity.HIGH,
        task_ids=(task.id,),
    )


def detect_conflicts(scheduled_tasks: Sequence[ScheduledTask],
                     constraints: Sequence[ScheduleConstraint]) -> List[ScheduleConflict]:
    """Pairwise overlaps followed by unavailable-window violations."""
    return detect_overlaps(scheduled_tasks) + detect_constraint_violations(scheduled_tasks, constraints)
