"""
Greedy construction: priority/due-date ordered single-pass placement.
"""

import logging
from typing import List, Optional, Sequence

from ...models import OptimizedSchedule, ScheduledTask, Task, TimeSlot
from ..constraints.slot_constraints import is_placement_allowed
from ..core.context import SchedulingContext
from ..core.slot_generator import generate_candidate_pool
from ..scoring.schedule_scoring import build_schedule, place_task
from ..scoring.slot_scoring import score_slot

logger = logging.getLogger(__name__)


def order_tasks(tasks: Sequence[Task], context: SchedulingContext) -> List[Task]:
    """Priority descending, then due date ascending; tasks without a due date go last among ties."""
    return sorted(
        tasks,
        key=lambda t: (-t.priority, t.due_date is None, t.due_date or context.reference),
    )


def find_best_slot(task: Task, context: SchedulingContext,
                   existing_tasks: Sequence[ScheduledTask]) -> Optional[TimeSlot]:
    """
    Highest scoring valid slot for a task across the lookahead window.
    The pool is chronological, so ties keep the earliest slot.
    """
    config = context.config
    best_slot = None
    best_score = float('-inf')

    for slot in generate_candidate_pool(context.reference, context.preferences, task.duration_minutes,
                                        config.lookahead_days, config.slot_granularity_minutes):
        if not is_placement_allowed(slot, context.constraints, existing_tasks, context.preferences,
                                    config.fixed_priority_threshold):
            continue
        score = score_slot(slot, task, context.preferences)
        if score > best_score:
            best_score = score
            best_slot = slot

    return best_slot


class GreedyScheduler:
    """Places each task in its best slot, highest priority first. Never revisits a placement."""

    def __init__(self, context: SchedulingContext):
        self.context = context

    def schedule(self) -> OptimizedSchedule:
        placements: List[ScheduledTask] = []
        unscheduled: List[str] = []
        tasks = list(self.context.tasks_by_id.values())
        if len(tasks) < len(self.context.tasks):
            logger.warning(f"Ignoring {len(self.context.tasks) - len(tasks)} tasks with repeated ids")

        for task in order_tasks(tasks, self.context):
            slot = find_best_slot(task, self.context, placements)
            if slot is None:
                logger.info(f"❌ No valid slot for task '{task.title}' ({task.id})")
                unscheduled.append(task.id)
                continue

            placements.append(place_task(task, slot, self.context.constraints))
            logger.debug(f"✅ Placed '{task.title}' at {slot.start:%Y-%m-%d %H:%M}-{slot.end:%H:%M}")

        schedule = build_schedule(self.context, placements, unscheduled)
        logger.info(f"Greedy pass placed {len(schedule.tasks)}/{len(tasks)} tasks, score {schedule.score:.2f}")
        return schedule
