"""
Bounded local search over a complete schedule.

Two neighbourhoods are explored each iteration: swapping the start times of
tasks that are adjacent in time, and relocating a single task to its best
valid slot. A candidate replaces the current schedule only when its freshly
computed score is strictly higher, so the score never decreases.
"""

import logging
from typing import List, Optional

from ...clock import TimeBudget
from ...models import OptimizedSchedule, ScheduledTask
from ..constraints.slot_constraints import is_placement_allowed
from ..core.context import SchedulingContext
from ..core.time_slot import make_slot, within_work_hours
from ..scoring.schedule_scoring import build_schedule, place_task
from .greedy import find_best_slot

logger = logging.getLogger(__name__)


class LocalSearchOptimizer:
    def __init__(self, context: SchedulingContext, budget: TimeBudget):
        self.context = context
        self.budget = budget
        self.iterations = 0

    def optimize(self, schedule: OptimizedSchedule) -> OptimizedSchedule:
        best = schedule
        improved = True
        self.iterations = 0
        max_iterations = self.context.config.max_iterations

        while improved and not self.budget.exhausted() and self.iterations < max_iterations:
            improved = False
            self.iterations += 1

            for index in range(len(best.tasks) - 1):
                candidate = self._try_swap(best, index)
                if candidate is not None and candidate.score > best.score:
                    logger.debug(f"Swap at position {index} improved score {best.score:.2f} -> {candidate.score:.2f}")
                    best = candidate
                    improved = True

            for index in range(len(best.tasks)):
                candidate = self._try_relocate(best, index)
                if candidate is not None and candidate.score > best.score:
                    logger.debug(f"Relocation of {best.tasks[index].task_id} improved score "
                                 f"{best.score:.2f} -> {candidate.score:.2f}")
                    best = candidate
                    improved = True

        logger.info(f"Local search finished after {self.iterations} iterations, "
                    f"score {schedule.score:.2f} -> {best.score:.2f}")
        return best

    def _try_swap(self, schedule: OptimizedSchedule, index: int) -> Optional[OptimizedSchedule]:
        """Exchange start times of the tasks at `index` and `index + 1`, each keeping its own duration."""
        if index + 1 >= len(schedule.tasks):
            return None
        first, second = schedule.tasks[index], schedule.tasks[index + 1]
        first_task = self.context.find_task(first.task_id)
        second_task = self.context.find_task(second.task_id)
        if first_task is None or second_task is None:
            return None

        new_second_slot = make_slot(first.start_time, second_task.duration_minutes)
        new_first_slot = make_slot(second.start_time, first_task.duration_minutes)

        others = [s for i, s in enumerate(schedule.tasks) if i not in (index, index + 1)]
        if not self._slot_usable(new_second_slot, others):
            return None
        new_second = place_task(second_task, new_second_slot, self.context.constraints)
        if not self._slot_usable(new_first_slot, others + [new_second]):
            return None
        new_first = place_task(first_task, new_first_slot, self.context.constraints)

        return build_schedule(self.context, others + [new_first, new_second], schedule.unscheduled_task_ids)

    def _try_relocate(self, schedule: OptimizedSchedule, index: int) -> Optional[OptimizedSchedule]:
        """Move one task to its best valid slot given every other placement."""
        current = schedule.tasks[index]
        task = self.context.find_task(current.task_id)
        if task is None:
            return None

        others = [s for i, s in enumerate(schedule.tasks) if i != index]
        slot = find_best_slot(task, self.context, others)
        if slot is None or (slot.start == current.start_time and slot.end == current.end_time):
            return None

        moved = place_task(task, slot, self.context.constraints)
        return build_schedule(self.context, others + [moved], schedule.unscheduled_task_ids)

    def _slot_usable(self, slot, existing: List[ScheduledTask]) -> bool:
        config = self.context.config
        return (within_work_hours(slot, self.context.preferences) and
                is_placement_allowed(slot, self.context.constraints, existing, self.context.preferences,
                                     config.fixed_priority_threshold))
