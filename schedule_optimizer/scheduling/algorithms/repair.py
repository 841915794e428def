"""
Constraint-satisfaction repair: a best-effort forward sweep.

Placements are visited in start order. A placement that is invalid against
the constraints or the already repaired placements is nudged forward in
fixed steps, keeping its task's duration. Nudged slots stay inside a single
day's work hours; when a day runs out the search continues at the next work
day's start, up to the end of the lookahead window.
"""

import logging
from datetime import timedelta
from typing import List, Optional

from ...models import OptimizedSchedule, ScheduledTask, TimeSlot
from ..constraints.slot_constraints import is_slot_valid
from ..core.context import SchedulingContext
from ..core.time_slot import is_work_day, make_slot, next_work_day_start, work_day_bounds
from ..scoring.schedule_scoring import build_schedule, place_task

logger = logging.getLogger(__name__)


class ConstraintRepairPass:
    def __init__(self, context: SchedulingContext):
        self.context = context

    def repair(self, schedule: OptimizedSchedule) -> OptimizedSchedule:
        repaired: List[ScheduledTask] = []
        moved = 0

        for placement in sorted(schedule.tasks, key=lambda s: s.start_time):
            slot = placement.as_slot()
            if self._is_valid(slot, repaired):
                repaired.append(placement)
                continue

            task = self.context.find_task(placement.task_id)
            duration_minutes = task.duration_minutes if task else slot.duration_minutes()
            new_slot = self._shift_forward(slot, duration_minutes, repaired)
            if new_slot is None:
                logger.info(f"Could not repair placement of {placement.task_id}, keeping its slot")
                repaired.append(placement)
                continue

            if task is not None:
                repaired.append(place_task(task, new_slot, self.context.constraints))
            else:
                repaired.append(placement.model_copy(update={"start_time": new_slot.start, "end_time": new_slot.end}))
            moved += 1
            logger.debug(f"Moved {placement.task_id} from {slot.start:%Y-%m-%d %H:%M} "
                         f"to {new_slot.start:%Y-%m-%d %H:%M}")

        result = build_schedule(self.context, repaired, schedule.unscheduled_task_ids)
        logger.info(f"Repair pass moved {moved} placements, score {schedule.score:.2f} -> {result.score:.2f}")
        return result

    def _is_valid(self, slot: TimeSlot, repaired: List[ScheduledTask]) -> bool:
        return is_slot_valid(slot, self.context.constraints, repaired, self.context.config.fixed_priority_threshold)

    def _shift_forward(self, slot: TimeSlot, duration_minutes: float,
                       repaired: List[ScheduledTask]) -> Optional[TimeSlot]:
        config = self.context.config
        preferences = self.context.preferences
        step = timedelta(minutes=config.repair_step_minutes)
        # Same window the candidate pool and recurrence expansion cover
        horizon = self.context.reference + timedelta(days=config.lookahead_days)
        length = timedelta(minutes=duration_minutes)

        start = slot.start + step
        while start + length <= horizon:
            day = start.date()
            work_start, work_end = work_day_bounds(day, preferences, start.tzinfo)
            if not is_work_day(day, preferences) or start + length > work_end:
                start = next_work_day_start(day, preferences, start.tzinfo)
                if start is None:
                    return None
                continue
            if start < work_start:
                start = work_start
                continue

            candidate = make_slot(start, duration_minutes)
            if self._is_valid(candidate, repaired):
                return candidate
            start += step

        return None
