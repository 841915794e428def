"""
Optimization pipeline: Greedy -> LocalSearch -> (optional) Repair -> Score.

Each stage returns a new OptimizedSchedule; the final value is always fully
annotated, even when no task could be placed.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ...clock import Clock, TimeBudget
from ...config import DEFAULT_CONFIG, OptimizerConfig
from ...models import OptimizedSchedule, ScheduleConstraint, Task, TimeSlot, UserSchedulePreferences
from ..algorithms.greedy import GreedyScheduler
from ..algorithms.local_search import LocalSearchOptimizer
from ..algorithms.repair import ConstraintRepairPass
from ..constraints.recurrence import expand_recurring_constraints
from ..scoring.schedule_scoring import build_schedule
from .context import SchedulingContext
from .time_slot import load_timezone, to_local_naive

logger = logging.getLogger(__name__)


def user_timezone(preferences: UserSchedulePreferences, config: OptimizerConfig):
    return load_timezone(preferences.timezone or config.timezone)


def resolve_reference(preferences: UserSchedulePreferences, config: OptimizerConfig) -> datetime:
    """Current wall time in the user's timezone, as naive local time."""
    return datetime.now(user_timezone(preferences, config)).replace(tzinfo=None, second=0, microsecond=0)


def localize_task(task: Task, tz) -> Task:
    slots = tuple(TimeSlot(start=to_local_naive(s.start, tz), end=to_local_naive(s.end, tz))
                  for s in task.preferred_time_slots)
    return task.model_copy(update={"due_date": to_local_naive(task.due_date, tz), "preferred_time_slots": slots})


def localize_constraint(constraint: ScheduleConstraint, tz) -> ScheduleConstraint:
    return constraint.model_copy(update={"start": to_local_naive(constraint.start, tz),
                                         "end": to_local_naive(constraint.end, tz)})


class ScheduleOptimizer:
    """
    Runs the full pipeline for one call. Holds only configuration and the
    clock between calls, so one instance can serve concurrent callers.
    """
    def __init__(self, config: Optional[OptimizerConfig] = None, clock: Optional[Clock] = None):
        self.config = config or DEFAULT_CONFIG
        self.clock = clock

    def optimize(self, tasks: Sequence[Task], constraints: Sequence[ScheduleConstraint],
                 preferences: UserSchedulePreferences, time_budget_ms: Optional[int] = None,
                 reference: Optional[datetime] = None) -> OptimizedSchedule:
        budget_ms = self.config.time_budget_ms if time_budget_ms is None else time_budget_ms
        budget = TimeBudget(budget_ms, self.clock)
        # Every stage works in naive wall time of the user's timezone
        tz = user_timezone(preferences, self.config)
        tasks = [localize_task(task, tz) for task in tasks]
        constraints = [localize_constraint(constraint, tz) for constraint in constraints]
        reference = to_local_naive(reference, tz) if reference else resolve_reference(preferences, self.config)

        horizon = reference + timedelta(days=self.config.lookahead_days)
        expanded = expand_recurring_constraints(constraints, reference, horizon)
        context = SchedulingContext(tasks, expanded, preferences, self.config, reference)
        logger.info(f"🚀 Optimizing {len(context.tasks)} tasks against {len(expanded)} constraints "
                    f"(budget {budget_ms}ms)")

        # Stage 1: greedy construction
        schedule = GreedyScheduler(context).schedule()

        # Stage 2: local search within the time budget
        schedule = LocalSearchOptimizer(context, budget).optimize(schedule)

        # Stage 3: repair, only if enough budget is left
        remaining = budget.remaining_ms()
        if remaining > self.config.repair_threshold_ms:
            schedule = ConstraintRepairPass(context).repair(schedule)
        else:
            logger.info(f"Skipping repair pass, {remaining:.0f}ms left")

        # Stage 4: final annotation
        schedule = build_schedule(context, schedule.tasks, schedule.unscheduled_task_ids)
        logger.info(f"📊 Final schedule: {len(schedule.tasks)} placed, {len(schedule.conflicts)} conflicts, "
                    f"score {schedule.score:.2f}")
        return schedule


def optimize_schedule(tasks: Sequence[Task], constraints: Sequence[ScheduleConstraint],
                      preferences: UserSchedulePreferences, time_budget_ms: int = 5000, *,
                      config: Optional[OptimizerConfig] = None, clock: Optional[Clock] = None,
                      reference: Optional[datetime] = None) -> OptimizedSchedule:
    """Pure entry point: schedule `tasks` around `constraints` within `time_budget_ms`."""
    return ScheduleOptimizer(config, clock).optimize(tasks, constraints, preferences, time_budget_ms, reference)
