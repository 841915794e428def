"""
Service wrapper that adds timing, metrics and logging around the pure optimizer.
"""

import logging
import time
from datetime import datetime
from typing import Optional, Sequence

from ..clock import Clock
from ..config import OptimizerConfig
from ..metrics import CONFLICTS_TOTAL, OPTIMIZATION_SECONDS, OPTIMIZATIONS_TOTAL, TASKS_SCHEDULED_TOTAL
from ..models import OptimizedSchedule, ScheduleConstraint, Task, UserSchedulePreferences
from ..scheduling.core.pipeline import ScheduleOptimizer

logger = logging.getLogger(__name__)


class OptimizerService:
    """Entry point for callers such as request handlers or batch jobs."""

    def __init__(self, config: Optional[OptimizerConfig] = None, clock: Optional[Clock] = None):
        self.config = config or OptimizerConfig.from_env()
        self.optimizer = ScheduleOptimizer(self.config, clock)

    def optimize(self, tasks: Sequence[Task], constraints: Sequence[ScheduleConstraint],
                 preferences: UserSchedulePreferences, time_budget_ms: Optional[int] = None,
                 reference: Optional[datetime] = None) -> OptimizedSchedule:
        started = time.perf_counter()
        try:
            schedule = self.optimizer.optimize(tasks, constraints, preferences, time_budget_ms, reference)
        except Exception as e:
            OPTIMIZATIONS_TOTAL.labels(status="error").inc()
            OPTIMIZATION_SECONDS.observe(time.perf_counter() - started)
            logger.error(f"❌ Schedule optimization failed for {len(tasks)} tasks: {e}")
            raise

        elapsed = time.perf_counter() - started
        OPTIMIZATIONS_TOTAL.labels(status="success").inc()
        OPTIMIZATION_SECONDS.observe(elapsed)
        TASKS_SCHEDULED_TOTAL.inc(len(schedule.tasks))
        for conflict in schedule.conflicts:
            CONFLICTS_TOTAL.labels(type=conflict.type.value).inc()

        logger.info(f"✅ Optimized schedule in {elapsed:.3f}s: {len(schedule.tasks)}/{len(tasks)} tasks placed")
        return schedule
