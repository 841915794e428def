"""Task-scheduling optimization engine."""

from .config import OptimizerConfig
from .exceptions import ConfigurationError, OptimizerError
from .models import (
    ConflictSeverity, ConflictType, ConstraintType, OptimizedSchedule, ScheduleConflict, ScheduleConstraint,
    ScheduledTask, Task, TimeSlot, UserSchedulePreferences,
)
from .scheduling import ScheduleOptimizer, optimize_schedule

__version__ = "1.0.0"

__all__ = [
    "OptimizerConfig",
    "ConfigurationError",
    "OptimizerError",
    "ConflictSeverity",
    "ConflictType",
    "ConstraintType",
    "OptimizedSchedule",
    "ScheduleConflict",
    "ScheduleConstraint",
    "ScheduledTask",
    "Task",
    "TimeSlot",
    "UserSchedulePreferences",
    "ScheduleOptimizer",
    "optimize_schedule",
]
