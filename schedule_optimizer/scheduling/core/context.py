"""
Read-only inputs shared by every stage of one optimization call.
"""

from datetime import datetime
from typing import Dict, Optional, Sequence

from ...config import OptimizerConfig
from ...models import ScheduleConstraint, Task, UserSchedulePreferences


class SchedulingContext:
    """
    Snapshot of one call's tasks, constraints, preferences and config.
    Stages look up original task data here so every move scores against real
    priorities and preferred windows.
    """
    def __init__(self, tasks: Sequence[Task], constraints: Sequence[ScheduleConstraint],
                 preferences: UserSchedulePreferences, config: OptimizerConfig, reference: datetime):
        self.tasks = tuple(tasks)
        self.constraints = tuple(constraints)
        self.preferences = preferences
        self.config = config
        self.reference = reference
        self.tasks_by_id: Dict[str, Task] = {}
        for task in self.tasks:
            # First occurrence wins so a repeated id can never be placed twice
            self.tasks_by_id.setdefault(task.id, task)

    def find_task(self, task_id: str) -> Optional[Task]:
        return self.tasks_by_id.get(task_id)

    def __repr__(self):
        return (f"SchedulingContext(tasks={len(self.tasks)}, constraints={len(self.constraints)}, "
                f"reference={self.reference.isoformat()})")
