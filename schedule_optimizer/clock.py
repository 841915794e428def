"""
Injectable monotonic clock and time-budget tracking for the search loop.
"""

import time
from typing import Callable, Optional

# Returns seconds from an arbitrary, monotonically increasing origin
Clock = Callable[[], float]


class TimeBudget:
    """Wall-clock budget measured from construction with an injected clock."""

    def __init__(self, time_budget_ms: int, clock: Optional[Clock] = None):
        self.clock = clock or time.monotonic
        self.time_budget_ms = time_budget_ms
        self.started_at = self.clock()

    def elapsed_ms(self) -> float:
        return (self.clock() - self.started_at) * 1000

    def remaining_ms(self) -> float:
        return self.time_budget_ms - self.elapsed_ms()

    def exhausted(self) -> bool:
        return self.remaining_ms() <= 0
