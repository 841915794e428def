"""
Schedule Optimization Engine

Greedy construction, bounded local search and constraint repair over a set of
tasks and time-window constraints. Pure: no I/O and no state between calls.
"""

from .core.pipeline import ScheduleOptimizer, optimize_schedule
from .core.context import SchedulingContext
