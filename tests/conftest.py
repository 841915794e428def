from datetime import datetime

import pytest

from schedule_optimizer.config import OptimizerConfig
from schedule_optimizer.models import UserSchedulePreferences
from schedule_optimizer.scheduling.core.context import SchedulingContext

# Monday
REFERENCE = datetime(2026, 10, 19, 0, 0)


class FakeClock:
    """Monotonic clock that advances `step` seconds on every read."""
    def __init__(self, start: float = 0.0, step: float = 0.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def reference():
    return REFERENCE


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def preferences():
    return UserSchedulePreferences(work_start_hour=9, work_end_hour=17)


@pytest.fixture
def config():
    return OptimizerConfig()


@pytest.fixture
def context_factory(preferences, config):
    def _make(tasks, constraints=(), prefs=None, cfg=None, reference=REFERENCE):
        return SchedulingContext(tasks, constraints, prefs or preferences, cfg or config, reference)
    return _make


def at(day: int, hour: int, minute: int = 0) -> datetime:
    """Datetime `day` days after the reference Monday."""
    return datetime(2026, 10, 19 + day, hour, minute)
