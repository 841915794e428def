import pytest

from schedule_optimizer.models import (
    ConflictSeverity, ConflictType, ConstraintType, ScheduleConflict, ScheduleConstraint, ScheduledTask, Task,
    TimeSlot,
)
from schedule_optimizer.scheduling.core.time_slot import make_slot
from schedule_optimizer.scheduling.scoring.schedule_scoring import (
    build_schedule, calculate_confidence, calculate_schedule_score, place_task,
)
from schedule_optimizer.scheduling.scoring.slot_scoring import score_slot

from conftest import at


def make_task(**kwargs):
    defaults = dict(id="t", title="Task", duration_minutes=60, priority=3)
    defaults.update(kwargs)
    return Task(**defaults)


class TestSlotScore:
    def test_work_hours_bonus(self, preferences):
        assert score_slot(make_slot(at(0, 9), 60), make_task(), preferences) == 10
        assert score_slot(make_slot(at(0, 18), 60), make_task(), preferences) == 0

    def test_lunch_penalty(self, preferences):
        assert score_slot(make_slot(at(0, 12), 60), make_task(), preferences) == 5
        assert score_slot(make_slot(at(0, 13, 30), 60), make_task(), preferences) == 5

    def test_high_priority_prefers_mornings(self, preferences):
        task = make_task(priority=5)
        assert score_slot(make_slot(at(0, 9), 60), task, preferences) == 10 + 30
        assert score_slot(make_slot(at(0, 15), 60), task, preferences) == 10 + 18

    def test_preferred_window_bonus_counted_once(self, preferences):
        window = TimeSlot(start=at(0, 9), end=at(0, 10))
        task = make_task(preferred_time_slots=(window, window))
        assert score_slot(make_slot(at(0, 9, 30), 60), task, preferences) == 30

    def test_due_date_bonus_grows_as_due_date_nears(self, preferences):
        task = make_task(due_date=at(2, 9))
        assert score_slot(make_slot(at(0, 9), 60), task, preferences) == 10 + 8
        assert score_slot(make_slot(at(1, 9), 60), task, preferences) == 10 + 9

    def test_overdue_penalty(self, preferences):
        task = make_task(due_date=at(0, 8))
        assert score_slot(make_slot(at(0, 9), 60), task, preferences) == 10 - 20
        assert score_slot(make_slot(at(0, 8), 60), make_task(due_date=at(0, 8)), preferences) == -20


class TestConfidence:
    def test_base_confidence(self):
        assert calculate_confidence(make_task(), make_slot(at(0, 9), 60), []) == 0.5

    def test_preferred_window_raises_confidence(self):
        task = make_task(preferred_time_slots=(TimeSlot(start=at(0, 9), end=at(0, 10)),))
        assert calculate_confidence(task, make_slot(at(0, 9), 60), []) == pytest.approx(0.8)

    def test_each_overlapped_constraint_lowers_confidence(self):
        constraints = [
            ScheduleConstraint(type=ConstraintType.FLEXIBLE, start=at(0, 8), end=at(0, 12)),
            ScheduleConstraint(type=ConstraintType.FIXED, start=at(0, 9), end=at(0, 10), priority=2),
        ]
        assert calculate_confidence(make_task(), make_slot(at(0, 9), 60), constraints) == pytest.approx(0.1)

    def test_confidence_is_clamped(self):
        constraints = [
            ScheduleConstraint(type=ConstraintType.FLEXIBLE, start=at(0, 8), end=at(0, 12))
            for _ in range(4)
        ]
        assert calculate_confidence(make_task(), make_slot(at(0, 9), 60), constraints) == 0.0


class TestScheduleScore:
    def placement(self, confidence):
        return ScheduledTask(task_id="x", start_time=at(0, 9), end_time=at(0, 10), confidence=confidence)

    def test_formula(self):
        conflict = ScheduleConflict(type=ConflictType.OVERLAP, description="", severity=ConflictSeverity.HIGH)
        tasks = [self.placement(0.5), self.placement(0.8), self.placement(1.0)]
        assert calculate_schedule_score(tasks, [conflict]) == pytest.approx(30 - 20 + 2.3)

    def test_score_is_floored_at_zero(self):
        conflict = ScheduleConflict(type=ConflictType.OVERLAP, description="", severity=ConflictSeverity.HIGH)
        assert calculate_schedule_score([self.placement(0.5)], [conflict, conflict]) == 0.0

    def test_empty_schedule_scores_zero(self):
        assert calculate_schedule_score([], []) == 0.0


def test_build_schedule_orders_and_annotates(context_factory):
    first = make_task(id="a", title="A")
    second = make_task(id="b", title="B")
    dropped = make_task(id="c", title="C")
    context = context_factory([first, second, dropped])

    placements = [
        place_task(second, make_slot(at(0, 11), 60), []),
        place_task(first, make_slot(at(0, 9), 60), []),
    ]
    schedule = build_schedule(context, placements, ["c"])

    assert schedule.task_ids() == ("a", "b")
    assert schedule.unscheduled_task_ids == ("c",)
    assert len(schedule.conflicts) == 1
    assert schedule.conflicts[0].description == "Unable to schedule task: C"
    assert schedule.conflicts[0].severity == ConflictSeverity.HIGH
    assert schedule.score == pytest.approx(20 - 20 + 1.0)
