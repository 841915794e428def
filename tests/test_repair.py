from datetime import datetime, timedelta

from schedule_optimizer.config import OptimizerConfig
from schedule_optimizer.models import ConflictType, ConstraintType, ScheduleConstraint, ScheduledTask, Task
from schedule_optimizer.scheduling.algorithms.repair import ConstraintRepairPass
from schedule_optimizer.scheduling.core.time_slot import make_slot, within_work_hours
from schedule_optimizer.scheduling.scoring.schedule_scoring import build_schedule, place_task

from conftest import at


def unavailable(start, end):
    return ScheduleConstraint(type=ConstraintType.UNAVAILABLE, start=start, end=end)


def hand_built(context, placements):
    return build_schedule(context, [place_task(task, make_slot(start, task.duration_minutes), context.constraints)
                                    for task, start in placements])


def test_repair_shifts_conflicting_tasks_forward(context_factory):
    first = Task(id="first", title="First", duration_minutes=60)
    second = Task(id="second", title="Second", duration_minutes=60)
    context = context_factory([first, second], [unavailable(at(0, 9), at(0, 11))])
    initial = hand_built(context, [(first, at(0, 9)), (second, at(0, 11))])
    assert len(initial.conflicts_of_type(ConflictType.CONSTRAINT_VIOLATION)) == 1

    repaired = ConstraintRepairPass(context).repair(initial)
    starts = {s.task_id: s.start_time for s in repaired.tasks}

    assert starts == {"first": at(0, 11), "second": at(0, 12)}
    assert repaired.conflicts == ()
    assert all(s.confidence == 0.5 for s in repaired.tasks)


def test_repair_rolls_over_to_next_work_day(context_factory):
    task = Task(id="long", title="Long", duration_minutes=120)
    context = context_factory([task], [unavailable(at(0, 15), at(0, 17))])
    initial = hand_built(context, [(task, at(0, 15))])

    repaired = ConstraintRepairPass(context).repair(initial)
    placement = repaired.tasks[0]

    assert placement.start_time == at(1, 9)
    assert placement.end_time - placement.start_time == timedelta(minutes=120)
    assert placement.start_time.date() == placement.end_time.date()
    assert within_work_hours(placement.as_slot(), context.preferences)


def test_repair_keeps_duration_from_task_data(context_factory):
    task = Task(id="t", title="T", duration_minutes=90)
    context = context_factory([task], [unavailable(at(0, 9), at(0, 10))])
    # A placement whose stored length disagrees with the task
    initial = build_schedule(context, [ScheduledTask(task_id="t", start_time=at(0, 9), end_time=at(0, 9, 30),
                                                     confidence=0.5)])

    repaired = ConstraintRepairPass(context).repair(initial)

    assert repaired.tasks[0].start_time == at(0, 10)
    assert repaired.tasks[0].end_time == at(0, 11, 30)


def test_unrepairable_task_keeps_its_slot(context_factory):
    task = Task(id="t", title="T", duration_minutes=60)
    context = context_factory([task], [unavailable(at(0, 0), datetime(2026, 11, 2))])
    initial = hand_built(context, [(task, at(0, 9))])

    repaired = ConstraintRepairPass(context).repair(initial)

    assert repaired.tasks[0].start_time == at(0, 9)
    assert len(repaired.conflicts_of_type(ConflictType.CONSTRAINT_VIOLATION)) == 1


def test_repair_eliminates_violations_when_capacity_suffices(context_factory):
    tasks = [Task(id=f"t{i}", title=f"T{i}", duration_minutes=60) for i in range(4)]
    # Monday fully blocked, plenty of room afterwards
    context = context_factory(tasks, [unavailable(at(0, 9), at(0, 17))])
    initial = hand_built(context, [(task, at(0, 9 + 2 * i)) for i, task in enumerate(tasks)])
    assert len(initial.conflicts_of_type(ConflictType.CONSTRAINT_VIOLATION)) == 4

    repaired = ConstraintRepairPass(context).repair(initial)

    assert repaired.conflicts_of_type(ConflictType.CONSTRAINT_VIOLATION) == ()
    assert repaired.conflicts_of_type(ConflictType.OVERLAP) == ()
    assert len(repaired.tasks) == 4


def test_repair_stays_inside_lookahead_window(context_factory):
    task = Task(id="late", title="Late", duration_minutes=60)
    # Window ends Wednesday 00:00, Tuesday afternoon is blocked
    context = context_factory([task], [unavailable(at(1, 16), at(1, 17))], cfg=OptimizerConfig(lookahead_days=2))
    initial = hand_built(context, [(task, at(1, 16))])

    repaired = ConstraintRepairPass(context).repair(initial)

    assert repaired.tasks[0].start_time == at(1, 16)
    assert len(repaired.conflicts_of_type(ConflictType.CONSTRAINT_VIOLATION)) == 1
