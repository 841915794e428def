"""
Recurring constraint expansion using dateutil.rrule (RFC 5545 RRULE patterns).
"""

import logging
from datetime import datetime
from typing import Iterable, List

from dateutil import rrule

from ...exceptions import ConfigurationError
from ...models import ScheduleConstraint

logger = logging.getLogger(__name__)


def expand_recurring_constraint(constraint: ScheduleConstraint, window_start: datetime,
                                window_end: datetime) -> List[ScheduleConstraint]:
    """
    Expand one recurring constraint into concrete occurrences touching the window.
    Each occurrence keeps the original constraint's length, type and priority.
    """
    if not constraint.recurrence_rule:
        return [constraint]

    try:
        rule = rrule.rrulestr(constraint.recurrence_rule, dtstart=constraint.start)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid recurrence rule '{constraint.recurrence_rule}': {e}",
                                 details={"recurrence_rule": constraint.recurrence_rule})

    length = constraint.end - constraint.start
    # Occurrences that started before the window may still run into it
    occurrences = rule.between(window_start - length, window_end, inc=True)

    instances = [
        constraint.model_copy(update={"start": occurrence, "end": occurrence + length, "recurrence_rule": None})
        for occurrence in occurrences
    ]
    logger.debug(f"Expanded recurring {constraint.type.value} constraint into {len(instances)} occurrences")
    return instances


def expand_recurring_constraints(constraints: Iterable[ScheduleConstraint], window_start: datetime,
                                 window_end: datetime) -> List[ScheduleConstraint]:
    expanded = []
    for constraint in constraints:
        expanded.extend(expand_recurring_constraint(constraint, window_start, window_end))
    return expanded
