"""
Value types shared by every stage of the optimization pipeline.

All models are frozen: a stage never edits a previous stage's output, it
builds a new value instead.
"""

import enum
from datetime import datetime
from typing import Optional, Tuple

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ----------------- Enums ---------------------

class ConstraintType(str, enum.Enum):
    FIXED = "fixed"
    FLEXIBLE = "flexible"
    UNAVAILABLE = "unavailable"


class ConflictType(str, enum.Enum):
    OVERLAP = "overlap"
    CONSTRAINT_VIOLATION = "constraint_violation"
    DEPENDENCY_UNMET = "dependency_unmet"


class ConflictSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ----------------- Input Models ---------------------

class TimeSlot(BaseModel):
    start: datetime
    end: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_range(self):
        if self.end <= self.start:
            raise ValueError("time slot end must be after its start")
        return self

    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    def __lt__(self, other):
        return self.start < other.start

    def __repr__(self):
        return f"TimeSlot({self.start.strftime('%Y-%m-%d %H:%M')} - {self.end.strftime('%H:%M')})"


class Task(BaseModel):
    id: str
    title: str
    duration_minutes: int = Field(gt=0)
    priority: int = Field(default=3, ge=1, le=5)
    due_date: Optional[datetime] = None
    preferred_time_slots: Tuple[TimeSlot, ...] = ()
    dependencies: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class ScheduleConstraint(BaseModel):
    type: ConstraintType
    start: datetime
    end: datetime
    priority: Optional[int] = None
    description: Optional[str] = None
    # RFC 5545 RRULE; occurrences keep the (end - start) length of this constraint
    recurrence_rule: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_range(self):
        if self.end <= self.start:
            raise ValueError("constraint end must be after its start")
        return self


class UserSchedulePreferences(BaseModel):
    work_start_hour: int = Field(default=9, ge=0, le=23)
    work_end_hour: int = Field(default=17, ge=1, le=24)
    # 0 = Sunday ... 6 = Saturday
    preferred_work_days: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)
    break_duration: int = Field(default=0, ge=0)
    max_work_hours_per_day: float = Field(default=8.0, gt=0)
    timezone: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("preferred_work_days")
    @classmethod
    def check_work_days(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        for day in value:
            if day < 0 or day > 6:
                raise ValueError(f"work day {day} is not in 0..6")
        return value

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                pytz.timezone(value)
            except pytz.UnknownTimeZoneError:
                raise ValueError(f"unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def check_work_hours(self):
        if self.work_end_hour <= self.work_start_hour:
            raise ValueError("work_end_hour must be after work_start_hour")
        return self


# ----------------- Output Models ---------------------

class ScheduledTask(BaseModel):
    task_id: str
    start_time: datetime
    end_time: datetime
    confidence: float = Field(ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    def as_slot(self) -> TimeSlot:
        return TimeSlot(start=self.start_time, end=self.end_time)


class ScheduleConflict(BaseModel):
    type: ConflictType
    description: str
    severity: ConflictSeverity
    task_ids: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class OptimizedSchedule(BaseModel):
    tasks: Tuple[ScheduledTask, ...] = ()
    score: float = 0.0
    conflicts: Tuple[ScheduleConflict, ...] = ()
    unscheduled_task_ids: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    def task_ids(self) -> Tuple[str, ...]:
        return tuple(scheduled.task_id for scheduled in self.tasks)

    def conflicts_of_type(self, conflict_type: ConflictType) -> Tuple[ScheduleConflict, ...]:
        return tuple(c for c in self.conflicts if c.type == conflict_type)
