"""
Task and Goal records - the read-only snapshot the analyzers work on.

Records are immutable. Lifecycle helpers (status changes, postponing,
reopening) return new records so that the postpone/reopen histories behave as
append-only logs.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.stats import ensure_utc, hours_between, SECONDS_PER_DAY


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class GoalType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"


# Fixed reporting order for per-priority breakdowns
PRIORITY_ORDER = (TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=False, extra='ignore')


class PostponeEntry(_Record):
    """One postponement of a task's due date"""
    original_date: Optional[datetime] = None
    new_date: Optional[datetime] = None
    postponed_at: datetime

    @field_validator('original_date', 'new_date', 'postponed_at')
    @classmethod
    def _utc(cls, value):
        return ensure_utc(value)


class ReopenEntry(_Record):
    """One transition out of the completed status"""
    reopened_at: datetime
    reason: Optional[str] = None

    @field_validator('reopened_at')
    @classmethod
    def _utc(cls, value):
        return ensure_utc(value)


class Task(_Record):
    """
    A user's task as seen by the analytics engine.

    completed and status are kept consistent: an explicit status wins,
    otherwise the legacy completed flag decides it.
    """
    id: str
    title: str = ''
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    completed: bool = False

    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None

    postpone_count: int = Field(default=0, ge=0)
    postpone_history: Tuple[PostponeEntry, ...] = ()
    reopen_count: int = Field(default=0, ge=0)
    reopen_history: Tuple[ReopenEntry, ...] = ()

    category: Optional[str] = None
    categories: Tuple[str, ...] = ()
    goal_id: Optional[str] = None

    @field_validator('id', 'goal_id', mode='before')
    @classmethod
    def _stringify_ids(cls, value):
        return str(value) if value is not None else None

    @field_validator('created_at', 'started_at', 'completed_at', 'due_date')
    @classmethod
    def _utc(cls, value):
        return ensure_utc(value)

    @field_validator('categories', 'postpone_history', 'reopen_history', mode='before')
    @classmethod
    def _empty_sequences(cls, value):
        return () if value is None else value

    @field_validator('postpone_count', 'reopen_count', mode='before')
    @classmethod
    def _zero_counters(cls, value):
        return value or 0

    @field_validator('priority', mode='before')
    @classmethod
    def _default_priority(cls, value):
        return value or TaskPriority.MEDIUM

    @model_validator(mode='before')
    @classmethod
    def _sync_completed_flag(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        status = data.get('status')
        if status:
            data['completed'] = TaskStatus(status) == TaskStatus.COMPLETED
        elif data.get('completed'):
            data['status'] = TaskStatus.COMPLETED
        else:
            data.pop('status', None)
        return data

    # -- derived values, computed on read --------------------------------

    @property
    def effective_category(self) -> Optional[str]:
        if self.category:
            return self.category
        if self.categories:
            return self.categories[0]
        return None

    @property
    def completion_time_hours(self) -> Optional[float]:
        return hours_between(self.created_at, self.completed_at)

    @property
    def time_to_start_hours(self) -> Optional[float]:
        return hours_between(self.created_at, self.started_at)

    def is_overdue(self, now: datetime) -> bool:
        return (not self.completed and self.due_date is not None
                and self.due_date < ensure_utc(now))

    def days_overdue(self, now: datetime) -> float:
        """Fractional days past the due date, 0 when not overdue."""
        if not self.is_overdue(now):
            return 0.0
        return (ensure_utc(now) - self.due_date).total_seconds() / SECONDS_PER_DAY

    # -- lifecycle --------------------------------------------------------

    def with_status(self, status, at: datetime) -> 'Task':
        """Return a copy moved to `status`, applying the lifecycle rules."""
        status = TaskStatus(status)
        at = ensure_utc(at)
        if status == self.status:
            return self

        changes = {'status': status, 'completed': status == TaskStatus.COMPLETED}
        if self.status == TaskStatus.COMPLETED:
            changes['reopen_count'] = self.reopen_count + 1
            changes['reopen_history'] = self.reopen_history + (ReopenEntry(reopened_at=at),)
        if status == TaskStatus.IN_PROGRESS and self.started_at is None:
            changes['started_at'] = at
        if status == TaskStatus.COMPLETED and self.completed_at is None:
            changes['completed_at'] = at
        return self.model_copy(update=changes)

    def reopened(self, at: datetime, reason: Optional[str] = None) -> 'Task':
        """Reopen a completed task, back to in_progress if it was ever started."""
        if self.status != TaskStatus.COMPLETED:
            return self
        target = TaskStatus.IN_PROGRESS if self.started_at else TaskStatus.PENDING
        task = self.with_status(target, at)
        if reason:
            history = task.reopen_history[:-1] + (ReopenEntry(reopened_at=ensure_utc(at), reason=reason),)
            task = task.model_copy(update={'reopen_history': history})
        return task

    def postponed(self, new_date: datetime, at: datetime) -> 'Task':
        """Return a copy with the due date moved and the postponement logged."""
        entry = PostponeEntry(original_date=self.due_date, new_date=new_date, postponed_at=at)
        return self.model_copy(update={
            'due_date': ensure_utc(new_date),
            'postpone_count': self.postpone_count + 1,
            'postpone_history': self.postpone_history + (entry,),
        })


class Goal(_Record):
    """A weekly/monthly/quarterly objective that tasks may link to"""
    id: str
    title: str = ''
    type: GoalType = GoalType.WEEKLY
    status: GoalStatus = GoalStatus.ACTIVE
    start_date: datetime
    end_date: datetime
    target_task_count: int = Field(default=0, ge=0)

    @field_validator('id', mode='before')
    @classmethod
    def _stringify_id(cls, value):
        return str(value)

    @field_validator('start_date', 'end_date')
    @classmethod
    def _utc(cls, value):
        return ensure_utc(value)

    @field_validator('target_task_count', mode='before')
    @classmethod
    def _default_target(cls, value):
        return value or 0


def coerce_tasks(rows) -> list:
    """Accept Task instances or raw mappings from a record store."""
    return [row if isinstance(row, Task) else Task.model_validate(row) for row in rows]


def coerce_goals(rows) -> list:
    return [row if isinstance(row, Goal) else Goal.model_validate(row) for row in rows]
