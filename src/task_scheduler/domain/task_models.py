from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from datetime import datetime, timezone
from typing import Optional
import uuid

MIN_PRIORITY = 1
MAX_PRIORITY = 5


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # naive datetimes are taken to be UTC so deadlines always compare cleanly
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_valid_priority(priority: int) -> bool:
    return MIN_PRIORITY <= priority <= MAX_PRIORITY


class TaskCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    description: str = ""
    priority: int = Field(ge=MIN_PRIORITY, le=MAX_PRIORITY)
    deadline: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title cannot be empty")
        return value

    @field_validator("deadline")
    @classmethod
    def _deadline_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class Task(TaskCreate):
    id: str
    status: TaskStatus = TaskStatus.pending
    created_at: datetime
    completed_at: Optional[datetime] = None


class TaskUpdate(BaseModel):
    """
    Partial update for a task.

    Only fields that were explicitly passed are applied; priority is range-checked
    by the operation so a bad value comes back as a failed Result. Unknown keys
    are rejected.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[int] = None
    deadline: Optional[datetime] = None

    @field_validator("deadline")
    @classmethod
    def _deadline_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    def supplied(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    overdue: int = 0


def new_task_id() -> str:
    return str(uuid.uuid4())
