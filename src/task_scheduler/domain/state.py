from __future__ import annotations
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from task_scheduler.domain.task_models import Task


class TaskState(BaseModel):
    """
    Immutable snapshot of the task list.
    Every operation hands back a new TaskState; insertion order is kept.
    """
    model_config = ConfigDict(frozen=True)

    tasks: Tuple[Task, ...] = ()


def create_initial_state() -> TaskState:
    return TaskState()
