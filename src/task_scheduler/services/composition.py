from __future__ import annotations

import logging
from datetime import datetime
from functools import reduce
from typing import Any, Callable, Iterable, Sequence, TypeVar, Union

from task_scheduler.domain.state import TaskState
from task_scheduler.domain.task_models import Task, TaskStatus, as_utc
from task_scheduler.services.task_operations import (
    Tasks,
    get_pending_tasks,
    sort_by_deadline,
    sort_by_priority,
)

logger = logging.getLogger("scheduler.query")

T = TypeVar("T")

HIGH_PRIORITY = 4

TaskFilter = Callable[[Iterable[Task]], Tasks]


def pipe(value: Any, *fns: Callable[[Any], Any]) -> Any:
    """Feed `value` through `fns` left to right."""
    return reduce(lambda acc, fn: fn(acc), fns, value)


def take(n: int) -> Callable[[Sequence[T]], Sequence[T]]:
    def _take(items: Sequence[T]) -> Sequence[T]:
        return tuple(items)[: max(0, n)]
    return _take


# ---- filter builders ----

def filter_tasks_by_min_priority(min_priority: int) -> TaskFilter:
    def _filter(tasks: Iterable[Task]) -> Tasks:
        return tuple(t for t in tasks if t.priority >= min_priority)
    return _filter


def filter_by_status(status: Union[TaskStatus, str]) -> TaskFilter:
    wanted = TaskStatus(status)

    def _filter(tasks: Iterable[Task]) -> Tasks:
        return tuple(t for t in tasks if t.status == wanted)
    return _filter


def filter_by_deadline_before(date: datetime) -> TaskFilter:
    cutoff = as_utc(date)

    def _filter(tasks: Iterable[Task]) -> Tasks:
        return tuple(t for t in tasks if t.deadline is not None and t.deadline < cutoff)
    return _filter


# ---- composed queries ----

def get_top_priority_tasks(state: TaskState, n: int) -> Tasks:
    logger.debug("query.top_priority", extra={"category": "query", "event": "query.top_priority", "n": n})
    return pipe(state, get_pending_tasks, sort_by_priority, take(n))


def get_high_priority_pending_tasks(state: TaskState) -> Tasks:
    return pipe(state, get_pending_tasks, filter_tasks_by_min_priority(HIGH_PRIORITY), sort_by_priority)


def get_next_tasks_by_deadline(state: TaskState, n: int) -> Tasks:
    logger.debug("query.next_by_deadline", extra={"category": "query", "event": "query.next_by_deadline", "n": n})
    return pipe(state, get_pending_tasks, sort_by_deadline, take(n))
