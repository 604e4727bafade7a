"""
Task operations over immutable TaskState snapshots.

Every function takes a snapshot and returns a new snapshot (or a derived value);
nothing here mutates its inputs. Time and ids come from injected collaborators.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from task_scheduler.domain.ports import Clock, IdGenerator, system_clock
from task_scheduler.domain.result import Result
from task_scheduler.domain.state import TaskState
from task_scheduler.domain.task_models import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    Task,
    TaskCreate,
    TaskStatistics,
    TaskStatus,
    TaskUpdate,
    as_utc,
    is_valid_priority,
    new_task_id,
)

logger = logging.getLogger("scheduler.tasks")

Tasks = Tuple[Task, ...]

PRIORITY_ERROR = f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
NOT_FOUND_ERROR = "Task not found"


def _now(clock: Clock) -> datetime:
    # naive clock readings are taken as UTC, same as deadlines
    return as_utc(clock())


# ---- creation / removal ----

def _create_task(
    title: str,
    description: str,
    priority: int,
    deadline: Optional[datetime],
    *,
    clock: Clock,
    id_factory: IdGenerator,
) -> Task:
    # TaskCreate raises pydantic.ValidationError on a blank title or bad priority
    data = TaskCreate(title=title, description=description, priority=priority, deadline=deadline)
    return Task(
        id=id_factory(),
        status=TaskStatus.pending,
        created_at=_now(clock),
        completed_at=None,
        **data.model_dump(),
    )


def add_task(
    state: TaskState,
    title: str,
    description: str,
    priority: int,
    deadline: Optional[datetime] = None,
    *,
    clock: Clock = system_clock,
    id_factory: IdGenerator = new_task_id,
) -> TaskState:
    task = _create_task(title, description, priority, deadline, clock=clock, id_factory=id_factory)
    if any(t.id == task.id for t in state.tasks):
        raise ValueError(f"Duplicate task id: {task.id}")

    logger.debug(
        "task.add",
        extra={"category": "tasks", "event": "task.add", "task_id": task.id, "title": task.title},
    )
    return TaskState(tasks=state.tasks + (task,))


def remove_task(state: TaskState, task_id: str) -> TaskState:
    logger.debug("task.remove", extra={"category": "tasks", "event": "task.remove", "task_id": task_id})
    return TaskState(tasks=tuple(t for t in state.tasks if t.id != task_id))


def get_task(state: TaskState, task_id: str) -> Result[Task]:
    task = next((t for t in state.tasks if t.id == task_id), None)
    if task is None:
        return Result.failure(NOT_FOUND_ERROR)
    return Result.success(task)


# ---- status ----

def _with_status(task: Task, status: TaskStatus, now: datetime) -> Task:
    changes: dict = {"status": status}
    # only a transition into completed stamps the time; leaving completed keeps it
    if status == TaskStatus.completed and task.status != TaskStatus.completed:
        changes["completed_at"] = now
    return task.model_copy(update=changes)


def update_task_status(
    state: TaskState,
    task_id: str,
    new_status: Union[TaskStatus, str],
    *,
    clock: Clock = system_clock,
) -> TaskState:
    status = TaskStatus(new_status)
    now = _now(clock)
    logger.debug(
        "task.status",
        extra={"category": "tasks", "event": "task.status", "task_id": task_id, "status": status.value},
    )
    return TaskState(
        tasks=tuple(_with_status(t, status, now) if t.id == task_id else t for t in state.tasks)
    )


def mark_in_progress(state: TaskState, task_id: str, *, clock: Clock = system_clock) -> TaskState:
    return update_task_status(state, task_id, TaskStatus.in_progress, clock=clock)


def mark_completed(state: TaskState, task_id: str, *, clock: Clock = system_clock) -> TaskState:
    return update_task_status(state, task_id, TaskStatus.completed, clock=clock)


# ---- updates ----

def update_task(
    state: TaskState,
    task_id: str,
    patch: Union[TaskUpdate, Mapping[str, object]],
) -> Result[TaskState]:
    """
    Apply a partial update to one task.

    Fails (without raising) when the task is missing, the priority is out of range,
    the title would become blank or a mapping patch names an unknown field. Fields the patch does not carry are kept; a
    deadline passed explicitly as None clears the deadline.
    """
    if not isinstance(patch, TaskUpdate):
        try:
            patch = TaskUpdate(**patch)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            return _failed("update", task_id, f"Invalid update fields: {fields}")

    if not any(t.id == task_id for t in state.tasks):
        return _failed("update", task_id, f"Task with id {task_id} not found")

    changes = {k: v for k, v in patch.supplied().items() if v is not None or k == "deadline"}

    if "priority" in changes and not is_valid_priority(changes["priority"]):
        return _failed("update", task_id, PRIORITY_ERROR)
    if "title" in changes and not changes["title"].strip():
        return _failed("update", task_id, "Title cannot be empty")

    logger.debug(
        "task.update",
        extra={"category": "tasks", "event": "task.update", "task_id": task_id, "fields": sorted(changes)},
    )
    new_state = TaskState(
        tasks=tuple(t.model_copy(update=changes) if t.id == task_id else t for t in state.tasks)
    )
    return Result.success(new_state)


def _failed(op: str, task_id: Optional[str], message: str) -> Result:
    logger.warning(
        f"task.{op}.failed",
        extra={"category": "tasks", "event": f"task.{op}.failed", "task_id": task_id, "error": message},
    )
    return Result.failure(message)


# ---- batch ----

def mark_multiple_completed(
    state: TaskState,
    task_ids: Iterable[str],
    *,
    clock: Clock = system_clock,
) -> TaskState:
    ids = set(task_ids)
    now = _now(clock)  # one timestamp for the whole batch

    def complete(task: Task) -> Task:
        if task.id in ids and task.status != TaskStatus.completed:
            return task.model_copy(update={"status": TaskStatus.completed, "completed_at": now})
        return task

    logger.debug(
        "task.batch_complete",
        extra={"category": "tasks", "event": "task.batch_complete", "count": len(ids)},
    )
    return TaskState(tasks=tuple(complete(t) for t in state.tasks))


def update_priorities(state: TaskState, task_ids: Iterable[str], new_priority: int) -> Result[TaskState]:
    if not is_valid_priority(new_priority):
        return _failed("priorities", None, PRIORITY_ERROR)

    ids = set(task_ids)
    logger.debug(
        "task.priorities",
        extra={"category": "tasks", "event": "task.priorities", "count": len(ids), "priority": new_priority},
    )
    return Result.success(
        TaskState(
            tasks=tuple(
                t.model_copy(update={"priority": new_priority}) if t.id in ids else t for t in state.tasks
            )
        )
    )


# ---- queries ----

def get_all_tasks(state: TaskState) -> Tasks:
    return state.tasks


def get_tasks_by_status(state: TaskState, status: Union[TaskStatus, str]) -> Tasks:
    status = TaskStatus(status)
    return tuple(t for t in state.tasks if t.status == status)


def get_pending_tasks(state: TaskState) -> Tasks:
    return get_tasks_by_status(state, TaskStatus.pending)


def get_in_progress_tasks(state: TaskState) -> Tasks:
    return get_tasks_by_status(state, TaskStatus.in_progress)


def get_completed_tasks(state: TaskState) -> Tasks:
    return get_tasks_by_status(state, TaskStatus.completed)


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    if task.deadline is None or task.status == TaskStatus.completed:
        return False
    if now is None:
        now = system_clock()
    now = as_utc(now)
    return task.deadline < now


def get_overdue_tasks(state: TaskState, *, clock: Clock = system_clock) -> Tasks:
    now = _now(clock)
    return tuple(t for t in state.tasks if is_overdue(t, now))


# ---- ordering ----

def sort_by_priority(tasks: Iterable[Task]) -> Tasks:
    # sorted() is stable, so equal priorities keep their input order
    return tuple(sorted(tasks, key=lambda t: -t.priority))


def sort_by_deadline(tasks: Iterable[Task]) -> Tasks:
    tasks = tuple(tasks)
    with_deadline = sorted((t for t in tasks if t.deadline is not None), key=lambda t: t.deadline)
    without_deadline = [t for t in tasks if t.deadline is None]
    return tuple(with_deadline) + tuple(without_deadline)


def sort_tasks_by_priority(state: TaskState) -> Tasks:
    return sort_by_priority(state.tasks)


def sort_tasks_by_deadline(state: TaskState) -> Tasks:
    return sort_by_deadline(state.tasks)


def get_next_task(state: TaskState) -> Optional[Task]:
    ordered = sort_by_priority(get_pending_tasks(state))
    return ordered[0] if ordered else None


def get_next_task_by_deadline(state: TaskState) -> Optional[Task]:
    ordered = sort_by_deadline(get_pending_tasks(state))
    return ordered[0] if ordered else None


# ---- aggregates ----

def get_statistics(state: TaskState, *, clock: Clock = system_clock) -> TaskStatistics:
    now = _now(clock)
    counts = {"total": 0, "pending": 0, "in_progress": 0, "completed": 0, "overdue": 0}

    for task in state.tasks:
        counts["total"] += 1
        if task.status == TaskStatus.pending:
            counts["pending"] += 1
        elif task.status == TaskStatus.in_progress:
            counts["in_progress"] += 1
        elif task.status == TaskStatus.completed:
            counts["completed"] += 1

        if is_overdue(task, now):
            counts["overdue"] += 1

    return TaskStatistics(**counts)
