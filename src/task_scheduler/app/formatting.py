"""Console rendering for the demo: one line per task plus a state summary."""
from __future__ import annotations
from datetime import datetime
from typing import Iterable

from task_scheduler.domain.state import TaskState
from task_scheduler.domain.task_models import Task


def format_date(value: datetime) -> str:
    # "Oct 5, 2025" style, no zero padding on the day
    return f"{value:%b} {value.day}, {value.year}"


def format_task(task: Task) -> str:
    deadline = f" (Due: {format_date(task.deadline)})" if task.deadline else ""
    return f"[{task.status.value.upper()}] {task.title} - Priority: {task.priority}{deadline}"


def print_tasks(tasks: Iterable[Task]) -> None:
    tasks = list(tasks)
    if not tasks:
        print("No tasks found.")
        return
    for index, task in enumerate(tasks, start=1):
        print(f"{index}. {format_task(task)}")


def print_state_summary(state: TaskState) -> None:
    print("\n=== Task Scheduler State ===")
    print(f"Total tasks: {len(state.tasks)}")
    print_tasks(state.tasks)
    print("============================\n")
