from __future__ import annotations

from datetime import timedelta

import pytest

from task_scheduler.domain.task_models import TaskStatus
from task_scheduler.services import composition as comp
from task_scheduler.services import task_operations as ops


def titles(tasks) -> list[str]:
    return [t.title for t in tasks]


@pytest.fixture()
def board(state, add, clock):
    s = add(state, "Fix login bug", "", 5, clock.now + timedelta(days=3))
    s = add(s, "Write docs", "", 3, clock.now + timedelta(days=8))
    s = add(s, "Review PR", "", 4, clock.now - timedelta(days=1))
    s = add(s, "Update deps", "", 2)
    s = add(s, "Refactor auth", "", 4, clock.now + timedelta(days=6))
    s = add(s, "Ship release", "", 5, clock.now + timedelta(days=1))
    return ops.mark_completed(s, "task-6", clock=clock)


def test_pipe_applies_left_to_right() -> None:
    assert comp.pipe(2, lambda x: x + 1, lambda x: x * 10) == 30
    assert comp.pipe("unchanged") == "unchanged"


def test_take() -> None:
    assert comp.take(2)([1, 2, 3]) == (1, 2)
    assert comp.take(5)([1, 2]) == (1, 2)
    assert comp.take(0)([1, 2]) == ()
    assert comp.take(-1)([1, 2]) == ()


def test_filter_builders_compose(board, clock) -> None:
    high = comp.filter_tasks_by_min_priority(4)
    pending = comp.filter_by_status(TaskStatus.pending)
    due_soon = comp.filter_by_deadline_before(clock.now + timedelta(days=4))

    assert titles(high(board.tasks)) == ["Fix login bug", "Review PR", "Refactor auth", "Ship release"]
    assert titles(comp.pipe(board.tasks, high, pending)) == ["Fix login bug", "Review PR", "Refactor auth"]
    assert titles(comp.pipe(board.tasks, pending, due_soon)) == ["Fix login bug", "Review PR"]


def test_filter_by_status_accepts_strings(board) -> None:
    assert titles(comp.filter_by_status("completed")(board.tasks)) == ["Ship release"]


def test_filter_by_deadline_before_accepts_naive_datetime(board, clock) -> None:
    naive_cutoff = (clock.now + timedelta(days=4)).replace(tzinfo=None)
    assert titles(comp.filter_by_deadline_before(naive_cutoff)(board.tasks)) == [
        "Fix login bug",
        "Review PR",
        "Ship release",
    ]


def test_get_top_priority_tasks(board) -> None:
    assert titles(comp.get_top_priority_tasks(board, 3)) == ["Fix login bug", "Review PR", "Refactor auth"]
    assert len(comp.get_top_priority_tasks(board, 100)) == 5


def test_get_high_priority_pending_tasks(board) -> None:
    assert titles(comp.get_high_priority_pending_tasks(board)) == [
        "Fix login bug",
        "Review PR",
        "Refactor auth",
    ]


def test_get_next_tasks_by_deadline(board) -> None:
    assert titles(comp.get_next_tasks_by_deadline(board, 3)) == ["Review PR", "Fix login bug", "Refactor auth"]
    assert titles(comp.get_next_tasks_by_deadline(board, 10))[-1] == "Update deps"


def test_composed_queries_leave_state_untouched(board) -> None:
    before = board.tasks
    comp.get_top_priority_tasks(board, 2)
    comp.get_next_tasks_by_deadline(board, 2)
    assert board.tasks is before
