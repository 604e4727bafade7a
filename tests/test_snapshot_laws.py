from __future__ import annotations

from datetime import timedelta

from task_scheduler.domain.task_models import TaskStatus
from task_scheduler.services import task_operations as ops


def test_add_is_immutable_and_grows_by_one(state, add) -> None:
    s = add(state, "A", "", 3)
    before = s.model_dump()

    s2 = add(s, "B", "", 4)

    assert len(s2.tasks) == len(s.tasks) + 1
    assert s.model_dump() == before
    assert s2.tasks is not s.tasks


def test_remove_undoes_add(state, add) -> None:
    s = add(state, "A", "", 3)
    s = add(s, "B", "", 3)

    grown = add(s, "C", "", 3)
    new_id = grown.tasks[-1].id

    assert len(ops.remove_task(grown, new_id).tasks) == len(s.tasks)


def test_status_change_does_not_touch_original_task(state, add, clock) -> None:
    s = add(state, "Task", "", 3)
    original = s.tasks[0]

    s2 = ops.mark_completed(s, original.id, clock=clock)

    assert original.status == TaskStatus.pending
    assert s2.tasks[0].status == TaskStatus.completed


def test_failed_update_leaves_state_alone(state, add) -> None:
    s = add(state, "Task", "", 3)
    before = s.model_dump()

    for bad in (0, 6):
        result = ops.update_task(s, s.tasks[0].id, {"priority": bad})
        assert not result.ok

    assert s.model_dump() == before


def test_statistics_buckets_add_up(state, add, clock) -> None:
    s = add(state, "A", "", 3, clock.now - timedelta(days=1))
    s = add(s, "B", "", 3)
    s = add(s, "C", "", 3, clock.now - timedelta(days=1))
    s = add(s, "D", "", 3)
    s = ops.mark_in_progress(s, "task-2")
    s = ops.mark_completed(s, "task-3", clock=clock)

    stats = ops.get_statistics(s, clock=clock)

    assert stats.total == len(s.tasks)
    assert stats.pending + stats.in_progress + stats.completed == stats.total
    assert stats.overdue == 1


def test_end_to_end_scenario(state, add, clock) -> None:
    s = add(state, "A", "", 5)
    s = add(s, "B", "", 2, clock.now - timedelta(days=1))
    a_id, b_id = (t.id for t in s.tasks)

    assert ops.get_next_task(s).id == a_id
    assert [t.id for t in ops.get_overdue_tasks(s, clock=clock)] == [b_id]

    s = ops.mark_completed(s, b_id, clock=clock)

    assert ops.get_overdue_tasks(s, clock=clock) == ()
    stats = ops.get_statistics(s, clock=clock)
    assert (stats.total, stats.pending, stats.in_progress, stats.completed, stats.overdue) == (2, 1, 0, 1, 0)
