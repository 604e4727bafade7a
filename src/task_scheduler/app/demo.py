from datetime import timedelta
import logging

from task_scheduler.app.formatting import format_task, print_state_summary, print_tasks
from task_scheduler.domain.ports import Clock, system_clock
from task_scheduler.domain.state import TaskState, create_initial_state
from task_scheduler.domain.task_models import TaskStatus
from task_scheduler.observability.logging import setup_logging
from task_scheduler.services.composition import (
    get_high_priority_pending_tasks,
    get_next_tasks_by_deadline,
    get_top_priority_tasks,
)
from task_scheduler.services.task_operations import (
    add_task,
    get_all_tasks,
    get_next_task,
    get_next_task_by_deadline,
    get_overdue_tasks,
    get_statistics,
    mark_completed,
    mark_in_progress,
    mark_multiple_completed,
    update_task,
)

logger = logging.getLogger("scheduler.system")

# (title, description, priority, days until deadline or None)
SEED_TASKS = (
    ("Fix login bug", "Users cannot log in with email addresses", 5, 3),
    ("Write API documentation", "Document all REST endpoints", 3, 8),
    ("Review pull request #123", "Code review for new feature", 4, -1),
    ("Update npm dependencies", "Update all packages to latest versions", 2, None),
    ("Refactor authentication module", "Clean up auth code", 4, 6),
)


def run(clock: Clock = system_clock) -> TaskState:
    """Scripted walk through the operations; returns the final snapshot."""
    print("Functional Task Scheduler\n")

    state = create_initial_state()
    print("Initial state created.")

    # each operation returns a NEW state
    print("\nAdding tasks...")
    today = clock()
    for title, description, priority, days in SEED_TASKS:
        deadline = today + timedelta(days=days) if days is not None else None
        state = add_task(state, title, description, priority, deadline, clock=clock)
        print(f"  Added: {title} (priority {priority})")

    print("\nAll tasks:")
    print_tasks(get_all_tasks(state))

    print("\nNext task to work on (by priority):")
    next_task = get_next_task(state)
    if next_task:
        print(f"  -> {format_task(next_task)}")
        print("\nMarking task as in progress...")
        state = mark_in_progress(state, next_task.id, clock=clock)
        print("  Task marked as in progress.")

    print("\nNext task to work on (by deadline):")
    next_by_deadline = get_next_task_by_deadline(state)
    if next_by_deadline:
        print(f"  -> {format_task(next_by_deadline)}")

    print("\nTop 3 priority pending tasks:")
    print_tasks(get_top_priority_tasks(state, 3))

    print("\nHigh priority pending tasks (>= 4):")
    print_tasks(get_high_priority_pending_tasks(state))

    print("\nCompleting a task...")
    if next_task:
        state = mark_completed(state, next_task.id, clock=clock)
        print(f"  Completed: {next_task.title}")

    print("\nBatch completing tasks...")
    low_priority_ids = [
        t.id for t in state.tasks if t.priority <= 3 and t.status == TaskStatus.pending
    ]
    state = mark_multiple_completed(state, low_priority_ids, clock=clock)
    print(f"  Completed {len(low_priority_ids)} low-priority tasks")

    print("\nUpdating task priority...")
    to_update = next((t for t in state.tasks if t.status == TaskStatus.pending), None)
    if to_update:
        result = update_task(state, to_update.id, {"priority": 5})
        if result.ok:
            state = result.value
            print(f"  Updated priority for: {to_update.title}")
        else:
            print(f"  Update failed: {result.error}")

    print("\nStatistics:")
    stats = get_statistics(state, clock=clock)
    print(f"  Total tasks: {stats.total}")
    print(f"  Pending: {stats.pending}")
    print(f"  In Progress: {stats.in_progress}")
    print(f"  Completed: {stats.completed}")
    print(f"  Overdue: {stats.overdue}")

    print("\nOverdue tasks:")
    overdue = get_overdue_tasks(state, clock=clock)
    if not overdue:
        print("  No overdue tasks.")
    else:
        print_tasks(overdue)

    print("\nNext 3 tasks by deadline:")
    print_tasks(get_next_tasks_by_deadline(state, 3))

    print_state_summary(state)

    print("Demonstrating immutability:")
    print(f"  Original task count: {len(state.tasks)}")
    new_state = add_task(state, "New task", "Description", 3, clock=clock)
    print(f"  Original state task count (unchanged): {len(state.tasks)}")
    print(f"  New state task count: {len(new_state.tasks)}")
    print("  Original state was not mutated.")

    return state


def main() -> int:
    setup_logging()
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    state = run()

    logger.info(
        "system.done",
        extra={"category": "system", "event": "system.done", "total": len(state.tasks)},
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
