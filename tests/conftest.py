from __future__ import annotations

import logging
from functools import partial

import pytest

from task_scheduler.domain.state import TaskState, create_initial_state
from task_scheduler.services import task_operations as ops

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def add(clock: FakeClock, ids: SequentialIds):
    """add_task bound to the deterministic clock and id generator."""
    return partial(ops.add_task, clock=clock, id_factory=ids)


@pytest.fixture()
def state() -> TaskState:
    return create_initial_state()


@pytest.fixture()
def restore_root_logging():
    """Put the root logger back the way pytest left it after setup_logging() runs."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
