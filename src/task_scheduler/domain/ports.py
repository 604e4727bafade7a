"""
Collaborators injected into the task operations.

Time and identifiers are the only effects the operations need; both are passed in
so the transformations stay functions of their arguments and tests can pin them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Returns the current time as an aware datetime."""
    def __call__(self) -> datetime: ...


class IdGenerator(Protocol):
    """Returns a fresh identifier, unique within a task state."""
    def __call__(self) -> str: ...


def system_clock() -> datetime:
    return datetime.now(timezone.utc)
