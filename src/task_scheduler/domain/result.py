from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Outcome of an operation whose precondition depends on caller data.

    Callers check `ok` before touching `value`; failures carry a readable message
    and are never raised.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, message: str) -> "Result[T]":
        return cls(ok=False, error=message)

    def unwrap(self) -> T:
        if not self.ok:
            raise ValueError(self.error or "operation failed")
        return self.value  # type: ignore[return-value]
