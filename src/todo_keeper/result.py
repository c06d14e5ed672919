"""Success/failure values returned by storage operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from todo_keeper.errors import TodoKeeperError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful result carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class Err:
    """A failed result carrying the error that caused it."""

    error: TodoKeeperError

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None


Result = Union[Ok[T], Err]


def succeeded(result: "Result[bool]") -> bool:
    """Collapse a boolean result to True only when it succeeded with True."""
    return result.ok and bool(result.value)
