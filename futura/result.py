from typing import Callable, TypeVar, Generic, TypeGuard, Any
from dataclasses import dataclass


E = TypeVar("E")
A = TypeVar("A")
R = TypeVar("R")


@dataclass
class Rejected(Generic[E]):
    reason: E

    def __bool__(self):
        return False

    def __str__(self):
        return f"Rejected({self.reason!r})"


@dataclass
class Resolved(Generic[A]):
    value: A

    def __bool__(self):
        return True

    def __str__(self):
        return f"Resolved({self.value!r})"


Result = Rejected[E] | Resolved[A]


def is_resolved(r: Result[Any, A]) -> TypeGuard[Resolved[A]]:
    return isinstance(r, Resolved)


def fold(
    on_rejected: Callable[[E], R], on_resolved: Callable[[A], R], result: Result[E, A]
) -> R:
    """Collapse a `Result` by calling the function that owns its branch."""
    match result:
        case Resolved(value):
            return on_resolved(value)
        case Rejected(reason):
            return on_rejected(reason)
        case _:
            raise TypeError(f"Not a Result: {result!r}")
