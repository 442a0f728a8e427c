from __future__ import annotations
from dataclasses import dataclass
import functools
from typing import Any, Callable

from .result import Result, Resolved, Rejected
from .task import Task


class Maybe:
    """An optional value: `Just(value)` or `Nothing()`.

    Shares `map`, `bimap` and `chain` with `Task` but is evaluated on the
    spot.
    """
    @staticmethod
    def of[T](value: T) -> Just[T]:
        return Just(value)


@dataclass(frozen=True)
class Just[T](Maybe):
    value: T

    def map[B](self, fn: Callable[[T], B]) -> Just[B]:
        return Just(fn(self.value))

    def bimap[B](self, _sad: Callable[[], Any], happy: Callable[[T], B]) -> Just[B]:
        return Just(happy(self.value))

    def chain[B](self, fn: Callable[[T], B]) -> B:
        return fn(self.value)

    def __str__(self):
        return f"Just({self.value!r})"


@dataclass(frozen=True)
class Nothing(Maybe):
    def map(self, _fn: Callable[[Any], Any]) -> Nothing:
        return self

    def bimap(self, sad: Callable[[], Any], _happy: Callable[[Any], Any]) -> Nothing:
        sad()
        return self

    def chain(self, _fn: Callable[[Any], Any]) -> Nothing:
        return self

    def __str__(self):
        return "Nothing"


def just[T](value: T) -> Just[T]:
    return Just(value)


def nothing() -> Nothing:
    return Nothing()


def is_maybe(x: Any) -> bool:
    return isinstance(x, Maybe)


def is_just(x: Any) -> bool:
    return isinstance(x, Just)


def is_nothing(x: Any) -> bool:
    return isinstance(x, Nothing)


_MISSING: Any = object()


def maybe(sad: Callable[[], Any], happy: Callable[[Any], Any], m: Maybe = _MISSING):
    """Case analysis on a `Maybe`; without `m`, returns a function taking it."""
    if m is _MISSING:
        return functools.partial(maybe, sad, happy)

    match m:
        case Nothing():
            return sad()
        case Just(value):
            return happy(value)
        case _:
            raise TypeError(f"Invalid type '{type(m).__name__}' given to maybe()")


def from_result(result: Result[Any, Any]) -> Maybe:
    match result:
        case Resolved(value):
            return Just(value)
        case Rejected():
            return Nothing()
        case _:
            raise TypeError(f"Not a Result: {result!r}")


def to_task(m: Maybe, reason: Any = None) -> Task[Any, Any]:
    """A `Task` resolving with the value of a `Just`, or rejecting with
    `reason` for `Nothing`."""
    return maybe(lambda: Task.reject(reason), Task.of, m)
