from __future__ import annotations
import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Callable

from .result import Result, Rejected, Resolved
from .settlement import Executor, Settlement, settle
from .logging import logger


log = logger()
_MISSING: Any = object()


@dataclass(frozen=True)
class Map:
    fn: Callable[[Any], Any]


@dataclass(frozen=True)
class Chain:
    fn: Callable[[Any], Task[Any, Any]]


@dataclass(frozen=True)
class Bimap:
    on_rejected: Callable[[Any], Any]
    on_resolved: Callable[[Any], Any]


@dataclass(frozen=True)
class Either:
    on_rejected: Callable[[Any], Task[Any, Any]]
    on_resolved: Callable[[Any], Task[Any, Any]]


Step = Map | Chain | Bimap | Either


@dataclass(frozen=True)
class Task[E, A]:
    """A lazy computation that settles exactly once, either rejected with
    an `E` or resolved with an `A`.

    A `Task` is only a description: the executor and every composed step
    are stored as data. Nothing runs until `fork` is called, and every
    call to `fork` runs the executor again.
    """
    executor: Executor
    steps: tuple[Step, ...] = ()

    def _then(self, step: Step) -> Task[Any, Any]:
        return Task(self.executor, self.steps + (step,))

    def map[B](self, fn: Callable[[A], B]) -> Task[E, B]:
        return self._then(Map(fn))

    def chain[B](self, fn: Callable[[A], Task[E, B]]) -> Task[E, B]:
        return self._then(Chain(fn))

    def bimap[E2, B](
        self, on_rejected: Callable[[E], E2], on_resolved: Callable[[A], B]
    ) -> Task[E2, B]:
        return self._then(Bimap(on_rejected, on_resolved))

    def fork(
        self, on_rejected: Callable[[E], Any], on_resolved: Callable[[A], Any]
    ) -> Task[E, A]:
        """Run the pipeline and hand the outcome to one of the callbacks.

        If `on_resolved` raises, its exception goes to `on_rejected`. If
        `on_rejected` raises, it is called once more with the new
        exception; a second failure propagates to the caller.
        """
        self._run(functools.partial(deliver, on_rejected, on_resolved))
        return self

    def _run(self, on_settled: Callable[[Result[Any, Any]], None]) -> None:
        settle(self.executor, functools.partial(advance, self.steps, on_settled))

    def __await__(self):
        return self._future().__await__()

    async def _future(self) -> Result[E, A]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Result[E, A]] = loop.create_future()

        def settled(result: Result[E, A]) -> None:
            loop.call_soon_threadsafe(_set_result, future, result)

        self._run(settled)
        return await future

    @staticmethod
    def of[T](value: T) -> Task[Any, T]:
        return Task(lambda _, resolve: resolve(value))

    @staticmethod
    def reject[T](reason: T) -> Task[T, Any]:
        return Task(lambda reject, _: reject(reason))

    @staticmethod
    def either(
        on_rejected: Callable[[Any], Task[Any, Any]],
        on_resolved: Callable[[Any], Task[Any, Any]],
        task: Task[Any, Any] = _MISSING,
    ):
        """Continue `task` with the `Task` returned by whichever function
        owns the branch it settles into. Either function may switch
        branches. Without `task`, returns a function that takes it.
        """
        if task is _MISSING:
            return functools.partial(Task.either, on_rejected, on_resolved)
        if not isinstance(task, Task):
            raise TypeError(f"Expected a Task, got: {task!r}")
        return task._then(Either(on_rejected, on_resolved))


def _set_result(future: asyncio.Future, result: Result[Any, Any]) -> None:
    if not future.done():
        future.set_result(result)


def _apply(
    fn: Callable[[Any], Any],
    x: Any,
    branch: type[Rejected] | type[Resolved],
) -> Result[Any, Any]:
    try:
        return branch(fn(x))
    except Exception as e:
        log.debug("`%s` raised `%r`, rejecting", getattr(fn, "__name__", fn), e)
        return Rejected(e)


def _continuation(fn: Callable[[Any], Task[Any, Any]], x: Any) -> Task[Any, Any] | Rejected[Any]:
    try:
        task = fn(x)
    except Exception as e:
        log.debug("`%s` raised `%r`, rejecting", getattr(fn, "__name__", fn), e)
        return Rejected(e)

    if not isinstance(task, Task):
        return Rejected(TypeError(f"Expected a Task to continue with, got: {task!r}"))
    return task


def _flatten(
    task: Task[Any, Any],
    steps: tuple[Step, ...],
    start: int,
    on_settled: Callable[[Result[Any, Any]], None],
) -> Result[Any, Any] | None:
    """Fork a nested `task`. If it settles before `_run` returns, its result
    is handed back to the caller; otherwise `None`, and the settlement
    continues with `steps[start:]` from whatever callback settles it.
    """
    cell = Settlement()

    def settled(result: Result[Any, Any]) -> None:
        if cell.claim(result):
            advance(steps, on_settled, result, start)

    task._run(settled)
    return cell.release()


def advance(
    steps: tuple[Step, ...],
    on_settled: Callable[[Result[Any, Any]], None],
    result: Result[Any, Any],
    start: int = 0,
) -> None:
    """Push a settled `result` through `steps[start:]`.

    Steps that yield another `Task` fork it. Nested tasks that settle
    synchronously feed back into this loop, so long chains run in constant
    stack depth.
    """
    i = start
    while i < len(steps):
        step = steps[i]
        i += 1
        match step, result:
            case Map(fn), Resolved(value):
                result = _apply(fn, value, Resolved)
                continue
            case Bimap(_, on_resolved), Resolved(value):
                result = _apply(on_resolved, value, Resolved)
                continue
            case Bimap(on_rejected, _), Rejected(reason):
                result = _apply(on_rejected, reason, Rejected)
                continue
            case Chain(fn), Resolved(value):
                nested = _continuation(fn, value)
            case Either(_, on_resolved), Resolved(value):
                nested = _continuation(on_resolved, value)
            case Either(on_rejected, _), Rejected(reason):
                nested = _continuation(on_rejected, reason)
            case _:
                continue

        if isinstance(nested, Rejected):
            result = nested
            continue

        settled = _flatten(nested, steps, i, on_settled)
        if settled is None:
            return
        result = settled

    on_settled(result)


def handle_rejection(on_rejected: Callable[[Any], Any], reason: Any, attempts: int = 2) -> None:
    """Call `on_rejected(reason)`. If it raises, call it again with the
    raised exception, up to `attempts` calls in total; the exception from
    the last attempt propagates.
    """
    for attempt in range(1, attempts + 1):
        try:
            on_rejected(reason)
            return
        except Exception as e:
            if attempt == attempts:
                raise
            log.debug("rejection handler raised `%r`, retrying with it", e)
            reason = e


def deliver(
    on_rejected: Callable[[Any], Any],
    on_resolved: Callable[[Any], Any],
    result: Result[Any, Any],
) -> None:
    match result:
        case Resolved(value):
            try:
                on_resolved(value)
                return
            except Exception as e:
                log.debug("resolution handler raised `%r`, rejecting", e)
                reason = e
        case Rejected(reason):
            pass
        case _:
            raise TypeError(f"Not a Result: {result!r}")

    handle_rejection(on_rejected, reason)
