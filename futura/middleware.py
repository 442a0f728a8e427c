from __future__ import annotations
from dataclasses import dataclass
import functools
from typing import Any, Callable

from .task import Task


Middleware = Callable[[Any, Callable[[Any], None], Callable[[Any], None]], Any]
Callback = Callable[[Any, Any], Any]


@dataclass
class Aborted:
    error: Any
    args: Any


def _stage(fn: Middleware, args: Any) -> Task[Aborted, Any]:
    return Task(lambda reject, resolve: fn(args, resolve, reject)).bimap(
        lambda error: Aborted(error, args), lambda value: value
    )


def compose_middleware(middleware: list[Middleware], callback: Callback) -> Callable[[Any], Task[Any, Any]]:
    """Compose `middleware` functions `fn(args, resolve, reject)` into one.

    Each middleware passes a value on to the next by calling `resolve`, or
    stops the run by calling `reject(err)`, which ends in `callback(err,
    args)` with the `args` that middleware was given. Raising counts as
    rejecting. After the last middleware, `callback(None, value)` is called.
    """
    def on_rejected(aborted):
        match aborted:
            case Aborted(error, args):
                callback(error, args)
            case _:
                raise aborted

    def run(args: Any) -> Task[Any, Any]:
        task = functools.reduce(
            lambda acc, fn: acc.chain(functools.partial(_stage, fn)),
            middleware,
            Task.of(args),
        )
        return task.fork(on_rejected, lambda value: callback(None, value))

    return run
