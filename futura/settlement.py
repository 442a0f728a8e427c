from __future__ import annotations
from typing import Any, Callable
import threading

from .result import Result, Rejected, Resolved
from .logging import logger


log = logger()


Reject = Callable[[Any], None]
Resolve = Callable[[Any], None]
Executor = Callable[[Reject, Resolve], Any]


class Settlement:
    """State cell for a single executor invocation.

    The cell starts out pending and can be claimed only once. While the
    executor is still on the stack, a claimed result is held back and
    handed out by `release`; afterwards `claim` tells the caller to deliver
    directly. Either way exactly one party delivers the result.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._result: Result[Any, Any] | None = None
        self._executing = True

    @property
    def pending(self) -> bool:
        return self._result is None

    @property
    def result(self) -> Result[Any, Any] | None:
        return self._result

    def claim(self, result: Result[Any, Any]) -> bool:
        with self._lock:
            if self._result is not None:
                return False
            self._result = result
            return not self._executing

    def release(self) -> Result[Any, Any] | None:
        with self._lock:
            self._executing = False
            return self._result


def settle(executor: Executor, on_settled: Callable[[Result[Any, Any]], None]) -> Settlement:
    """Run `executor(reject, resolve)` and report the first settlement to
    `on_settled`, exactly once.

    An exception raised by the executor counts as a rejection, unless the
    executor had already settled. When the executor settles synchronously,
    `on_settled` runs after the executor returns, so that exceptions
    raised further down the pipeline are never mistaken for a failure of
    the executor itself.
    """
    cell = Settlement()

    def reject(reason: Any) -> None:
        result = Rejected(reason)
        if cell.claim(result):
            on_settled(result)

    def resolve(value: Any) -> None:
        result = Resolved(value)
        if cell.claim(result):
            on_settled(result)

    try:
        executor(reject, resolve)
    except Exception as e:
        if cell.pending:
            log.debug("executor raised `%r`, rejecting", e)
        cell.claim(Rejected(e))

    result = cell.release()
    if result is not None:
        on_settled(result)
    return cell
