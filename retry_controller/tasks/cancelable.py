"""One-shot asynchronous computation whose outcome can be suppressed.

A CancelableTask wraps an executor that is handed `succeed` and `fail`
callbacks. Once cancel() is called, neither callback reaches the task's
future: awaiting a canceled task never completes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Generator
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Executor = Callable[[Callable[[T], None], Callable[[BaseException], None]], Any]


class CancelableTask(Generic[T]):
    """Asyncio future driven by an executor, with cooperative cancellation.

    Must be created while an event loop is running. The executor is invoked
    immediately; if it raises, the task fails with that exception.

    Usage:
        task = CancelableTask(lambda ok, fail: loop.call_later(1.0, ok, None))
        task.cancel()   # awaiting `task` now never returns
    """

    def __init__(self, executor: Executor[T]) -> None:
        self.canceled = False
        self._future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        try:
            executor(self.succeed, self.fail)
        except Exception as exc:
            self.fail(exc)

    def succeed(self, value: T) -> None:
        """Resolve the future unless canceled or already settled."""
        if self.canceled or self._future.done():
            return
        self._future.set_result(value)

    def fail(self, error: BaseException) -> None:
        """Reject the future unless canceled or already settled."""
        if self.canceled or self._future.done():
            return
        self._future.set_exception(error)

    def cancel(self) -> None:
        """Suppress any later settlement. Idempotent."""
        self.canceled = True

    @property
    def future(self) -> asyncio.Future[T]:
        return self._future

    @property
    def settled(self) -> bool:
        return self._future.done()

    def __await__(self) -> Generator[Any, None, T]:
        return self._future.__await__()
