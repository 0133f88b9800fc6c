"""Cancelable retry controller.

Drives a fallible async operation to completion, retrying with capped
exponential backoff. Progress is exposed through three observables:
`loading`, `last_error` and `seconds_before_retry`.

State machine per run() call:
    Idle -> Attempting -> Succeeded
                       -> Failed (retry disabled)
                       -> Waiting -> Attempting
                                  -> Stopped (stop_retrying() or close())
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from retry_controller.config import BackoffConfig, RetryOptions
from retry_controller.observability.metrics import (
    RunMetrics,
    RunTimer,
    log_run_metrics,
)
from retry_controller.state.observable import Observable
from retry_controller.tasks.cancelable import CancelableTask
from retry_controller.utils.errors import RunInProgressError

logger = logging.getLogger(__name__)


class RetryController:
    """Retries an async operation with backoff until success or stop.

    Errors raised by the operation never escape run(); they are reported
    through the `on_error` hook and the `last_error` observable. Only one
    run() may be active at a time.

    Args:
        operation: Async callable invoked once per attempt with run()'s args.
        options: Hooks and flags. Copied, so stop_retrying() leaves the
            caller's object untouched.
        backoff: Delay constants. Defaults to DEFAULT_BACKOFF.
        name: Label used in log records and metrics.
    """

    DEFAULT_BACKOFF = BackoffConfig()

    def __init__(
        self,
        operation: Callable[..., Awaitable[Any]],
        options: RetryOptions | None = None,
        backoff: BackoffConfig | None = None,
        name: str | None = None,
    ) -> None:
        self._operation = operation
        self.options = replace(options) if options is not None else RetryOptions()
        self.backoff = backoff or self.DEFAULT_BACKOFF
        self.name = name or getattr(operation, "__name__", "operation")

        self.loading: Observable[bool] = Observable(self.options.initial_loading)
        self.last_error: Observable[BaseException | None] = Observable(None)
        self.seconds_before_retry: Observable[float] = Observable(0.0)

        self.last_run_metrics: RunMetrics | None = None

        self._attempts = 0
        self._done = False
        self._running = False
        self._wait_task: CancelableTask[None] | None = None
        self._wait_handle: asyncio.TimerHandle | None = None
        self._ticker: asyncio.Task[None] | None = None
        self._interrupt: asyncio.Future[None] | None = None

    @property
    def attempts(self) -> int:
        """Completed backoff waits in the current run."""
        return self._attempts

    @property
    def running(self) -> bool:
        return self._running

    @property
    def retry_on_error(self) -> bool:
        return self.options.retry_on_error

    async def run(self, *args: Any, **kwargs: Any) -> None:
        """Invoke the operation until it succeeds or retrying ends.

        Raises:
            RunInProgressError: If another run() on this controller is active.
        """
        if self._running:
            raise RunInProgressError(
                "run() called while a previous run is still active",
                name=self.name,
            )

        self._running = True
        self._done = False
        self._attempts = 0

        calls = 0
        waits = 0
        total_backoff = 0.0
        status = "failed"
        timer = RunTimer()
        try:
            with timer:
                while not self._done:
                    try:
                        self.loading.value = True
                        self.last_error.value = None
                        calls += 1
                        await self._operation(*args, **kwargs)
                    except Exception as exc:
                        logger.error(
                            "Attempt %d of %s failed: %s",
                            calls,
                            self.name,
                            exc,
                            extra={
                                "controller": self.name,
                                "attempt": calls,
                                "error": repr(exc),
                            },
                        )
                        self.loading.value = False
                        await self._call_hook(self.options.on_error, exc)
                        self.last_error.value = exc

                        if not self.options.retry_on_error:
                            self._done = True
                            return

                        delay = self.backoff.delay_for(self._attempts)
                        waits += 1
                        total_backoff += delay
                        if not await self._wait_for_retry(delay):
                            status = "stopped"
                            self._done = True
                            return

                        self._attempts += 1
                        self._release_wait()
                    else:
                        status = "succeeded"
                        await self._call_hook(self.options.on_success)
                        self._done = True
                    finally:
                        self.loading.value = False
                        await self._call_hook(self.options.on_finally)
        finally:
            self._release_wait()
            self._running = False
            self._record_metrics(status, calls, waits, total_backoff, timer)

    def stop_retrying(self) -> None:
        """Disable retries and end any backoff wait in progress. Idempotent."""
        self.options.retry_on_error = False
        self._release_wait()
        self._attempts = 0

    def close(self) -> None:
        """Release any live wait and ticker before the controller is discarded."""
        self._release_wait()

    async def __aenter__(self) -> RetryController:
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    async def _wait_for_retry(self, delay: float) -> bool:
        """Suspend for `delay` seconds while a countdown ticks.

        Returns:
            True when the delay elapsed, False when interrupted by
            stop_retrying() or close().
        """
        self._release_wait()
        loop = asyncio.get_running_loop()

        logger.info(
            "Retrying after %gs...",
            delay,
            extra={"controller": self.name, "delay_seconds": delay},
        )
        self.seconds_before_retry.value = delay
        self._ticker = loop.create_task(self._tick())

        def start_timer(succeed: Callable[[None], None], fail: Any) -> None:
            self._wait_handle = loop.call_later(delay, succeed, None)

        wait_task: CancelableTask[None] = CancelableTask(start_timer)
        interrupt: asyncio.Future[None] = loop.create_future()
        self._wait_task = wait_task
        self._interrupt = interrupt

        await asyncio.wait(
            {wait_task.future, interrupt}, return_when=asyncio.FIRST_COMPLETED
        )
        # A stop landing after the timer fired still wins over the elapsed wait
        if wait_task.settled and not interrupt.done():
            return True

        logger.info(
            "Retry wait for %s interrupted",
            self.name,
            extra={"controller": self.name},
        )
        return False

    async def _tick(self) -> None:
        interval = self.backoff.tick_interval
        while True:
            await asyncio.sleep(interval)
            remaining = max(round(self.seconds_before_retry.value - interval, 6), 0.0)
            self.seconds_before_retry.value = remaining
            logger.debug(
                "Retrying in %gs...",
                remaining,
                extra={"controller": self.name, "seconds_before_retry": remaining},
            )

    def _release_wait(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        if self._wait_handle is not None:
            self._wait_handle.cancel()
            self._wait_handle = None
        if self._wait_task is not None:
            self._wait_task.cancel()
            self._wait_task = None
        if self._interrupt is not None:
            if not self._interrupt.done():
                self._interrupt.set_result(None)
            self._interrupt = None
        self.seconds_before_retry.value = 0.0

    async def _call_hook(self, hook: Callable[..., Any] | None, *args: Any) -> None:
        if hook is None:
            return
        result = hook(*args)
        if inspect.isawaitable(result):
            await result

    def _record_metrics(
        self,
        status: str,
        calls: int,
        waits: int,
        total_backoff: float,
        timer: RunTimer,
    ) -> None:
        error = self.last_error.value
        metrics = RunMetrics(
            controller=self.name,
            status=status,
            attempts=calls,
            waits=waits,
            total_backoff_seconds=total_backoff,
            wall_time_seconds=timer.duration_seconds,
            error_type=type(error).__name__ if error is not None else None,
            error_message=str(error) if error is not None else None,
        )
        self.last_run_metrics = metrics
        if self.options.report_metrics:
            log_run_metrics(metrics)
