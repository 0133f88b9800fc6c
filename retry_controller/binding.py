"""Adapter exposing a RetryController to reactive and UI layers.

use_retry_controller() builds a controller and returns only the surface a
view needs: the bound run/stop methods and the three observables.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from retry_controller.config import BackoffConfig, RetryOptions
from retry_controller.controller import RetryController
from retry_controller.state.observable import Observable


@dataclass(frozen=True)
class RetryHandle:
    """Bound operations and observable state of one RetryController."""

    run: Callable[..., Awaitable[None]]
    stop_retrying: Callable[[], None]
    loading: Observable[bool]
    last_error: Observable[BaseException | None]
    seconds_before_retry: Observable[float]


def use_retry_controller(
    operation: Callable[..., Awaitable[Any]],
    options: RetryOptions | None = None,
    *,
    backoff: BackoffConfig | None = None,
    name: str | None = None,
) -> RetryHandle:
    """Create a RetryController and return its bound handle.

    Args:
        operation: Async callable to retry.
        options: Hooks and flags for the controller.
        backoff: Delay constants. Defaults to RetryController.DEFAULT_BACKOFF.
        name: Label for log records and metrics.

    Returns:
        RetryHandle wired to a new controller.
    """
    controller = RetryController(operation, options, backoff=backoff, name=name)
    return RetryHandle(
        run=controller.run,
        stop_retrying=controller.stop_retrying,
        loading=controller.loading,
        last_error=controller.last_error,
        seconds_before_retry=controller.seconds_before_retry,
    )
