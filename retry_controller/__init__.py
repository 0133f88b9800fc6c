"""Cancelable retry controller with exponential backoff.

Public API:
    RetryController       Retries an async operation until success or stop.
    RetryOptions          Callback hooks and retry flags.
    BackoffConfig         Initial delay, cap and countdown tick interval.
    CancelableTask        Future whose outcome can be suppressed.
    Observable            State cell with synchronous change callbacks.
    RetryHandle           Bound surface returned by use_retry_controller.
    use_retry_controller  Factory for a RetryHandle.
"""

from retry_controller.binding import RetryHandle, use_retry_controller
from retry_controller.config import BackoffConfig, RetryOptions
from retry_controller.controller import RetryController
from retry_controller.state.observable import Observable
from retry_controller.tasks.cancelable import CancelableTask

__all__ = [
    "RetryController",
    "RetryOptions",
    "BackoffConfig",
    "CancelableTask",
    "Observable",
    "RetryHandle",
    "use_retry_controller",
]
