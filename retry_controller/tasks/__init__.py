"""Cancelable asynchronous tasks."""

from retry_controller.tasks.cancelable import CancelableTask

__all__ = ["CancelableTask"]
