"""Observable state cells read by UI and reactive adapters."""

from retry_controller.state.observable import Observable

__all__ = ["Observable"]
