"""Configuration for the retry controller.

BackoffConfig holds the exponential backoff constants and can be loaded from
environment variables:
    RETRY_INITIAL_DELAY_SECONDS, RETRY_MAX_DELAY_SECONDS,
    RETRY_TICK_INTERVAL_SECONDS

RetryOptions holds the per-controller callback hooks and retry flags.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from retry_controller.utils.backoff import compute_backoff_delay
from retry_controller.utils.errors import ConfigError

ENV_INITIAL_DELAY = "RETRY_INITIAL_DELAY_SECONDS"
ENV_MAX_DELAY = "RETRY_MAX_DELAY_SECONDS"
ENV_TICK_INTERVAL = "RETRY_TICK_INTERVAL_SECONDS"


@dataclass(frozen=True)
class BackoffConfig:
    """Exponential backoff constants, in seconds."""

    initial_delay: float = 5.0
    max_delay: float = 60.0
    tick_interval: float = 1.0

    def __post_init__(self) -> None:
        for key in ("initial_delay", "max_delay", "tick_interval"):
            if getattr(self, key) <= 0:
                raise ConfigError(
                    f"{key} must be positive, got {getattr(self, key)}", key=key
                )
        if self.max_delay < self.initial_delay:
            raise ConfigError(
                f"max_delay ({self.max_delay}) must be >= "
                f"initial_delay ({self.initial_delay})",
                key="max_delay",
            )

    def delay_for(self, attempt: int) -> float:
        """Return the backoff delay after `attempt` completed waits."""
        return compute_backoff_delay(attempt, self.initial_delay, self.max_delay)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BackoffConfig:
        """Build a BackoffConfig from RETRY_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            BackoffConfig with unset variables left at their defaults.

        Raises:
            ConfigError: If a variable is not a number or fails validation.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, float] = {}
        for field_name, var in (
            ("initial_delay", ENV_INITIAL_DELAY),
            ("max_delay", ENV_MAX_DELAY),
            ("tick_interval", ENV_TICK_INTERVAL),
        ):
            raw = env.get(var)
            if raw is None or raw.strip() == "":
                continue
            try:
                kwargs[field_name] = float(raw)
            except ValueError as exc:
                raise ConfigError(
                    f"Invalid {var}: '{raw}' is not a number", key=var
                ) from exc
        return cls(**kwargs)


@dataclass
class RetryOptions:
    """Callback hooks and flags for a RetryController.

    Hooks may be plain callables or coroutine functions; awaitable results
    are awaited before the controller continues.
    """

    on_success: Callable[[], Any] | None = None
    on_error: Callable[[BaseException], Any] | None = None
    on_finally: Callable[[], Any] | None = None
    retry_on_error: bool = False
    initial_loading: bool = False
    report_metrics: bool = False
