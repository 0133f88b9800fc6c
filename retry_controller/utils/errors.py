"""Custom exception hierarchy for the retry controller.

All exceptions inherit from RetryControllerError, enabling targeted handling
at controller boundaries. Failures of the wrapped operation are never raised
through this hierarchy: they are surfaced via ``on_error`` and ``last_error``.
"""


class RetryControllerError(Exception):
    """Base exception for all retry controller errors."""

    def __init__(self, message: str, name: str | None = None) -> None:
        self.name = name
        super().__init__(message)

    def __str__(self) -> str:
        if self.name:
            return f"[controller={self.name}] {super().__str__()}"
        return super().__str__()


class RunInProgressError(RetryControllerError):
    """Raised when run() is called while a previous run() is still active."""


class ConfigError(RetryControllerError):
    """Raised when backoff configuration is missing or invalid."""

    def __init__(
        self, message: str, name: str | None = None, key: str | None = None
    ) -> None:
        self.key = key
        super().__init__(message, name)


class CommandFailedError(RetryControllerError):
    """Raised when a retried shell command exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        returncode: int | None = None,
    ) -> None:
        self.returncode = returncode
        super().__init__(message, name)
