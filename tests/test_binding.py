"""Tests for the use_retry_controller adapter."""

import dataclasses
from unittest.mock import AsyncMock, MagicMock

import pytest

from retry_controller.binding import RetryHandle, use_retry_controller
from retry_controller.config import BackoffConfig, RetryOptions
from retry_controller.state.observable import Observable


class TestUseRetryController:
    """Tests for the bound handle surface."""

    def test_exposes_observables_with_initial_state(self) -> None:
        handle = use_retry_controller(AsyncMock(), RetryOptions(initial_loading=True))

        assert isinstance(handle, RetryHandle)
        assert isinstance(handle.loading, Observable)
        assert handle.loading.value is True
        assert handle.last_error.value is None
        assert handle.seconds_before_retry.value == 0

    def test_handle_is_frozen(self) -> None:
        handle = use_retry_controller(AsyncMock())
        with pytest.raises(dataclasses.FrozenInstanceError):
            handle.run = AsyncMock()  # type: ignore[misc]

    @pytest.mark.asyncio
    async def test_bound_run_drives_controller(self) -> None:
        error = ValueError("test error")
        operation = AsyncMock(side_effect=[error, None])
        on_error = MagicMock()
        handle = use_retry_controller(
            operation,
            RetryOptions(on_error=on_error, retry_on_error=True),
            backoff=BackoffConfig(initial_delay=0.01, max_delay=0.01),
        )

        await handle.run(1, 2)

        assert operation.await_count == 2
        operation.assert_awaited_with(1, 2)
        on_error.assert_called_once_with(error)
        assert handle.loading.value is False

    @pytest.mark.asyncio
    async def test_bound_stop_disables_retry(self) -> None:
        operation = AsyncMock(side_effect=ValueError("fail"))
        handle = use_retry_controller(operation, RetryOptions(retry_on_error=True))

        handle.stop_retrying()
        await handle.run()

        assert operation.await_count == 1
        assert handle.seconds_before_retry.value == 0
