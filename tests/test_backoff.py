"""Tests for exponential backoff delay computation."""

import pytest

from retry_controller.utils.backoff import compute_backoff_delay


class TestComputeBackoffDelay:
    """Tests for min(initial * 2^attempt, max)."""

    def test_reference_schedule_doubles_then_caps(self) -> None:
        delays = [compute_backoff_delay(k, 5.0, 60.0) for k in range(7)]
        assert delays == [5.0, 10.0, 20.0, 40.0, 60.0, 60.0, 60.0]

    def test_first_attempt_uses_initial_delay(self) -> None:
        assert compute_backoff_delay(0, 0.25, 10.0) == 0.25

    def test_cap_equal_to_initial_is_constant(self) -> None:
        assert {compute_backoff_delay(k, 2.0, 2.0) for k in range(5)} == {2.0}

    def test_huge_attempt_stays_at_cap(self) -> None:
        assert compute_backoff_delay(10_000, 5.0, 60.0) == 60.0

    def test_negative_attempt_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            compute_backoff_delay(-1, 5.0, 60.0)
