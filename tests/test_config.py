"""Tests for BackoffConfig and RetryOptions."""

import pytest

from retry_controller.config import (
    ENV_INITIAL_DELAY,
    ENV_MAX_DELAY,
    ENV_TICK_INTERVAL,
    BackoffConfig,
    RetryOptions,
)
from retry_controller.utils.errors import ConfigError


class TestBackoffConfig:
    """Tests for defaults, validation and delay lookup."""

    def test_defaults_match_reference_constants(self) -> None:
        config = BackoffConfig()
        assert config.initial_delay == 5.0
        assert config.max_delay == 60.0
        assert config.tick_interval == 1.0

    def test_delay_for_follows_capped_doubling(self) -> None:
        config = BackoffConfig(initial_delay=1.0, max_delay=4.0)
        assert [config.delay_for(k) for k in range(4)] == [1.0, 2.0, 4.0, 4.0]

    @pytest.mark.parametrize("field", ["initial_delay", "max_delay", "tick_interval"])
    def test_non_positive_values_rejected(self, field: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            BackoffConfig(**{field: 0})
        assert exc_info.value.key == field

    def test_max_below_initial_rejected(self) -> None:
        with pytest.raises(ConfigError, match="max_delay"):
            BackoffConfig(initial_delay=10.0, max_delay=5.0)

    def test_is_immutable(self) -> None:
        config = BackoffConfig()
        with pytest.raises(AttributeError):
            config.initial_delay = 1.0  # type: ignore[misc]


class TestBackoffConfigFromEnv:
    """Tests for loading RETRY_* environment variables."""

    def test_empty_environment_gives_defaults(self) -> None:
        assert BackoffConfig.from_env({}) == BackoffConfig()

    def test_reads_all_variables(self) -> None:
        config = BackoffConfig.from_env(
            {
                ENV_INITIAL_DELAY: "0.5",
                ENV_MAX_DELAY: "8",
                ENV_TICK_INTERVAL: "0.25",
            }
        )
        assert config == BackoffConfig(
            initial_delay=0.5, max_delay=8.0, tick_interval=0.25
        )

    def test_blank_variable_is_ignored(self) -> None:
        config = BackoffConfig.from_env({ENV_MAX_DELAY: "  "})
        assert config.max_delay == 60.0

    def test_non_numeric_variable_names_key(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            BackoffConfig.from_env({ENV_INITIAL_DELAY: "soon"})
        assert exc_info.value.key == ENV_INITIAL_DELAY
        assert "soon" in str(exc_info.value)

    def test_defaults_to_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_INITIAL_DELAY, "2")
        monkeypatch.delenv(ENV_MAX_DELAY, raising=False)
        monkeypatch.delenv(ENV_TICK_INTERVAL, raising=False)
        assert BackoffConfig.from_env().initial_delay == 2.0


class TestRetryOptions:
    """Tests for option defaults."""

    def test_defaults(self) -> None:
        options = RetryOptions()
        assert options.on_success is None
        assert options.on_error is None
        assert options.on_finally is None
        assert options.retry_on_error is False
        assert options.initial_loading is False
        assert options.report_metrics is False
