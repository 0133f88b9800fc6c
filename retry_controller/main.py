"""Command-line entry point: retry a shell command until it succeeds.

Usage:
    retry-controller [--retry | --no-retry] [--initial-delay S] [--max-delay S] -- CMD...

Backoff defaults come from the RETRY_* environment variables (see
retry_controller.config). SIGINT/SIGTERM stop retrying; the process then
exits with the last command's status.
"""

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace

from retry_controller.config import BackoffConfig, RetryOptions
from retry_controller.controller import RetryController
from retry_controller.observability.logger import configure_logging
from retry_controller.utils.errors import CommandFailedError, ConfigError

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


async def run_command(command: list[str]) -> None:
    """Run `command` as a subprocess and wait for it to exit.

    Raises:
        CommandFailedError: If the command exits with a non-zero status.
    """
    process = await asyncio.create_subprocess_exec(*command)
    returncode = await process.wait()
    if returncode != 0:
        raise CommandFailedError(
            f"{command[0]} exited with status {returncode}",
            name=command[0],
            returncode=returncode,
        )


def _exit_status(controller: RetryController) -> int:
    error = controller.last_error.value
    if error is None:
        return 0
    if isinstance(error, CommandFailedError) and error.returncode is not None:
        return error.returncode
    return 1


async def _run(command: list[str], retry: bool, backoff: BackoffConfig) -> int:
    """Drive `command` through a RetryController and return its exit status."""
    controller = RetryController(
        run_command,
        RetryOptions(retry_on_error=retry),
        backoff=backoff,
        name=command[0],
    )

    def _announce(seconds: float) -> None:
        if seconds > 0:
            logger.info("Next attempt in %gs", seconds)

    controller.seconds_before_retry.subscribe(_announce)

    loop = asyncio.get_running_loop()

    def _shutdown() -> None:
        logger.info("Received shutdown signal")
        controller.stop_retrying()

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, _shutdown)
    try:
        await controller.run(command)
    finally:
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)

    return _exit_status(controller)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retry-controller",
        description="Retry a command with exponential backoff until it succeeds.",
    )
    parser.add_argument(
        "--retry",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="retry failed runs with backoff (--no-retry runs the command once)",
    )
    parser.add_argument("--initial-delay", type=float, help="first delay in seconds")
    parser.add_argument("--max-delay", type=float, help="delay cap in seconds")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("command", nargs=argparse.REMAINDER)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the command with retries, return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        parser.error("a command to run is required")

    try:
        backoff = BackoffConfig.from_env()
        overrides = {
            key: value
            for key, value in (
                ("initial_delay", args.initial_delay),
                ("max_delay", args.max_delay),
            )
            if value is not None
        }
        if overrides:
            backoff = replace(backoff, **overrides)
    except ConfigError as exc:
        parser.error(str(exc))

    configure_logging(getattr(logging, args.log_level))
    logger.info("Running %s", " ".join(command))

    return asyncio.run(_run(command, args.retry, backoff))


if __name__ == "__main__":
    sys.exit(main())
