"""Exponential backoff delay computation.

Delay follows the formula: min(initial_delay * 2^attempt, max_delay)
"""


def compute_backoff_delay(
    attempt: int, initial_delay: float, max_delay: float
) -> float:
    """Compute the wait before the next attempt.

    Args:
        attempt: Zero-based number of waits already completed in this run.
        initial_delay: Delay in seconds before the first retry.
        max_delay: Upper bound in seconds for any single delay.

    Returns:
        Delay in seconds, doubling per attempt and capped at max_delay.
    """
    if attempt < 0:
        raise ValueError(f"attempt must be non-negative, got {attempt}")
    # Cap before exponentiation overflows float range on very long runs
    if attempt >= 64:
        return max_delay
    return min(initial_delay * (2**attempt), max_delay)
