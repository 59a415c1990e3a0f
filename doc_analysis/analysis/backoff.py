from __future__ import annotations

import random
from collections.abc import Callable

# Maps a 1-based attempt number to the wait (seconds) after that attempt.
Backoff = Callable[[int], float]


def fixed_interval(interval_s: float) -> Backoff:
    def _delay(attempt: int) -> float:
        return interval_s

    return _delay


def exponential_jitter(base_s: float, max_s: float, *, rng: random.Random | None = None) -> Backoff:
    """``base * 2**(attempt-1)`` capped at ``max_s``, with up to 25% jitter taken off."""
    rand = rng or random.Random()

    def _delay(attempt: int) -> float:
        raw = min(base_s * (2 ** max(0, attempt - 1)), max_s)
        return raw * (1.0 - 0.25 * rand.random())

    return _delay


def backoff_for(strategy: str, *, interval_s: float, max_s: float) -> Backoff:
    if strategy == "exponential":
        return exponential_jitter(interval_s, max_s)
    if strategy == "fixed":
        return fixed_interval(interval_s)
    raise ValueError(f"Unknown backoff strategy: {strategy}")
