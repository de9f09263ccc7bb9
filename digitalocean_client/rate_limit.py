"""
Rate limiting utilities and retry/backoff helpers.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Mapping, Protocol

# https://docs.digitalocean.com/reference/api/digitalocean/#section/Introduction/Rate-Limit
LIMIT_HEADER = "ratelimit-limit"
REMAINING_HEADER = "ratelimit-remaining"
RESET_HEADER = "ratelimit-reset"
RETRY_AFTER_HEADER = "retry-after"

# The provider grants 5,000 requests per hour and 250 per minute.
MINUTES_PER_HOUR_QUOTA = 20


class SleepStrategy(Protocol):
    """Strategy responsible for sleeping/backing off."""

    def __call__(self, seconds: float) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class RateLimitInfo:
    """Represents parsed rate limit metadata from DigitalOcean headers."""

    limit: int | None = None
    remaining: int | None = None
    reset_at: datetime | None = None
    retry_after: float = 0.0

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitInfo":
        """Parse rate limit headers; missing or malformed values are left unset."""

        lowered = {key.lower(): value for key, value in headers.items()}
        limit = _parse_int(lowered.get(LIMIT_HEADER))
        remaining = _parse_int(lowered.get(REMAINING_HEADER))
        reset_epoch = _parse_int(lowered.get(RESET_HEADER))
        retry_after = _parse_int(lowered.get(RETRY_AFTER_HEADER))

        reset_at = None
        if reset_epoch is not None:
            try:
                reset_at = datetime.fromtimestamp(reset_epoch, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                reset_at = None

        return cls(
            limit=limit,
            remaining=remaining,
            reset_at=reset_at,
            retry_after=float(max(retry_after or 0, 0)),
        )

    @property
    def requests_per_hour(self) -> int | None:
        return self.limit

    @property
    def requests_per_minute(self) -> int | None:
        if self.limit is None:
            return None
        return self.limit // MINUTES_PER_HOUR_QUOTA

    def is_exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0

    def sleep_duration(self, now: datetime | None = None) -> float:
        return get_sleep_duration(self.retry_after, self.reset_at, now=now)


def get_sleep_duration(
    retry_after: float,
    reset_at: datetime | None,
    *,
    now: datetime | None = None,
) -> float:
    """
    Indicates how long the client has to sleep before making another request.

    Args:
        retry_after: seconds the server asked the client to wait, or 0 if it did not say
        reset_at: the time when the oldest request in the window expires
        now: the current time (defaults to the wall clock)

    Returns:
        The sleep time in seconds, never negative.
    """

    if retry_after > 0:
        return float(retry_after)
    if reset_at is None:
        return 0.0
    current = now or datetime.now(timezone.utc)
    return max((reset_at - current).total_seconds(), 0.0)


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except (TypeError, ValueError):
        return None


@dataclass(slots=True)
class RetryDelay:
    """Geometrically growing delay between polling attempts, capped at ``maximum``."""

    initial: float = 3.0
    maximum: float = 30.0
    multiplier: float = 2.0
    sleep: SleepStrategy | Callable[[float], None] = field(default=time.sleep)
    _current: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.initial < 0:
            raise ValueError(f"initial may not be negative: {self.initial}")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be at least 1: {self.multiplier}")
        if self.maximum < self.initial:
            raise ValueError(
                f"maximum ({self.maximum}) must be greater than or equal to initial ({self.initial})"
            )

    def next_delay(self) -> float:
        """Return the next delay and advance the sequence."""

        if self._current is None:
            self._current = self.initial
        else:
            self._current = min(self._current * self.multiplier, self.maximum)
        return self._current

    def sleep_next(self, limit: float | None = None) -> float:
        """Sleep for the next delay, optionally clamped to ``limit`` seconds. Returns the time slept."""

        delay = self.next_delay()
        if limit is not None:
            delay = max(min(delay, limit), 0.0)
        self.sleep(delay)
        return delay
