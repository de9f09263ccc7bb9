"""
Time budget shared by the steps of a blocking operation.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True, slots=True)
class TimeLimit:
    """The maximum amount of time that an operation may execute for."""

    quota: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)
    deadline: float = field(init=False)

    def __post_init__(self) -> None:
        if self.quota < 0:
            raise ValueError(f"quota may not be negative: {self.quota}")
        object.__setattr__(self, "deadline", self.clock() + self.quota)

    @property
    def time_quota(self) -> float:
        """The original quota, in seconds. Used when reporting a timeout."""

        return self.quota

    def time_left(self) -> float:
        """Seconds left before the deadline. Negative once the deadline has passed."""

        return self.deadline - self.clock()

    def expired(self) -> bool:
        return self.time_left() <= 0
