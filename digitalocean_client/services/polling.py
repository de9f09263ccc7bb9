"""
Blocks until a resource reaches a lifecycle state, within a time budget.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from digitalocean_client.exceptions import (
    OperationTimeout,
    RateLimitExceeded,
    ResourceNotFoundError,
    TransientIOError,
)
from digitalocean_client.rate_limit import RetryDelay
from digitalocean_client.utils import TimeLimit

logger = logging.getLogger(__name__)

R = TypeVar("R")

DELETED = "deleted"


def _state_name(state: Any) -> str:
    return str(getattr(state, "value", state))


@dataclass(frozen=True, slots=True)
class PollTarget:
    """The state a resource is expected to reach, and how to describe the resource in logs."""

    state: Any
    resource_id: str
    resource_name: str

    @property
    def awaits_deletion(self) -> bool:
        return _state_name(self.state) == DELETED


@dataclass(slots=True)
class StatePoller(Generic[R]):
    """
    Repeatedly fetches a resource until its state matches the target.

    ``fetch`` retrieves the current representation of the resource and ``state_of`` extracts its
    lifecycle state. Each call to ``wait_for`` owns its own retry delay and time budget, so one
    poller may be shared by several threads.
    """

    fetch: Callable[[], R]
    state_of: Callable[[R], Any]
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)
    progress_interval: float = 30.0
    initial_delay: float = 3.0
    max_delay: float = 30.0
    multiplier: float = 2.0

    def wait_for(self, target: PollTarget, timeout: float) -> R | None:
        """
        Wait for the resource to reach ``target.state``.

        Args:
            target: the desired state
            timeout: the maximum amount of time to wait, in seconds

        Returns:
            The updated resource, or None if the resource was deleted while waiting for deletion

        Raises:
            ResourceNotFoundError: if the resource disappeared while waiting for any other state
            OperationTimeout: if the resource did not reach the state before the timeout occurred
        """

        time_limit = TimeLimit(timeout, clock=self.clock)
        retry_delay = RetryDelay(
            initial=self.initial_delay,
            maximum=self.max_delay,
            multiplier=self.multiplier,
            sleep=self.sleep,
        )
        last_progress: float | None = None

        while True:
            try:
                resource = self.fetch()
            except ResourceNotFoundError:
                if not target.awaits_deletion:
                    raise
                if last_progress is not None:
                    logger.info("The status of %s is %s", target.resource_name, DELETED)
                return None
            except RateLimitExceeded as exc:
                self._check_time_left(time_limit)
                wait = exc.sleep_duration if exc.sleep_duration > 0 else retry_delay.next_delay()
                wait = max(min(wait, time_limit.time_left()), 0.0)
                logger.warning("Rate limit exceeded while polling %s; sleeping %.1f seconds", target.resource_name, wait)
                self.sleep(wait)
                continue
            except TransientIOError as exc:
                self._check_time_left(time_limit)
                logger.warning("Retrying status check of %s: %s", target.resource_name, exc)
                retry_delay.sleep_next(time_limit.time_left())
                continue

            current = self.state_of(resource)
            if _state_name(current) == _state_name(target.state):
                if last_progress is not None:
                    logger.info("The status of %s is %s", target.resource_name, _state_name(current))
                return resource

            self._check_time_left(time_limit)
            now = self.clock()
            if last_progress is None or now - last_progress >= self.progress_interval:
                logger.info(
                    "Waiting for the status of %s to change from %s to %s",
                    target.resource_name,
                    _state_name(current),
                    _state_name(target.state),
                )
                last_progress = now
            retry_delay.sleep_next(time_limit.time_left())

    @staticmethod
    def _check_time_left(time_limit: TimeLimit) -> None:
        if time_limit.expired():
            raise OperationTimeout(
                f"Operation failed after {time_limit.time_quota:g} seconds",
                quota=time_limit.time_quota,
            )
