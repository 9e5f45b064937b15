"""
Retry Wrapper - Bounded Exponential Backoff
===========================================

Wraps a single network call with tenacity. Already-finished pipeline
stages are never re-run because only the callable handed in here is
retried.

Delay before attempt N (N >= 2): initial_delay * multiplier ** (N - 2)
    defaults -> 1s, 2s (3 attempts total)
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_when_event_set,
    wait_exponential,
)

from ..domain.errors import PipelineError
from .config import RetrySettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _CancellableWait:
    """
    Waits on a cancel event instead of sleeping.

    When the event fires mid-wait, the error from the last attempt is
    re-raised instead of starting another attempt.
    """

    def __init__(self, event: threading.Event):
        self._event = event
        self._last_error: Optional[BaseException] = None

    def remember(self, retry_state: RetryCallState) -> None:
        self._last_error = retry_state.outcome.exception()

    def __call__(self, delay: float) -> None:
        if self._event.wait(delay) and self._last_error is not None:
            raise self._last_error


def retry_with_backoff(
    func: Callable[[], T],
    *,
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    multiplier: float = 2.0,
    retry_if: Optional[Callable[[PipelineError], bool]] = None,
    cancel_event: Optional[threading.Event] = None,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "call",
) -> T:
    """
    Call `func` until it succeeds or the attempt budget is spent.

    Only PipelineError is retried, and only when `retry_if` (if given)
    accepts it. Anything else propagates immediately. Setting
    `cancel_event` stops further attempts; the last error is re-raised.
    """
    attempts = max(1, max_attempts)

    def should_retry(error: BaseException) -> bool:
        if not isinstance(error, PipelineError):
            return False
        if retry_if is not None and not retry_if(error):
            logger.warning(f"{description} failed with non-retryable error: {error}")
            return False
        return True

    waiter = _CancellableWait(cancel_event) if cancel_event is not None else None

    def log_retry(retry_state: RetryCallState) -> None:
        if waiter is not None:
            waiter.remember(retry_state)
        logger.info(
            f"{description} attempt {retry_state.attempt_number}/{attempts} failed: "
            f"{retry_state.outcome.exception()}. "
            f"Retrying in {retry_state.next_action.sleep:g}s..."
        )

    def give_up(retry_state: RetryCallState) -> T:
        logger.warning(
            f"{description} failed after {retry_state.attempt_number} attempt(s): "
            f"{retry_state.outcome.exception()}"
        )
        return retry_state.outcome.result()

    stop = stop_after_attempt(attempts)
    if waiter is not None:
        stop = stop | stop_when_event_set(cancel_event)
        sleep = waiter

    retrying = Retrying(
        stop=stop,
        wait=wait_exponential(multiplier=initial_delay, exp_base=multiplier),
        retry=retry_if_exception(should_retry),
        sleep=sleep,
        before_sleep=log_retry,
        retry_error_callback=give_up,
    )
    return retrying(func)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry parameters bound together, usually built from settings."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.max_attempts,
            initial_delay=settings.initial_delay_seconds,
            multiplier=settings.backoff_multiplier,
        )

    def call(self, func: Callable[[], T], **kwargs) -> T:
        return retry_with_backoff(
            func,
            max_attempts=self.max_attempts,
            initial_delay=self.initial_delay,
            multiplier=self.multiplier,
            **kwargs,
        )
