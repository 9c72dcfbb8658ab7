"""
Retry policy for transient API failures

Transient failures are transport errors (NetworkError) and ApiError with
a 429 or 5xx status. Everything else, including AuthExpired and ParseError,
propagates on first occurrence. Delays between attempts grow exponentially
and are capped; a waiting retry can be abandoned through a cancel event.
"""

import threading
import time
from typing import Callable, Optional, TypeVar

from ..config.settings import get_settings
from ..utils.logger import get_logger
from .exceptions import RequestCancelled, YTMusicError

T = TypeVar('T')


def is_transient(error: Exception) -> bool:
    """Return True if the error kind is worth another attempt"""
    return isinstance(error, YTMusicError) and error.is_transient


class RetryPolicy:
    """
    Bounded retry with exponential backoff

    Args:
        max_attempts: Total attempts including the first one
        base_delay: Delay before the second attempt, in seconds
        backoff: Multiplier applied to the delay after each failed attempt
        max_delay: Upper bound for a single delay
        sleep: Sleep function used when no cancel event is given
    """

    def __init__(self, max_attempts: int = 3, base_delay: float = 1.0, backoff: float = 2.0,
                 max_delay: float = 8.0, sleep: Callable[[float], None] = time.sleep):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.backoff = backoff
        self.max_delay = max_delay
        self._sleep = sleep
        self.logger = get_logger(__name__)

    @classmethod
    def default(cls) -> 'RetryPolicy':
        """Build a policy from the network settings"""
        network = get_settings().network
        return cls(
            max_attempts=network.max_retries,
            base_delay=network.retry_delay,
            backoff=network.retry_backoff,
            max_delay=network.max_retry_delay,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)"""
        return min(self.base_delay * (self.backoff ** (attempt - 1)), self.max_delay)

    def execute(self, operation: Callable[[], T], cancel_event: Optional[threading.Event] = None) -> T:
        """
        Run operation, retrying transient failures

        Args:
            operation: Zero-argument callable performing one attempt
            cancel_event: Optional event; once set, no further attempt starts

        Returns:
            The operation's result

        Raises:
            RequestCancelled: If cancel_event is set before or during a wait
            YTMusicError: The first non-transient error, or the last transient one
        """
        attempt = 1
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise RequestCancelled()

            try:
                return operation()
            except YTMusicError as e:
                if not is_transient(e) or attempt >= self.max_attempts:
                    raise

                delay = self.delay_for(attempt)
                self.logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed ({e}), retrying in {delay:.1f}s"
                )
                self._wait(delay, cancel_event)
                attempt += 1

    def _wait(self, delay: float, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is None:
            self._sleep(delay)
        elif cancel_event.wait(delay):
            raise RequestCancelled()
