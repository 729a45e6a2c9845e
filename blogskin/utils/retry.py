"""Retry and circuit breaking for backend calls.

Fetches are retried with exponential backoff and jitter on transient failures
(network errors, 5xx, 429). A circuit breaker stops hammering a backend that
keeps failing so page renders fall back to defaults quickly.
"""

import logging
import random
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from requests.exceptions import ConnectionError, Timeout

from ..exceptions import (
    CircuitBreakerOpenError,
    MaxRetriesExceededError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitBreakerState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class RetryManager:
    """Runs operations with exponential backoff and jitter."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 30.0,
        backoff_factor: float = 2.0,
        jitter: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize retry manager.

        Args:
            max_retries: Maximum number of retry attempts
            base_delay: Base delay in seconds
            max_delay: Maximum delay in seconds
            backoff_factor: Multiplier for exponential backoff
            jitter: Whether to add random jitter to delays
            sleep: Function used to wait between attempts
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter
        self._sleep = sleep

        self._retry_conditions: List[Callable[[Exception], bool]] = [
            lambda exc: isinstance(exc, (ConnectionError, Timeout)),
            lambda exc: getattr(exc, "retryable", False),
        ]

        self._metrics = {
            "total_operations": 0,
            "successful_operations": 0,
            "failed_operations": 0,
            "total_retry_attempts": 0,
            "total_delay_time": 0.0,
        }

    def add_retry_condition(self, condition: Callable[[Exception], bool]) -> None:
        """Add a predicate that marks an exception as retryable."""
        self._retry_conditions.append(condition)

    def should_retry(self, exception: Exception) -> bool:
        return any(condition(exception) for condition in self._retry_conditions)

    def calculate_delay(self, attempt: int, exception: Optional[Exception] = None) -> float:
        """Calculate delay before the next attempt.

        A ``Retry-After`` hint from a rate-limit response takes precedence over
        the backoff schedule (still capped at ``max_delay``).

        Args:
            attempt: Attempt number (0-based)
            exception: Failure that triggered the retry

        Returns:
            Delay in seconds
        """
        if isinstance(exception, RateLimitError) and exception.retry_after:
            return min(float(exception.retry_after), self.max_delay)

        delay = min(self.base_delay * (self.backoff_factor ** attempt), self.max_delay)

        if self.jitter:
            delay += delay * random.random()

        return delay

    def execute_with_retry(self, operation: Callable[[], T]) -> T:
        """Execute an operation with retry logic.

        Non-retryable exceptions propagate unchanged on first occurrence.

        Raises:
            MaxRetriesExceededError: If every attempt failed with a retryable error
        """
        self._metrics["total_operations"] += 1
        last_exception: Optional[Exception] = None
        total_delay = 0.0

        for attempt in range(self.max_retries + 1):
            try:
                result = operation()
                self._metrics["successful_operations"] += 1
                self._metrics["total_delay_time"] += total_delay
                return result

            except Exception as e:
                if not self.should_retry(e):
                    self._metrics["failed_operations"] += 1
                    raise

                last_exception = e
                if attempt == self.max_retries:
                    break

                delay = self.calculate_delay(attempt, e)
                total_delay += delay
                self._metrics["total_retry_attempts"] += 1
                logger.debug("Attempt %d failed (%s), retrying in %.2fs", attempt + 1, e, delay)

                self._sleep(delay)

        self._metrics["failed_operations"] += 1
        self._metrics["total_delay_time"] += total_delay

        raise MaxRetriesExceededError(
            f"Maximum retries ({self.max_retries}) exceeded",
            attempts=self.max_retries + 1,
            last_exception=last_exception,
        )

    def get_metrics(self) -> Dict[str, Any]:
        """Get retry metrics, including success rate."""
        metrics = self._metrics.copy()

        if metrics["total_operations"] > 0:
            metrics["success_rate"] = metrics["successful_operations"] / metrics["total_operations"]
        else:
            metrics["success_rate"] = 0.0

        return metrics


class CircuitBreaker:
    """Opens after repeated failures and rejects calls until a cool-down passes."""

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        expected_exceptions: Tuple[Type[Exception], ...] = (Exception,),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize circuit breaker.

        Args:
            failure_threshold: Number of consecutive failures before opening
            recovery_timeout: Seconds to wait before a trial call
            expected_exceptions: Exception types that count as failures
            clock: Monotonic time source
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exceptions = expected_exceptions
        self._clock = clock

        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._opened_at: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        """Current state name."""
        return self._state.value

    def _allow(self) -> bool:
        if self._state != CircuitBreakerState.OPEN:
            return True

        if self._clock() - self._opened_at >= self.recovery_timeout:
            self._state = CircuitBreakerState.HALF_OPEN
            return True

        return False

    def _open(self) -> None:
        self._state = CircuitBreakerState.OPEN
        self._opened_at = self._clock()
        logger.warning("Circuit breaker opened after %d failures", self._failure_count)

    def call(self, operation: Callable[[], T]) -> T:
        """Execute an operation through the circuit breaker.

        Raises:
            CircuitBreakerOpenError: If the circuit is open
        """
        with self._lock:
            if not self._allow():
                raise CircuitBreakerOpenError(
                    "Circuit breaker is open",
                    details={"failure_count": self._failure_count},
                )
            trial = self._state == CircuitBreakerState.HALF_OPEN

        try:
            result = operation()
        except self.expected_exceptions:
            with self._lock:
                self._failure_count += 1
                if trial or self._failure_count >= self.failure_threshold:
                    self._open()
            raise

        with self._lock:
            self._state = CircuitBreakerState.CLOSED
            self._failure_count = 0
            self._opened_at = None

        return result

    def get_state_info(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "failure_count": self._failure_count,
            "failure_threshold": self.failure_threshold,
            "recovery_timeout": self.recovery_timeout,
        }
