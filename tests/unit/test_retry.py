"""Unit tests for the retry and circuit breaker utilities."""

import pytest
from unittest.mock import Mock

from requests.exceptions import ConnectionError, Timeout

from blogskin.exceptions import (
    CircuitBreakerOpenError,
    MaxRetriesExceededError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from blogskin.utils.retry import CircuitBreaker, CircuitBreakerState, RetryManager


class TestRetryManager:
    """Test cases for RetryManager."""

    @pytest.fixture
    def sleep(self):
        return Mock()

    @pytest.fixture
    def retry_manager(self, sleep):
        """Retry manager that does not actually wait."""
        return RetryManager(max_retries=3, base_delay=0.5, jitter=False, sleep=sleep)

    def test_success_first_attempt(self, retry_manager, sleep):
        operation = Mock(return_value="ok")

        assert retry_manager.execute_with_retry(operation) == "ok"
        assert operation.call_count == 1
        sleep.assert_not_called()

    @pytest.mark.parametrize("error", [
        ConnectionError("down"),
        Timeout("slow"),
        ServerError("boom", status_code=502),
        RateLimitError("slow down", status_code=429),
    ])
    def test_retries_transient_errors(self, retry_manager, error):
        """Test that transient failures are retried until success."""
        operation = Mock(side_effect=[error, error, "ok"])

        assert retry_manager.execute_with_retry(operation) == "ok"
        assert operation.call_count == 3

    def test_backoff_schedule(self, retry_manager, sleep):
        """Test the exponential delays between attempts."""
        operation = Mock(side_effect=[ConnectionError(), ConnectionError(), ConnectionError(), "ok"])

        retry_manager.execute_with_retry(operation)

        assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0, 2.0]

    def test_non_retryable_error_propagates(self, retry_manager, sleep):
        """Test that non-transient errors are raised unchanged at once."""
        operation = Mock(side_effect=NotFoundError("missing", status_code=404))

        with pytest.raises(NotFoundError):
            retry_manager.execute_with_retry(operation)

        assert operation.call_count == 1
        sleep.assert_not_called()
        assert retry_manager.get_metrics()["failed_operations"] == 1

    def test_should_retry_follows_error_class(self, retry_manager):
        assert retry_manager.should_retry(ServerError(status_code=502)) is True
        assert retry_manager.should_retry(RateLimitError(retry_after=1)) is True
        assert retry_manager.should_retry(NotFoundError(status_code=404)) is False
        assert retry_manager.should_retry(ValueError("bad")) is False

    def test_max_retries_exceeded(self, retry_manager):
        """Test the error raised once every attempt has failed."""
        error = ServerError("boom", status_code=500)
        operation = Mock(side_effect=error)

        with pytest.raises(MaxRetriesExceededError) as exc_info:
            retry_manager.execute_with_retry(operation)

        assert exc_info.value.attempts == 4
        assert exc_info.value.last_exception is error
        assert operation.call_count == 4

    def test_zero_retries(self, sleep):
        manager = RetryManager(max_retries=0, sleep=sleep)
        operation = Mock(side_effect=ConnectionError())

        with pytest.raises(MaxRetriesExceededError):
            manager.execute_with_retry(operation)

        assert operation.call_count == 1
        sleep.assert_not_called()

    def test_retry_after_hint(self, retry_manager):
        """Test that a Retry-After hint replaces the backoff delay."""
        assert retry_manager.calculate_delay(0, RateLimitError("x", retry_after=7)) == 7.0
        assert retry_manager.calculate_delay(0, RateLimitError("x", retry_after=600)) == 30.0

    def test_delay_capped(self, retry_manager):
        assert retry_manager.calculate_delay(20) == 30.0

    def test_jitter_bounds(self):
        manager = RetryManager(base_delay=1.0, jitter=True)
        for _ in range(20):
            assert 1.0 <= manager.calculate_delay(0) <= 2.0

    def test_custom_retry_condition(self, retry_manager):
        retry_manager.add_retry_condition(lambda exc: isinstance(exc, KeyError))
        operation = Mock(side_effect=[KeyError("x"), "ok"])

        assert retry_manager.execute_with_retry(operation) == "ok"

    def test_metrics(self, retry_manager):
        """Test operation counters and success rate."""
        assert retry_manager.get_metrics()["success_rate"] == 0.0

        retry_manager.execute_with_retry(Mock(side_effect=[Timeout(), "ok"]))
        with pytest.raises(MaxRetriesExceededError):
            retry_manager.execute_with_retry(Mock(side_effect=Timeout()))

        metrics = retry_manager.get_metrics()
        assert metrics["total_operations"] == 2
        assert metrics["successful_operations"] == 1
        assert metrics["failed_operations"] == 1
        assert metrics["total_retry_attempts"] == 4
        assert metrics["success_rate"] == 0.5


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestCircuitBreaker:
    """Test cases for CircuitBreaker."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def breaker(self, clock):
        return CircuitBreaker(
            failure_threshold=3,
            recovery_timeout=10.0,
            expected_exceptions=(ServerError,),
            clock=clock,
        )

    def fail(self, breaker):
        with pytest.raises(ServerError):
            breaker.call(Mock(side_effect=ServerError("boom", status_code=500)))

    def test_closed_passes_through(self, breaker):
        assert breaker.call(lambda: 42) == 42
        assert breaker.state == CircuitBreakerState.CLOSED.value

    def test_opens_after_threshold(self, breaker):
        """Test that consecutive failures open the circuit."""
        for _ in range(3):
            self.fail(breaker)

        assert breaker.state == "open"
        operation = Mock()
        with pytest.raises(CircuitBreakerOpenError):
            breaker.call(operation)
        operation.assert_not_called()

    def test_success_resets_failure_count(self, breaker):
        self.fail(breaker)
        self.fail(breaker)
        breaker.call(lambda: "ok")
        self.fail(breaker)

        assert breaker.state == "closed"
        assert breaker.get_state_info()["failure_count"] == 1

    def test_half_open_trial_success_closes(self, breaker, clock):
        """Test that a successful trial call after the timeout closes the circuit."""
        for _ in range(3):
            self.fail(breaker)

        clock.now = 10.0
        assert breaker.call(lambda: "ok") == "ok"
        assert breaker.state == "closed"

    def test_half_open_trial_failure_reopens(self, breaker, clock):
        """Test that a failed trial call reopens the circuit."""
        for _ in range(3):
            self.fail(breaker)

        clock.now = 11.0
        self.fail(breaker)

        assert breaker.state == "open"
        with pytest.raises(CircuitBreakerOpenError):
            breaker.call(lambda: "ok")

    def test_unexpected_exceptions_not_counted(self, breaker):
        """Test that exception types outside the expected set pass through."""
        for _ in range(5):
            with pytest.raises(ValueError):
                breaker.call(Mock(side_effect=ValueError("bad input")))

        assert breaker.state == "closed"
        assert breaker.get_state_info()["failure_count"] == 0

    def test_state_info(self, breaker):
        assert breaker.get_state_info() == {
            "state": "closed",
            "failure_count": 0,
            "failure_threshold": 3,
            "recovery_timeout": 10.0,
        }
