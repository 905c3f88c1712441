import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from domain.exceptions.currency import CircuitOpenError, DecodeError

logger = logging.getLogger(__name__)


class CircuitBreakerState(Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    """Circuit Breaker for the upstream rate source.

    Consecutive failures inside ``failure_window`` seconds open the circuit.
    While OPEN every call fails fast with ``CircuitOpenError`` until
    ``recovery_timeout`` seconds have passed since the last failure, then the
    circuit goes HALF_OPEN and lets trial calls through.
    """

    def __init__(
            self,
            provider_name: str,
            failure_threshold: int = 5,
            recovery_timeout: float = 30,
            success_threshold: int = 1,
            failure_window: float = 60,
            clock: Callable[[], float] = time.monotonic,
            ignored_exceptions: tuple[type[BaseException], ...] = (DecodeError,),
    ):
        self.provider_name = provider_name

        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.success_threshold = success_threshold
        self.failure_window = failure_window
        self.ignored_exceptions = ignored_exceptions
        self._clock = clock

        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._consecutive_successes = 0
        self._last_failure_time: float | None = None

    @property
    def state(self) -> CircuitBreakerState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    async def call(self, func: Callable[[], Awaitable[Any]]) -> Any:
        """Execute function with circuit breaker protection"""
        if self._state == CircuitBreakerState.OPEN:
            if self._should_attempt_reset():
                self._transition_to_half_open()
            else:
                raise CircuitOpenError(self.provider_name, self._failure_count)

        try:
            result = await func()
        except self.ignored_exceptions:
            # The upstream answered, so this says nothing about its health
            raise
        except Exception:
            self._on_failure()
            raise

        self._on_success()
        return result

    def _on_success(self):
        if self._state == CircuitBreakerState.HALF_OPEN:
            self._consecutive_successes += 1

            if self._consecutive_successes >= self.success_threshold:
                self._transition_to_closed(f"recovery_successful after {self._consecutive_successes} successes")
            else:
                logger.debug(
                    f"Circuit breaker HALF_OPEN for {self.provider_name}: "
                    f"{self._consecutive_successes}/{self.success_threshold} successes"
                )

        elif self._state == CircuitBreakerState.CLOSED:
            self._failure_count = 0
            self._last_failure_time = None

    def _on_failure(self):
        now = self._clock()

        if self._state == CircuitBreakerState.HALF_OPEN:
            self._last_failure_time = now
            self._transition_to_open("failure_during_recovery")
            return

        if self._last_failure_time is not None and now - self._last_failure_time > self.failure_window:
            self._failure_count = 0

        self._failure_count += 1
        self._last_failure_time = now

        if self._failure_count >= self.failure_threshold:
            self._transition_to_open(f"{self._failure_count}_consecutive_failures")
        else:
            logger.warning(
                f"Upstream failure for {self.provider_name}: {self._failure_count}/{self.failure_threshold}"
            )

    def _should_attempt_reset(self) -> bool:
        if self._last_failure_time is None:
            return True

        elapsed = self._clock() - self._last_failure_time
        if elapsed >= self.recovery_timeout:
            logger.debug(
                f"Recovery timeout passed for {self.provider_name}: {elapsed:.1f}s >= {self.recovery_timeout}s"
            )
            return True
        return False

    def _transition_to_closed(self, reason: str):
        self._transition_state(CircuitBreakerState.CLOSED, reason)
        self._failure_count = 0
        self._last_failure_time = None
        self._consecutive_successes = 0

    def _transition_to_open(self, reason: str):
        self._transition_state(CircuitBreakerState.OPEN, reason)
        self._consecutive_successes = 0

    def _transition_to_half_open(self):
        self._transition_state(CircuitBreakerState.HALF_OPEN, "attempting_recovery")
        self._consecutive_successes = 0

    def _transition_state(self, new_state: CircuitBreakerState, reason: str):
        old_state = self._state
        self._state = new_state
        log = logger.warning if new_state == CircuitBreakerState.OPEN else logger.info
        log(
            f"Circuit breaker {self.provider_name}: {old_state.value} -> {new_state.value} "
            f"({reason}, failures={self._failure_count})"
        )

    def get_status(self) -> dict:
        """Get current circuit breaker status for monitoring"""
        return {
            "provider_name": self.provider_name,
            "state": self._state.value,
            "status": "healthy" if self._state == CircuitBreakerState.CLOSED else "unhealthy",
            "failure_count": self._failure_count,
            "failure_threshold": self.failure_threshold,
            "consecutive_successes": self._consecutive_successes,
            "success_threshold": self.success_threshold,
        }

    def force_reset(self):
        """Manually reset circuit breaker (for admin/debugging)"""
        self._transition_to_closed("manual_reset")

    def force_open(self, reason: str = "manual_open"):
        """Manually open circuit breaker (for maintenance)"""
        self._last_failure_time = self._clock()
        self._transition_to_open(reason)
