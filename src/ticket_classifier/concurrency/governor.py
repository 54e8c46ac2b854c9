"""
Rate-limit governor: process-wide throttle and concurrency state.

Tracks:
- The allowed wave size (1..max), shrunk on throttle and grown after clean batches
- The time of the last throttle signal
- A fixed one-minute request window against the RPM budget

Every read-modify-write happens under one threading.Lock, so the governor can
be shared by asyncio tasks and worker threads alike. State is in-process only.
"""

import threading
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from ticket_classifier.clock import Clock, SystemClock
from ticket_classifier.config import Settings
from ticket_classifier.monitoring.metrics import current_concurrency, throttle_events_total


THROTTLE_WINDOW_SECONDS = 60.0
REQUEST_WINDOW_SECONDS = 60.0


@dataclass(frozen=True)
class ConcurrencyState:
    """Immutable snapshot of governor state."""

    current_level: int
    max_level: int
    last_throttle_at: Optional[float]
    requests_in_window: int
    window_started_at: float


class RateLimitGovernor:
    """
    Adaptive concurrency controller driven by throttle signals.

    - record_throttle(): level - 1 (floor 1), stamps the throttle time
    - increase_concurrency(): level + 1 (ceiling max)
    - is_throttled(): throttle within 60s, or RPM budget used up
    - recommended_delay(): linear decay from max delay to 0 over 60s after a
      throttle, base delay otherwise

    The RPM budget is counted over a fixed window. It opens at construction
    or reset, or with the first request recorded after the previous window
    closed, and resets 60s later. Requests near the end of one window do not
    count against the next.
    """

    def __init__(
        self,
        max_concurrency: int = 4,
        rpm_limit: int = 20,
        base_delay_ms: int = 0,
        max_throttle_delay_ms: int = 5000,
        clock: Optional[Clock] = None,
        logger: Optional[Any] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")

        self.max_level = max_concurrency
        self.rpm_limit = rpm_limit
        self.base_delay_ms = base_delay_ms
        self.max_throttle_delay_ms = max_throttle_delay_ms
        self.clock = clock or SystemClock()
        self.logger = logger or structlog.get_logger(__name__)

        self._lock = threading.Lock()
        self._level = max_concurrency
        self._last_throttle_at: Optional[float] = None
        self._requests_in_window = 0
        self._window_started_at = self.clock.now()

        current_concurrency.set(self._level)

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[Clock] = None) -> "RateLimitGovernor":
        return cls(
            max_concurrency=settings.AI_CONCURRENT_REQUESTS,
            rpm_limit=settings.AI_RPM_LIMIT,
            base_delay_ms=settings.AI_DELAY_BETWEEN_WAVES_MS,
            max_throttle_delay_ms=settings.AI_MAX_THROTTLE_DELAY_MS,
            clock=clock,
        )

    # === Queries ===

    def current_concurrency(self) -> int:
        with self._lock:
            return self._level

    def is_throttled(self) -> bool:
        with self._lock:
            now = self.clock.now()
            if self._throttle_elapsed(now) is not None:
                return True
            return self._requests_in_current_window(now) >= self.rpm_limit

    def recommended_delay(self) -> float:
        """Seconds to wait before the next wave."""
        with self._lock:
            elapsed = self._throttle_elapsed(self.clock.now())
            if elapsed is None:
                return self.base_delay_ms / 1000.0
            remaining = (THROTTLE_WINDOW_SECONDS - elapsed) / THROTTLE_WINDOW_SECONDS
            return self.max_throttle_delay_ms * remaining / 1000.0

    def snapshot(self) -> ConcurrencyState:
        with self._lock:
            now = self.clock.now()
            return ConcurrencyState(
                current_level=self._level,
                max_level=self.max_level,
                last_throttle_at=self._last_throttle_at,
                requests_in_window=self._requests_in_current_window(now),
                window_started_at=self._window_started_at,
            )

    # === Signals ===

    def record_throttle(self) -> None:
        """Backend said 429: stamp the time and shrink the wave size."""
        with self._lock:
            self._last_throttle_at = self.clock.now()
            previous = self._level
            self._level = max(1, self._level - 1)
            new_level = self._level
            current_concurrency.set(new_level)

        throttle_events_total.inc()
        self.logger.warning(
            "Throttle recorded, reducing concurrency",
            previous_level=previous,
            new_level=new_level
        )

    def record_success(self) -> None:
        with self._lock:
            self._count_request(self.clock.now())

    def record_failure(self, throttled: bool = False) -> None:
        """
        Count a failed request.

        A throttled failure also stamps the throttle time; shrinking the wave
        size is left to record_throttle().
        """
        with self._lock:
            now = self.clock.now()
            self._count_request(now)
            if throttled:
                self._last_throttle_at = now

    def increase_concurrency(self) -> None:
        with self._lock:
            previous = self._level
            self._level = min(self.max_level, self._level + 1)
            new_level = self._level
            current_concurrency.set(new_level)

        if new_level != previous:
            self.logger.info("Concurrency increased", previous_level=previous, new_level=new_level)

    def reset(self) -> None:
        with self._lock:
            self._level = self.max_level
            self._last_throttle_at = None
            self._requests_in_window = 0
            self._window_started_at = self.clock.now()
            current_concurrency.set(self._level)

    # === Internals (caller holds the lock) ===

    def _throttle_elapsed(self, now: float) -> Optional[float]:
        """Seconds since the last throttle if it is still within the window."""
        if self._last_throttle_at is None:
            return None
        elapsed = max(0.0, now - self._last_throttle_at)
        if elapsed >= THROTTLE_WINDOW_SECONDS:
            return None
        return elapsed

    def _requests_in_current_window(self, now: float) -> int:
        if now - self._window_started_at >= REQUEST_WINDOW_SECONDS:
            return 0
        return self._requests_in_window

    def _count_request(self, now: float) -> None:
        if now - self._window_started_at >= REQUEST_WINDOW_SECONDS:
            self._window_started_at = now
            self._requests_in_window = 0
        self._requests_in_window += 1
